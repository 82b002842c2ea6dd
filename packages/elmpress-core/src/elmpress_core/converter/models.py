"""Models and errors for the compiler conversion subsystem."""

from __future__ import annotations

from enum import Enum


class BuildMode(str, Enum):
    """Compiler mode, passed to the compiler as ``--<value>``."""

    debug = "debug"
    optimize = "optimize"

    @property
    def flag(self) -> str:
        return f"--{self.value}"


def resolve_build_mode(
    environment: str | None, development_value: str = "development"
) -> BuildMode:
    """Pick debug mode for the development environment, optimize otherwise."""
    if environment == development_value:
        return BuildMode.debug
    return BuildMode.optimize


class BuildFailure(Exception):
    """The external compiler exited unsuccessfully.

    ``returncode`` is None when the compiler was stopped by a timeout.
    """

    def __init__(
        self,
        command: list[str],
        returncode: int | None,
        stderr: str = "",
    ) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        if returncode is None:
            msg = f"{command[0]} timed out"
        else:
            msg = f"{command[0]} exited with status {returncode}"
        super().__init__(msg)


class ConfigurationError(Exception):
    """The plugin cannot run with its current configuration."""

    def __init__(self, setting: str, reason: str) -> None:
        self.setting = setting
        self.reason = reason
        super().__init__(f"{setting}: {reason}")
