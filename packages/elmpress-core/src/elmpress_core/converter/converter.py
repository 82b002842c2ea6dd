"""Transform plugin that hands source files to an external compiler."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import tempfile
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path

from elmpress_core.config.models import CompilerConfig, ElmPressConfig
from elmpress_core.converter.models import (
    BuildFailure,
    BuildMode,
    ConfigurationError,
    resolve_build_mode,
)

logger = logging.getLogger(__name__)


@contextmanager
def scratch_file(prefix: str, suffix: str) -> Iterator[Path]:
    """Yield a fresh temp file path that is removed however the block exits."""
    fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix)
    os.close(fd)
    path = Path(name)
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)


def write_verbatim(path: str | Path, content: str) -> None:
    """Write text without newline translation.

    Undecodable bytes carried in as surrogates (see ``read_verbatim``) are
    written back unchanged.
    """
    with open(path, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
        f.write(content)


def read_verbatim(path: str | Path) -> str:
    """Read text without newline translation, keeping bytes that are not UTF-8."""
    with open(path, encoding="utf-8", errors="surrogateescape", newline="") as f:
        return f.read()


def _as_text(stream: str | bytes | None) -> str:
    if stream is None:
        return ""
    if isinstance(stream, bytes):
        return stream.decode("utf-8", errors="replace")
    return stream


class CompilerConverter:
    """Compiles files of one extension into another with a command-line compiler.

    The compiler is run once per ``convert`` call as
    ``<command> <source> --<mode> <output_flag> <output>`` with the configured
    source directory as working directory. Only its exit status is checked.
    """

    # Runs external programs; hosts in safe mode must not use it.
    safe = False

    def __init__(
        self,
        config: CompilerConfig,
        source_dir: str | Path,
        mode: BuildMode = BuildMode.optimize,
    ) -> None:
        self._config = config
        self._source_dir = Path(source_dir)
        self._mode = mode

    @classmethod
    def from_config(
        cls,
        config: ElmPressConfig,
        environ: Mapping[str, str] | None = None,
    ) -> CompilerConverter:
        """Build a converter, resolving the build mode once from the environment."""
        if config.compiler.mode is not None:
            mode = BuildMode(config.compiler.mode)
        else:
            env = os.environ if environ is None else environ
            mode = resolve_build_mode(
                env.get(config.build.environment_var),
                config.build.development_value,
            )
        logger.debug(
            "Compiler plugin for %s -> %s in %s mode",
            config.compiler.input_ext,
            config.compiler.output_ext,
            mode.value,
        )
        return cls(config.compiler, config.build.source_dir, mode)

    @property
    def mode(self) -> BuildMode:
        return self._mode

    @property
    def source_dir(self) -> Path:
        return self._source_dir

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def matches(self, ext: str) -> bool:
        return ext == self._config.input_ext

    def output_ext(self, ext: str) -> str:
        return self._config.output_ext

    def convert(self, content: str) -> str:
        """Compile ``content`` and return the compiler's output unchanged.

        Raises BuildFailure if the compiler exits non-zero, and
        ConfigurationError if the source directory or the compiler itself
        is missing.
        """
        if not self._source_dir.is_dir():
            raise ConfigurationError(
                "build.source_dir", f"not a directory: {self._source_dir}"
            )

        with scratch_file("source", self._config.input_ext) as source, \
                scratch_file("output", self._config.output_ext) as output:
            write_verbatim(source, content)
            self._run(source, output)
            return read_verbatim(output)

    def build_command(self, source: Path, output: Path) -> list[str]:
        return [
            *self._config.command,
            str(source),
            self._mode.flag,
            self._config.output_flag,
            str(output),
        ]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _run(self, source: Path, output: Path) -> None:
        command = self.build_command(source, output)
        logger.debug("Running %s in %s", shlex.join(command), self._source_dir)
        try:
            result = subprocess.run(
                command,
                cwd=self._source_dir,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self._config.timeout,
            )
        except (FileNotFoundError, PermissionError) as e:
            raise ConfigurationError(
                "compiler.command", f"cannot execute {command[0]!r}: {e.strerror}"
            ) from e
        except subprocess.TimeoutExpired as e:
            raise BuildFailure(command, None, _as_text(e.stderr)) from e

        if result.returncode != 0:
            logger.debug("Compiler stderr:\n%s", result.stderr)
            raise BuildFailure(command, result.returncode, result.stderr)
