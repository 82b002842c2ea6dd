"""Compiler conversion subsystem: the external-compiler transform plugin."""

from elmpress_core.converter.converter import (
    CompilerConverter,
    read_verbatim,
    scratch_file,
    write_verbatim,
)
from elmpress_core.converter.models import (
    BuildFailure,
    BuildMode,
    ConfigurationError,
    resolve_build_mode,
)

__all__ = [
    "BuildFailure",
    "BuildMode",
    "CompilerConverter",
    "ConfigurationError",
    "read_verbatim",
    "resolve_build_mode",
    "scratch_file",
    "write_verbatim",
]
