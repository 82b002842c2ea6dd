"""Transform plugin interface."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TransformPlugin(Protocol):
    """Converts files of one extension into another for a site build.

    The host calls ``matches`` to route a file, ``output_ext`` to name the
    generated file, and ``convert`` to produce its content.
    """

    def matches(self, ext: str) -> bool: ...

    def output_ext(self, ext: str) -> str: ...

    def convert(self, content: str) -> str: ...
