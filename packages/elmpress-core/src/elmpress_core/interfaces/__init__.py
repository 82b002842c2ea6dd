"""Plugin interfaces for elmpress extensions."""

from elmpress_core.interfaces.transform import TransformPlugin

__all__ = ["TransformPlugin"]
