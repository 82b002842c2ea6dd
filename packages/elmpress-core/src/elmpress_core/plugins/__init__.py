"""Dynamic plugin discovery and loading."""

from elmpress_core.plugins.loader import PluginLoader, PluginNotFoundError

__all__ = ["PluginLoader", "PluginNotFoundError"]
