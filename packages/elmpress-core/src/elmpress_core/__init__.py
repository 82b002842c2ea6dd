"""elmpress core - compile Elm (or any suffix-driven language) sources during a static-site build."""

from elmpress_core.config import ElmPressConfig, load_config
from elmpress_core.converter import BuildFailure, BuildMode, CompilerConverter, ConfigurationError
from elmpress_core.interfaces import TransformPlugin
from elmpress_core.plugins import PluginLoader
from elmpress_core.site import SiteBuilder

__version__ = "0.1.0"

__all__ = [
    "BuildFailure",
    "BuildMode",
    "CompilerConverter",
    "ConfigurationError",
    "ElmPressConfig",
    "PluginLoader",
    "SiteBuilder",
    "TransformPlugin",
    "load_config",
]
