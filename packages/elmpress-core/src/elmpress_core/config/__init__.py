from .loader import load_config
from .models import (
    BuildConfig,
    CompilerConfig,
    ElmPressConfig,
    PluginsConfig,
)

__all__ = [
    "BuildConfig",
    "CompilerConfig",
    "ElmPressConfig",
    "PluginsConfig",
    "load_config",
]
