"""Dynamic transform plugin discovery and loading via entry points."""

from __future__ import annotations

import importlib.metadata
import logging
from typing import TYPE_CHECKING

from elmpress_core.interfaces.transform import TransformPlugin

if TYPE_CHECKING:
    from elmpress_core.config.models import ElmPressConfig

logger = logging.getLogger(__name__)


class PluginNotFoundError(Exception):
    """Raised when a requested plugin cannot be found."""

    def __init__(self, plugin_type: str, name: str | None = None):
        self.plugin_type = plugin_type
        self.name = name
        msg = f"No {plugin_type} plugin found"
        if name:
            msg += f" with name '{name}'"
        super().__init__(msg)


class PluginLoader:
    """Discovers transform plugin classes and builds them from config.

    A plugin class is expected to provide ``from_config(config)`` returning
    an object that satisfies TransformPlugin.
    """

    GROUP = "elmpress.plugins.transform"

    # Built-in plugins (lazy import paths)
    BUILTINS = {
        "elm": ("elmpress_core.converter.converter", "CompilerConverter"),
    }

    def __init__(self, config: ElmPressConfig):
        self._config = config

    def discover(self) -> list[str]:
        """Names of all loadable transform plugins, entry points first."""
        names = [ep.name for ep in importlib.metadata.entry_points(group=self.GROUP)]
        names += [name for name in self.BUILTINS if name not in names]
        return names

    def _load_from_entry_point(self, name: str) -> type | None:
        for ep in importlib.metadata.entry_points(group=self.GROUP):
            if ep.name == name:
                return ep.load()
        return None

    def _load_builtin(self, name: str) -> type | None:
        if name not in self.BUILTINS:
            return None
        module_path, class_name = self.BUILTINS[name]
        try:
            module = __import__(module_path, fromlist=[class_name])
            return getattr(module, class_name)
        except (ImportError, AttributeError):
            return None

    def load_transform(self, name: str) -> type:
        """Fallback chain: entry points > built-ins."""
        plugin_cls = self._load_from_entry_point(name)
        if plugin_cls is None:
            plugin_cls = self._load_builtin(name)
        if plugin_cls is None:
            raise PluginNotFoundError("transform", name)
        return plugin_cls

    def load_transforms(self) -> list[TransformPlugin]:
        """Instantiate every transform named in ``config.plugins.transforms``."""
        transforms: list[TransformPlugin] = []
        for name in self._config.plugins.transforms:
            plugin = self.load_transform(name).from_config(self._config)
            if not isinstance(plugin, TransformPlugin):
                raise TypeError(f"Transform plugin '{name}' does not implement TransformPlugin")
            logger.debug("Loaded transform plugin %s", name)
            transforms.append(plugin)
        return transforms
