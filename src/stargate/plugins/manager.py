"""Plugin registry around a pluggy PluginManager.

Third-party packages advertise plugins under the ``stargate.plugins``
entry-point group; tests and embedding code register instances directly.
"""

from __future__ import annotations

import logging
from typing import Any

import pluggy

from stargate.plugins.hookspecs import PROJECT_NAME, StargateHookSpec

ENTRY_POINT_GROUP = "stargate.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(StargateHookSpec)

    def discover_and_load(self) -> list[str]:
        """Load every installed entry-point plugin; return all registered names."""
        loaded = self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        logger.debug("Loaded %d plugin(s) from %s", loaded, ENTRY_POINT_GROUP)
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        plugin_name = name or type(plugin).__name__
        self._pm.register(plugin, name=plugin_name)
        logger.debug("Registered plugin %s", plugin_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    def list_plugin_names(self) -> list[str]:
        names: list[str] = []
        for plugin in self._pm.get_plugins():
            names.append(self._pm.get_name(plugin) or type(plugin).__name__)
        return names

    def dispatch(self, hook_name: str, payload: dict[str, Any]) -> None:
        """Invoke *hook_name* on every implementation with *payload* as keyword args.

        Exceptions raised by an implementation propagate to the caller.
        An unknown *hook_name* raises AttributeError.
        """
        caller = getattr(self._pm.hook, hook_name)
        caller(**payload)
