"""Plugin registry for the host build.

The registry tracks registered plugins and dispatches build events to
them. A plugin that raises is logged and reported; it does not stop the
build or the plugins after it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from asset_transcoder.plugin.events import (
    PROCESS_ASSETS,
    ProcessAssetsEvent,
    is_valid_event,
)
from asset_transcoder.plugin.exceptions import (
    PluginExecutionError,
    PluginValidationError,
)
from asset_transcoder.plugin.interfaces import AssetPlugin

logger = logging.getLogger(__name__)


@dataclass
class DispatchResult:
    """Results of dispatching one event to every subscribed plugin."""

    results: dict[str, Any] = field(default_factory=dict)
    errors: list[PluginExecutionError] = field(default_factory=list)


class PluginRegistry:
    """Central registry for asset plugins.

    Plugins are called in registration order.
    """

    def __init__(self) -> None:
        self._plugins: dict[str, AssetPlugin] = {}

    def register(self, plugin: AssetPlugin) -> bool:
        """Register a plugin.

        Args:
            plugin: Plugin instance.

        Returns:
            True if registered, False if a plugin with the same name was
            already registered (the new one is skipped).

        Raises:
            PluginValidationError: If the plugin does not implement
                AssetPlugin or subscribes to unknown events.
        """
        name = getattr(plugin, "name", None) or type(plugin).__name__
        errors: list[str] = []
        if not isinstance(plugin, AssetPlugin):
            errors.append("does not implement AssetPlugin")
        else:
            if not plugin.name:
                errors.append("name must not be empty")
            for event in plugin.events:
                if not is_valid_event(event):
                    errors.append(f"unknown event '{event}'")
        if errors:
            raise PluginValidationError(name, errors)

        if plugin.name in self._plugins:
            existing = self._plugins[plugin.name]
            logger.warning(
                "Plugin '%s' already registered (version %s). "
                "Skipping duplicate (version %s).",
                plugin.name,
                existing.version,
                plugin.version,
            )
            return False

        self._plugins[plugin.name] = plugin
        logger.info("Registered plugin: %s v%s", plugin.name, plugin.version)
        return True

    def unregister(self, name: str) -> bool:
        """Unregister a plugin by name.

        Returns:
            True if plugin was unregistered, False if not found.
        """
        if name in self._plugins:
            del self._plugins[name]
            logger.info("Unregistered plugin: %s", name)
            return True
        return False

    def get(self, name: str) -> AssetPlugin | None:
        """Get a registered plugin by name."""
        return self._plugins.get(name)

    def get_by_event(self, event: str) -> list[AssetPlugin]:
        """Get plugins subscribed to an event, in registration order."""
        return [p for p in self._plugins.values() if event in p.events]

    def dispatch_process_assets(self, event: ProcessAssetsEvent) -> DispatchResult:
        """Fire assets.process on every subscribed plugin.

        Args:
            event: Event carrying the build output and graph.

        Returns:
            DispatchResult with each plugin's return value and any failures.
        """
        dispatch = DispatchResult()
        for plugin in self.get_by_event(PROCESS_ASSETS):
            try:
                dispatch.results[plugin.name] = plugin.on_process_assets(event)
            except Exception as e:
                logger.exception("Plugin %s failed on %s", plugin.name, PROCESS_ASSETS)
                dispatch.errors.append(PluginExecutionError(plugin.name, PROCESS_ASSETS, e))
        return dispatch
