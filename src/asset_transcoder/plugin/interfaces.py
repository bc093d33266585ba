"""Plugin interface protocols.

This module defines the Protocol that asset plugins implement.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from asset_transcoder.plugin.events import ProcessAssetsEvent


@runtime_checkable
class AssetPlugin(Protocol):
    """Protocol for plugins that transform build output.

    Required attributes (can be class attributes or properties):
        name: str - Unique plugin identifier
        version: str - Plugin version (semver)
        events: list[str] - Events to subscribe to
    """

    name: str
    version: str
    events: list[str]

    def on_process_assets(self, event: ProcessAssetsEvent) -> Any:
        """Called at the optimize stage of a build.

        Args:
            event: ProcessAssetsEvent with the mutable build output and graph.

        Returns:
            Plugin-specific result, collected by the registry.

        Note:
            Only called if 'assets.process' in self.events.
        """
        ...
