"""Plugin system connecting the transcoder to a host build.

The host fires ``assets.process`` once per build at the optimize stage;
registered plugins mutate the build output and graph in place.
"""

from asset_transcoder.plugin.events import (
    PROCESS_ASSETS,
    STAGE_OPTIMIZE_SIZE,
    VALID_EVENTS,
    ProcessAssetsEvent,
    is_valid_event,
)
from asset_transcoder.plugin.exceptions import (
    PluginError,
    PluginExecutionError,
    PluginValidationError,
)
from asset_transcoder.plugin.image_transcode import ImageTranscodePlugin
from asset_transcoder.plugin.interfaces import AssetPlugin
from asset_transcoder.plugin.registry import DispatchResult, PluginRegistry


def get_default_registry() -> PluginRegistry:
    """Create a PluginRegistry with the built-in image plugin registered.

    The plugin uses configuration from get_config().
    """
    from asset_transcoder.config import get_config

    config = get_config()
    registry = PluginRegistry()
    registry.register(ImageTranscodePlugin(config.rule, config.engine))
    return registry


__all__ = [
    # Events
    "PROCESS_ASSETS",
    "STAGE_OPTIMIZE_SIZE",
    "VALID_EVENTS",
    "ProcessAssetsEvent",
    "is_valid_event",
    # Interfaces
    "AssetPlugin",
    # Exceptions
    "PluginError",
    "PluginExecutionError",
    "PluginValidationError",
    # Registry
    "DispatchResult",
    "PluginRegistry",
    "get_default_registry",
    # Built-in
    "ImageTranscodePlugin",
]
