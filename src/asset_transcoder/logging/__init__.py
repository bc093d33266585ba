"""Structured logging for the asset transcoder.

Provides configurable logging with JSON format support and file rotation,
plus per-asset context for records emitted inside transcode jobs.
"""

from asset_transcoder.logging.config import configure_logging
from asset_transcoder.logging.context import (
    AssetContextFilter,
    asset_context,
    get_asset_context,
    set_asset_context,
)
from asset_transcoder.logging.handlers import JSONFormatter

__all__ = [
    "AssetContextFilter",
    "JSONFormatter",
    "asset_context",
    "configure_logging",
    "get_asset_context",
    "set_asset_context",
]
