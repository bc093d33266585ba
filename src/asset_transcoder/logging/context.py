"""Asset context for structured logging.

Provides context propagation for transcode jobs using contextvars, so
every record logged while an asset is being encoded carries its name.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_asset_name: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "asset_name", default=None
)


def set_asset_context(asset_name: str | None) -> None:
    """Set the asset currently being processed."""
    _asset_name.set(asset_name)


def get_asset_context() -> str | None:
    """Get the asset currently being processed, if any."""
    return _asset_name.get()


@contextmanager
def asset_context(asset_name: str) -> Generator[None, None, None]:
    """Context manager for per-asset processing context.

    Sets the asset name on entry and restores the previous value on exit.
    Thread-safe via contextvars.

    Example:
        with asset_context("static/image/logo.png"):
            logger.info("Encoding")  # record carries asset_name
    """
    token = _asset_name.set(asset_name)
    try:
        yield
    finally:
        _asset_name.reset(token)


class AssetContextFilter(logging.Filter):
    """Logging filter that injects the asset context into log records.

    Adds ``asset_name`` for JSON output and ``asset_tag`` (``[logo.png] ``
    or empty) for the text format.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Inject asset context into the record. Never filters anything out."""
        asset_name = get_asset_context()
        record.asset_name = asset_name
        record.asset_tag = f"[{asset_name}] " if asset_name else ""
        return True
