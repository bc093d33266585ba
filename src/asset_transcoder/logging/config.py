"""Logging setup for transcode runs.

configure_logging() installs handlers on the root logger from a
LoggingConfig. Every handler carries the asset context filter, so records
logged inside an encode job name the asset they belong to.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from asset_transcoder.logging.context import AssetContextFilter
from asset_transcoder.logging.handlers import JSONFormatter

if TYPE_CHECKING:
    from asset_transcoder.config.models import LoggingConfig

_LEVEL_MAP: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

# asset_tag is "[static/image/logo.png] " inside an encode job, empty otherwise
TEXT_FORMAT = "%(asctime)s - %(asset_tag)s%(name)s - %(levelname)s - %(message)s"
TEXT_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"


def _make_formatter(log_format: str) -> logging.Formatter:
    if log_format.casefold() == "json":
        return JSONFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATEFMT)


def _open_log_file(config: LoggingConfig) -> logging.Handler | None:
    """Open the rotating log file, or return None if it is unavailable."""
    assert config.file is not None
    path = Path(config.file).expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"Warning: Could not open log file {config.file}: {e}\n")
        return None


def configure_logging(config: LoggingConfig) -> None:
    """Replace the root logger's handlers according to ``config``.

    A file handler is used when ``config.file`` is set; stderr is added when
    ``include_stderr`` is set or the file cannot be opened.

    Args:
        config: Logging configuration.
    """
    level = _LEVEL_MAP.get(config.level.casefold(), logging.INFO)
    formatter = _make_formatter(config.format)
    context_filter = AssetContextFilter()

    handlers: list[logging.Handler] = []
    if config.file:
        file_handler = _open_log_file(config)
        if file_handler is not None:
            handlers.append(file_handler)
    if config.include_stderr or not handlers:
        handlers.append(logging.StreamHandler(sys.stderr))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        root_logger.addHandler(handler)
