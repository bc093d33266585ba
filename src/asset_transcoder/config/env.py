"""Typed reads of ASSET_TRANSCODER_* environment variables.

Build servers configure the transcoder through the environment. EnvReader
takes an optional mapping so tests never have to touch os.environ.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

ENV_PREFIX = "ASSET_TRANSCODER_"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


class EnvReader:
    """Reads prefixed environment variables with type conversion.

    Names are given without the prefix: ``get_int("MAX_WORKERS")`` reads
    ``ASSET_TRANSCODER_MAX_WORKERS``. Unset and blank variables both yield
    the default. Values that do not parse are logged and ignored.

    Example:
        reader = EnvReader(env={"ASSET_TRANSCODER_MAX_WORKERS": "2"})
        reader.get_int("MAX_WORKERS")  # 2
    """

    def __init__(
        self, env: Mapping[str, str] | None = None, prefix: str = ENV_PREFIX
    ) -> None:
        self._env: Mapping[str, str] = os.environ if env is None else env
        self._prefix = prefix

    def key(self, name: str) -> str:
        """Full variable name for ``name``."""
        return f"{self._prefix}{name}"

    def _raw(self, name: str) -> str | None:
        value = self._env.get(self.key(name))
        if value is None or not value.strip():
            return None
        return value.strip()

    def get_str(self, name: str, default: str | None = None) -> str | None:
        """String value, or ``default``."""
        value = self._raw(name)
        return default if value is None else value

    def get_int(self, name: str, default: int | None = None) -> int | None:
        """Integer value, or ``default`` if unset or not an integer."""
        value = self._raw(name)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            logger.warning("Ignoring %s=%r: not an integer", self.key(name), value)
            return default

    def get_bool(self, name: str, default: bool | None = None) -> bool | None:
        """Boolean value from 1/0, true/false, yes/no or on/off."""
        value = self._raw(name)
        if value is None:
            return default
        lowered = value.casefold()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        logger.warning("Ignoring %s=%r: not a boolean", self.key(name), value)
        return default

    def get_path(self, name: str, default: Path | None = None) -> Path | None:
        """Path value with ``~`` expanded, or ``default``."""
        value = self._raw(name)
        return default if value is None else Path(value).expanduser()
