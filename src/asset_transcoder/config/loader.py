"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. Environment variables (ASSET_TRANSCODER_*)
2. Config file (./asset-transcoder.toml)
3. Default values

Environment variables:
- ASSET_TRANSCODER_CONFIG_PATH: Path to config file
- ASSET_TRANSCODER_LOG_LEVEL: debug, info, warning or error
- ASSET_TRANSCODER_LOG_FORMAT: text or json
- ASSET_TRANSCODER_LOG_FILE: Path to log file
- ASSET_TRANSCODER_MAX_WORKERS: Concurrent encode jobs
- ASSET_TRANSCODER_PRODUCTION_ONLY: Only transcode production builds

The config file has ``[logging]``, ``[engine]`` and ``[rule]`` tables.
Without a ``[rule]`` table the AVIF conversion preset is used.
"""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from asset_transcoder.config.env import EnvReader
from asset_transcoder.config.models import AppConfig, EngineConfig, LoggingConfig
from asset_transcoder.exceptions import ConfigurationError
from asset_transcoder.rules.models import TranscodeRule

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path("asset-transcoder.toml")


def get_default_config_path(env: Mapping[str, str] | None = None) -> Path:
    """Get the config file path, honoring ASSET_TRANSCODER_CONFIG_PATH."""
    reader = EnvReader(env)
    return reader.get_path("CONFIG_PATH", DEFAULT_CONFIG_FILE)


def load_config_file(path: Path) -> dict[str, Any]:
    """Load configuration from a TOML file.

    Args:
        path: Config file path. A missing file yields an empty config.

    Returns:
        Parsed TOML document.

    Raises:
        ConfigurationError: If the file cannot be read or parsed.
    """
    if not path.exists():
        logger.debug("Config file %s not found, using defaults", path)
        return {}
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e


def load_rule(data: Mapping[str, Any]) -> TranscodeRule:
    """Build a TranscodeRule from a plain mapping.

    Args:
        data: Rule fields, e.g. the ``[rule]`` table of the config file.

    Returns:
        Validated TranscodeRule.

    Raises:
        ConfigurationError: If any field is invalid.
    """
    try:
        return TranscodeRule.model_validate(dict(data))
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'rule'}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigurationError(f"Invalid transcode rule: {details}") from e


def _build_section(cls: type, values: Mapping[str, Any], section: str) -> Any:
    try:
        return cls(**values)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid [{section}] configuration: {e}") from e


def get_config(
    path: Path | None = None, env: Mapping[str, str] | None = None
) -> AppConfig:
    """Load the full configuration.

    Args:
        path: Config file path. None uses get_default_config_path().
        env: Environment mapping. None reads os.environ.

    Returns:
        AppConfig with file values overridden by environment variables.

    Raises:
        ConfigurationError: If the file or any value is invalid.
    """
    reader = EnvReader(env)
    config_path = path if path is not None else get_default_config_path(env)
    data = load_config_file(config_path)

    logging_values: dict[str, Any] = dict(data.get("logging", {}))
    level = reader.get_str("LOG_LEVEL")
    if level is not None:
        logging_values["level"] = level
    log_format = reader.get_str("LOG_FORMAT")
    if log_format is not None:
        logging_values["format"] = log_format
    log_file = reader.get_path("LOG_FILE")
    if log_file is not None:
        logging_values["file"] = log_file
    if isinstance(logging_values.get("file"), str):
        logging_values["file"] = Path(logging_values["file"]).expanduser()

    engine_values: dict[str, Any] = dict(data.get("engine", {}))
    max_workers = reader.get_int("MAX_WORKERS")
    if max_workers is not None:
        engine_values["max_workers"] = max_workers
    production_only = reader.get_bool("PRODUCTION_ONLY")
    if production_only is not None:
        engine_values["production_only"] = production_only

    rule_values = data.get("rule")
    rule = load_rule(rule_values) if rule_values is not None else TranscodeRule.avif_preset()

    return AppConfig(
        logging=_build_section(LoggingConfig, logging_values, "logging"),
        engine=_build_section(EngineConfig, engine_values, "engine"),
        rule=rule,
    )
