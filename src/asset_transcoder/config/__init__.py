"""Configuration management for the asset transcoder.

Configuration is loaded with the following precedence:
1. Environment variables (ASSET_TRANSCODER_*)
2. Config file (./asset-transcoder.toml)
3. Default values (lowest priority)
"""

from asset_transcoder.config.env import ENV_PREFIX, EnvReader
from asset_transcoder.config.loader import (
    get_config,
    get_default_config_path,
    load_config_file,
    load_rule,
)
from asset_transcoder.config.models import AppConfig, EngineConfig, LoggingConfig

__all__ = [
    "ENV_PREFIX",
    # Models
    "AppConfig",
    "EngineConfig",
    "LoggingConfig",
    # Loader
    "EnvReader",
    "get_config",
    "get_default_config_path",
    "load_config_file",
    "load_rule",
]
