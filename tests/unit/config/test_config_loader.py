"""Unit tests for configuration loading and precedence."""

from pathlib import Path

import pytest

from asset_transcoder.config import (
    AppConfig,
    EngineConfig,
    LoggingConfig,
    get_config,
    get_default_config_path,
    load_config_file,
    load_rule,
)
from asset_transcoder.domain import OrphanPolicy
from asset_transcoder.exceptions import ConfigurationError
from asset_transcoder.rules import TranscodeRule

CONFIG_TOML = """\
[logging]
level = "debug"
format = "json"
file = "~/transcode.log"

[engine]
max_workers = 2
production_only = false

[rule]
selector = '\\.png$'
target_format = "webp"
quality = 70
output_directory = "img"
orphan_policy = "leave"
codec_options = { lossless = true }
"""


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "asset-transcoder.toml"
    path.write_text(CONFIG_TOML)
    return path


class TestConfigModels:
    """Tests for config dataclass validation."""

    def test_defaults(self) -> None:
        config = AppConfig()
        assert config.logging.level == "info"
        assert config.engine.max_workers is None
        assert config.engine.production_only is True
        assert config.rule == TranscodeRule.avif_preset()

    def test_invalid_log_level(self) -> None:
        with pytest.raises(ValueError, match="level must be one of"):
            LoggingConfig(level="verbose")

    def test_invalid_log_format(self) -> None:
        with pytest.raises(ValueError, match="format must be one of"):
            LoggingConfig(format="xml")

    def test_invalid_max_workers(self) -> None:
        with pytest.raises(ValueError, match="max_workers"):
            EngineConfig(max_workers=0)


class TestLoadConfigFile:
    """Tests for load_config_file()."""

    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert load_config_file(tmp_path / "absent.toml") == {}

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.toml"
        path.write_text("[rule\nselector = ")
        with pytest.raises(ConfigurationError, match="Invalid TOML"):
            load_config_file(path)

    def test_parses_tables(self, config_file: Path) -> None:
        data = load_config_file(config_file)
        assert data["engine"]["max_workers"] == 2
        assert data["rule"]["selector"] == r"\.png$"


class TestLoadRule:
    """Tests for load_rule()."""

    def test_valid_rule(self) -> None:
        rule = load_rule({"target_format": "avif", "output_directory": "static/image"})
        assert rule == TranscodeRule.avif_preset()

    def test_invalid_rule_wrapped(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid transcode rule: quality"):
            load_rule({"quality": 500})

    def test_unknown_key_wrapped(self) -> None:
        with pytest.raises(ConfigurationError, match="test"):
            load_rule({"test": r"\.png$"})


class TestGetConfig:
    """Tests for get_config() precedence."""

    def test_defaults_without_file(self, tmp_path: Path) -> None:
        config = get_config(tmp_path / "absent.toml", env={})
        assert config.logging == LoggingConfig()
        assert config.engine == EngineConfig()
        assert config.rule == TranscodeRule.avif_preset()

    def test_file_values(self, config_file: Path) -> None:
        config = get_config(config_file, env={})

        assert config.logging.level == "debug"
        assert config.logging.format == "json"
        assert config.logging.file == Path("~/transcode.log").expanduser()
        assert config.engine.max_workers == 2
        assert config.engine.production_only is False
        assert config.rule.target_format == "webp"
        assert config.rule.quality == 70
        assert config.rule.orphan_policy is OrphanPolicy.LEAVE
        assert config.rule.codec_options == {"lossless": True}

    def test_env_overrides_file(self, config_file: Path) -> None:
        env = {
            "ASSET_TRANSCODER_LOG_LEVEL": "warning",
            "ASSET_TRANSCODER_LOG_FORMAT": "text",
            "ASSET_TRANSCODER_MAX_WORKERS": "8",
            "ASSET_TRANSCODER_PRODUCTION_ONLY": "true",
        }
        config = get_config(config_file, env=env)

        assert config.logging.level == "warning"
        assert config.logging.format == "text"
        assert config.engine.max_workers == 8
        assert config.engine.production_only is True

    def test_config_path_from_env(self, config_file: Path) -> None:
        env = {"ASSET_TRANSCODER_CONFIG_PATH": str(config_file)}
        assert get_default_config_path(env) == config_file
        assert get_config(env=env).engine.max_workers == 2

    def test_default_config_path(self) -> None:
        assert get_default_config_path({}) == Path("asset-transcoder.toml")

    def test_invalid_engine_value(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text("[engine]\nmax_workers = 0\n")
        with pytest.raises(ConfigurationError, match=r"Invalid \[engine\] configuration"):
            get_config(path, env={})

    def test_unknown_engine_key(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text("[engine]\nthreads = 4\n")
        with pytest.raises(ConfigurationError, match=r"\[engine\]"):
            get_config(path, env={})

    def test_invalid_env_log_level(self, tmp_path: Path) -> None:
        env = {"ASSET_TRANSCODER_LOG_LEVEL": "loud"}
        with pytest.raises(ConfigurationError, match=r"\[logging\]"):
            get_config(tmp_path / "absent.toml", env=env)
