"""Runtime configuration dataclasses.

The transcode rule itself is a Pydantic model in
``asset_transcoder.rules.models``; these dataclasses hold everything
around it: where logs go and how the engine runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from asset_transcoder.rules.models import TranscodeRule

LOG_LEVELS = frozenset({"debug", "info", "warning", "error"})
LOG_FORMATS = frozenset({"text", "json"})


def _check_choice(name: str, value: str, choices: frozenset[str]) -> None:
    if value.casefold() not in choices:
        raise ValueError(
            f"{name} must be one of {', '.join(sorted(choices))}, got {value!r}"
        )


@dataclass
class LoggingConfig:
    """Where and how transcode logs are written.

    Attributes:
        level: debug, info, warning or error.
        file: Rotating log file; None logs to stderr only.
        format: text, or json for one object per line.
        include_stderr: Log to stderr as well when ``file`` is set.
        max_bytes: Size at which the log file rotates.
        backup_count: Rotated files kept.
    """

    level: str = "info"
    file: Path | None = None
    format: str = "text"
    include_stderr: bool = False
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        _check_choice("level", self.level, LOG_LEVELS)
        _check_choice("format", self.format, LOG_FORMATS)
        if self.max_bytes < 0 or self.backup_count < 0:
            raise ValueError("max_bytes and backup_count must not be negative")


@dataclass
class EngineConfig:
    """How the transcode engine runs inside a build."""

    # Concurrent encode jobs (None = executor default)
    max_workers: int | None = None

    # Skip builds the host does not flag as production
    production_only: bool = True

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")


@dataclass
class AppConfig:
    """Top-level configuration."""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)
    rule: TranscodeRule = field(default_factory=TranscodeRule.avif_preset)
