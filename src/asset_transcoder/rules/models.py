"""Transcode rule Pydantic model.

A rule selects assets by name and says how to re-encode them. Rules are
validated once, when they are built, so a bad selector or codec option
fails the run before any asset is touched.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from asset_transcoder.domain.enums import ImageFormat, OrphanPolicy, TranscodeMode
from asset_transcoder.encoder.interface import (
    RESERVED_OPTION_KEYS,
    allowed_option_keys,
)

# Selector used when converting to another codec
DEFAULT_CONVERT_SELECTOR = r"\.(png|jpe?g|gif|webp)$"

# Selector used when only re-compressing in place
DEFAULT_COMPRESS_SELECTOR = r"\.(png|jpe?g)$"

# (quality, effort) defaults per mode
DEFAULT_CONVERT_SETTINGS = (50, 4)
DEFAULT_COMPRESS_SETTINGS = (85, 6)

DEFAULT_OUTPUT_DIRECTORY = "static/image"

# Script and stylesheet outputs scanned for references
DEFAULT_TEXT_EXTENSIONS = (".js", ".mjs", ".cjs", ".css")


class TranscodeRule(BaseModel):
    """Pydantic model for one transcode rule.

    ``target_format`` decides the mode: when set, matched assets are
    converted to that codec (unless they already use it); when unset,
    matched assets are re-compressed in their own format.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    selector: str
    case_sensitive: bool = False
    target_format: str | None = None
    quality: int = Field(ge=1, le=100)
    effort: int = Field(ge=0, le=9)
    output_directory: str = ""
    public_path: str | None = None
    codec_options: dict[str, Any] = Field(default_factory=dict)
    orphan_policy: OrphanPolicy = OrphanPolicy.ENTRYPOINTS
    text_extensions: tuple[str, ...] = DEFAULT_TEXT_EXTENSIONS

    @model_validator(mode="before")
    @classmethod
    def apply_mode_defaults(cls, data: Any) -> Any:
        """Fill selector, quality and effort defaults for the rule's mode."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        converting = data.get("target_format") is not None
        quality, effort = (
            DEFAULT_CONVERT_SETTINGS if converting else DEFAULT_COMPRESS_SETTINGS
        )
        data.setdefault(
            "selector",
            DEFAULT_CONVERT_SELECTOR if converting else DEFAULT_COMPRESS_SELECTOR,
        )
        data.setdefault("quality", quality)
        data.setdefault("effort", effort)
        return data

    @field_validator("selector")
    @classmethod
    def validate_selector(cls, v: str) -> str:
        """Validate that the selector is a usable regex."""
        if not v:
            raise ValueError("selector must not be empty")
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid selector pattern '{v}': {e}") from e
        return v

    @field_validator("target_format")
    @classmethod
    def validate_target_format(cls, v: str | None) -> str | None:
        """Normalize the target extension and check it is a known codec."""
        if v is None:
            return None
        normalized = v.strip().lstrip(".").casefold()
        if ImageFormat.from_extension(normalized) is None:
            valid = sorted({f.value for f in ImageFormat} | {"jpg"})
            raise ValueError(
                f"Invalid target_format '{v}'. Must be one of: {', '.join(valid)}"
            )
        return normalized

    @field_validator("output_directory")
    @classmethod
    def validate_output_directory(cls, v: str) -> str:
        """Normalize to POSIX separators without a trailing slash."""
        return v.replace("\\", "/").rstrip("/")

    @field_validator("text_extensions")
    @classmethod
    def validate_text_extensions(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Normalize extensions to lowercase with a leading dot."""
        normalized = []
        for idx, ext in enumerate(v):
            ext = ext.strip().casefold()
            if not ext or ext == ".":
                raise ValueError(f"Empty extension at text_extensions[{idx}]")
            normalized.append(ext if ext.startswith(".") else f".{ext}")
        return tuple(normalized)

    @model_validator(mode="after")
    def validate_codec_options(self) -> TranscodeRule:
        """Reject codec options the target format does not accept."""
        reserved = sorted(RESERVED_OPTION_KEYS & self.codec_options.keys())
        if reserved:
            raise ValueError(
                f"codec_options may not set {', '.join(reserved)}; "
                "use the rule fields instead"
            )
        allowed = allowed_option_keys(self.target_image_format)
        unknown = sorted(set(self.codec_options) - allowed)
        if unknown:
            target = self.target_format or "in-place"
            raise ValueError(
                f"Unknown codec_options for {target}: {', '.join(unknown)}. "
                f"Allowed: {', '.join(sorted(allowed))}"
            )
        return self

    @property
    def target_image_format(self) -> ImageFormat | None:
        """Target codec, or None for in-place rules."""
        if self.target_format is None:
            return None
        return ImageFormat.from_extension(self.target_format)

    @property
    def mode(self) -> TranscodeMode:
        """Rule-level mode; individual assets may still be in place."""
        if self.target_format is None:
            return TranscodeMode.IN_PLACE
        return TranscodeMode.CONVERT

    @classmethod
    def avif_preset(cls, **overrides: Any) -> TranscodeRule:
        """Convert png/jpeg/gif/webp to AVIF under ``static/image``."""
        values: dict[str, Any] = {
            "target_format": "avif",
            "output_directory": DEFAULT_OUTPUT_DIRECTORY,
        }
        values.update(overrides)
        return cls(**values)

    @classmethod
    def compress_preset(cls, **overrides: Any) -> TranscodeRule:
        """Re-compress png/jpeg in place at quality 85, effort 6."""
        return cls(**overrides)
