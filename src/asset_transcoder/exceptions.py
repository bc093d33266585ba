"""Transcode errors and warnings.

Errors are exceptions: the leaf components raise them and the engine
collects them per asset. Warnings never abort anything; they are plain
records reported alongside the errors.
"""

from __future__ import annotations

from dataclasses import dataclass


class TranscodeError(Exception):
    """Base exception for transcoder errors."""


class ConfigurationError(TranscodeError):
    """Invalid configuration, detected before any asset is processed."""


class AssetTranscodeError(TranscodeError):
    """Failure scoped to a single asset.

    Never aborts sibling work; the affected asset is left unconverted.
    The encoder raises these without knowing the asset name; the
    orchestrator fills it in via ``for_asset``.
    """

    kind = "transcode_failure"

    def __init__(self, reason: str, asset_name: str | None = None) -> None:
        self.reason = reason
        self.asset_name = asset_name
        super().__init__(reason)

    def for_asset(self, asset_name: str) -> AssetTranscodeError:
        """Tag the error with the asset it belongs to and return it."""
        self.asset_name = asset_name
        return self

    def __str__(self) -> str:
        if self.asset_name:
            return f"{self.asset_name}: {self.reason}"
        return self.reason


class UnsupportedFormatError(AssetTranscodeError):
    """Requested or detected codec is not recognized by the encoder."""

    kind = "unsupported_format"

    def __init__(self, image_format: str | None, asset_name: str | None = None) -> None:
        self.image_format = image_format
        shown = image_format if image_format else "unknown"
        super().__init__(f"unsupported image format: {shown}", asset_name)


class EncodeFailureError(AssetTranscodeError):
    """The underlying codec failed to decode or encode the image."""

    kind = "encode_failure"


class NamingCollisionError(AssetTranscodeError):
    """Two assets would be written to the same output name."""

    kind = "naming_collision"

    def __init__(
        self, asset_name: str, new_name: str, conflicting: tuple[str, ...]
    ) -> None:
        self.new_name = new_name
        self.conflicting = conflicting
        super().__init__(
            f"output name {new_name} collides with {', '.join(conflicting)}",
            asset_name,
        )


class ReferenceRewriteError(AssetTranscodeError):
    """A text asset could not be scanned for references."""

    kind = "reference_rewrite"


@dataclass(frozen=True)
class AssetTranscodeWarning:
    """Non-fatal condition reported to the host build."""

    kind: str
    asset_name: str
    message: str

    def __str__(self) -> str:
        return f"{self.asset_name}: {self.message}"


MISSING_ORIGINAL_ASSET = "missing_original_asset"
UNATTRIBUTED_ASSET = "unattributed_asset"
REFERENCE_OVERLAP = "reference_overlap"
SELECTOR_MATCHES_TARGET = "selector_matches_target"


def missing_original_asset(asset_name: str) -> AssetTranscodeWarning:
    """Graph update attempted against a name no longer in the store."""
    return AssetTranscodeWarning(
        MISSING_ORIGINAL_ASSET,
        asset_name,
        "asset no longer present at commit time, skipped",
    )


def unattributed_asset(asset_name: str, new_name: str) -> AssetTranscodeWarning:
    """Converted asset that no chunk listed and that was left that way."""
    return AssetTranscodeWarning(
        UNATTRIBUTED_ASSET,
        asset_name,
        f"no chunk lists this asset; {new_name} left unattributed",
    )


def reference_overlap(
    asset_name: str, other_name: str, detail: str
) -> AssetTranscodeWarning:
    """Two renames whose paths overlap as substrings."""
    return AssetTranscodeWarning(
        REFERENCE_OVERLAP,
        asset_name,
        f"rename overlaps with {other_name} ({detail}); "
        "references were rewritten in a single pass",
    )


def selector_matches_target(selector: str, target: str) -> AssetTranscodeWarning:
    """Rule selector would match its own output on a later run."""
    return AssetTranscodeWarning(
        SELECTOR_MATCHES_TARGET,
        "*",
        f"selector {selector!r} also matches converted .{target} assets",
    )
