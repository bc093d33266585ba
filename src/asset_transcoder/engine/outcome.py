"""Per-asset transcode outcome."""

from __future__ import annotations

from dataclasses import dataclass, replace

from asset_transcoder.domain.enums import TranscodeMode
from asset_transcoder.exceptions import AssetTranscodeError


@dataclass(frozen=True)
class TranscodeOutcome:
    """Result of transcoding one asset.

    A successful outcome carries the encoded bytes; a failed one carries
    the error and no bytes. ``new_name`` equals ``original_name`` for
    in-place re-compression.
    """

    original_name: str
    new_name: str
    mode: TranscodeMode
    original_size: int = 0
    encoded: bytes | None = None
    error: AssetTranscodeError | None = None

    @property
    def success(self) -> bool:
        """True if the asset was encoded and can be committed."""
        return self.error is None and self.encoded is not None

    @property
    def is_rename(self) -> bool:
        """True if committing this outcome changes the asset's name."""
        return self.new_name != self.original_name

    @property
    def encoded_size(self) -> int:
        """Encoded length in bytes, 0 for failures."""
        return len(self.encoded) if self.encoded is not None else 0

    @property
    def saved_bytes(self) -> int:
        """Bytes saved by the transcode; negative if the output grew."""
        if not self.success:
            return 0
        return self.original_size - self.encoded_size

    def failed(self, error: AssetTranscodeError) -> TranscodeOutcome:
        """Copy of this outcome demoted to a failure."""
        return replace(self, encoded=None, error=error)
