"""Run report returned to the host build."""

from __future__ import annotations

from dataclasses import dataclass, field

from asset_transcoder.domain.enums import TranscodeMode
from asset_transcoder.exceptions import AssetTranscodeError, AssetTranscodeWarning

from .outcome import TranscodeOutcome


@dataclass
class TranscodeReport:
    """Everything one engine run did, for the host's error channel.

    Errors are per-asset failures; the assets they name were left
    untouched. Warnings did not prevent anything from being committed.
    """

    outcomes: list[TranscodeOutcome] = field(default_factory=list)
    errors: list[AssetTranscodeError] = field(default_factory=list)
    warnings: list[AssetTranscodeWarning] = field(default_factory=list)
    renames: dict[str, str] = field(default_factory=dict)
    compressed: list[str] = field(default_factory=list)
    updated_assets: list[str] = field(default_factory=list)
    skipped: bool = False

    @property
    def has_errors(self) -> bool:
        """True if any asset failed."""
        return bool(self.errors)

    @property
    def converted_count(self) -> int:
        """Number of committed codec conversions."""
        return len(self.renames)

    @property
    def compressed_count(self) -> int:
        """Number of committed in-place re-compressions."""
        return len(self.compressed)

    @property
    def failed_count(self) -> int:
        """Number of distinct assets named by an error."""
        return len({e.asset_name for e in self.errors})

    @property
    def bytes_saved(self) -> int:
        """Total size reduction over committed outcomes."""
        committed = set(self.renames) | set(self.compressed)
        return sum(o.saved_bytes for o in self.outcomes if o.original_name in committed)

    def outcomes_by_mode(self, mode: TranscodeMode) -> list[TranscodeOutcome]:
        """Outcomes of the given mode, successful or not."""
        return [o for o in self.outcomes if o.mode is mode]

    def summary(self) -> str:
        """One-line summary for the host log."""
        if self.skipped:
            return "image transcode skipped"
        parts = [
            f"{self.converted_count} converted",
            f"{self.compressed_count} compressed",
            f"{self.failed_count} failed",
            f"{len(self.updated_assets)} reference file(s) updated",
            f"{self.bytes_saved} bytes saved",
        ]
        return ", ".join(parts)
