"""Rule matching for asset names.

Decides whether an asset is in scope for a rule and whether it needs a
codec change or only an in-place re-compression.
"""

import posixpath
import re
from re import Pattern

from asset_transcoder.domain.enums import ImageFormat, TranscodeMode
from asset_transcoder.rules.models import TranscodeRule


def asset_extension(asset_name: str) -> str:
    """Lowercase extension of an asset name without the dot.

    Backslashes count as path separators, so ``img\\a.png`` gives ``png``.
    """
    base = posixpath.basename(asset_name.replace("\\", "/"))
    _, ext = posixpath.splitext(base)
    return ext[1:].casefold()


def needs_format_conversion(asset_name: str, target_format: str | None) -> bool:
    """Check if an asset must change codec to reach ``target_format``.

    ``jpg`` and ``jpeg`` are the same format and never convert into each
    other.

    Args:
        asset_name: Asset name or path.
        target_format: Target extension, or None for in-place rules.

    Returns:
        True if the asset's extension differs from the target format.
    """
    if not target_format:
        return False
    source = asset_extension(asset_name)
    target = target_format.lstrip(".").casefold()
    if source == target:
        return False
    if {source, target} == {"jpg", "jpeg"}:
        return False
    return True


class RuleMatcher:
    """Matches asset names against a rule's selector.

    The selector is compiled once and reused. Matching is a regex search
    over the full asset name, case-insensitive unless the rule says
    otherwise.
    """

    def __init__(self, rule: TranscodeRule) -> None:
        """Initialize the matcher.

        Args:
            rule: Validated transcode rule.
        """
        self._rule = rule
        flags = 0 if rule.case_sensitive else re.IGNORECASE
        self._compiled: Pattern[str] = re.compile(rule.selector, flags)

    @property
    def rule(self) -> TranscodeRule:
        """The rule this matcher was built from."""
        return self._rule

    def matches(self, asset_name: str) -> bool:
        """Check if an asset is in scope for the rule."""
        return self._compiled.search(asset_name) is not None

    def needs_format_conversion(
        self, asset_name: str, target_format: str | None = None
    ) -> bool:
        """Check if an asset needs a codec change.

        Args:
            asset_name: Asset name or path.
            target_format: Override for the rule's target format.
        """
        target = target_format if target_format is not None else self._rule.target_format
        return needs_format_conversion(asset_name, target)

    def mode_for(self, asset_name: str) -> TranscodeMode:
        """Transcode mode for one asset under this rule."""
        if self.needs_format_conversion(asset_name):
            return TranscodeMode.CONVERT
        return TranscodeMode.IN_PLACE

    def output_format(self, asset_name: str) -> ImageFormat | None:
        """Codec the asset will be written in.

        Returns:
            The rule's target codec when converting, otherwise the codec
            implied by the asset's own extension, or None if that extension
            is not a recognized image format.
        """
        if self.mode_for(asset_name) is TranscodeMode.CONVERT:
            return self._rule.target_image_format
        return ImageFormat.from_extension(asset_extension(asset_name))

    def matches_own_output(self) -> bool:
        """Check if the selector would also pick up converted assets.

        A rule that does this is not idempotent across runs: a second run
        re-compresses what the first one produced.
        """
        if self._rule.target_format is None:
            return False
        sample = f"sample.{self._rule.target_format}"
        directory = self._rule.output_directory.replace("\\", "/").strip("/")
        if self.matches(sample):
            return True
        return bool(directory) and self.matches(posixpath.join(directory, sample))
