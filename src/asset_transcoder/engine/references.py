"""Rewrite references to renamed assets inside text outputs.

Scripts and stylesheets embed asset paths as plain strings. Once every
rename of a run is committed, each text asset is scanned once and every
literal occurrence of an original name is replaced with its new name.

Names are matched literally (regex metacharacters are escaped) and ``/``
is interchangeable with the host path separator. All renames are applied
in a single substitution pass, longest original name first, so text that
was just replaced is never scanned again. Renames that overlap as
substrings are still reported, because which one wins at a given spot
depends on the content.
"""

from __future__ import annotations

import logging
import os
import posixpath
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from re import Match, Pattern

from asset_transcoder.domain.models import BuildOutput
from asset_transcoder.exceptions import (
    AssetTranscodeWarning,
    ReferenceRewriteError,
    reference_overlap,
)
from asset_transcoder.rules.models import DEFAULT_TEXT_EXTENSIONS

logger = logging.getLogger(__name__)


@dataclass
class RewriteResult:
    """What a rewrite pass changed."""

    updated: list[str] = field(default_factory=list)
    """Names of text assets whose content changed."""

    replacements: int = 0
    """Total number of replaced occurrences."""

    errors: list[ReferenceRewriteError] = field(default_factory=list)
    warnings: list[AssetTranscodeWarning] = field(default_factory=list)


def _to_posix(name: str, host_separator: str) -> str:
    return name.replace(host_separator, "/").replace("\\", "/")


class ReferenceRewriter:
    """Replaces literal asset paths in text assets."""

    def __init__(
        self,
        public_path: str | None = None,
        text_extensions: Iterable[str] = DEFAULT_TEXT_EXTENSIONS,
        host_separator: str = os.sep,
    ) -> None:
        """Initialize the rewriter.

        Args:
            public_path: Prefix joined in front of every new name.
            text_extensions: Extensions of assets to scan.
            host_separator: Path separator treated as equivalent to ``/``.
        """
        self._public_path = public_path or None
        self._text_extensions = tuple(ext.casefold() for ext in text_extensions)
        self._host_separator = host_separator

    def is_text_asset(self, name: str) -> bool:
        """Check if an asset is scanned for references."""
        return name.casefold().endswith(self._text_extensions)

    def target_path(self, new_name: str) -> str:
        """Path written in place of an original name."""
        new_path = _to_posix(new_name, self._host_separator)
        if self._public_path:
            return posixpath.join(self._public_path, new_path)
        return new_path

    def rewrite(
        self, build_output: BuildOutput, rename_map: Mapping[str, str]
    ) -> RewriteResult:
        """Rewrite references in every text asset.

        Must only run after every rename of the run is committed.

        Args:
            build_output: Asset store; changed text assets are updated in it.
            rename_map: Original name -> new name for committed conversions.

        Returns:
            RewriteResult with updated names and per-asset errors.
        """
        result = RewriteResult()
        if not rename_map:
            return result

        replacements = {
            _to_posix(old, self._host_separator): self.target_path(new)
            for old, new in rename_map.items()
        }
        result.warnings.extend(self.find_overlaps(replacements))
        pattern = self._build_pattern(replacements)

        def substitute(match: Match[str]) -> str:
            return replacements[_to_posix(match.group(0), self._host_separator)]

        for name in build_output.names():
            if not self.is_text_asset(name):
                continue
            asset = build_output[name]
            try:
                text = asset.text()
            except UnicodeDecodeError as e:
                error = ReferenceRewriteError(f"content is not UTF-8 text: {e.reason}", name)
                logger.warning("Skipping references in %s: %s", name, error.reason)
                result.errors.append(error)
                continue

            new_text, count = pattern.subn(substitute, text)
            if not count:
                continue
            build_output.update(name, new_text.encode("utf-8"))
            result.updated.append(name)
            result.replacements += count
            logger.info("Updated %d reference(s) in %s", count, name)

        return result

    def _build_pattern(self, replacements: Mapping[str, str]) -> Pattern[str]:
        separators = sorted({"/", self._host_separator})
        separator = "(?:" + "|".join(re.escape(s) for s in separators) + ")"
        alternatives = [
            separator.join(re.escape(part) for part in old.split("/"))
            for old in sorted(replacements, key=len, reverse=True)
        ]
        return re.compile("|".join(alternatives))

    @staticmethod
    def find_overlaps(replacements: Mapping[str, str]) -> list[AssetTranscodeWarning]:
        """Find renames whose paths overlap as substrings.

        Two cases are reported: one original name containing another, and
        a new path containing some other original name.

        Args:
            replacements: Normalized original path -> replacement path.

        Returns:
            One warning per overlapping pair.
        """
        warnings: list[AssetTranscodeWarning] = []
        names = list(replacements)
        for old in names:
            for other in names:
                if other == old:
                    continue
                if old in other:
                    warnings.append(
                        reference_overlap(old, other, f"{old} is part of {other}")
                    )
                elif old in replacements[other]:
                    warnings.append(
                        reference_overlap(
                            old,
                            other,
                            f"new path {replacements[other]} contains {old}",
                        )
                    )
        for warning in warnings:
            logger.warning("Reference overlap: %s", warning)
        return warnings
