"""Output naming for transcoded assets.

Converted assets keep their stem, take the target extension and move
under the rule's output directory. Names always use POSIX separators so
the references written into scripts and stylesheets are portable.
"""

from __future__ import annotations

import posixpath
from collections import defaultdict
from collections.abc import Iterable
from typing import TYPE_CHECKING

from asset_transcoder.exceptions import NamingCollisionError
from asset_transcoder.rules.matchers import needs_format_conversion

if TYPE_CHECKING:
    from asset_transcoder.engine.outcome import TranscodeOutcome


class NamingResolver:
    """Computes output names and detects collisions between them."""

    @staticmethod
    def resolve(
        asset_name: str, target_format: str | None, output_directory: str = ""
    ) -> str:
        """Compute the output name for a matched asset.

        Args:
            asset_name: Original asset name.
            target_format: Target extension, or None for in-place rules.
            output_directory: Directory the converted asset is placed in.

        Returns:
            ``asset_name`` unchanged when no conversion is needed, otherwise
            ``<output_directory>/<stem>.<target_format>``.
        """
        if target_format is None or not needs_format_conversion(
            asset_name, target_format
        ):
            return asset_name
        base = posixpath.basename(asset_name.replace("\\", "/"))
        stem, _ = posixpath.splitext(base)
        new_base = f"{stem}.{target_format.lstrip('.').casefold()}"
        directory = output_directory.replace("\\", "/").strip("/")
        if not directory:
            return new_base
        return posixpath.join(directory, new_base)

    @staticmethod
    def find_collisions(
        outcomes: Iterable[TranscodeOutcome],
        existing_names: Iterable[str],
    ) -> dict[str, NamingCollisionError]:
        """Find renames that would overwrite another asset.

        A rename collides when two distinct originals resolve to the same
        new name, or when the new name is already taken by an existing asset.

        Args:
            outcomes: Settled transcode outcomes; only successful renames
                are considered.
            existing_names: Asset names currently in the build output.

        Returns:
            Mapping of original name -> collision error, for every original
            involved in a collision.
        """
        renames = [o for o in outcomes if o.success and o.is_rename]
        occupied = set(existing_names)

        by_target: dict[str, list[str]] = defaultdict(list)
        for outcome in renames:
            by_target[outcome.new_name].append(outcome.original_name)

        collisions: dict[str, NamingCollisionError] = {}
        for new_name, originals in by_target.items():
            blockers = list(originals)
            if new_name in occupied:
                blockers.append(new_name)
            if len(blockers) < 2:
                continue
            for original in originals:
                others = tuple(sorted(b for b in blockers if b != original))
                collisions[original] = NamingCollisionError(original, new_name, others)
        return collisions
