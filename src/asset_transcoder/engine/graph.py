"""Commit transcode outcomes into the asset store and chunk graph.

Each successful outcome is applied atomically: every precondition is
checked before the first mutation, and the whole commit runs under the
graph lock so concurrent committers never see a half-renamed asset.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from asset_transcoder.domain.enums import OrphanPolicy
from asset_transcoder.domain.models import (
    SIZE_KEY,
    SOURCE_FILENAME_KEY,
    BuildGraph,
    BuildOutput,
)
from asset_transcoder.exceptions import (
    AssetTranscodeError,
    AssetTranscodeWarning,
    NamingCollisionError,
    missing_original_asset,
    unattributed_asset,
)

from .outcome import TranscodeOutcome

logger = logging.getLogger(__name__)


@dataclass
class CommitResult:
    """What a commit pass changed."""

    renames: dict[str, str] = field(default_factory=dict)
    """Original name -> new name for every committed conversion."""

    updated: list[str] = field(default_factory=list)
    """Names re-compressed in place."""

    errors: list[AssetTranscodeError] = field(default_factory=list)
    warnings: list[AssetTranscodeWarning] = field(default_factory=list)


class GraphUpdater:
    """Applies outcomes to a BuildOutput and BuildGraph."""

    def __init__(self, orphan_policy: OrphanPolicy = OrphanPolicy.ENTRYPOINTS) -> None:
        """Initialize the updater.

        Args:
            orphan_policy: What to do with converted assets that no chunk
                listed before conversion.
        """
        self._orphan_policy = orphan_policy

    def commit(
        self,
        build_output: BuildOutput,
        graph: BuildGraph,
        outcomes: Iterable[TranscodeOutcome],
    ) -> CommitResult:
        """Commit every successful outcome.

        Failed outcomes are skipped, leaving their assets untouched.

        Args:
            build_output: Asset store to mutate.
            graph: Chunk and entrypoint membership to mutate.
            outcomes: Settled outcomes from the orchestrator.

        Returns:
            CommitResult describing the applied changes.
        """
        result = CommitResult()
        for outcome in outcomes:
            if not outcome.success:
                continue
            with graph.lock:
                if outcome.is_rename:
                    self._commit_conversion(build_output, graph, outcome, result)
                else:
                    self._commit_in_place(build_output, outcome, result)
        return result

    def _commit_in_place(
        self,
        build_output: BuildOutput,
        outcome: TranscodeOutcome,
        result: CommitResult,
    ) -> None:
        name = outcome.original_name
        if name not in build_output:
            logger.warning("Original asset %s not found, skipping", name)
            result.warnings.append(missing_original_asset(name))
            return

        assert outcome.encoded is not None
        build_output.update(name, outcome.encoded)
        result.updated.append(name)
        logger.info(
            "Compressed %s (%d -> %d bytes)",
            name,
            outcome.original_size,
            outcome.encoded_size,
        )

    def _commit_conversion(
        self,
        build_output: BuildOutput,
        graph: BuildGraph,
        outcome: TranscodeOutcome,
        result: CommitResult,
    ) -> None:
        old_name = outcome.original_name
        new_name = outcome.new_name
        original = build_output.get(old_name)
        if original is None:
            logger.warning("Original asset %s not found, skipping", old_name)
            result.warnings.append(missing_original_asset(old_name))
            return
        if new_name in build_output:
            error = NamingCollisionError(old_name, new_name, (new_name,))
            logger.error("Not converting %s: %s", old_name, error.reason)
            result.errors.append(error)
            return

        assert outcome.encoded is not None
        owners = graph.chunks_containing(old_name)
        metadata = dict(original.metadata)
        metadata[SOURCE_FILENAME_KEY] = old_name
        metadata[SIZE_KEY] = outcome.encoded_size

        build_output.emit(new_name, outcome.encoded, metadata)
        build_output.delete(old_name)
        for chunk in owners:
            chunk.files.discard(old_name)
            chunk.files.add(new_name)

        if owners:
            logger.debug(
                "Moved %s -> %s in chunk(s) %s",
                old_name,
                new_name,
                ", ".join(str(chunk.id) for chunk in owners),
            )
        else:
            self._attach_orphan(graph, old_name, new_name, result)

        result.renames[old_name] = new_name
        logger.info(
            "Converted %s to %s (%d -> %d bytes)",
            old_name,
            new_name,
            outcome.original_size,
            outcome.encoded_size,
        )

    def _attach_orphan(
        self,
        graph: BuildGraph,
        old_name: str,
        new_name: str,
        result: CommitResult,
    ) -> None:
        targets = []
        if self._orphan_policy is OrphanPolicy.ENTRYPOINTS:
            targets = graph.entrypoint_chunks()

        if not targets:
            logger.warning("No chunk lists %s; %s left unattributed", old_name, new_name)
            result.warnings.append(unattributed_asset(old_name, new_name))
            return

        for chunk in targets:
            chunk.files.add(new_name)
        logger.debug(
            "No chunk listed %s; attached %s to %d entrypoint chunk(s)",
            old_name,
            new_name,
            len(targets),
        )
