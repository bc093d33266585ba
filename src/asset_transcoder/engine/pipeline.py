"""Transcode engine: the full pass over one build's output.

Phases run strictly in order, with a barrier between each:

1. transcode every matched asset concurrently and wait for all jobs
2. drop renames that would collide with another asset
3. commit outcomes into the asset store and chunk graph
4. rewrite references in text assets using the final names
"""

from __future__ import annotations

import logging

from asset_transcoder.domain.models import BuildGraph, BuildOutput
from asset_transcoder.encoder.interface import Encoder
from asset_transcoder.encoder.pillow import PillowEncoder
from asset_transcoder.exceptions import (
    AssetTranscodeWarning,
    ConfigurationError,
    selector_matches_target,
)
from asset_transcoder.rules.matchers import RuleMatcher
from asset_transcoder.rules.models import TranscodeRule
from asset_transcoder.rules.naming import NamingResolver

from .graph import GraphUpdater
from .orchestrator import TranscodeOrchestrator
from .references import ReferenceRewriter
from .report import TranscodeReport

logger = logging.getLogger(__name__)


class TranscodeEngine:
    """One parameterized engine for both in-place and conversion rules.

    Construction validates everything that can be checked without looking
    at assets and raises ConfigurationError on problems. ``run`` reports
    per-asset failures in the returned TranscodeReport instead of raising.
    """

    def __init__(
        self,
        rule: TranscodeRule,
        encoder: Encoder | None = None,
        *,
        max_workers: int | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            rule: Validated transcode rule.
            encoder: Encoder adapter. Defaults to PillowEncoder.
            max_workers: Upper bound on concurrent encode jobs.

        Raises:
            ConfigurationError: If the encoder cannot write the rule's target
                format or max_workers is invalid.
        """
        self._rule = rule
        self._encoder = encoder if encoder is not None else PillowEncoder()

        target = rule.target_image_format
        if target is not None and not self._encoder.supports(target):
            raise ConfigurationError(
                f"Encoder {type(self._encoder).__name__} cannot write "
                f"target format '{rule.target_format}'"
            )
        try:
            self._orchestrator = TranscodeOrchestrator(
                self._encoder, max_workers=max_workers
            )
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        self._naming = NamingResolver()
        self._updater = GraphUpdater(rule.orphan_policy)
        self._rewriter = ReferenceRewriter(
            public_path=rule.public_path,
            text_extensions=rule.text_extensions,
        )

        self._config_warnings: list[AssetTranscodeWarning] = []
        if RuleMatcher(rule).matches_own_output():
            warning = selector_matches_target(rule.selector, rule.target_format or "")
            logger.warning(
                "Rule is not idempotent: %s; a later run will re-compress "
                "converted assets",
                warning.message,
            )
            self._config_warnings.append(warning)

    @property
    def rule(self) -> TranscodeRule:
        """The rule this engine applies."""
        return self._rule

    def run(
        self, build_output: BuildOutput, graph: BuildGraph | None = None
    ) -> TranscodeReport:
        """Transcode matched assets and keep the build consistent.

        Args:
            build_output: Asset store, mutated in place.
            graph: Chunk and entrypoint membership, mutated in place. An
                empty graph is used when omitted.

        Returns:
            TranscodeReport with outcomes, errors and warnings.
        """
        if graph is None:
            graph = BuildGraph()
        report = TranscodeReport(warnings=list(self._config_warnings))

        orchestration = self._orchestrator.run(build_output, self._rule)
        outcomes = orchestration.outcomes
        report.errors.extend(orchestration.errors)

        collisions = self._naming.find_collisions(outcomes, build_output.names())
        if collisions:
            for original, error in collisions.items():
                logger.error("Naming collision for %s: %s", original, error.reason)
            outcomes = [
                o.failed(collisions[o.original_name])
                if o.original_name in collisions
                else o
                for o in outcomes
            ]
            report.errors.extend(collisions.values())
        report.outcomes = outcomes

        commit = self._updater.commit(build_output, graph, outcomes)
        report.renames = commit.renames
        report.compressed = commit.updated
        report.errors.extend(commit.errors)
        report.warnings.extend(commit.warnings)

        rewrite = self._rewriter.rewrite(build_output, commit.renames)
        report.updated_assets = rewrite.updated
        report.errors.extend(rewrite.errors)
        report.warnings.extend(rewrite.warnings)

        if report.outcomes:
            log = logger.warning if report.has_errors else logger.info
            log("Image transcode finished: %s", report.summary())
        return report
