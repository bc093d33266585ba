"""Transcode orchestration.

Runs one independent encode job per matched asset and gathers every
outcome before anything in the build is mutated. A failing job becomes a
failed outcome; it never cancels its siblings.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field

from asset_transcoder.domain.enums import TranscodeMode
from asset_transcoder.domain.models import Asset, BuildOutput
from asset_transcoder.encoder.interface import CODEC_OPTION_KEYS, Encoder
from asset_transcoder.exceptions import (
    AssetTranscodeError,
    EncodeFailureError,
    UnsupportedFormatError,
)
from asset_transcoder.logging.context import asset_context
from asset_transcoder.rules.matchers import RuleMatcher, asset_extension
from asset_transcoder.rules.models import TranscodeRule
from asset_transcoder.rules.naming import NamingResolver

from .outcome import TranscodeOutcome

logger = logging.getLogger(__name__)


@dataclass
class OrchestrationResult:
    """Settled outcomes of one orchestration pass, in candidate order."""

    outcomes: list[TranscodeOutcome] = field(default_factory=list)
    errors: list[AssetTranscodeError] = field(default_factory=list)

    @property
    def successful(self) -> list[TranscodeOutcome]:
        """Outcomes that can be committed."""
        return [o for o in self.outcomes if o.success]


class TranscodeOrchestrator:
    """Drives the encoder over every asset a rule matches.

    Jobs run in a thread pool. They share no mutable state: each reads its
    own asset snapshot and produces its own outcome. The orchestrator
    never mutates the build output.
    """

    def __init__(self, encoder: Encoder, max_workers: int | None = None) -> None:
        """Initialize the orchestrator.

        Args:
            encoder: Encoder adapter shared by all jobs.
            max_workers: Thread pool size. None uses the executor default.
                Results do not depend on this value.
        """
        if max_workers is not None and max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self._encoder = encoder
        self._max_workers = max_workers
        self._naming = NamingResolver()

    def run(self, build_output: BuildOutput, rule: TranscodeRule) -> OrchestrationResult:
        """Transcode every matched asset and wait for all jobs to settle.

        Args:
            build_output: Asset store to read from. Not modified.
            rule: Validated transcode rule.

        Returns:
            OrchestrationResult with one outcome per matched asset.
        """
        matcher = RuleMatcher(rule)
        candidates = [
            build_output[name]
            for name in build_output.names()
            if matcher.matches(name)
        ]
        result = OrchestrationResult()
        if not candidates:
            logger.debug("No assets match selector %r", rule.selector)
            return result

        logger.info(
            "Transcoding %d asset(s) matching %r", len(candidates), rule.selector
        )

        slots: list[TranscodeOutcome | None] = [None] * len(candidates)
        with ThreadPoolExecutor(
            max_workers=self._max_workers, thread_name_prefix="transcode"
        ) as executor:
            futures = {
                executor.submit(self._transcode, asset, matcher): idx
                for idx, asset in enumerate(candidates)
            }
            for future in as_completed(futures):
                idx = futures[future]
                asset = candidates[idx]
                try:
                    slots[idx] = future.result()
                except Exception as e:
                    logger.exception("Unexpected error for %s: %s", asset.name, e)
                    slots[idx] = TranscodeOutcome(
                        original_name=asset.name,
                        new_name=asset.name,
                        mode=matcher.mode_for(asset.name),
                        original_size=asset.size,
                        error=EncodeFailureError(str(e), asset.name),
                    )

        for outcome in slots:
            assert outcome is not None
            result.outcomes.append(outcome)
            if outcome.error is not None:
                result.errors.append(outcome.error)
        return result

    def _transcode(self, asset: Asset, matcher: RuleMatcher) -> TranscodeOutcome:
        rule = matcher.rule
        mode = matcher.mode_for(asset.name)
        new_name = self._naming.resolve(
            asset.name, rule.target_format, rule.output_directory
        )
        outcome = TranscodeOutcome(
            original_name=asset.name,
            new_name=new_name,
            mode=mode,
            original_size=asset.size,
        )

        with asset_context(asset.name):
            try:
                image_format = matcher.output_format(asset.name)
                if image_format is None:
                    raise UnsupportedFormatError(asset_extension(asset.name) or None)
                options = {
                    key: value
                    for key, value in rule.codec_options.items()
                    if key in CODEC_OPTION_KEYS[image_format]
                }
                encoded = self._encoder.encode(
                    asset.content,
                    image_format,
                    quality=rule.quality,
                    effort=rule.effort,
                    options=options,
                )
            except AssetTranscodeError as e:
                logger.warning("Failed to transcode %s: %s", asset.name, e.reason)
                return outcome.failed(e.for_asset(asset.name))
            except Exception as e:
                logger.exception("Encoder error for %s", asset.name)
                error = EncodeFailureError(f"{type(e).__name__}: {e}", asset.name)
                return outcome.failed(error)

            verb = "Converted" if mode is TranscodeMode.CONVERT else "Compressed"
            logger.debug(
                "%s %s: %d -> %d bytes", verb, asset.name, asset.size, len(encoded)
            )
        return TranscodeOutcome(
            original_name=asset.name,
            new_name=new_name,
            mode=mode,
            original_size=asset.size,
            encoded=encoded,
        )
