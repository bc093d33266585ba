"""Built-in image transcode plugin.

Runs the TranscodeEngine when the host fires assets.process. Development
builds are skipped unless the engine config says otherwise, so dev
servers keep serving the original images.
"""

from __future__ import annotations

import logging

from asset_transcoder.config.models import EngineConfig
from asset_transcoder.encoder.interface import Encoder
from asset_transcoder.engine.pipeline import TranscodeEngine
from asset_transcoder.engine.report import TranscodeReport
from asset_transcoder.plugin.events import PROCESS_ASSETS, ProcessAssetsEvent
from asset_transcoder.rules.models import TranscodeRule

logger = logging.getLogger(__name__)


class ImageTranscodePlugin:
    """Asset plugin wrapping the transcode engine."""

    name = "image-transcode"
    version = "0.1.0"
    events = [PROCESS_ASSETS]

    def __init__(
        self,
        rule: TranscodeRule | None = None,
        config: EngineConfig | None = None,
        encoder: Encoder | None = None,
    ) -> None:
        """Initialize the plugin.

        Args:
            rule: Transcode rule. Defaults to the AVIF conversion preset.
            config: Engine configuration.
            encoder: Encoder adapter, mainly for tests.

        Raises:
            ConfigurationError: If the rule cannot be applied.
        """
        self._config = config or EngineConfig()
        self._engine = TranscodeEngine(
            rule or TranscodeRule.avif_preset(),
            encoder,
            max_workers=self._config.max_workers,
        )

    @property
    def engine(self) -> TranscodeEngine:
        """The engine this plugin runs."""
        return self._engine

    def on_process_assets(self, event: ProcessAssetsEvent) -> TranscodeReport:
        """Transcode the build's images.

        Returns:
            TranscodeReport; ``skipped`` is set for ignored dev builds.
        """
        if self._config.production_only and not event.production:
            logger.debug("Skipping image transcode for non-production build")
            return TranscodeReport(skipped=True)
        return self._engine.run(event.build_output, event.graph)
