"""Transcode engine.

- orchestrator: concurrent encode jobs with per-asset failure isolation
- graph: commits outcomes into the asset store and chunk graph
- references: rewrites renamed paths inside scripts and stylesheets
- pipeline: TranscodeEngine, running the phases in order
"""

from asset_transcoder.engine.graph import CommitResult, GraphUpdater
from asset_transcoder.engine.orchestrator import (
    OrchestrationResult,
    TranscodeOrchestrator,
)
from asset_transcoder.engine.outcome import TranscodeOutcome
from asset_transcoder.engine.pipeline import TranscodeEngine
from asset_transcoder.engine.references import ReferenceRewriter, RewriteResult
from asset_transcoder.engine.report import TranscodeReport

__all__ = [
    "CommitResult",
    "GraphUpdater",
    "OrchestrationResult",
    "ReferenceRewriter",
    "RewriteResult",
    "TranscodeEngine",
    "TranscodeOrchestrator",
    "TranscodeOutcome",
    "TranscodeReport",
]
