"""Plugin event definitions.

This module defines the events a host build fires and plugins subscribe
to. The transcoder only needs one: the optimize stage after all assets
have been emitted.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from asset_transcoder.domain.models import BuildGraph, BuildOutput

# Event name constants
PROCESS_ASSETS = "assets.process"

VALID_EVENTS = frozenset([PROCESS_ASSETS])

# Host stage at which PROCESS_ASSETS fires: after every asset exists and
# before anything reads the pre-transcode names
STAGE_OPTIMIZE_SIZE = 400


def is_valid_event(event: str) -> bool:
    """Check if an event name is valid."""
    return event in VALID_EVENTS


@dataclass
class ProcessAssetsEvent:
    """Event data for assets.process.

    Fired once per build. Plugins mutate ``build_output`` and ``graph`` in
    place.
    """

    build_output: BuildOutput
    graph: BuildGraph = field(default_factory=BuildGraph)
    production: bool = True
    stage: int = STAGE_OPTIMIZE_SIZE
