"""Build-time image asset transcoder.

Re-encodes image assets of a finished bundle and keeps chunk membership,
entrypoint membership and textual references consistent with the result.
"""

from asset_transcoder.domain import (
    Asset,
    BuildGraph,
    BuildOutput,
    Chunk,
    Entrypoint,
    ImageFormat,
    OrphanPolicy,
    TranscodeMode,
)
from asset_transcoder.engine import TranscodeEngine, TranscodeReport
from asset_transcoder.rules import TranscodeRule

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Asset",
    "BuildGraph",
    "BuildOutput",
    "Chunk",
    "Entrypoint",
    "ImageFormat",
    "OrphanPolicy",
    "TranscodeMode",
    "TranscodeEngine",
    "TranscodeReport",
    "TranscodeRule",
]
