"""Domain models and enums for the asset transcoder.

- Build structures: Asset, BuildOutput, Chunk, Entrypoint, BuildGraph
- Enums: ImageFormat, TranscodeMode, OrphanPolicy

Usage:
    from asset_transcoder.domain import BuildOutput, BuildGraph, Chunk
"""

from .enums import ImageFormat, OrphanPolicy, TranscodeMode
from .models import (
    SIZE_KEY,
    SOURCE_FILENAME_KEY,
    Asset,
    BuildGraph,
    BuildOutput,
    Chunk,
    Entrypoint,
)

__all__ = [
    # Models
    "Asset",
    "BuildOutput",
    "Chunk",
    "Entrypoint",
    "BuildGraph",
    # Metadata keys
    "SIZE_KEY",
    "SOURCE_FILENAME_KEY",
    # Enums
    "ImageFormat",
    "TranscodeMode",
    "OrphanPolicy",
]
