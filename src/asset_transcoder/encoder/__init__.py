"""Encoder adapters.

- interface: Encoder protocol and codec option tables
- pillow: Pillow-backed implementation used by default
"""

from asset_transcoder.encoder.interface import (
    CODEC_OPTION_KEYS,
    RESERVED_OPTION_KEYS,
    Encoder,
    allowed_option_keys,
)
from asset_transcoder.encoder.pillow import PillowEncoder

__all__ = [
    "CODEC_OPTION_KEYS",
    "RESERVED_OPTION_KEYS",
    "Encoder",
    "PillowEncoder",
    "allowed_option_keys",
]
