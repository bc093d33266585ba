"""Transcode rules: configuration model, matching and output naming."""

from asset_transcoder.rules.matchers import (
    RuleMatcher,
    asset_extension,
    needs_format_conversion,
)
from asset_transcoder.rules.models import (
    DEFAULT_COMPRESS_SELECTOR,
    DEFAULT_CONVERT_SELECTOR,
    DEFAULT_OUTPUT_DIRECTORY,
    DEFAULT_TEXT_EXTENSIONS,
    TranscodeRule,
)
from asset_transcoder.rules.naming import NamingResolver

__all__ = [
    # Model
    "TranscodeRule",
    "DEFAULT_COMPRESS_SELECTOR",
    "DEFAULT_CONVERT_SELECTOR",
    "DEFAULT_OUTPUT_DIRECTORY",
    "DEFAULT_TEXT_EXTENSIONS",
    # Matching
    "RuleMatcher",
    "asset_extension",
    "needs_format_conversion",
    # Naming
    "NamingResolver",
]
