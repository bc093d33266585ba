"""Encoder protocol and codec option tables.

This module defines the interface for encoder adapters and the set of
codec-specific options each format accepts. Option names are validated
against these tables when a rule is built, not when an image is encoded.
"""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from asset_transcoder.domain.enums import ImageFormat

# Pass-through save options accepted per format. Anything else is a
# configuration error.
CODEC_OPTION_KEYS: dict[ImageFormat, frozenset[str]] = {
    ImageFormat.AVIF: frozenset(
        {"speed", "subsampling", "codec", "range", "max_threads", "autotiling"}
    ),
    ImageFormat.WEBP: frozenset({"lossless", "method", "exact", "alpha_quality"}),
    ImageFormat.PNG: frozenset({"optimize", "compress_level"}),
    ImageFormat.JPEG: frozenset({"progressive", "optimize", "subsampling", "keep_rgb"}),
    ImageFormat.GIF: frozenset({"optimize", "interlace"}),
}

# Keys the engine sets itself; a rule may not override them
RESERVED_OPTION_KEYS = frozenset({"format", "quality", "effort"})


def allowed_option_keys(image_format: ImageFormat | None) -> frozenset[str]:
    """Option keys valid for a format.

    Args:
        image_format: Target format, or None for in-place rules where the
            format is only known per asset.

    Returns:
        Keys valid for ``image_format``, or the union over all formats.
    """
    if image_format is not None:
        return CODEC_OPTION_KEYS[image_format]
    return frozenset().union(*CODEC_OPTION_KEYS.values())


@runtime_checkable
class Encoder(Protocol):
    """Protocol for encoder adapters.

    Encoders turn raw image bytes into bytes of a given format. They must
    not mutate their input and hold no per-call state, so one instance can
    serve concurrent jobs.
    """

    def supports(self, image_format: ImageFormat) -> bool:
        """Check if this encoder can write the given format.

        Args:
            image_format: Format to check.

        Returns:
            True if ``encode`` can produce this format.
        """
        ...

    def encode(
        self,
        data: bytes,
        image_format: ImageFormat,
        *,
        quality: int,
        effort: int,
        options: Mapping[str, Any] | None = None,
    ) -> bytes:
        """Re-encode image bytes.

        Args:
            data: Source image bytes in any format the backend can read.
            image_format: Format to write.
            quality: Quality 1-100.
            effort: Encoder effort 0-9 (higher is slower and smaller).
            options: Codec-specific pass-through options.

        Returns:
            Encoded bytes.

        Raises:
            UnsupportedFormatError: If the format cannot be written.
            EncodeFailureError: If the backend fails.
        """
        ...
