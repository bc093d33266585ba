"""Domain enums for the asset transcoder.

This module contains enums shared by the rule, encoder and engine layers.
"""

from __future__ import annotations

from enum import Enum


class ImageFormat(Enum):
    """Image codecs the transcoder knows about.

    The value is the canonical file extension (without the dot). ``jpg`` and
    ``jpeg`` are the same format; ``from_extension`` maps both to JPEG.
    """

    AVIF = "avif"
    WEBP = "webp"
    PNG = "png"
    JPEG = "jpeg"
    GIF = "gif"

    @classmethod
    def from_extension(cls, extension: str) -> ImageFormat | None:
        """Look up a format by file extension.

        Args:
            extension: Extension with or without a leading dot, any case.

        Returns:
            Matching ImageFormat, or None if the extension is not an image
            format the transcoder recognizes.
        """
        ext = extension.lstrip(".").casefold()
        if ext == "jpg":
            ext = "jpeg"
        try:
            return cls(ext)
        except ValueError:
            return None

    @property
    def pillow_name(self) -> str:
        """Format name understood by ``PIL.Image.save``."""
        return self.value.upper()


class TranscodeMode(Enum):
    """How a matched asset is transcoded.

    IN_PLACE keeps the asset's name and codec and only re-compresses it.
    CONVERT changes the codec, and with it the extension and name.
    """

    IN_PLACE = "in_place"
    CONVERT = "convert"


class OrphanPolicy(Enum):
    """What to do with a converted asset no chunk listed.

    ENTRYPOINTS attaches the new name to every chunk of every entrypoint,
    matching how bundler plugins usually keep such assets reachable.
    LEAVE keeps it unattributed and reports a warning instead.
    """

    ENTRYPOINTS = "entrypoints"
    LEAVE = "leave"
