"""Pillow-backed encoder adapter.

Maps the engine's quality/effort scale onto Pillow save arguments:

- AVIF: quality, speed = 9 - effort
- WEBP: quality, method = min(effort, 6)
- PNG: compress_level = effort (lossless, quality unused)
- JPEG: quality, optimize (effort unused, alpha flattened)
- GIF: optimize
"""

from __future__ import annotations

import io
import logging
from collections.abc import Mapping
from functools import lru_cache
from typing import Any

from PIL import Image, UnidentifiedImageError, features

from asset_transcoder.domain.enums import ImageFormat
from asset_transcoder.exceptions import EncodeFailureError, UnsupportedFormatError

logger = logging.getLogger(__name__)

# Pillow feature name that must be available to write each format
_FEATURE_FOR_FORMAT: dict[ImageFormat, str | None] = {
    ImageFormat.AVIF: "avif",
    ImageFormat.WEBP: "webp",
    ImageFormat.PNG: "zlib",
    ImageFormat.JPEG: "jpg",
    ImageFormat.GIF: None,
}

# Formats that can carry every frame of an animated source
_ANIMATED_FORMATS = frozenset(
    {ImageFormat.AVIF, ImageFormat.WEBP, ImageFormat.PNG, ImageFormat.GIF}
)

# Modes each format writes directly; other modes are converted first
_NATIVE_MODES: dict[ImageFormat, frozenset[str]] = {
    ImageFormat.AVIF: frozenset({"RGB", "RGBA"}),
    ImageFormat.WEBP: frozenset({"RGB", "RGBA"}),
    ImageFormat.JPEG: frozenset({"RGB", "L", "CMYK"}),
    ImageFormat.PNG: frozenset({"1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"}),
    # Pillow quantizes RGB/RGBA to a palette on save
    ImageFormat.GIF: frozenset({"1", "L", "P", "RGB", "RGBA"}),
}


@lru_cache(maxsize=None)
def _feature_available(feature: str) -> bool:
    return bool(features.check(feature))


class PillowEncoder:
    """Encoder adapter using Pillow.

    Stateless; a single instance is shared by all transcode jobs.
    """

    def supports(self, image_format: ImageFormat) -> bool:
        """Check if the installed Pillow can write ``image_format``."""
        if not isinstance(image_format, ImageFormat):
            return False
        feature = _FEATURE_FOR_FORMAT.get(image_format)
        return feature is None or _feature_available(feature)

    def encode(
        self,
        data: bytes,
        image_format: ImageFormat,
        *,
        quality: int,
        effort: int,
        options: Mapping[str, Any] | None = None,
    ) -> bytes:
        """Re-encode ``data`` as ``image_format``.

        Raises:
            UnsupportedFormatError: If the format is unknown or the installed
                Pillow was built without it.
            EncodeFailureError: If Pillow cannot read or write the image.
        """
        if not self.supports(image_format):
            raise UnsupportedFormatError(
                getattr(image_format, "value", None) or str(image_format)
            )

        save_args = self._save_args(image_format, quality, effort, options or {})

        try:
            with Image.open(io.BytesIO(data)) as image:
                image.load()
                animated = getattr(image, "is_animated", False)
                if animated and image_format in _ANIMATED_FORMATS:
                    save_args["save_all"] = True
                else:
                    image = self._prepare_mode(image, image_format)

                buffer = io.BytesIO()
                image.save(buffer, format=image_format.pillow_name, **save_args)
        except UnidentifiedImageError as e:
            raise EncodeFailureError(f"cannot identify image data: {e}") from e
        except Image.DecompressionBombError as e:
            raise EncodeFailureError(f"image too large: {e}") from e
        except (OSError, ValueError, KeyError) as e:
            raise EncodeFailureError(
                f"{image_format.value} encoding failed: {e}"
            ) from e

        encoded = buffer.getvalue()
        logger.debug(
            "Encoded %s: %d -> %d bytes", image_format.value, len(data), len(encoded)
        )
        return encoded

    @staticmethod
    def _save_args(
        image_format: ImageFormat,
        quality: int,
        effort: int,
        options: Mapping[str, Any],
    ) -> dict[str, Any]:
        args: dict[str, Any]
        if image_format is ImageFormat.AVIF:
            args = {"quality": quality, "speed": max(0, 9 - effort)}
        elif image_format is ImageFormat.WEBP:
            args = {"quality": quality, "method": min(effort, 6)}
        elif image_format is ImageFormat.PNG:
            args = {"compress_level": effort}
        elif image_format is ImageFormat.JPEG:
            args = {"quality": quality, "optimize": True}
        else:
            args = {"optimize": True}
        args.update(options)
        return args

    @staticmethod
    def _prepare_mode(image: Image.Image, image_format: ImageFormat) -> Image.Image:
        if image.mode in _NATIVE_MODES.get(image_format, ()):
            return image

        has_alpha = image.has_transparency_data
        if image_format is ImageFormat.JPEG:
            if not has_alpha:
                return image.convert("RGB")
            # JPEG has no alpha channel; composite onto white
            rgba = image.convert("RGBA")
            background = Image.new("RGB", rgba.size, (255, 255, 255))
            background.paste(rgba, mask=rgba.getchannel("A"))
            return background

        return image.convert("RGBA" if has_alpha else "RGB")
