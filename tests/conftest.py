"""Shared test fixtures for the asset transcoder."""

from __future__ import annotations

import io
import threading
from collections.abc import Callable, Mapping
from typing import Any

import pytest
from PIL import Image

from asset_transcoder.domain import BuildGraph, Chunk, Entrypoint, ImageFormat
from asset_transcoder.exceptions import EncodeFailureError


class FakeEncoder:
    """Deterministic encoder for engine tests.

    Output is ``<format>|q<quality>|e<effort>|`` followed by the input, so
    tests can assert exactly what was encoded and how. Inputs listed in
    ``fail_on`` raise EncodeFailureError; ``crash_on`` raises a plain
    RuntimeError to exercise unexpected-error handling.
    """

    def __init__(
        self,
        formats: set[ImageFormat] | None = None,
        fail_on: set[bytes] | None = None,
        crash_on: set[bytes] | None = None,
    ) -> None:
        self.formats = formats if formats is not None else set(ImageFormat)
        self.fail_on = fail_on or set()
        self.crash_on = crash_on or set()
        self.calls: list[dict[str, Any]] = []
        self._lock = threading.Lock()

    def supports(self, image_format: ImageFormat) -> bool:
        return image_format in self.formats

    def encode(
        self,
        data: bytes,
        image_format: ImageFormat,
        *,
        quality: int,
        effort: int,
        options: Mapping[str, Any] | None = None,
    ) -> bytes:
        with self._lock:
            self.calls.append(
                {
                    "data": data,
                    "format": image_format,
                    "quality": quality,
                    "effort": effort,
                    "options": dict(options or {}),
                }
            )
        if data in self.crash_on:
            raise RuntimeError("codec crashed")
        if data in self.fail_on:
            raise EncodeFailureError("corrupt image data")
        return fake_encoded(data, image_format, quality, effort)


def fake_encoded(
    data: bytes, image_format: ImageFormat, quality: int, effort: int
) -> bytes:
    """Bytes FakeEncoder produces for the given call."""
    return f"{image_format.value}|q{quality}|e{effort}|".encode() + data


def make_image_bytes(
    image_format: str = "PNG",
    size: tuple[int, int] = (16, 16),
    mode: str = "RGB",
    color: Any = (200, 30, 30),
) -> bytes:
    """Encode a solid-color test image with Pillow."""
    buffer = io.BytesIO()
    Image.new(mode, size, color).save(buffer, format=image_format)
    return buffer.getvalue()


@pytest.fixture
def fake_encoder() -> FakeEncoder:
    """Encoder that supports every format and never fails."""
    return FakeEncoder()


@pytest.fixture
def make_fake_encoder() -> Callable[..., FakeEncoder]:
    """Factory for FakeEncoder with custom failure sets."""
    return FakeEncoder


@pytest.fixture
def encoded_by() -> Callable[[bytes, ImageFormat, int, int], bytes]:
    """Expected FakeEncoder output for a call."""
    return fake_encoded


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    """Factory for Pillow-encoded test images."""
    return make_image_bytes


@pytest.fixture
def png_bytes() -> bytes:
    """A small opaque PNG."""
    return make_image_bytes("PNG")


@pytest.fixture
def rgba_png_bytes() -> bytes:
    """A small PNG with a transparent area."""
    return make_image_bytes("PNG", mode="RGBA", color=(0, 120, 255, 0))


@pytest.fixture
def jpeg_bytes() -> bytes:
    """A small JPEG."""
    return make_image_bytes("JPEG")


@pytest.fixture
def main_chunk() -> Chunk:
    """Chunk that owns the app bundle and logo."""
    return Chunk(id="main", name="main", files={"app.js", "app.css", "logo.png"})


@pytest.fixture
def vendor_chunk() -> Chunk:
    """Chunk with no images."""
    return Chunk(id="vendor", name="vendor", files={"vendor.js"})


@pytest.fixture
def build_graph(main_chunk: Chunk, vendor_chunk: Chunk) -> BuildGraph:
    """Graph with one entrypoint over both chunks."""
    return BuildGraph(
        chunks=[main_chunk, vendor_chunk],
        entrypoints={"main": Entrypoint("main", [main_chunk, vendor_chunk])},
    )
