"""Decoding of PNG screenshots into raw BGRx pixel buffers."""

from __future__ import annotations

import io
from dataclasses import dataclass

from PIL import Image

from .protocol import PIXEL_BYTES


class ConversionError(Exception):
    """Raised when PNG data cannot be decoded into raw pixels."""


@dataclass(frozen=True)
class RawImage:
    """A tightly packed BGRx image, four bytes per pixel."""

    data: bytes
    width: int
    height: int

    @property
    def length(self) -> int:
        return len(self.data)


def convert_png_to_raw(png_data: bytes) -> RawImage:
    """Decode PNG bytes into a BGRx buffer whose padding byte is 0xFF."""
    try:
        with Image.open(io.BytesIO(png_data), formats=["PNG"]) as img:
            img.load()
            rgb = img.convert("RGB")
    except (OSError, ValueError, SyntaxError) as exc:
        raise ConversionError(f"cannot decode PNG data: {exc}") from exc

    red, green, blue = rgb.split()
    padding = Image.new("L", rgb.size, 0xFF)
    data = Image.merge("RGBA", (blue, green, red, padding)).tobytes()

    width, height = rgb.size
    if len(data) != width * height * PIXEL_BYTES:
        raise ConversionError("decoded pixel buffer has an unexpected size")
    return RawImage(data=data, width=width, height=height)