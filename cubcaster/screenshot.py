"""Writing rendered frames as 32-bit BMP images."""

from __future__ import annotations

import struct
from typing import Sequence

BITS_PER_PIXEL = 32
FILE_HEADER_SIZE = 14
INFO_HEADER_SIZE = 40
PIXEL_OFFSET = FILE_HEADER_SIZE + INFO_HEADER_SIZE
DEFAULT_NAME = "scrnsht.bmp"

_BYTES_PER_PIXEL = BITS_PER_PIXEL // 8


def bmp_header(width: int, height: int) -> bytes:
    """File and info headers of an uncompressed bottom-up 32-bit BMP."""
    if width <= 0 or height <= 0:
        raise ValueError("width and height must be positive")
    size = PIXEL_OFFSET + _BYTES_PER_PIXEL * width * height
    file_header = struct.pack("<2sIHHI", b"BM", size & 0xFFFFFFFF, 0, 0, PIXEL_OFFSET)
    info_header = struct.pack(
        "<IiiHHIIiiII",
        INFO_HEADER_SIZE,
        width,
        height,
        1,
        BITS_PER_PIXEL,
        0,
        0,
        0,
        0,
        0,
        0,
    )
    return file_header + info_header


def encode_bmp(width: int, height: int, pixels: Sequence[int]) -> bytes:
    """Encode ``width * height`` packed pixels, given top row first, as a BMP."""
    if len(pixels) != width * height:
        raise ValueError(
            f"expected {width * height} pixels, got {len(pixels)}"
        )
    header = bmp_header(width, height)
    rows = (
        struct.pack(
            f"<{width}I",
            *(value & 0xFFFFFFFF for value in pixels[y * width : (y + 1) * width]),
        )
        for y in reversed(range(height))
    )
    return header + b"".join(rows)


def save_bmp(
    width: int, height: int, pixels: Sequence[int], path: str = DEFAULT_NAME
) -> None:
    """Write the pixels to ``path`` as a BMP file."""
    data = encode_bmp(width, height, pixels)
    with open(path, "wb") as handle:
        handle.write(data)