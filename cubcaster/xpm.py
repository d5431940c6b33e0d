"""Loading of XPM texture files into packed-pixel textures."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

TRANSPARENT = 0xFF000000
"""Pixel value given to the ``None`` colour."""

_QUOTED = re.compile(r'"([^"]*)"')
_LEADING_INT = re.compile(r"[ \t\n\v\f\r]*([+-]?)([0-9]*)")
_HEX = re.compile(r"[ \t\n\v\f\r]*([+-]?)(?:0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]*)")

_COLOR_NAMES: Dict[str, int] = {
    "snow": 0xFFFAFA,
    "ghost white": 0xF8F8FF,
    "ghostwhite": 0xF8F8FF,
    "white smoke": 0xF5F5F5,
    "whitesmoke": 0xF5F5F5,
    "gainsboro": 0xDCDCDC,
    "linen": 0xFAF0E6,
    "bisque": 0xFFE4C4,
    "moccasin": 0xFFE4B5,
    "ivory": 0xFFFFF0,
    "azure": 0xF0FFFF,
    "lavender": 0xE6E6FA,
    "white": 0xFFFFFF,
    "black": 0x000000,
    "gray": 0xBEBEBE,
    "grey": 0xBEBEBE,
    "light grey": 0xD3D3D3,
    "lightgrey": 0xD3D3D3,
    "light gray": 0xD3D3D3,
    "lightgray": 0xD3D3D3,
    "dark grey": 0xA9A9A9,
    "darkgrey": 0xA9A9A9,
    "dark gray": 0xA9A9A9,
    "darkgray": 0xA9A9A9,
    "dim gray": 0x696969,
    "dimgray": 0x696969,
    "slate gray": 0x708090,
    "slategray": 0x708090,
    "midnight blue": 0x191970,
    "midnightblue": 0x191970,
    "navy": 0x000080,
    "navy blue": 0x000080,
    "navyblue": 0x000080,
    "royal blue": 0x4169E1,
    "royalblue": 0x4169E1,
    "blue": 0x0000FF,
    "dark blue": 0x00008B,
    "darkblue": 0x00008B,
    "light blue": 0xADD8E6,
    "lightblue": 0xADD8E6,
    "sky blue": 0x87CEEB,
    "skyblue": 0x87CEEB,
    "steel blue": 0x4682B4,
    "steelblue": 0x4682B4,
    "turquoise": 0x40E0D0,
    "cyan": 0x00FFFF,
    "dark cyan": 0x008B8B,
    "darkcyan": 0x008B8B,
    "aquamarine": 0x7FFFD4,
    "dark green": 0x006400,
    "darkgreen": 0x006400,
    "sea green": 0x2E8B57,
    "seagreen": 0x2E8B57,
    "green": 0x00FF00,
    "light green": 0x90EE90,
    "lightgreen": 0x90EE90,
    "lime green": 0x32CD32,
    "limegreen": 0x32CD32,
    "forest green": 0x228B22,
    "forestgreen": 0x228B22,
    "olive drab": 0x6B8E23,
    "olivedrab": 0x6B8E23,
    "khaki": 0xF0E68C,
    "yellow": 0xFFFF00,
    "light yellow": 0xFFFFE0,
    "lightyellow": 0xFFFFE0,
    "gold": 0xFFD700,
    "goldenrod": 0xDAA520,
    "sienna": 0xA0522D,
    "peru": 0xCD853F,
    "burlywood": 0xDEB887,
    "beige": 0xF5F5DC,
    "wheat": 0xF5DEB3,
    "tan": 0xD2B48C,
    "chocolate": 0xD2691E,
    "firebrick": 0xB22222,
    "brown": 0xA52A2A,
    "salmon": 0xFA8072,
    "orange": 0xFFA500,
    "dark orange": 0xFF8C00,
    "darkorange": 0xFF8C00,
    "coral": 0xFF7F50,
    "tomato": 0xFF6347,
    "orange red": 0xFF4500,
    "orangered": 0xFF4500,
    "red": 0xFF0000,
    "dark red": 0x8B0000,
    "darkred": 0x8B0000,
    "hot pink": 0xFF69B4,
    "hotpink": 0xFF69B4,
    "deep pink": 0xFF1493,
    "deeppink": 0xFF1493,
    "pink": 0xFFC0CB,
    "maroon": 0xB03060,
    "magenta": 0xFF00FF,
    "dark magenta": 0x8B008B,
    "darkmagenta": 0x8B008B,
    "violet": 0xEE82EE,
    "plum": 0xDDA0DD,
    "orchid": 0xDA70D6,
    "purple": 0xA020F0,
    "thistle": 0xD8BFD8,
    "none": -1,
}


class XpmError(Exception):
    """Raised when an XPM image cannot be read."""


@dataclass(frozen=True)
class Texture:
    """A decoded image: ``pixels`` holds ``width * height`` values, row by row."""

    width: int
    height: int
    pixels: Tuple[int, ...]

    def pixel(self, x: int, y: int) -> int:
        """Packed colour at column ``x``, row ``y``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height}")
        return self.pixels[y * self.width + x]


def _leading_int(text: str) -> int:
    match = _LEADING_INT.match(text)
    sign, digits = match.groups()
    if not digits:
        return 0
    return -int(digits) if sign == "-" else int(digits)


def split_words(text: str) -> List[str]:
    """Split on spaces and tabs, dropping empty words."""
    return [word for word in re.split(r"[ \t]+", text) if word]


def _find_outside_quotes(text: str, needle: str, start: int = 0) -> int:
    inside = False
    for index in range(start, len(text) - len(needle) + 1):
        if text[index] == '"':
            inside = not inside
        if not inside and text.startswith(needle, index):
            return index
    return -1


def _blank(text: str, begin: int, end: int) -> str:
    return text[:begin] + " " * (end - begin) + text[end:]


def strip_comments(text: str) -> str:
    """Replace ``/* */`` and ``//`` comments outside quotes with spaces."""
    while (begin := _find_outside_quotes(text, "/*")) != -1:
        close = text.find("*/", begin + 2)
        end = len(text) if close == -1 else close + 2
        text = _blank(text, begin, end)
    while (begin := _find_outside_quotes(text, "//")) != -1:
        newline = text.find("\n", begin + 2)
        end = len(text) if newline == -1 else newline + 1
        text = _blank(text, begin, end)
    return text


def color_from_text(name: str, extra: Optional[str] = None) -> int:
    """Colour value of an XPM colour spec: ``#RRGGBB`` or a colour name.

    ``extra`` is the following word, joined to the name for two-word names.
    Unknown names give 0 and ``None`` gives -1.
    """
    if name.startswith("#"):
        sign, digits = _HEX.match(name[1:]).groups()
        value = int(digits, 16) if digits else 0
        return -value if sign == "-" else value
    if extra is not None:
        name = f"{name} {extra}"
    return _COLOR_NAMES.get(name.lower(), 0)


def _read_palette(
    lines: Sequence[str], count: int, cpp: int
) -> Dict[str, int]:
    palette: Dict[str, int] = {}
    for line in lines[:count]:
        words = split_words(line[cpp:])
        try:
            index = words.index("c") + 1
        except ValueError as exc:
            raise XpmError("colour line without a 'c' key") from exc
        if index >= len(words):
            raise XpmError("colour line without a colour")
        extra = words[index + 1] if index + 1 < len(words) else None
        color = color_from_text(words[index], extra)
        key = line[:cpp]
        # Short keys are a direct table where later lines win; longer keys are
        # searched in definition order so the first line wins.
        if cpp <= 2:
            palette[key] = color
        else:
            palette.setdefault(key, color)
    if len(lines) < count:
        raise XpmError("missing colour lines")
    return palette


def parse_xpm(text: str) -> Texture:
    """Decode the text of an XPM file."""
    strings = _QUOTED.findall(strip_comments(text))
    if not strings:
        raise XpmError("missing XPM header")
    header = split_words(strings[0])
    if len(header) < 4:
        raise XpmError("incomplete XPM header")
    width, height, count, cpp = (_leading_int(word) for word in header[:4])
    if not (width and height and count and cpp):
        raise XpmError("invalid XPM header")
    palette = _read_palette(strings[1:], count, cpp)
    rows = strings[1 + count : 1 + count + height]
    if len(rows) < height:
        raise XpmError("missing pixel rows")
    pixels: List[int] = []
    for row in rows:
        for x in range(width):
            color = palette.get(row[cpp * x : cpp * x + cpp], 0)
            pixels.append(TRANSPARENT if color == -1 else color)
    return Texture(width, height, tuple(pixels))


def load_xpm(path: str) -> Texture:
    """Read and decode an XPM file."""
    try:
        with open(path, "r", encoding="latin-1") as handle:
            text = handle.read()
    except OSError as exc:
        raise XpmError(f"cannot read {path}") from exc
    return parse_xpm(text)