"""Parsing and validation of the settings part of a ``.cub`` scene file."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

PARAM_KEYS = frozenset({"R", "WE", "EA", "SO", "NO", "S", "C", "F"})
WALL_SIDES = frozenset({"WE", "EA", "SO", "NO"})
TEXTURE_ATTRS = {
    "WE": "west",
    "EA": "east",
    "SO": "south",
    "NO": "north",
    "S": "sprite",
}
COLOR_ATTRS = {"C": "ceiling", "F": "floor"}
SCREENSHOT_LIMIT = 10000

_LINE_STARTS = "AECFNORSW"
_NUMBER = re.compile(r" *[0-9]+ *")
_DIGITS = re.compile(r"[0-9]*")


class CubError(Exception):
    """Raised when a scene file or its command line is invalid."""


def _atoi(text: str) -> int:
    """Leading-integer conversion that ignores trailing garbage."""
    rest = text.lstrip(" \n\t\v\f\r")
    sign = -1 if rest[:1] == "-" else 1
    if rest[:1] in ("+", "-"):
        rest = rest[1:]
    digits = _DIGITS.match(rest).group()
    return sign * int(digits) if digits else 0


def is_number(text: Optional[str]) -> bool:
    """True for digits optionally surrounded by spaces, with no inner spaces."""
    return text is not None and _NUMBER.fullmatch(text) is not None


def is_param(token: str) -> bool:
    """True if the token names one of the scene settings."""
    return token in PARAM_KEYS


def is_wall_side(token: Optional[str]) -> bool:
    """True if the token names one of the four wall textures."""
    return bool(token) and token in WALL_SIDES


def is_xpm_file(path: Optional[str]) -> bool:
    """True if the path carries the ``.xpm`` extension."""
    return path is not None and path.endswith(".xpm")


def count_commas(text: str) -> int:
    """Number of commas in the text."""
    return text.count(",")


def is_colors_set(line: str) -> bool:
    """True if a whole ``C``/``F`` line holds three numeric components."""
    if ",," in line or len(line) < 2:
        return False
    parts = [part for part in line[2:].split(",") if part]
    return len(parts) == 3 and all(is_number(part) for part in parts)


@dataclass(frozen=True)
class Color:
    """An RGB colour from the scene file."""

    r: int
    g: int
    b: int

    def to_int(self) -> int:
        """Packed ``0x00RRGGBB`` value."""
        return self.r << 16 | self.g << 8 | self.b


@dataclass(frozen=True)
class Resolution:
    """Window size in pixels."""

    width: int
    height: int


@dataclass
class SceneConfig:
    """Settings read from the header of a scene file."""

    resolution: Optional[Resolution] = None
    north: Optional[str] = None
    south: Optional[str] = None
    west: Optional[str] = None
    east: Optional[str] = None
    sprite: Optional[str] = None
    ceiling: Optional[Color] = None
    floor: Optional[Color] = None
    screenshot: bool = False

    def set_resolution(self, res_x: str, res_y: str, max_x: int, max_y: int) -> None:
        """Store the resolution, clamped to the given maximum."""
        res_x = res_x.lstrip("0")
        res_y = res_y.lstrip("0")
        if self.resolution is not None or not res_x or not res_y:
            raise CubError("Wrong resolution")
        width = max_x if len(res_x) > 5 else min(_atoi(res_x), max_x)
        height = max_y if len(res_y) > 5 else min(_atoi(res_y), max_y)
        self.resolution = Resolution(width, height)

    def set_texture(self, kind: str, path: str) -> None:
        """Store a texture path after checking that the file can be opened."""
        try:
            with open(path, "rb"):
                pass
        except OSError as exc:
            raise CubError("Invalid map (file couldn't be open)") from exc
        attr = TEXTURE_ATTRS.get(kind)
        if attr is None or getattr(self, attr) is not None:
            raise CubError("Invalid map (textures)")
        setattr(self, attr, path)

    def set_color(self, kind: str, line: str) -> None:
        """Store the ceiling (``C``) or floor (``F``) colour from a whole line."""
        attr = COLOR_ATTRS.get(kind)
        if attr is None:
            raise ValueError(f"unknown colour kind: {kind!r}")
        body = line[2:]
        if count_commas(body) != 2:
            raise CubError("Invalid map (commas in colors)")
        parts = [part for part in body.split(",") if part]
        if getattr(self, attr) is not None:
            raise CubError("Colors are repeating")
        if len(parts) != 3 or any(len(part.strip(" ")) > 3 for part in parts):
            raise CubError("Colors are wrong")
        r, g, b = (_atoi(part) for part in parts)
        setattr(self, attr, Color(r, g, b))

    def check_complete(self) -> None:
        """Raise unless every setting is present and in range."""
        paths = (self.west, self.east, self.south, self.north, self.sprite)
        if (
            self.resolution is None
            or self.resolution.width <= 0
            or self.resolution.height <= 0
            or not all(paths)
            or self.ceiling is None
            or self.floor is None
            or any(
                value > 255
                for color in (self.ceiling, self.floor)
                for value in (color.r, color.g, color.b)
            )
        ):
            raise CubError("Invalid map")


def _apply_line(
    config: SceneConfig, tokens: Sequence[str], line: str, max_x: int, max_y: int
) -> None:
    if line[:1] not in _LINE_STARTS:
        return
    head = tokens[0] if tokens else ""
    if (
        head.startswith("R")
        and len(tokens) == 3
        and is_number(tokens[1])
        and is_number(tokens[2])
    ):
        config.set_resolution(tokens[1], tokens[2], max_x, max_y)
    if (
        (is_wall_side(head) or head.startswith("S"))
        and len(tokens) == 2
        and is_xpm_file(tokens[1])
    ):
        config.set_texture(head, tokens[1])
    if head in COLOR_ATTRS and len(tokens) > 1 and is_colors_set(line):
        config.set_color(head, line)


def parse_scene(
    lines: Iterable[str],
    screenshot: bool = False,
    screen_size: Optional[Tuple[int, int]] = None,
) -> Tuple[SceneConfig, List[str]]:
    """Read the settings and return them with the lines of the map that follows.

    The resolution is limited to ``screen_size``; in screenshot mode, or when
    no screen size is known, it is limited to ``SCREENSHOT_LIMIT`` each way.
    The last line is never read as a setting.
    """
    lines = list(lines)
    config = SceneConfig(screenshot=screenshot)
    if screenshot or screen_size is None:
        max_x = max_y = SCREENSHOT_LIMIT
    else:
        max_x, max_y = screen_size
    for index, line in enumerate(lines[:-1]):
        tokens = [token for token in line.split(" ") if token]
        if tokens and not (is_param(tokens[0]) and len(tokens) > 1):
            config.check_complete()
            return config, lines[index:]
        _apply_line(config, tokens, line, max_x, max_y)
    raise CubError("No map found")