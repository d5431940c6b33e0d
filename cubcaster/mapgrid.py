"""Validation of the map part of a scene file and sprite bookkeeping."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from .config import CubError

Grid = List[List[str]]

MAP_CHARS = frozenset("012WESN ")
PLAYER_CHARS = frozenset("WENS")
FLOOR = "@"
SPRITE = "$"

_NEIGHBOURS = (
    (1, -1),
    (1, 0),
    (1, 1),
    (0, 1),
    (-1, 1),
    (-1, 0),
    (-1, -1),
    (0, -1),
)


@dataclass
class Sprite:
    """A sprite centred in its map cell; ``dist`` is the squared player distance."""

    x: float
    y: float
    dist: float = 0.0


@dataclass
class GameMap:
    """A validated map: floor cells are ``@``, sprite cells ``$``."""

    grid: Grid
    player: str
    pos_x: int
    pos_y: int
    width: int
    sprites: List[Sprite] = field(default_factory=list)


def build_grid(lines: Sequence[str]) -> Grid:
    """Turn map lines into rows of cells, rejecting empty lines and stray characters."""
    grid: Grid = []
    for line in lines:
        if not line:
            raise CubError("Wrong map: it has empty lines")
        if not set(line) <= MAP_CHARS:
            raise CubError("Wrong map: extra symbols")
        grid.append(list(line))
    return grid


def find_player(grid: Grid) -> Tuple[str, int, int]:
    """Return the player's letter and cell, requiring exactly one player."""
    found = [
        (cell, x, y)
        for y, row in enumerate(grid)
        for x, cell in enumerate(row)
        if cell in PLAYER_CHARS
    ]
    if len(found) != 1:
        raise CubError("Wrong players count")
    return found[0]


def flood_fill(grid: Grid, x: int, y: int) -> None:
    """Mark every cell reachable from ``(x, y)``, failing if the area is not closed.

    Cells left of or above the grid, past the end of a row, or holding a space
    fail validation; rows below the last one are not examined.
    """
    pending = [(x, y)]
    while pending:
        cx, cy = pending.pop()
        if cx < 0 or cy < 0:
            raise CubError("Map validation failed")
        if cy >= len(grid):
            continue
        row = grid[cy]
        if cx >= len(row):
            raise CubError("Map validation failed")
        cell = row[cx]
        if cell in ("1", FLOOR, SPRITE):
            continue
        if cell == "0" or cell in PLAYER_CHARS:
            row[cx] = FLOOR
        elif cell == "2":
            row[cx] = SPRITE
        else:
            raise CubError("Map validation failed")
        pending.extend((cx + dx, cy + dy) for dx, dy in _NEIGHBOURS)


def collect_sprites(grid: Grid) -> List[Sprite]:
    """Sprites for every filled sprite cell, in row order."""
    return [
        Sprite(x + 0.5, y + 0.5)
        for y, row in enumerate(grid)
        for x, cell in enumerate(row)
        if cell == SPRITE
    ]


def validate_map(lines: Sequence[str]) -> GameMap:
    """Build, check and fill the map, returning it with its player and sprites."""
    grid = build_grid(lines)
    width = max(len(row) for row in grid) if grid else 0
    player, pos_x, pos_y = find_player(grid)
    for y, row in enumerate(grid):
        for x, cell in enumerate(row):
            if cell in "02WESN":
                flood_fill(grid, x, y)
    return GameMap(grid, player, pos_x, pos_y, width, collect_sprites(grid))


def update_sprite_distances(sprites: Sequence[Sprite], px: float, py: float) -> None:
    """Set each sprite's squared distance to the point ``(px, py)``."""
    for sprite in sprites:
        sprite.dist = (px - sprite.x) ** 2 + (py - sprite.y) ** 2


def sort_sprites(sprites: List[Sprite]) -> None:
    """Sort in place from farthest to nearest, keeping ties in order."""
    sprites.sort(key=lambda sprite: sprite.dist, reverse=True)