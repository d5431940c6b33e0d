"""Ray casting of walls and sprites into a packed-pixel frame."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .config import Color
from .mapgrid import FLOOR, Sprite
from .xpm import Texture

Grid = Sequence[Sequence[str]]

PLANE = 0.66
"""Half-width of the camera plane relative to the direction vector."""
WALL_SCALE = 0.75
"""Ratio of a wall's height on screen to the window width at distance 1."""
SPRITE_SHIFT = 1
"""Vertical offset, in pixels, applied to sprites."""

_DIRECTIONS = {
    "N": (0.0, -1.0, PLANE, 0.0),
    "S": (0.0, 1.0, -PLANE, 0.0),
    "W": (-1.0, 0.0, 0.0, -PLANE),
    "E": (1.0, 0.0, 0.0, PLANE),
}


def _tdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def make_trgb(t: int, r: int, g: int, b: int) -> int:
    """Pack transparency and colour channels into one integer."""
    return t << 24 | r << 16 | g << 8 | b


@dataclass
class Frame:
    """A ``width`` x ``height`` image of 32-bit pixels stored row by row."""

    width: int
    height: int
    pixels: List[int] = field(init=False)

    def __post_init__(self) -> None:
        self.pixels = [0] * (self.width * self.height)

    def _index(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height}")
        return y * self.width + x

    def put(self, x: int, y: int, color: int) -> None:
        """Set the pixel at column ``x``, row ``y``."""
        self.pixels[self._index(x, y)] = color & 0xFFFFFFFF

    def __getitem__(self, xy: Tuple[int, int]) -> int:
        return self.pixels[self._index(*xy)]


def _is_floor(grid: Grid, x: int, y: int) -> bool:
    if x < 0 or y < 0 or y >= len(grid) or x >= len(grid[y]):
        return False
    return grid[y][x] == FLOOR


@dataclass
class Camera:
    """Player position, view direction and camera plane."""

    pos_x: float
    pos_y: float
    dir_x: float
    dir_y: float
    plane_x: float
    plane_y: float

    def _rotate(self, angle: float) -> None:
        cos_a, sin_a = math.cos(angle), math.sin(angle)
        old_y = self.dir_y
        self.dir_y = self.dir_y * cos_a - self.dir_x * sin_a
        self.dir_x = old_y * sin_a + self.dir_x * cos_a
        old_y = self.plane_y
        self.plane_y = self.plane_y * cos_a - self.plane_x * sin_a
        self.plane_x = old_y * sin_a + self.plane_x * cos_a

    def rotate_left(self, speed: float) -> None:
        """Turn the view by ``speed`` radians to the left."""
        self._rotate(speed)

    def rotate_right(self, speed: float) -> None:
        """Turn the view by ``speed`` radians to the right."""
        self._rotate(-speed)

    def _move(self, grid: Grid, dx: float, dy: float) -> None:
        if _is_floor(grid, int(self.pos_x), int(self.pos_y + dy)):
            self.pos_y += dy
        if _is_floor(grid, int(self.pos_x + dx), int(self.pos_y)):
            self.pos_x += dx

    def step_forward(self, grid: Grid, speed: float) -> None:
        """Move along the view direction, sliding along walls."""
        self._move(grid, self.dir_x * speed, self.dir_y * speed)

    def step_back(self, grid: Grid, speed: float) -> None:
        """Move against the view direction."""
        self._move(grid, -self.dir_x * speed, -self.dir_y * speed)

    def step_right(self, grid: Grid, speed: float) -> None:
        """Strafe along the camera plane."""
        self._move(grid, self.plane_x * speed, self.plane_y * speed)

    def step_left(self, grid: Grid, speed: float) -> None:
        """Strafe against the camera plane."""
        self._move(grid, -self.plane_x * speed, -self.plane_y * speed)


def camera_for(player: str, x: int, y: int) -> Camera:
    """Camera centred in cell ``(x, y)`` facing the player's compass letter."""
    try:
        dir_x, dir_y, plane_x, plane_y = _DIRECTIONS[player]
    except KeyError as exc:
        raise ValueError(f"unknown player direction: {player!r}") from exc
    return Camera(x + 0.5, y + 0.5, dir_x, dir_y, plane_x, plane_y)


@dataclass(frozen=True)
class RayHit:
    """Where a ray met a wall: ``side`` 0 for a vertical grid line, 1 for horizontal."""

    distance: float
    side: int
    map_x: int
    map_y: int
    ray_dir_x: float
    ray_dir_y: float


def _is_wall(grid: Grid, x: int, y: int) -> bool:
    if x < 0 or y < 0 or y >= len(grid) or x >= len(grid[y]):
        return True
    return grid[y][x] == "1"


def cast_ray(grid: Grid, camera: Camera, screen_x: int, width: int) -> RayHit:
    """Cast the ray of screen column ``screen_x`` until it meets a wall."""
    if width <= 0:
        raise ValueError("width must be positive")
    cam = 2 * screen_x / width - 1
    ray_x = camera.dir_x + camera.plane_x * cam
    ray_y = camera.dir_y + camera.plane_y * cam
    map_x, map_y = int(camera.pos_x), int(camera.pos_y)
    if ray_y == 0:
        delta_x = 0.0
    else:
        delta_x = abs(1 / ray_x) if ray_x != 0 else 1.0
    if ray_x == 0:
        delta_y = 0.0
    else:
        delta_y = abs(1 / ray_y) if ray_y != 0 else 1.0
    if ray_x < 0:
        step_x, side_x = -1, (camera.pos_x - map_x) * delta_x
    else:
        step_x, side_x = 1, (map_x + 1 - camera.pos_x) * delta_x
    if ray_y < 0:
        step_y, side_y = -1, (camera.pos_y - map_y) * delta_y
    else:
        step_y, side_y = 1, (map_y + 1 - camera.pos_y) * delta_y
    side = -1
    while True:
        if side_x < side_y:
            side_x += delta_x
            map_x += step_x
            side = 0
        else:
            side_y += delta_y
            map_y += step_y
            side = 1
        if _is_wall(grid, map_x, map_y):
            break
    if side:
        distance = (map_y - camera.pos_y + (1 - step_y) // 2) / ray_y
    else:
        distance = (map_x - camera.pos_x + (1 - step_x) // 2) / ray_x
    return RayHit(distance, side, map_x, map_y, ray_x, ray_y)


def wall_span(distance: float, width: int, height: int) -> Tuple[int, int, int]:
    """Wall height on screen and its first and last rows, clamped to the window."""
    if distance <= 0:
        raise ValueError("distance must be positive")
    line = int(width / distance * WALL_SCALE)
    start = -_tdiv(line, 2) + height // 2
    finish = _tdiv(line, 2) + height // 2
    return line, max(start, 0), min(finish, height - 1)


def _texel(texture: Texture, x: int, y: int) -> int:
    color = texture.pixel(x, y)
    return 0 if color >= 0x80000000 else color


@dataclass
class Renderer:
    """Draws the view of a map from a camera."""

    grid: Grid
    width: int
    height: int
    north: Texture
    south: Texture
    east: Texture
    west: Texture
    sprite: Texture
    ceiling: Color
    floor: Color
    sprites: List[Sprite] = field(default_factory=list)

    def _side_texture(self, hit: RayHit) -> Texture:
        if hit.side:
            return self.south if hit.ray_dir_y > 0 else self.north
        return self.east if hit.ray_dir_x > 0 else self.west

    def _draw_column(self, frame: Frame, camera: Camera, hit: RayHit, x: int) -> None:
        line, start, finish = wall_span(hit.distance, self.width, self.height)
        texture = self._side_texture(hit)
        if hit.side == 0:
            wall_x = camera.pos_y + hit.distance * hit.ray_dir_y
        else:
            wall_x = camera.pos_x + hit.distance * hit.ray_dir_x
        wall_x -= math.floor(wall_x)
        tex_x = int(wall_x * texture.width)
        if (hit.side == 0 and hit.ray_dir_x > 0) or (hit.side == 1 and hit.ray_dir_y < 0):
            tex_x = texture.width - tex_x - 1
        step = texture.height / line if line else 0.0
        tex_pos = (start - self.height // 2 + _tdiv(line, 2)) * step
        modulus = texture.height - 1
        ceiling, floor = self.ceiling.to_int(), self.floor.to_int()
        for y in range(self.height):
            if y < start:
                frame.put(x, y, ceiling)
            elif y < finish:
                tex_y = int(tex_pos) % modulus if modulus > 0 else 0
                tex_pos += step
                frame.put(x, y, _texel(texture, tex_x, tex_y))
            else:
                frame.put(x, y, floor)

    def _draw_walls(self, frame: Frame, camera: Camera) -> List[float]:
        zbuffer: List[float] = []
        for x in range(self.width):
            hit = cast_ray(self.grid, camera, x, self.width)
            self._draw_column(frame, camera, hit, x)
            zbuffer.append(hit.distance)
        return zbuffer

    def render(self, camera: Camera) -> Frame:
        """Draw walls, ceiling, floor and sprites into a new frame."""
        frame = Frame(self.width, self.height)
        zbuffer = self._draw_walls(frame, camera)
        self.draw_sprites(frame, camera, zbuffer)
        return frame

    def _draw_sprite(
        self, frame: Frame, camera: Camera, zbuffer: Sequence[float], sprite: Sprite
    ) -> None:
        rel_x = sprite.x - camera.pos_x
        rel_y = sprite.y - camera.pos_y
        inv_det = 1.0 / (camera.plane_x * camera.dir_y - camera.plane_y * camera.dir_x)
        trans_x = inv_det * (camera.dir_y * rel_x - camera.dir_x * rel_y)
        trans_y = inv_det * (-camera.plane_y * rel_x + camera.plane_x * rel_y)
        if trans_y <= 0:
            return
        screen_x = int((self.width // 2) * (1 + trans_x / trans_y))
        size = abs(int(self.width / trans_y * WALL_SCALE))
        half = _tdiv(size, 2)
        start_y = max(-half + self.height // 2 + SPRITE_SHIFT, 0)
        end_y = min(half + self.height // 2 + SPRITE_SHIFT, self.height - 1)
        left = -half + screen_x
        start_x = max(left, 0)
        end_x = min(half + screen_x, self.width - 1)
        texture = self.sprite
        for x in range(start_x, end_x):
            tex_x = _tdiv(_tdiv(256 * (x - left) * texture.width, size), 256)
            if not (0 < x < self.width and trans_y < zbuffer[x]):
                continue
            for y in range(start_y, end_y):
                d = (y - SPRITE_SHIFT) * 256 - self.height * 128 + size * 128
                tex_y = _tdiv(_tdiv(d * texture.height, size), 256)
                if 0 <= tex_x < texture.width and 0 <= tex_y < texture.height:
                    color = texture.pixel(tex_x, tex_y)
                    if color & 0x00FFFFFF:
                        frame.put(x, y, color)

    def draw_sprites(
        self, frame: Frame, camera: Camera, zbuffer: Sequence[float]
    ) -> None:
        """Draw the sprites in list order, hidden where a wall in ``zbuffer`` is nearer."""
        for sprite in self.sprites:
            self._draw_sprite(frame, camera, zbuffer, sprite)