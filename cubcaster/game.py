"""Game state: held keys, movement speeds and the per-frame update."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Dict

from .config import CubError, SceneConfig
from .mapgrid import GameMap, sort_sprites, update_sprite_distances
from .raycaster import Frame, Renderer, camera_for
from .xpm import Texture, XpmError, load_xpm

MOVE_SPEED = 0.1
ROTATION_SPEED = 0.03


class Key(IntEnum):
    """Key codes understood by the game."""

    A = 0
    S = 1
    D = 2
    W = 13
    ARROW_LEFT = 123
    ARROW_RIGHT = 124
    ARROW_DOWN = 125
    ARROW_UP = 126
    SHIFT_LEFT = 257
    SHIFT_RIGHT = 258
    ESCAPE = 53


@dataclass
class KeyState:
    """Which movement keys are currently held."""

    forward: bool = False
    back: bool = False
    left: bool = False
    right: bool = False
    turn_left: bool = False
    turn_right: bool = False


_HELD: Dict[Key, str] = {
    Key.W: "forward",
    Key.S: "back",
    Key.A: "left",
    Key.D: "right",
    Key.ARROW_LEFT: "turn_left",
    Key.ARROW_RIGHT: "turn_right",
}
_SHIFT = frozenset({Key.SHIFT_LEFT, Key.SHIFT_RIGHT})
_TEXTURE_NAMES = ("south", "north", "east", "west", "sprite")


def _to_key(code: int):
    try:
        return Key(code)
    except ValueError:
        return None


class Game:
    """A running scene: camera, renderer and input state."""

    def __init__(
        self,
        config: SceneConfig,
        game_map: GameMap,
        loader: Callable[[str], Texture] = load_xpm,
    ) -> None:
        config.check_complete()
        textures: Dict[str, Texture] = {}
        for name in _TEXTURE_NAMES:
            try:
                textures[name] = loader(getattr(config, name))
            except XpmError as exc:
                raise CubError("Invalid file entity") from exc
        self.config = config
        self.grid = game_map.grid
        self.sprites = game_map.sprites
        self.camera = camera_for(game_map.player, game_map.pos_x, game_map.pos_y)
        self.renderer = Renderer(
            grid=self.grid,
            width=config.resolution.width,
            height=config.resolution.height,
            ceiling=config.ceiling,
            floor=config.floor,
            sprites=self.sprites,
            **textures,
        )
        self.keys = KeyState()
        self.move_speed = MOVE_SPEED
        self.rotation_speed = ROTATION_SPEED
        self.running = True

    def key_press(self, code: int) -> None:
        """Handle a key going down."""
        key = _to_key(code)
        if key is None:
            return
        if key is Key.ESCAPE:
            self.running = False
        if key in _HELD:
            setattr(self.keys, _HELD[key], True)
        if key in _SHIFT:
            self.move_speed *= 2
            self.rotation_speed *= 2

    def key_release(self, code: int) -> None:
        """Handle a key going up."""
        key = _to_key(code)
        if key is None:
            return
        if key in _HELD:
            setattr(self.keys, _HELD[key], False)
        if key in _SHIFT:
            self.move_speed /= 2
            self.rotation_speed /= 2

    def tick(self) -> Frame:
        """Apply held keys, draw a frame and reorder sprites for the next one."""
        camera, keys = self.camera, self.keys
        if keys.forward:
            camera.step_forward(self.grid, self.move_speed)
        if keys.back:
            camera.step_back(self.grid, self.move_speed)
        if keys.left:
            camera.step_left(self.grid, self.move_speed)
        if keys.right:
            camera.step_right(self.grid, self.move_speed)
        if keys.turn_left:
            camera.rotate_left(self.rotation_speed)
        if keys.turn_right:
            camera.rotate_right(self.rotation_speed)
        frame = self.renderer.render(camera)
        update_sprite_distances(self.sprites, camera.pos_x, camera.pos_y)
        sort_sprites(self.sprites)
        return frame