"""Command line entry point: read a scene, then show it or save a screenshot."""

from __future__ import annotations

import sys
from array import array
from typing import List, Optional, Sequence, Tuple

from .config import CubError, parse_scene
from .game import Game, Key
from .mapgrid import validate_map
from .screenshot import DEFAULT_NAME, save_bmp

SAVE_FLAG = "--save"
WINDOW_TITLE = "cub 21"


def check_args(argv: Sequence[str]) -> Tuple[str, bool]:
    """Return the scene path and whether a screenshot was asked for."""
    if not argv or (len(argv) > 1 and argv[1] != SAVE_FLAG):
        raise CubError("Wrong arguments")
    screenshot = len(argv) == 2 and argv[1] == SAVE_FLAG
    if not argv[0].endswith(".cub"):
        raise CubError("Wrong map file format")
    return argv[0], screenshot


def read_lines(path: str) -> List[str]:
    """Lines of the file split on newlines; the part after the last one is kept."""
    try:
        with open(path, "r", encoding="latin-1", newline="") as handle:
            text = handle.read()
    except OSError as exc:
        raise CubError(f"cannot read {path}") from exc
    return text.split("\n")


def _screen_size() -> Tuple[int, int]:
    import pygame

    pygame.display.init()
    info = pygame.display.Info()
    return info.current_w, info.current_h


def _to_surface(pygame, frame):
    packed = array("I", (pixel | 0xFF000000 for pixel in frame.pixels))
    if sys.byteorder == "little":
        packed.byteswap()
    return pygame.image.frombuffer(packed.tobytes(), (frame.width, frame.height), "ARGB")


def run_window(game: Game) -> None:
    """Show the game in a window until it is closed or Escape is pressed."""
    import pygame

    keymap = {
        pygame.K_a: Key.A,
        pygame.K_s: Key.S,
        pygame.K_d: Key.D,
        pygame.K_w: Key.W,
        pygame.K_LEFT: Key.ARROW_LEFT,
        pygame.K_RIGHT: Key.ARROW_RIGHT,
        pygame.K_DOWN: Key.ARROW_DOWN,
        pygame.K_UP: Key.ARROW_UP,
        pygame.K_LSHIFT: Key.SHIFT_LEFT,
        pygame.K_RSHIFT: Key.SHIFT_RIGHT,
        pygame.K_ESCAPE: Key.ESCAPE,
    }
    pygame.display.init()
    try:
        screen = pygame.display.set_mode((game.renderer.width, game.renderer.height))
        pygame.display.set_caption(WINDOW_TITLE)
        while game.running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    game.running = False
                elif event.type == pygame.KEYDOWN and event.key in keymap:
                    game.key_press(keymap[event.key])
                elif event.type == pygame.KEYUP and event.key in keymap:
                    game.key_release(keymap[event.key])
            if not game.running:
                break
            frame = game.tick()
            screen.blit(_to_surface(pygame, frame), (0, 0))
            pygame.display.flip()
    finally:
        pygame.display.quit()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the program; returns the process exit status."""
    if argv is None:
        argv = sys.argv[1:]
    try:
        path, screenshot = check_args(argv)
        lines = read_lines(path)
        screen_size = None if screenshot else _screen_size()
        config, map_lines = parse_scene(lines, screenshot, screen_size)
        game = Game(config, validate_map(map_lines))
        if screenshot:
            frame = game.renderer.render(game.camera)
            save_bmp(frame.width, frame.height, frame.pixels, DEFAULT_NAME)
            print("Screenshot is created.")
            return 0
        run_window(game)
    except CubError as exc:
        print(f"Error\nMessage: {exc}")
        return 1
    return 0