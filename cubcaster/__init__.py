"""A first-person raycasting engine for .cub scene files: parsing, rendering, BMP output and a pygame window."""

__version__ = "0.1.0"
__all__ = ["config", "xpm", "mapgrid", "raycaster", "screenshot", "game", "cli"]