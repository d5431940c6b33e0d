# cubcaster

A compact first-person raycasting engine. It reads a `.cub` scene description,
validates it, and either opens a window you can walk around in or writes a
single rendered frame to a BMP file.

## Installation

```
pip install .
```

The window is drawn with `pygame`, which is installed as a dependency.

## Running

```
cubcaster maps/level.cub
cubcaster maps/level.cub --save
```

The first argument must be a path ending in `.cub`; the only second argument
accepted is `--save`. With `--save`, one frame is rendered and written to
`scrnsht.bmp` in the current directory, and `Screenshot is created.` is
printed, instead of opening a window.

### Controls

| Key        | Action         |
|------------|----------------|
| W / S      | forward / back |
| A / D      | strafe         |
| ← / →      | turn           |
| Shift      | double speed while held |
| Esc        | quit           |

Closing the window also quits. Movement slides along walls: each axis is only
applied if the cell it leads to is open floor.

## Scene files

A `.cub` file lists its settings first, then the map:

```
R 640 480
NO ./textures/north.xpm
SO ./textures/south.xpm
WE ./textures/west.xpm
EA ./textures/east.xpm
S ./textures/sprite.xpm
F 220,100,0
C 225,30,0

111111
100201
10N001
111111
```

- `R` sets the resolution. It is clamped to the size of the screen, or to
  10000 each way when saving a screenshot. It may be given only once.
- `NO`, `SO`, `WE`, `EA` set the wall textures and `S` the sprite texture.
  Each must name a `.xpm` file that can be opened, and each may be given once.
- `F` and `C` set the floor and ceiling colours as `r,g,b`, each from 0 to 255
  and each given once.
- The map starts at the first line that is not a setting. In it, `1` is a
  wall, `0` is empty space, `2` is a sprite, and exactly one of `N`, `S`, `E`,
  `W` marks the player's start and facing direction. Spaces are allowed only
  where no open cell can reach them. Every cell reachable from an open cell
  (diagonals included) must be enclosed by walls.
- The map must not contain empty lines. The file is split on newlines and the
  text after the last one counts as a line, so the last map line must not be
  followed by a newline.

Textures are read as XPM images. Colours may be given as `#RRGGBB` or by a
common colour name; unknown names read as black. In the sprite texture, pixels
whose colour is black (including the `None` colour) are not drawn.

Errors are reported as:

```
Error
Message: <description>
```

and the program exits with status 1.

## What it does not do

The engine renders and lets you walk around a scene. There are no enemies, no
weapons, no mouse look, and the up and down arrow keys do nothing.

## Library use

The modules can be used on their own:

- `cubcaster.config.parse_scene(lines, screenshot, screen_size)` returns a
  `SceneConfig` together with the remaining map lines, raising `CubError` on
  invalid input.
- `cubcaster.mapgrid.validate_map(lines)` checks and flood-fills the map and
  returns a `GameMap` with the player's cell and its `Sprite` list.
- `cubcaster.xpm.load_xpm(path)` and `cubcaster.xpm.parse_xpm(text)` decode an
  XPM image into a `Texture`; failures raise `XpmError`.
- `cubcaster.raycaster.camera_for(player, x, y)` builds a `Camera`, and
  `cubcaster.raycaster.Renderer.render(camera)` draws a `Frame` of packed
  `0xRRGGBB` pixels.
- `cubcaster.screenshot.encode_bmp` and `save_bmp` turn pixels into a 32-bit
  BMP.
- `cubcaster.game.Game` ties it together: `key_press` and `key_release` take
  `Key` codes, and `tick()` applies held keys and returns the next frame.
- `cubcaster.cli.main(argv)` runs the command and returns its exit status.

## Tests

```
pip install .[test]
pytest
```