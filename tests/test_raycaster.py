import math

import pytest

from cubcaster.config import Color
from cubcaster.mapgrid import Sprite
from cubcaster.raycaster import (
    Camera,
    Frame,
    Renderer,
    camera_for,
    cast_ray,
    make_trgb,
    wall_span,
)
from cubcaster.xpm import Texture

ROOM = [
    list("1111111"),
    list("1@@@@@1"),
    list("1@@@@@1"),
    list("1@@@@@1"),
    list("1111111"),
]

WALL = 0x112233
EAST = 0x445566
SPRITE_COLOR = 0x778899


def _solid(color, size=4):
    return Texture(size, size, tuple([color] * size * size))


def _renderer(sprites=None):
    return Renderer(
        grid=ROOM,
        width=40,
        height=30,
        north=_solid(WALL),
        south=_solid(WALL),
        east=_solid(EAST),
        west=_solid(WALL),
        sprite=_solid(SPRITE_COLOR),
        ceiling=Color(1, 2, 3),
        floor=Color(4, 5, 6),
        sprites=sprites or [],
    )


def test_make_trgb_packs_channels():
    assert make_trgb(0, 0xFF, 0x00, 0x00) == 0xFF0000
    assert make_trgb(0, 0xFF, 0xFF, 0x00) == 0xFFFF00


def test_frame_put_and_read():
    frame = Frame(3, 2)
    frame.put(2, 1, 0xABCDEF)
    assert frame[2, 1] == 0xABCDEF
    assert frame[0, 0] == 0
    assert len(frame.pixels) == 6


def test_frame_put_out_of_range():
    frame = Frame(3, 2)
    with pytest.raises(IndexError):
        frame.put(3, 0, 1)
    with pytest.raises(IndexError):
        frame.put(0, -1, 1)


def test_camera_for_north():
    camera = camera_for("N", 2, 3)
    assert (camera.pos_x, camera.pos_y) == (2.5, 3.5)
    assert (camera.dir_x, camera.dir_y) == (0, -1)
    assert (camera.plane_x, camera.plane_y) == (0.66, 0)


def test_camera_for_unknown_letter():
    with pytest.raises(ValueError):
        camera_for("X", 1, 1)


def test_rotation_round_trip_and_length():
    camera = camera_for("E", 1, 2)
    camera.rotate_left(0.3)
    assert math.hypot(camera.dir_x, camera.dir_y) == pytest.approx(1.0)
    assert camera.dir_x < 1.0
    camera.rotate_right(0.3)
    assert camera.dir_x == pytest.approx(1.0)
    assert camera.dir_y == pytest.approx(0.0, abs=1e-12)
    assert camera.plane_y == pytest.approx(0.66)


def test_step_forward_moves_on_floor():
    camera = camera_for("E", 1, 2)
    camera.step_forward(ROOM, 0.5)
    assert camera.pos_x == pytest.approx(2.0)
    assert camera.pos_y == pytest.approx(2.5)


def test_step_into_wall_is_blocked():
    camera = camera_for("W", 1, 2)
    camera.step_forward(ROOM, 1.0)
    assert (camera.pos_x, camera.pos_y) == (1.5, 2.5)


def test_strafe_round_trip():
    camera = camera_for("E", 3, 2)
    camera.step_right(ROOM, 0.5)
    assert camera.pos_y != 2.5
    camera.step_left(ROOM, 0.5)
    assert camera.pos_y == pytest.approx(2.5)
    assert camera.pos_x == pytest.approx(3.5)


def test_step_back_reverses_forward():
    camera = camera_for("S", 3, 1)
    camera.step_forward(ROOM, 0.4)
    camera.step_back(ROOM, 0.4)
    assert camera.pos_y == pytest.approx(1.5)


def test_cast_ray_centre_hits_east_wall():
    camera = camera_for("E", 1, 2)
    hit = cast_ray(ROOM, camera, 20, 40)
    assert hit.side == 0
    assert ROOM[hit.map_y][hit.map_x] == "1"
    assert hit.map_x == len(ROOM[0]) - 1
    assert hit.distance == pytest.approx(hit.map_x - camera.pos_x)


def test_cast_ray_every_column_hits_a_wall():
    camera = camera_for("N", 3, 3)
    for x in range(0, 40, 5):
        hit = cast_ray(ROOM, camera, x, 40)
        assert ROOM[hit.map_y][hit.map_x] == "1"
        assert hit.distance > 0


def test_cast_ray_rejects_zero_width():
    with pytest.raises(ValueError):
        cast_ray(ROOM, camera_for("N", 3, 3), 0, 0)


def test_wall_span_clamps_to_window():
    line, start, finish = wall_span(0.1, 400, 300)
    assert line > 300
    assert start == 0
    assert finish == 299


def test_wall_span_far_wall_is_centred():
    line, start, finish = wall_span(100.0, 400, 300)
    assert 0 < start <= finish < 300
    assert start + finish == 300 or abs((start + finish) - 300) <= 1


def test_wall_span_rejects_nonpositive_distance():
    with pytest.raises(ValueError):
        wall_span(0.0, 400, 300)


def test_render_ceiling_wall_floor():
    frame = _renderer().render(camera_for("E", 1, 2))
    assert frame[20, 0] == Color(1, 2, 3).to_int()
    assert frame[20, 29] == Color(4, 5, 6).to_int()
    assert frame[20, 15] == EAST


def test_render_draws_visible_sprite():
    frame = _renderer([Sprite(4.5, 2.5)]).render(camera_for("E", 1, 2))
    assert frame[20, 15] == SPRITE_COLOR


def test_draw_sprites_hidden_behind_near_wall():
    renderer = _renderer([Sprite(4.5, 2.5)])
    frame = Frame(40, 30)
    renderer.draw_sprites(frame, camera_for("E", 1, 2), [1.0] * 40)
    assert set(frame.pixels) == {0}


def test_draw_sprites_skips_black_pixels():
    renderer = _renderer([Sprite(4.5, 2.5)])
    renderer.sprite = _solid(0x000000)
    frame = Frame(40, 30)
    renderer.draw_sprites(frame, camera_for("E", 1, 2), [100.0] * 40)
    assert set(frame.pixels) == {0}


def test_draw_sprites_ignores_sprite_behind_camera():
    renderer = _renderer([Sprite(1.5, 2.5)])
    frame = Frame(40, 30)
    renderer.draw_sprites(frame, camera_for("E", 4, 2), [100.0] * 40)
    assert set(frame.pixels) == {0}