import struct

import pytest

from cubcaster.cli import check_args, main, read_lines
from cubcaster.config import CubError

XPM = '/* XPM */\nstatic char *t[] = {\n"2 2 1 1",\n"a c #FF0000",\n"aa",\n"aa"\n};\n'


def test_check_args_plain_map():
    assert check_args(["map.cub"]) == ("map.cub", False)


def test_check_args_with_save():
    assert check_args(["map.cub", "--save"]) == ("map.cub", True)


def test_check_args_without_arguments():
    with pytest.raises(CubError):
        check_args([])


def test_check_args_unknown_option():
    with pytest.raises(CubError):
        check_args(["map.cub", "--other"])


def test_check_args_wrong_extension():
    with pytest.raises(CubError, match="Wrong map file format"):
        check_args(["map.txt"])


def test_read_lines_keeps_trailing_part(tmp_path):
    target = tmp_path / "a.cub"
    target.write_bytes(b"a\nb\n")
    assert read_lines(str(target)) == ["a", "b", ""]


def test_read_lines_without_final_newline(tmp_path):
    target = tmp_path / "a.cub"
    target.write_bytes(b"R 1 2\n111")
    assert read_lines(str(target)) == ["R 1 2", "111"]


def test_read_lines_missing_file(tmp_path):
    with pytest.raises(CubError):
        read_lines(str(tmp_path / "missing.cub"))


def test_main_reports_bad_arguments(capsys):
    assert main([]) == 1
    assert capsys.readouterr().out.startswith("Error\n")


def _write_scene(tmp_path):
    texture = tmp_path / "t.xpm"
    texture.write_text(XPM)
    lines = [
        "R 8 6",
        f"NO {texture}",
        f"SO {texture}",
        f"WE {texture}",
        f"EA {texture}",
        f"S {texture}",
        "F 1,2,3",
        "C 4,5,6",
        "11111",
        "10001",
        "10N01",
        "10201",
        "11111",
    ]
    scene = tmp_path / "scene.cub"
    scene.write_text("\n".join(lines))
    return scene


def test_main_saves_screenshot(tmp_path, monkeypatch):
    scene = _write_scene(tmp_path)
    monkeypatch.chdir(tmp_path)
    assert main([str(scene), "--save"]) == 0
    data = (tmp_path / "scrnsht.bmp").read_bytes()
    assert data[:2] == b"BM"
    assert struct.unpack_from("<ii", data, 18) == (8, 6)
    assert struct.unpack_from("<I", data, 2)[0] == len(data)


def test_main_rejects_map_with_trailing_empty_line(tmp_path, monkeypatch, capsys):
    scene = _write_scene(tmp_path)
    scene.write_text(scene.read_text() + "\n")
    monkeypatch.chdir(tmp_path)
    assert main([str(scene), "--save"]) == 1
    assert "empty lines" in capsys.readouterr().out