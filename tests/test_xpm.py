import pytest

from cubcaster.xpm import (
    TRANSPARENT,
    Texture,
    XpmError,
    color_from_text,
    load_xpm,
    parse_xpm,
    split_words,
    strip_comments,
)

SAMPLE = """/* XPM */
static char *img[] = {
/* columns rows colors chars-per-pixel */
"3 2 3 1 ",
". c #000000",
"X c #FF0000",
"  c None",
".X ",
"X. ",
};
"""


def test_split_words_spaces_and_tabs():
    assert split_words("  a\tb   c \t") == ["a", "b", "c"]


def test_split_words_empty():
    assert split_words(" \t ") == []


def test_strip_comments_keeps_length_and_quotes():
    text = 'x /* gone */ "a /* kept */" // tail\ny'
    out = strip_comments(text)
    assert len(out) == len(text)
    assert "gone" not in out
    assert "tail" not in out
    assert '"a /* kept */"' in out
    assert out.endswith("y")


def test_color_from_text_hex():
    assert color_from_text("#FF0000") == 0xFF0000


def test_color_from_text_names():
    assert color_from_text("White") == 0xFFFFFF
    assert color_from_text("ghost", "white") == 0xF8F8FF
    assert color_from_text("None") == -1
    assert color_from_text("nosuchcolour") == 0


def test_parse_xpm_sample():
    texture = parse_xpm(SAMPLE)
    assert (texture.width, texture.height) == (3, 2)
    assert texture.pixel(0, 0) == 0x000000
    assert texture.pixel(1, 0) == 0xFF0000
    assert texture.pixel(2, 0) == TRANSPARENT
    assert texture.pixel(0, 1) == 0xFF0000
    assert len(texture.pixels) == 6


def test_pixel_out_of_range():
    texture = Texture(1, 1, (5,))
    with pytest.raises(IndexError):
        texture.pixel(1, 0)


def test_short_keys_later_definition_wins():
    text = '"1 1 2 1", "a c #000001", "a c #000002", "a"'
    assert parse_xpm(text).pixel(0, 0) == 0x000002


def test_long_keys_first_definition_wins():
    text = '"1 1 2 3", "abc c #000001", "abc c #000002", "abc"'
    assert parse_xpm(text).pixel(0, 0) == 0x000001


def test_missing_header_value():
    with pytest.raises(XpmError):
        parse_xpm('"1 0 1 1", "a c #000000"')


def test_missing_rows():
    with pytest.raises(XpmError):
        parse_xpm('"1 2 1 1", "a c #000000", "a"')


def test_colour_line_without_key():
    with pytest.raises(XpmError):
        parse_xpm('"1 1 1 1", "a #000000", "a"')


def test_load_xpm(tmp_path):
    path = tmp_path / "wall.xpm"
    path.write_text(SAMPLE)
    assert load_xpm(str(path)) == parse_xpm(SAMPLE)


def test_load_xpm_missing_file(tmp_path):
    with pytest.raises(XpmError):
        load_xpm(str(tmp_path / "absent.xpm"))