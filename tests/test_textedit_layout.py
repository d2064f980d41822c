import pytest

from emberkit.textedit_layout import (
    NEWLINE_WIDTH,
    FindState,
    SimpleTextBuffer,
    TextRow,
    find_charpos,
    locate_coord,
)

CW = 10.0
LH = 20.0


def make(text, max_chars=None):
    return SimpleTextBuffer(text, CW, LH, max_chars)


@pytest.mark.parametrize("text", ["ab\ncd", "hello", "x\n\nyz\n", "one\ntwo\nthree"])
def test_locate_coord_round_trips_find_charpos(text):
    buf = make(text)
    for n in range(len(text) + 1):
        pos = find_charpos(buf, n)
        assert locate_coord(buf, pos.x + 1, pos.y + 1) == n


def test_layout_row_includes_newline():
    text = "ab\ncd"
    buf = make(text)
    row = buf.layout_row(0)
    assert row.num_chars == text.index("\n") + 1
    assert row.x1 == text.index("\n") * CW
    assert row.ymax - row.ymin == LH
    assert row.baseline_y_delta == LH


def test_layout_row_at_end_is_empty():
    buf = make("abc")
    assert buf.layout_row(len(buf)).num_chars == 0


def test_get_width_reports_newline():
    buf = make("a\nb")
    assert buf.get_width(0, 0) == CW
    assert buf.get_width(0, 1) == NEWLINE_WIDTH


def test_find_charpos_row_offsets():
    lines = ["one", "two", "three"]
    buf = make("\n".join(lines))
    start = 0
    for index, line in enumerate(lines):
        pos = find_charpos(buf, start)
        assert pos.first_char == start
        assert pos.y == index * LH
        assert pos.x == 0.0
        assert pos.height == LH
        start += len(line) + 1


def test_find_charpos_previous_row():
    buf = make("ab\ncd")
    second = find_charpos(buf, 4)
    assert second.prev_first == 0
    first = find_charpos(buf, 1)
    assert first.prev_first == first.first_char


def test_find_charpos_single_line_end():
    text = "hello"
    buf = make(text)
    pos = find_charpos(buf, len(text), single_line=True)
    assert pos == FindState(x=len(text) * CW, y=0.0, height=LH, first_char=0, length=len(text))


def test_locate_coord_above_and_below():
    text = "ab\ncd"
    buf = make(text)
    assert locate_coord(buf, 5, -LH) == 0
    assert locate_coord(buf, 5, LH * 10) == len(text)


def test_locate_coord_left_of_row():
    buf = SimpleTextBuffer("ab\ncd", CW, LH)
    assert locate_coord(buf, -5, LH + 1) == 3


def test_locate_coord_rounds_to_nearest_boundary():
    buf = make("abc")
    assert locate_coord(buf, CW * 0.4, 1) == 0
    assert locate_coord(buf, CW * 0.6, 1) == 1


def test_locate_coord_empty_buffer():
    buf = make("")
    assert locate_coord(buf, 100, 100) == 0


def test_insert_and_delete_round_trip():
    buf = make("hello")
    assert buf.insert_chars(5, list(" world")) is True
    assert buf.text == "hello world"
    buf.delete_chars(5, 6)
    assert buf.text == "hello"


def test_insert_respects_max_chars():
    buf = make("abc", max_chars=4)
    assert buf.insert_chars(0, ["x", "y"]) is False
    assert buf.text == "abc"
    assert buf.insert_chars(3, ["z"]) is True
    assert len(buf) == 4


def test_text_longer_than_max_chars_rejected():
    with pytest.raises(ValueError):
        SimpleTextBuffer("abcdef", CW, LH, 3)


def test_out_of_range_access_raises():
    buf = make("ab")
    with pytest.raises(IndexError):
        buf.get_char(2)
    with pytest.raises(IndexError):
        buf.delete_chars(1, 5)
    with pytest.raises(IndexError):
        buf.insert_chars(3, ["x"])


def test_text_row_defaults():
    row = TextRow()
    assert (row.x0, row.x1, row.num_chars) == (0.0, 0.0, 0)