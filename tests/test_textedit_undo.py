import pytest

from emberkit.textedit_undo import UndoState


class ListBuffer:
    def __init__(self, text=""):
        self.chars = list(text)

    def __len__(self):
        return len(self.chars)

    def get_char(self, index):
        return self.chars[index]

    def delete_chars(self, index, count):
        del self.chars[index:index + count]

    def insert_chars(self, index, chars):
        self.chars[index:index] = list(chars)
        return True

    @property
    def text(self):
        return "".join(self.chars)


def insert(state, buf, where, text):
    buf.insert_chars(where, text)
    state.make_undo_insert(where, len(text))


def delete(state, buf, where, length):
    state.make_undo_delete(buf, where, length)
    buf.delete_chars(where, length)


def test_undo_redo_insert():
    state = UndoState()
    buf = ListBuffer()
    insert(state, buf, 0, "abc")
    assert state.undo(buf) == 0
    assert buf.text == ""
    assert state.redo(buf) == 3
    assert buf.text == "abc"


def test_undo_redo_delete():
    state = UndoState()
    buf = ListBuffer("hello")
    delete(state, buf, 1, 3)
    assert buf.text == "ho"
    assert state.undo(buf) == 1 + 3
    assert buf.text == "hello"
    assert state.redo(buf) == 1
    assert buf.text == "ho"


def test_undo_redo_replace():
    state = UndoState()
    buf = ListBuffer("abc")
    state.make_undo_replace(buf, 1, 1, 1)
    buf.delete_chars(1, 1)
    buf.insert_chars(1, "X")
    assert buf.text == "aXc"
    state.undo(buf)
    assert buf.text == "abc"
    state.redo(buf)
    assert buf.text == "aXc"


def test_nothing_to_undo_or_redo():
    state = UndoState()
    buf = ListBuffer("abc")
    assert state.undo(buf) is None
    assert state.redo(buf) is None
    assert buf.text == "abc"
    assert not state.can_undo
    assert not state.can_redo


def test_new_change_flushes_redo():
    state = UndoState()
    buf = ListBuffer()
    insert(state, buf, 0, "ab")
    state.undo(buf)
    assert state.can_redo
    insert(state, buf, 0, "z")
    assert not state.can_redo
    assert state.redo(buf) is None
    assert buf.text == "z"


def test_full_sequence_round_trip():
    state = UndoState()
    buf = ListBuffer("start")
    insert(state, buf, 5, " one")
    delete(state, buf, 0, 2)
    insert(state, buf, 1, "XY")
    state.make_undo_replace(buf, 0, 1, 1)
    buf.delete_chars(0, 1)
    buf.insert_chars(0, "Q")
    final = buf.text

    undone = 0
    while state.undo(buf) is not None:
        undone += 1
    assert undone == 4
    assert buf.text == "start"

    redone = 0
    while state.redo(buf) is not None:
        redone += 1
    assert redone == 4
    assert buf.text == final


def test_record_limit_drops_oldest():
    state = UndoState(state_count=3)
    buf = ListBuffer()
    for i, ch in enumerate("abcde"):
        insert(state, buf, i, ch)
    for _ in range(3):
        assert state.undo(buf) is not None
    assert buf.text == "ab"
    assert state.undo(buf) is None
    while state.redo(buf) is not None:
        pass
    assert buf.text == "abcde"


def test_char_limit_drops_oldest():
    state = UndoState(char_count=5)
    buf = ListBuffer("abcdef")
    delete(state, buf, 0, 3)
    delete(state, buf, 0, 3)
    assert buf.text == ""
    state.undo(buf)
    assert buf.text == "def"
    assert state.undo(buf) is None


def test_change_too_large_clears_history():
    state = UndoState(char_count=4)
    buf = ListBuffer("abcdefgh")
    insert(state, buf, 8, "i")
    delete(state, buf, 0, 5)
    assert state.undo(buf) is None
    assert buf.text == "fghi"


def test_clear_forgets_history():
    state = UndoState()
    buf = ListBuffer()
    insert(state, buf, 0, "abc")
    state.undo(buf)
    insert(state, buf, 0, "x")
    state.clear()
    assert state.undo(buf) is None
    assert state.redo(buf) is None
    assert buf.text == "x"


def test_flush_redo_keeps_undo():
    state = UndoState()
    buf = ListBuffer()
    insert(state, buf, 0, "a")
    insert(state, buf, 1, "b")
    state.undo(buf)
    state.flush_redo()
    assert state.redo(buf) is None
    assert state.undo(buf) == 0
    assert buf.text == ""


@pytest.mark.parametrize("state_count, char_count", [(0, 10), (10, 0)])
def test_invalid_capacity(state_count, char_count):
    with pytest.raises(ValueError):
        UndoState(state_count, char_count)