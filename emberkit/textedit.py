"""Keyboard and mouse editing of a text buffer: cursor, selection, undo and redo."""

from __future__ import annotations

import enum
from typing import Sequence, Union

from emberkit.textedit_layout import (
    NEWLINE,
    NEWLINE_WIDTH,
    TextLayout,
    find_charpos,
    locate_coord,
)
from emberkit.textedit_undo import UndoState

KEY_FLAG = 0x200000
"""Bit set in every editing key code; plain code points below it are text."""


class Key(enum.IntEnum):
    """Editing key codes. Combine with ``Key.SHIFT`` to extend the selection."""

    LEFT = KEY_FLAG | 1
    RIGHT = KEY_FLAG | 2
    UP = KEY_FLAG | 3
    DOWN = KEY_FLAG | 4
    PGUP = KEY_FLAG | 5
    PGDOWN = KEY_FLAG | 6
    LINESTART = KEY_FLAG | 7
    LINEEND = KEY_FLAG | 8
    TEXTSTART = KEY_FLAG | 9
    TEXTEND = KEY_FLAG | 10
    DELETE = KEY_FLAG | 11
    BACKSPACE = KEY_FLAG | 12
    UNDO = KEY_FLAG | 13
    REDO = KEY_FLAG | 14
    INSERT = KEY_FLAG | 15
    WORDLEFT = KEY_FLAG | 16
    WORDRIGHT = KEY_FLAG | 17
    SHIFT = 0x400000


# Keys that have a distinct meaning when combined with SHIFT.
_SHIFTABLE = frozenset(
    {
        Key.LEFT, Key.RIGHT, Key.UP, Key.DOWN, Key.PGUP, Key.PGDOWN,
        Key.LINESTART, Key.LINEEND, Key.TEXTSTART, Key.TEXTEND,
        Key.DELETE, Key.BACKSPACE, Key.WORDLEFT, Key.WORDRIGHT,
    }
)


class TextEditor:
    """Maps user input on a text buffer to edits, cursor moves and selection changes."""

    def __init__(self, buffer: TextLayout, single_line: bool = False) -> None:
        self.buffer = buffer
        self.history = UndoState()
        self.clear(single_line)

    def clear(self, single_line: bool = False) -> None:
        """Reset cursor, selection, modes and history."""
        self.history.clear()
        self.select_start = 0
        self.select_end = 0
        self.cursor = 0
        self.has_preferred_x = False
        self.preferred_x = 0.0
        self.single_line = bool(single_line)
        self.insert_mode = False
        self.row_count_per_page = 0

    # -- selection helpers -------------------------------------------------

    @property
    def has_selection(self) -> bool:
        return self.select_start != self.select_end

    @property
    def selection(self) -> tuple[int, int]:
        """The selected range as ``(start, end)`` with ``start <= end``."""
        return min(self.select_start, self.select_end), max(self.select_start, self.select_end)

    @property
    def selected_text(self) -> str:
        start, end = self.selection
        return "".join(self.buffer.get_char(i) for i in range(start, end))

    def clamp(self) -> None:
        """Make cursor and selection valid after the buffer changed outside the editor."""
        n = len(self.buffer)
        if self.has_selection:
            self.select_start = min(self.select_start, n)
            self.select_end = min(self.select_end, n)
            if self.select_start == self.select_end:
                self.cursor = self.select_start
        if self.cursor > n:
            self.cursor = n

    def _sort_selection(self) -> None:
        if self.select_end < self.select_start:
            self.select_start, self.select_end = self.select_end, self.select_start

    def _move_to_first(self) -> None:
        if self.has_selection:
            self._sort_selection()
            self.cursor = self.select_start
            self.select_end = self.select_start
            self.has_preferred_x = False

    def _move_to_last(self) -> None:
        if self.has_selection:
            self._sort_selection()
            self.clamp()
            self.cursor = self.select_end
            self.select_start = self.select_end
            self.has_preferred_x = False

    def _prep_selection_at_cursor(self) -> None:
        if not self.has_selection:
            self.select_start = self.select_end = self.cursor
        else:
            self.cursor = self.select_end

    def _delete(self, where: int, length: int) -> None:
        self.history.make_undo_delete(self.buffer, where, length)
        self.buffer.delete_chars(where, length)
        self.has_preferred_x = False

    def _delete_selection(self) -> None:
        self.clamp()
        if self.has_selection:
            if self.select_start < self.select_end:
                self._delete(self.select_start, self.select_end - self.select_start)
                self.select_end = self.cursor = self.select_start
            else:
                self._delete(self.select_end, self.select_start - self.select_end)
                self.select_start = self.cursor = self.select_end
            self.has_preferred_x = False

    # -- word movement -----------------------------------------------------

    def _is_word_boundary(self, idx: int) -> bool:
        if idx <= 0:
            return True
        return (
            self.buffer.get_char(idx - 1).isspace()
            and not self.buffer.get_char(idx).isspace()
        )

    def _word_previous(self, c: int) -> int:
        c -= 1
        while c >= 0 and not self._is_word_boundary(c):
            c -= 1
        return max(c, 0)

    def _word_next(self, c: int) -> int:
        length = len(self.buffer)
        c += 1
        while c < length and not self._is_word_boundary(c):
            c += 1
        return min(c, length)

    # -- mouse ---------------------------------------------------------------

    def _single_line_y(self, y: float) -> float:
        if self.single_line:
            return self.buffer.layout_row(0).ymin
        return y

    def click(self, x: float, y: float) -> None:
        """Move the cursor to the clicked position and clear the selection."""
        y = self._single_line_y(y)
        self.cursor = locate_coord(self.buffer, x, y)
        self.select_start = self.cursor
        self.select_end = self.cursor
        self.has_preferred_x = False

    def drag(self, x: float, y: float) -> None:
        """Move the cursor and selection end to the dragged position."""
        y = self._single_line_y(y)
        if self.select_start == self.select_end:
            self.select_start = self.cursor
        p = locate_coord(self.buffer, x, y)
        self.cursor = self.select_end = p

    # -- clipboard -----------------------------------------------------------

    def cut(self) -> bool:
        """Delete the selection; return True if there was one."""
        if self.has_selection:
            self._delete_selection()
            self.has_preferred_x = False
            return True
        return False

    def paste(self, text: Union[str, Sequence[str]]) -> bool:
        """Insert ``text`` at the cursor, replacing any selection.

        Returns False if the buffer refused the text; the deleted selection
        can then still be restored by undo.
        """
        chars = list(text)
        self.clamp()
        self._delete_selection()
        if self.buffer.insert_chars(self.cursor, chars):
            self.history.make_undo_insert(self.cursor, len(chars))
            self.cursor += len(chars)
            self.has_preferred_x = False
            return True
        return False

    # -- keyboard ------------------------------------------------------------

    def _insert_char(self, ch: str) -> None:
        if ch == NEWLINE and self.single_line:
            return
        if self.insert_mode and not self.has_selection and self.cursor < len(self.buffer):
            self.history.make_undo_replace(self.buffer, self.cursor, 1, 1)
            self.buffer.delete_chars(self.cursor, 1)
            if self.buffer.insert_chars(self.cursor, [ch]):
                self.cursor += 1
                self.has_preferred_x = False
        else:
            self._delete_selection()
            if self.buffer.insert_chars(self.cursor, [ch]):
                self.history.make_undo_insert(self.cursor, 1)
                self.cursor += 1
                self.has_preferred_x = False

    def _scan_row(self, row_start: int, goal_x: float) -> None:
        row = self.buffer.layout_row(row_start)
        self.cursor = row_start
        x = row.x0
        for i in range(row.num_chars):
            dx = self.buffer.get_width(row_start, i)
            if dx == NEWLINE_WIDTH:
                break
            x += dx
            if x > goal_x:
                break
            self.cursor += 1
        return row

    def _move_down(self, sel: bool, is_page: bool) -> None:
        row_count = self.row_count_per_page if is_page else 1
        if sel:
            self._prep_selection_at_cursor()
        elif self.has_selection:
            self._move_to_last()

        self.clamp()
        find = find_charpos(self.buffer, self.cursor, self.single_line)

        for _ in range(row_count):
            goal_x = self.preferred_x if self.has_preferred_x else find.x
            start = find.first_char + find.length
            if find.length == 0:
                break
            # Going down from the last line must not jump to its end.
            if self.buffer.get_char(find.first_char + find.length - 1) != NEWLINE:
                break
            row = self._scan_row(start, goal_x)
            self.clamp()
            self.has_preferred_x = True
            self.preferred_x = goal_x
            if sel:
                self.select_end = self.cursor
            find.first_char = find.first_char + find.length
            find.length = row.num_chars

    def _move_up(self, sel: bool, is_page: bool) -> None:
        row_count = self.row_count_per_page if is_page else 1
        if sel:
            self._prep_selection_at_cursor()
        elif self.has_selection:
            self._move_to_first()

        self.clamp()
        find = find_charpos(self.buffer, self.cursor, self.single_line)

        for _ in range(row_count):
            goal_x = self.preferred_x if self.has_preferred_x else find.x
            if find.prev_first == find.first_char:
                break
            self._scan_row(find.prev_first, goal_x)
            self.clamp()
            self.has_preferred_x = True
            self.preferred_x = goal_x
            if sel:
                self.select_end = self.cursor
            prev_scan = find.prev_first - 1 if find.prev_first > 0 else 0
            while prev_scan > 0 and self.buffer.get_char(prev_scan - 1) != NEWLINE:
                prev_scan -= 1
            find.first_char = find.prev_first
            find.prev_first = prev_scan

    def _line_start(self) -> None:
        if self.single_line:
            self.cursor = 0
        else:
            while self.cursor > 0 and self.buffer.get_char(self.cursor - 1) != NEWLINE:
                self.cursor -= 1

    def _line_end(self) -> None:
        n = len(self.buffer)
        if self.single_line:
            self.cursor = n
        else:
            while self.cursor < n and self.buffer.get_char(self.cursor) != NEWLINE:
                self.cursor += 1

    def key(self, key: Union[int, str]) -> None:
        """Process one keyboard input.

        ``key`` is a one-character string or code point to type, or a
        :class:`Key` code, optionally combined with ``Key.SHIFT``.
        """
        if isinstance(key, str):
            if len(key) != 1:
                raise ValueError("a text key must be a single character")
            self._insert_char(key)
            return

        key = int(key)
        while True:
            if not key & KEY_FLAG:
                code = key & ~Key.SHIFT
                if code > 0 and not key & Key.SHIFT:
                    self._insert_char(chr(code))
                return

            shift = bool(key & Key.SHIFT)
            try:
                base = Key(key & ~Key.SHIFT)
            except ValueError:
                return
            if shift and base not in _SHIFTABLE:
                return

            if base in (Key.DOWN, Key.PGDOWN, Key.UP, Key.PGUP):
                is_page = base in (Key.PGDOWN, Key.PGUP)
                going_down = base in (Key.DOWN, Key.PGDOWN)
                if not is_page and self.single_line:
                    # Up and down in a single line behave like left and right.
                    key = (Key.RIGHT if going_down else Key.LEFT) | (key & Key.SHIFT)
                    continue
                if going_down:
                    self._move_down(shift, is_page)
                else:
                    self._move_up(shift, is_page)
                return
            break

        if base is Key.INSERT:
            self.insert_mode = not self.insert_mode
        elif base is Key.UNDO:
            pos = self.history.undo(self.buffer)
            if pos is not None:
                self.cursor = pos
            self.has_preferred_x = False
        elif base is Key.REDO:
            pos = self.history.redo(self.buffer)
            if pos is not None:
                self.cursor = pos
            self.has_preferred_x = False
        elif base is Key.LEFT and not shift:
            if self.has_selection:
                self._move_to_first()
            elif self.cursor > 0:
                self.cursor -= 1
            self.has_preferred_x = False
        elif base is Key.RIGHT and not shift:
            if self.has_selection:
                self._move_to_last()
            else:
                self.cursor += 1
            self.clamp()
            self.has_preferred_x = False
        elif base is Key.LEFT:
            self.clamp()
            self._prep_selection_at_cursor()
            if self.select_end > 0:
                self.select_end -= 1
            self.cursor = self.select_end
            self.has_preferred_x = False
        elif base is Key.RIGHT:
            self._prep_selection_at_cursor()
            self.select_end += 1
            self.clamp()
            self.cursor = self.select_end
            self.has_preferred_x = False
        elif base in (Key.WORDLEFT, Key.WORDRIGHT):
            mover = self._word_previous if base is Key.WORDLEFT else self._word_next
            if not shift:
                if self.has_selection:
                    if base is Key.WORDLEFT:
                        self._move_to_first()
                    else:
                        self._move_to_last()
                else:
                    self.cursor = mover(self.cursor)
                    self.clamp()
            else:
                if not self.has_selection:
                    self._prep_selection_at_cursor()
                self.cursor = mover(self.cursor)
                self.select_end = self.cursor
                self.clamp()
        elif base is Key.DELETE:
            if self.has_selection:
                self._delete_selection()
            elif self.cursor < len(self.buffer):
                self._delete(self.cursor, 1)
            self.has_preferred_x = False
        elif base is Key.BACKSPACE:
            if self.has_selection:
                self._delete_selection()
            else:
                self.clamp()
                if self.cursor > 0:
                    self._delete(self.cursor - 1, 1)
                    self.cursor -= 1
            self.has_preferred_x = False
        elif base is Key.TEXTSTART and not shift:
            self.cursor = self.select_start = self.select_end = 0
            self.has_preferred_x = False
        elif base is Key.TEXTEND and not shift:
            self.cursor = len(self.buffer)
            self.select_start = self.select_end = 0
            self.has_preferred_x = False
        elif base is Key.TEXTSTART:
            self._prep_selection_at_cursor()
            self.cursor = self.select_end = 0
            self.has_preferred_x = False
        elif base is Key.TEXTEND:
            self._prep_selection_at_cursor()
            self.cursor = self.select_end = len(self.buffer)
            self.has_preferred_x = False
        elif base is Key.LINESTART:
            self.clamp()
            if shift:
                self._prep_selection_at_cursor()
            else:
                self._move_to_first()
            self._line_start()
            if shift:
                self.select_end = self.cursor
            self.has_preferred_x = False
        elif base is Key.LINEEND:
            self.clamp()
            if shift:
                self._prep_selection_at_cursor()
            else:
                self._move_to_first()
            self._line_end()
            if shift:
                self.select_end = self.cursor
            self.has_preferred_x = False