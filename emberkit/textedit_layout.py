"""Text layout queries used by the text editor: rows, hit testing and caret positions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from emberkit.textedit_undo import TextBuffer

NEWLINE = "\n"
"""The character that ends a row."""

NEWLINE_WIDTH = -1.0
"""Width reported for a newline character, so callers can recognise it."""


@dataclass
class TextRow:
    """Layout of one displayed row of characters."""

    x0: float = 0.0
    x1: float = 0.0
    baseline_y_delta: float = 0.0
    ymin: float = 0.0
    ymax: float = 0.0
    num_chars: int = 0


class TextLayout(TextBuffer, Protocol):
    """A text buffer that can also lay out its rows."""

    def layout_row(self, start: int) -> TextRow: ...

    def get_width(self, line_start: int, index: int) -> float: ...


@dataclass
class FindState:
    """Where a character sits: its position and the row holding it."""

    x: float = 0.0
    y: float = 0.0
    height: float = 0.0
    first_char: int = 0
    length: int = 0
    prev_first: int = 0


class SimpleTextBuffer:
    """Monospaced text with rows broken only at newlines."""

    def __init__(
        self,
        text: str = "",
        char_width: float = 1.0,
        line_height: float = 1.0,
        max_chars: Optional[int] = None,
    ) -> None:
        if max_chars is not None and len(text) > max_chars:
            raise ValueError("text is longer than max_chars")
        self.chars: list[str] = list(text)
        self.char_width = char_width
        self.line_height = line_height
        self.max_chars = max_chars

    @property
    def text(self) -> str:
        return "".join(self.chars)

    def __len__(self) -> int:
        return len(self.chars)

    def get_char(self, index: int) -> str:
        if not 0 <= index < len(self.chars):
            raise IndexError(f"character index out of range: {index}")
        return self.chars[index]

    def delete_chars(self, index: int, count: int) -> None:
        if count < 0 or index < 0 or index + count > len(self.chars):
            raise IndexError(f"cannot delete {count} characters at {index}")
        del self.chars[index:index + count]

    def insert_chars(self, index: int, chars: Sequence[str]) -> bool:
        """Insert ``chars`` at ``index``; return False if it would exceed ``max_chars``."""
        if not 0 <= index <= len(self.chars):
            raise IndexError(f"insert position out of range: {index}")
        new_chars = list(chars)
        if self.max_chars is not None and len(self.chars) + len(new_chars) > self.max_chars:
            return False
        self.chars[index:index] = new_chars
        return True

    def layout_row(self, start: int) -> TextRow:
        """Lay out the row starting at ``start``; the row includes its newline."""
        end = start
        total = len(self.chars)
        while end < total:
            end += 1
            if self.chars[end - 1] == NEWLINE:
                break
        visible = sum(1 for ch in self.chars[start:end] if ch != NEWLINE)
        return TextRow(
            x0=0.0,
            x1=visible * self.char_width,
            baseline_y_delta=self.line_height,
            ymin=0.0,
            ymax=self.line_height,
            num_chars=end - start,
        )

    def get_width(self, line_start: int, index: int) -> float:
        if self.get_char(line_start + index) == NEWLINE:
            return NEWLINE_WIDTH
        return self.char_width


def locate_coord(buffer: TextLayout, x: float, y: float) -> int:
    """Return the character index nearest to the display position ``(x, y)``."""
    n = len(buffer)
    base_y = 0.0
    i = 0
    row = TextRow()

    while i < n:
        row = buffer.layout_row(i)
        if row.num_chars <= 0:
            return n
        if i == 0 and y < base_y + row.ymin:
            return 0
        if y < base_y + row.ymax:
            break
        i += row.num_chars
        base_y += row.baseline_y_delta

    if i >= n:
        return n

    if x < row.x0:
        return i

    if x < row.x1:
        prev_x = row.x0
        for k in range(row.num_chars):
            w = buffer.get_width(i, k)
            if x < prev_x + w:
                return k + i if x < prev_x + w / 2 else k + i + 1
            prev_x += w

    if buffer.get_char(i + row.num_chars - 1) == NEWLINE:
        return i + row.num_chars - 1
    return i + row.num_chars


def find_charpos(buffer: TextLayout, n: int, single_line: bool = False) -> FindState:
    """Find the position of character ``n`` and the rows around it."""
    z = len(buffer)

    if n == z and single_line:
        row = buffer.layout_row(0)
        return FindState(
            x=row.x1,
            y=0.0,
            height=row.ymax - row.ymin,
            first_char=0,
            length=z,
            prev_first=0,
        )

    find = FindState()
    prev_start = 0
    i = 0
    while True:
        row = buffer.layout_row(i)
        if n < i + row.num_chars:
            break
        if i + row.num_chars == z and z > 0 and buffer.get_char(z - 1) != NEWLINE:
            break
        prev_start = i
        i += row.num_chars
        find.y += row.baseline_y_delta
        if i == z:
            break

    first = i
    find.first_char = first
    find.length = row.num_chars
    find.height = row.ymax - row.ymin
    find.prev_first = prev_start

    find.x = row.x0
    for k in range(n - first):
        find.x += buffer.get_width(first, k)
    return find