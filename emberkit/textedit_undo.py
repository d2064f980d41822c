"""Bounded undo/redo history for a text-editing widget.

Undo records and redo records share one fixed-size record table. Undo
records grow from the front and redo records from the back. The characters
that records need are kept in one fixed-size character store, which is
shared in the same way. When a table fills up, the oldest entries are
dropped.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Protocol, Sequence

DEFAULT_STATE_COUNT = 99
DEFAULT_CHAR_COUNT = 999


class TextBuffer(Protocol):
    """What the undo history needs from the text being edited.

    ``insert_chars`` receives a sequence of one-character strings, for
    example a list. ``"".join(chars)`` turns it into text.
    """

    def __len__(self) -> int: ...

    def get_char(self, index: int) -> str: ...

    def delete_chars(self, index: int, count: int) -> None: ...

    def insert_chars(self, index: int, chars: Sequence[str]) -> bool: ...


@dataclass
class UndoRecord:
    """One step of history: at ``where``, restore ``insert_length`` stored
    characters after deleting ``delete_length`` characters."""

    where: int = 0
    insert_length: int = 0
    delete_length: int = 0
    char_storage: int = -1


class UndoState:
    """Undo and redo history with fixed record and character capacity."""

    def __init__(
        self,
        state_count: int = DEFAULT_STATE_COUNT,
        char_count: int = DEFAULT_CHAR_COUNT,
    ) -> None:
        if state_count < 1 or char_count < 1:
            raise ValueError("state_count and char_count must be positive")
        self.state_count = state_count
        self.char_count = char_count
        self.records = [UndoRecord() for _ in range(state_count)]
        self.chars: list[str] = [""] * char_count
        self.undo_point = 0
        self.redo_point = state_count
        self.undo_char_point = 0
        self.redo_char_point = char_count

    @property
    def can_undo(self) -> bool:
        return self.undo_point > 0

    @property
    def can_redo(self) -> bool:
        return self.redo_point < self.state_count

    def clear(self) -> None:
        """Forget all undo and redo history."""
        self.undo_point = 0
        self.undo_char_point = 0
        self.redo_point = self.state_count
        self.redo_char_point = self.char_count

    def flush_redo(self) -> None:
        """Forget all redo history."""
        self.redo_point = self.state_count
        self.redo_char_point = self.char_count

    def _discard_undo(self) -> None:
        if self.undo_point <= 0:
            return
        first = self.records[0]
        if first.char_storage >= 0:
            n = first.insert_length
            self.undo_char_point -= n
            self.chars[0:self.undo_char_point] = self.chars[n:n + self.undo_char_point]
            for rec in self.records[:self.undo_point]:
                if rec.char_storage >= 0:
                    rec.char_storage -= n
        self.undo_point -= 1
        self.records[0:self.undo_point] = [
            replace(rec) for rec in self.records[1:self.undo_point + 1]
        ]

    def _discard_redo(self) -> None:
        k = self.state_count - 1
        if self.redo_point > k:
            return
        last = self.records[k]
        if last.char_storage >= 0:
            n = last.insert_length
            self.redo_char_point += n
            end = self.char_count
            self.chars[self.redo_char_point:end] = self.chars[self.redo_char_point - n:end - n]
            for rec in self.records[self.redo_point:k]:
                if rec.char_storage >= 0:
                    rec.char_storage += n
        rp = self.redo_point
        self.records[rp + 1:self.state_count] = [
            replace(rec) for rec in self.records[rp:self.state_count - 1]
        ]
        self.redo_point += 1

    def _create_record(self, numchars: int) -> Optional[UndoRecord]:
        self.flush_redo()
        if self.undo_point == self.state_count:
            self._discard_undo()
        if numchars > self.char_count:
            # The change can never be stored: the whole history is lost.
            self.undo_point = 0
            self.undo_char_point = 0
            return None
        while self.undo_char_point + numchars > self.char_count:
            self._discard_undo()
        record = self.records[self.undo_point]
        self.undo_point += 1
        return record

    def _create_undo(self, where: int, insert_len: int, delete_len: int) -> Optional[int]:
        record = self._create_record(insert_len)
        if record is None:
            return None
        record.where = where
        record.insert_length = insert_len
        record.delete_length = delete_len
        if insert_len == 0:
            record.char_storage = -1
            return None
        record.char_storage = self.undo_char_point
        self.undo_char_point += insert_len
        return record.char_storage

    def _save_chars(self, storage: Optional[int], buffer: TextBuffer, where: int, length: int) -> None:
        if storage is None:
            return
        self.chars[storage:storage + length] = [
            buffer.get_char(where + i) for i in range(length)
        ]

    def make_undo_insert(self, where: int, length: int) -> None:
        """Record that ``length`` characters are being inserted at ``where``."""
        self._create_undo(where, 0, length)

    def make_undo_delete(self, buffer: TextBuffer, where: int, length: int) -> None:
        """Record the ``length`` characters at ``where`` before they are deleted."""
        storage = self._create_undo(where, length, 0)
        self._save_chars(storage, buffer, where, length)

    def make_undo_replace(
        self, buffer: TextBuffer, where: int, old_length: int, new_length: int
    ) -> None:
        """Record that ``old_length`` characters at ``where`` become ``new_length`` new ones."""
        storage = self._create_undo(where, old_length, new_length)
        self._save_chars(storage, buffer, where, old_length)

    def undo(self, buffer: TextBuffer) -> Optional[int]:
        """Revert the latest change in ``buffer``.

        Returns the new cursor position, or None if nothing was undone.
        """
        if self.undo_point == 0:
            return None

        u = replace(self.records[self.undo_point - 1])
        r = self.records[self.redo_point - 1]
        r.char_storage = -1
        r.insert_length = u.delete_length
        r.delete_length = u.insert_length
        r.where = u.where

        if u.delete_length:
            if self.undo_char_point + u.delete_length >= self.char_count:
                # No room left to keep the characters for redoing.
                r.insert_length = 0
            else:
                while self.undo_char_point + u.delete_length > self.redo_char_point:
                    if self.redo_point == self.state_count:
                        return None
                    self._discard_redo()
                r = self.records[self.redo_point - 1]
                r.char_storage = self.redo_char_point - u.delete_length
                self.redo_char_point = r.char_storage
                self._save_chars(r.char_storage, buffer, u.where, u.delete_length)
            buffer.delete_chars(u.where, u.delete_length)

        if u.insert_length:
            start = u.char_storage
            buffer.insert_chars(u.where, self.chars[start:start + u.insert_length])
            self.undo_char_point -= u.insert_length

        self.undo_point -= 1
        self.redo_point -= 1
        return u.where + u.insert_length

    def redo(self, buffer: TextBuffer) -> Optional[int]:
        """Reapply the latest undone change in ``buffer``.

        Returns the new cursor position, or None if nothing was redone.
        """
        if self.redo_point == self.state_count:
            return None

        u = self.records[self.undo_point]
        r = replace(self.records[self.redo_point])
        u.delete_length = r.insert_length
        u.insert_length = r.delete_length
        u.where = r.where
        u.char_storage = -1

        if r.delete_length:
            if self.undo_char_point + u.insert_length > self.redo_char_point:
                u.insert_length = 0
                u.delete_length = 0
            else:
                u.char_storage = self.undo_char_point
                self.undo_char_point += u.insert_length
                self._save_chars(u.char_storage, buffer, u.where, u.insert_length)
            buffer.delete_chars(r.where, r.delete_length)

        if r.insert_length:
            start = r.char_storage
            buffer.insert_chars(r.where, self.chars[start:start + r.insert_length])
            self.redo_char_point += r.insert_length

        self.undo_point += 1
        self.redo_point += 1
        return r.where + r.insert_length