"""Skyline bottom-left rectangle packing into a fixed-size target."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Optional

MAX_COORD = 0x7FFFFFFF
"""Largest supported coordinate; unpacked rectangles are placed here."""

_SENTINEL_Y = 1 << 30


class Heuristic(enum.IntEnum):
    """Choice of position the skyline packer prefers."""

    SKYLINE_BL_SORT_HEIGHT = 0
    SKYLINE_BF_SORT_HEIGHT = 1

    DEFAULT = 0


@dataclass
class Rect:
    """A rectangle to pack; ``x``, ``y`` and ``was_packed`` are filled in by packing."""

    w: int
    h: int
    id: int = 0
    x: int = 0
    y: int = 0
    was_packed: bool = False


@dataclass
class _Node:
    x: int
    y: int


@dataclass
class _FindResult:
    index: Optional[int]
    x: int
    y: int


class RectPacker:
    """Packs rectangles into a ``width`` x ``height`` area using a skyline."""

    def __init__(self, width: int, height: int, num_nodes: int) -> None:
        if num_nodes < 1:
            raise ValueError("num_nodes must be at least 1")
        self.width = width
        self.height = height
        self.num_nodes = num_nodes
        self.heuristic = Heuristic.DEFAULT
        self._free = num_nodes
        # The last node is a sentinel marking the right edge of the target.
        self._skyline = [_Node(0, 0), _Node(width, _SENTINEL_Y)]
        self.align = 1
        self.set_allow_out_of_mem(False)

    def set_allow_out_of_mem(self, allow: bool) -> None:
        """Choose between quantised widths (never run out of nodes) and exact widths."""
        if allow:
            self.align = 1
        else:
            self.align = (self.width + self.num_nodes - 1) // self.num_nodes

    def set_heuristic(self, heuristic: int) -> None:
        """Select the packing heuristic."""
        try:
            self.heuristic = Heuristic(heuristic)
        except ValueError:
            raise ValueError(f"unknown packing heuristic: {heuristic!r}") from None

    def _find_min_y(self, first: int, x0: int, width: int) -> tuple[int, int]:
        nodes = self._skyline
        x1 = x0 + width
        min_y = 0
        waste_area = 0
        visited_width = 0
        i = first
        while nodes[i].x < x1:
            node = nodes[i]
            next_x = nodes[i + 1].x
            if node.y > min_y:
                waste_area += visited_width * (node.y - min_y)
                min_y = node.y
                if node.x < x0:
                    visited_width += next_x - x0
                else:
                    visited_width += next_x - node.x
            else:
                under_width = next_x - node.x
                if under_width + visited_width > width:
                    under_width = width - visited_width
                waste_area += under_width * (min_y - node.y)
                visited_width += under_width
            i += 1
        return min_y, waste_area

    def _find_best_pos(self, width: int, height: int) -> _FindResult:
        width = width + self.align - 1
        width -= width % self.align

        if width > self.width or height > self.height:
            return _FindResult(None, 0, 0)

        nodes = self._skyline
        best_waste = _SENTINEL_Y
        best_y = _SENTINEL_Y
        best: Optional[int] = None
        bottom_left = self.heuristic == Heuristic.SKYLINE_BL_SORT_HEIGHT

        i = 0
        while nodes[i].x + width <= self.width:
            y, waste = self._find_min_y(i, nodes[i].x, width)
            if bottom_left:
                if y < best_y:
                    best_y = y
                    best = i
            elif y + height <= self.height:
                if y < best_y or (y == best_y and waste < best_waste):
                    best_y = y
                    best_waste = waste
                    best = i
            i += 1

        best_x = 0 if best is None else nodes[best].x

        if not bottom_left:
            # Also try aligning the right edge to each skyline step.
            tail = 0
            while nodes[tail].x < width:
                tail += 1
            node = 0
            for tail_node in nodes[tail:]:
                xpos = tail_node.x - width
                while nodes[node + 1].x <= xpos:
                    node += 1
                y, waste = self._find_min_y(node, xpos, width)
                if y + height <= self.height and y <= best_y:
                    if (
                        y < best_y
                        or waste < best_waste
                        or (waste == best_waste and xpos < best_x)
                    ):
                        best_x = xpos
                        best_y = y
                        best_waste = waste
                        best = node

        return _FindResult(best, best_x, best_y)

    def _pack_rectangle(self, width: int, height: int) -> Optional[tuple[int, int]]:
        res = self._find_best_pos(width, height)
        if res.index is None or res.y + height > self.height or self._free == 0:
            return None

        nodes = self._skyline
        new_node = _Node(res.x, res.y + height)
        self._free -= 1

        start = res.index
        if nodes[start].x < res.x:
            start += 1
        right = res.x + width
        cur = start
        while cur + 1 < len(nodes) and nodes[cur + 1].x <= right:
            cur += 1
        self._free += cur - start
        nodes[start:cur] = [new_node]

        following = nodes[start + 1]
        if following.x < right:
            following.x = right
        return res.x, res.y

    def pack(self, rects: Iterable[Rect]) -> bool:
        """Assign positions to ``rects`` in place; return True if all of them fit.

        Rectangles are placed tallest first. Those that do not fit get
        ``was_packed`` False and both coordinates set to ``MAX_COORD``.
        Calling again continues packing into the same target.
        """
        rect_list = list(rects)
        ordered = sorted(rect_list, key=lambda r: (-r.h, -r.w))
        for rect in ordered:
            if rect.w == 0 or rect.h == 0:
                rect.x = rect.y = 0
                continue
            placed = self._pack_rectangle(rect.w, rect.h)
            if placed is None:
                rect.x = rect.y = MAX_COORD
            else:
                rect.x, rect.y = placed

        all_packed = True
        for rect in rect_list:
            rect.was_packed = not (rect.x == MAX_COORD and rect.y == MAX_COORD)
            if not rect.was_packed:
                all_packed = False
        return all_packed