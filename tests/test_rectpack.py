import itertools
import random

import pytest

from emberkit.rectpack import MAX_COORD, Heuristic, Rect, RectPacker


def _overlaps(a, b):
    return a.x < b.x + b.w and b.x < a.x + a.w and a.y < b.y + b.h and b.y < a.y + a.h


def _random_rects(seed, count, max_side):
    rng = random.Random(seed)
    return [
        Rect(w=rng.randint(1, max_side), h=rng.randint(1, max_side), id=i)
        for i in range(count)
    ]


def _assert_valid_packing(rects, width, height):
    packed = [r for r in rects if r.was_packed]
    for r in packed:
        assert 0 <= r.x and r.x + r.w <= width
        assert 0 <= r.y and r.y + r.h <= height
    for a, b in itertools.combinations(packed, 2):
        assert not _overlaps(a, b)
    for r in rects:
        if not r.was_packed:
            assert (r.x, r.y) == (MAX_COORD, MAX_COORD)


def test_single_rect_goes_to_origin():
    packer = RectPacker(64, 64, 64)
    rect = Rect(w=10, h=5)
    assert packer.pack([rect]) is True
    assert (rect.x, rect.y, rect.was_packed) == (0, 0, True)


@pytest.mark.parametrize(
    "heuristic", [Heuristic.SKYLINE_BL_SORT_HEIGHT, Heuristic.SKYLINE_BF_SORT_HEIGHT]
)
@pytest.mark.parametrize("seed", [1, 2, 3])
def test_random_packing_is_valid(heuristic, seed):
    packer = RectPacker(128, 128, 128)
    packer.set_heuristic(heuristic)
    rects = _random_rects(seed, 40, 30)
    result = packer.pack(rects)
    _assert_valid_packing(rects, 128, 128)
    assert result == all(r.was_packed for r in rects)


def test_order_of_rects_is_kept():
    packer = RectPacker(100, 100, 100)
    rects = _random_rects(7, 15, 20)
    ids = [r.id for r in rects]
    packer.pack(rects)
    assert [r.id for r in rects] == ids


def test_too_large_rect_is_not_packed():
    packer = RectPacker(32, 32, 32)
    big = Rect(w=33, h=4)
    small = Rect(w=4, h=4)
    assert packer.pack([big, small]) is False
    assert big.was_packed is False
    assert (big.x, big.y) == (MAX_COORD, MAX_COORD)
    assert small.was_packed is True


def test_too_tall_rect_is_not_packed():
    packer = RectPacker(32, 32, 32)
    tall = Rect(w=4, h=40)
    assert packer.pack([tall]) is False
    assert (tall.x, tall.y) == (MAX_COORD, MAX_COORD)


def test_empty_rect_needs_no_space():
    packer = RectPacker(16, 16, 16)
    empty = Rect(w=0, h=5)
    assert packer.pack([empty]) is True
    assert (empty.x, empty.y, empty.was_packed) == (0, 0, True)


def test_exact_fill_then_overflow():
    packer = RectPacker(20, 20, 20)
    quarters = [Rect(w=10, h=10, id=i) for i in range(4)]
    assert packer.pack(quarters) is True
    _assert_valid_packing(quarters, 20, 20)
    extra = Rect(w=1, h=1)
    assert packer.pack([extra]) is False
    assert extra.was_packed is False


def test_repeated_pack_calls_do_not_overlap():
    packer = RectPacker(64, 64, 64)
    first = _random_rects(11, 8, 12)
    second = _random_rects(12, 8, 12)
    packer.pack(first)
    packer.pack(second)
    _assert_valid_packing(first + second, 64, 64)


def test_allow_out_of_mem_can_run_out_of_nodes():
    packer = RectPacker(10, 10, 1)
    packer.set_allow_out_of_mem(True)
    rects = [Rect(w=1, h=1, id=i) for i in range(3)]
    assert packer.pack(rects) is False
    assert sum(r.was_packed for r in rects) == 1


def test_align_follows_node_count():
    packer = RectPacker(100, 10, 30)
    assert packer.align == (100 + 29) // 30
    packer.set_allow_out_of_mem(True)
    assert packer.align == 1


def test_invalid_heuristic_rejected():
    packer = RectPacker(8, 8, 8)
    with pytest.raises(ValueError):
        packer.set_heuristic(5)


def test_zero_nodes_rejected():
    with pytest.raises(ValueError):
        RectPacker(8, 8, 0)


def test_default_heuristic_is_bottom_left():
    packer = RectPacker(8, 8, 8)
    assert packer.heuristic == Heuristic.SKYLINE_BL_SORT_HEIGHT
    packer.set_heuristic(Heuristic.SKYLINE_BF_SORT_HEIGHT)
    assert packer.heuristic == Heuristic.SKYLINE_BF_SORT_HEIGHT