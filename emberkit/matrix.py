"""4x4 matrix helpers using the row-vector convention (translation in the last row)."""

from __future__ import annotations

import math
from typing import Sequence

Matrix = tuple[tuple[float, float, float, float], ...]
"""A 4x4 matrix stored as four rows of four floats."""


def _rows(values: Sequence[Sequence[float]]) -> Matrix:
    rows = tuple(tuple(float(v) for v in row) for row in values)
    if len(rows) != 4 or any(len(row) != 4 for row in rows):
        raise ValueError("a matrix must have four rows of four values")
    return rows  # type: ignore[return-value]


def identity() -> Matrix:
    """Return the 4x4 identity matrix."""
    return _rows([[1.0 if i == j else 0.0 for j in range(4)] for i in range(4)])


def scale_matrix(scale: Sequence[float]) -> Matrix:
    """Return a matrix that scales by ``(sx, sy, sz)``."""
    sx, sy, sz = scale
    return _rows(
        [
            [sx, 0.0, 0.0, 0.0],
            [0.0, sy, 0.0, 0.0],
            [0.0, 0.0, sz, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def rotate_z_matrix(angle: float) -> Matrix:
    """Return a matrix that rotates by ``angle`` radians about the Z axis."""
    c = math.cos(angle)
    s = math.sin(angle)
    return _rows(
        [
            [c, s, 0.0, 0.0],
            [-s, c, 0.0, 0.0],
            [0.0, 0.0, 1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def multiply(a: Sequence[Sequence[float]], b: Sequence[Sequence[float]]) -> Matrix:
    """Return the matrix product ``a * b``."""
    left = _rows(a)
    right = _rows(b)
    columns = list(zip(*right))
    return _rows(
        [[sum(x * y for x, y in zip(row, column)) for column in columns] for row in left]
    )


def billboard_matrix(view: Sequence[Sequence[float]]) -> Matrix:
    """Return a matrix that cancels the rotation part of a view matrix.

    The upper 3x3 block is the transpose of the view's upper 3x3 block;
    everything else is taken from the identity.
    """
    v = _rows(view)
    result = [list(row) for row in identity()]
    for i in range(3):
        for j in range(3):
            result[i][j] = v[j][i]
    return _rows(result)