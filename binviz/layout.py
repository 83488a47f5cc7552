"""
    Placement of byte pairs on the 256x256 canvas.

    A layout is a bijection between the 65536 pairs (a, b) -- equivalently the
    16-bit values v = a << 8 | b -- and the canvas points (x, y), 0 <= x, y < 256.
    Both directions work element-wise on ints or numpy integer arrays.

    - direct: x = a, y = b. The classic digraph picture.
    - zorder: the bits of v are de-interleaved, even bits giving x and odd bits
      giving y (a Morton curve). Pairs sharing a long prefix land in the same
      small square, so a trigraph image keeps related pairs together.
"""
from __future__ import annotations

from typing import Dict, Tuple

import numpy as np

from .errors import ConfigurationError

CANVAS = 256


def _spread(x):
    """Move bits 0..7 of x to the even positions 0, 2, ..., 14."""
    x = x & 0x00FF
    x = (x | (x << 4)) & 0x0F0F
    x = (x | (x << 2)) & 0x3333
    x = (x | (x << 1)) & 0x5555
    return x


def _compact(v):
    """Inverse of _spread: gather the even bits of v into bits 0..7."""
    v = v & 0x5555
    v = (v | (v >> 1)) & 0x3333
    v = (v | (v >> 2)) & 0x0F0F
    v = (v | (v >> 4)) & 0x00FF
    return v


class DirectLayout:
    name = "direct"

    def to_point(self, a, b) -> Tuple:
        return a, b

    def to_pair(self, x, y) -> Tuple:
        return x, y


class ZOrderLayout:
    name = "zorder"

    def to_point(self, a, b) -> Tuple:
        v = (a << 8) | b
        return _compact(v), _compact(v >> 1)

    def to_pair(self, x, y) -> Tuple:
        v = _spread(x) | (_spread(y) << 1)
        return v >> 8, v & 0xFF


LAYOUTS: Dict[str, object] = {
    DirectLayout.name: DirectLayout(),
    ZOrderLayout.name: ZOrderLayout(),
}


def get_layout(name: str):
    try:
        return LAYOUTS[name]
    except KeyError:
        raise ConfigurationError(f"unknown layout {name!r} (expected one of {tuple(LAYOUTS)})") from None


def arrange(matrix: np.ndarray, layout) -> np.ndarray:
    """
    Move a pair-indexed matrix (``matrix[a, b, ...]``) onto the canvas so that
    ``canvas[y, x, ...]`` holds the cell of the pair the layout puts at (x, y).
    Trailing axes (colour bands) travel with their cell.
    """
    if matrix.shape[:2] != (CANVAS, CANVAS):
        raise ValueError(f"expected a {CANVAS}x{CANVAS} pair matrix, got shape {matrix.shape}")
    a, b = np.divmod(np.arange(CANVAS * CANVAS, dtype=np.int64), CANVAS)
    x, y = layout.to_point(a, b)
    canvas = np.zeros_like(matrix)
    canvas[y, x] = matrix[a, b]
    return canvas
