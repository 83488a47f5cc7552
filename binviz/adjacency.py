"""
    Byte-pair and byte-triple co-occurrence matrices.

    digraph: every window (a, b) adds one to cell [a, b] of a 256x256 matrix.

    trigraph: every window (a, b, c) adds one to cell [a, b] as well, but in the
    colour band picked by its third byte:

        band(c) = c * 3 // 256     0..85 -> 0 (red), 86..170 -> 1 (green), 171..255 -> 2 (blue)

    The matrix is 256x256x4. Slots 0..2 are the colour bands and hold exactly
    len(stream) - 2 triples. Slot 3 (TAIL) holds the stream's final pair, the one
    pair no third byte follows, so that summing all four slots gives back the
    digraph matrix of the same stream cell for cell.
"""
from __future__ import annotations

import numpy as np

from .logging import timed
from .stream import BytesLike, as_stream

BANDS = 3
TAIL = BANDS
SLOTS = BANDS + 1
PAIRS = 256 * 256


def band(c):
    return (c * BANDS) // 256


def _pair_keys(stream: np.ndarray, stop: int) -> np.ndarray:
    return (stream[:stop].astype(np.int64) << 8) | stream[1:stop + 1]


def digraph_matrix(data: BytesLike) -> np.ndarray:
    stream = as_stream(data)
    if stream.size < 2:
        return np.zeros((256, 256), dtype=np.int64)
    with timed("digraph_matrix", level="debug", size=int(stream.size)):
        keys = _pair_keys(stream, stream.size - 1)
        return np.bincount(keys, minlength=PAIRS).astype(np.int64).reshape(256, 256)


def trigraph_matrix(data: BytesLike) -> np.ndarray:
    stream = as_stream(data)
    matrix = np.zeros((256, 256, SLOTS), dtype=np.int64)
    if stream.size < 2:
        return matrix
    with timed("trigraph_matrix", level="debug", size=int(stream.size)):
        if stream.size >= 3:
            keys = _pair_keys(stream, stream.size - 2) * BANDS + band(stream[2:].astype(np.int64))
            matrix[..., :BANDS] = np.bincount(keys, minlength=PAIRS * BANDS).reshape(256, 256, BANDS)
        matrix[stream[-2], stream[-1], TAIL] += 1
    return matrix


def colour_bands(matrix: np.ndarray) -> np.ndarray:
    """The triple counts of a trigraph matrix, without the tail slot."""
    return matrix[..., :BANDS]


def reduce_trigraph(matrix: np.ndarray) -> np.ndarray:
    """Collapse a trigraph matrix into a plain pair-count matrix."""
    return matrix.sum(axis=2)
