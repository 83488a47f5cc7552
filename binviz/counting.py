"""
    N-gram counting over a byte stream.

    Every overlapping window of ``order`` consecutive bytes (stride 1) is counted.
    Two table layouts are produced:

    - dense: a flat array of 256**order slots indexed by the big-endian value of
      the window; only used up to DENSE_MAX_ORDER so it never exceeds 65536 slots.
    - sparse: the distinct windows actually observed plus their counts, so memory
      follows the stream rather than 256**order.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from .config import DENSE_MAX_ORDER, STRATEGIES, check_order
from .errors import ConfigurationError, ResourceLimitError
from .logging import timed
from .stream import BytesLike, as_stream

NGram = Union[bytes, Sequence[int]]


@dataclass(frozen=True)
class NGramCount:
    order: int
    counts: np.ndarray               # dense: 256**order slots, sparse: one per distinct n-gram
    keys: Optional[np.ndarray] = None  # sparse only: (distinct, order) uint8, lexicographic

    @property
    def dense(self) -> bool:
        return self.keys is None

    @property
    def total(self) -> int:
        """Number of windows counted, i.e. max(0, len(stream) - order + 1)."""
        return int(self.counts.sum())

    @property
    def distinct(self) -> int:
        return int(np.count_nonzero(self.counts))

    def nonzero_counts(self) -> np.ndarray:
        return self.counts[self.counts > 0]

    def get(self, ngram: NGram) -> int:
        gram = np.frombuffer(bytes(ngram), dtype=np.uint8)
        if gram.size != self.order:
            raise ValueError(f"expected an n-gram of {self.order} byte(s), got {gram.size}")
        if self.dense:
            return int(self.counts[_gram_index(gram)])
        hit = np.flatnonzero((self.keys == gram).all(axis=1))
        return int(self.counts[hit[0]]) if hit.size else 0

    def items(self) -> Iterator[Tuple[Tuple[int, ...], int]]:
        """Yield (n-gram, count) for every n-gram seen, in lexicographic order."""
        if self.dense:
            for index in np.flatnonzero(self.counts):
                yield _index_gram(int(index), self.order), int(self.counts[index])
        else:
            for key, count in zip(self.keys, self.counts):
                yield tuple(int(b) for b in key), int(count)


def _gram_index(gram: np.ndarray) -> int:
    return int.from_bytes(gram.tobytes(), "big")


def _index_gram(index: int, order: int) -> Tuple[int, ...]:
    return tuple(index.to_bytes(order, "big"))


def window_codes(stream: np.ndarray, order: int) -> np.ndarray:
    """Big-endian integer value of every window of ``order`` bytes (order <= 7)."""
    n = stream.size - order + 1
    if n <= 0:
        return np.zeros(0, dtype=np.int64)
    codes = stream[:n].astype(np.int64)
    for offset in range(1, order):
        codes = (codes << 8) | stream[offset:offset + n]
    return codes


def _count_dense(stream: np.ndarray, order: int) -> NGramCount:
    codes = window_codes(stream, order)
    counts = np.bincount(codes, minlength=256 ** order).astype(np.int64)
    return NGramCount(order, counts)


def _count_sparse(stream: np.ndarray, order: int) -> NGramCount:
    if stream.size < order:
        return NGramCount(order, np.zeros(0, dtype=np.int64), np.zeros((0, order), dtype=np.uint8))
    windows = sliding_window_view(stream, order)
    keys, counts = np.unique(windows, axis=0, return_counts=True)
    return NGramCount(order, counts.astype(np.int64), keys)


def count_ngrams(data: BytesLike, order: int, strategy: str = "auto") -> NGramCount:
    """
    Count every overlapping n-gram of length ``order``.

    strategy - "auto" (dense up to DENSE_MAX_ORDER, sparse above), "dense" or "sparse".
    A dense request above DENSE_MAX_ORDER raises ResourceLimitError instead of
    allocating 256**order slots.
    """
    check_order(order)
    if strategy not in STRATEGIES:
        raise ConfigurationError(f"unknown counting strategy {strategy!r} (expected one of {STRATEGIES})")
    stream = as_stream(data)

    dense = order <= DENSE_MAX_ORDER if strategy == "auto" else strategy == "dense"
    if dense and order > DENSE_MAX_ORDER:
        raise ResourceLimitError(
            f"a dense table for order {order} needs 256**{order} slots; "
            f"use the sparse strategy above order {DENSE_MAX_ORDER}"
        )
    with timed("count_ngrams", level="debug", order=order, dense=dense, size=int(stream.size)):
        return _count_dense(stream, order) if dense else _count_sparse(stream, order)


def count_all_orders(data: BytesLike, max_order: int, strategy: str = "auto") -> List[NGramCount]:
    """Counts for every order 1..max_order, in increasing order."""
    check_order(max_order)
    stream = as_stream(data)
    return [count_ngrams(stream, order, strategy) for order in range(1, max_order + 1)]
