"""
    Shannon entropy of n-gram distributions.

    - order 1 sits in 0..8 bits (per byte), order n in 0..8n bits (per n bytes)
    - High entropy: compressed or encrypted or packed
    - Low entropy: structured or repeated patterns or padding
"""
from __future__ import annotations

from typing import NamedTuple, Tuple

import numpy as np

from .config import check_order
from .counting import NGramCount, count_all_orders
from .stream import BytesLike, as_stream


class EntropyEntry(NamedTuple):
    order: int
    bits: float

    @property
    def relative(self) -> float:
        """Entropy as a fraction of the 8*order bit maximum."""
        return self.bits / (8.0 * self.order)


EntropyResult = Tuple[EntropyEntry, ...]


def shannon_entropy(counts: np.ndarray) -> float:
    """
    H = -sum(p * log2(p)) over the non-zero counts; 0.0 when nothing was counted.
    """
    counts = np.asarray(counts)
    counts = counts[counts > 0].astype(np.float64)
    if counts.size == 0:
        return 0.0
    p = counts / counts.sum()
    h = float(-(p * np.log2(p)).sum())
    # a single symbol gives -0.0
    return h if h > 0.0 else 0.0


def ngram_entropy(table: NGramCount) -> float:
    return shannon_entropy(table.nonzero_counts())


def compute_entropy(data: BytesLike, max_order: int, strategy: str = "auto") -> EntropyResult:
    """Entropy in bits per n bytes for every n in 1..max_order."""
    check_order(max_order)
    return tuple(
        EntropyEntry(table.order, ngram_entropy(table))
        for table in count_all_orders(data, max_order, strategy)
    )


def entropy_profile(data: BytesLike, window: int = 2048, stride: int = 2048) -> np.ndarray:
    """
    Order-1 entropy of each window of ``window`` bytes, one window starting
    every ``stride`` bytes. The last window may be shorter than ``window``.
    """
    stream = as_stream(data)
    starts = np.arange(0, stream.size, stride, dtype=np.int64)
    profile = np.empty(starts.size, dtype=np.float64)
    for i, s in enumerate(starts):
        chunk = stream[s:s + window]
        profile[i] = shannon_entropy(np.bincount(chunk, minlength=256))
    return profile
