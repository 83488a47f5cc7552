"""Byte values ranked by how often they occur."""
from __future__ import annotations

from typing import NamedTuple, Tuple

import numpy as np

from .counting import NGramCount, count_ngrams
from .stream import BytesLike


class FrequencyEntry(NamedTuple):
    byte: int
    count: int


FrequencyTable = Tuple[FrequencyEntry, ...]


def rank_frequencies(histogram: NGramCount) -> FrequencyTable:
    """
    All 256 byte values, most frequent first; equal counts go by ascending byte
    value so the order is total and repeatable.
    """
    if histogram.order != 1:
        raise ValueError(f"frequency ranking needs an order-1 histogram, got order {histogram.order}")
    counts = np.zeros(256, dtype=np.int64)
    for (byte,), count in histogram.items():
        counts[byte] = count
    values = np.arange(256)
    # lexsort keys are given last-significant first
    order = np.lexsort((values, -counts))
    return tuple(FrequencyEntry(int(b), int(counts[b])) for b in order)


def compute_frequency(data: BytesLike) -> FrequencyTable:
    return rank_frequencies(count_ngrams(data, 1))


def relative_frequency(entry: FrequencyEntry, total: int) -> float:
    return entry.count / total if total else 0.0
