"""Byte streams: the single input every analysis works on."""
from __future__ import annotations

from pathlib import Path
from typing import Union

import numpy as np

from .errors import StreamReadError

BytesLike = Union[bytes, bytearray, memoryview, np.ndarray]


def as_stream(data: BytesLike) -> np.ndarray:
    """
    Return ``data`` as a read-only one-dimensional uint8 array.

    bytes are wrapped without copying, mutable buffers are copied first; arrays
    must already be uint8 (a view is returned so the caller's array keeps its
    own flags).
    """
    if isinstance(data, np.ndarray):
        if data.dtype != np.uint8:
            raise TypeError(f"byte stream arrays must be uint8, got {data.dtype}")
        stream = data.reshape(-1).view()
    elif isinstance(data, bytes):
        stream = np.frombuffer(data, dtype=np.uint8)
    elif isinstance(data, (bytearray, memoryview)):
        stream = np.frombuffer(bytes(data), dtype=np.uint8)
    else:
        raise TypeError(f"expected a bytes-like object, got {type(data).__name__}")
    stream.flags.writeable = False
    return stream


def read_stream(path: Union[str, Path]) -> np.ndarray:
    """File source: read a whole file into a byte stream."""
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise StreamReadError(path, exc.strerror or str(exc)) from exc
    return as_stream(raw)
