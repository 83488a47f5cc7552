"""
    Turn co-occurrence matrices into pixel buffers.

    Brightness follows a tone-mapping curve over the counts:

    - log (default): log1p(count) / log1p(peak), keeps rare pairs visible next to
      the handful of cells (0x00 0x00 and friends) that dominate real files
    - sqrt: sqrt(count / peak), softer
    - linear: count / peak

    followed by gamma correction (ratio ** gamma). Empty cells are 0 (black
    background); any non-empty cell is at least 1, so nothing seen renders as
    background.

    Channels:
    - digraph: one grayscale channel, shape (256, 256)
    - trigraph: RGB, shape (256, 256, 3); red/green/blue carry the triples whose
      third byte fell in 0..85 / 86..170 / 171..255. All three channels share one
      peak so their brightness stays comparable.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .adjacency import colour_bands, digraph_matrix, trigraph_matrix
from .config import SCALES, check_mode
from .errors import ConfigurationError
from .layout import arrange, get_layout
from .stream import BytesLike

DEFAULT_LAYOUTS = {"digraph": "direct", "trigraph": "zorder"}


@dataclass(frozen=True)
class PixelBuffer:
    pixels: np.ndarray   # uint8, read-only; (height, width) or (height, width, 3)
    mode: str
    layout: str
    windows: int         # pairs (digraph) or triples (trigraph) drawn
    peak: int            # count behind a full-brightness pixel
    distinct: int        # occupied cells

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def channels(self) -> int:
        return 1 if self.pixels.ndim == 2 else self.pixels.shape[2]

    @property
    def mean_per_cell(self) -> float:
        """Average count of an occupied cell."""
        return self.windows / self.distinct if self.distinct else 0.0


def tone_map(counts: np.ndarray, peak: Optional[int] = None, scale: str = "log", gamma: float = 0.4) -> np.ndarray:
    """Convert counts to 0..255 brightness values using the requested curve."""
    if scale not in SCALES:
        raise ConfigurationError(f"unknown scale {scale!r} (expected one of {SCALES})")
    if not gamma > 0:
        raise ConfigurationError(f"gamma must be positive, got {gamma}")

    counts = np.asarray(counts, dtype=np.float64)
    if peak is None:
        peak = counts.max() if counts.size else 0
    out = np.zeros(counts.shape, dtype=np.uint8)
    if peak <= 0:
        return out

    if scale == "log":
        ratio = np.log1p(counts) / np.log1p(peak)
    elif scale == "sqrt":
        ratio = np.sqrt(counts / peak)
    else:
        ratio = counts / peak
    ratio = np.clip(ratio, 0.0, 1.0)
    if gamma != 1:
        ratio = ratio ** gamma

    lit = counts > 0
    # the faintest non-zero cell still must not be pure black
    out[lit] = np.clip(np.rint(ratio[lit] * 255), 1, 255).astype(np.uint8)
    return out


def _freeze(pixels: np.ndarray) -> np.ndarray:
    pixels.flags.writeable = False
    return pixels


def render_digraph(matrix: np.ndarray, scale: str = "log", gamma: float = 0.4, layout: str = "direct") -> PixelBuffer:
    canvas = arrange(matrix, get_layout(layout))
    peak = int(matrix.max())
    return PixelBuffer(
        pixels=_freeze(tone_map(canvas, peak, scale, gamma)),
        mode="digraph",
        layout=layout,
        windows=int(matrix.sum()),
        peak=peak,
        distinct=int(np.count_nonzero(matrix)),
    )


def render_trigraph(matrix: np.ndarray, scale: str = "log", gamma: float = 0.4, layout: str = "zorder") -> PixelBuffer:
    bands = colour_bands(matrix)
    canvas = arrange(bands, get_layout(layout))
    peak = int(bands.max())
    return PixelBuffer(
        pixels=_freeze(tone_map(canvas, peak, scale, gamma)),
        mode="trigraph",
        layout=layout,
        windows=int(bands.sum()),
        peak=peak,
        distinct=int(np.count_nonzero(bands.sum(axis=2))),
    )


def compute_visualization(
    data: BytesLike,
    mode: str = "digraph",
    scale: str = "log",
    gamma: float = 0.4,
    layout: Optional[str] = None,
) -> PixelBuffer:
    """Render the digraph or trigraph picture of a byte stream."""
    check_mode(mode)
    layout = layout or DEFAULT_LAYOUTS[mode]
    if mode == "digraph":
        return render_digraph(digraph_matrix(data), scale, gamma, layout)
    return render_trigraph(trigraph_matrix(data), scale, gamma, layout)
