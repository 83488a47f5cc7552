"""
    Writers for analysis results: markdown-style text tables and CSV for the
    entropy and frequency tables, PNG for pixel buffers, and an optional
    matplotlib dashboard per file.
"""
from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Dict, Optional, Union

import numpy as np
from matplotlib.figure import Figure
from PIL import Image
from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .analysis import AnalysisBundle
from .entropy import EntropyResult
from .frequency import FrequencyTable, relative_frequency
from .logging import get_logger
from .pixels import PixelBuffer

logger = get_logger(__name__)

PathLike = Union[str, Path]


def entropy_table(result: EntropyResult) -> Table:
    table = Table(box=box.MARKDOWN)
    table.add_column("Dimension", justify="right")
    table.add_column("Entropy")
    table.add_column("Relative Entropy", justify="right")
    for entry in result:
        table.add_row(
            str(entry.order),
            f"{entry.bits:.5f} (bits per {entry.order} byte(s))",
            f"{entry.relative:.5f}",
        )
    return table


def frequency_table(frequencies: FrequencyTable) -> Table:
    total = sum(entry.count for entry in frequencies)
    table = Table(box=box.MARKDOWN)
    for header in ("Rank", "Byte", "Hex", "Text", "Count", "Relative Frequency"):
        table.add_column(header, justify="left" if header == "Text" else "right")
    for rank, entry in enumerate(frequencies):
        table.add_row(
            str(rank),
            str(entry.byte),
            f"{entry.byte:#04x}",
            Text(repr(chr(entry.byte))),
            str(entry.count),
            f"{relative_frequency(entry, total):.5f}",
        )
    return table


def render_text(table: Table, width: int = 120) -> str:
    """Render a rich table to plain text, no colours or terminal probing."""
    buffer = io.StringIO()
    console = Console(file=buffer, width=width, color_system=None, force_terminal=False, highlight=False)
    console.print(table)
    return buffer.getvalue()


def write_entropy_csv(result: EntropyResult, path: PathLike) -> None:
    with open(path, "w", newline="", encoding="utf-8") as handle:
        out = csv.writer(handle)
        out.writerow(["order", "bits", "relative"])
        for entry in result:
            out.writerow([entry.order, f"{entry.bits:.10f}", f"{entry.relative:.10f}"])


def write_frequency_csv(frequencies: FrequencyTable, path: PathLike) -> None:
    total = sum(entry.count for entry in frequencies)
    with open(path, "w", newline="", encoding="utf-8") as handle:
        out = csv.writer(handle)
        out.writerow(["rank", "byte", "count", "relative"])
        for rank, entry in enumerate(frequencies):
            out.writerow([rank, entry.byte, entry.count, f"{relative_frequency(entry, total):.10f}"])


def to_image(buffer: PixelBuffer) -> Image.Image:
    """Grayscale ("L") for one channel, "RGB" for three."""
    return Image.fromarray(np.array(buffer.pixels))


def write_image(buffer: PixelBuffer, path: PathLike) -> None:
    to_image(buffer).save(path, format="PNG")


def write_dashboard(bundle: AnalysisBundle, path: PathLike) -> None:
    """
    One PNG summarizing a file:
    1) byte strip (grayscale hexdump),
    2) entropy per window,
    3) byte histogram,
    4) digraph picture,
    5) trigraph picture.
    """
    histogram = np.zeros(256, dtype=np.int64)
    for entry in bundle.frequency:
        histogram[entry.byte] = entry.count

    fig = Figure(figsize=(12, 12))
    grid = fig.add_gridspec(3, 2)

    ax1 = fig.add_subplot(grid[0, :])
    ax1.imshow(bundle.strip, cmap="gray", vmin=0, vmax=255, aspect="auto", interpolation="nearest")
    ax1.set_title("Byte image (grayscale hexdump)")
    ax1.set_ylabel("Row")
    ax1.set_xlabel(f"Byte index (mod {bundle.strip.shape[1]})")

    ax2 = fig.add_subplot(grid[1, 0])
    ax2.plot(np.arange(bundle.profile.size), bundle.profile)
    ax2.set_title("Entropy per window (bits)")
    ax2.set_xlabel("Window #")
    ax2.set_ylabel("Entropy (0-8)")
    ax2.set_ylim(0, 8)

    ax3 = fig.add_subplot(grid[1, 1])
    ax3.plot(histogram)
    ax3.set_title("Byte histogram")
    ax3.set_xlabel("Byte value")
    ax3.set_ylabel("Count")

    digraph = bundle.images["digraph"]
    ax4 = fig.add_subplot(grid[2, 0])
    ax4.imshow(digraph.pixels, cmap="gray", vmin=0, vmax=255, interpolation="nearest")
    ax4.set_title(f"Digraph ({digraph.layout})")
    ax4.set_xlabel("byte[i]")
    ax4.set_ylabel("byte[i+1]")

    trigraph = bundle.images["trigraph"]
    ax5 = fig.add_subplot(grid[2, 1])
    ax5.imshow(trigraph.pixels, interpolation="nearest")
    ax5.set_title(f"Trigraph ({trigraph.layout}, colour = byte[i+2])")
    ax5.set_xticks([])
    ax5.set_yticks([])

    entropies = " ".join(f"H{e.order}={e.bits:.3f}" for e in bundle.entropy)
    fig.suptitle(f"{bundle.name} | {bundle.size} bytes | {entropies}", y=0.98)
    fig.tight_layout(rect=[0, 0, 1, 0.96])
    fig.savefig(path, dpi=100)


class BundleWriter:
    """
    Write each bundle to its own folder under ``root``, named after the input's
    file stem. A stem already used in this run gets a ``-<index>`` suffix.
    """

    def __init__(self, root: PathLike = "output", dashboard: bool = False):
        self.root = Path(root)
        self.dashboard = dashboard
        self.folders: Dict[int, Path] = {}

    def folder_for(self, bundle: AnalysisBundle) -> Path:
        name = bundle.stem
        if any(folder.name == name for folder in self.folders.values()):
            name = f"{name}-{bundle.index}"
        return self.root / name

    def __call__(self, bundle: AnalysisBundle) -> Path:
        folder = self.folder_for(bundle)
        folder.mkdir(parents=True, exist_ok=True)

        (folder / "entropy.txt").write_text(render_text(entropy_table(bundle.entropy)), encoding="utf-8")
        write_entropy_csv(bundle.entropy, folder / "entropy.csv")
        (folder / "most_frequent.txt").write_text(render_text(frequency_table(bundle.frequency)), encoding="utf-8")
        write_frequency_csv(bundle.frequency, folder / "most_frequent.csv")
        for mode, buffer in bundle.images.items():
            write_image(buffer, folder / f"{mode}.png")
        if self.dashboard:
            write_dashboard(bundle, folder / "dashboard.png")

        self.folders[bundle.index] = folder
        logger.info("results written", source=bundle.name, folder=str(folder))
        return folder

    def folder(self, index: int) -> Optional[Path]:
        return self.folders.get(index)
