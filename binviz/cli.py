"""
    : Byte statistics and digraph/trigraph pictures of binary files

    Usage:
    binviz entropy -f /path/to/file.bin -c 3
    binviz frequency -f /path/to/file.bin
    binviz visualize -f /path/to/file.bin [--trigraph] [-o output.png]
    binviz full -f a.bin b.bin c.bin [-o output] [--dashboard] [-j 4]

    What it does:
        - entropy: Shannon entropy of n consecutive bytes for n in 1..count, in
          bits per n bytes, plus the same value relative to its 8n maximum.
        - frequency: all 256 byte values ordered by how often they occur.
        - visualize: treats every pair of consecutive bytes as (x, y) and draws a
          256x256 image where brighter pixels mean more occurrences. Distinct
          file formats produce distinct recognizable patterns. With --trigraph
          the third byte of each triple picks the colour channel.
        - full: all of the above for every file, one output folder per file.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from .analysis import run_full_analysis
from .config import SCALES, AnalysisConfig
from .entropy import compute_entropy
from .errors import BinvizError
from .frequency import compute_frequency
from .layout import LAYOUTS
from .logging import LEVELS, configure_logging, get_logger, timed
from .output import BundleWriter, entropy_table, frequency_table, write_image
from .pixels import compute_visualization
from .stream import read_stream

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="binviz",
        description="Entropy, byte frequency and digraph/trigraph pictures of binary files.",
    )
    ap.add_argument("--log-level", choices=LEVELS, default="INFO", help="Log level (default: INFO)")
    ap.add_argument("--json-logs", action="store_true", help="Write logs as JSON lines")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("entropy", help="n-gram entropy for n in 1..count, in bits per n bytes")
    p.add_argument("-f", "--file", type=Path, required=True, help="Input binary file")
    p.add_argument("-c", "--count", type=int, required=True, help="Highest n-gram order")

    p = sub.add_parser("frequency", help="Byte values sorted by frequency")
    p.add_argument("-f", "--file", type=Path, required=True, help="Input binary file")

    p = sub.add_parser("visualize", help="Digraph (or trigraph) picture of a file")
    p.add_argument("-f", "--file", type=Path, required=True, help="Input binary file")
    p.add_argument("-t", "--trigraph", action="store_true", help="Colour pairs by the byte that follows them")
    p.add_argument("-o", "--output", type=Path, default=Path("output.png"), help="PNG to write (default: output.png)")
    p.add_argument("--layout", choices=tuple(LAYOUTS), default=None,
                   help="Pair placement (default: direct for digraph, zorder for trigraph)")
    _add_tone_arguments(p)

    p = sub.add_parser("full", help="Run every analysis on every file, one folder per file")
    p.add_argument("-f", "--files", type=Path, nargs="+", required=True, help="Input binary files")
    p.add_argument("-o", "--output-dir", type=Path, default=Path("output"), help="Root folder (default: output)")
    p.add_argument("-c", "--count", type=int, help="Highest n-gram order (default: $BINVIZ_MAX_ORDER or 2)")
    p.add_argument("-j", "--jobs", type=int, help="Worker processes (default: $BINVIZ_WORKERS or 1)")
    p.add_argument("--dashboard", action="store_true", help="Also write a dashboard.png per file")
    _add_tone_arguments(p, scale_default=None)
    return ap


def _add_tone_arguments(p: argparse.ArgumentParser, scale_default: Optional[str] = "log") -> None:
    default = "log" if scale_default else "$BINVIZ_SCALE or log"
    p.add_argument("--scale", choices=SCALES, default=scale_default,
                   help=f"Tone-mapping curve; 'log' keeps rare pairs visible (default: {default})")
    p.add_argument("--gamma", type=float, default=0.4,
                   help="Gamma applied after the curve; < 1 brightens rare pixels (default: 0.4)")


def cmd_entropy(args: argparse.Namespace, console: Console) -> int:
    with timed("entropy", file=str(args.file), count=args.count):
        result = compute_entropy(read_stream(args.file), args.count)
    console.print(entropy_table(result))
    return 0


def cmd_frequency(args: argparse.Namespace, console: Console) -> int:
    with timed("frequency", file=str(args.file)):
        frequencies = compute_frequency(read_stream(args.file))
    console.print(frequency_table(frequencies))
    return 0


def cmd_visualize(args: argparse.Namespace, console: Console) -> int:
    mode = "trigraph" if args.trigraph else "digraph"
    with timed("visualize", file=str(args.file), mode=mode):
        buffer = compute_visualization(read_stream(args.file), mode, args.scale, args.gamma, args.layout)
        write_image(buffer, args.output)
    logger.info(
        "image saved",
        path=str(args.output),
        windows=buffer.windows,
        peak=buffer.peak,
        mean_per_cell=round(buffer.mean_per_cell, 4),
    )
    return 0


def cmd_full(args: argparse.Namespace, console: Console) -> int:
    config = AnalysisConfig(gamma=args.gamma)
    # BINVIZ_* variables only fill in what the command line left unset
    for field_name, value in (("max_order", args.count), ("scale", args.scale), ("workers", args.jobs)):
        if value is not None:
            setattr(config, field_name, value)
    writer = BundleWriter(args.output_dir, dashboard=args.dashboard)
    batch = run_full_analysis(args.files, config, writer)

    summary = Table(title="Full analysis")
    summary.add_column("File")
    summary.add_column("Status")
    summary.add_column("Detail")
    rows = [(b.index, b.name, "ok", str(writer.folder(b.index))) for b in batch.bundles]
    rows += [(f.index, f.name, "failed", f.error) for f in batch.failures]
    for _, name, status, detail in sorted(rows):
        summary.add_row(name, status, detail)
    console.print(summary)
    return 0 if batch.ok else 1


COMMANDS = {
    "entropy": cmd_entropy,
    "frequency": cmd_frequency,
    "visualize": cmd_visualize,
    "full": cmd_full,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=args.log_level, json_output=args.json_logs)
    console = Console(highlight=False)
    try:
        return COMMANDS[args.command](args, console)
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130
    except BinvizError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
