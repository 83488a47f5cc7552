"""
    Per-file analysis and the batch runner.

    One AnalysisBundle is built per input: entropy for orders 1..max_order, the
    byte frequency ranking, digraph and trigraph pictures and a windowed entropy
    profile. Inputs are independent, so a batch can fan out to worker processes;
    results always come back in input order.
"""
from __future__ import annotations

import math
import os
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Union

import numpy as np

from .adjacency import digraph_matrix, trigraph_matrix
from .config import AnalysisConfig
from .counting import count_all_orders
from .entropy import EntropyEntry, EntropyResult, entropy_profile, ngram_entropy
from .errors import BinvizError
from .frequency import FrequencyTable, rank_frequencies
from .logging import LogContext, get_logger, timed
from .pixels import PixelBuffer, render_digraph, render_trigraph
from .stream import BytesLike, as_stream, read_stream

logger = get_logger(__name__)

Source = Union[BytesLike, str, os.PathLike]

STRIP_WIDTH = 512


@dataclass
class AnalysisBundle:
    name: str
    index: int                # position of the input in the batch
    size: int
    entropy: EntropyResult
    frequency: FrequencyTable
    images: Dict[str, PixelBuffer]
    profile: np.ndarray       # order-1 entropy per window
    strip: np.ndarray         # raw bytes as rows of STRIP_WIDTH pixels

    @property
    def stem(self) -> str:
        """File stem of the input, or stream-<index> for in-memory streams."""
        if self.name.startswith("<"):
            return f"stream-{self.index}"
        return os.path.splitext(os.path.basename(self.name))[0] or f"stream-{self.index}"


@dataclass(frozen=True)
class AnalysisFailure:
    index: int
    name: str
    error: str
    kind: str


@dataclass
class BatchResult:
    bundles: List[AnalysisBundle] = field(default_factory=list)
    failures: List[AnalysisFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def analyze_stream(
    data: BytesLike,
    config: Optional[AnalysisConfig] = None,
    name: str = "<stream>",
    index: int = 0,
) -> AnalysisBundle:
    config = (config or AnalysisConfig()).validate()
    stream = as_stream(data)

    tables = count_all_orders(stream, config.max_order, config.strategy)
    entropy = tuple(EntropyEntry(table.order, ngram_entropy(table)) for table in tables)
    frequency = rank_frequencies(tables[0])
    images = {
        "digraph": render_digraph(digraph_matrix(stream), config.scale, config.gamma, config.digraph_layout),
        "trigraph": render_trigraph(trigraph_matrix(stream), config.scale, config.gamma, config.trigraph_layout),
    }
    profile = entropy_profile(stream, config.profile_window, config.profile_stride)
    return AnalysisBundle(name, index, int(stream.size), entropy, frequency, images, profile, byte_strip(stream))


def byte_strip(stream: np.ndarray, width: int = STRIP_WIDTH) -> np.ndarray:
    """Zero-pad the stream and fold it into rows of ``width`` bytes (at least one row)."""
    rows = max(1, int(math.ceil(stream.size / width)))
    pad = rows * width - stream.size
    return np.pad(stream, (0, pad), mode="constant", constant_values=0).reshape(rows, width)


def source_name(source: Source, index: int) -> str:
    if isinstance(source, (str, os.PathLike)):
        return os.fspath(source)
    return f"<stream {index}>"


def _portable(source: Source) -> Source:
    # memoryviews cannot be pickled over to a worker process
    if isinstance(source, (bytearray, memoryview)):
        return bytes(source)
    return source


def _analyze_source(index: int, source: Source, config: AnalysisConfig) -> Union[AnalysisBundle, AnalysisFailure]:
    name = source_name(source, index)
    with LogContext(source=name):
        try:
            if isinstance(source, (str, os.PathLike)):
                stream = read_stream(source)
            else:
                stream = as_stream(source)
            bundle = analyze_stream(stream, config, name, index)
        except (BinvizError, TypeError) as exc:
            logger.warning("analysis failed", error=str(exc), kind=type(exc).__name__)
            return AnalysisFailure(index, name, str(exc), type(exc).__name__)
        logger.info("analysis complete", size=bundle.size)
    return bundle


def run_full_analysis(
    sources: Iterable[Source],
    config: Optional[AnalysisConfig] = None,
    writer: Optional[Callable[[AnalysisBundle], object]] = None,
) -> BatchResult:
    """
    Analyze every source (a file path or a bytes-like stream).

    A source that cannot be read or analyzed becomes an AnalysisFailure and the
    batch carries on. ``writer``, when given, is called once per bundle in input
    order; a BinvizError or OSError it raises is recorded as that input's failure.
    Configuration errors are raised before any input is touched.
    """
    config = (config or AnalysisConfig()).validate()
    sources = [_portable(source) for source in sources]
    results: List[Union[AnalysisBundle, AnalysisFailure, None]] = [None] * len(sources)

    with timed("full_analysis", files=len(sources), workers=config.workers):
        if config.workers == 1 or len(sources) < 2:
            for index, source in enumerate(sources):
                results[index] = _analyze_source(index, source, config)
        else:
            with ProcessPoolExecutor(max_workers=min(config.workers, len(sources))) as pool:
                futures = {
                    pool.submit(_analyze_source, index, source, config): index
                    for index, source in enumerate(sources)
                }
                for future in as_completed(futures):
                    index = futures[future]
                    try:
                        results[index] = future.result()
                    except Exception as exc:
                        # unpicklable source or a worker that died (BrokenProcessPool)
                        name = source_name(sources[index], index)
                        logger.warning("analysis failed", source=name, error=str(exc), kind=type(exc).__name__)
                        results[index] = AnalysisFailure(index, name, str(exc), type(exc).__name__)

    batch = BatchResult()
    for result in results:
        if isinstance(result, AnalysisFailure):
            batch.failures.append(result)
            continue
        if writer is not None:
            try:
                writer(result)
            except (BinvizError, OSError) as exc:
                logger.warning("writing results failed", source=result.name, error=str(exc))
                batch.failures.append(AnalysisFailure(result.index, result.name, str(exc), type(exc).__name__))
                continue
        batch.bundles.append(result)

    logger.info("batch finished", analyzed=len(batch.bundles), failed=len(batch.failures))
    return batch
