"""binviz: entropy, byte frequency and digraph/trigraph pictures of binary data."""

from .adjacency import digraph_matrix, reduce_trigraph, trigraph_matrix
from .analysis import AnalysisBundle, AnalysisFailure, BatchResult, analyze_stream, run_full_analysis
from .config import AnalysisConfig
from .counting import NGramCount, count_all_orders, count_ngrams
from .entropy import EntropyEntry, compute_entropy, entropy_profile, shannon_entropy
from .errors import BinvizError, ConfigurationError, ResourceLimitError, StreamReadError
from .frequency import FrequencyEntry, compute_frequency, rank_frequencies
from .pixels import PixelBuffer, compute_visualization
from .stream import as_stream, read_stream

__version__ = "0.1.0"

__all__ = [
    "AnalysisBundle",
    "AnalysisConfig",
    "AnalysisFailure",
    "BatchResult",
    "BinvizError",
    "ConfigurationError",
    "EntropyEntry",
    "FrequencyEntry",
    "NGramCount",
    "PixelBuffer",
    "ResourceLimitError",
    "StreamReadError",
    "analyze_stream",
    "as_stream",
    "compute_entropy",
    "compute_frequency",
    "compute_visualization",
    "count_all_orders",
    "count_ngrams",
    "digraph_matrix",
    "entropy_profile",
    "rank_frequencies",
    "read_stream",
    "reduce_trigraph",
    "run_full_analysis",
    "shannon_entropy",
    "trigraph_matrix",
]
