"""
Utilities module for ContigWeaver.

This module provides shared helpers for the assembly core:
- Sequence normalization and k-mer extraction
- Cooperative cancellation and progress reporting
- Logging setup for command-line runs
"""

from .sequence_utils import (
    NUCLEOTIDES,
    GAP_SYMBOLS,
    normalize_sequence,
    normalize_reads,
    extract_kmers,
    calculate_gc_content,
    count_called_bases,
    is_gap_base,
)
from .cancellation import (
    AssemblyCancelledError,
    CancellationToken,
    ProgressReporter,
    ProgressCallback,
    DEFAULT_CHECK_INTERVAL,
    check_cancelled,
)
from .logging_utils import setup_logging

__all__ = [
    # Sequence helpers
    "NUCLEOTIDES",
    "GAP_SYMBOLS",
    "normalize_sequence",
    "normalize_reads",
    "extract_kmers",
    "calculate_gc_content",
    "count_called_bases",
    "is_gap_base",
    # Cancellation / progress
    "AssemblyCancelledError",
    "CancellationToken",
    "ProgressReporter",
    "ProgressCallback",
    "DEFAULT_CHECK_INTERVAL",
    "check_cancelled",
    # Logging
    "setup_logging",
]
