#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ContigWeaver v0.1.0

Read-to-reference coverage and column-wise consensus.

Coverage places every read at its single best ungapped position on the
reference (exhaustive sliding-window match count) and increments a per-base
depth counter across the placed span. There is no soft-clipping: a read is
either placed as one contiguous block or dropped.

Consensus is a majority vote per column over reads already aligned by an
external aligner.

Author: ContigWeaver Development Team
License: MIT - See LICENSE
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence
import logging

import numpy as np

from ..utils.cancellation import (
    CancellationToken,
    ProgressCallback,
    ProgressReporter,
    check_cancelled,
)

logger = logging.getLogger(__name__)

# Symbols that never vote in a consensus column
NON_VOTING = frozenset('-N')


# ============================================================================
# Alignment
# ============================================================================

def _encode(sequence: str) -> np.ndarray:
    sequence = sequence.upper()
    try:
        raw = sequence.encode('ascii')
    except UnicodeEncodeError as e:
        raise ValueError(
            f"Non-ASCII symbol {sequence[e.start]!r} at position {e.start} in sequence"
        ) from e
    return np.frombuffer(raw, dtype=np.uint8)


def find_best_alignment(reference: str, read: str, min_overlap: int = 20) -> Optional[int]:
    """
    Best ungapped placement of *read* on *reference*.
    
    The match count at every offset is compared case-insensitively. The
    running best starts at ``min_overlap - 1`` and only a strictly higher
    count replaces it, so a position needs at least ``min_overlap`` matches
    and on ties the leftmost position wins.
    
    Returns:
        0-based start position, or None when the read is longer than the
        reference or no position reaches the threshold
    """
    return _best_position(_encode(reference), _encode(read), min_overlap)


def _best_position(ref: np.ndarray, read: np.ndarray, min_overlap: int) -> Optional[int]:
    read_len = read.shape[0]
    num_positions = ref.shape[0] - read_len + 1
    if read_len == 0 or num_positions <= 0:
        return None
    
    # matches[pos] = number of i with ref[pos + i] == read[i]
    matches = np.zeros(num_positions, dtype=np.int64)
    for i in range(read_len):
        matches += ref[i:i + num_positions] == read[i]
    
    best = int(np.argmax(matches))  # first maximum
    if matches[best] > min_overlap - 1:
        return best
    return None


def calculate_coverage(
    reference: str,
    reads: Sequence[str],
    min_overlap: int = 20,
    cancel_token: Optional[CancellationToken] = None,
    progress: Optional[ProgressCallback] = None,
    check_interval: int = 1
) -> np.ndarray:
    """
    Per-base read depth over *reference*.
    
    Args:
        reference: Reference or contig sequence
        reads: Reads to place
        min_overlap: Minimum matching bases for a read to be placed
        cancel_token: Polled every *check_interval* reads, before the first
        progress: Receives the fraction of reads processed, ending with 1.0
        check_interval: Reads between two cancellation checks
        
    Returns:
        Integer array with one depth value per reference base
        
    Raises:
        AssemblyCancelledError: If *cancel_token* is cancelled during the run
        ValueError: If the reference or a read contains a non-ASCII symbol
    """
    check_interval = max(1, check_interval)
    ref = _encode(reference)
    coverage = np.zeros(ref.shape[0], dtype=np.int64)
    reporter = ProgressReporter(progress, total=len(reads))
    placed = 0
    
    for n, read in enumerate(reads):
        if n % check_interval == 0:
            check_cancelled(cancel_token)
        
        position = _best_position(ref, _encode(read), min_overlap)
        if position is not None:
            coverage[position:position + len(read)] += 1
            placed += 1
        reporter.advance()
    
    check_cancelled(cancel_token)
    reporter.finish()
    logger.info(f"Placed {placed}/{len(reads)} reads on {len(reference)}bp reference")
    return coverage


@dataclass
class CoverageSummary:
    """Depth summary of a coverage array."""
    length: int
    mean_depth: float
    max_depth: int
    breadth: float           # Fraction of bases with depth >= 1
    zero_coverage_bases: int
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            'length': self.length,
            'mean_depth': round(self.mean_depth, 4),
            'max_depth': self.max_depth,
            'breadth': round(self.breadth, 4),
            'zero_coverage_bases': self.zero_coverage_bases,
        }


def coverage_summary(coverage: Sequence[int]) -> CoverageSummary:
    """Summarise a per-base depth array."""
    depth = np.asarray(coverage, dtype=np.int64)
    if depth.size == 0:
        return CoverageSummary(0, 0.0, 0, 0.0, 0)
    
    covered = int(np.count_nonzero(depth))
    return CoverageSummary(
        length=int(depth.size),
        mean_depth=float(depth.mean()),
        max_depth=int(depth.max()),
        breadth=covered / depth.size,
        zero_coverage_bases=int(depth.size - covered),
    )


# ============================================================================
# Consensus
# ============================================================================

def compute_consensus(aligned_reads: Sequence[str]) -> str:
    """
    Column-wise majority consensus of pre-aligned reads.
    
    The number of columns is the length of the first read; shorter reads only
    vote in the columns they reach. ``-`` and ``N`` never vote, and a column
    without votes becomes ``N``. On a tied count the symbol seen first in the
    column (in read order) wins.
    
    Example:
        >>> compute_consensus(["ACGT", "ACCT", "A-GT"])
        'ACGT'
    """
    if not aligned_reads:
        return ''
    
    reads = [read.upper() for read in aligned_reads]
    consensus = []
    for column in range(len(reads[0])):
        counts: Dict[str, int] = {}
        for read in reads:
            if column < len(read):
                base = read[column]
                if base not in NON_VOTING:
                    counts[base] = counts.get(base, 0) + 1
        
        if counts:
            # max() keeps the first of equal counts
            consensus.append(max(counts, key=counts.get))
        else:
            consensus.append('N')
    
    return ''.join(consensus)

# ContigWeaver v0.1.0
# Any usage is subject to this software's license.
