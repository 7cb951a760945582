#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ContigWeaver v0.1.0

Pairwise suffix/prefix overlap detection.

Every ordered pair of reads (i, j), i != j, is tested by scanning overlap
lengths from the longest possible down to ``min_overlap`` and keeping the
first length whose exact-match identity reaches ``min_identity``. This is
brute force over O(N^2) pairs; the de Bruijn path scales to larger inputs.

Detection is cancellable and reports progress. The outer loop can be split
across a thread pool; every worker polls the shared CancellationToken itself.

Author: ContigWeaver Development Team
License: MIT - See LICENSE
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Optional, Sequence, Tuple
import logging

from .data_structures import Overlap, InvalidAssemblyConfigError
from ..utils.cancellation import (
    CancellationToken,
    ProgressCallback,
    ProgressReporter,
    DEFAULT_CHECK_INTERVAL,
    check_cancelled,
)
from ..utils.sequence_utils import normalize_reads

logger = logging.getLogger(__name__)


def calculate_identity(seq1: str, seq2: str) -> float:
    """
    Exact-match fraction between two equal-length sequences.
    
    Comparison is case-insensitive. Sequences of different length have
    identity 0.0; two empty sequences have identity 1.0.
    
    Example:
        >>> calculate_identity("AATT", "aagg")
        0.5
    """
    if len(seq1) != len(seq2):
        return 0.0
    if not seq1:
        return 1.0
    
    seq1 = seq1.upper()
    seq2 = seq2.upper()
    matches = sum(1 for a, b in zip(seq1, seq2) if a == b)
    return matches / len(seq1)


def _validate_thresholds(min_overlap: int, min_identity: float):
    if min_overlap < 1:
        raise InvalidAssemblyConfigError(f"min_overlap must be >= 1, got {min_overlap}")
    if not 0.0 <= min_identity <= 1.0:
        raise InvalidAssemblyConfigError(
            f"min_identity must be within [0.0, 1.0], got {min_identity}"
        )


def _overlap_length(seq1: str, seq2: str, min_overlap: int, min_identity: float) -> int:
    """Longest qualifying suffix(seq1)/prefix(seq2) length, or 0. Inputs are uppercase."""
    len1 = len(seq1)
    for length in range(min(len1, len(seq2)), min_overlap - 1, -1):
        suffix = seq1[len1 - length:]
        prefix = seq2[:length]
        
        if min_identity >= 1.0:
            if suffix == prefix:
                return length
            continue
        
        # Stop counting once the mismatch budget for this length is clearly spent
        max_mismatches = length * (1.0 - min_identity) + 1e-9
        mismatches = 0
        for a, b in zip(suffix, prefix):
            if a != b:
                mismatches += 1
                if mismatches > max_mismatches:
                    break
        else:
            if (length - mismatches) / length >= min_identity:
                return length
    
    return 0


def find_overlap(
    seq1: str,
    seq2: str,
    min_overlap: int = 20,
    min_identity: float = 0.9
) -> Optional[Tuple[int, int, int]]:
    """
    Find the longest suffix/prefix overlap of *seq1* onto *seq2*.
    
    Args:
        seq1: Read whose suffix is tested
        seq2: Read whose prefix is tested
        min_overlap: Shortest overlap length considered
        min_identity: Minimum exact-match fraction (0-1)
    
    Returns:
        ``(length, position_in_seq1, position_in_seq2)`` or None if no length
        in ``[min_overlap, min(len1, len2)]`` meets the identity threshold
    """
    _validate_thresholds(min_overlap, min_identity)
    
    seq1 = seq1.upper()
    seq2 = seq2.upper()
    length = _overlap_length(seq1, seq2, min_overlap, min_identity)
    if length == 0:
        return None
    return length, len(seq1) - length, 0


def _scan_rows(
    reads: Sequence[str],
    rows: Sequence[int],
    min_overlap: int,
    min_identity: float,
    cancel_token: Optional[CancellationToken],
    reporter: ProgressReporter,
    check_interval: int
) -> List[Overlap]:
    """Test every pair (i, j) for i in *rows*. Thread-safe."""
    overlaps = []
    n = len(reads)
    processed = 0
    
    for i in rows:
        read_i = reads[i]
        for j in range(n):
            if processed % check_interval == 0:
                check_cancelled(cancel_token)
                if processed:
                    reporter.advance(check_interval)
            processed += 1
            
            if i == j:
                continue
            
            length = _overlap_length(read_i, reads[j], min_overlap, min_identity)
            if length:
                overlaps.append(Overlap(
                    read_index1=i,
                    read_index2=j,
                    overlap_length=length,
                    position1=len(read_i) - length,
                    position2=0
                ))
    
    return overlaps


def find_all_overlaps(
    reads: Sequence[str],
    min_overlap: int = 20,
    min_identity: float = 0.9,
    cancel_token: Optional[CancellationToken] = None,
    progress: Optional[ProgressCallback] = None,
    num_threads: int = 1,
    check_interval: int = DEFAULT_CHECK_INTERVAL
) -> List[Overlap]:
    """
    Find every qualifying overlap between ordered pairs of distinct reads.
    
    Args:
        reads: Reads, addressed by their index in this sequence
        min_overlap: Shortest overlap length considered
        min_identity: Minimum exact-match fraction inside the overlap
        cancel_token: Polled every *check_interval* pairs, starting before the
            first pair
        progress: Receives the completed fraction, ending with 1.0
        num_threads: Worker threads for the outer loop (1 = inline)
        check_interval: Pairs between two cancellation checks
    
    Returns:
        Overlaps sorted by (read_index1, read_index2); one per ordered pair
        at most, carrying the longest qualifying length
    
    Raises:
        InvalidAssemblyConfigError: On unusable thresholds
        AssemblyCancelledError: If *cancel_token* is cancelled during the scan
    """
    _validate_thresholds(min_overlap, min_identity)
    check_interval = max(1, check_interval)
    check_cancelled(cancel_token)
    
    reads = normalize_reads(reads)
    n = len(reads)
    reporter = ProgressReporter(progress, total=n * n)
    
    if n == 0:
        reporter.finish()
        return []
    
    num_threads = max(1, min(num_threads, n))
    logger.info(f"Detecting overlaps among {n} reads (min={min_overlap}bp, "
                f"identity>={min_identity:.2f}, threads={num_threads})")
    
    if num_threads == 1:
        overlaps = _scan_rows(reads, range(n), min_overlap, min_identity,
                              cancel_token, reporter, check_interval)
    else:
        # Interleave rows so every worker gets a similar share of long reads
        row_groups = [range(start, n, num_threads) for start in range(num_threads)]
        overlaps = []
        with ThreadPoolExecutor(max_workers=num_threads) as executor:
            futures = [
                executor.submit(_scan_rows, reads, rows, min_overlap, min_identity,
                                cancel_token, reporter, check_interval)
                for rows in row_groups
            ]
            for future in as_completed(futures):
                overlaps.extend(future.result())
    
    overlaps.sort(key=lambda o: (o.read_index1, o.read_index2))
    reporter.finish()
    
    logger.info(f"Found {len(overlaps)} overlaps")
    return overlaps

# ContigWeaver v0.1.0
# Any usage is subject to this software's license.
