#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ContigWeaver v0.1.0

Assembly contiguity metrics: N50/L50 and the Nx curve, auN, gap detection in
scaffolds, scaffold structure and contig extraction, plus an overall
statistics summary for a set of assembled sequences.

Sequences are passed as ``(sequence_id, sequence)`` pairs. ``N``/``n`` runs
are treated as scaffold gaps.

Author: ContigWeaver Development Team
License: MIT - See LICENSE
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from ..utils.sequence_utils import is_gap_base

logger = logging.getLogger(__name__)

NamedSequence = Tuple[str, str]

DEFAULT_NX_THRESHOLDS = (10, 20, 30, 40, 50, 60, 70, 80, 90)


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class NxStatistics:
    """Nx/Lx at one threshold (percent of total length)."""
    threshold: int
    nx: int                  # Length of the contig reaching the threshold
    lx: int                  # Number of contigs needed to reach it
    cumulative_length: int


@dataclass
class GapInfo:
    """One run of gap symbols; ``end`` is inclusive."""
    sequence_id: str
    start: int
    end: int
    length: int
    gap_type: str            # Short / Medium / Long / Scaffold


@dataclass
class ScaffoldStructure:
    """Contig pieces and gaps making up one scaffold."""
    scaffold_id: str
    contigs: List[Tuple[str, int, int]] = field(default_factory=list)
    gaps: List[GapInfo] = field(default_factory=list)
    total_length: int = 0
    contig_length: int = 0
    gap_length: int = 0


@dataclass
class AssemblyStatistics:
    """Summary statistics of an assembly (contigs or scaffolds)."""
    total_sequences: int = 0
    total_length: int = 0
    total_length_no_gaps: int = 0
    n50: int = 0
    l50: int = 0
    n90: int = 0
    l90: int = 0
    largest: int = 0
    smallest: int = 0
    mean_length: float = 0.0
    median_length: float = 0.0
    gc_content: float = 0.0
    total_gaps: int = 0
    total_gap_length: int = 0
    gap_percentage: float = 0.0
    
    def to_dict(self) -> Dict[str, Any]:
        """Serialise to a JSON/YAML friendly dictionary."""
        data = asdict(self)
        data['mean_length'] = round(self.mean_length, 2)
        data['gc_content'] = round(self.gc_content, 4)
        data['gap_percentage'] = round(self.gap_percentage, 4)
        return data


# ---------------------------------------------------------------------------
# Contiguity
# ---------------------------------------------------------------------------

def compute_n50(lengths: Iterable[int]) -> int:
    """
    Compute N50 from a list of contig lengths.
    
    N50 is the length of the contig at which the cumulative length of contigs
    sorted longest-first first reaches at least half of the total.
    
    Example:
        >>> compute_n50([100, 90, 80, 30, 20])
        90
    """
    sorted_lengths = sorted(lengths, reverse=True)
    if not sorted_lengths:
        return 0
    total = sum(sorted_lengths)
    cumulative = 0
    for length in sorted_lengths:
        cumulative += length
        if cumulative * 2 >= total:
            return length
    return sorted_lengths[-1]


def calculate_nx(
    lengths: Iterable[int],
    threshold: int,
    total_length: Optional[int] = None
) -> NxStatistics:
    """
    Calculate Nx and Lx for *threshold* percent of the total length.
    
    Args:
        lengths: Contig lengths (any order)
        threshold: Percentage, e.g. 50 for N50/L50
        total_length: Reference total; defaults to the sum of *lengths*
            (pass a genome size to get NGx)
    """
    sorted_lengths = sorted(lengths, reverse=True)
    if total_length is None:
        total_length = sum(sorted_lengths)
    if not sorted_lengths or total_length == 0:
        return NxStatistics(threshold, 0, 0, 0)
    
    target = int(total_length * threshold / 100.0)
    cumulative = 0
    for count, length in enumerate(sorted_lengths, start=1):
        cumulative += length
        if cumulative >= target:
            return NxStatistics(threshold, length, count, cumulative)
    
    # Target beyond the assembled total (NGx with a small assembly)
    return NxStatistics(threshold, sorted_lengths[-1], len(sorted_lengths), cumulative)


def calculate_nx_curve(
    lengths: Iterable[int],
    thresholds: Sequence[int] = DEFAULT_NX_THRESHOLDS
) -> List[NxStatistics]:
    """Nx statistics for every threshold, in ascending threshold order."""
    sorted_lengths = sorted(lengths, reverse=True)
    total = sum(sorted_lengths)
    return [calculate_nx(sorted_lengths, t, total) for t in sorted(thresholds or DEFAULT_NX_THRESHOLDS)]


def calculate_aun(lengths: Iterable[int]) -> float:
    """
    Area under the Nx curve: sum(len^2) / sum(len).
    
    Unlike N50 it changes smoothly when contigs are joined or broken.
    """
    arr = np.fromiter(lengths, dtype=np.float64)
    total = arr.sum()
    if arr.size == 0 or total == 0:
        return 0.0
    return float(np.square(arr).sum() / total)


# ---------------------------------------------------------------------------
# Gaps and scaffold structure
# ---------------------------------------------------------------------------

def classify_gap(length: int) -> str:
    """Gap class by length."""
    if length < 10:
        return 'Short'
    if length < 100:
        return 'Medium'
    if length < 1000:
        return 'Long'
    return 'Scaffold'


def _gap_runs(sequence: str) -> List[Tuple[int, int]]:
    """Half-open ``(start, end)`` of every maximal N run."""
    runs = []
    start = -1
    for i, base in enumerate(sequence):
        if is_gap_base(base):
            if start < 0:
                start = i
        elif start >= 0:
            runs.append((start, i))
            start = -1
    if start >= 0:
        runs.append((start, len(sequence)))
    return runs


def find_gaps(sequences: Iterable[NamedSequence], min_gap_length: int = 1) -> List[GapInfo]:
    """
    Locate all gap runs of at least *min_gap_length* bases.
    
    Returns:
        GapInfo records in sequence order then position order
    """
    gaps = []
    for seq_id, sequence in sequences:
        for start, end in _gap_runs(sequence):
            length = end - start
            if length >= min_gap_length:
                gaps.append(GapInfo(seq_id, start, end - 1, length, classify_gap(length)))
    return gaps


def analyze_gap_distribution(gaps: Sequence[GapInfo]) -> Dict[str, Any]:
    """Count, mean, median and max gap length plus counts per gap class."""
    if not gaps:
        return {'count': 0, 'mean_length': 0.0, 'median_length': 0,
                'max_length': 0, 'type_counts': {}}
    
    lengths = sorted(gap.length for gap in gaps)
    type_counts: Dict[str, int] = {}
    for gap in gaps:
        type_counts[gap.gap_type] = type_counts.get(gap.gap_type, 0) + 1
    
    return {
        'count': len(gaps),
        'mean_length': float(np.mean(lengths)),
        'median_length': lengths[len(lengths) // 2],
        'max_length': lengths[-1],
        'type_counts': type_counts,
    }


def analyze_scaffolds(
    scaffolds: Iterable[NamedSequence],
    min_gap_length: int = 10
) -> List[ScaffoldStructure]:
    """
    Split every scaffold into its contig pieces and gaps.
    
    Any N run separates two contig pieces, but only runs of at least
    *min_gap_length* bases are reported as gaps. Contig pieces are named
    ``{scaffold_id}_contig{n}`` with inclusive coordinates.
    """
    structures = []
    for scaffold_id, sequence in scaffolds:
        contigs = []
        gaps = []
        contig_start = 0
        
        for start, end in _gap_runs(sequence):
            if start > contig_start:
                contigs.append((f"{scaffold_id}_contig{len(contigs) + 1}", contig_start, start - 1))
            length = end - start
            if length >= min_gap_length:
                gaps.append(GapInfo(scaffold_id, start, end - 1, length, classify_gap(length)))
            contig_start = end
        
        if contig_start < len(sequence):
            contigs.append((f"{scaffold_id}_contig{len(contigs) + 1}", contig_start, len(sequence) - 1))
        
        structures.append(ScaffoldStructure(
            scaffold_id=scaffold_id,
            contigs=contigs,
            gaps=gaps,
            total_length=len(sequence),
            contig_length=sum(end - start + 1 for _, start, end in contigs),
            gap_length=sum(gap.length for gap in gaps),
        ))
    return structures


def extract_contigs(
    scaffolds: Iterable[NamedSequence],
    min_contig_length: int = 200
) -> List[NamedSequence]:
    """
    Break scaffolds at N runs and keep pieces of at least *min_contig_length*.
    
    Pieces are numbered per scaffold over the retained pieces only.
    """
    contigs = []
    for scaffold_id, sequence in scaffolds:
        piece_start = 0
        pieces = []
        for start, end in _gap_runs(sequence) + [(len(sequence), len(sequence))]:
            if start - piece_start >= max(1, min_contig_length):
                pieces.append(sequence[piece_start:start])
            piece_start = end
        for n, piece in enumerate(pieces, start=1):
            contigs.append((f"{scaffold_id}_contig{n}", piece))
    return contigs


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------

def calculate_statistics(sequences: Iterable[NamedSequence]) -> AssemblyStatistics:
    """
    Calculate summary statistics for an assembly.
    
    ``median_length`` is the middle element of the longest-first length list
    (upper median for even counts). GC content is measured over called bases.
    """
    sequences = list(sequences)
    if not sequences:
        return AssemblyStatistics()
    
    lengths = sorted((len(seq) for _, seq in sequences), reverse=True)
    total_length = sum(lengths)
    
    total_gaps = 0
    total_gap_length = 0
    gc_count = 0
    called = 0
    for _, sequence in sequences:
        runs = _gap_runs(sequence)
        total_gaps += len(runs)
        gap_length = sum(end - start for start, end in runs)
        total_gap_length += gap_length
        upper = sequence.upper()
        gc_count += upper.count('G') + upper.count('C')
        called += len(sequence) - gap_length
    
    n50 = calculate_nx(lengths, 50, total_length)
    n90 = calculate_nx(lengths, 90, total_length)
    
    stats = AssemblyStatistics(
        total_sequences=len(sequences),
        total_length=total_length,
        total_length_no_gaps=total_length - total_gap_length,
        n50=n50.nx,
        l50=n50.lx,
        n90=n90.nx,
        l90=n90.lx,
        largest=lengths[0],
        smallest=lengths[-1],
        mean_length=total_length / len(sequences),
        median_length=lengths[len(lengths) // 2],
        gc_content=gc_count / called if called else 0.0,
        total_gaps=total_gaps,
        total_gap_length=total_gap_length,
        gap_percentage=total_gap_length * 100.0 / total_length if total_length else 0.0,
    )
    logger.debug(f"Assembly statistics: {stats.total_sequences} sequences, N50={stats.n50}")
    return stats

# ContigWeaver v0.1.0
# Any usage is subject to this software's license.
