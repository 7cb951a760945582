#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ContigWeaver v0.1.0

Top-level assembly entry points.

    reads ─┬─> find_all_overlaps ─> OLCContigBuilder ──────┐
           │                                               ├─> AssemblyResult
           └─> DeBruijnGraphBuilder ─> ContigTracer ───────┘

Each call owns all of its intermediate structures (overlaps, graphs, used
edges); nothing is shared between calls, so independent assemblies can run
in parallel.

Author: ContigWeaver Development Team
License: MIT - See LICENSE
"""

from typing import List, Optional, Sequence
import logging

from .data_structures import AssemblyParameters, AssemblyResult, InvalidAssemblyConfigError
from .overlap_detector import find_all_overlaps
from .olc_contig_module import OLCContigBuilder
from .dbg_engine_module import DeBruijnGraphBuilder, ContigTracer
from ..assembly_utils.assembly_stats import compute_n50
from ..utils.cancellation import (
    CancellationToken,
    ProgressCallback,
    DEFAULT_CHECK_INTERVAL,
    check_cancelled,
)
from ..utils.sequence_utils import normalize_reads

logger = logging.getLogger(__name__)

ASSEMBLY_METHODS = ('olc', 'dbg')


def calculate_stats(
    contigs: Sequence[str],
    total_reads: int,
    assembled_reads: Optional[int] = None
) -> AssemblyResult:
    """
    Summarise a contig set.
    
    Args:
        contigs: Assembled contigs
        total_reads: Number of input reads
        assembled_reads: Reads placed in the contigs; when unknown every read
            is assumed to be used
    
    Returns:
        AssemblyResult; all numeric fields except ``total_reads`` are zero
        when *contigs* is empty
    """
    contigs = list(contigs)
    if not contigs:
        return AssemblyResult.empty(total_reads)
    
    lengths = [len(contig) for contig in contigs]
    return AssemblyResult(
        contigs=contigs,
        total_reads=total_reads,
        assembled_reads=total_reads if assembled_reads is None else assembled_reads,
        n50=compute_n50(lengths),
        longest_contig=max(lengths),
        total_length=sum(lengths),
    )


def assemble_olc(
    reads: Sequence[str],
    parameters: Optional[AssemblyParameters] = None,
    cancel_token: Optional[CancellationToken] = None,
    progress: Optional[ProgressCallback] = None,
    num_threads: int = 1,
    check_interval: int = DEFAULT_CHECK_INTERVAL
) -> AssemblyResult:
    """
    Overlap-layout-consensus assembly.
    
    Args:
        reads: Input reads (any case)
        parameters: Assembly parameters (defaults if omitted)
        cancel_token: Cancels the overlap search
        progress: Overlap search progress, ending with 1.0
        num_threads: Worker threads for the overlap search
        check_interval: Read pairs between two cancellation checks
    
    Returns:
        AssemblyResult; empty input gives an all-zero result
    
    Raises:
        AssemblyCancelledError: If cancelled before completion
    """
    parameters = parameters or AssemblyParameters()
    check_cancelled(cancel_token)
    if not reads:
        logger.info("No reads supplied; returning empty assembly")
        return AssemblyResult.empty()
    
    reads = normalize_reads(reads)
    logger.info(f"OLC assembly of {len(reads)} reads "
                f"(min_overlap={parameters.min_overlap}, min_identity={parameters.min_identity})")
    
    overlaps = find_all_overlaps(
        reads,
        min_overlap=parameters.min_overlap,
        min_identity=parameters.min_identity,
        cancel_token=cancel_token,
        progress=progress,
        num_threads=num_threads,
        check_interval=check_interval,
    )
    
    builder = OLCContigBuilder(min_contig_length=parameters.min_contig_length)
    contigs = builder.build_contigs(reads, overlaps)
    
    result = calculate_stats(contigs, len(reads), builder.stats['reads_assembled'])
    _log_result(result)
    return result


def assemble_debruijn(
    reads: Sequence[str],
    parameters: Optional[AssemblyParameters] = None,
    cancel_token: Optional[CancellationToken] = None
) -> AssemblyResult:
    """
    De Bruijn graph assembly.
    
    Args:
        reads: Input reads (any case)
        parameters: Assembly parameters; ``kmer_size`` and
            ``min_contig_length`` are used
        cancel_token: Checked before graph construction and before tracing
    
    Returns:
        AssemblyResult; empty input gives an all-zero result
    
    Raises:
        InvalidAssemblyConfigError: If ``kmer_size`` is not smaller than the
            longest read
        AssemblyCancelledError: If cancelled before completion
    """
    parameters = parameters or AssemblyParameters()
    check_cancelled(cancel_token)
    if not reads:
        logger.info("No reads supplied; returning empty assembly")
        return AssemblyResult.empty()
    
    reads = normalize_reads(reads)
    parameters.validate_for_reads(reads)
    k = parameters.kmer_size
    logger.info(f"De Bruijn assembly of {len(reads)} reads (k={k})")
    
    graph = DeBruijnGraphBuilder(k=k).build(reads)
    check_cancelled(cancel_token)
    traced = ContigTracer(graph).trace()
    
    contigs = [contig for contig in traced if len(contig) >= parameters.min_contig_length]
    if len(contigs) < len(traced):
        logger.debug(f"Dropped {len(traced) - len(contigs)} contigs "
                     f"< {parameters.min_contig_length}bp")
    
    result = calculate_stats(contigs, len(reads), _count_reads_in_contigs(reads, contigs, k))
    _log_result(result)
    return result


def assemble(
    reads: Sequence[str],
    parameters: Optional[AssemblyParameters] = None,
    method: str = 'olc',
    **kwargs
) -> AssemblyResult:
    """
    Dispatch to :func:`assemble_olc` or :func:`assemble_debruijn`.
    
    Extra keyword arguments are passed through to the chosen assembler.
    """
    method = method.lower()
    if method == 'olc':
        return assemble_olc(reads, parameters, **kwargs)
    if method == 'dbg':
        return assemble_debruijn(reads, parameters, **kwargs)
    raise InvalidAssemblyConfigError(
        f"Unknown assembly method '{method}'. Supported: {', '.join(ASSEMBLY_METHODS)}"
    )


def _count_reads_in_contigs(reads: Sequence[str], contigs: List[str], k: int) -> int:
    """Reads sharing at least one k-mer with a retained contig."""
    if not contigs:
        return 0
    contig_kmers = set()
    for contig in contigs:
        contig_kmers.update(contig[i:i + k] for i in range(len(contig) - k + 1))
    
    return sum(
        1 for read in reads
        if any(read[i:i + k] in contig_kmers for i in range(len(read) - k + 1))
    )


def _log_result(result: AssemblyResult):
    logger.info(f"Assembly: {result.num_contigs} contigs, {result.total_length:,}bp total, "
                f"N50={result.n50:,}, longest={result.longest_contig:,}bp, "
                f"{result.assembled_reads}/{result.total_reads} reads assembled")

# ContigWeaver v0.1.0
# Any usage is subject to this software's license.
