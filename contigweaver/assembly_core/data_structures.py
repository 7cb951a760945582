#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ContigWeaver v0.1.0

Core data structures shared by the assembly engines.

- AssemblyParameters: validated, immutable per-run configuration
- Overlap: directed suffix/prefix relation between two reads
- AssemblyResult: contigs plus summary statistics of one assembly run
- Exception hierarchy for configuration errors

Author: ContigWeaver Development Team
License: MIT - See LICENSE
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Mapping, Optional, Tuple
import logging

from ..errors import ContigWeaverError

logger = logging.getLogger(__name__)


# ============================================================================
# Errors
# ============================================================================

class InvalidAssemblyConfigError(ContigWeaverError, ValueError):
    """Raised before any graph work when assembly parameters are unusable."""
    pass


# ============================================================================
# Configuration
# ============================================================================

@dataclass(frozen=True)
class AssemblyParameters:
    """
    Parameters of a single assembly run.
    
    Attributes:
        min_overlap: Shortest suffix/prefix overlap reported (bp)
        min_identity: Minimum exact-match fraction inside an overlap (0-1)
        kmer_size: K for de Bruijn graph construction
        min_contig_length: Contigs shorter than this are discarded
    """
    min_overlap: int = 20
    min_identity: float = 0.9
    kmer_size: int = 31
    min_contig_length: int = 100
    
    def __post_init__(self):
        """Validate configuration."""
        if self.min_overlap < 1:
            raise InvalidAssemblyConfigError(
                f"min_overlap must be >= 1, got {self.min_overlap}"
            )
        if not 0.0 <= self.min_identity <= 1.0:
            raise InvalidAssemblyConfigError(
                f"min_identity must be within [0.0, 1.0], got {self.min_identity}"
            )
        if self.kmer_size < 2:
            raise InvalidAssemblyConfigError(
                f"kmer_size must be >= 2, got {self.kmer_size}"
            )
        if self.min_contig_length < 0:
            raise InvalidAssemblyConfigError(
                f"min_contig_length must be >= 0, got {self.min_contig_length}"
            )
        if self.kmer_size % 2 == 0:
            logger.debug(f"Even k-mer size {self.kmer_size}; odd k avoids palindromic k-mers")
    
    @classmethod
    def from_dict(cls, values: Optional[Mapping[str, Any]]) -> 'AssemblyParameters':
        """
        Build parameters from a configuration mapping.
        
        Unknown keys are ignored so a whole ``assembly`` config section can be
        passed in directly.
        """
        values = values or {}
        known = {name: values[name] for name in cls.__dataclass_fields__ if name in values}
        return cls(**known)
    
    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
    
    def validate_for_reads(self, reads: List[str]):
        """
        Check parameters that depend on the input reads (de Bruijn runs).
        
        Raises:
            InvalidAssemblyConfigError: If k is not smaller than the longest read
        """
        if not reads:
            return
        longest = max(len(read) for read in reads)
        if self.kmer_size >= longest:
            raise InvalidAssemblyConfigError(
                f"kmer_size ({self.kmer_size}) must be smaller than the longest "
                f"read ({longest} bp)"
            )


# ============================================================================
# Overlaps
# ============================================================================

@dataclass(frozen=True)
class Overlap:
    """
    Directed overlap: the suffix of read 1 matches the prefix of read 2.
    
    Overlap notation:
    read1: --------------->
    read2:       ---------------->
                <-overlap->
    
    ``position1`` is where the overlap starts in read 1 and ``position2``
    where it starts in read 2 (always 0 for suffix/prefix overlaps).
    """
    read_index1: int
    read_index2: int
    overlap_length: int
    position1: int
    position2: int = 0
    
    def __str__(self) -> str:
        return f"{self.read_index1} -> {self.read_index2} ({self.overlap_length}bp)"


# ============================================================================
# Results
# ============================================================================

@dataclass
class AssemblyResult:
    """
    Snapshot summary of one assembly run.
    
    ``n50`` is the length of the contig at which the cumulative length of
    contigs sorted longest-first first reaches half of ``total_length``.
    """
    contigs: List[str] = field(default_factory=list)
    total_reads: int = 0
    assembled_reads: int = 0
    n50: float = 0
    longest_contig: int = 0
    total_length: int = 0
    
    @classmethod
    def empty(cls, total_reads: int = 0) -> 'AssemblyResult':
        return cls(contigs=[], total_reads=total_reads)
    
    @property
    def num_contigs(self) -> int:
        return len(self.contigs)
    
    def to_dict(self, include_contigs: bool = False) -> Dict[str, Any]:
        """Serialise to a JSON/YAML friendly dictionary."""
        data = {
            'num_contigs': self.num_contigs,
            'total_reads': self.total_reads,
            'assembled_reads': self.assembled_reads,
            'n50': self.n50,
            'longest_contig': self.longest_contig,
            'total_length': self.total_length,
        }
        if include_contigs:
            data['contigs'] = list(self.contigs)
        return data


ScaffoldLink = Tuple[int, int, int]  # (contig_index1, contig_index2, gap_size)

# ContigWeaver v0.1.0
# Any usage is subject to this software's license.
