"""
ContigWeaver v0.1.0

Overlap-layout-consensus (OLC) contig builder.

Reads are chained greedily along their single best (longest) outgoing
overlap. This is a heuristic layout: a read is placed in at most one contig,
and branching regions end a chain rather than being resolved, so repeats give
fragmented rather than maximal contigs.

Layout:
    read A: --------------->
    read B:       ---------------->      best edge A -> B (overlap o)
    contig: A + B[o:]

Author: ContigWeaver Development Team
Date: 2026-10-18
"""

from typing import Dict, List, Sequence, Set, Tuple
import logging

from .data_structures import Overlap

logger = logging.getLogger(__name__)

# read index -> (successor read index, overlap length)
SuccessorMap = Dict[int, Tuple[int, int]]


def build_successor_map(overlaps: Sequence[Overlap]) -> SuccessorMap:
    """
    Keep only the longest outgoing overlap of every read.
    
    Overlaps are considered longest-first; among equally long overlaps the
    one listed first wins.
    
    Args:
        overlaps: Overlaps as produced by find_all_overlaps
        
    Returns:
        Mapping read index -> (best successor, overlap length)
    """
    successors: SuccessorMap = {}
    for overlap in sorted(overlaps, key=lambda o: o.overlap_length, reverse=True):
        if overlap.read_index1 not in successors:
            successors[overlap.read_index1] = (overlap.read_index2, overlap.overlap_length)
    return successors


def find_chain_starters(num_reads: int, successors: SuccessorMap) -> List[int]:
    """Reads that no other read's best edge points to, in index order."""
    has_predecessor = {successor for successor, _ in successors.values()}
    return [i for i in range(num_reads) if i not in has_predecessor]


class OLCContigBuilder:
    """
    Build linear contigs from reads and their pairwise overlaps.
    
    Process:
    1. Reduce overlaps to one best successor per read
    2. Find chain starters (reads without a best-edge predecessor)
    3. Walk each chain, appending every successor's sequence beyond the overlap
    4. Emit every read never visited by a chain as its own contig
    5. Drop contigs shorter than ``min_contig_length``
    """
    
    def __init__(self, min_contig_length: int = 100):
        """
        Initialize contig builder.
        
        Args:
            min_contig_length: Minimum contig length to output
        """
        self.min_contig_length = min_contig_length
        
        # Read indexes making up each emitted contig, in layout order
        self.layouts: List[List[int]] = []
        self._reset_stats()
    
    def _reset_stats(self):
        self.stats = {
            'reads_input': 0,
            'best_edges': 0,
            'chain_starters': 0,
            'chained_contigs': 0,
            'singleton_contigs': 0,
            'contigs_filtered': 0,
            'contigs_built': 0,
            'reads_assembled': 0,
        }
    
    def build_contigs(self, reads: Sequence[str], overlaps: Sequence[Overlap]) -> List[str]:
        """
        Lay out reads into contigs.
        
        Args:
            reads: Uppercase reads addressed by index
            overlaps: Suffix/prefix overlaps between the reads
            
        Returns:
            Contigs of at least ``min_contig_length`` bases
        """
        self.layouts = []
        self._reset_stats()
        self.stats['reads_input'] = len(reads)
        
        successors = build_successor_map(overlaps)
        starters = find_chain_starters(len(reads), successors)
        self.stats['best_edges'] = len(successors)
        self.stats['chain_starters'] = len(starters)
        
        visited: Set[int] = set()
        candidates: List[Tuple[str, List[int]]] = []
        
        for start in starters:
            if start in visited:
                continue
            candidates.append(self._walk_chain(start, reads, successors, visited))
        self.stats['chained_contigs'] = len(candidates)
        
        # Reads left over are cycles or were skipped by every chain
        for i, read in enumerate(reads):
            if i not in visited and len(read) >= self.min_contig_length:
                candidates.append((read, [i]))
                self.stats['singleton_contigs'] += 1
        
        contigs = []
        for sequence, layout in candidates:
            if len(sequence) >= self.min_contig_length:
                contigs.append(sequence)
                self.layouts.append(layout)
            else:
                self.stats['contigs_filtered'] += 1
        
        self.stats['contigs_built'] = len(contigs)
        self.stats['reads_assembled'] = sum(len(layout) for layout in self.layouts)
        
        logger.info(f"OLC layout: {len(starters)} chain starters, "
                    f"{self.stats['singleton_contigs']} singletons, "
                    f"{len(contigs)} contigs >= {self.min_contig_length}bp")
        return contigs
    
    @staticmethod
    def _walk_chain(
        start: int,
        reads: Sequence[str],
        successors: SuccessorMap,
        visited: Set[int]
    ) -> Tuple[str, List[int]]:
        """
        Follow best edges from *start* until a dead end or an already visited read.
        
        *visited* is updated in place; a read is never placed twice.
        """
        parts = [reads[start]]
        layout = [start]
        visited.add(start)
        current = start
        
        while current in successors:
            successor, overlap_length = successors[current]
            if successor in visited:
                break
            parts.append(reads[successor][overlap_length:])
            layout.append(successor)
            visited.add(successor)
            current = successor
        
        return ''.join(parts), layout

# ContigWeaver v0.1.0
# Any usage is subject to this software's license.
