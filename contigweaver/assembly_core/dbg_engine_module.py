#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
ContigWeaver v0.1.0

De Bruijn Graph (DBG) Engine for ContigWeaver.
- Decomposes reads into k-mers; every k-mer is an edge from its (k-1)-prefix
  to its (k-1)-suffix
- Multigraph: repeated k-mers give parallel edges (multiplicity = depth)
- Nodes are interned to dense integer ids, edges stored as a flat CSR array
- Greedy contig tracing with a used-edge bitset

The tracer is a heuristic path cover, not an Eulerian circuit solver.
Branching or cyclic regions end or split a walk, so repeat-rich graphs yield
fragmented rather than maximal contigs.

Author: ContigWeaver Development Team
License: MIT - See LICENSE
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence
import logging

import numpy as np

from .data_structures import InvalidAssemblyConfigError

logger = logging.getLogger(__name__)


# ============================================================================
# Core Data Structure
# ============================================================================

@dataclass
class DeBruijnGraph:
    """
    De Bruijn multigraph over (k-1)-mers.
    
    Outgoing edges of node ``v`` are ``targets[offsets[v]:offsets[v + 1]]``,
    kept in the order the k-mers were read. Node ids follow first appearance.
    """
    k: int
    node_seqs: List[str] = field(default_factory=list)
    node_ids: Dict[str, int] = field(default_factory=dict)
    offsets: np.ndarray = field(default_factory=lambda: np.zeros(1, dtype=np.int64))
    targets: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.int64))
    
    @property
    def num_nodes(self) -> int:
        return len(self.node_seqs)
    
    @property
    def num_edges(self) -> int:
        return int(self.targets.shape[0])
    
    def is_empty(self) -> bool:
        return self.num_edges == 0
    
    def node_id(self, seq: str) -> Optional[int]:
        return self.node_ids.get(seq)
    
    def node_sequence(self, node_id: int) -> str:
        return self.node_seqs[node_id]
    
    def out_degrees(self) -> np.ndarray:
        """Out-degree of every node (parallel edges counted)."""
        return np.diff(self.offsets)
    
    def in_degrees(self) -> np.ndarray:
        """In-degree of every node (parallel edges counted)."""
        return np.bincount(self.targets, minlength=self.num_nodes).astype(np.int64)
    
    def out_degree(self, node_id: int) -> int:
        return int(self.offsets[node_id + 1] - self.offsets[node_id])
    
    def in_degree(self, node_id: int) -> int:
        return int(np.count_nonzero(self.targets == node_id))
    
    def successors(self, node_id: int) -> List[int]:
        """Targets of the outgoing edges of *node_id*, in edge order."""
        start, end = self.offsets[node_id], self.offsets[node_id + 1]
        return [int(t) for t in self.targets[start:end]]
    
    def edge_kmers(self) -> Iterator[str]:
        """Yield the k-mer spelled by every edge (duplicates included)."""
        for source in range(self.num_nodes):
            prefix = self.node_seqs[source]
            for target in self.successors(source):
                yield prefix + self.node_seqs[target][-1]
    
    def as_adjacency(self) -> Dict[str, List[str]]:
        """Prefix string -> ordered list of suffix strings (one per edge)."""
        adjacency: Dict[str, List[str]] = {}
        for source in range(self.num_nodes):
            if self.out_degree(source):
                adjacency[self.node_seqs[source]] = [
                    self.node_seqs[target] for target in self.successors(source)
                ]
        return adjacency


# ============================================================================
# De Bruijn Graph Builder
# ============================================================================

class DeBruijnGraphBuilder:
    """
    Builder class for constructing de Bruijn graphs from reads.
    
    No k-mer filtering or error correction happens here; run the read
    corrector beforehand if low-frequency k-mers should be repaired.
    """
    
    def __init__(self, k: int = 31):
        """
        Initialize DBG builder.
        
        Args:
            k: K-mer size (edges are k-mers, nodes are (k-1)-mers)
        """
        if k < 2:
            raise InvalidAssemblyConfigError(f"k must be >= 2, got {k}")
        self.k = k
        self._reset_stats()
    
    def _reset_stats(self):
        self.stats = {
            'reads_input': 0,
            'reads_too_short': 0,
            'kmers_extracted': 0,
            'nodes': 0,
            'edges': 0,
        }
    
    def build(self, reads: Sequence[str]) -> DeBruijnGraph:
        """
        Build the graph from *reads* (expected uppercase).
        
        Algorithm:
            1. Slide a window of size k over every read
            2. Intern prefix and suffix (k-1)-mers to integer node ids
            3. Record one edge per k-mer occurrence
            4. Stable-sort edges by source into a CSR layout
        """
        k = self.k
        node_ids: Dict[str, int] = {}
        node_seqs: List[str] = []
        sources: List[int] = []
        targets: List[int] = []
        
        def intern(seq: str) -> int:
            node = node_ids.get(seq)
            if node is None:
                node = len(node_seqs)
                node_ids[seq] = node
                node_seqs.append(seq)
            return node
        
        self._reset_stats()
        self.stats['reads_input'] = len(reads)
        for read in reads:
            if len(read) < k:
                self.stats['reads_too_short'] += 1
                continue
            for i in range(len(read) - k + 1):
                sources.append(intern(read[i:i + k - 1]))
                targets.append(intern(read[i + 1:i + k]))
        
        if self.stats['reads_too_short']:
            logger.warning(f"Skipped {self.stats['reads_too_short']} reads shorter than k={k}")
        
        num_nodes = len(node_seqs)
        source_arr = np.asarray(sources, dtype=np.int64)
        target_arr = np.asarray(targets, dtype=np.int64)
        
        # Stable sort keeps per-node edge order identical to k-mer read order
        order = np.argsort(source_arr, kind='stable')
        counts = np.bincount(source_arr, minlength=num_nodes)
        offsets = np.zeros(num_nodes + 1, dtype=np.int64)
        np.cumsum(counts, out=offsets[1:])
        
        graph = DeBruijnGraph(
            k=k,
            node_seqs=node_seqs,
            node_ids=node_ids,
            offsets=offsets,
            targets=target_arr[order],
        )
        
        self.stats['kmers_extracted'] = graph.num_edges
        self.stats['nodes'] = graph.num_nodes
        self.stats['edges'] = graph.num_edges
        logger.info(f"Built DBG (k={k}): {graph.num_nodes} nodes, {graph.num_edges} edges")
        return graph


def build_debruijn_graph(reads: Sequence[str], k: int = 31) -> DeBruijnGraph:
    """Convenience function to build a DBG from reads."""
    return DeBruijnGraphBuilder(k=k).build(reads)


# ============================================================================
# Contig Tracer
# ============================================================================

class ContigTracer:
    """
    Greedy walker emitting one contig per start node.
    
    Start nodes are those with more outgoing than incoming edges, or with
    outgoing but no incoming edges. If none exist (e.g. a pure cycle) the
    walk starts from node 0. Each walk repeatedly takes the first unused
    outgoing edge; an edge is used at most once across all walks.
    """
    
    def __init__(self, graph: DeBruijnGraph):
        self.graph = graph
        self.used = np.zeros(graph.num_edges, dtype=bool)
        # Edges are consumed in order, so the first unused edge of a node
        # is always at its cursor
        self._cursor = graph.offsets[:-1].copy()
    
    def start_nodes(self) -> List[int]:
        graph = self.graph
        if graph.num_nodes == 0:
            return []
        
        out_deg = graph.out_degrees()
        in_deg = graph.in_degrees()
        is_start = (out_deg > in_deg) | ((out_deg > 0) & (in_deg == 0))
        starts = [int(node) for node in np.flatnonzero(is_start)]
        
        if not starts and not graph.is_empty():
            logger.warning("DBG has no source-like node; starting from an arbitrary node")
            starts = [0]
        return starts
    
    def trace_from(self, start: int) -> str:
        """Walk from *start*, consuming edges, and return the spelled sequence."""
        graph = self.graph
        parts = [graph.node_seqs[start]]
        current = start
        
        while True:
            edge = self._cursor[current]
            if edge >= graph.offsets[current + 1]:
                break
            self.used[edge] = True
            self._cursor[current] = edge + 1
            current = int(graph.targets[edge])
            parts.append(graph.node_seqs[current][-1])
        
        return ''.join(parts)
    
    def trace(self) -> List[str]:
        """
        Trace contigs from every start node.
        
        Returns:
            Contigs of length >= k, in start-node order
        """
        k = self.graph.k
        contigs = []
        for start in self.start_nodes():
            contig = self.trace_from(start)
            if len(contig) >= k:
                contigs.append(contig)
        
        logger.info(f"Traced {len(contigs)} contigs; "
                    f"{int(self.used.sum())}/{self.graph.num_edges} edges used")
        return contigs
    
    @property
    def unused_edges(self) -> int:
        return int(self.graph.num_edges - self.used.sum())


def trace_contigs(graph: DeBruijnGraph) -> List[str]:
    """Convenience function: greedy contigs of *graph*."""
    return ContigTracer(graph).trace()

# ContigWeaver v0.1.0
# Any usage is subject to this software's license.
