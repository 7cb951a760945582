"""
Assembly Core module for ContigWeaver.

This module provides the contig assembly algorithms:
- Suffix/prefix overlap detection (cancellable, optionally threaded)
- Contig building from overlaps (overlap-layout-consensus)
- De Bruijn graph construction and greedy contig tracing
- Link-based scaffolding
"""

from .data_structures import (
    AssemblyParameters,
    AssemblyResult,
    Overlap,
    ScaffoldLink,
    InvalidAssemblyConfigError,
)
from ..errors import ContigWeaverError

from .overlap_detector import (
    calculate_identity,
    find_overlap,
    find_all_overlaps,
)

from .olc_contig_module import (
    OLCContigBuilder,
    build_successor_map,
    find_chain_starters,
)

from .dbg_engine_module import (
    DeBruijnGraph,
    DeBruijnGraphBuilder,
    ContigTracer,
    build_debruijn_graph,
    trace_contigs,
)

from .scaffolder_module import (
    Scaffolder,
    scaffold,
    merge_contigs,
)

from .assembler import (
    assemble,
    assemble_olc,
    assemble_debruijn,
    calculate_stats,
    ASSEMBLY_METHODS,
)

__all__ = [
    # Assembly functions
    "assemble",
    "assemble_olc",
    "assemble_debruijn",
    "calculate_stats",
    "ASSEMBLY_METHODS",
    # Overlaps
    "calculate_identity",
    "find_overlap",
    "find_all_overlaps",
    # OLC
    "OLCContigBuilder",
    "build_successor_map",
    "find_chain_starters",
    # De Bruijn
    "DeBruijnGraph",
    "DeBruijnGraphBuilder",
    "ContigTracer",
    "build_debruijn_graph",
    "trace_contigs",
    # Scaffolding
    "Scaffolder",
    "scaffold",
    "merge_contigs",
    # Data structures
    "AssemblyParameters",
    "AssemblyResult",
    "Overlap",
    "ScaffoldLink",
    # Errors
    "ContigWeaverError",
    "InvalidAssemblyConfigError",
]
