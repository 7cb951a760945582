"""
Assembly utilities for ContigWeaver.

- coverage_consensus: read placement, per-base depth and consensus calling
- assembly_stats: N50/Nx, auN, gap and scaffold structure metrics
"""

from .coverage_consensus import (
    calculate_coverage,
    find_best_alignment,
    compute_consensus,
    coverage_summary,
    CoverageSummary,
)

from .assembly_stats import (
    compute_n50,
    calculate_nx,
    calculate_nx_curve,
    calculate_aun,
    classify_gap,
    find_gaps,
    analyze_gap_distribution,
    analyze_scaffolds,
    extract_contigs,
    calculate_statistics,
    NxStatistics,
    GapInfo,
    ScaffoldStructure,
    AssemblyStatistics,
)

__all__ = [
    # Coverage / consensus
    "calculate_coverage",
    "find_best_alignment",
    "compute_consensus",
    "coverage_summary",
    "CoverageSummary",
    # Metrics
    "compute_n50",
    "calculate_nx",
    "calculate_nx_curve",
    "calculate_aun",
    "classify_gap",
    "find_gaps",
    "analyze_gap_distribution",
    "analyze_scaffolds",
    "extract_contigs",
    "calculate_statistics",
    "NxStatistics",
    "GapInfo",
    "ScaffoldStructure",
    "AssemblyStatistics",
]
