#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Preprocessing Module for ContigWeaver.

Read cleanup applied before assembly:
    - Quality trimming of both read ends (Phred+33)
    - K-mer spectrum error correction (KmerSpectrum, ErrorCorrector)
    - CorrectionStats for reporting
"""

from .read_correction import (
    PHRED_OFFSET,
    trim_bounds,
    iter_trimmed_spans,
    quality_trim_reads,
    CorrectionStats,
    KmerSpectrum,
    ErrorCorrector,
    error_correct_reads,
)

__all__ = [
    "PHRED_OFFSET",
    "trim_bounds",
    "iter_trimmed_spans",
    "quality_trim_reads",
    "CorrectionStats",
    "KmerSpectrum",
    "ErrorCorrector",
    "error_correct_reads",
]
