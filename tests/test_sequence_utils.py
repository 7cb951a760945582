#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ContigWeaver v0.1.0

Tests for sequence helper utilities.

Author: ContigWeaver Development Team
License: MIT - See LICENSE
"""

import pytest
from contigweaver.utils.sequence_utils import (
    normalize_sequence,
    normalize_reads,
    extract_kmers,
    calculate_gc_content,
    count_called_bases,
    is_gap_base,
)


class TestNormalization:
    """Test read normalization."""
    
    def test_uppercase_and_strip(self):
        """Lowercase input with whitespace is cleaned."""
        assert normalize_sequence(" acgT\n") == "ACGT"
    
    def test_normalize_reads_keeps_order(self):
        """Every read is normalized in place of order."""
        assert normalize_reads(["aa", "Cc", "GT"]) == ["AA", "CC", "GT"]


class TestKmerExtraction:
    """Test k-mer extraction functions."""
    
    def test_basic_kmer_extraction(self):
        """Test extraction of k-mers from sequence."""
        kmers = extract_kmers("ATCGATCG", 3)
        
        assert kmers == ["ATC", "TCG", "CGA", "GAT", "ATC", "TCG"]
    
    def test_kmer_count_correct(self):
        """Number of k-mers is length - k + 1."""
        sequence = "ATCGATCGAA"
        assert len(extract_kmers(sequence, 4)) == len(sequence) - 4 + 1
    
    def test_kmer_larger_than_sequence(self):
        """No k-mers when k exceeds the sequence length."""
        assert extract_kmers("ATG", 5) == []
    
    def test_non_positive_k(self):
        """k <= 0 yields nothing."""
        assert extract_kmers("ATG", 0) == []


class TestGCContent:
    """Test GC content calculation."""
    
    def test_gc_content_all_gc(self):
        """100% GC sequence."""
        assert calculate_gc_content("GCGCGC") == 1.0
    
    def test_gc_content_ignores_gaps(self):
        """N bases are excluded from the denominator."""
        assert calculate_gc_content("ATGCNN") == 0.5
    
    def test_gc_content_empty(self):
        """Empty or all-gap sequences have zero GC."""
        assert calculate_gc_content("") == 0.0
        assert calculate_gc_content("NNNN") == 0.0
    
    def test_called_bases(self):
        """Gap symbols do not count as called bases."""
        assert count_called_bases("AC-GNn") == 3
    
    def test_is_gap_base(self):
        """Only N/n are scaffold gap bases."""
        assert is_gap_base("N")
        assert is_gap_base("n")
        assert not is_gap_base("-")
        assert not is_gap_base("A")

# ContigWeaver v0.1.0
# Any usage is subject to this software's license.
