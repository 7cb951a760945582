#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ContigWeaver v0.1.0

Tests for suffix/prefix overlap detection.

Author: ContigWeaver Development Team
License: MIT - See LICENSE
"""

import pytest

from contigweaver.assembly_core.data_structures import Overlap, InvalidAssemblyConfigError
from contigweaver.assembly_core.overlap_detector import (
    calculate_identity,
    find_overlap,
    find_all_overlaps,
)


class TestIdentity:
    """Test exact-match identity."""
    
    def test_half_identity(self):
        """Two of four positions match."""
        assert calculate_identity("AATT", "AAGG") == 0.5
    
    def test_case_insensitive(self):
        """Case does not affect identity."""
        assert calculate_identity("acgt", "ACGT") == 1.0
    
    def test_different_lengths(self):
        """Unequal lengths have zero identity."""
        assert calculate_identity("ACG", "ACGT") == 0.0
    
    def test_both_empty(self):
        """Two empty sequences are identical."""
        assert calculate_identity("", "") == 1.0


class TestFindOverlap:
    """Test pairwise overlap search."""
    
    def test_exact_overlap(self, genome):
        """Suffix of the first read matches prefix of the second."""
        read_a = genome[0:40]
        read_b = genome[20:60]
        
        assert find_overlap(read_a, read_b, 15, 1.0) == (20, 20, 0)
    
    def test_overlap_is_directional(self, genome):
        """Swapping reads does not report the same overlap."""
        read_a = genome[0:40]
        read_b = genome[20:60]
        
        assert find_overlap(read_b, read_a, 15, 1.0) is None
    
    def test_longest_overlap_wins(self):
        """Scanning starts from the longest candidate length."""
        # "AAAA" suffix/prefix overlaps at every length; longest is 4
        assert find_overlap("AAAA", "AAAA", 1, 1.0) == (4, 0, 0)
    
    def test_below_min_overlap(self):
        """Overlaps shorter than min_overlap are ignored."""
        assert find_overlap("GGGGACGT", "ACGTCCCC", 5, 1.0) is None
        assert find_overlap("GGGGACGT", "ACGTCCCC", 4, 1.0) == (4, 4, 0)
    
    def test_identity_threshold(self):
        """One mismatch in ten passes at 0.9 but not at 0.95."""
        seq1 = "TTTTT" + "ACGTACGTAC"
        seq2 = "ACGTACGTAG" + "CCCCC"
        
        assert find_overlap(seq1, seq2, 10, 0.9) == (10, 5, 0)
        assert find_overlap(seq1, seq2, 10, 0.95) is None
    
    def test_case_insensitive_overlap(self):
        """Lowercase reads overlap like uppercase ones."""
        assert find_overlap("ggggacgt", "ACGTcccc", 4, 1.0) == (4, 4, 0)
    
    def test_invalid_thresholds(self):
        """Unusable thresholds fail fast."""
        with pytest.raises(InvalidAssemblyConfigError):
            find_overlap("ACGT", "ACGT", 0, 0.9)
        with pytest.raises(InvalidAssemblyConfigError):
            find_overlap("ACGT", "ACGT", 2, 1.5)


class TestFindAllOverlaps:
    """Test all-pairs overlap detection."""
    
    def test_tiled_reads_chain(self, tiled_reads):
        """Tiled reads overlap only with their right neighbour."""
        overlaps = find_all_overlaps(tiled_reads, min_overlap=15, min_identity=1.0)
        
        expected = [Overlap(i, i + 1, 20, 20, 0) for i in range(len(tiled_reads) - 1)]
        assert overlaps == expected
    
    def test_no_self_overlaps(self):
        """A read is never overlapped with itself."""
        overlaps = find_all_overlaps(["AAAAAA"], min_overlap=2, min_identity=1.0)
        assert overlaps == []
    
    def test_empty_input(self):
        """No reads, no overlaps, progress still completes."""
        seen = []
        assert find_all_overlaps([], progress=seen.append) == []
        assert seen == [1.0]
    
    def test_threaded_matches_sequential(self, tiled_reads):
        """Worker threads give the same sorted result."""
        sequential = find_all_overlaps(tiled_reads, min_overlap=15, min_identity=1.0)
        threaded = find_all_overlaps(tiled_reads, min_overlap=15, min_identity=1.0,
                                     num_threads=3)
        assert threaded == sequential
    
    def test_progress_is_monotone(self, tiled_reads):
        """Progress values rise and end with a single 1.0."""
        seen = []
        find_all_overlaps(tiled_reads * 3, min_overlap=15, min_identity=1.0,
                          progress=seen.append, check_interval=10)
        
        assert seen == sorted(seen)
        assert seen[-1] == 1.0
        assert seen.count(1.0) == 1
        assert all(0.0 <= value <= 1.0 for value in seen)

# ContigWeaver v0.1.0
# Any usage is subject to this software's license.
