#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ContigWeaver v0.1.0

Tests for link-based scaffolding.

Author: ContigWeaver Development Team
License: MIT - See LICENSE
"""

import pytest

from contigweaver.assembly_core.scaffolder_module import Scaffolder, merge_contigs, scaffold


class TestMergeContigs:
    """Test overlap-collapsing joins."""
    
    def test_overlap_collapsed(self):
        """The shared overlap appears once."""
        assert merge_contigs("AACCGG", "CCGGTT", 4) == "AACCGGTT"
    
    def test_no_overlap_concatenates(self):
        """Zero or negative overlap concatenates."""
        assert merge_contigs("AAA", "TTT", 0) == "AAATTT"
        assert merge_contigs("AAA", "TTT", -2) == "AAATTT"
    
    def test_oversized_overlap_concatenates(self):
        """An overlap longer than a contig cannot be collapsed."""
        assert merge_contigs("AAA", "TTTTT", 4) == "AAATTTTT"


class TestScaffolder:
    """Test greedy chain scaffolding."""
    
    def test_no_links_returns_contigs(self):
        """Without links every contig is its own scaffold."""
        contigs = ["AAAA", "CCCC", "GGGG"]
        
        assert scaffold(contigs, []) == contigs
    
    def test_chain_with_gaps(self):
        """Linked contigs are joined with gap runs."""
        contigs = ["AAAA", "CCCC", "GGGG"]
        links = [(0, 1, 3), (1, 2, 2)]
        
        assert scaffold(contigs, links) == ["AAAANNNCCCCNNGGGG"]
    
    def test_minimum_gap_of_one(self):
        """Zero or negative gap sizes still insert one gap character."""
        assert scaffold(["AA", "CC"], [(0, 1, 0)]) == ["AANCC"]
        assert scaffold(["AA", "CC"], [(0, 1, -5)]) == ["AANCC"]
    
    def test_custom_gap_character(self):
        """The filler symbol is configurable."""
        assert scaffold(["AA", "CC"], [(0, 1, 2)], gap_character='-') == ["AA--CC"]
    
    def test_invalid_gap_character(self):
        """The filler must be exactly one character."""
        with pytest.raises(ValueError):
            Scaffolder(gap_character='NN')
    
    def test_contig_used_once(self):
        """A contig already placed is skipped by later chains."""
        contigs = ["AAAA", "CCCC", "GGGG"]
        links = [(0, 1, 1), (2, 1, 1)]
        scaffolder = Scaffolder()
        
        scaffolds = scaffolder.scaffold(contigs, links)
        
        assert scaffolds == ["AAAANCCCC", "GGGG"]
        assert scaffolder.layouts == [[0, 1], [2]]
    
    def test_first_unused_link_followed(self):
        """Links to placed contigs are passed over in favour of the next one."""
        contigs = ["AAAA", "CCCC", "GGGG"]
        links = [(0, 1, 1), (1, 0, 1), (1, 2, 1)]
        
        assert scaffold(contigs, links) == ["AAAANCCCCNGGGG"]
    
    def test_cycle_absorbed(self):
        """Cyclic links terminate once every contig is placed."""
        contigs = ["AA", "CC"]
        links = [(0, 1, 1), (1, 0, 1)]
        
        assert scaffold(contigs, links) == ["AANCC"]
    
    def test_unlinked_contigs_follow_index_order(self):
        """Scaffolds appear in order of their first contig."""
        contigs = ["AA", "CC", "GG", "TT"]

        assert scaffold(contigs, [(2, 3, 1)]) == ["AA", "CC", "GGNTT"]
        # Target already placed as a standalone scaffold
        assert scaffold(contigs, [(2, 0, 1)]) == ["AA", "CC", "GG", "TT"]
    
    def test_link_out_of_range(self):
        """Links to unknown contigs are rejected."""
        with pytest.raises(ValueError):
            scaffold(["AA"], [(0, 3, 1)])
    
    def test_stats(self):
        """Join and gap counters are recorded."""
        scaffolder = Scaffolder()
        scaffolder.scaffold(["AA", "CC", "GG"], [(0, 1, 3), (1, 2, 2)])
        
        assert scaffolder.stats['joins'] == 2
        assert scaffolder.stats['gap_bases'] == 5
        assert scaffolder.stats['scaffolds_built'] == 1

    def test_stats_reset_between_runs(self):
        """A second run reports only its own joins and gap bases."""
        scaffolder = Scaffolder()
        scaffolder.scaffold(["AA", "CC"], [(0, 1, 5)])
        scaffolder.scaffold(["AA", "CC"], [(0, 1, 5)])

        assert scaffolder.stats['joins'] == 1
        assert scaffolder.stats['gap_bases'] == 5
        assert scaffolder.stats['contigs_input'] == 2
        assert scaffolder.stats['scaffolds_built'] == 1

    def test_empty(self):
        """No contigs, no scaffolds."""
        assert scaffold([], [(0, 1, 1)]) == []

# ContigWeaver v0.1.0
# Any usage is subject to this software's license.
