#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ContigWeaver v0.1.0

End-to-end tests for the OLC and de Bruijn assembly entry points.

Author: ContigWeaver Development Team
License: MIT - See LICENSE
"""

import pytest

from contigweaver.assembly_core import (
    AssemblyParameters,
    AssemblyResult,
    InvalidAssemblyConfigError,
    assemble,
    assemble_debruijn,
    assemble_olc,
    calculate_stats,
)
from contigweaver.errors import ContigWeaverError


@pytest.fixture
def exact_parameters():
    return AssemblyParameters(min_overlap=15, min_identity=1.0,
                              kmer_size=11, min_contig_length=100)


class TestAssemblyParameters:
    """Test parameter validation."""
    
    def test_defaults(self):
        """Defaults match the documented values."""
        params = AssemblyParameters()
        
        assert params.to_dict() == {
            'min_overlap': 20,
            'min_identity': 0.9,
            'kmer_size': 31,
            'min_contig_length': 100,
        }
    
    @pytest.mark.parametrize("kwargs", [
        {'min_overlap': 0},
        {'min_identity': 1.5},
        {'min_identity': -0.1},
        {'kmer_size': 1},
        {'min_contig_length': -1},
    ])
    def test_invalid_values(self, kwargs):
        """Out-of-range values are rejected up front."""
        with pytest.raises(InvalidAssemblyConfigError):
            AssemblyParameters(**kwargs)
    
    def test_error_hierarchy(self):
        """Configuration errors are both package and value errors."""
        assert issubclass(InvalidAssemblyConfigError, ContigWeaverError)
        assert issubclass(InvalidAssemblyConfigError, ValueError)
    
    def test_from_dict_ignores_unknown_keys(self):
        """A whole config section can be passed in."""
        params = AssemblyParameters.from_dict({'method': 'dbg', 'kmer_size': 21})
        
        assert params.kmer_size == 21
        assert params.min_overlap == 20
    
    def test_from_none(self):
        """Missing mapping gives defaults."""
        assert AssemblyParameters.from_dict(None) == AssemblyParameters()
    
    def test_immutable(self):
        """Parameters cannot change mid-run."""
        params = AssemblyParameters()
        with pytest.raises(AttributeError):
            params.kmer_size = 21


class TestCalculateStats:
    """Test contig set summaries."""
    
    def test_stats(self):
        """N50, longest and total length."""
        contigs = ["A" * n for n in (100, 90, 80, 30, 20)]
        
        result = calculate_stats(contigs, total_reads=10, assembled_reads=7)
        
        assert result.n50 == 90
        assert result.longest_contig == 100
        assert result.total_length == 320
        assert result.num_contigs == 5
        assert result.assembled_reads == 7
    
    def test_assembled_defaults_to_total(self):
        """Unknown read usage counts every read."""
        assert calculate_stats(["ACGT"], total_reads=4).assembled_reads == 4
    
    def test_empty(self):
        """No contigs keeps only the read count."""
        result = calculate_stats([], total_reads=3)
        
        assert result == AssemblyResult(contigs=[], total_reads=3)
        assert result.n50 == 0


class TestOLCAssembly:
    """Test overlap-layout-consensus assembly."""
    
    def test_reconstructs_genome(self, genome, tiled_reads, exact_parameters):
        """Exact 50% tiling assembles into the original sequence."""
        result = assemble_olc(tiled_reads, exact_parameters)
        
        assert result.contigs == [genome]
        assert result.total_reads == len(tiled_reads)
        assert result.assembled_reads == len(tiled_reads)
        assert result.n50 == 200
        assert result.longest_contig == 200
        assert result.total_length == 200
    
    def test_lowercase_reads(self, genome, tiled_reads, exact_parameters):
        """Reads are case-normalized."""
        result = assemble_olc([read.lower() for read in tiled_reads], exact_parameters)
        
        assert result.contigs == [genome]
    
    def test_threaded(self, genome, tiled_reads, exact_parameters):
        """Thread count does not change the result."""
        result = assemble_olc(tiled_reads, exact_parameters, num_threads=3)
        
        assert result.contigs == [genome]
    
    def test_progress_ends_at_one(self, tiled_reads, exact_parameters):
        """Progress finishes with 1.0."""
        seen = []
        assemble_olc(tiled_reads, exact_parameters, progress=seen.append)
        
        assert seen[-1] == 1.0
    
    def test_empty_input(self):
        """No reads, empty result."""
        result = assemble_olc([])
        
        assert result.contigs == []
        assert result.total_reads == 0
        assert result.n50 == 0
    
    def test_short_contigs_dropped(self, tiled_reads):
        """Nothing survives a minimum longer than the genome."""
        params = AssemblyParameters(min_overlap=15, min_identity=1.0, min_contig_length=500)
        result = assemble_olc(tiled_reads, params)
        
        assert result.contigs == []
        assert result.total_reads == len(tiled_reads)
        assert result.assembled_reads == 0


class TestDeBruijnAssembly:
    """Test de Bruijn graph assembly."""
    
    def test_single_read_round_trip(self, genome, exact_parameters):
        """A repeat-free read is spelled back unchanged."""
        result = assemble_debruijn([genome], exact_parameters)
        
        assert result.contigs == [genome]
        assert result.assembled_reads == 1
    
    def test_tiled_reads(self, genome, tiled_reads, exact_parameters):
        """The first walk spans the whole genome."""
        result = assemble_debruijn(tiled_reads, exact_parameters)
        
        assert result.contigs[0] == genome
        assert result.longest_contig == 200
        assert result.assembled_reads == len(tiled_reads)
        assert all(len(contig) >= 100 for contig in result.contigs)
    
    def test_kmer_not_smaller_than_reads(self, tiled_reads):
        """k must be smaller than the longest read."""
        params = AssemblyParameters(kmer_size=40)
        
        with pytest.raises(InvalidAssemblyConfigError):
            assemble_debruijn(tiled_reads, params)
    
    def test_empty_input(self):
        """No reads, empty result."""
        assert assemble_debruijn([]).contigs == []


class TestDispatch:
    """Test method selection."""
    
    def test_method_names(self, genome, tiled_reads, exact_parameters):
        """Both methods are reachable, case-insensitively."""
        assert assemble(tiled_reads, exact_parameters, method='olc').contigs == [genome]
        assert assemble([genome], exact_parameters, method='DBG').contigs == [genome]
    
    def test_unknown_method(self, tiled_reads):
        """Unknown methods are configuration errors."""
        with pytest.raises(InvalidAssemblyConfigError):
            assemble(tiled_reads, method='greedy')
    
    def test_result_to_dict(self, tiled_reads, exact_parameters):
        """Serialised results omit contigs unless asked."""
        result = assemble(tiled_reads, exact_parameters)
        
        assert 'contigs' not in result.to_dict()
        assert result.to_dict(include_contigs=True)['contigs'] == result.contigs

# ContigWeaver v0.1.0
# Any usage is subject to this software's license.
