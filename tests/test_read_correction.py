#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ContigWeaver v0.1.0

Tests for quality trimming and k-mer spectrum error correction.

Author: ContigWeaver Development Team
License: MIT - See LICENSE
"""

import pytest

from contigweaver.preprocessing.read_correction import (
    CorrectionStats,
    ErrorCorrector,
    KmerSpectrum,
    error_correct_reads,
    iter_trimmed_spans,
    quality_trim_reads,
    trim_bounds,
)


def _mutate(sequence, position):
    base = 'A' if sequence[position] != 'A' else 'C'
    return sequence[:position] + base + sequence[position + 1:]


class TestQualityTrimming:
    """Test Phred+33 end trimming."""
    
    def test_trim_bounds(self):
        """Low-quality bases are removed from both ends."""
        assert trim_bounds("!!IIII!!", min_quality=20) == (2, 6)
    
    def test_all_low_quality(self):
        """A read of only low-quality bases is trimmed to nothing."""
        start, end = trim_bounds("!!!!", min_quality=20)
        assert start == end
    
    def test_interior_low_quality_kept(self):
        """Only the ends are trimmed."""
        assert trim_bounds("II!!II", min_quality=20) == (0, 6)
    
    def test_trim_reads(self):
        """Trimmed sequences are returned, short ones dropped."""
        reads = [
            ("ACGTACGTACGT", "!!IIIIIIII!!"),
            ("GGGGCCCCAAAA", "IIIIIIIIIIII"),
            ("TTTT", "!!!!"),
        ]
        
        trimmed = quality_trim_reads(reads, min_quality=20, min_length=5)
        
        assert trimmed == ["GTACGTAC", "GGGGCCCCAAAA"]
    
    def test_min_length_boundary(self):
        """Reads exactly at min_length survive."""
        assert quality_trim_reads([("ACGT", "IIII")], min_length=4) == ["ACGT"]
        assert quality_trim_reads([("ACGT", "IIII")], min_length=5) == []
    
    def test_length_mismatch(self):
        """Quality and sequence must have the same length."""
        with pytest.raises(ValueError):
            quality_trim_reads([("ACGT", "III")])

    def test_trimmed_spans(self):
        """Surviving reads are reported by index with their kept interval."""
        reads = [("ACGTACGTACGT", "!!IIIIIIII!!"), ("TTTT", "!!!!"), ("GGCC", "IIII")]

        spans = list(iter_trimmed_spans(reads, min_quality=20, min_length=4))

        assert spans == [(0, 2, 10), (2, 0, 4)]


class TestKmerSpectrum:
    """Test the k-mer frequency table."""
    
    def test_counts(self):
        """Overlapping k-mers are all counted."""
        spectrum = KmerSpectrum(k_size=2, min_freq=2)
        spectrum.add_sequence("AAAC")
        
        assert spectrum.get_count("AA") == 2
        assert spectrum.get_count("AC") == 1
        assert spectrum.get_count("GG") == 0
        assert spectrum.is_solid("AA")
        assert not spectrum.is_solid("AC")
        assert spectrum.num_distinct == 2
        assert spectrum.num_solid() == 1
    
    def test_histogram(self):
        """Histogram maps multiplicity to distinct k-mers."""
        spectrum = KmerSpectrum(k_size=2, min_freq=1)
        spectrum.add_sequence("AAAC")
        
        assert spectrum.histogram() == {1: 1, 2: 1}
    
    def test_invalid_parameters(self):
        """k and minimum frequency must be positive."""
        with pytest.raises(ValueError):
            KmerSpectrum(k_size=0)
        with pytest.raises(ValueError):
            KmerSpectrum(k_size=5, min_freq=0)


class TestErrorCorrection:
    """Test substitution correction."""
    
    def test_single_substitution_repaired(self, genome):
        """A lone error surrounded by solid coverage is corrected."""
        template = genome[:60]
        mutant = _mutate(template, 30)
        reads = [template] * 5 + [mutant]
        
        corrector = ErrorCorrector(k_size=11, min_kmer_freq=3)
        corrected, stats = corrector.correct_reads(reads)
        
        assert corrected == [template] * 6
        assert stats.reads_corrected == 1
        assert stats.bases_corrected == 1
        assert dict(stats.corrections_by_position) == {30: 1}
    
    def test_repeated_calls_do_not_accumulate_spectrum(self, genome):
        """A reused corrector counts only the reads of the current call."""
        template = genome[:60]
        mutant = _mutate(template, 30)
        reads = [template] * 2 + [mutant]
        corrector = ErrorCorrector(k_size=11, min_kmer_freq=4)

        first, _ = corrector.correct_reads(reads)
        second, stats = corrector.correct_reads(reads)

        assert first == second == reads
        assert stats.bases_corrected == 0
        assert max(corrector.spectrum.kmer_counts.values()) == 3

    def test_correction_reported(self, genome):
        """correct_sequence reports position, old and new base."""
        template = genome[:60]
        mutant = _mutate(template, 30)
        corrector = ErrorCorrector(k_size=11, min_kmer_freq=3)
        corrector.build_spectrum([template] * 5)
        
        fixed, corrections = corrector.correct_sequence(mutant)
        
        assert fixed == template
        assert corrections == [(30, mutant[30], template[30])]
    
    def test_clean_reads_unchanged(self, genome):
        """Reads made only of solid k-mers are returned as-is."""
        reads = [genome[:50]] * 3
        
        assert error_correct_reads(reads, kmer_size=11, min_kmer_frequency=3) == reads
    
    def test_uncorrectable_restored(self):
        """Windows with no solid alternative keep their original base."""
        corrector = ErrorCorrector(k_size=3, min_kmer_freq=2)
        corrected, stats = corrector.correct_reads(["ACGTTA"])
        
        assert corrected == ["ACGTTA"]
        assert stats.bases_corrected == 0
        assert stats.uncorrectable_windows == stats.weak_windows == 4
    
    def test_reads_normalized(self):
        """Lowercase input is uppercased."""
        assert error_correct_reads(["acg"], kmer_size=5) == ["ACG"]
    
    def test_read_shorter_than_k(self):
        """Reads without a full window pass through."""
        corrected, stats = ErrorCorrector(k_size=5, min_kmer_freq=1).correct_reads(["ACG"])
        
        assert corrected == ["ACG"]
        assert stats.weak_windows == 0
    
    def test_one_output_per_input(self, tiled_reads):
        """Read count and order are preserved."""
        corrected = error_correct_reads(tiled_reads, kmer_size=11, min_kmer_frequency=1)
        
        assert corrected == tiled_reads


class TestCorrectionStats:
    """Test correction statistics."""
    
    def test_rate(self):
        """Rate is a percentage of processed bases."""
        stats = CorrectionStats()
        stats.record_read(100, 2)
        stats.record_read(100, 0)
        stats.bases_corrected = 2
        
        assert stats.reads_corrected == 1
        assert stats.get_correction_rate() == 1.0
        assert stats.to_dict()['correction_rate'] == 1.0
    
    def test_empty_rate(self):
        """No bases, zero rate."""
        assert CorrectionStats().get_correction_rate() == 0.0
    
    def test_summary_text(self):
        """Summary mentions the processed read count."""
        stats = CorrectionStats()
        stats.record_read(10, 0)
        
        assert "Reads processed:       1" in stats.summary()

# ContigWeaver v0.1.0
# Any usage is subject to this software's license.
