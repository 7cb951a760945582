#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ContigWeaver v0.1.0

Pytest configuration and shared fixtures.

Author: ContigWeaver Development Team
License: MIT - See LICENSE
"""

import random
import shutil
import tempfile
from pathlib import Path

import pytest

BASES = "ACGT"


def make_unique_sequence(length: int, node_size: int = 10, seed: int = 0) -> str:
    """
    Random sequence in which no substring of ``node_size`` occurs twice.
    
    Such a sequence has a linear de Bruijn graph for any k > node_size and
    only the intended exact overlaps between tiled reads.
    """
    rng = random.Random(seed)
    for _ in range(100):
        seq = [rng.choice(BASES) for _ in range(node_size)]
        seen = {''.join(seq)}
        while len(seq) < length:
            options = list(BASES)
            rng.shuffle(options)
            for base in options:
                candidate = ''.join(seq[len(seq) - node_size + 1:]) + base
                if candidate not in seen:
                    seen.add(candidate)
                    seq.append(base)
                    break
            else:
                break
        if len(seq) == length:
            return ''.join(seq)
    raise RuntimeError("Could not build a repeat-free sequence")


def tile_reads(sequence: str, read_length: int, step: int):
    """Reads of *read_length* starting every *step* bases, ending at the sequence end."""
    return [sequence[i:i + read_length]
            for i in range(0, len(sequence) - read_length + 1, step)]


@pytest.fixture
def genome():
    """200 bp synthetic genome without repeated 10-mers."""
    return make_unique_sequence(200, node_size=10, seed=1322)


@pytest.fixture
def tiled_reads(genome):
    """40 bp reads every 20 bp (50% overlaps) covering the whole genome."""
    return tile_reads(genome, 40, 20)


@pytest.fixture
def temp_output_dir():
    """Create temporary output directory for tests."""
    temp_dir = tempfile.mkdtemp(prefix="contigweaver_test_")
    yield Path(temp_dir)
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def simple_fastq():
    """Two FASTQ reads with low-quality ends."""
    return """@read1
ACGTACGTACGT
+
!!IIIIIIII!!
@read2
GGGGCCCCAAAA
+
IIIIIIIIIIII
"""

# ContigWeaver v0.1.0
# Any usage is subject to this software's license.
