#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Core I/O module for ContigWeaver.

Consolidated module containing:
- SeqRead data structure
- FASTQ / FASTA file I/O (Biopython SeqIO, transparent gzip)
- Scaffold link table parsing

The assembly core only handles in-memory strings; this module converts
files into those strings and writes contigs back out.
"""

# =============================================================================
# SECTION 1: IMPORTS AND DEPENDENCIES
# =============================================================================

import gzip
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, TextIO, Tuple, Union

from Bio import SeqIO
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

logger = logging.getLogger(__name__)

FASTQ_SUFFIXES = ('.fastq', '.fq')
FASTA_SUFFIXES = ('.fasta', '.fa', '.fna', '.fas')


# =============================================================================
# SECTION 2: CORE READ DATA STRUCTURE
# =============================================================================

@dataclass
class SeqRead:
    """
    Sequencing read (or contig) with metadata.
    
    Attributes:
        id: Read identifier
        sequence: DNA sequence (uppercased on creation)
        quality: Quality scores (Phred+33 encoding), None for FASTA input
        metadata: Additional metadata
    """
    id: str
    sequence: str
    quality: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    
    def __post_init__(self):
        self.sequence = self.sequence.upper()
        if self.quality is not None and len(self.quality) != len(self.sequence):
            raise ValueError(
                f"Read {self.id}: quality length {len(self.quality)} does not match "
                f"sequence length {len(self.sequence)}"
            )
    
    @property
    def length(self) -> int:
        """Get read length."""
        return len(self.sequence)
    
    def get_average_quality(self) -> Optional[float]:
        """
        Calculate average quality score.
        
        Returns:
            Average Phred quality score, or None if no quality data
        """
        if not self.quality:
            return None
        scores = [ord(c) - 33 for c in self.quality]
        return sum(scores) / len(scores)
    
    def to_fasta_string(self) -> str:
        return f">{self.id}\n{self.sequence}\n"
    
    def __len__(self) -> int:
        return self.length


# =============================================================================
# SECTION 3: FILE HANDLING UTILITIES
# =============================================================================

def is_gzipped(filepath: Union[str, Path]) -> bool:
    """
    Check if file is gzip compressed (by extension).
    """
    return Path(filepath).suffix in ('.gz', '.gzip')


def open_file(filepath: Union[str, Path], mode: str = 'r') -> TextIO:
    """
    Open file with automatic gzip detection.
    
    Args:
        filepath: Path to file
        mode: File mode ('r' or 'w')
    
    Returns:
        File handle
    """
    filepath = Path(filepath)
    
    if is_gzipped(filepath):
        if 'r' in mode:
            return gzip.open(filepath, 'rt')
        else:
            return gzip.open(filepath, 'wt')
    else:
        return open(filepath, mode)


def detect_format(filepath: Union[str, Path]) -> str:
    """
    'fastq' or 'fasta' from the file extension (a trailing .gz is ignored).
    
    Raises:
        ValueError: If the extension is not recognised
    """
    path = Path(filepath)
    suffixes = [s.lower() for s in path.suffixes]
    if suffixes and suffixes[-1] in ('.gz', '.gzip'):
        suffixes = suffixes[:-1]
    suffix = suffixes[-1] if suffixes else ''
    
    if suffix in FASTQ_SUFFIXES:
        return 'fastq'
    if suffix in FASTA_SUFFIXES:
        return 'fasta'
    raise ValueError(f"Cannot determine sequence format of {filepath}")


# =============================================================================
# SECTION 4: FASTQ FILE I/O
# =============================================================================

def read_fastq(
    filepath: Union[str, Path],
    sample_size: Optional[int] = None,
    min_length: int = 0
) -> Iterator[SeqRead]:
    """
    Read FASTQ file and yield SeqRead objects.
    
    Args:
        filepath: Path to FASTQ file (can be gzipped)
        sample_size: Maximum number of reads to yield (None = all)
        min_length: Minimum read length filter
    
    Yields:
        SeqRead objects with Phred+33 quality strings
    """
    filepath = Path(filepath)
    
    if not filepath.exists():
        raise FileNotFoundError(f"FASTQ file not found: {filepath}")
    
    count = 0
    
    with open_file(filepath, 'r') as handle:
        for record in SeqIO.parse(handle, "fastq"):
            if sample_size and count >= sample_size:
                break
            
            sequence = str(record.seq)
            if len(sequence) < min_length:
                continue
            
            quality = "".join(chr(q + 33) for q in record.letter_annotations.get("phred_quality", []))
            
            yield SeqRead(
                id=record.id,
                sequence=sequence,
                quality=quality if quality else None,
                metadata={'description': record.description}
            )
            count += 1


def write_fastq(reads: Iterable[SeqRead], filepath: Union[str, Path]) -> int:
    """
    Write SeqRead objects to FASTQ file.
    
    Reads without quality get a flat Q30.
    
    Returns:
        Number of reads written
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    
    count = 0
    
    with open_file(filepath, 'w') as handle:
        for read in reads:
            quality_scores = [ord(c) - 33 for c in read.quality] if read.quality else [30] * read.length
            
            record = SeqRecord(
                seq=Seq(read.sequence),
                id=read.id,
                description="",
                letter_annotations={"phred_quality": quality_scores}
            )
            
            SeqIO.write(record, handle, "fastq")
            count += 1
    
    return count


# =============================================================================
# SECTION 5: FASTA FILE I/O
# =============================================================================

def read_fasta(
    filepath: Union[str, Path],
    min_length: int = 0
) -> Iterator[SeqRead]:
    """
    Read FASTA file and yield SeqRead objects.
    
    Args:
        filepath: Path to FASTA file (can be gzipped)
        min_length: Minimum sequence length filter
    
    Yields:
        SeqRead objects (without quality scores)
    """
    filepath = Path(filepath)
    
    if not filepath.exists():
        raise FileNotFoundError(f"FASTA file not found: {filepath}")
    
    with open_file(filepath, 'r') as handle:
        for record in SeqIO.parse(handle, "fasta"):
            sequence = str(record.seq)
            if len(sequence) < min_length:
                continue
            
            yield SeqRead(
                id=record.id,
                sequence=sequence,
                quality=None,
                metadata={'description': record.description}
            )


def read_sequences(filepath: Union[str, Path]) -> List[SeqRead]:
    """Read a FASTA or FASTQ file (chosen by extension) into memory."""
    if detect_format(filepath) == 'fastq':
        reads = list(read_fastq(filepath))
    else:
        reads = list(read_fasta(filepath))
    logger.info(f"Loaded {len(reads)} sequences from {filepath}")
    return reads


def write_fasta(
    reads: Iterable[SeqRead],
    filepath: Union[str, Path],
    line_width: int = 80
) -> int:
    """
    Write SeqRead objects to FASTA file.
    
    Args:
        reads: SeqRead objects
        filepath: Output FASTA file path (.gz compresses)
        line_width: Number of bases per line (0 = no wrapping)
    
    Returns:
        Number of sequences written
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    
    count = 0
    
    with open_file(filepath, 'w') as handle:
        for read in reads:
            handle.write(f">{read.id}\n")
            
            if line_width > 0:
                for i in range(0, len(read.sequence), line_width):
                    handle.write(read.sequence[i:i + line_width] + '\n')
            else:
                handle.write(read.sequence + '\n')
            
            count += 1
    
    return count


def sequences_to_reads(sequences: Iterable[str], prefix: str = 'contig') -> List[SeqRead]:
    """Wrap plain sequences as SeqReads named ``{prefix}_{n}`` (1-based)."""
    return [SeqRead(id=f"{prefix}_{n}", sequence=seq) for n, seq in enumerate(sequences, start=1)]


# =============================================================================
# SECTION 6: SCAFFOLD LINKS
# =============================================================================

def read_links_tsv(
    filepath: Union[str, Path],
    contig_index: Optional[Mapping[str, int]] = None
) -> List[Tuple[int, int, int]]:
    """
    Parse a scaffold link table.
    
    Each non-empty, non-``#`` line holds ``contig1<TAB>contig2<TAB>gap``.
    Contigs are 0-based indexes, or names resolved through *contig_index*.
    
    Returns:
        ``(contig_index1, contig_index2, gap_size)`` tuples in file order
    
    Raises:
        ValueError: On malformed lines or unknown contig names
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Link file not found: {filepath}")
    
    def resolve(token: str, line_no: int) -> int:
        if contig_index is not None and token in contig_index:
            return contig_index[token]
        try:
            return int(token)
        except ValueError:
            raise ValueError(f"{filepath}:{line_no}: unknown contig '{token}'")
    
    links = []
    with open_file(filepath, 'r') as handle:
        for line_no, line in enumerate(handle, start=1):
            line = line.strip()
            if not line or line.startswith('#'):
                continue
            fields = line.split('\t') if '\t' in line else line.split()
            if len(fields) != 3:
                raise ValueError(f"{filepath}:{line_no}: expected 3 columns, got {len(fields)}")
            try:
                gap = int(fields[2])
            except ValueError:
                raise ValueError(f"{filepath}:{line_no}: gap size '{fields[2]}' is not an integer")
            links.append((resolve(fields[0], line_no), resolve(fields[1], line_no), gap))
    
    logger.info(f"Loaded {len(links)} scaffold links from {filepath}")
    return links
