"""
I/O utilities for ContigWeaver.

Sequence file reading and writing (FASTA/FASTQ, optionally gzipped) and
scaffold link tables.
"""

from .io_core import (
    SeqRead,
    is_gzipped,
    open_file,
    detect_format,
    read_fastq,
    write_fastq,
    read_fasta,
    write_fasta,
    read_sequences,
    sequences_to_reads,
    read_links_tsv,
)

__all__ = [
    "SeqRead",
    "is_gzipped",
    "open_file",
    "detect_format",
    "read_fastq",
    "write_fastq",
    "read_fasta",
    "write_fasta",
    "read_sequences",
    "sequences_to_reads",
    "read_links_tsv",
]
