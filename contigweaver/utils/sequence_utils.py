"""
ContigWeaver v0.1.0

Sequence utility functions for ContigWeaver.

Provides the small string helpers shared by the assembly, correction and
statistics modules.
"""

from typing import Iterable, List

NUCLEOTIDES = ('A', 'C', 'G', 'T')
GAP_SYMBOLS = ('-', 'N')


def normalize_sequence(sequence: str) -> str:
    """
    Normalize a read to the uppercase alphabet used throughout the assembler.
    
    Args:
        sequence: Nucleotide string in any case
        
    Returns:
        Uppercase sequence with surrounding whitespace removed
        
    Example:
        >>> normalize_sequence(" acgT\\n")
        'ACGT'
    """
    return sequence.strip().upper()


def normalize_reads(reads: Iterable[str]) -> List[str]:
    """Normalize every read in *reads* (see normalize_sequence)."""
    return [normalize_sequence(read) for read in reads]


def extract_kmers(sequence: str, k: int) -> List[str]:
    """
    Extract all k-mers from a sequence.
    
    Args:
        sequence: DNA sequence string
        k: K-mer size
        
    Returns:
        List of k-mer strings, in read order (duplicates kept)
        
    Example:
        >>> extract_kmers("ATCGATCG", 3)
        ['ATC', 'TCG', 'CGA', 'GAT', 'ATC', 'TCG']
    """
    if k <= 0 or k > len(sequence):
        return []
    
    sequence = sequence.upper()
    return [sequence[i:i + k] for i in range(len(sequence) - k + 1)]


def calculate_gc_content(sequence: str) -> float:
    """
    Calculate GC content of a DNA sequence over its called (non-N) bases.
    
    Args:
        sequence: DNA sequence string
        
    Returns:
        GC content as fraction (0.0 to 1.0)
        
    Example:
        >>> calculate_gc_content("ATGCNN")
        0.5
    """
    called = count_called_bases(sequence)
    if called == 0:
        return 0.0
    
    sequence = sequence.upper()
    gc_count = sequence.count('G') + sequence.count('C')
    return gc_count / called


def count_called_bases(sequence: str) -> int:
    """Number of positions that are not gap or ambiguity symbols."""
    sequence = sequence.upper()
    return len(sequence) - sum(sequence.count(symbol) for symbol in GAP_SYMBOLS)


def is_gap_base(base: str) -> bool:
    """True for the scaffold gap / ambiguity symbol ``N`` (either case)."""
    return base in ('N', 'n')

# ContigWeaver v0.1.0
# Any usage is subject to this software's license.
