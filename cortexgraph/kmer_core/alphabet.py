"""
cortexgraph v0.1.0

Nucleotide alphabet helpers.

Maps DNA letters to the 2-bit code space used by Cortex binaries
(A=0, C=1, G=2, T=3) and back.
"""

from typing import Dict, List

from Bio.Seq import Seq


NUCLEOTIDES = "ACGT"

BASE_TO_CODE: Dict[str, int] = {
    'A': 0, 'C': 1, 'G': 2, 'T': 3,
    'a': 0, 'c': 1, 'g': 2, 't': 3,
}


def base_to_code(base: str, strict: bool = True) -> int:
    """
    Convert a single nucleotide to its 2-bit code.

    Args:
        base: Single character nucleotide (case-insensitive)
        strict: Raise on characters outside ACGT; otherwise encode them as A

    Returns:
        Integer code in 0..3

    Raises:
        ValueError: If strict and base is not A, C, G or T
    """
    code = BASE_TO_CODE.get(base)
    if code is None:
        if strict:
            raise ValueError(f"Invalid nucleotide: {base!r}")
        return 0
    return code


def code_to_base(code: int) -> str:
    """Convert a 2-bit code to its uppercase nucleotide."""
    return NUCLEOTIDES[code & 3]


def sequence_to_codes(sequence: str, strict: bool = True) -> List[int]:
    """
    Convert a nucleotide string to a list of 2-bit codes.

    Example:
        >>> sequence_to_codes("acgt")
        [0, 1, 2, 3]
    """
    return [base_to_code(base, strict) for base in sequence]


def validate_sequence(sequence: str) -> None:
    """
    Check that a sequence only holds A, C, G and T.

    Raises:
        ValueError: Naming the first offending position (1-based)
    """
    for i, base in enumerate(sequence):
        if base not in BASE_TO_CODE:
            raise ValueError(
                f"Sequence is not a valid DNA sequence at position {i + 1}: {base!r}"
            )


def reverse_complement(sequence: str) -> str:
    """
    Generate reverse complement of DNA sequence.

    Example:
        >>> reverse_complement("ATCG")
        'CGAT'
    """
    return str(Seq(sequence).reverse_complement())


__all__ = [
    'NUCLEOTIDES',
    'BASE_TO_CODE',
    'base_to_code',
    'code_to_base',
    'sequence_to_codes',
    'validate_sequence',
    'reverse_complement',
]
