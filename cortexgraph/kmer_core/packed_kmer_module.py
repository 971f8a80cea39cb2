#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
cortexgraph v0.1.0

Bit-packed k-mer representation.

A k-mer of arbitrary length k is stored 2 bits per base across an array of
64-bit words (32 bases per word), exactly as laid out in Cortex binaries:

- Word order is little-endian: word 0 holds the 3' end of the k-mer.
- The base at sequence position (k - i), for i = 1..k, lives in word
  (i - 1) // 32 at bit offset 2 * ((i - 1) % 32).
- Unused high-order bits of the top word are always zero.

Shifts by one base are the primitive behind neighbour derivation; they
always return a new sequence and never touch the source words.

Author: cortexgraph Development Team
License: MIT - See LICENSE
"""

from functools import total_ordering
from typing import Iterable, Optional, Union

import numpy as np

from .alphabet import NUCLEOTIDES, base_to_code, reverse_complement


BASES_PER_WORD = 32
WORD_MASK = (1 << 64) - 1

_PAIR_SHIFT = np.uint64(2)
_TOP_PAIR_SHIFT = np.uint64(62)
_LOW_PAIR_MASK = np.uint64(3)


def words_for_kmer(kmer_size: int) -> int:
    """Number of 64-bit words needed to pack kmer_size bases."""
    return (kmer_size + BASES_PER_WORD - 1) // BASES_PER_WORD


@total_ordering
class BitPackedSequence:
    """
    Fixed-width multi-word 2-bit encoding of a DNA sequence.

    Attributes:
        kmer_size: Number of bases encoded (k)
        words: Read-only numpy uint64 array, least significant word first
    """

    __slots__ = ('_words', 'kmer_size')

    def __init__(self, words: Union[Iterable[int], np.ndarray], kmer_size: int):
        """
        Wrap packed words.

        Args:
            words: Packed 64-bit words, word 0 first (copied)
            kmer_size: Number of bases encoded

        Raises:
            ValueError: If k < 1 or there are too few words to hold k bases
        """
        if kmer_size < 1:
            raise ValueError(f"kmer_size must be >= 1, got {kmer_size}")

        arr = np.array(words, dtype=np.uint64).reshape(-1)
        if len(arr) < words_for_kmer(kmer_size):
            raise ValueError(
                f"{len(arr)} words cannot hold a {kmer_size}-mer "
                f"(need {words_for_kmer(kmer_size)})"
            )
        arr.setflags(write=False)

        self._words = arr
        self.kmer_size = kmer_size

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_nucleotides(cls, text: str, strict: bool = True) -> 'BitPackedSequence':
        """
        Pack a nucleotide string.

        Args:
            text: DNA sequence (case-insensitive)
            strict: Reject characters outside ACGT; when False they pack as A

        Returns:
            New BitPackedSequence with k = len(text)

        Example:
            >>> BitPackedSequence.from_nucleotides("acgt").to_int()
            27
        """
        k = len(text)
        if k == 0:
            raise ValueError("Cannot pack an empty sequence")

        words = [0] * words_for_kmer(k)
        # i = 0 is the most 3' base
        for i, base in enumerate(reversed(text)):
            code = base_to_code(base, strict)
            words[i // BASES_PER_WORD] |= code << (2 * (i % BASES_PER_WORD))

        return cls(words, k)

    @classmethod
    def from_int(cls, value: int, kmer_size: int) -> 'BitPackedSequence':
        """
        Build a sequence from its arbitrary-precision integer value.

        Raises:
            ValueError: If value is negative or uses bits beyond 2*k
        """
        if value < 0 or value >> (2 * kmer_size):
            raise ValueError(f"Value does not fit in a {kmer_size}-mer")

        words = [(value >> (64 * i)) & WORD_MASK for i in range(words_for_kmer(kmer_size))]
        return cls(words, kmer_size)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def words(self) -> np.ndarray:
        """Packed words (read-only)."""
        return self._words

    @property
    def words_per_kmer(self) -> int:
        return len(self._words)

    def to_int(self) -> int:
        """Packed value as a single unsigned integer."""
        value = 0
        for i, word in enumerate(self._words.tolist()):
            value |= word << (64 * i)
        return value

    def _checked_k(self, k: Optional[int]) -> int:
        if k is None:
            return self.kmer_size
        if k < 1 or k > BASES_PER_WORD * len(self._words):
            raise ValueError(f"k={k} out of range for {len(self._words)} packed words")
        return k

    def to_nucleotides(self, k: Optional[int] = None) -> str:
        """
        Decode to nucleotide text, 5' to 3'.

        Args:
            k: Number of bases to decode (defaults to kmer_size)
        """
        k = self._checked_k(k)
        words = self._words.tolist()
        out = []
        for i in range(k, 0, -1):
            j = i - 1
            code = (words[j // BASES_PER_WORD] >> (2 * (j % BASES_PER_WORD))) & 3
            out.append(NUCLEOTIDES[code])
        return ''.join(out)

    def to_reverse_nucleotides(self, k: Optional[int] = None) -> str:
        """Decode position-reversed (3' to 5'), without complementing."""
        return self.to_nucleotides(k)[::-1]

    # ------------------------------------------------------------------
    # Shifts
    # ------------------------------------------------------------------

    def shift_right_insert_left(self, code: int, k: Optional[int] = None) -> 'BitPackedSequence':
        """
        Drop the 3' base and prepend a base at the 5' end.

        The whole multi-word value is shifted right by 2 bits; the low bit
        pair of each word carries into the top of the next lower word.
        Bits above base k are cleared before the new base is inserted.

        Args:
            code: 2-bit code of the new 5' base
            k: K-mer size (defaults to kmer_size)

        Returns:
            New BitPackedSequence
        """
        k = self._checked_k(k)
        src = self._words

        shifted = src >> _PAIR_SHIFT
        if len(src) > 1:
            shifted[:-1] |= (src[1:] & _LOW_PAIR_MASK) << _TOP_PAIR_SHIFT

        top = (k - 1) // BASES_PER_WORD
        bases_in_top = k - top * BASES_PER_WORD
        if bases_in_top < BASES_PER_WORD:
            shifted[top] &= np.uint64((1 << (2 * bases_in_top)) - 1)
        shifted[top + 1:] = 0

        offset = 2 * (bases_in_top - 1)
        shifted[top] |= np.uint64(code & 3) << np.uint64(offset)

        return BitPackedSequence(shifted, k)

    def shift_left_insert_right(self, code: int, k: Optional[int] = None) -> 'BitPackedSequence':
        """
        Drop the 5' base and append a base at the 3' end.

        The whole multi-word value is shifted left by 2 bits; the top bit
        pair of each word carries into the bottom of the next higher word.
        Bits pushed past base k are masked off.

        Args:
            code: 2-bit code of the new 3' base
            k: K-mer size (defaults to kmer_size)

        Returns:
            New BitPackedSequence
        """
        k = self._checked_k(k)
        src = self._words

        shifted = src << _PAIR_SHIFT
        if len(src) > 1:
            shifted[1:] |= src[:-1] >> _TOP_PAIR_SHIFT

        top = (k - 1) // BASES_PER_WORD
        bases_in_top = k - top * BASES_PER_WORD
        if bases_in_top < BASES_PER_WORD:
            shifted[top] &= np.uint64((1 << (2 * bases_in_top)) - 1)
        shifted[top + 1:] = 0

        shifted[0] |= np.uint64(code & 3)

        return BitPackedSequence(shifted, k)

    # ------------------------------------------------------------------
    # Strand helpers
    # ------------------------------------------------------------------

    def reverse_complement(self) -> 'BitPackedSequence':
        """Reverse complement as a new sequence of the same k."""
        rc = BitPackedSequence.from_nucleotides(reverse_complement(self.to_nucleotides()))
        if rc.words_per_kmer == self.words_per_kmer:
            return rc
        # keep the source word width when the file over-allocates words
        padded = np.zeros(self.words_per_kmer, dtype=np.uint64)
        padded[:rc.words_per_kmer] = rc.words
        return BitPackedSequence(padded, self.kmer_size)

    def canonical(self) -> 'BitPackedSequence':
        """The smaller of this k-mer and its reverse complement."""
        rc = self.reverse_complement()
        return self if self.compare(rc) <= 0 else rc

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def compare(self, other: 'BitPackedSequence') -> int:
        """
        Order by packed value, most significant word first.

        Returns:
            -1, 0 or 1
        """
        a, b = self.to_int(), other.to_int()
        return (a > b) - (a < b)

    def __eq__(self, other):
        if not isinstance(other, BitPackedSequence):
            return NotImplemented
        return bool(np.array_equal(self._words, other._words))

    def __lt__(self, other):
        if not isinstance(other, BitPackedSequence):
            return NotImplemented
        return self.compare(other) < 0

    def __hash__(self):
        return hash(tuple(self._words.tolist()))

    def __len__(self) -> int:
        return self.kmer_size

    def __str__(self) -> str:
        return self.to_nucleotides()

    def __repr__(self) -> str:
        return f"BitPackedSequence('{self.to_nucleotides()}', k={self.kmer_size})"
