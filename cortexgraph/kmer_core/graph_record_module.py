#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
cortexgraph v0.1.0

Graph records (coloured k-mers) and neighbour derivation.

A GraphRecord is one node of the coloured de Bruijn graph: a packed k-mer,
one coverage count per colour and one edge byte per colour. Neighbours are
derived purely from the edge bytes by shifting the packed k-mer one base;
they are returned as bare records (k-mer only) since the neighbour's own
record is not looked up.

Author: cortexgraph Development Team
License: MIT - See LICENSE
"""

from typing import Iterable, List, Optional, Sequence, Union

import numpy as np

from .edge_set_module import EdgeSet
from .packed_kmer_module import BitPackedSequence


class GraphRecord:
    """
    Coloured k-mer read from a Cortex binary.

    Attributes:
        kmer: Packed k-mer sequence
        coverages: Read-only numpy uint32 array, one count per colour
        edges: Edge bytes, one per colour

    Equality and hashing use the packed k-mer only; coverage and edges
    are ignored.
    """

    __slots__ = ('kmer', 'coverages', 'edges')

    def __init__(self, kmer: BitPackedSequence,
                 coverages: Union[Iterable[int], np.ndarray] = (),
                 edges: Optional[EdgeSet] = None):
        if not isinstance(coverages, np.ndarray):
            coverages = list(coverages)
        coverages = np.array(coverages, dtype=np.uint32).reshape(-1)
        coverages.setflags(write=False)
        edges = edges if edges is not None else EdgeSet()

        if len(edges) != len(coverages):
            raise ValueError(
                f"Coverage/edge colour mismatch: {len(coverages)} coverages, {len(edges)} edge bytes"
            )

        self.kmer = kmer
        self.coverages = coverages
        self.edges = edges

    @classmethod
    def from_nucleotides(cls, text: str,
                         coverages: Iterable[int] = (),
                         edges: Union[bytes, Iterable[int]] = (),
                         strict: bool = True) -> 'GraphRecord':
        """Convenience constructor from nucleotide text and raw edge bytes."""
        return cls(BitPackedSequence.from_nucleotides(text, strict=strict),
                   coverages, EdgeSet(edges))

    @property
    def kmer_size(self) -> int:
        return self.kmer.kmer_size

    @property
    def colour_count(self) -> int:
        return len(self.coverages)

    @property
    def is_bare(self) -> bool:
        """True for neighbour records that carry no coverage or edge data."""
        return self.colour_count == 0

    @property
    def total_coverage(self) -> int:
        return int(self.coverages.sum(dtype=np.uint64))

    def nucleotides(self, k: Optional[int] = None) -> str:
        return self.kmer.to_nucleotides(k)

    def reverse_nucleotides(self, k: Optional[int] = None) -> str:
        return self.kmer.to_reverse_nucleotides(k)

    def left_neighbors(self, k: Optional[int] = None,
                       colours: Optional[Sequence[int]] = None) -> List['GraphRecord']:
        """
        K-mers that precede this one in the graph.

        One bare record per incoming base present in the union of the
        selected colours, in A, C, G, T order.

        Args:
            k: K-mer size (defaults to the k-mer's own size)
            colours: Colour indices to consider (all colours if None)

        Returns:
            List of bare GraphRecords (empty if the node has no predecessor)
        """
        edge_byte = self.edges.union_across_colours(colours)
        return [
            GraphRecord(self.kmer.shift_right_insert_left(code, k))
            for code in EdgeSet([edge_byte]).incoming_bases()
        ]

    def right_neighbors(self, k: Optional[int] = None,
                        colours: Optional[Sequence[int]] = None) -> List['GraphRecord']:
        """
        K-mers that follow this one in the graph.

        One bare record per outgoing base present in the union of the
        selected colours, in T, G, C, A order as stored.

        Args:
            k: K-mer size (defaults to the k-mer's own size)
            colours: Colour indices to consider (all colours if None)

        Returns:
            List of bare GraphRecords (empty if the node has no successor)
        """
        edge_byte = self.edges.union_across_colours(colours)
        return [
            GraphRecord(self.kmer.shift_left_insert_right(code, k))
            for code in EdgeSet([edge_byte]).outgoing_bases()
        ]

    def __eq__(self, other):
        if not isinstance(other, GraphRecord):
            return NotImplemented
        return self.kmer == other.kmer

    def __hash__(self):
        return hash(self.kmer)

    def __repr__(self) -> str:
        if self.is_bare:
            return f"GraphRecord({self.kmer.to_nucleotides()})"
        return (f"GraphRecord({self.kmer.to_nucleotides()}, "
                f"coverages={self.coverages.tolist()}, edges={self.edges!r})")
