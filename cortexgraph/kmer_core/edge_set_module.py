#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
cortexgraph v0.1.0

Per-colour edge bitmasks.

Each colour stores one byte:
- High nibble: incoming edges, A=bit4, C=bit5, G=bit6, T=bit7
- Low nibble: outgoing edges, T=bit0, G=bit1, C=bit2, A=bit3

The outgoing nibble runs in the reverse base order of the incoming one.
This matches the on-disk convention and must not be normalised.

Author: cortexgraph Development Team
License: MIT - See LICENSE
"""

from typing import Iterable, Optional, Sequence, Tuple, Union

import numpy as np


# (bit, base code) pairs in the order neighbours are emitted
INCOMING_BITS: Tuple[Tuple[int, int], ...] = ((4, 0), (5, 1), (6, 2), (7, 3))
OUTGOING_BITS: Tuple[Tuple[int, int], ...] = ((0, 3), (1, 2), (2, 1), (3, 0))

INCOMING_MASK = 0xF0
OUTGOING_MASK = 0x0F


class EdgeSet:
    """
    Edge bytes for every colour of one k-mer.

    Attributes:
        edges: Read-only numpy uint8 array, one byte per colour
    """

    __slots__ = ('_edges',)

    def __init__(self, edges: Union[bytes, Iterable[int], np.ndarray] = ()):
        if isinstance(edges, (bytes, bytearray)):
            arr = np.frombuffer(bytes(edges), dtype=np.uint8).copy()
        elif isinstance(edges, np.ndarray):
            arr = edges.astype(np.uint8).reshape(-1)
        else:
            arr = np.array(list(edges), dtype=np.uint8)
        arr.setflags(write=False)
        self._edges = arr

    @property
    def edges(self) -> np.ndarray:
        return self._edges

    @property
    def colour_count(self) -> int:
        return len(self._edges)

    def union_across_colours(self, colours: Optional[Sequence[int]] = None) -> int:
        """
        Bitwise OR of the edge bytes.

        Args:
            colours: Colour indices to include (all colours if None)

        Returns:
            Single edge byte (0 when there are no colours)

        Raises:
            ValueError: If a colour index is outside 0..colour_count-1
        """
        if colours is None:
            selected = self._edges
        else:
            colours = list(colours)
            for colour in colours:
                if not 0 <= colour < len(self._edges):
                    raise ValueError(
                        f"Colour index {colour} out of range for {len(self._edges)} colours"
                    )
            selected = self._edges[np.array(colours, dtype=np.intp)]
        if len(selected) == 0:
            return 0
        return int(np.bitwise_or.reduce(selected))

    def _edge_byte(self, colour: Optional[int]) -> int:
        if colour is None:
            return self.union_across_colours()
        return int(self._edges[colour])

    def incoming_bases(self, colour: Optional[int] = None) -> Tuple[int, ...]:
        """
        Base codes that extend the k-mer to the left, in A, C, G, T order.

        Args:
            colour: Single colour to decode (union of all colours if None)
        """
        edge_byte = self._edge_byte(colour)
        return tuple(code for bit, code in INCOMING_BITS if edge_byte >> bit & 1)

    def outgoing_bases(self, colour: Optional[int] = None) -> Tuple[int, ...]:
        """
        Base codes that extend the k-mer to the right, in T, G, C, A order.

        Args:
            colour: Single colour to decode (union of all colours if None)
        """
        edge_byte = self._edge_byte(colour)
        return tuple(code for bit, code in OUTGOING_BITS if edge_byte >> bit & 1)

    def has_no_incoming(self) -> bool:
        """True if no colour has an incoming edge."""
        return not self.union_across_colours() & INCOMING_MASK

    def has_no_outgoing(self) -> bool:
        """True if no colour has an outgoing edge."""
        return not self.union_across_colours() & OUTGOING_MASK

    def __eq__(self, other):
        if not isinstance(other, EdgeSet):
            return NotImplemented
        return bool(np.array_equal(self._edges, other._edges))

    def __hash__(self):
        return hash(self._edges.tobytes())

    def __len__(self) -> int:
        return len(self._edges)

    def __repr__(self) -> str:
        return f"EdgeSet([{', '.join(f'0x{e:02x}' for e in self._edges.tolist())}])"
