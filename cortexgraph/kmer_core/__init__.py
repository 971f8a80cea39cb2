"""
K-mer core module for cortexgraph.

Packed k-mer representation, per-colour edge bitmasks and graph records
with neighbour derivation.

CONSOLIDATED MODULES:
- alphabet.py: Nucleotide <-> 2-bit code conversion, reverse complement
- packed_kmer_module.py: BitPackedSequence (multi-word 2-bit packing, shifts)
- edge_set_module.py: EdgeSet (incoming/outgoing edge nibbles)
- graph_record_module.py: GraphRecord (coloured k-mer, left/right neighbours)
"""

from .alphabet import (
    NUCLEOTIDES,
    base_to_code,
    code_to_base,
    sequence_to_codes,
    validate_sequence,
    reverse_complement,
)
from .packed_kmer_module import (
    BASES_PER_WORD,
    BitPackedSequence,
    words_for_kmer,
)
from .edge_set_module import EdgeSet
from .graph_record_module import GraphRecord

__all__ = [
    # Alphabet
    "NUCLEOTIDES",
    "base_to_code",
    "code_to_base",
    "sequence_to_codes",
    "validate_sequence",
    "reverse_complement",

    # Packed k-mers
    "BASES_PER_WORD",
    "BitPackedSequence",
    "words_for_kmer",

    # Edges and records
    "EdgeSet",
    "GraphRecord",
]
