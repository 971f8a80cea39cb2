"""
cortexgraph v0.1.0

Cortex binary writer.

Serialises a GraphHeader and GraphRecords into the exact on-disk layout
read by GraphFileReader. Mainly used to produce fixture graphs and to
re-emit filtered graphs.

Author: cortexgraph Development Team
License: MIT - See LICENSE
"""

import io
import logging
import struct
from pathlib import Path
from typing import Iterable, Union

import numpy as np

from ..kmer_core.graph_record_module import GraphRecord
from .cortex_binary_module import ERROR_RATE_SIZE, MAGIC, GraphHeader

logger = logging.getLogger(__name__)


def _pack_name(name: str) -> bytes:
    raw = name.encode('utf-8')
    return struct.pack('<I', len(raw)) + raw


def pack_header(header: GraphHeader) -> bytes:
    """
    Pack a header to bytes and record its size in header.header_size.

    Raises:
        ValueError: If colour_count disagrees with the colour list or an
            error rate payload is not 16 bytes
    """
    if header.colour_count != len(header.colours):
        raise ValueError(
            f"colour_count is {header.colour_count} but {len(header.colours)} colours given"
        )

    buf = io.BytesIO()
    buf.write(MAGIC)
    buf.write(struct.pack('<IIII', header.version, header.kmer_size,
                          header.words_per_kmer, header.colour_count))

    for colour in header.colours:
        buf.write(struct.pack('<I', colour.mean_read_length))
    for colour in header.colours:
        buf.write(struct.pack('<Q', colour.total_sequence_length))
    for colour in header.colours:
        buf.write(_pack_name(colour.name))
    for colour in header.colours:
        if len(colour.error_rate) != ERROR_RATE_SIZE:
            raise ValueError(f"error_rate must be {ERROR_RATE_SIZE} bytes, got {len(colour.error_rate)}")
        buf.write(colour.error_rate)

    for colour in header.colours:
        buf.write(struct.pack(
            '<BBBBII',
            int(colour.top_clipping),
            int(colour.low_cov_supernodes_removed),
            int(colour.low_cov_kmers_removed),
            int(colour.cleaned_against_graph),
            colour.low_cov_supernodes_threshold,
            colour.low_cov_kmers_threshold,
        ))
        buf.write(_pack_name(colour.cleaning_graph_name))

    buf.write(MAGIC)

    data = buf.getvalue()
    header.header_size = len(data)
    return data


def pack_record(record: GraphRecord, header: GraphHeader) -> bytes:
    """
    Pack one record using the header's word width and colour count.

    Raises:
        ValueError: If the record does not match the header
    """
    if record.colour_count != header.colour_count:
        raise ValueError(
            f"Record has {record.colour_count} colours, header expects {header.colour_count}"
        )
    if record.kmer.words_per_kmer > header.words_per_kmer:
        raise ValueError(
            f"Record k-mer uses {record.kmer.words_per_kmer} words, header allows {header.words_per_kmer}"
        )

    words = np.zeros(header.words_per_kmer, dtype='<u8')
    words[:record.kmer.words_per_kmer] = record.kmer.words

    return (words.tobytes()
            + record.coverages.astype('<u4').tobytes()
            + record.edges.edges.tobytes())


def write_graph_file(path: Union[str, Path], header: GraphHeader,
                     records: Iterable[GraphRecord]) -> int:
    """
    Write a complete Cortex binary.

    The file is written to a temporary sibling and moved into place.

    Args:
        path: Output .ctx path
        header: Graph header (header_size is updated)
        records: Records to write, in order

    Returns:
        Number of records written
    """
    path = Path(path)
    tmp = path.with_suffix(path.suffix + ".tmp")

    count = 0
    try:
        with open(tmp, 'wb') as f:
            f.write(pack_header(header))
            for record in records:
                f.write(pack_record(record, header))
                count += 1
        tmp.replace(path)
    finally:
        if tmp.exists():
            tmp.unlink()

    logger.info(f"Wrote {count} records to {path}")
    return count
