#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
cortexgraph v0.1.0

Pytest configuration and shared fixtures.

Author: cortexgraph Development Team
License: MIT - See LICENSE
"""

import pytest
from pathlib import Path
import tempfile
import shutil

from cortexgraph.io.cortex_binary_module import ColourMetadata, GraphHeader
from cortexgraph.io.cortex_writer_module import pack_header, write_graph_file
from cortexgraph.kmer_core.graph_record_module import GraphRecord


# (k-mer, per-colour coverage, per-colour edge bytes)
THREE_COLOUR_KMERS = [
    ("AAAAAAAAAAAAAAAAAAAAC", (1, 0, 2), (0x10, 0x00, 0x01)),
    ("ACGTACGTACGTACGTACGTA", (5, 5, 5), (0x84, 0x84, 0x00)),
    ("CCCCCCCCCCCCCCCCCCCCC", (0, 3, 0), (0x00, 0x22, 0x00)),
    ("GATTACAGATTACAGATTACA", (7, 0, 1), (0x41, 0x00, 0x18)),
    ("TTTTTTTTTTTTTTTTTTTTT", (2, 2, 2), (0x00, 0x00, 0x00)),
]


def make_three_colour_header():
    """Header matching a 3-colour, k=21 graph built from 70bp reads."""
    colours = [
        ColourMetadata(name=f"org{i}", mean_read_length=70, total_sequence_length=14000)
        for i in (1, 2, 3)
    ]
    return GraphHeader(version=6, kmer_size=21, words_per_kmer=1,
                       colour_count=3, colours=colours)


def make_three_colour_records():
    return [
        GraphRecord.from_nucleotides(seq, coverages, edges)
        for seq, coverages, edges in THREE_COLOUR_KMERS
    ]


@pytest.fixture
def temp_output_dir():
    """Create temporary output directory for tests."""
    temp_dir = tempfile.mkdtemp(prefix="cortexgraph_test_")
    yield Path(temp_dir)
    # Cleanup after test
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def three_colour_header():
    return make_three_colour_header()


@pytest.fixture
def three_colour_records():
    return make_three_colour_records()


@pytest.fixture
def three_colour_ctx(temp_output_dir):
    """Known-good 3-colour Cortex binary."""
    path = temp_output_dir / "three_colours.ctx"
    write_graph_file(path, make_three_colour_header(), make_three_colour_records())
    return path


@pytest.fixture
def three_colour_header_size():
    """Byte length of the 3-colour header."""
    return len(pack_header(make_three_colour_header()))


@pytest.fixture
def corrupt_ctx(three_colour_ctx, temp_output_dir):
    """
    Factory for corrupted copies of the 3-colour binary.

    Call with (offset, replacement) to overwrite bytes, or with
    truncate=N to keep only the first N bytes.
    """
    original = three_colour_ctx.read_bytes()

    def _make(offset=None, replacement=b"", truncate=None, append=b"", name="corrupt.ctx"):
        data = bytearray(original)
        if offset is not None:
            data[offset:offset + len(replacement)] = replacement
        if truncate is not None:
            data = data[:truncate]
        data += append
        path = temp_output_dir / name
        path.write_bytes(bytes(data))
        return path

    return _make

# cortexgraph v0.1.0
# Any usage is subject to this software's license.
