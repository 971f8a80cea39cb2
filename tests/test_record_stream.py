#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
cortexgraph v0.1.0

Tests for threaded record streaming.

Author: cortexgraph Development Team
License: MIT - See LICENSE
"""

import threading

import pytest

from cortexgraph.io.cortex_binary_module import (
    ColourMetadata,
    GraphFileReader,
    GraphHeader,
    ReaderConfig,
    ReaderState,
    ShortReadError,
)
from cortexgraph.io.cortex_writer_module import write_graph_file
from cortexgraph.io.record_stream import stream_records_threaded
from cortexgraph.kmer_core.graph_record_module import GraphRecord


def producer_threads():
    return [t for t in threading.enumerate() if t.name.startswith("cortex-reader")]


@pytest.fixture
def large_ctx(temp_output_dir):
    """Single-colour k=31 graph with enough records to fill a small queue."""
    header = GraphHeader(version=6, kmer_size=31, words_per_kmer=1, colour_count=1,
                         colours=[ColourMetadata(name="sample")])
    records = [GraphRecord.from_nucleotides(_kmer(i), [i], [i % 256]) for i in range(500)]
    path = temp_output_dir / "large.ctx"
    write_graph_file(path, header, records)
    return path


def _kmer(i):
    return ''.join("ACGT"[(i >> (2 * j)) & 3] for j in range(31))


class TestThreadedStreaming:
    """Test the producer thread and bounded queue."""

    def test_matches_sequential_order(self, large_ctx):
        with GraphFileReader(large_ctx) as reader:
            sequential = [r.nucleotides() for r in reader.records()]

        with GraphFileReader(large_ctx) as reader:
            threaded = [r.nucleotides() for r in stream_records_threaded(reader, max_queue_size=4)]

        assert threaded == sequential
        assert len(threaded) == 500

    def test_coverage_preserved(self, large_ctx):
        with GraphFileReader(large_ctx) as reader:
            coverages = [int(r.coverages[0]) for r in stream_records_threaded(reader, 8)]

        assert coverages == list(range(500))

    def test_reader_exhausted_afterwards(self, three_colour_ctx):
        with GraphFileReader(three_colour_ctx) as reader:
            records = list(stream_records_threaded(reader))
            assert reader.state is ReaderState.EXHAUSTED

        assert len(records) == 5

    def test_threaded_config(self, three_colour_ctx, three_colour_records):
        config = ReaderConfig(threaded=True, prefetch_queue_size=2)
        with GraphFileReader(three_colour_ctx, config) as reader:
            assert list(reader) == three_colour_records

    def test_error_propagates_after_good_records(self, corrupt_ctx, three_colour_header_size):
        path = corrupt_ctx(truncate=three_colour_header_size + 2 * 23 + 12)
        seen = []

        reader = GraphFileReader(path)
        with pytest.raises(ShortReadError):
            for record in stream_records_threaded(reader, max_queue_size=1):
                seen.append(record.nucleotides())

        assert len(seen) == 2
        assert reader.state is ReaderState.ERROR

    def test_early_close_stops_producer(self, large_ctx):
        with GraphFileReader(large_ctx) as reader:
            stream = stream_records_threaded(reader, max_queue_size=2)
            first = next(stream)
            stream.close()

            assert first.nucleotides() == _kmer(0)
            assert producer_threads() == []

    def test_invalid_queue_size(self, three_colour_ctx):
        with GraphFileReader(three_colour_ctx) as reader:
            with pytest.raises(ValueError):
                next(stream_records_threaded(reader, max_queue_size=0))
