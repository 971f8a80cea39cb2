#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Core binary I/O module for cortexgraph.

Consolidated module containing:
- Header data structures (ColourMetadata, GraphHeader)
- Reader configuration (ReaderConfig)
- GraphFileReader: streaming reader for Cortex coloured de Bruijn graph
  binaries (.ctx), with header parsing, corruption detection and
  record-at-a-time decoding

File layout (all integers little-endian):

    [6]   magic "CORTEX"
    u32   version, kmer size, words per kmer, colour count
    per colour: u32 mean read length
    per colour: u64 total sequence length
    per colour: u32 name length + name bytes
    per colour: 16-byte error rate
    per colour: 4 x u8 cleaning flags, 2 x u32 thresholds,
                u32 cleaning graph name length + name bytes
    [6]   magic "CORTEX"
    records: words_per_kmer x u64, colour_count x u32 coverage,
             colour_count x u8 edges
"""

# =============================================================================
# SECTION 1: IMPORTS AND DEPENDENCIES
# =============================================================================

import logging
import os
import struct
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, BinaryIO, Dict, Iterator, List, Optional, Union

import numpy as np

from ..kmer_core.edge_set_module import EdgeSet
from ..kmer_core.graph_record_module import GraphRecord
from ..kmer_core.packed_kmer_module import BitPackedSequence, words_for_kmer
from .record_stream import stream_records_threaded

logger = logging.getLogger(__name__)


MAGIC = b"CORTEX"
MAX_NAME_LENGTH = 10000
ERROR_RATE_SIZE = 16

UINT64_T = 8
UINT32_T = 4
UINT8_T = 1


class GraphFormatError(Exception):
    """Raised when a Cortex binary is malformed or corrupt."""
    pass


class ShortReadError(GraphFormatError):
    """Raised when the file ends in the middle of a header field or record."""
    pass


class ReaderState(Enum):
    """Lifecycle of a GraphFileReader."""
    CLOSED = "closed"
    HEADER_PARSING = "header_parsing"
    STREAMING = "streaming"
    EXHAUSTED = "exhausted"
    ERROR = "error"


# =============================================================================
# SECTION 2: HEADER DATA STRUCTURES
# =============================================================================

@dataclass(frozen=True)
class ColourMetadata:
    """
    Per-colour (per-sample) metadata from the binary header.

    Attributes:
        name: Sample name
        mean_read_length: Mean read length of the sample's input
        total_sequence_length: Total bases loaded for the sample
        error_rate: Opaque 16-byte error rate payload (stored, not interpreted)
        top_clipping: Tips were clipped
        low_cov_supernodes_removed: Low-coverage supernodes were removed
        low_cov_kmers_removed: Low-coverage k-mers were removed
        cleaned_against_graph: Colour was cleaned against a reference graph
        low_cov_supernodes_threshold: Threshold used for supernode cleaning
        low_cov_kmers_threshold: Threshold used for k-mer cleaning
        cleaning_graph_name: Name of the graph cleaned against
    """
    name: str = ""
    mean_read_length: int = 0
    total_sequence_length: int = 0
    error_rate: bytes = bytes(ERROR_RATE_SIZE)
    top_clipping: bool = False
    low_cov_supernodes_removed: bool = False
    low_cov_kmers_removed: bool = False
    cleaned_against_graph: bool = False
    low_cov_supernodes_threshold: int = 0
    low_cov_kmers_threshold: int = 0
    cleaning_graph_name: str = ""


@dataclass
class GraphHeader:
    """
    File-scope header of a Cortex binary.

    All colours share kmer_size and words_per_kmer. header_size is the
    number of bytes the header occupies on disk (0 until parsed or packed).
    """
    version: int
    kmer_size: int
    words_per_kmer: int
    colour_count: int
    colours: List[ColourMetadata] = field(default_factory=list)
    header_size: int = 0

    @property
    def record_size(self) -> int:
        """Size in bytes of one k-mer record."""
        return (self.words_per_kmer * UINT64_T
                + self.colour_count * UINT32_T
                + self.colour_count * UINT8_T)

    @property
    def colour_names(self) -> List[str]:
        return [colour.name for colour in self.colours]

    def summary(self) -> str:
        """Human-readable header dump."""
        lines = [
            f"Magic chars:       {MAGIC.decode('ascii')}",
            f"Version:           {self.version}",
            f"KmerSize:          {self.kmer_size}",
            f"Words per kmer:    {self.words_per_kmer}",
            f"Number of colours: {self.colour_count}",
        ]
        for i, colour in enumerate(self.colours):
            lines.append(
                f"Colour {i}: name={colour.name!r} "
                f"mean_read_length={colour.mean_read_length} "
                f"total_sequence_length={colour.total_sequence_length}"
            )
        return "\n".join(lines) + "\n"


# =============================================================================
# SECTION 3: READER CONFIGURATION
# =============================================================================

@dataclass
class ReaderConfig:
    """Configuration for GraphFileReader."""
    max_name_length: int = MAX_NAME_LENGTH  # Longer names are treated as corruption
    threaded: bool = False  # Iterate via a producer thread and bounded queue
    prefetch_queue_size: int = 1024  # Queue bound for threaded iteration

    def __post_init__(self):
        """Validate configuration."""
        if self.max_name_length < 0:
            raise ValueError(f"max_name_length must be >= 0, got {self.max_name_length}")
        if self.prefetch_queue_size < 1:
            raise ValueError(f"prefetch_queue_size must be >= 1, got {self.prefetch_queue_size}")

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'ReaderConfig':
        """Build from the 'reader' section of a loaded configuration."""
        reader = config.get('reader', {})
        return cls(
            max_name_length=reader.get('max_name_length', MAX_NAME_LENGTH),
            threaded=reader.get('threaded', False),
            prefetch_queue_size=reader.get('prefetch_queue_size', 1024),
        )


# =============================================================================
# SECTION 4: STREAMING READER
# =============================================================================

class GraphFileReader:
    """
    Streaming reader for Cortex binaries.

    The header is parsed eagerly on open; records are then decoded one at a
    time. A reader is stateful and must not be shared between threads
    without external locking.

    Example:
        >>> with GraphFileReader("graph.ctx") as reader:
        ...     for record in reader:
        ...         print(record.nucleotides())
    """

    def __init__(self, path: Union[str, Path], config: Optional[ReaderConfig] = None):
        """
        Open a binary and parse its header.

        Args:
            path: Path to .ctx file
            config: Reader configuration (defaults if None)

        Raises:
            FileNotFoundError: If the file does not exist
            GraphFormatError: If the header is malformed (the file is closed)
        """
        self.path = Path(path)
        self.config = config or ReaderConfig()
        self.state = ReaderState.CLOSED
        self.header: Optional[GraphHeader] = None
        self.kmer_count = 0
        self._record_start = 0
        self._fh: Optional[BinaryIO] = None

        self._fh = open(self.path, 'rb')
        self.state = ReaderState.HEADER_PARSING

        try:
            self.header = self._read_header()
            self._record_start = self._fh.tell()
            self.header.header_size = self._record_start
            self.kmer_count = self._expected_record_count()
        except Exception:
            self._fail()
            raise

        self.state = ReaderState.STREAMING
        logger.info(
            f"Opened {self.path}: version {self.header.version}, k={self.header.kmer_size}, "
            f"{self.header.colour_count} colours, {self.kmer_count} records"
        )

    @classmethod
    def open(cls, path: Union[str, Path], config: Optional[ReaderConfig] = None) -> 'GraphFileReader':
        """Open a binary and parse its header."""
        return cls(path, config)

    # ------------------------------------------------------------------
    # Low-level reads
    # ------------------------------------------------------------------

    def _read_exact(self, size: int, what: str) -> bytes:
        data = self._fh.read(size)
        if len(data) != size:
            raise ShortReadError(
                f"Truncated {what}: expected {size} bytes, got {len(data)}"
            )
        return data

    def _read_u32(self, what: str) -> int:
        return struct.unpack('<I', self._read_exact(UINT32_T, what))[0]

    def _read_u64(self, what: str) -> int:
        return struct.unpack('<Q', self._read_exact(UINT64_T, what))[0]

    def _read_flag(self, what: str) -> bool:
        value = self._read_exact(UINT8_T, what)[0]
        if value not in (0, 1):
            raise GraphFormatError(f"{what} byte is 0x{value:02x}, expected 0x00 or 0x01")
        return value == 1

    def _read_name(self, what: str) -> str:
        length = self._read_u32(f"{what} length")
        # A very long name almost certainly means the file is corrupt
        if length > self.config.max_name_length:
            raise GraphFormatError(
                f"{what} length {length} exceeds {self.config.max_name_length}; file is corrupt"
            )
        raw = self._read_exact(length, what)
        return raw.replace(b"\x00", b"").decode('utf-8', errors='replace')

    def _check_magic(self, where: str):
        magic = self._fh.read(len(MAGIC))
        if magic != MAGIC:
            raise GraphFormatError(f"bad magic string {where}: {magic!r}")

    # ------------------------------------------------------------------
    # Header
    # ------------------------------------------------------------------

    def _read_header(self) -> GraphHeader:
        """Parse the header, leaving the file positioned at the first record."""
        self._check_magic("at start of file")

        version = self._read_u32("version")
        kmer_size = self._read_u32("kmer size")
        words_per_kmer = self._read_u32("words per kmer")
        colour_count = self._read_u32("colour count")

        # Fields are stored column-wise for the first blocks
        mean_read_lengths = [self._read_u32("mean read length") for _ in range(colour_count)]
        total_lengths = [self._read_u64("total sequence length") for _ in range(colour_count)]
        names = [self._read_name("colour name") for _ in range(colour_count)]
        error_rates = [self._read_exact(ERROR_RATE_SIZE, "error rate") for _ in range(colour_count)]

        # Cleaning information is stored row-wise
        colours = []
        for i in range(colour_count):
            top_clipping = self._read_flag("top clipping")
            supernodes_removed = self._read_flag("low coverage supernodes removed")
            kmers_removed = self._read_flag("low coverage kmers removed")
            cleaned_against_graph = self._read_flag("cleaned against graph")
            supernodes_threshold = self._read_u32("low coverage supernodes threshold")
            kmers_threshold = self._read_u32("low coverage kmers threshold")
            cleaning_graph_name = self._read_name("cleaning graph name")

            colours.append(ColourMetadata(
                name=names[i],
                mean_read_length=mean_read_lengths[i],
                total_sequence_length=total_lengths[i],
                error_rate=error_rates[i],
                top_clipping=top_clipping,
                low_cov_supernodes_removed=supernodes_removed,
                low_cov_kmers_removed=kmers_removed,
                cleaned_against_graph=cleaned_against_graph,
                low_cov_supernodes_threshold=supernodes_threshold,
                low_cov_kmers_threshold=kmers_threshold,
                cleaning_graph_name=cleaning_graph_name,
            ))

        self._check_magic("after colour metadata")

        header = GraphHeader(
            version=version,
            kmer_size=kmer_size,
            words_per_kmer=words_per_kmer,
            colour_count=colour_count,
            colours=colours,
        )

        if words_per_kmer != words_for_kmer(kmer_size):
            logger.warning(
                f"{self.path}: header declares {words_per_kmer} words per kmer but "
                f"k={kmer_size} needs {words_for_kmer(kmer_size)}; decoded k-mers may be wrong"
            )

        logger.debug(f"Parsed header of {self.path}: {header.colour_names}")
        return header

    def _expected_record_count(self) -> int:
        record_size = self.header.record_size
        if record_size == 0:
            raise GraphFormatError("Header describes zero-length records")

        file_size = os.fstat(self._fh.fileno()).st_size
        count, trailing = divmod(file_size - self._record_start, record_size)
        if trailing:
            logger.warning(
                f"{self.path}: {trailing} trailing bytes do not form a whole record"
            )
        return count

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def next_record(self) -> Optional[GraphRecord]:
        """
        Decode the next record.

        Returns:
            GraphRecord, or None once the file ends at a record boundary
            or inside a record's k-mer words

        Raises:
            GraphFormatError: If the file ends after a record's k-mer words
            ValueError: If the reader is closed or in the error state
        """
        if self.state is ReaderState.EXHAUSTED:
            return None
        if self.state is not ReaderState.STREAMING:
            raise ValueError(f"Cannot read records from a reader in state '{self.state.value}'")

        header = self.header
        word_bytes = header.words_per_kmer * UINT64_T
        raw = self._fh.read(word_bytes)
        # A short k-mer word block ends the stream
        if len(raw) < word_bytes or not raw:
            self.state = ReaderState.EXHAUSTED
            if raw:
                logger.debug(f"Ignoring {len(raw)} bytes of partial k-mer at end of {self.path}")
            logger.debug(f"Reached end of {self.path}")
            return None

        try:
            raw += self._fh.read(header.record_size - word_bytes)
            if len(raw) != header.record_size:
                raise ShortReadError(
                    f"Truncated record: expected {header.record_size} bytes, got {len(raw)}"
                )
            return self._decode_record(raw)
        except Exception:
            self._fail()
            raise

    def _decode_record(self, raw: bytes) -> GraphRecord:
        header = self.header
        n_words = header.words_per_kmer
        n_colours = header.colour_count
        coverage_offset = n_words * UINT64_T
        edge_offset = coverage_offset + n_colours * UINT32_T

        words = np.frombuffer(raw, dtype='<u8', count=n_words)
        coverages = np.frombuffer(raw, dtype='<u4', count=n_colours, offset=coverage_offset)
        edges = np.frombuffer(raw, dtype=np.uint8, count=n_colours, offset=edge_offset)

        try:
            kmer = BitPackedSequence(words, header.kmer_size)
        except ValueError as e:
            raise GraphFormatError(f"Cannot decode k-mer: {e}") from e

        return GraphRecord(kmer, coverages, EdgeSet(edges))

    def records(self) -> Iterator[GraphRecord]:
        """Lazily yield the remaining records (single pass)."""
        while True:
            record = self.next_record()
            if record is None:
                return
            yield record

    def __iter__(self) -> Iterator[GraphRecord]:
        if self.config.threaded:
            return stream_records_threaded(self, self.config.prefetch_queue_size)
        return self.records()

    def rewind_to_first_record(self):
        """Seek back to the first record without re-parsing the header."""
        if self.state not in (ReaderState.STREAMING, ReaderState.EXHAUSTED):
            raise ValueError(f"Cannot rewind a reader in state '{self.state.value}'")
        self._fh.seek(self._record_start)
        self.state = ReaderState.STREAMING
        logger.debug(f"Rewound {self.path} to offset {self._record_start}")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _fail(self):
        self.state = ReaderState.ERROR
        self._close_handle()

    def _close_handle(self):
        if self._fh is not None:
            self._fh.close()
            self._fh = None

    def close(self):
        """Release the file handle. Safe to call more than once."""
        self._close_handle()
        if self.state is not ReaderState.ERROR:
            self.state = ReaderState.CLOSED

    @property
    def closed(self) -> bool:
        return self._fh is None

    def __enter__(self) -> 'GraphFileReader':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return f"GraphFileReader(path='{self.path}', state={self.state.value}, kmers={self.kmer_count})"


def open_graph(path: Union[str, Path], config: Optional[ReaderConfig] = None) -> GraphFileReader:
    """Open a Cortex binary for streaming."""
    return GraphFileReader.open(path, config)


def read_header(path: Union[str, Path], config: Optional[ReaderConfig] = None) -> GraphHeader:
    """Parse only the header of a Cortex binary."""
    with GraphFileReader(path, config) as reader:
        return reader.header


def count_records(path: Union[str, Path]) -> int:
    """Count records by streaming the whole file."""
    with GraphFileReader(path) as reader:
        return sum(1 for _ in reader.records())
