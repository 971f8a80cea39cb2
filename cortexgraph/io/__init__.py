"""
Binary graph I/O module for cortexgraph.

Reads and writes Cortex coloured de Bruijn graph binaries (.ctx).

CONSOLIDATED MODULES:
- cortex_binary_module.py: Header structures, ReaderConfig, GraphFileReader
- cortex_writer_module.py: Header/record packing and file writing
- record_stream.py: Threaded producer with bounded hand-off queue
"""

from .cortex_binary_module import (
    MAGIC,
    MAX_NAME_LENGTH,
    GraphFormatError,
    ShortReadError,
    ReaderState,
    ColourMetadata,
    GraphHeader,
    ReaderConfig,
    GraphFileReader,
    open_graph,
    read_header,
    count_records,
)
from .cortex_writer_module import (
    pack_header,
    pack_record,
    write_graph_file,
)
from .record_stream import stream_records_threaded

__all__ = [
    # Format constants and errors
    "MAGIC",
    "MAX_NAME_LENGTH",
    "GraphFormatError",
    "ShortReadError",

    # Header structures
    "ColourMetadata",
    "GraphHeader",

    # Reading
    "ReaderState",
    "ReaderConfig",
    "GraphFileReader",
    "open_graph",
    "read_header",
    "count_records",
    "stream_records_threaded",

    # Writing
    "pack_header",
    "pack_record",
    "write_graph_file",
]
