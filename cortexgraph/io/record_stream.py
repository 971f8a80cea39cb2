"""
cortexgraph v0.1.0

Threaded record streaming.

Decodes records on a single producer thread and hands them to the consumer
through a bounded queue. The producer blocks while the queue is full and
the consumer blocks while it is empty. Records are immutable, so nothing
is shared mutably after hand-off.
"""

import logging
import queue
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Iterator, TYPE_CHECKING

from ..kmer_core.graph_record_module import GraphRecord

if TYPE_CHECKING:
    from .cortex_binary_module import GraphFileReader

logger = logging.getLogger(__name__)

# Producer re-checks for an abandoned consumer at this interval
_PUT_POLL_SECONDS = 0.1

_END_OF_STREAM = object()


def stream_records_threaded(reader: 'GraphFileReader',
                            max_queue_size: int = 1024) -> Iterator[GraphRecord]:
    """
    Yield the reader's remaining records, decoded on a producer thread.

    The reader must not be used by anyone else until the returned
    generator is exhausted or closed. Errors raised while decoding (e.g.
    GraphFormatError) are re-raised in the consumer after the records
    decoded before the error have been yielded.

    Args:
        reader: Open GraphFileReader positioned in its record region
        max_queue_size: Maximum number of decoded records held in flight

    Yields:
        GraphRecord objects in file order
    """
    if max_queue_size < 1:
        raise ValueError(f"max_queue_size must be >= 1, got {max_queue_size}")

    hand_off: "queue.Queue" = queue.Queue(maxsize=max_queue_size)
    stop = threading.Event()

    def put(item) -> bool:
        while not stop.is_set():
            try:
                hand_off.put(item, timeout=_PUT_POLL_SECONDS)
                return True
            except queue.Full:
                continue
        return False

    def produce() -> int:
        produced = 0
        try:
            for record in reader.records():
                if not put(record):
                    break
                produced += 1
        finally:
            put(_END_OF_STREAM)
        return produced

    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="cortex-reader") as executor:
        future = executor.submit(produce)
        try:
            while True:
                item = hand_off.get()
                if item is _END_OF_STREAM:
                    break
                yield item
            produced = future.result()
            logger.debug(f"Producer thread decoded {produced} records from {reader.path}")
        finally:
            stop.set()
