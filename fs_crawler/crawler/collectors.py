#!/usr/bin/env python3

import logging
import threading
from queue import Queue, Full, Empty
from typing import Callable, List, Optional, TextIO

from ..errors import CrawlErrors, OutputError, TraversalError
from .records import FileRecord

logger = logging.getLogger(__name__)


class ResultSink:
    """Writes records to a stream from a dedicated thread.

    Producers block in ``put`` while the queue is full. ``close`` waits
    until every queued record has been written. If the stream fails, the
    writer keeps draining (and discarding) so producers never stall, and
    the failure is raised from ``close``.
    """

    def __init__(self, stream: TextIO, queue_size: int = 4096,
                 serializer: Optional[Callable[[FileRecord], str]] = None):
        self.stream = stream
        self.serializer = serializer or FileRecord.to_json_line
        self.written = 0
        self._queue = Queue(maxsize=max(1, queue_size))
        self._thread = None
        self._failure = None

    def start(self):
        self._thread = threading.Thread(target=self._writer_thread, name='result-sink', daemon=True)
        self._thread.start()

    def put(self, record: FileRecord):
        self._queue.put(record)

    def close(self):
        """Flush remaining records and stop the writer thread."""
        if self._thread is None:
            return
        self._queue.put(None)  # Signal end of data
        self._thread.join()
        self._thread = None
        if self._failure is None:
            try:
                self.stream.flush()
            except (OSError, ValueError) as e:
                self._failure = e
        if self._failure is not None:
            raise OutputError(f"Failed writing records: {self._failure}") from self._failure

    def _writer_thread(self):
        while True:
            record = self._queue.get()
            if record is None:
                break
            if self._failure is not None:
                continue
            try:
                self.stream.write(self.serializer(record) + '\n')
                self.written += 1
            except Exception as e:
                logger.error(f"Error writing record for {record.path}: {e}")
                self._failure = e


class ErrorCollector:
    """Bounded buffer of traversal errors.

    ``report`` never blocks. Once the buffer holds ``capacity`` errors
    further ones are counted in ``dropped`` and otherwise lost.
    """

    def __init__(self, capacity: int = 100):
        self.dropped = 0
        self._queue = Queue(maxsize=max(1, capacity))
        self._lock = threading.Lock()

    def report(self, error: TraversalError):
        logger.debug(f"Traversal error: {error}")
        try:
            self._queue.put_nowait(error)
        except Full:
            with self._lock:
                self.dropped += 1

    def drain(self) -> List[TraversalError]:
        errors = []
        while True:
            try:
                errors.append(self._queue.get_nowait())
            except Empty:
                return errors

    def collect(self) -> Optional[CrawlErrors]:
        """Consume the buffer into a CrawlErrors, or None if nothing was reported."""
        errors = self.drain()
        if self.dropped:
            logger.warning(f"Error buffer full, {self.dropped} error(s) were not recorded")
        if errors:
            return CrawlErrors(errors, dropped=self.dropped)
        return None

    def raise_for_errors(self):
        """Raise CrawlErrors if anything was reported, consuming the buffer."""
        report = self.collect()
        if report is not None:
            raise report
