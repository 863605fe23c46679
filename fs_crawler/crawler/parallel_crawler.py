#!/usr/bin/env python3

import os
import sys
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Any, Callable, Optional, TextIO

from ..errors import DirectoryReadError, OutputError, TraversalError
from ..stats import CrawlStats
from .collectors import ErrorCollector, ResultSink
from .pattern_filter import PatternFilter
from .records import FileRecord
from .symlinks import SymlinkResolver
from .visitor import DirectoryVisitor

logger = logging.getLogger(__name__)


class CanonicalPathSet:
    """Thread-safe set of canonical paths already claimed in one crawl."""

    def __init__(self):
        self._paths = set()
        self._lock = threading.Lock()

    def claim(self, path: str) -> bool:
        """Return True if ``path`` was not claimed before."""
        with self._lock:
            if path in self._paths:
                return False
            self._paths.add(path)
            return True

    def __len__(self):
        with self._lock:
            return len(self._paths)


class ParallelCrawler:
    """Crawls a directory tree with a bounded number of parallel visits."""

    def __init__(self, config: Dict[str, Any], output: Optional[TextIO] = None,
                 serializer: Optional[Callable[[FileRecord], str]] = None):
        """Initialize crawler with configuration.

        Args:
            config: Configuration dictionary
            output: Stream records are written to (default: stdout)
            serializer: Record to line function (default: JSON)
        """
        self.config = config
        crawler_config = config.get('crawler', {})
        perf_config = config.get('performance', {})

        concurrency = crawler_config.get('concurrency', 4)
        if concurrency is None or concurrency < 1:
            logger.warning(f"Invalid concurrency {concurrency!r}, using 1")
            concurrency = 1
        self.concurrency = concurrency
        self.follow_symlinks = crawler_config.get('follow_symlinks', True)
        self.pattern_filter = PatternFilter(crawler_config.get('pattern'))
        self.output_queue_size = perf_config.get('output_queue_size', 4096)
        self.error_queue_size = perf_config.get('error_queue_size', 100)
        self.progress_interval = config.get('logging', {}).get('progress_interval', 5)

        self.output = output
        self.serializer = serializer
        self.stats = CrawlStats(self.progress_interval)

        # Per-run state, rebuilt by crawl()
        self._executor = None
        self._tokens = None
        self._pending = 0
        self._pending_cond = threading.Condition()
        self._visitor = None
        self._sink = None
        self._errors = None
        self._root = None
        self._canonical_root = None

    def crawl(self, root_path: str):
        """Crawl ``root_path`` and write every matching file record.

        Returns None when the crawl finished without traversal errors.

        Raises:
            CrawlErrors: If any recoverable errors were recorded. All
                reachable records have still been written.
            OutputError: If the output stream failed. Its ``report`` holds
                the CrawlErrors of the same run, or None.
        """
        root_path = os.path.normpath(root_path)
        self._root = root_path
        self._canonical_root = os.path.realpath(root_path)
        logger.info(
            f"Crawling {root_path} (concurrency={self.concurrency}, "
            f"follow_symlinks={self.follow_symlinks}, pattern={self.pattern_filter})"
        )

        self.stats = CrawlStats(self.progress_interval)
        self._tokens = threading.BoundedSemaphore(self.concurrency)
        self._errors = ErrorCollector(self.error_queue_size)
        self._sink = ResultSink(self.output or sys.stdout, self.output_queue_size, self.serializer)
        claimed = CanonicalPathSet() if self.follow_symlinks else None
        self._visitor = DirectoryVisitor(
            self.pattern_filter,
            schedule=self.schedule,
            emit=self._emit,
            report_error=self._report_error,
            follow_symlinks=self.follow_symlinks,
            resolver=SymlinkResolver(),
            claim=claimed.claim if claimed is not None else None,
            on_symlink=lambda: self.stats.update(symlink=True),
            display_path=self.display_path,
        )

        sink_failure = None
        self._sink.start()
        try:
            with ThreadPoolExecutor(max_workers=self.concurrency,
                                    thread_name_prefix='crawler') as executor:
                self._executor = executor
                # Hold a reservation while seeding so the count cannot hit zero early
                self._begin_task()
                try:
                    if claimed is not None:
                        claimed.claim(self._canonical_root)
                    self.schedule(root_path)
                finally:
                    self._finish_task()
                self._wait_for_completion()
        finally:
            self._executor = None
            try:
                self._sink.close()
            except OutputError as e:
                sink_failure = e

        self.stats.log_summary()
        report = self._errors.collect()
        if sink_failure is not None:
            # Traversal errors travel with the output failure
            sink_failure.report = report
            raise sink_failure
        if report is not None:
            raise report

    def display_path(self, canonical: str) -> str:
        """Path under the crawl root as given, for a canonical path inside it.

        Canonical paths outside the root are returned unchanged.
        """
        if canonical == self._canonical_root:
            return self._root
        prefix = os.path.join(self._canonical_root, '')
        if canonical.startswith(prefix):
            return os.path.join(self._root, canonical[len(prefix):])
        return canonical

    def schedule(self, directory: str):
        """Queue a directory visit. Safe to call from worker threads."""
        self._begin_task()
        self._executor.submit(self._run_task, directory)

    def _run_task(self, directory: str):
        self._tokens.acquire()
        self.stats.visit_started()
        try:
            logger.debug(f"Visiting {directory}")
            self._visitor.visit(directory)
        except Exception as e:
            logger.error(f"Error crawling directory {directory}: {e}", exc_info=True)
            self._report_error(DirectoryReadError(directory, e))
        finally:
            self.stats.visit_finished()
            self._tokens.release()
            self._finish_task()

    def _emit(self, record: FileRecord):
        self.stats.update(size_bytes=record.size, is_file=True)
        self._sink.put(record)

    def _report_error(self, error: TraversalError):
        self.stats.update(error=True)
        self._errors.report(error)

    def _begin_task(self):
        with self._pending_cond:
            self._pending += 1

    def _finish_task(self):
        with self._pending_cond:
            self._pending -= 1
            if self._pending == 0:
                self._pending_cond.notify_all()

    def _wait_for_completion(self):
        with self._pending_cond:
            while self._pending > 0:
                self._pending_cond.wait()
