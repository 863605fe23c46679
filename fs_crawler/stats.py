#!/usr/bin/env python3

import time
import logging
import threading

logger = logging.getLogger(__name__)


class CrawlStats:
    """Tracks statistics for one crawl.

    Every counter is updated from worker threads, so all mutation goes
    through the internal lock.
    """

    def __init__(self, progress_interval: float = 5):
        """Initialize statistics tracking."""
        self.start_time = time.time()
        self.total_dirs = 0
        self.total_files = 0
        self.total_size = 0
        self.symlinks_followed = 0
        self.total_errors = 0
        self.active_visits = 0
        self.peak_visits = 0
        self._progress_interval = progress_interval
        self._last_progress = self.start_time
        self._lock = threading.Lock()

    def format_size(self, size_bytes: int) -> str:
        """Format size in bytes to human readable format."""
        for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
            if size_bytes < 1024:
                return f"{size_bytes:.2f} {unit}"
            size_bytes /= 1024
        return f"{size_bytes:.2f} PB"

    def update(self, size_bytes: int = 0, is_file: bool = False, is_dir: bool = False,
               symlink: bool = False, error: bool = False):
        """Update statistics with a single item."""
        with self._lock:
            self.total_size += size_bytes
            if is_file:
                self.total_files += 1
            if is_dir:
                self.total_dirs += 1
            if symlink:
                self.symlinks_followed += 1
            if error:
                self.total_errors += 1
            self._log_progress()

    def visit_started(self):
        with self._lock:
            self.active_visits += 1
            if self.active_visits > self.peak_visits:
                self.peak_visits = self.active_visits

    def visit_finished(self):
        with self._lock:
            self.active_visits -= 1
            self.total_dirs += 1

    def _log_progress(self):
        """Log progress if enough time has elapsed. Caller holds the lock."""
        if not self._progress_interval:
            return
        now = time.time()
        if now - self._last_progress >= self._progress_interval:
            rate = self.total_files / max(now - self.start_time, 1e-9)
            logger.info(
                f"Progress: {self.total_dirs:,} directories, {self.total_files:,} files "
                f"({rate:.1f} files/sec), {self.total_errors:,} errors"
            )
            self._last_progress = now

    def log_summary(self):
        """Log crawl summary with statistics."""
        elapsed_time = time.time() - self.start_time
        processing_rate = self.total_files / elapsed_time if elapsed_time > 0 else 0

        logger.info("=" * 80)
        logger.info("Crawl Summary:")
        logger.info(f"Time Elapsed:       {elapsed_time:.2f} seconds")
        logger.info(f"Processing Rate:    {processing_rate:.1f} files/second")
        logger.info(f"Total Size:         {self.format_size(self.total_size)}")
        logger.info(f"Files Emitted:      {self.total_files:,}")
        logger.info(f"Dirs Visited:       {self.total_dirs:,}")
        logger.info(f"Symlinks Followed:  {self.symlinks_followed:,}")
        logger.info(f"Peak Parallel Dirs: {self.peak_visits:,}")
        logger.info(f"Total Errors:       {self.total_errors:,}")
        logger.info("=" * 80)
