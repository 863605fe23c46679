#!/usr/bin/env python3

import os
import stat
import logging
from typing import Callable, Optional

from ..errors import DirectoryReadError, EntryStatError, TraversalError
from .pattern_filter import PatternFilter
from .records import FileRecord, extract_record
from .symlinks import SymlinkResolver

logger = logging.getLogger(__name__)


class DirectoryVisitor:
    """Lists one directory and routes each entry.

    Subdirectories go to ``schedule``, matching regular files go to
    ``emit`` and recoverable failures go to ``report_error``. Devices,
    sockets, fifos and (with link-following off) symlinks are skipped.

    When ``claim`` is given it is called with the canonical path of every
    directory and matched file before it is scheduled or emitted, and the
    entry is dropped if the claim fails. This keeps link-following from
    visiting a directory or emitting a file twice. Entries reached through
    a link then take their path from ``display_path(canonical)``, so the
    path of a claimed entry never depends on which route claimed it first.
    """

    def __init__(
        self,
        pattern_filter: PatternFilter,
        schedule: Callable[[str], None],
        emit: Callable[[FileRecord], None],
        report_error: Callable[[TraversalError], None],
        follow_symlinks: bool = True,
        resolver: Optional[SymlinkResolver] = None,
        claim: Optional[Callable[[str], bool]] = None,
        on_symlink: Optional[Callable[[], None]] = None,
        display_path: Optional[Callable[[str], str]] = None,
    ):
        self.pattern_filter = pattern_filter
        self.follow_symlinks = follow_symlinks
        self.resolver = resolver or SymlinkResolver()
        self._schedule = schedule
        self._emit = emit
        self._report_error = report_error
        self._claim = claim
        self._on_symlink = on_symlink
        self._display_path = display_path

    def visit(self, directory: str):
        """Process every entry of ``directory``.

        A directory that cannot be listed is reported as a single
        DirectoryReadError; nothing from it is scheduled or emitted.
        """
        try:
            with os.scandir(directory) as it:
                entries = list(it)
        except OSError as e:
            self._report_error(DirectoryReadError(directory, e))
            return

        canonical_dir = os.path.realpath(directory) if self._claim else None

        for entry in entries:
            path = os.path.join(directory, entry.name)
            canonical = os.path.join(canonical_dir, entry.name) if canonical_dir else None

            try:
                st = entry.stat(follow_symlinks=False)
            except OSError as e:
                self._report_error(EntryStatError(path, e))
                continue

            if stat.S_ISLNK(st.st_mode):
                if not self.follow_symlinks:
                    continue
                try:
                    path, st = self.resolver.resolve(path)
                except TraversalError as e:
                    self._report_error(e)
                    continue
                if self._on_symlink:
                    self._on_symlink()
                if self._claim:
                    canonical = os.path.realpath(path)
                    path = self._display_path(canonical) if self._display_path else canonical

            if stat.S_ISDIR(st.st_mode):
                if self._claim is None or self._claim(canonical):
                    self._schedule(path)
                else:
                    logger.debug(f"Directory already crawled: {path}")
                continue

            if not stat.S_ISREG(st.st_mode):
                continue

            if not self.pattern_filter.matches(path):
                continue

            if self._claim is not None and not self._claim(canonical):
                logger.debug(f"File already emitted: {path}")
                continue

            self._emit(extract_record(path, st))
