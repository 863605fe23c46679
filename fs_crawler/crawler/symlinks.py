#!/usr/bin/env python3

import os
import stat
import logging
from typing import NamedTuple

from ..errors import CircularSymlinkError, SymlinkResolutionError

logger = logging.getLogger(__name__)


class ResolvedLink(NamedTuple):
    """Final non-symlink target of a link chain."""

    path: str
    stat: os.stat_result

    @property
    def directory(self) -> str:
        return os.path.dirname(self.path)


def canonical_link_path(path: str) -> str:
    """Canonical identity of a path that may itself be a symlink.

    The parent directory is fully resolved but the final component is
    kept, so the link is identified rather than its target.
    """
    path = os.path.abspath(path)
    parent, name = os.path.split(path)
    return os.path.join(os.path.realpath(parent), name)


class SymlinkResolver:
    """Dereferences symlink chains one hop at a time.

    Each hop reads the link target, resolves a relative target against the
    directory holding the current link, normalizes ``.`` and ``..`` away and
    lstats the result. A non-link ends the chain. A link whose canonical
    path was already passed during this resolution is a cycle.

    There is no hop limit besides cycle detection. The set of visited
    paths is local to each ``resolve`` call, so one resolver can be shared
    by any number of threads.
    """

    def resolve(self, link_path: str) -> ResolvedLink:
        """Follow ``link_path`` to its final target.

        Args:
            link_path: Path of a symbolic link.

        Returns:
            ResolvedLink with the normalized target path and its lstat result.

        Raises:
            CircularSymlinkError: If the chain loops.
            SymlinkResolutionError: If any hop cannot be read or statted.
        """
        seen = {canonical_link_path(link_path)}
        candidate = link_path
        hops = 0

        while True:
            try:
                target = os.readlink(candidate)
            except OSError as e:
                raise SymlinkResolutionError(link_path, e) from e

            if not os.path.isabs(target):
                target = os.path.join(os.path.dirname(candidate), target)
            candidate = os.path.normpath(target)
            hops += 1

            try:
                st = os.lstat(candidate)
            except OSError as e:
                raise SymlinkResolutionError(link_path, e) from e

            if not stat.S_ISLNK(st.st_mode):
                logger.debug(f"Resolved {link_path} -> {candidate} in {hops} hop(s)")
                return ResolvedLink(candidate, st)

            canonical = canonical_link_path(candidate)
            if canonical in seen:
                raise CircularSymlinkError(link_path)
            seen.add(canonical)
