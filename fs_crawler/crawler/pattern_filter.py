import re
import logging
from typing import Optional

from ..errors import PatternError

logger = logging.getLogger(__name__)


class PatternFilter:
    """Optional regular expression tested against full file paths.

    Matching is unanchored (``re.search``), so ``\\.txt$`` selects by
    suffix while ``^/data/`` anchors on the path prefix. A missing or
    blank pattern matches everything.
    """

    def __init__(self, pattern: Optional[str] = None):
        self.pattern = None
        if pattern is not None and pattern.strip():
            try:
                self.pattern = re.compile(pattern)
            except re.error as e:
                raise PatternError(f"Invalid pattern {pattern!r}: {e}") from e
            logger.debug(f"Filtering paths with pattern {pattern!r}")

    def matches(self, path: str) -> bool:
        if self.pattern is None:
            return True
        return self.pattern.search(path) is not None

    def __repr__(self):
        source = self.pattern.pattern if self.pattern else None
        return f"PatternFilter({source!r})"
