"""Exception hierarchy for the filesystem crawler."""

from typing import List, Optional


class CrawlerError(Exception):
    """Base class for all crawler errors."""


class UsageError(CrawlerError):
    """Fatal error raised before any traversal starts."""


class ConfigError(UsageError):
    """Invalid configuration value."""


class PatternError(UsageError):
    """The path pattern could not be compiled."""


class TraversalError(CrawlerError):
    """Recoverable error recorded while walking the tree.

    Traversal errors never stop the crawl; they are collected and
    reported together once every directory has been visited.
    """

    def __init__(self, path: str, cause: Optional[BaseException] = None):
        self.path = path
        self.cause = cause
        super().__init__(self._format())

    def _reason(self) -> str:
        if self.cause is None:
            return 'unknown error'
        if isinstance(self.cause, OSError) and self.cause.strerror:
            return self.cause.strerror
        return str(self.cause)

    def _format(self) -> str:
        return f"{self.path}: {self._reason()}"


class DirectoryReadError(TraversalError):
    """A directory could not be listed."""

    def _format(self) -> str:
        return f"cannot read directory {self.path}: {self._reason()}"


class EntryStatError(TraversalError):
    """A listed entry could not be statted."""

    def _format(self) -> str:
        return f"cannot stat {self.path}: {self._reason()}"


class SymlinkResolutionError(TraversalError):
    """A symbolic link could not be dereferenced."""

    def _format(self) -> str:
        return f"cannot resolve symlink {self.path}: {self._reason()}"


class CircularSymlinkError(SymlinkResolutionError):
    """A symlink chain revisited a path it had already passed through."""

    def _format(self) -> str:
        return f"circular symlink: {self.path}"


class CrawlErrors(CrawlerError):
    """Aggregated report of every traversal error from one crawl."""

    def __init__(self, errors: List[TraversalError], dropped: int = 0):
        self.errors = list(errors)
        self.dropped = dropped
        super().__init__('\n'.join(str(e) for e in self.errors))


class OutputError(CrawlerError):
    """Records could not be written to the output stream.

    ``report`` is set by the crawler to the CrawlErrors collected in the
    same run, if any.
    """

    report: Optional[CrawlErrors] = None
