"""Concurrent POSIX filesystem crawler emitting JSON-lines file metadata."""

__version__ = '0.1.0'
