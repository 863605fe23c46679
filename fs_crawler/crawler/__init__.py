"""Crawler module for concurrent filesystem traversal."""

from .records import FileRecord, extract_record, format_timestamp, parse_timestamp
from .pattern_filter import PatternFilter
from .symlinks import SymlinkResolver, ResolvedLink
from .visitor import DirectoryVisitor
from .collectors import ResultSink, ErrorCollector
from .parallel_crawler import ParallelCrawler

__all__ = [
    'FileRecord', 'extract_record', 'format_timestamp', 'parse_timestamp',
    'PatternFilter', 'SymlinkResolver', 'ResolvedLink', 'DirectoryVisitor',
    'ResultSink', 'ErrorCollector', 'ParallelCrawler',
]
