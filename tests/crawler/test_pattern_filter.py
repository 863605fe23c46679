import pytest

from fs_crawler.crawler.pattern_filter import PatternFilter
from fs_crawler.errors import PatternError, UsageError


def test_no_pattern_matches_everything():
    pattern_filter = PatternFilter()
    assert pattern_filter.matches('/any/path.bin')
    assert pattern_filter.pattern is None


def test_blank_pattern_matches_everything():
    assert PatternFilter('   ').matches('/any/path.bin')


def test_suffix_pattern():
    pattern_filter = PatternFilter(r'\.txt$')
    assert pattern_filter.matches('/data/d1/a.txt')
    assert not pattern_filter.matches('/data/d1/b.log')
    assert not pattern_filter.matches('/data/a.txt.bak')


def test_pattern_searches_full_path_not_name():
    pattern_filter = PatternFilter('reports/')
    assert pattern_filter.matches('/data/reports/2024.csv')
    assert not pattern_filter.matches('/data/archive/reports.csv')


def test_anchored_pattern():
    pattern_filter = PatternFilter('^/data/keep')
    assert pattern_filter.matches('/data/keep/file')
    assert not pattern_filter.matches('/other/data/keep/file')


def test_invalid_pattern_is_usage_error():
    with pytest.raises(PatternError) as exc_info:
        PatternFilter('([unclosed')
    assert isinstance(exc_info.value, UsageError)
