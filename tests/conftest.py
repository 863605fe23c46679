import io
import os
import pytest

from fs_crawler.config.config import DEFAULT_CONFIG, merge_config
from fs_crawler.crawler import FileRecord, ParallelCrawler
from fs_crawler.errors import CrawlErrors


@pytest.fixture
def make_config():
    """Build a full config dict from crawler/performance overrides."""
    def _make(performance=None, **crawler):
        return merge_config(DEFAULT_CONFIG, {
            'crawler': crawler,
            'performance': performance or {},
            'logging': {'progress_interval': 0},
        })
    return _make


@pytest.fixture
def run_crawl(make_config):
    """Crawl a root into memory.

    Returns (records, aggregated error or None, crawler).
    """
    def _run(root, performance=None, **crawler):
        output = io.StringIO()
        crawler_obj = ParallelCrawler(make_config(performance, **crawler), output=output)
        error = None
        try:
            crawler_obj.crawl(str(root))
        except CrawlErrors as e:
            error = e
        records = [FileRecord.from_json_line(line) for line in output.getvalue().splitlines()]
        return records, error, crawler_obj
    return _run


@pytest.fixture
def sample_tree(tmp_path):
    """root/d1/{a.txt,b.log}, root/d2/c.txt"""
    root = tmp_path / 'root'
    (root / 'd1').mkdir(parents=True)
    (root / 'd2').mkdir()
    (root / 'd1' / 'a.txt').write_text('alpha')
    (root / 'd1' / 'b.log').write_text('bravo')
    (root / 'd2' / 'c.txt').write_text('charlie')
    return root


def build_tree(base, depth: int, files_per_dir: int, dirs_per_level: int = 2):
    """Create a nested tree and return the set of file paths created."""
    created = set()

    def _create_level(current_dir, current_depth):
        for i in range(files_per_dir):
            file_path = os.path.join(current_dir, f'file_{i}.txt')
            with open(file_path, 'w') as f:
                f.write(file_path)
            created.add(file_path)

        if current_depth < depth:
            for i in range(dirs_per_level):
                subdir = os.path.join(current_dir, f'dir_{i}')
                os.makedirs(subdir, exist_ok=True)
                _create_level(subdir, current_depth + 1)

    _create_level(str(base), 0)
    return created


@pytest.fixture
def tree_builder():
    return build_tree
