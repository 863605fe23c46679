#!/usr/bin/env python3

import sys
import logging
import argparse
from typing import List, Optional

from .config.config import load_config, validate_config
from .config.logging import configure_logging
from .crawler import ParallelCrawler
from .errors import CrawlErrors, OutputError, UsageError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_TRAVERSAL_ERRORS = 1
EXIT_USAGE = 2
EXIT_OUTPUT = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Concurrent filesystem crawler emitting POSIX metadata as JSON lines',
        prog='fs-crawler',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Every regular file under /data
  %(prog)s /data

  # Only .txt files, 16 directories in parallel
  %(prog)s /data --pattern '\\.txt$' --concurrency 16

  # Treat symlinks as opaque
  %(prog)s /data --no-follow-symlinks
""")

    parser.add_argument('root_path', metavar='ROOT',
                        help='Directory to crawl')

    group = parser.add_argument_group('crawl options')
    group.add_argument('--pattern', '--regexp', dest='pattern', metavar='REGEX',
                       help='Only emit files whose full path matches this regular expression')
    group.add_argument('--concurrency', '--conc', dest='concurrency', type=int, metavar='N',
                       help='Maximum directories visited in parallel (config default: 4)')
    group.add_argument('--no-follow-symlinks', dest='follow_symlinks', action='store_false',
                       default=None, help='Skip symbolic links instead of resolving them')

    group = parser.add_argument_group('runtime options')
    group.add_argument('--config', type=str, metavar='FILE',
                       help='Path to YAML configuration file')
    group.add_argument('--log-level', type=str, metavar='LEVEL',
                       choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                       help='Logging level (DEBUG, INFO, WARNING, ERROR)')
    group.add_argument('--log-file', type=str, metavar='FILE',
                       help='Also log to this rotating log file')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the crawler. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)

        # Command line overrides config file settings
        crawler_config = config.setdefault('crawler', {})
        if args.pattern is not None:
            crawler_config['pattern'] = args.pattern
        if args.concurrency is not None:
            crawler_config['concurrency'] = args.concurrency
        if args.follow_symlinks is not None:
            crawler_config['follow_symlinks'] = args.follow_symlinks
        log_config = config.setdefault('logging', {})
        if args.log_level:
            log_config['level'] = args.log_level
        if args.log_file:
            log_config['file'] = args.log_file

        validate_config(config)
        configure_logging(config)
        crawler = ParallelCrawler(config, output=sys.stdout)
    except (UsageError, OSError) as e:
        sys.stderr.write(f"{parser.prog}: error: {e}\n")
        return EXIT_USAGE

    try:
        crawler.crawl(args.root_path)
    except CrawlErrors as e:
        sys.stderr.write(str(e) + '\n')
        return EXIT_TRAVERSAL_ERRORS
    except OutputError as e:
        logger.error(str(e))
        if e.report is not None:
            sys.stderr.write(str(e.report) + '\n')
        return EXIT_OUTPUT

    return EXIT_OK


def run():
    sys.exit(main())


if __name__ == '__main__':
    run()
