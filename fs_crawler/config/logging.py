import os
import logging
import logging.handlers
from typing import Dict, Any

FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
CONSOLE_FORMAT = '%(levelname)s - %(message)s'


def _file_handler(log_file: str, max_size_mb: int, backup_count: int) -> logging.Handler:
    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=max_size_mb * 1024 * 1024,
        backupCount=backup_count
    )
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler


def _console_handler() -> logging.Handler:
    # stderr by default, stdout carries records
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return handler


def configure_logging(config: Dict[str, Any]):
    """Install the crawler's handlers on the root logger and return it.

    Handlers from an earlier call are dropped, so calling this once per
    run is safe. With neither console nor file enabled a NullHandler keeps
    the ``logging`` module from falling back to its last-resort handler.
    """
    log_config = config.get('logging', {})
    level_name = str(log_config.get('level', 'WARNING')).upper()
    log_file = log_config.get('file')
    if isinstance(log_file, dict):
        log_file = log_file.get('path')

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level_name, logging.WARNING))
    root_logger.handlers = []

    if log_file:
        root_logger.addHandler(_file_handler(
            log_file,
            log_config.get('max_size_mb', 10),
            log_config.get('backup_count', 5),
        ))
    if log_config.get('console', True):
        root_logger.addHandler(_console_handler())
    if not root_logger.handlers:
        root_logger.addHandler(logging.NullHandler())

    return root_logger
