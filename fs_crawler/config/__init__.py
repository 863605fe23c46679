"""Configuration loading and logging setup."""

from .config import DEFAULT_CONFIG, load_config, merge_config, validate_config
from .logging import configure_logging

__all__ = ['DEFAULT_CONFIG', 'load_config', 'merge_config', 'validate_config', 'configure_logging']
