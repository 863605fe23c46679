import copy
import os
import yaml
import logging
from typing import Dict, Any, Optional

from ..errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    'crawler': {
        'concurrency': 4,
        'follow_symlinks': True,
        'pattern': None,
    },
    'performance': {
        'output_queue_size': 4096,
        'error_queue_size': 100,
    },
    'logging': {
        'level': 'WARNING',
        'console': True,
        'file': None,
        'max_size_mb': 10,
        'backup_count': 5,
        'progress_interval': 5,
    },
}


def get_config_locations():
    """Get the paths searched for a configuration file, in order."""
    base_dir = os.getcwd()
    return [
        os.path.join(base_dir, 'config', 'crawler-config.yaml'),  # Project config directory
        os.path.join(base_dir, 'crawler-config.yaml'),            # Current directory
    ]


def merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-merge overrides into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in (overrides or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from file, falling back to defaults.

    An explicit path must exist. Without one, the standard locations are
    tried and the built-in defaults are used if none of them exists.
    """
    if config_path:
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
    else:
        for loc in get_config_locations():
            if os.path.exists(loc):
                config_path = loc
                break

    if not config_path:
        logger.debug("No configuration file found, using defaults")
        return copy.deepcopy(DEFAULT_CONFIG)

    with open(config_path, 'r') as f:
        try:
            user_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
    if not isinstance(user_config, dict):
        raise ConfigError(f"Configuration file {config_path} must contain a mapping")

    logger.debug(f"Loaded configuration from {config_path}")
    return merge_config(DEFAULT_CONFIG, user_config)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Check value types, raising ConfigError on the first bad one."""
    crawler = config.get('crawler', {})
    performance = config.get('performance', {})

    concurrency = crawler.get('concurrency')
    if not _is_int(concurrency):
        raise ConfigError(f"crawler.concurrency must be an integer, got {concurrency!r}")

    if not isinstance(crawler.get('follow_symlinks'), bool):
        raise ConfigError("crawler.follow_symlinks must be true or false")

    pattern = crawler.get('pattern')
    if pattern is not None and not isinstance(pattern, str):
        raise ConfigError(f"crawler.pattern must be a string, got {pattern!r}")

    for key in ('output_queue_size', 'error_queue_size'):
        value = performance.get(key)
        if not _is_int(value) or value < 1:
            raise ConfigError(f"performance.{key} must be a positive integer, got {value!r}")

    return config
