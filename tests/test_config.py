import copy
import logging
import logging.handlers
import pytest

from fs_crawler.config.config import DEFAULT_CONFIG, load_config, merge_config, validate_config
from fs_crawler.config.logging import configure_logging
from fs_crawler.errors import ConfigError


@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers, level = root_logger.handlers[:], root_logger.level
    yield root_logger
    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers = handlers
    root_logger.setLevel(level)


def test_defaults_when_no_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = load_config()
    assert config == DEFAULT_CONFIG
    assert config is not DEFAULT_CONFIG


def test_explicit_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / 'nope.yaml'))


def test_file_is_merged_over_defaults(tmp_path):
    config_file = tmp_path / 'crawler.yaml'
    config_file.write_text("crawler:\n  concurrency: 9\n  pattern: '\\.log$'\n")

    config = load_config(str(config_file))

    assert config['crawler']['concurrency'] == 9
    assert config['crawler']['pattern'] == r'\.log$'
    assert config['crawler']['follow_symlinks'] is True
    assert config['performance']['output_queue_size'] == 4096


def test_discovers_project_config(tmp_path, monkeypatch):
    (tmp_path / 'config').mkdir()
    (tmp_path / 'config' / 'crawler-config.yaml').write_text("crawler:\n  follow_symlinks: false\n")
    monkeypatch.chdir(tmp_path)

    assert load_config()['crawler']['follow_symlinks'] is False


def test_empty_file_gives_defaults(tmp_path):
    config_file = tmp_path / 'empty.yaml'
    config_file.write_text('')
    assert load_config(str(config_file)) == DEFAULT_CONFIG


@pytest.mark.parametrize('content', ['crawler: [unclosed', '- just\n- a list\n'])
def test_bad_file_contents(tmp_path, content):
    config_file = tmp_path / 'bad.yaml'
    config_file.write_text(content)
    with pytest.raises(ConfigError):
        load_config(str(config_file))


def test_merge_config_does_not_mutate_base():
    base = copy.deepcopy(DEFAULT_CONFIG)
    merged = merge_config(base, {'crawler': {'concurrency': 2}})
    assert base == DEFAULT_CONFIG
    assert merged['crawler']['concurrency'] == 2


def test_validate_accepts_defaults():
    validate_config(copy.deepcopy(DEFAULT_CONFIG))


@pytest.mark.parametrize('overrides', [
    {'crawler': {'concurrency': 'four'}},
    {'crawler': {'concurrency': True}},
    {'crawler': {'follow_symlinks': 'yes'}},
    {'crawler': {'pattern': 42}},
    {'performance': {'output_queue_size': 0}},
    {'performance': {'error_queue_size': -1}},
])
def test_validate_rejects_bad_values(overrides):
    with pytest.raises(ConfigError):
        validate_config(merge_config(DEFAULT_CONFIG, overrides))


def test_validate_leaves_low_concurrency_to_crawler():
    validate_config(merge_config(DEFAULT_CONFIG, {'crawler': {'concurrency': 0}}))


def test_configure_logging_file_handler(tmp_path, restore_root_logger):
    log_file = tmp_path / 'logs' / 'crawler.log'
    config = merge_config(DEFAULT_CONFIG, {'logging': {'level': 'DEBUG', 'file': str(log_file)}})

    root_logger = configure_logging(config)

    assert root_logger.level == logging.DEBUG
    assert (tmp_path / 'logs').is_dir()
    assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in root_logger.handlers)


def test_configure_logging_console_only(restore_root_logger):
    root_logger = configure_logging(DEFAULT_CONFIG)

    assert root_logger.level == logging.WARNING
    assert len(root_logger.handlers) == 1
    assert isinstance(root_logger.handlers[0], logging.StreamHandler)


def test_configure_logging_console_goes_to_stderr(restore_root_logger, capsys):
    configure_logging(DEFAULT_CONFIG)

    logging.getLogger('fs_crawler.test').warning('disk is slow')

    captured = capsys.readouterr()
    assert captured.out == ''
    assert 'WARNING - disk is slow' in captured.err


def test_configure_logging_with_no_outputs(restore_root_logger):
    config = merge_config(DEFAULT_CONFIG, {'logging': {'console': False, 'level': 'info'}})

    root_logger = configure_logging(config)

    assert root_logger.level == logging.INFO
    assert [type(h) for h in root_logger.handlers] == [logging.NullHandler]
