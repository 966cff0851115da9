# Path: tests/test_config.py
"""
Tests for ConfigLoader and logging configuration.
"""

import logging

from runtime_downloader.core.config_loader import ConfigLoader
from runtime_downloader.core.logger import configure_logging, get_logger
from runtime_downloader.constants import (
    DEFAULT_MIRROR,
    DEFAULT_CHUNK_SIZE,
    ENV_MIRROR,
    ENV_CHUNK_SIZE,
    ENV_VERIFY_CHECKSUMS,
    ENV_LOG_DIR,
    LOG_ACTIVITY_FILENAME,
    LOG_ERRORS_FILENAME,
)


def test_defaults(config, temp_dir):
    assert config['mirror'] == DEFAULT_MIRROR
    assert config.get('chunk_size') == DEFAULT_CHUNK_SIZE
    assert config.get('verify_checksums') is True
    assert config.get('temp_dir') == temp_dir
    assert config.get('log_dir') is None
    assert 'staging_prefix' in config


def test_singleton(config):
    assert ConfigLoader() is config


def test_environment_overrides(config, tmp_path, monkeypatch):
    monkeypatch.setenv(ENV_MIRROR, 'https://mirror.example/dist/')
    monkeypatch.setenv(ENV_CHUNK_SIZE, '1024')
    monkeypatch.setenv(ENV_VERIFY_CHECKSUMS, 'no')

    reloaded = ConfigLoader.reload(env_file=tmp_path / 'missing.env')

    assert reloaded['mirror'] == 'https://mirror.example/dist'
    assert reloaded['chunk_size'] == 1024
    assert reloaded['verify_checksums'] is False


def test_invalid_integer_falls_back_to_default(config, tmp_path, monkeypatch):
    monkeypatch.setenv(ENV_CHUNK_SIZE, 'lots')

    reloaded = ConfigLoader.reload(env_file=tmp_path / 'missing.env')

    assert reloaded['chunk_size'] == DEFAULT_CHUNK_SIZE


def test_env_file_is_loaded(config, tmp_path, monkeypatch):
    env_file = tmp_path / 'settings.env'
    env_file.write_text(f'{ENV_MIRROR}=https://from-dotenv.example/dist\n')
    # Registers the variable with monkeypatch so the value load_dotenv
    # writes into os.environ is removed after the test
    monkeypatch.setenv(ENV_MIRROR, 'unused')
    monkeypatch.delenv(ENV_MIRROR)

    reloaded = ConfigLoader.reload(env_file=env_file)

    assert reloaded['mirror'] == 'https://from-dotenv.example/dist'


def test_file_logging(config, tmp_path, monkeypatch):
    log_dir = tmp_path / 'logs'
    monkeypatch.setenv(ENV_LOG_DIR, str(log_dir))
    reloaded = ConfigLoader.reload(env_file=tmp_path / 'missing.env')

    try:
        configure_logging(reloaded)
        logger = get_logger('runtime_downloader.engine.installer', 'engine')
        logger.info('[OUTPUT] activity line')
        logger.error('[OUTPUT] error line')

        for handler in logging.getLogger('runtime_downloader').handlers:
            handler.flush()

        assert logger.name == 'runtime_downloader.engine.installer'
        assert 'activity line' in (log_dir / LOG_ACTIVITY_FILENAME).read_text()
        errors = (log_dir / LOG_ERRORS_FILENAME).read_text()
        assert 'error line' in errors
        assert 'activity line' not in errors
    finally:
        monkeypatch.delenv(ENV_LOG_DIR, raising=False)
        configure_logging(ConfigLoader.reload(env_file=tmp_path / 'missing.env'))


def test_component_logger_names():
    assert get_logger('pkg.module', 'extraction').name == 'runtime_downloader.extraction.module'
    assert get_logger('pkg.module', 'unknown').name == 'runtime_downloader.module'
