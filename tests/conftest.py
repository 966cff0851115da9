# Path: tests/conftest.py
"""Shared fixtures: an isolated configuration per test."""

import pytest

from runtime_downloader.core.config_loader import ConfigLoader
from runtime_downloader.constants import (
    ENV_MIRROR,
    ENV_TEMP_DIR,
    ENV_VERIFY_CHECKSUMS,
    ENV_ARCHIVE_FORMAT,
    ENV_LOG_DIR,
    ENV_LOG_CONSOLE,
)


@pytest.fixture
def temp_dir(tmp_path):
    """Temporary-files area used for staging."""
    path = tmp_path / 'temp'
    path.mkdir()
    return path


@pytest.fixture
def config(tmp_path, temp_dir, monkeypatch):
    """Fresh ConfigLoader staging under tmp_path, ignoring any .env in cwd."""
    for key in (ENV_MIRROR, ENV_VERIFY_CHECKSUMS, ENV_ARCHIVE_FORMAT, ENV_LOG_DIR, ENV_LOG_CONSOLE):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv(ENV_TEMP_DIR, str(temp_dir))

    loader = ConfigLoader.reload(env_file=tmp_path / 'missing.env')
    yield loader
    ConfigLoader.reload(env_file=tmp_path / 'missing.env')
