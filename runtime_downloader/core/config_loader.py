# Path: runtime_downloader/core/config_loader.py
"""
Runtime Downloader Configuration Loader

Centralized configuration management for the Runtime Downloader.
Loads and validates environment variables with type safety and defaults.

Architecture:
- Singleton pattern for global configuration
- Type-safe access with validation
- Sensible defaults (nothing is required)
- Optional .env file via python-dotenv
"""

import os
import tempfile
from typing import Any, Optional
from pathlib import Path
from dotenv import load_dotenv

from runtime_downloader.constants import (
    ENV_MIRROR,
    ENV_RUNTIME_NAME,
    ENV_RUNTIME_DISPLAY_NAME,
    ENV_ARCHIVE_FORMAT,
    ENV_CHECKSUM_FILE,
    ENV_TEMP_DIR,
    ENV_STAGING_PREFIX,
    ENV_REQUEST_TIMEOUT,
    ENV_CONNECT_TIMEOUT,
    ENV_CHUNK_SIZE,
    ENV_PIPELINE_BUFFER,
    ENV_USER_AGENT,
    ENV_VERIFY_CHECKSUMS,
    ENV_MAX_EXTRACTION_DEPTH,
    ENV_LOG_LEVEL,
    ENV_LOG_CONSOLE,
    ENV_LOG_DIR,
    ENV_LOG_PROGRESS_INTERVAL,
    DEFAULT_MIRROR,
    DEFAULT_RUNTIME_NAME,
    DEFAULT_RUNTIME_DISPLAY_NAME,
    DEFAULT_ARCHIVE_FORMAT,
    DEFAULT_CHECKSUM_FILE,
    DEFAULT_STAGING_PREFIX,
    DEFAULT_TIMEOUT,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_PIPELINE_BUFFER_CHUNKS,
    DEFAULT_USER_AGENT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_LOG_PROGRESS_INTERVAL,
    MAX_EXTRACTION_DEPTH,
)


class ConfigLoader:
    """
    Singleton configuration loader.

    Loads configuration from environment variables with validation,
    type conversion, and sensible defaults.

    Example:
        config = ConfigLoader()
        mirror = config.get('mirror')
        chunk_size = config.get('chunk_size')
    """

    _instance: Optional['ConfigLoader'] = None
    _initialized: bool = False

    def __new__(cls, env_file: Optional[Path] = None) -> 'ConfigLoader':
        """Ensure only one instance exists (singleton pattern)."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, env_file: Optional[Path] = None):
        """
        Initialize configuration loader.

        Only runs once due to singleton pattern.

        Args:
            env_file: Optional .env file (defaults to ./.env when present)
        """
        if ConfigLoader._initialized:
            return

        env_path = Path(env_file) if env_file else Path.cwd() / '.env'

        if env_path.exists():
            load_dotenv(dotenv_path=env_path, interpolate=True)

        self._config = self._load_configuration()
        ConfigLoader._initialized = True

    @classmethod
    def reload(cls, env_file: Optional[Path] = None) -> 'ConfigLoader':
        """
        Discard the current instance and read the environment again.

        Args:
            env_file: Optional .env file

        Returns:
            Fresh ConfigLoader instance
        """
        cls._instance = None
        cls._initialized = False
        return cls(env_file)

    def _load_configuration(self) -> dict[str, Any]:
        """
        Load and validate all configuration from environment.

        Returns:
            Dictionary of validated configuration values
        """
        config = {
            # ================================================================
            # SOURCE
            # ================================================================
            'mirror': self._get_env(ENV_MIRROR, DEFAULT_MIRROR).rstrip('/'),
            'runtime_name': self._get_env(ENV_RUNTIME_NAME, DEFAULT_RUNTIME_NAME),
            'runtime_display_name': self._get_env(
                ENV_RUNTIME_DISPLAY_NAME, DEFAULT_RUNTIME_DISPLAY_NAME
            ),
            'archive_format': self._get_env(ENV_ARCHIVE_FORMAT, DEFAULT_ARCHIVE_FORMAT),
            'checksum_file': self._get_env(ENV_CHECKSUM_FILE, DEFAULT_CHECKSUM_FILE),

            # ================================================================
            # DIRECTORY PATHS
            # ================================================================
            # Staging must live in a temporary-files area so that abandoned
            # attempts are reclaimed by the system's temp cleanup.
            'temp_dir': self._get_path(ENV_TEMP_DIR) or Path(tempfile.gettempdir()),
            'staging_prefix': self._get_env(ENV_STAGING_PREFIX, DEFAULT_STAGING_PREFIX),

            # ================================================================
            # DOWNLOAD CONFIGURATION
            # ================================================================
            'request_timeout': self._get_int(ENV_REQUEST_TIMEOUT, DEFAULT_TIMEOUT),
            'connect_timeout': self._get_int(ENV_CONNECT_TIMEOUT, DEFAULT_CONNECT_TIMEOUT),
            'chunk_size': self._get_int(ENV_CHUNK_SIZE, DEFAULT_CHUNK_SIZE),
            'pipeline_buffer_chunks': self._get_int(
                ENV_PIPELINE_BUFFER, DEFAULT_PIPELINE_BUFFER_CHUNKS
            ),
            'user_agent': self._get_env(ENV_USER_AGENT, DEFAULT_USER_AGENT),

            # ================================================================
            # VALIDATION CONFIGURATION
            # ================================================================
            'verify_checksums': self._get_bool(ENV_VERIFY_CHECKSUMS, True),
            'max_extraction_depth': self._get_int(ENV_MAX_EXTRACTION_DEPTH, MAX_EXTRACTION_DEPTH),

            # ================================================================
            # LOGGING CONFIGURATION
            # ================================================================
            'log_level': self._get_env(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL),
            'log_console': self._get_bool(ENV_LOG_CONSOLE, False),
            'log_dir': self._get_path(ENV_LOG_DIR),
            'log_progress_interval': self._get_int(
                ENV_LOG_PROGRESS_INTERVAL, DEFAULT_LOG_PROGRESS_INTERVAL
            ),
        }

        return config

    def _get_env(self, key: str, default: Optional[str] = None, required: bool = False) -> Optional[str]:
        """
        Get string environment variable.

        Args:
            key: Environment variable name
            default: Default value if not found
            required: If True, raises ValueError when missing

        Returns:
            Environment variable value or default

        Raises:
            ValueError: If required and not found
        """
        value = os.getenv(key)

        if value is None or not value.strip():
            if required:
                raise ValueError(f"Required environment variable not set: {key}")
            return default

        return value.strip()

    def _get_bool(self, key: str, default: bool) -> bool:
        """
        Get boolean environment variable.

        Args:
            key: Environment variable name
            default: Default value if not found

        Returns:
            Boolean value
        """
        value = os.getenv(key)
        if value is None:
            return default

        return value.strip().lower() in ('true', '1', 'yes', 'on')

    def _get_int(self, key: str, default: int) -> int:
        """
        Get integer environment variable.

        Args:
            key: Environment variable name
            default: Default value if not found or invalid

        Returns:
            Integer value
        """
        value = os.getenv(key)
        if value is None:
            return default

        try:
            return int(value.strip())
        except ValueError:
            return default

    def _get_path(self, key: str, required: bool = False) -> Optional[Path]:
        """
        Get path environment variable.

        Args:
            key: Environment variable name
            required: If True, raises ValueError when missing

        Returns:
            Path object or None

        Raises:
            ValueError: If required and not found
        """
        value = os.getenv(key)

        if value is None or not value.strip():
            if required:
                raise ValueError(f"Required environment variable not set: {key}")
            return None

        return Path(value.strip())

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value.

        Args:
            key: Configuration key
            default: Default value if not found

        Returns:
            Configuration value or default

        Example:
            config = ConfigLoader()
            temp_dir = config.get('temp_dir')
        """
        return self._config.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """
        Override a configuration value for this process.

        Used by the CLI (--verbose) and tests.
        """
        self._config[key] = value

    def __getitem__(self, key: str) -> Any:
        """Dictionary-style access to configuration."""
        return self._config[key]

    def __contains__(self, key: str) -> bool:
        """Check if configuration key exists."""
        return key in self._config


__all__ = ['ConfigLoader']
