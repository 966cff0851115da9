# Path: runtime_downloader/core/logger.py
"""
Runtime Downloader Logger

Centralized logging configuration for the runtime downloader.

Architecture:
- Component-based logging (core, engine, cli, extraction)
- Optional file and console output
- Configurable log levels
- IPO (Input-Process-Output) structured logging
"""

import logging
from typing import Optional

from runtime_downloader.core.config_loader import ConfigLoader
from runtime_downloader.constants import (
    LOG_FORMAT,
    LOG_DATE_FORMAT,
    LOG_ACTIVITY_FILENAME,
    LOG_ERRORS_FILENAME,
    LOGGER_ROOT,
    LOGGER_CORE,
    LOGGER_ENGINE,
    LOGGER_CLI,
    LOGGER_EXTRACTION,
)

COMPONENT_LOGGERS = {
    'core': LOGGER_CORE,
    'engine': LOGGER_ENGINE,
    'cli': LOGGER_CLI,
    'extraction': LOGGER_EXTRACTION,
}


class DownloaderLogger:
    """
    Centralized logger for the runtime downloader.

    Provides component-specific loggers with unified configuration.

    Example:
        logger = get_logger(__name__, 'engine')
        logger.info("[INPUT] Acquiring runtime 18.0.0")
        logger.info("[PROCESS] Extracting into staging area")
        logger.info("[OUTPUT] Installed to /opt/runtimes/18.0.0")
    """

    def __init__(self, config: Optional[ConfigLoader] = None):
        """
        Initialize downloader logger.

        Args:
            config: Optional ConfigLoader instance
        """
        self.config = config if config else ConfigLoader()
        self._configured = False

    def configure(self) -> None:
        """Configure logging system for the runtime downloader."""
        if self._configured:
            return

        log_dir = self.config.get('log_dir')
        log_level = getattr(logging, str(self.config.get('log_level', 'INFO')).upper(), logging.INFO)
        console_output = self.config.get('log_console', False)

        logger = logging.getLogger(LOGGER_ROOT)
        logger.setLevel(log_level)

        # Clear any existing handlers
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

        formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

        if log_dir:
            log_dir.mkdir(parents=True, exist_ok=True)

            activity_handler = logging.FileHandler(log_dir / LOG_ACTIVITY_FILENAME)
            activity_handler.setLevel(log_level)
            activity_handler.setFormatter(formatter)
            logger.addHandler(activity_handler)

            # Error-only log file
            error_handler = logging.FileHandler(log_dir / LOG_ERRORS_FILENAME)
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(formatter)
            logger.addHandler(error_handler)

        if console_output:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(log_level)
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

        if not logger.handlers:
            logger.addHandler(logging.NullHandler())

        self._configured = True

    def get_logger(self, name: str, component: str = 'core') -> logging.Logger:
        """
        Get logger for specific component.

        Args:
            name: Module name (typically __name__)
            component: Component type ('core', 'engine', 'cli', 'extraction')

        Returns:
            Configured logger instance
        """
        if not self._configured:
            self.configure()

        prefix = COMPONENT_LOGGERS.get(component, LOGGER_ROOT)
        return logging.getLogger(f"{prefix}.{name.rsplit('.', 1)[-1]}")


# Global logger instance
_downloader_logger = DownloaderLogger()


def get_logger(name: str, component: str = 'core') -> logging.Logger:
    """
    Get logger for a runtime downloader component.

    Args:
        name: Module name (typically __name__)
        component: Component type ('core', 'engine', 'cli', 'extraction')

    Returns:
        Configured logger instance

    Example:
        from runtime_downloader.core.logger import get_logger

        logger = get_logger(__name__, 'engine')
        logger.info("[INPUT] Acquiring runtime")
    """
    return _downloader_logger.get_logger(name, component)


def configure_logging(config: Optional[ConfigLoader] = None) -> None:
    """
    Configure (or reconfigure) the runtime downloader logging system.

    Args:
        config: Optional ConfigLoader instance

    Example:
        from runtime_downloader.core.logger import configure_logging

        configure_logging()  # Uses default config
    """
    global _downloader_logger

    _downloader_logger = DownloaderLogger(config)
    _downloader_logger.configure()


__all__ = ['get_logger', 'configure_logging', 'DownloaderLogger']
