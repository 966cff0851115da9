# Path: runtime_downloader/core/__init__.py
"""
Runtime Downloader Core Module

Core utilities: configuration, logging and host platform detection.
"""

from .config_loader import ConfigLoader
from .logger import get_logger, configure_logging
from .platforms import normalize_arch, normalize_platform, host_arch, host_platform

__all__ = [
    'ConfigLoader',
    'get_logger',
    'configure_logging',
    'normalize_arch',
    'normalize_platform',
    'host_arch',
    'host_platform',
]
