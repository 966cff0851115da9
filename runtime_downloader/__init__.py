# Path: runtime_downloader/__init__.py
"""
Runtime Downloader

Downloads a versioned runtime distribution, verifies its checksum,
extracts it and installs it atomically at a caller-chosen path.
"""

from runtime_downloader.download import download_runtime
from runtime_downloader.engine import (
    AtomicInstaller,
    AcquisitionRequest,
    FetchOptions,
    AcquisitionError,
    ConnectivityError,
    NotFoundError,
    IntegrityError,
    StagingInvariantError,
    CleanupError,
)

__version__ = '1.0.0'

__all__ = [
    'download_runtime',
    'AtomicInstaller',
    'AcquisitionRequest',
    'FetchOptions',
    'AcquisitionError',
    'ConnectivityError',
    'NotFoundError',
    'IntegrityError',
    'StagingInvariantError',
    'CleanupError',
    '__version__',
]
