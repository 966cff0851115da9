# Path: runtime_downloader/engine/__init__.py
"""
Runtime Downloader Engine

Atomic acquisition pipeline: fetch, checksum, extract, promote.
"""

from runtime_downloader.engine.errors import (
    AcquisitionError,
    ConnectivityError,
    NotFoundError,
    IntegrityError,
    StagingInvariantError,
    CleanupError,
    FetchError,
    ExtractionError,
)
from runtime_downloader.engine.models import AcquisitionRequest, FetchOptions
from runtime_downloader.engine.result import DownloadResult, ExtractionResult, DeferredVerdict
from runtime_downloader.engine.protocol_handlers import HTTPHandler, FetchResponse
from runtime_downloader.engine.integrity import IntegrityChecker
from runtime_downloader.engine.installer import AtomicInstaller

__all__ = [
    # Orchestration
    'AtomicInstaller',
    'AcquisitionRequest',
    'FetchOptions',

    # Collaborators
    'HTTPHandler',
    'FetchResponse',
    'IntegrityChecker',

    # Results
    'DownloadResult',
    'ExtractionResult',
    'DeferredVerdict',

    # Errors
    'AcquisitionError',
    'ConnectivityError',
    'NotFoundError',
    'IntegrityError',
    'StagingInvariantError',
    'CleanupError',
    'FetchError',
    'ExtractionError',
]
