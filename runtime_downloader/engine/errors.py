# Path: runtime_downloader/engine/errors.py
"""
Acquisition Errors

Every failure surfaced to callers of acquire() derives from
AcquisitionError. Collaborator errors (FetchError, ExtractionError)
are raised inside the fetch+extract pipeline and wrapped at a single
point by FailureHandler.
"""

from typing import Optional


class AcquisitionError(Exception):
    """Unrecoverable failure while acquiring a runtime."""


class ConnectivityError(AcquisitionError):
    """The configured mirror could not be reached."""


class NotFoundError(AcquisitionError):
    """No artifact exists for the requested version/platform/architecture."""


class IntegrityError(AcquisitionError):
    """The downloaded bytes do not match the published checksum."""


class StagingInvariantError(AcquisitionError, AssertionError):
    """The staging area does not hold exactly one top-level entry."""


class CleanupError(AcquisitionError):
    """The staging area could not be removed."""


class FetchError(Exception):
    """
    Transport or HTTP status failure raised by the fetch collaborator.

    Attributes:
        url: Requested URL
        status: HTTP status code, when a response was received
    """

    def __init__(self, message: str, url: str = '', status: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status = status


class ExtractionError(Exception):
    """Decompression or archive parsing failure raised by the stream extractor."""


class PipelineAborted(Exception):
    """The other side of a pipeline hand-off stopped consuming or producing."""


__all__ = [
    'AcquisitionError',
    'ConnectivityError',
    'NotFoundError',
    'IntegrityError',
    'StagingInvariantError',
    'CleanupError',
    'FetchError',
    'ExtractionError',
    'PipelineAborted',
]
