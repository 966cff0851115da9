# Path: runtime_downloader/engine/failure_handler.py
"""
Failure Handler

Centralized translation of pipeline failures into user-facing errors.

Whatever the fetch collaborator, decompressor or extractor raised is
classified here, at a single point after the pipeline call:
- address resolution / transport failure -> ConnectivityError
- remote artifact missing                -> NotFoundError
- anything else                          -> AcquisitionError
"""

from typing import Optional

import aiohttp

from runtime_downloader.core.logger import get_logger
from runtime_downloader.core.config_loader import ConfigLoader
from runtime_downloader.engine.errors import (
    AcquisitionError,
    ConnectivityError,
    NotFoundError,
    FetchError,
)
from runtime_downloader.engine.models import AcquisitionRequest
from runtime_downloader.constants import (
    DEFAULT_RUNTIME_DISPLAY_NAME,
    HTTP_NOT_FOUND,
    LOG_OUTPUT,
)
from runtime_downloader.engine.constants import (
    CONNECTIVITY_ERROR_MARKERS,
    NOT_FOUND_ERROR_MARKERS,
)

logger = get_logger(__name__, 'engine')


class FailureHandler:
    """
    Classifies pipeline failures.

    Example:
        handler = FailureHandler()
        try:
            ...
        except Exception as error:
            raise handler.classify(error, request) from error
    """

    def __init__(self, config: Optional[ConfigLoader] = None):
        """
        Initialize failure handler.

        Args:
            config: Optional ConfigLoader instance
        """
        self.config = config if config else ConfigLoader()
        self.display_name = (
            self.config.get('runtime_display_name') or DEFAULT_RUNTIME_DISPLAY_NAME
        )

    def classify(self, error: BaseException, request: AcquisitionRequest) -> AcquisitionError:
        """
        Build the user-facing error for a pipeline failure.

        Args:
            error: Exception raised by the pipeline
            request: Request being acquired

        Returns:
            AcquisitionError subclass (the caller raises it)
        """
        if isinstance(error, AcquisitionError):
            return error

        message = str(error) or type(error).__name__

        if self._is_connectivity_error(error, message):
            classified = ConnectivityError(
                f"Could not connect to {request.fetch_options.base_url}"
            )
        elif self._is_not_found(error, message):
            classified = NotFoundError(
                f"No {self.display_name} binaries available for {request.version} "
                f"on {request.platform} {request.architecture}"
            )
        else:
            classified = AcquisitionError(
                f"Could not download {self.display_name} {request.version}: {message}"
            )

        logger.error(f"{LOG_OUTPUT} {type(classified).__name__}: {classified} ({message})")
        return classified

    def _is_connectivity_error(self, error: BaseException, message: str) -> bool:
        cause = error.__cause__ if isinstance(error, FetchError) else error
        if isinstance(cause, aiohttp.ClientConnectorError):
            return True
        return any(marker in message for marker in CONNECTIVITY_ERROR_MARKERS)

    def _is_not_found(self, error: BaseException, message: str) -> bool:
        if isinstance(error, FetchError) and error.status is not None:
            return error.status == HTTP_NOT_FOUND
        return any(marker in message for marker in NOT_FOUND_ERROR_MARKERS)


__all__ = ['FailureHandler']
