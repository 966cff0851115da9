# Path: runtime_downloader/engine/path_resolver.py
"""
Path Resolver

Handles artifact naming and archive format selection.
Separates naming logic from coordination logic.

Architecture:
- Platform-based routing (archive vs single executable)
- Mirror naming conventions in one place
"""

from typing import Optional

from runtime_downloader.core.logger import get_logger
from runtime_downloader.core.config_loader import ConfigLoader
from runtime_downloader.constants import (
    DEFAULT_ARCHIVE_FORMAT,
    DEFAULT_RUNTIME_NAME,
    LOG_PROCESS,
)
from runtime_downloader.engine.constants import (
    ARCHIVE_FILENAME_TEMPLATE,
    EXECUTABLE_FILENAME_TEMPLATE,
    EXECUTABLE_PLATFORMS,
    FORMAT_TAR_GZ,
    FORMAT_TAR_XZ,
    FORMAT_EXECUTABLE,
)
from runtime_downloader.engine.errors import AcquisitionError
from runtime_downloader.engine.models import AcquisitionRequest

logger = get_logger(__name__, 'engine')

ARCHIVE_FORMATS = (FORMAT_TAR_GZ, FORMAT_TAR_XZ)


class PathResolver:
    """
    Resolves remote artifact names for acquisition requests.

    Example:
        resolver = PathResolver()
        resolver.artifact_filename(request)
        # 'node-v18.0.0-linux-x64.tar.gz'
        # 'win-x64/node.exe' on Windows
    """

    def __init__(self, config: Optional[ConfigLoader] = None):
        """
        Initialize path resolver.

        Args:
            config: Optional ConfigLoader instance
        """
        self.config = config if config else ConfigLoader()
        self.runtime_name = self.config.get('runtime_name') or DEFAULT_RUNTIME_NAME

    def archive_format(self, request: AcquisitionRequest) -> str:
        """
        Determine the artifact format for a request.

        Single-executable platforms always use 'exe'; otherwise the
        request's format wins over the configured one.

        Raises:
            AcquisitionError: Unsupported archive format
        """
        if request.platform in EXECUTABLE_PLATFORMS:
            return FORMAT_EXECUTABLE

        archive_format = (
            request.fetch_options.archive_format
            or self.config.get('archive_format')
            or DEFAULT_ARCHIVE_FORMAT
        )
        if archive_format not in ARCHIVE_FORMATS:
            raise AcquisitionError(
                f"Unsupported archive format '{archive_format}' "
                f"(expected one of: {', '.join(ARCHIVE_FORMATS)})"
            )
        return archive_format

    def artifact_filename(self, request: AcquisitionRequest) -> str:
        """
        Build the artifact path relative to the version directory.

        Returns:
            e.g. 'node-v18.0.0-linux-x64.tar.gz' or 'win-x64/node.exe'
        """
        archive_format = self.archive_format(request)

        if archive_format == FORMAT_EXECUTABLE:
            filename = EXECUTABLE_FILENAME_TEMPLATE.format(
                platform=request.platform,
                arch=request.architecture,
                runtime=self.runtime_name,
            )
        else:
            filename = ARCHIVE_FILENAME_TEMPLATE.format(
                runtime=self.runtime_name,
                version=request.version,
                platform=request.platform,
                arch=request.architecture,
                archive_format=archive_format,
            )

        logger.debug(f"{LOG_PROCESS} Artifact for {request.version}: {filename}")
        return filename


__all__ = ['PathResolver', 'ARCHIVE_FORMATS']
