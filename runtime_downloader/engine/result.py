# Path: runtime_downloader/engine/result.py
"""
Acquisition Result Objects

Type-safe, structured results for pipeline stages.

Architecture:
- DownloadResult: bytes delivered by the fetch collaborator
- ExtractionResult: what the stream extractor wrote into staging
- DeferredVerdict: checksum outcome, resolved after the pipeline
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

from runtime_downloader.engine.errors import IntegrityError


@dataclass
class DownloadResult:
    """
    Result of streaming one artifact from the mirror.

    Attributes:
        url: Source URL
        file_size: Bytes received
        total_size: Content-Length announced by the server
        chunks_downloaded: Number of chunks received
        duration: Download duration in seconds
        status_code: HTTP status code
    """
    url: str = ''
    file_size: int = 0
    total_size: Optional[int] = None
    chunks_downloaded: int = 0
    duration: float = 0.0
    status_code: Optional[int] = None
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def download_speed_mbps(self) -> float:
        """Calculate download speed in MB/s."""
        if self.duration > 0 and self.file_size > 0:
            mb = self.file_size / (1024 * 1024)
            return mb / self.duration
        return 0.0

    def to_dict(self) -> dict[str, any]:
        """Convert to dictionary for logging."""
        return {
            'url': self.url,
            'file_size': self.file_size,
            'total_size': self.total_size,
            'chunks_downloaded': self.chunks_downloaded,
            'duration': self.duration,
            'status_code': self.status_code,
            'download_speed_mbps': self.download_speed_mbps,
            'timestamp': self.timestamp.isoformat(),
        }


@dataclass
class ExtractionResult:
    """
    Result of a stream extraction.

    Attributes:
        extract_directory: Staging directory written to
        files_extracted: Number of members written
        archive_format: Format handled ('tar.gz', 'tar.xz', 'exe')
        duration: Extraction duration in seconds
        directory_structure: Member names in archive order
    """
    extract_directory: Optional[Path] = None
    files_extracted: int = 0
    archive_format: str = ''
    duration: float = 0.0
    directory_structure: list[str] = field(default_factory=list)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, any]:
        """Convert to dictionary for logging."""
        return {
            'extract_directory': str(self.extract_directory) if self.extract_directory else None,
            'files_extracted': self.files_extracted,
            'archive_format': self.archive_format,
            'duration': self.duration,
            'directory_structure': self.directory_structure,
            'timestamp': self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class DeferredVerdict:
    """
    Checksum outcome carried as data until the rest of the pipeline succeeded.

    Either ok (error is None) or holding a pending error description.
    """
    error: Optional[str] = None
    expected: Optional[str] = None
    actual: Optional[str] = None

    @classmethod
    def ok(cls, expected: Optional[str] = None, actual: Optional[str] = None) -> 'DeferredVerdict':
        return cls(error=None, expected=expected, actual=actual)

    @classmethod
    def pending(cls, error: str, expected: Optional[str] = None, actual: Optional[str] = None) -> 'DeferredVerdict':
        return cls(error=error, expected=expected, actual=actual)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> None:
        """Raise the pending error, if any, as an IntegrityError."""
        if self.error is not None:
            raise IntegrityError(self.error)


__all__ = [
    'DownloadResult',
    'ExtractionResult',
    'DeferredVerdict',
]
