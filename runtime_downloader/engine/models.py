# Path: runtime_downloader/engine/models.py
"""
Acquisition Request Objects

Immutable inputs for one acquire() call.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from runtime_downloader.constants import DEFAULT_MIRROR


@dataclass(frozen=True)
class FetchOptions:
    """
    Settings handed to the fetch collaborator.

    Attributes:
        mirror: Base URL of the distribution mirror
        archive_format: 'tar.gz' or 'tar.xz' (None uses configuration)
        verify_checksums: Whether the published digest is checked (None uses configuration)
        headers: Extra HTTP headers
    """
    mirror: str = DEFAULT_MIRROR
    archive_format: Optional[str] = None
    verify_checksums: Optional[bool] = None
    headers: tuple[tuple[str, str], ...] = ()

    @property
    def base_url(self) -> str:
        return self.mirror.rstrip('/')


@dataclass(frozen=True)
class AcquisitionRequest:
    """
    One runtime acquisition.

    Attributes:
        version: Version identifier without leading 'v' (e.g. '18.0.0')
        architecture: Mirror architecture name (e.g. 'x64')
        platform: Mirror platform name (e.g. 'linux', 'darwin', 'win')
        output_path: Final artifact location
        fetch_options: Fetch collaborator settings
    """
    version: str
    architecture: str
    platform: str
    output_path: Path
    fetch_options: FetchOptions = field(default_factory=FetchOptions)

    def __post_init__(self):
        # Callers often pass 'v18.0.0' or a plain string path
        object.__setattr__(self, 'version', self.version.strip().lstrip('v'))
        object.__setattr__(self, 'output_path', Path(self.output_path))

    @classmethod
    def build(
        cls,
        version: str,
        output: Union[str, Path],
        arch: str,
        platform: str,
        mirror: Optional[str] = None,
        **fetch_settings,
    ) -> 'AcquisitionRequest':
        """Convenience constructor taking a mirror URL and fetch settings directly."""
        if mirror:
            fetch_settings['mirror'] = mirror
        return cls(
            version=version,
            architecture=arch,
            platform=platform,
            output_path=Path(output),
            fetch_options=FetchOptions(**fetch_settings),
        )


__all__ = ['FetchOptions', 'AcquisitionRequest']
