# Path: runtime_downloader/download.py
"""
Runtime Downloader - Main Entry Point

Programmatic entry point for runtime acquisition.

Usage:
    python -m runtime_downloader 18.0.0 --output /opt/runtimes/18.0.0

    from runtime_downloader import download_runtime
    path = await download_runtime('18.0.0', '/opt/runtimes/18.0.0')
"""

from pathlib import Path
from typing import Optional, Union

from runtime_downloader.core.config_loader import ConfigLoader
from runtime_downloader.core.platforms import host_arch, host_platform, normalize_arch, normalize_platform
from runtime_downloader.engine.installer import AtomicInstaller
from runtime_downloader.engine.models import AcquisitionRequest


async def download_runtime(
    version: str,
    output: Union[str, Path],
    arch: Optional[str] = None,
    platform: Optional[str] = None,
    mirror: Optional[str] = None,
    config: Optional[ConfigLoader] = None,
    **fetch_settings,
) -> Path:
    """
    Acquire a runtime version into output, unless it is already there.

    Args:
        version: Version identifier ('18.0.0' or 'v18.0.0')
        output: Final artifact path
        arch: Architecture (defaults to the running host)
        platform: Platform (defaults to the running host)
        mirror: Mirror base URL (defaults to configuration)
        config: Optional ConfigLoader instance
        **fetch_settings: archive_format, verify_checksums, headers

    Returns:
        Final output path

    Raises:
        AcquisitionError: Acquisition failed
    """
    config = config if config else ConfigLoader()

    request = AcquisitionRequest.build(
        version=version,
        output=output,
        arch=normalize_arch(arch) if arch else host_arch(),
        platform=normalize_platform(platform) if platform else host_platform(),
        mirror=mirror or config.get('mirror'),
        **fetch_settings,
    )

    async with AtomicInstaller(config=config) as installer:
        return await installer.acquire(request)

