# Path: runtime_downloader/engine/installer.py
"""
Atomic Installer

Orchestrates one runtime acquisition:

    existence pre-check
    -> staging area (temp dir, always removed)
        -> fetch -> checksum tap -> decompress -> extract   (one pipeline)
        -> deferred checksum verdict
        -> existence re-check
        -> exactly one staged entry -> promote to output path
    -> output path

Architecture:
- Pipeline stages are async generators closed together on any failure
- Pipeline failures are classified at a single point (FailureHandler)
- No locks: concurrent acquisitions of the same output path may both
  download, only the first promotion becomes visible
- Nothing is retried here
"""

from contextlib import AsyncExitStack, aclosing
from pathlib import Path
from typing import Awaitable, Callable, Optional, Union

from runtime_downloader.core.logger import get_logger
from runtime_downloader.core.config_loader import ConfigLoader
from runtime_downloader.engine.errors import AcquisitionError, StagingInvariantError
from runtime_downloader.engine.existence_gate import path_exists
from runtime_downloader.engine.extraction.archive_handler import ArchiveHandler
from runtime_downloader.engine.failure_handler import FailureHandler
from runtime_downloader.engine.integrity import IntegrityChecker
from runtime_downloader.engine.models import AcquisitionRequest
from runtime_downloader.engine.path_resolver import PathResolver
from runtime_downloader.engine.protocol_handlers import HTTPHandler
from runtime_downloader.engine.result import DeferredVerdict
from runtime_downloader.engine.staging import list_entries, promote_path, staging_area
from runtime_downloader.constants import (
    DEFAULT_STAGING_PREFIX,
    LOG_INPUT,
    LOG_PROCESS,
    LOG_OUTPUT,
)

logger = get_logger(__name__, 'engine')

PathLike = Union[str, Path]


class AtomicInstaller:
    """
    Acquires a runtime artifact and installs it atomically.

    Collaborators are injectable; defaults are built from configuration.

    Args:
        config: Optional ConfigLoader instance
        fetcher: Object with open_artifact(version, filename, options),
            an async context manager yielding a FetchResponse
        archive_handler: Stream extractor (ArchiveHandler)
        promote: async (src, dst) -> bool, False when dst appeared first
        exists: async (path) -> bool

    Example:
        async with AtomicInstaller() as installer:
            path = await installer.acquire(AcquisitionRequest(
                version='18.0.0',
                architecture='x64',
                platform='linux',
                output_path=Path('/tmp/out/18.0.0'),
            ))
    """

    def __init__(
        self,
        config: Optional[ConfigLoader] = None,
        fetcher=None,
        archive_handler: Optional[ArchiveHandler] = None,
        promote: Optional[Callable[[PathLike, PathLike], Awaitable[bool]]] = None,
        exists: Optional[Callable[[PathLike], Awaitable[bool]]] = None,
    ):
        self.config = config if config else ConfigLoader()

        self._owns_fetcher = fetcher is None
        self.fetcher = fetcher if fetcher is not None else HTTPHandler(self.config)
        self.archive_handler = archive_handler or ArchiveHandler(self.config)
        self.promote = promote or promote_path
        self.exists = exists or path_exists

        self.path_resolver = PathResolver(self.config)
        self.failure_handler = FailureHandler(self.config)

        self.temp_dir = self.config.get('temp_dir')
        self.staging_prefix = self.config.get('staging_prefix') or DEFAULT_STAGING_PREFIX

    async def acquire(self, request: AcquisitionRequest) -> Path:
        """
        Make the requested runtime available at request.output_path.

        Args:
            request: Acquisition request

        Returns:
            Final output path

        Raises:
            AcquisitionError: Any unrecoverable failure (see errors.py)
        """
        output_path = request.output_path
        logger.info(
            f"{LOG_INPUT} Acquire {request.version} "
            f"({request.platform}-{request.architecture}) -> {output_path}"
        )

        if await self.exists(output_path):
            logger.info(f"{LOG_OUTPUT} Already installed: {output_path}")
            return output_path

        archive_format = self.path_resolver.archive_format(request)
        filename = self.path_resolver.artifact_filename(request)

        async with staging_area(
            self.temp_dir,
            self.staging_prefix,
            request.version,
            request.architecture,
        ) as staging_dir:
            verdict = await self._safe_download(request, filename, archive_format, staging_dir)

            # Checksum failures only surface once everything else succeeded
            verdict.raise_for_error()

            if await self.exists(output_path):
                logger.info(f"{LOG_OUTPUT} Installed concurrently, discarding staged copy: {output_path}")
                return output_path

            entries = await list_entries(staging_dir)
            if len(entries) != 1:
                raise StagingInvariantError(
                    f"Expected exactly one top-level entry in {staging_dir}, "
                    f"found {len(entries)}: {entries}"
                )

            await self._promote(staging_dir / entries[0], output_path)

        logger.info(f"{LOG_OUTPUT} Installed {request.version} at {output_path}")
        return output_path

    async def _safe_download(
        self,
        request: AcquisitionRequest,
        filename: str,
        archive_format: str,
        staging_dir: Path,
    ) -> DeferredVerdict:
        """Run the pipeline, classifying any failure it raises."""
        try:
            return await self._download_and_extract(request, filename, archive_format, staging_dir)
        except AcquisitionError:
            raise
        except Exception as error:
            raise self.failure_handler.classify(error, request) from error

    async def _download_and_extract(
        self,
        request: AcquisitionRequest,
        filename: str,
        archive_format: str,
        staging_dir: Path,
    ) -> DeferredVerdict:
        checker = IntegrityChecker()

        async with AsyncExitStack() as stack:
            response = await stack.enter_async_context(
                self.fetcher.open_artifact(request.version, filename, request.fetch_options)
            )
            await stack.enter_async_context(aclosing(response.chunks))
            observed = await stack.enter_async_context(aclosing(checker.observe(response.chunks)))

            logger.info(f"{LOG_PROCESS} Streaming {filename} into {staging_dir.name}")
            extraction = await self.archive_handler.extract(
                observed,
                staging_dir,
                archive_format,
                artifact_name=filename,
            )
            logger.debug(f"{LOG_PROCESS} Extraction: {extraction.to_dict()}")
            logger.debug(f"{LOG_PROCESS} Download: {response.result.to_dict()}")

            return await checker.verdict(response.expected_digest)

    async def _promote(self, staged: Path, output_path: Path) -> None:
        try:
            promoted = await self.promote(staged, output_path)
        except OSError as e:
            raise AcquisitionError(f"Could not install to {output_path}: {e}") from e

        if not promoted:
            logger.info(f"{LOG_OUTPUT} Another acquisition promoted {output_path} first")

    async def close(self):
        """Close the fetcher when this installer created it."""
        if self._owns_fetcher:
            await self.fetcher.close()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()


__all__ = ['AtomicInstaller']
