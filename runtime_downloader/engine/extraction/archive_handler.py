# Path: runtime_downloader/engine/extraction/archive_handler.py
"""
Archive Handler Factory

Streamed extraction of runtime artifacts into a staging directory.
Supports TAR.GZ, TAR.XZ and single-file executables.

Architecture:
- Factory pattern keyed by archive format
- Individual extractor classes per format
- Extractors consume an async byte stream and write under target_dir
- Decompression is a separate pipeline stage (decompressors.py)

CRITICAL PRINCIPLE: Extractors only write under target_dir.
Every tar member is validated before anything touches disk.
"""

import asyncio
import os
import tarfile
import time
from contextlib import aclosing
from pathlib import Path, PurePosixPath
from typing import AsyncIterator, Iterator, Optional, Type

import aiofiles.os

from runtime_downloader.core.logger import get_logger
from runtime_downloader.core.config_loader import ConfigLoader
from runtime_downloader.engine.errors import ExtractionError, PipelineAborted
from runtime_downloader.engine.result import ExtractionResult
from runtime_downloader.engine.stream_handler import StreamHandler
from runtime_downloader.engine.extraction.decompressors import get_decompressor
from runtime_downloader.engine.extraction.stream_bridge import ChunkReader
from runtime_downloader.constants import (
    DEFAULT_PIPELINE_BUFFER_CHUNKS,
    MAX_EXTRACTION_DEPTH,
    LOG_INPUT,
    LOG_PROCESS,
    LOG_OUTPUT,
)
from runtime_downloader.engine.constants import (
    FORMAT_TAR_GZ,
    FORMAT_TAR_XZ,
    FORMAT_EXECUTABLE,
)
from runtime_downloader.engine.extraction.constants import (
    TAR_STREAM_MODE,
    TAR_EXTRACTION_FILTER,
    EXECUTABLE_MODE,
)

logger = get_logger(__name__, 'extraction')


class BaseExtractor:
    """
    Base class for stream extractors.

    All format-specific extractors inherit from this.
    Provides common interface and validation.
    """

    def __init__(self, config: Optional[ConfigLoader] = None):
        """
        Initialize base extractor.

        Args:
            config: Optional ConfigLoader instance
        """
        self.config = config if config else ConfigLoader()
        self.max_depth = self.config.get('max_extraction_depth', MAX_EXTRACTION_DEPTH)

    async def extract(
        self,
        chunks: AsyncIterator[bytes],
        target_dir: Path,
        artifact_name: str,
    ) -> ExtractionResult:
        """
        Consume a byte stream and write its contents under target_dir.

        Must be implemented by subclasses.

        Args:
            chunks: Artifact bytes as delivered by the fetch collaborator
            target_dir: Existing directory to write into
            artifact_name: Remote filename of the artifact

        Returns:
            ExtractionResult
        """
        raise NotImplementedError("Subclasses must implement extract()")

    def _validate_depth(self, member_path: str) -> None:
        """
        Validate path depth.

        Raises:
            ExtractionError: Path nests deeper than allowed
        """
        depth = len(PurePosixPath(member_path).parts)
        if depth > self.max_depth:
            logger.error(f"Path too deep: {member_path} (depth={depth})")
            raise ExtractionError(f"Archive member nested too deeply: {member_path}")

    def _validate_path_traversal(self, member_path: Path, target_dir: Path) -> None:
        """
        Validate path doesn't escape target directory.

        Raises:
            ExtractionError: Path resolves outside target_dir
        """
        try:
            member_path.resolve().relative_to(target_dir.resolve())
        except ValueError:
            logger.error(f"Unsafe path detected: {member_path}")
            raise ExtractionError(f"Archive member escapes destination: {member_path}") from None


class TarStreamExtractor(BaseExtractor):
    """
    Compressed TAR stream extractor.

    Handles: tar.gz, tar.xz

    The compressed stream is decompressed in the event loop and handed
    to tarfile (stream mode, worker thread) through a bounded ChunkReader.
    Bytes following the tar end-of-archive marker are still pulled from
    upstream so that checksum taps observe the complete payload.
    """

    def __init__(self, archive_format: str, config: Optional[ConfigLoader] = None):
        super().__init__(config)
        self.archive_format = archive_format
        self.buffer_chunks = self.config.get(
            'pipeline_buffer_chunks', DEFAULT_PIPELINE_BUFFER_CHUNKS
        )

    async def extract(
        self,
        chunks: AsyncIterator[bytes],
        target_dir: Path,
        artifact_name: str,
    ) -> ExtractionResult:
        logger.info(f"{LOG_INPUT} Extracting {self.archive_format} stream: {artifact_name}")

        start_time = time.time()
        result = ExtractionResult(
            extract_directory=target_dir,
            archive_format=self.archive_format,
        )

        decompress = get_decompressor(self.archive_format)
        reader = ChunkReader(max_chunks=self.buffer_chunks)
        extraction = asyncio.ensure_future(
            asyncio.to_thread(self._extract_tar, reader, target_dir, result)
        )

        try:
            async with aclosing(decompress(chunks)) as decompressed:
                async for chunk in decompressed:
                    await self._deliver(reader, chunk, extraction)
            await self._deliver(reader, None, extraction)
            await extraction

        except BaseException:
            # Stop the parser thread and wait for it before unwinding
            reader.abort()
            await asyncio.gather(extraction, return_exceptions=True)
            raise

        result.duration = time.time() - start_time
        logger.info(
            f"{LOG_OUTPUT} TAR extraction complete: {result.files_extracted} items "
            f"in {result.duration:.2f}s"
        )
        return result

    async def _deliver(
        self,
        reader: ChunkReader,
        chunk: Optional[bytes],
        extraction: asyncio.Future,
    ) -> None:
        try:
            await reader.feed(chunk)
        except PipelineAborted:
            # Parser stopped reading: surface its error, or keep draining
            # after a clean end-of-archive
            await extraction

    def _extract_tar(self, reader: ChunkReader, target_dir: Path, result: ExtractionResult) -> None:
        """Blocking tar parse, run in a worker thread."""
        try:
            with tarfile.open(fileobj=reader, mode=TAR_STREAM_MODE) as archive:
                members = self._safe_members(archive, target_dir, result)
                if hasattr(tarfile, 'data_filter'):
                    archive.extractall(target_dir, members=members, filter=TAR_EXTRACTION_FILTER)
                else:
                    archive.extractall(target_dir, members=members)
        except tarfile.TarError as e:
            raise ExtractionError(f"Invalid TAR stream: {e}") from e
        finally:
            reader.abort()

    def _safe_members(
        self,
        archive: tarfile.TarFile,
        target_dir: Path,
        result: ExtractionResult,
    ) -> Iterator[tarfile.TarInfo]:
        """Yield members in stream order, rejecting any that would escape target_dir."""
        for member in archive:
            self._validate_member(member, target_dir)
            result.files_extracted += 1
            result.directory_structure.append(member.name)
            yield member

    def _validate_member(self, member: tarfile.TarInfo, target_dir: Path) -> None:
        name = member.name
        if os.path.isabs(name) or PurePosixPath(name).is_absolute():
            raise ExtractionError(f"Archive member has absolute path: {name}")

        self._validate_path_traversal(target_dir / name, target_dir)
        self._validate_depth(name)

        if member.issym():
            link_target = (target_dir / name).parent / member.linkname
            self._validate_path_traversal(link_target, target_dir)
        elif member.islnk():
            self._validate_path_traversal(target_dir / member.linkname, target_dir)


class ExecutableExtractor(BaseExtractor):
    """
    Single-file extractor.

    Handles: exe (Windows ships the bare runtime executable)
    """

    async def extract(
        self,
        chunks: AsyncIterator[bytes],
        target_dir: Path,
        artifact_name: str,
    ) -> ExtractionResult:
        file_name = PurePosixPath(artifact_name).name
        output_path = target_dir / file_name
        self._validate_path_traversal(output_path, target_dir)

        logger.info(f"{LOG_INPUT} Writing executable: {file_name}")

        start_time = time.time()
        handler = StreamHandler(config=self.config)
        await handler.stream_to_file(chunks, output_path)
        await asyncio.to_thread(os.chmod, output_path, EXECUTABLE_MODE)

        result = ExtractionResult(
            extract_directory=target_dir,
            files_extracted=1,
            archive_format=FORMAT_EXECUTABLE,
            duration=time.time() - start_time,
            directory_structure=[file_name],
        )
        logger.info(f"{LOG_OUTPUT} Executable written: {handler.bytes_written} bytes")
        return result


class ArchiveHandler:
    """
    Stream extractor factory.

    Selects the extractor for an archive format and runs it.

    Supported formats:
    - tar.gz
    - tar.xz
    - exe

    Example:
        handler = ArchiveHandler()
        result = await handler.extract(
            chunks=response.chunks,
            target_dir=staging_dir,
            archive_format='tar.gz',
            artifact_name='node-v18.0.0-linux-x64.tar.gz',
        )
    """

    EXTRACTOR_MAP: dict[str, Type[BaseExtractor]] = {
        FORMAT_TAR_GZ: TarStreamExtractor,
        FORMAT_TAR_XZ: TarStreamExtractor,
        FORMAT_EXECUTABLE: ExecutableExtractor,
    }

    def __init__(self, config: Optional[ConfigLoader] = None):
        """
        Initialize archive handler.

        Args:
            config: Optional ConfigLoader instance
        """
        self.config = config if config else ConfigLoader()

    async def extract(
        self,
        chunks: AsyncIterator[bytes],
        target_dir: Path,
        archive_format: str,
        artifact_name: str = '',
    ) -> ExtractionResult:
        """
        Extract a byte stream using the extractor for archive_format.

        Args:
            chunks: Compressed artifact bytes
            target_dir: Directory to write into (created if missing)
            archive_format: 'tar.gz', 'tar.xz' or 'exe'
            artifact_name: Remote filename of the artifact

        Returns:
            ExtractionResult

        Raises:
            ExtractionError: Unsupported format, unsafe member or corrupt stream
        """
        extractor = self.get_extractor(archive_format)
        logger.info(f"{LOG_PROCESS} Using {type(extractor).__name__}")

        await aiofiles.os.makedirs(target_dir, exist_ok=True)
        return await extractor.extract(chunks, target_dir, artifact_name or archive_format)

    def get_extractor(self, archive_format: str) -> BaseExtractor:
        extractor_class = self.EXTRACTOR_MAP.get(archive_format)
        if extractor_class is None:
            logger.error(f"{LOG_OUTPUT} Unsupported archive format: {archive_format}")
            raise ExtractionError(f"Unsupported archive format: {archive_format}")

        if extractor_class is TarStreamExtractor:
            return TarStreamExtractor(archive_format, config=self.config)
        return extractor_class(config=self.config)

    def is_supported(self, archive_format: str) -> bool:
        return archive_format in self.EXTRACTOR_MAP


__all__ = [
    'ArchiveHandler',
    'BaseExtractor',
    'TarStreamExtractor',
    'ExecutableExtractor',
]
