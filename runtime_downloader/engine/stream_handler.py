# Path: runtime_downloader/engine/stream_handler.py
"""
Stream Handler

Memory-efficient streaming of a byte stream to disk.
Writes chunk by chunk without loading the artifact into memory.

Architecture:
- Chunk-based streaming
- Progress tracking
- Async file I/O (aiofiles)
"""

from pathlib import Path
from typing import Optional, AsyncIterator

import aiofiles

from runtime_downloader.core.logger import get_logger
from runtime_downloader.core.config_loader import ConfigLoader
from runtime_downloader.constants import (
    DEFAULT_LOG_PROGRESS_INTERVAL,
    LOG_PROCESS,
)

logger = get_logger(__name__, 'engine')


class StreamHandler:
    """
    Handles streaming an artifact to disk.

    Example:
        handler = StreamHandler()
        bytes_written = await handler.stream_to_file(chunks, staging / 'node.exe')
    """

    def __init__(self, config: Optional[ConfigLoader] = None):
        """
        Initialize stream handler.

        Args:
            config: Optional ConfigLoader instance
        """
        self.config = config if config else ConfigLoader()
        self.progress_interval = self.config.get(
            'log_progress_interval', DEFAULT_LOG_PROGRESS_INTERVAL
        ) or DEFAULT_LOG_PROGRESS_INTERVAL

        self.bytes_written = 0
        self.chunks_written = 0

    async def stream_to_file(
        self,
        response_stream: AsyncIterator[bytes],
        output_path: Path,
    ) -> int:
        """
        Stream chunks to a new file.

        Args:
            response_stream: Async iterator of byte chunks
            output_path: Path where file will be written (must not exist)

        Returns:
            Total bytes written
        """
        logger.info(f"{LOG_PROCESS} Streaming to: {output_path.name}")

        self.bytes_written = 0
        self.chunks_written = 0

        async with aiofiles.open(output_path, 'xb') as f:
            async for chunk in response_stream:
                if not chunk:
                    continue
                await f.write(chunk)
                self.bytes_written += len(chunk)
                self.chunks_written += 1

                if self.chunks_written % self.progress_interval == 0:
                    logger.debug(f"{LOG_PROCESS} Written: {self.bytes_written} bytes")

        logger.info(
            f"{LOG_PROCESS} Stream complete: {self.bytes_written} bytes "
            f"in {self.chunks_written} chunks"
        )

        return self.bytes_written


__all__ = ['StreamHandler']
