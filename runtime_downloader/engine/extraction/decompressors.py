# Path: runtime_downloader/engine/extraction/decompressors.py
"""
Decompression Stages

Pull-based async generator stages turning compressed chunks into
decompressed chunks. Each stage only reads upstream as fast as its
consumer pulls, so backpressure flows through the whole pipeline.

Supported:
- gzip (multi-member streams, as produced by concatenating gzip files)
- xz (single stream; trailing bytes after the end marker are ignored)
"""

import lzma
import zlib
from typing import AsyncIterator, Callable

from runtime_downloader.core.logger import get_logger
from runtime_downloader.engine.errors import ExtractionError
from runtime_downloader.engine.constants import FORMAT_TAR_GZ, FORMAT_TAR_XZ
from runtime_downloader.engine.extraction.constants import (
    GZIP_WBITS,
    MAX_DECOMPRESSED_CHUNK,
)

logger = get_logger(__name__, 'extraction')


async def gunzip(chunks: AsyncIterator[bytes]) -> AsyncIterator[bytes]:
    """
    Decompress a gzip stream.

    Args:
        chunks: Compressed byte chunks

    Yields:
        Decompressed byte chunks

    Raises:
        ExtractionError: Corrupt or truncated gzip data
    """
    decompressor = zlib.decompressobj(GZIP_WBITS)
    member_started = False

    try:
        async for chunk in chunks:
            data = chunk
            while data:
                member_started = True
                output = decompressor.decompress(data, MAX_DECOMPRESSED_CHUNK)
                if output:
                    yield output

                if decompressor.eof:
                    # Next gzip member, if any, starts in the unused tail
                    data = decompressor.unused_data
                    decompressor = zlib.decompressobj(GZIP_WBITS)
                    member_started = False
                else:
                    data = decompressor.unconsumed_tail

        tail = decompressor.flush()
        if tail:
            yield tail

    except zlib.error as e:
        raise ExtractionError(f"Corrupt gzip stream: {e}") from e

    if member_started and not decompressor.eof:
        raise ExtractionError("Truncated gzip stream")


async def unxz(chunks: AsyncIterator[bytes]) -> AsyncIterator[bytes]:
    """
    Decompress an xz stream.

    Args:
        chunks: Compressed byte chunks

    Yields:
        Decompressed byte chunks

    Raises:
        ExtractionError: Corrupt or truncated xz data
    """
    decompressor = lzma.LZMADecompressor(format=lzma.FORMAT_XZ)
    received = False

    try:
        async for chunk in chunks:
            if decompressor.eof:
                # Keep pulling so upstream taps see every byte
                continue

            data = chunk
            received = received or bool(chunk)
            while not decompressor.eof:
                output = decompressor.decompress(data, MAX_DECOMPRESSED_CHUNK)
                data = b''
                if output:
                    yield output
                if decompressor.needs_input:
                    break

    except lzma.LZMAError as e:
        raise ExtractionError(f"Corrupt xz stream: {e}") from e

    if received and not decompressor.eof:
        raise ExtractionError("Truncated xz stream")

    if decompressor.unused_data:
        logger.debug(f"Ignoring {len(decompressor.unused_data)} bytes after xz end marker")


DECOMPRESSORS: dict[str, Callable[[AsyncIterator[bytes]], AsyncIterator[bytes]]] = {
    FORMAT_TAR_GZ: gunzip,
    FORMAT_TAR_XZ: unxz,
}


def get_decompressor(archive_format: str) -> Callable[[AsyncIterator[bytes]], AsyncIterator[bytes]]:
    """
    Look up the decompression stage for an archive format.

    Raises:
        ExtractionError: Format has no decompression stage
    """
    try:
        return DECOMPRESSORS[archive_format]
    except KeyError:
        raise ExtractionError(f"Unsupported archive format: {archive_format}") from None


__all__ = ['gunzip', 'unxz', 'DECOMPRESSORS', 'get_decompressor']
