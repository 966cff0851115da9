# Path: runtime_downloader/engine/extraction/__init__.py
"""
Extraction Module

Streamed decompression and extraction of runtime artifacts.

Use ArchiveHandler to pick the extractor for an archive format.
"""

from runtime_downloader.engine.extraction.archive_handler import (
    ArchiveHandler,
    BaseExtractor,
    TarStreamExtractor,
    ExecutableExtractor,
)
from runtime_downloader.engine.extraction.decompressors import gunzip, unxz, get_decompressor
from runtime_downloader.engine.extraction.stream_bridge import ChunkReader

__all__ = [
    # Archive extraction
    'ArchiveHandler',
    'BaseExtractor',
    'TarStreamExtractor',
    'ExecutableExtractor',

    # Decompression stages
    'gunzip',
    'unxz',
    'get_decompressor',

    # Thread hand-off
    'ChunkReader',
]
