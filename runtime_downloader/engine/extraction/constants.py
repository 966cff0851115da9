# Path: runtime_downloader/engine/extraction/constants.py
"""
Extraction Module Constants

Centralized constants for streamed decompression and archive parsing.
NO HARDCODED VALUES in extraction handlers - all configuration here.
"""

import zlib

# ============================================================================
# DECOMPRESSION
# ============================================================================

# zlib window bits accepting a gzip header and trailer
GZIP_WBITS = zlib.MAX_WBITS | 16

# Upper bound on bytes produced per decompress() call
MAX_DECOMPRESSED_CHUNK = 256 * 1024

# ============================================================================
# TAR STREAM PARSING
# ============================================================================

# Uncompressed, non-seekable tar stream (decompression happens upstream)
TAR_STREAM_MODE = 'r|'

# Extraction filter applied where tarfile provides one
TAR_EXTRACTION_FILTER = 'data'

# ============================================================================
# EXECUTABLE ARTIFACTS
# ============================================================================

# Permission bits applied to a staged single-file executable
EXECUTABLE_MODE = 0o755

# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    'GZIP_WBITS',
    'MAX_DECOMPRESSED_CHUNK',
    'TAR_STREAM_MODE',
    'TAR_EXTRACTION_FILTER',
    'EXECUTABLE_MODE',
]
