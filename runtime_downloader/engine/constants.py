# Path: runtime_downloader/engine/constants.py
"""
Runtime Downloader Engine Constants

Centralized constants for fetching, staging and promotion.
"""

# ============================================================================
# HTTP/PROTOCOL HANDLER CONSTANTS
# ============================================================================

# HTTP Connection pooling
MAX_CONCURRENT_CONNECTIONS = 10
FORCE_CLOSE_CONNECTIONS = False

# HTTP Headers - Default values
DEFAULT_ACCEPT_HEADER = '*/*'

# HTTP Header keys
HEADER_USER_AGENT = 'User-Agent'
HEADER_ACCEPT = 'Accept'
HEADER_CONTENT_LENGTH = 'Content-Length'

# Remote layout: {mirror}/v{version}/{filename}
VERSION_DIRECTORY_TEMPLATE = 'v{version}'

# ============================================================================
# ARTIFACT NAMING
# ============================================================================

# Archive artifacts: node-v18.0.0-linux-x64.tar.gz
ARCHIVE_FILENAME_TEMPLATE = '{runtime}-v{version}-{platform}-{arch}.{archive_format}'

# Windows ships a bare executable: win-x64/node.exe
EXECUTABLE_FILENAME_TEMPLATE = '{platform}-{arch}/{runtime}.exe'

# Platforms whose artifact is a single executable
EXECUTABLE_PLATFORMS = {'win'}

# Archive format identifiers
FORMAT_TAR_GZ = 'tar.gz'
FORMAT_TAR_XZ = 'tar.xz'
FORMAT_EXECUTABLE = 'exe'

# ============================================================================
# STAGING
# ============================================================================

# Random suffix length (hex chars) of partial promotion copies
STAGING_SUFFIX_LENGTH = 12

# Hidden sibling used when a cross-device move has to copy first
PROMOTION_PARTIAL_TEMPLATE = '.{name}.partial-{suffix}'

# ============================================================================
# FAILURE CLASSIFICATION
# ============================================================================

# Substrings identifying address-resolution failures
CONNECTIVITY_ERROR_MARKERS = (
    'getaddrinfo',
    'Name or service not known',
    'nodename nor servname',
    'Temporary failure in name resolution',
    'Cannot connect to host',
)

# Substrings identifying a missing remote artifact
NOT_FOUND_ERROR_MARKERS = ('404',)

# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    # HTTP/Protocol handler
    'MAX_CONCURRENT_CONNECTIONS',
    'FORCE_CLOSE_CONNECTIONS',
    'DEFAULT_ACCEPT_HEADER',
    'HEADER_USER_AGENT',
    'HEADER_ACCEPT',
    'HEADER_CONTENT_LENGTH',
    'VERSION_DIRECTORY_TEMPLATE',

    # Artifact naming
    'ARCHIVE_FILENAME_TEMPLATE',
    'EXECUTABLE_FILENAME_TEMPLATE',
    'EXECUTABLE_PLATFORMS',
    'FORMAT_TAR_GZ',
    'FORMAT_TAR_XZ',
    'FORMAT_EXECUTABLE',

    # Staging
    'STAGING_SUFFIX_LENGTH',
    'PROMOTION_PARTIAL_TEMPLATE',

    # Failure classification
    'CONNECTIVITY_ERROR_MARKERS',
    'NOT_FOUND_ERROR_MARKERS',
]
