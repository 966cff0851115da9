# Path: runtime_downloader/constants.py
"""
Runtime Downloader Constants

Module-wide constants for runtime acquisition.
Engine-specific constants go in engine/constants.py.

No hardcoded paths - directories come from .env via config_loader.
"""

# ============================================================================
# HTTP STATUS CODES
# ============================================================================
HTTP_OK: int = 200
HTTP_NOT_FOUND: int = 404

# ============================================================================
# DOWNLOAD CONFIGURATION DEFAULTS
# ============================================================================
DEFAULT_MIRROR: str = 'https://nodejs.org/dist'
DEFAULT_RUNTIME_NAME: str = 'node'
DEFAULT_RUNTIME_DISPLAY_NAME: str = 'Node.js'
DEFAULT_ARCHIVE_FORMAT: str = 'tar.gz'
DEFAULT_CHECKSUM_FILE: str = 'SHASUMS256.txt'
DEFAULT_CHUNK_SIZE: int = 65536  # 64KB chunks for streaming
DEFAULT_TIMEOUT: int = 300  # 5 minutes for large archives
DEFAULT_CONNECT_TIMEOUT: int = 30
DEFAULT_PIPELINE_BUFFER_CHUNKS: int = 16  # Chunks queued ahead of the archive parser
DEFAULT_USER_AGENT: str = 'RuntimeDownloader/1.0'
DEFAULT_STAGING_PREFIX: str = 'runtime-downloader'

# ============================================================================
# EXTRACTION DEFAULTS
# ============================================================================
MAX_EXTRACTION_DEPTH: int = 64  # Runtime trees nest node_modules deeply

# ============================================================================
# LOGGING DEFAULTS
# ============================================================================
DEFAULT_LOG_LEVEL: str = 'INFO'
DEFAULT_LOG_PROGRESS_INTERVAL: int = 100

# ============================================================================
# IPO LOGGING PREFIXES
# ============================================================================
LOG_INPUT: str = '[INPUT]'
LOG_PROCESS: str = '[PROCESS]'
LOG_OUTPUT: str = '[OUTPUT]'

# ============================================================================
# LOGGING COMPONENTS
# ============================================================================
LOGGER_ROOT: str = 'runtime_downloader'
LOGGER_CORE: str = 'runtime_downloader.core'
LOGGER_ENGINE: str = 'runtime_downloader.engine'
LOGGER_CLI: str = 'runtime_downloader.cli'
LOGGER_EXTRACTION: str = 'runtime_downloader.extraction'

# ============================================================================
# LOG FORMAT
# ============================================================================
LOG_FORMAT: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT: str = '%Y-%m-%d %H:%M:%S'
LOG_ACTIVITY_FILENAME: str = 'downloader_activity.log'
LOG_ERRORS_FILENAME: str = 'errors.log'

# ============================================================================
# ENVIRONMENT VARIABLE KEYS (for reference in config_loader.py)
# ============================================================================

# Source
ENV_MIRROR: str = 'RUNTIME_DOWNLOADER_MIRROR'
ENV_RUNTIME_NAME: str = 'RUNTIME_DOWNLOADER_RUNTIME_NAME'
ENV_RUNTIME_DISPLAY_NAME: str = 'RUNTIME_DOWNLOADER_DISPLAY_NAME'
ENV_ARCHIVE_FORMAT: str = 'RUNTIME_DOWNLOADER_ARCHIVE_FORMAT'
ENV_CHECKSUM_FILE: str = 'RUNTIME_DOWNLOADER_CHECKSUM_FILE'

# Directory Paths
ENV_TEMP_DIR: str = 'RUNTIME_DOWNLOADER_TEMP_DIR'
ENV_STAGING_PREFIX: str = 'RUNTIME_DOWNLOADER_STAGING_PREFIX'

# Download Configuration
ENV_REQUEST_TIMEOUT: str = 'RUNTIME_DOWNLOADER_REQUEST_TIMEOUT'
ENV_CONNECT_TIMEOUT: str = 'RUNTIME_DOWNLOADER_CONNECT_TIMEOUT'
ENV_CHUNK_SIZE: str = 'RUNTIME_DOWNLOADER_CHUNK_SIZE'
ENV_PIPELINE_BUFFER: str = 'RUNTIME_DOWNLOADER_PIPELINE_BUFFER'
ENV_USER_AGENT: str = 'RUNTIME_DOWNLOADER_USER_AGENT'

# Validation Configuration
ENV_VERIFY_CHECKSUMS: str = 'RUNTIME_DOWNLOADER_VERIFY_CHECKSUMS'
ENV_MAX_EXTRACTION_DEPTH: str = 'RUNTIME_DOWNLOADER_MAX_EXTRACTION_DEPTH'

# Logging Configuration
ENV_LOG_LEVEL: str = 'RUNTIME_DOWNLOADER_LOG_LEVEL'
ENV_LOG_CONSOLE: str = 'RUNTIME_DOWNLOADER_LOG_CONSOLE'
ENV_LOG_DIR: str = 'RUNTIME_DOWNLOADER_LOG_DIR'
ENV_LOG_PROGRESS_INTERVAL: str = 'RUNTIME_DOWNLOADER_LOG_PROGRESS_INTERVAL'

# ============================================================================
# EXPORTS
# ============================================================================
__all__ = [
    # HTTP Status Codes
    'HTTP_OK',
    'HTTP_NOT_FOUND',

    # Download Configuration Defaults
    'DEFAULT_MIRROR',
    'DEFAULT_RUNTIME_NAME',
    'DEFAULT_RUNTIME_DISPLAY_NAME',
    'DEFAULT_ARCHIVE_FORMAT',
    'DEFAULT_CHECKSUM_FILE',
    'DEFAULT_CHUNK_SIZE',
    'DEFAULT_TIMEOUT',
    'DEFAULT_CONNECT_TIMEOUT',
    'DEFAULT_PIPELINE_BUFFER_CHUNKS',
    'DEFAULT_USER_AGENT',
    'DEFAULT_STAGING_PREFIX',

    # Extraction Defaults
    'MAX_EXTRACTION_DEPTH',

    # Logging Defaults
    'DEFAULT_LOG_LEVEL',
    'DEFAULT_LOG_PROGRESS_INTERVAL',

    # IPO Logging Prefixes
    'LOG_INPUT',
    'LOG_PROCESS',
    'LOG_OUTPUT',

    # Logging Components
    'LOGGER_ROOT',
    'LOGGER_CORE',
    'LOGGER_ENGINE',
    'LOGGER_CLI',
    'LOGGER_EXTRACTION',

    # Log Format
    'LOG_FORMAT',
    'LOG_DATE_FORMAT',
    'LOG_ACTIVITY_FILENAME',
    'LOG_ERRORS_FILENAME',

    # Environment Variable Keys
    'ENV_MIRROR',
    'ENV_RUNTIME_NAME',
    'ENV_RUNTIME_DISPLAY_NAME',
    'ENV_ARCHIVE_FORMAT',
    'ENV_CHECKSUM_FILE',
    'ENV_TEMP_DIR',
    'ENV_STAGING_PREFIX',
    'ENV_REQUEST_TIMEOUT',
    'ENV_CONNECT_TIMEOUT',
    'ENV_CHUNK_SIZE',
    'ENV_PIPELINE_BUFFER',
    'ENV_USER_AGENT',
    'ENV_VERIFY_CHECKSUMS',
    'ENV_MAX_EXTRACTION_DEPTH',
    'ENV_LOG_LEVEL',
    'ENV_LOG_CONSOLE',
    'ENV_LOG_DIR',
    'ENV_LOG_PROGRESS_INTERVAL',
]
