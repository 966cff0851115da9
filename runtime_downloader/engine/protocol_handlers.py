# Path: runtime_downloader/engine/protocol_handlers.py
"""
Protocol Handlers

HTTP/HTTPS fetch collaborator with streaming support.
Handles headers, timeouts, connection management and checksum lookup.

Architecture:
- Async HTTP client with streaming (aiohttp)
- Proper User-Agent headers
- Connection pooling
- Timeout configuration
- Published checksum fetched concurrently with the artifact
"""

import asyncio
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Awaitable, Optional

import aiohttp

from runtime_downloader.core.logger import get_logger
from runtime_downloader.core.config_loader import ConfigLoader
from runtime_downloader.engine.errors import FetchError
from runtime_downloader.engine.models import FetchOptions
from runtime_downloader.engine.result import DownloadResult
from runtime_downloader.constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_TIMEOUT,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_CHECKSUM_FILE,
    DEFAULT_USER_AGENT,
    HTTP_OK,
    LOG_INPUT,
    LOG_PROCESS,
    LOG_OUTPUT,
)
from runtime_downloader.engine.constants import (
    MAX_CONCURRENT_CONNECTIONS,
    FORCE_CLOSE_CONNECTIONS,
    DEFAULT_ACCEPT_HEADER,
    HEADER_USER_AGENT,
    HEADER_ACCEPT,
    HEADER_CONTENT_LENGTH,
    VERSION_DIRECTORY_TEMPLATE,
)

logger = get_logger(__name__, 'engine')


@dataclass
class FetchResponse:
    """
    An open artifact download.

    Attributes:
        chunks: Artifact bytes, pulled on demand
        expected_digest: Awaitable yielding the published hex digest
            (None when verification is disabled)
        result: Download statistics, filled in while chunks are consumed
    """
    chunks: AsyncIterator[bytes]
    expected_digest: Optional[Awaitable[Optional[str]]]
    result: DownloadResult


def build_url(base_url: str, version: str, filename: str) -> str:
    """Remote layout: {mirror}/v{version}/{filename}."""
    version_dir = VERSION_DIRECTORY_TEMPLATE.format(version=version)
    return f"{base_url.rstrip('/')}/{version_dir}/{filename}"


def parse_checksums(text: str) -> dict[str, str]:
    """
    Parse a SHASUMS file ('<hex>  <filename>' per line).

    Returns:
        Mapping of filename to lowercase hex digest
    """
    checksums = {}
    for line in text.splitlines():
        parts = line.strip().split(None, 1)
        if len(parts) != 2:
            continue
        digest, name = parts
        # '*' marks binary mode in sha256sum output
        name = name.strip().lstrip('*')
        if name.startswith('./'):
            name = name[2:]
        checksums[name] = digest.lower()
    return checksums


class HTTPHandler:
    """
    HTTP/HTTPS fetch collaborator with streaming.

    Features:
    - Async HTTP with aiohttp
    - Streams chunks to the caller (memory-efficient)
    - Concurrent lookup of the published checksum
    - Configurable timeouts and headers

    Example:
        async with HTTPHandler() as handler:
            async with handler.open_artifact('18.0.0', 'node-v18.0.0-linux-x64.tar.gz', options) as response:
                async for chunk in response.chunks:
                    ...
    """

    def __init__(self, config: Optional[ConfigLoader] = None):
        """
        Initialize HTTP handler.

        Args:
            config: Optional ConfigLoader instance
        """
        self.config = config if config else ConfigLoader()

        self.chunk_size = self.config.get('chunk_size', DEFAULT_CHUNK_SIZE)
        self.timeout = self.config.get('request_timeout', DEFAULT_TIMEOUT)
        self.connect_timeout = self.config.get('connect_timeout', DEFAULT_CONNECT_TIMEOUT)
        self.checksum_file = self.config.get('checksum_file', DEFAULT_CHECKSUM_FILE)

        self._session: Optional[aiohttp.ClientSession] = None

    @asynccontextmanager
    async def open_artifact(
        self,
        version: str,
        filename: str,
        options: FetchOptions,
    ) -> AsyncIterator[FetchResponse]:
        """
        Open a streamed download of one artifact.

        Args:
            version: Version identifier (without leading 'v')
            filename: Artifact path relative to the version directory
            options: Fetch settings (mirror, checksum verification, headers)

        Yields:
            FetchResponse

        Raises:
            FetchError: Connectivity failure or non-200 status
        """
        url = build_url(options.base_url, version, filename)
        logger.info(f"{LOG_INPUT} Downloading: {url}")

        digest_task = None
        if self._should_verify(options):
            digest_task = asyncio.ensure_future(
                self.fetch_expected_digest(options, version, filename)
            )

        start_time = time.time()
        try:
            session = await self._get_session()

            logger.info(f"{LOG_PROCESS} Sending HTTP GET request")
            try:
                async with session.get(
                    url,
                    headers=self._build_headers(options),
                    timeout=aiohttp.ClientTimeout(
                        total=self.timeout,
                        connect=self.connect_timeout,
                    ),
                ) as response:
                    if response.status != HTTP_OK:
                        logger.error(f"{LOG_OUTPUT} HTTP error: {response.status}")
                        raise FetchError(
                            f"HTTP {response.status} for {url}",
                            url=url,
                            status=response.status,
                        )

                    content_length = response.headers.get(HEADER_CONTENT_LENGTH)
                    result = DownloadResult(
                        url=url,
                        total_size=int(content_length) if content_length else None,
                        status_code=response.status,
                    )
                    if result.total_size:
                        logger.info(f"{LOG_PROCESS} File size: {result.total_size} bytes")

                    yield FetchResponse(
                        chunks=self._stream(response, result, start_time),
                        expected_digest=digest_task,
                        result=result,
                    )

            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                logger.error(f"{LOG_OUTPUT} Download failed: {e}")
                raise FetchError(str(e) or type(e).__name__, url=url) from e

        finally:
            if digest_task is not None:
                digest_task.cancel()
                await asyncio.gather(digest_task, return_exceptions=True)

    async def _stream(
        self,
        response: aiohttp.ClientResponse,
        result: DownloadResult,
        start_time: float,
    ) -> AsyncIterator[bytes]:
        try:
            async for chunk in response.content.iter_chunked(self.chunk_size):
                result.file_size += len(chunk)
                result.chunks_downloaded += 1
                yield chunk
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"{LOG_OUTPUT} Download interrupted: {e}")
            raise FetchError(str(e) or type(e).__name__, url=result.url) from e

        result.duration = time.time() - start_time
        logger.info(
            f"{LOG_OUTPUT} Download complete: {result.file_size} bytes "
            f"in {result.duration:.2f}s "
            f"({result.download_speed_mbps:.2f} MB/s)"
        )

    async def fetch_expected_digest(
        self,
        options: FetchOptions,
        version: str,
        filename: str,
    ) -> Optional[str]:
        """
        Look up the published SHA-256 of an artifact.

        Returns:
            Lowercase hex digest

        Raises:
            FetchError: Checksum file unavailable or artifact not listed
        """
        url = build_url(options.base_url, version, self.checksum_file)
        session = await self._get_session()

        try:
            async with session.get(url, headers=self._build_headers(options)) as response:
                if response.status != HTTP_OK:
                    raise FetchError(
                        f"HTTP {response.status} for {url}",
                        url=url,
                        status=response.status,
                    )
                text = await response.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise FetchError(str(e) or type(e).__name__, url=url) from e

        digest = parse_checksums(text).get(filename)
        if digest is None:
            raise FetchError(f"No checksum published for {filename} in {url}", url=url)

        logger.debug(f"{LOG_PROCESS} Published checksum for {filename}: {digest}")
        return digest

    def _should_verify(self, options: FetchOptions) -> bool:
        if options.verify_checksums is not None:
            return options.verify_checksums
        return bool(self.config.get('verify_checksums', True))

    def _build_headers(self, options: Optional[FetchOptions] = None) -> dict[str, str]:
        """
        Build HTTP request headers.

        Args:
            options: Fetch settings carrying optional extra headers

        Returns:
            Dictionary of headers
        """
        headers = {
            HEADER_USER_AGENT: self.config.get('user_agent') or DEFAULT_USER_AGENT,
            HEADER_ACCEPT: DEFAULT_ACCEPT_HEADER,
        }

        if options and options.headers:
            headers.update(dict(options.headers))

        return headers

    async def _get_session(self) -> aiohttp.ClientSession:
        """
        Get or create aiohttp session.

        Returns:
            ClientSession instance
        """
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=MAX_CONCURRENT_CONNECTIONS,
                force_close=FORCE_CLOSE_CONNECTIONS,
            )

            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )

        return self._session

    async def close(self):
        """Close HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()


__all__ = ['HTTPHandler', 'FetchResponse', 'build_url', 'parse_checksums']
