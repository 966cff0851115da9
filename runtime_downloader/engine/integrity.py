# Path: runtime_downloader/engine/integrity.py
"""
Integrity Checker

Computes a SHA-256 digest of the artifact bytes as they flow through
the pipeline and compares it against the published digest once the
stream has been fully consumed.

A mismatch is returned as a DeferredVerdict, never raised here: the
installer resolves it only after fetch, decompression and extraction
have all succeeded.
"""

import asyncio
import hashlib
import inspect
from typing import AsyncIterator, Awaitable, Optional

from runtime_downloader.core.logger import get_logger
from runtime_downloader.engine.result import DeferredVerdict
from runtime_downloader.constants import LOG_PROCESS, LOG_OUTPUT

logger = get_logger(__name__, 'engine')


def _discard(source: Optional[Awaitable]) -> None:
    """Release a digest source that will never be awaited."""
    if isinstance(source, asyncio.Future):
        source.cancel()
    elif inspect.iscoroutine(source):
        source.close()


class IntegrityChecker:
    """
    Streaming checksum tap.

    Example:
        checker = IntegrityChecker()
        async for chunk in checker.observe(response.chunks):
            ...
        verdict = await checker.verdict(response.expected_digest)
    """

    def __init__(self, algorithm: str = 'sha256'):
        self.algorithm = algorithm
        self._hash = hashlib.new(algorithm)
        self.bytes_seen = 0
        self.completed = False

    async def observe(self, chunks: AsyncIterator[bytes]) -> AsyncIterator[bytes]:
        """Pass chunks through unchanged while updating the digest."""
        async for chunk in chunks:
            self._hash.update(chunk)
            self.bytes_seen += len(chunk)
            yield chunk
        self.completed = True

    @property
    def hexdigest(self) -> str:
        return self._hash.hexdigest()

    async def verdict(self, expected_source: Optional[Awaitable[Optional[str]]]) -> DeferredVerdict:
        """
        Compare the computed digest with the expected one.

        Args:
            expected_source: Awaitable yielding the expected hex digest,
                or None when verification is disabled

        Returns:
            DeferredVerdict (ok, or carrying the pending error)
        """
        actual = self.hexdigest

        if not self.completed:
            _discard(expected_source)
            return DeferredVerdict.pending(
                f"Checksum computed over an incomplete stream ({self.bytes_seen} bytes)",
                actual=actual,
            )

        if expected_source is None:
            logger.debug(f"{LOG_PROCESS} Checksum verification disabled")
            return DeferredVerdict.ok(actual=actual)

        try:
            expected = await expected_source
        except Exception as e:
            logger.warning(f"{LOG_OUTPUT} Could not obtain expected checksum: {e}")
            return DeferredVerdict.pending(
                f"Could not obtain expected checksum: {e}",
                actual=actual,
            )

        if expected is None:
            logger.debug(f"{LOG_PROCESS} No published checksum; skipping comparison")
            return DeferredVerdict.ok(actual=actual)

        expected = expected.strip().lower()
        if expected != actual:
            logger.warning(
                f"{LOG_OUTPUT} Checksum mismatch: expected {expected}, got {actual}"
            )
            return DeferredVerdict.pending(
                f"Checksum mismatch: expected {self.algorithm} {expected}, got {actual}",
                expected=expected,
                actual=actual,
            )

        logger.info(f"{LOG_OUTPUT} Checksum verified ({self.bytes_seen} bytes)")
        return DeferredVerdict.ok(expected=expected, actual=actual)


__all__ = ['IntegrityChecker']
