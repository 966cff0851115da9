# Path: tests/fakes.py
"""
Test doubles for the fetch collaborator and in-memory archive builders.
"""

import asyncio
import hashlib
import io
import tarfile
from contextlib import asynccontextmanager
from typing import Optional

from runtime_downloader.engine.errors import FetchError
from runtime_downloader.engine.protocol_handlers import FetchResponse
from runtime_downloader.engine.result import DownloadResult

RUNTIME_ROOT = 'node-v18.0.0-linux-x64'

RUNTIME_FILES = {
    'bin/node': b'#!/bin/sh\necho node\n',
    'include/node/node.h': b'/* header */\n',
    'README.md': b'Node.js\n',
}


def make_tarball(
    files: Optional[dict] = None,
    roots: tuple = (RUNTIME_ROOT,),
    compression: str = 'gz',
) -> bytes:
    """Build a compressed tarball with the same files under each root directory."""
    files = RUNTIME_FILES if files is None else files
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode=f'w:{compression}') as archive:
        for root in roots:
            directory = tarfile.TarInfo(root)
            directory.type = tarfile.DIRTYPE
            directory.mode = 0o755
            archive.addfile(directory)
            for name, data in files.items():
                info = tarfile.TarInfo(f'{root}/{name}')
                info.size = len(data)
                info.mode = 0o755 if name.startswith('bin/') else 0o644
                archive.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


def make_raw_tarball(members: list, compression: str = 'gz') -> bytes:
    """Build a tarball from prepared (TarInfo, data-or-None) pairs."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode=f'w:{compression}') as archive:
        for info, data in members:
            if data is None:
                archive.addfile(info)
            else:
                info.size = len(data)
                archive.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


def sha256(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


async def iterate(data: bytes, chunk_size: int = 1000):
    """Async generator yielding data in chunks."""
    for offset in range(0, len(data), chunk_size):
        await asyncio.sleep(0)
        yield data[offset:offset + chunk_size]


class FakeFetcher:
    """
    In-memory fetch collaborator.

    Args:
        payload: Artifact bytes served for every request
        digest: Published digest ('auto' = correct digest, None = no
            verification, an Exception = digest lookup fails)
        error: Raised when the artifact is opened
        fail_after: Raise FetchError after this many bytes were served
        chunk_size: Size of served chunks
    """

    def __init__(
        self,
        payload: bytes = b'',
        digest='auto',
        error: Optional[Exception] = None,
        fail_after: Optional[int] = None,
        chunk_size: int = 1000,
    ):
        self.payload = payload
        self.digest = sha256(payload) if digest == 'auto' else digest
        self.error = error
        self.fail_after = fail_after
        self.chunk_size = chunk_size

        self.calls = 0
        self.bytes_served = 0
        self.requests = []

    @asynccontextmanager
    async def open_artifact(self, version, filename, options):
        self.calls += 1
        self.requests.append((version, filename, options))
        await asyncio.sleep(0)

        if self.error is not None:
            raise self.error

        digest_task = asyncio.ensure_future(self._expected_digest())
        try:
            yield FetchResponse(
                chunks=self._chunks(),
                expected_digest=digest_task,
                result=DownloadResult(url=f'{options.base_url}/v{version}/{filename}'),
            )
        finally:
            digest_task.cancel()
            await asyncio.gather(digest_task, return_exceptions=True)

    async def _chunks(self):
        for offset in range(0, len(self.payload), self.chunk_size):
            if self.fail_after is not None and offset >= self.fail_after:
                raise FetchError('Connection reset by peer')
            await asyncio.sleep(0)
            chunk = self.payload[offset:offset + self.chunk_size]
            self.bytes_served += len(chunk)
            yield chunk

    async def _expected_digest(self):
        if isinstance(self.digest, Exception):
            raise self.digest
        return self.digest

    async def close(self):
        pass
