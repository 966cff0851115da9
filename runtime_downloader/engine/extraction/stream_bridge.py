# Path: runtime_downloader/engine/extraction/stream_bridge.py
"""
Stream Bridge

Bounded hand-off between the asyncio pipeline and a blocking parser
running in a worker thread. The parser reads the bridge like a file;
the pipeline feeds it chunk by chunk and is suspended while the
buffer is full.

The reader thread waits on a condition variable; the feeder waits on
an asyncio.Event that the reader sets through call_soon_threadsafe
whenever it frees a slot or aborts.
"""

import asyncio
import collections
import io
import threading
from typing import Optional

from runtime_downloader.engine.errors import PipelineAborted

# Marks the end of the byte stream
_EOF = None


class ChunkReader(io.RawIOBase):
    """
    Read-only file object fed from the event loop.

    Either side can abort the hand-off: the feeder stops with
    PipelineAborted once the reader is gone, the reader raises
    PipelineAborted once the feeder has failed.

    Example:
        reader = ChunkReader(max_chunks=16)
        extraction = asyncio.ensure_future(asyncio.to_thread(parse, reader))
        async for chunk in chunks:
            await reader.feed(chunk)
        await reader.feed(None)
    """

    def __init__(self, max_chunks: int):
        super().__init__()
        self._max_chunks = max(1, max_chunks)
        self._chunks: collections.deque = collections.deque()
        self._condition = threading.Condition()
        self._space = asyncio.Event()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._aborted = False
        self._pending = memoryview(b'')
        self._eof = False
        self.bytes_read = 0

    @property
    def aborted(self) -> bool:
        return self._aborted

    def abort(self) -> None:
        """Stop both sides; safe to call from the loop or the reader thread."""
        with self._condition:
            self._aborted = True
            self._condition.notify_all()
        self._wake_feeder()

    async def feed(self, chunk: Optional[bytes]) -> None:
        """
        Queue one chunk for the reader (None signals end of stream).

        Raises:
            PipelineAborted: The reader stopped consuming
        """
        self._loop = asyncio.get_running_loop()
        while True:
            with self._condition:
                if self._aborted:
                    raise PipelineAborted("Stream reader is no longer consuming")
                if len(self._chunks) < self._max_chunks:
                    self._chunks.append(chunk)
                    self._condition.notify()
                    return
                # Cleared under the lock: a slot freed after this point sets it again
                self._space.clear()
            await self._space.wait()

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        while not self._pending:
            if self._eof:
                return 0
            item = self._next_item()
            if item is _EOF:
                self._eof = True
                return 0
            self._pending = memoryview(item)

        size = min(len(buffer), len(self._pending))
        buffer[:size] = self._pending[:size]
        self._pending = self._pending[size:]
        self.bytes_read += size
        return size

    def _next_item(self) -> Optional[bytes]:
        with self._condition:
            while True:
                if self._aborted:
                    raise PipelineAborted("Stream feeder aborted")
                if self._chunks:
                    item = self._chunks.popleft()
                    self._wake_feeder()
                    return item
                self._condition.wait()

    def _wake_feeder(self) -> None:
        loop = self._loop
        if loop is not None and not loop.is_closed():
            loop.call_soon_threadsafe(self._space.set)


__all__ = ['ChunkReader']
