"""Bounded byte pipe between a background producer task and one consumer.

The producer is a coroutine that receives the stream and calls
:meth:`AudioStream.write`. Writes block once ``max_pending`` blocks are
queued, so a slow consumer throttles the producer. When the producer
returns, the consumer sees end-of-stream; when it fails, the consumer
receives the producer's error after the blocks queued before it.

Usage:
    stream = AudioStream()
    stream.start(produce)
    async with stream:
        async for block in stream:
            fh.write(block)
"""

import asyncio
import contextlib
from collections.abc import Awaitable, Callable

from articlecast.core.errors import CanceledError
from articlecast.core.logging import get_logger

logger = get_logger(__name__)

# Largest block handed through the pipe in one write
BLOCK_SIZE = 64 * 1024
DEFAULT_MAX_PENDING = 16

Producer = Callable[["AudioStream"], Awaitable[None]]


class AudioStream:
    """Single-producer, single-consumer async byte pipe."""

    def __init__(self, max_pending: int = DEFAULT_MAX_PENDING) -> None:
        # None marks end-of-stream
        self._queue: asyncio.Queue[bytes | None] = asyncio.Queue(maxsize=max_pending)
        self._task: asyncio.Task[None] | None = None
        self._error: Exception | None = None
        self._eof = False

    def start(self, producer: Producer) -> None:
        """Run producer as a background task feeding this stream."""
        if self._task is not None:
            raise RuntimeError("stream already started")
        self._task = asyncio.create_task(self._run(producer))

    async def write(self, data: bytes) -> None:
        """Queue data for the consumer in blocks of at most BLOCK_SIZE bytes."""
        for offset in range(0, len(data), BLOCK_SIZE):
            await self._queue.put(data[offset : offset + BLOCK_SIZE])

    async def read(self) -> bytes:
        """Return the next block, or b"" once the stream is exhausted."""
        if self._eof:
            return b""
        block = await self._queue.get()
        if block is None:
            self._eof = True
            if self._error is not None:
                raise self._error
            return b""
        return block

    def __aiter__(self) -> "AudioStream":
        return self

    async def __anext__(self) -> bytes:
        block = await self.read()
        if not block:
            raise StopAsyncIteration
        return block

    async def aclose(self) -> None:
        """Stop the producer (if still running) and wait for it to finish."""
        self._eof = True
        if self._task is None:
            return
        if not self._task.done():
            self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            # Only propagate if the caller itself is being cancelled
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise

    async def __aenter__(self) -> "AudioStream":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _run(self, producer: Producer) -> None:
        try:
            await producer(self)
        except asyncio.CancelledError:
            self._error = CanceledError("speech canceled")
            logger.debug("audio_stream_producer_canceled")
            # The consumer is usually gone by now; never block on a full queue
            with contextlib.suppress(asyncio.QueueFull):
                self._queue.put_nowait(None)
            raise
        except Exception as e:
            self._error = e
            logger.bind(error=str(e)).debug("audio_stream_producer_failed")
        await self._queue.put(None)
