"""
Streams queue entries from the snatch list to the worker one at a time.

A producer task filters the file line by line and feeds a bounded channel;
the worker pulls the next URL only once it has finished with the previous one.
"""

import asyncio
import logging
from pathlib import Path

log = logging.getLogger(__name__)

_END_OF_STREAM = object()


def is_queue_entry(line: str) -> bool:
    """False for blank lines and lines whose first non-space character is '#'."""
    stripped = line.strip()
    return bool(stripped) and not stripped.startswith("#")


class QueueStream:
    """
    Async context manager and iterator over the URLs of a snatch list.

    Usage:
        async with QueueStream(path) as stream:
            async for url in stream:
                ...

    Leaving the context tears the channel down, cancelling the producer if it
    is still running.
    """

    def __init__(self, path: Path, maxsize: int = 16):
        self.path = path
        self._channel: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._producer: asyncio.Task | None = None
        self._error: Exception | None = None
        self._exhausted = False

    async def _produce(self) -> None:
        try:
            with open(self.path, encoding="utf-8") as f:
                while True:
                    line = await asyncio.to_thread(f.readline)
                    if not line:
                        break
                    if is_queue_entry(line):
                        await self._channel.put(line.strip())
        except (OSError, UnicodeDecodeError) as e:
            log.error(f"[red]Could not read snatch list {self.path}: {e}[/red]")
            self._error = e
        await self._channel.put(_END_OF_STREAM)

    async def __aenter__(self) -> "QueueStream":
        self._producer = asyncio.create_task(self._produce(), name="queue-producer")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        await self.close()
        return False

    async def close(self) -> None:
        if self._producer and not self._producer.done():
            self._producer.cancel()
            try:
                await self._producer
            except asyncio.CancelledError:
                pass
        self._exhausted = True

    def __aiter__(self) -> "QueueStream":
        return self

    async def __anext__(self) -> str:
        if self._exhausted:
            raise StopAsyncIteration
        if self._producer is None:
            raise RuntimeError("QueueStream must be entered before iterating.")

        item = await self._channel.get()
        if item is _END_OF_STREAM:
            self._exhausted = True
            if self._error is not None:
                raise self._error
            raise StopAsyncIteration
        return item
