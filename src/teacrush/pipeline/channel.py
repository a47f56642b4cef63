"""Unbuffered progress channel.

A single-producer, single-consumer rendezvous: send() returns only after
the consumer has finished handling the item, so a slow consumer throttles
the reader instead of letting samples pile up.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import Generic, TypeVar

T = TypeVar("T")

_CLOSED = object()


class ChannelClosedError(RuntimeError):
    """Raised when sending on a closed channel."""


class ProgressChannel(Generic[T]):
    """Rendezvous channel for progress samples.

    Example:
        channel = ProgressChannel()

        async def consume():
            async for sample in channel:
                render(sample)
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize=1)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, item: T) -> None:
        """Deliver an item and wait until the consumer has handled it."""
        if self._closed:
            raise ChannelClosedError("send on closed channel")
        await self._queue.put(item)
        await self._queue.join()

    async def close(self) -> None:
        """Signal end of stream. Idempotent."""
        if self._closed:
            return
        self._closed = True
        await self._queue.put(_CLOSED)

    async def __aiter__(self) -> AsyncIterator[T]:
        while True:
            item = await self._queue.get()
            try:
                if item is _CLOSED:
                    return
                yield item  # type: ignore[misc]
            finally:
                # Runs once the consumer asks for the next item
                self._queue.task_done()
