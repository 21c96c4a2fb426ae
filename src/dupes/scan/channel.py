"""Bounded, closable FIFO hand-off between pipeline threads."""

from __future__ import annotations

import queue
from collections.abc import Iterator
from typing import Generic, TypeVar

T = TypeVar("T")

_END = object()


class ChannelClosedError(RuntimeError):
    """Raised when sending on a channel that was already closed."""


class Channel(Generic[T]):
    """Single-consumer queue whose end of stream is signalled by close()."""

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("Channel capacity must be a positive integer.")
        self._queue: queue.Queue[object] = queue.Queue(maxsize=capacity)
        self._closed = False

    @property
    def capacity(self) -> int:
        """Return the maximum number of buffered items."""
        return self._queue.maxsize

    @property
    def closed(self) -> bool:
        """Return True once close() has been called."""
        return self._closed

    def send(self, item: T) -> None:
        """Enqueue one item, blocking while the buffer is full."""
        if self._closed:
            raise ChannelClosedError("send on closed channel")
        self._queue.put(item)

    def close(self) -> None:
        """Mark end of stream; blocks until the marker fits in the buffer."""
        if self._closed:
            return
        self._closed = True
        self._queue.put(_END)

    def __iter__(self) -> Iterator[T]:
        while True:
            item = self._queue.get()
            if item is _END:
                return
            yield item  # type: ignore[misc]
