"""Shared error collection for the walker and hasher, and its drain."""

from __future__ import annotations

import threading
from typing import TextIO

from dupes.config import DEFAULT_ERROR_BUFFER
from dupes.scan.channel import Channel
from dupes.scan.models import ErrorOrigin, ErrorRecord


class ErrorCollector:
    """Multi-producer error channel, closed only by the shutdown coordinator."""

    def __init__(self, capacity: int = DEFAULT_ERROR_BUFFER) -> None:
        self._channel: Channel[ErrorRecord] = Channel(capacity)
        self._lock = threading.Lock()
        self._counts: dict[str, int] = {"walk": 0, "hash": 0}

    def report(self, message: str, origin: ErrorOrigin) -> None:
        """Record one failure; raises ChannelClosedError after close()."""
        self._channel.send(ErrorRecord(message=message, origin=origin))
        with self._lock:
            self._counts[origin] += 1

    def count(self, origin: ErrorOrigin) -> int:
        """Return how many records a producer has reported."""
        with self._lock:
            return self._counts[origin]

    def close(self) -> None:
        """End the error stream once every producer has finished."""
        self._channel.close()

    def records(self) -> Channel[ErrorRecord]:
        """Return the underlying channel for the single draining consumer."""
        return self._channel


class ErrorSink:
    """Background drain that prints diagnostics, or discards them when quiet.

    A quiet sink still drains the channel so that producers never block on
    a full buffer that nobody reads. A sink whose stream fails (closed or
    broken pipe) turns quiet and keeps draining.
    """

    def __init__(
        self,
        collector: ErrorCollector,
        stream: TextIO | None,
        program: str,
        quiet: bool = False,
    ) -> None:
        self._collector = collector
        self._stream = stream
        self._program = program
        self._quiet = quiet or stream is None
        self._drained = 0
        self._thread = threading.Thread(target=self._run, name="dupes-error-sink", daemon=True)

    @property
    def drained(self) -> int:
        """Return number of records consumed so far."""
        return self._drained

    def start(self) -> None:
        self._thread.start()

    def join(self) -> None:
        """Wait until the closed channel has been fully drained."""
        self._thread.join()

    def _run(self) -> None:
        for record in self._collector.records():
            self._drained += 1
            if self._quiet:
                continue
            try:
                self._stream.write(f"{self._program}: {record.message}\n")
                self._stream.flush()
            except (OSError, ValueError):
                self._quiet = True
