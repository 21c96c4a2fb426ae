"""Walk-hash-aggregate pipeline and its shutdown handshake."""

from __future__ import annotations

import functools
import sys
import time
from dataclasses import dataclass
from enum import Enum
from typing import TextIO

from dupes.config import ScanConfig
from dupes.scan.channel import Channel
from dupes.scan.digest import digest_file
from dupes.scan.errors import ErrorCollector, ErrorSink
from dupes.scan.hasher import DigestFunction, Groups, Hasher
from dupes.scan.models import ExitStatus, FileDescriptor, ScanProfile
from dupes.scan.walker import walk_tree


class ShutdownState(Enum):
    """Pipeline lifecycle, in the only order it may advance."""

    RUNNING = "running"
    WALK_DONE = "walk_done"
    HASH_DONE = "hash_done"
    CLOSED = "closed"


class ShutdownOrderError(RuntimeError):
    """Raised when a shutdown transition is attempted out of order."""

    def __init__(self, expected: ShutdownState, found: ShutdownState) -> None:
        super().__init__(f"Shutdown expected state '{expected.value}', found '{found.value}'.")
        self.expected = expected
        self.found = found


class ShutdownCoordinator:
    """Closes the error channel only after both of its producers are done.

    The walker closes the descriptor channel when it returns, so the hasher
    cannot finish before the walk does. Once the hasher signals completion
    neither producer can report again, and the error channel is closed.
    Groups may be read only in the CLOSED state.
    """

    def __init__(self, errors: ErrorCollector) -> None:
        self._errors = errors
        self._state = ShutdownState.RUNNING

    @property
    def state(self) -> ShutdownState:
        return self._state

    def walk_done(self) -> None:
        self._advance(ShutdownState.RUNNING, ShutdownState.WALK_DONE)

    def hash_done(self) -> None:
        self._advance(ShutdownState.WALK_DONE, ShutdownState.HASH_DONE)

    def close(self) -> None:
        """Close the shared error channel."""
        self._advance(ShutdownState.HASH_DONE, ShutdownState.CLOSED)
        self._errors.close()

    def require_closed(self) -> None:
        """Raise unless results are safe to read."""
        if self._state is not ShutdownState.CLOSED:
            raise ShutdownOrderError(ShutdownState.CLOSED, self._state)

    def _advance(self, expected: ShutdownState, target: ShutdownState) -> None:
        if self._state is not expected:
            raise ShutdownOrderError(expected, self._state)
        self._state = target


@dataclass(slots=True, frozen=True)
class ScanResult:
    """Grouping, exit status and diagnostics of a finished scan."""

    groups: Groups
    exit_status: ExitStatus
    profile: ScanProfile


def run_scan(
    config: ScanConfig,
    stderr: TextIO | None = None,
    digest: DigestFunction | None = None,
) -> ScanResult:
    """Run walker, hasher and error sink to completion and collect groups."""
    started = time.perf_counter()
    errors = ErrorCollector(capacity=config.error_buffer)
    descriptors: Channel[FileDescriptor] = Channel(config.queue_size)
    if digest is None:
        digest = functools.partial(digest_file, chunk_bytes=config.chunk_bytes)
    hasher = Hasher(descriptors, errors, digest=digest)
    sink = ErrorSink(
        errors,
        # sys.stderr is None when the process was started without one.
        stream=stderr if stderr is not None else sys.stderr,
        program=config.program,
        quiet=config.quiet,
    )
    coordinator = ShutdownCoordinator(errors)

    hasher.start()
    sink.start()
    walk_started = time.perf_counter()
    try:
        exit_status = walk_tree(config.root, descriptors, errors)
    finally:
        walk_seconds = time.perf_counter() - walk_started
        coordinator.walk_done()
        hasher.wait()
        coordinator.hash_done()
        coordinator.close()
        sink.join()

    if hasher.failure is not None:
        raise hasher.failure
    coordinator.require_closed()
    groups = hasher.take_groups()
    profile = ScanProfile(
        files_discovered=hasher.hashed + errors.count("hash"),
        files_hashed=hasher.hashed,
        traversal_errors=errors.count("walk"),
        digest_errors=errors.count("hash"),
        errors_drained=sink.drained,
        groups=sum(1 for paths in groups.values() if len(paths) > 1),
        walk_seconds=walk_seconds,
        total_seconds=time.perf_counter() - started,
    )
    return ScanResult(groups=groups, exit_status=exit_status, profile=profile)
