"""Typed models for one duplicate scan."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Literal

ErrorOrigin = Literal["walk", "hash"]


class ExitStatus(IntEnum):
    """Process exit status accumulated across a run."""

    OK = 0
    PARTIAL_FAILURE = 1
    USAGE_ERROR = 3


@dataclass(slots=True, frozen=True)
class FileDescriptor:
    """A regular file found by the walker, hashed once by the hasher."""

    path: str
    size: int


@dataclass(slots=True, frozen=True)
class ErrorRecord:
    """A traversal or hashing failure reported during a scan."""

    message: str
    origin: ErrorOrigin


@dataclass(slots=True, frozen=True)
class ScanProfile:
    """Deterministic counters and timings for one scan."""

    files_discovered: int
    files_hashed: int
    traversal_errors: int
    digest_errors: int
    errors_drained: int
    groups: int
    walk_seconds: float
    total_seconds: float
