"""Concurrent walk, hash and grouping pipeline."""

from .channel import Channel, ChannelClosedError
from .coordinator import (
    ScanResult,
    ShutdownCoordinator,
    ShutdownOrderError,
    ShutdownState,
    run_scan,
)
from .digest import DigestError, OpenError, ReadError, digest_file
from .errors import ErrorCollector, ErrorSink
from .hasher import Hasher
from .models import ErrorRecord, ExitStatus, FileDescriptor, ScanProfile
from .walker import walk_tree

__all__ = [
    "Channel",
    "ChannelClosedError",
    "DigestError",
    "ErrorCollector",
    "ErrorRecord",
    "ErrorSink",
    "ExitStatus",
    "FileDescriptor",
    "Hasher",
    "OpenError",
    "ReadError",
    "ScanProfile",
    "ScanResult",
    "ShutdownCoordinator",
    "ShutdownOrderError",
    "ShutdownState",
    "digest_file",
    "run_scan",
    "walk_tree",
]
