"""Content fingerprint over a file's declared size and bytes."""

from __future__ import annotations

import hashlib

from dupes.config import DEFAULT_CHUNK_BYTES

SIZE_PREFIX_BYTES = 8


class DigestError(Exception):
    """Raised when a file cannot be fingerprinted."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class OpenError(DigestError):
    """Raised when a file cannot be opened for reading."""


class ReadError(DigestError):
    """Raised when reading file content fails partway."""


def digest_file(path: str, size: int, chunk_bytes: int = DEFAULT_CHUNK_BYTES) -> bytes:
    """Return SHA-1 over the big-endian size prefix followed by file content."""
    try:
        handle = open(path, "rb")
    except OSError as exc:
        raise OpenError(path, _reason(exc)) from exc

    digest = hashlib.sha1()
    digest.update(size.to_bytes(SIZE_PREFIX_BYTES, "big", signed=True))
    consumed = 0
    with handle:
        while True:
            try:
                chunk = handle.read(chunk_bytes)
            except OSError as exc:
                raise ReadError(path, _reason(exc)) from exc
            if not chunk:
                break
            consumed += len(chunk)
            digest.update(chunk)
    if consumed != size:
        raise ReadError(path, f"read {consumed} bytes, expected {size}")
    return digest.digest()


def _reason(exc: OSError) -> str:
    return exc.strerror or str(exc)
