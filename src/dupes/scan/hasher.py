"""Single consumer that digests descriptors and buckets paths by digest."""

from __future__ import annotations

import threading
from collections.abc import Callable

from dupes.scan.channel import Channel
from dupes.scan.digest import DigestError, digest_file
from dupes.scan.errors import ErrorCollector
from dupes.scan.models import FileDescriptor

Groups = dict[bytes, list[str]]
DigestFunction = Callable[[str, int], bytes]


class Hasher:
    """Owns the grouping structure until ownership is taken after completion.

    Exactly one hasher thread exists per scan, so the grouping is written
    without a lock and is only handed out once the completion event is set.
    """

    def __init__(
        self,
        descriptors: Channel[FileDescriptor],
        errors: ErrorCollector,
        digest: DigestFunction = digest_file,
    ) -> None:
        self._descriptors = descriptors
        self._errors = errors
        self._digest = digest
        self._groups: Groups | None = {}
        self._hashed = 0
        self._done = threading.Event()
        self._failure: Exception | None = None
        self._thread = threading.Thread(target=self._run, name="dupes-hasher", daemon=True)

    @property
    def hashed(self) -> int:
        """Return number of files successfully digested."""
        return self._hashed

    @property
    def failure(self) -> Exception | None:
        """Return the exception that stopped the consumer loop, if any."""
        return self._failure

    def start(self) -> None:
        self._thread.start()

    def wait(self) -> None:
        """Block until the hasher has signalled completion."""
        self._done.wait()
        self._thread.join()

    def take_groups(self) -> Groups:
        """Transfer the grouping structure to the caller after completion."""
        if not self._done.is_set():
            raise RuntimeError("Hasher has not finished; groups are still being written.")
        if self._groups is None:
            raise RuntimeError("Groups were already taken from this hasher.")
        groups = self._groups
        self._groups = None
        return groups

    def _run(self) -> None:
        try:
            self._consume()
        except Exception as exc:
            self._failure = exc
            # Keep the walker unblocked until it closes the channel.
            for _ in self._descriptors:
                pass
        finally:
            self._done.set()

    def _consume(self) -> None:
        groups = self._groups
        assert groups is not None
        for descriptor in self._descriptors:
            try:
                key = self._digest(descriptor.path, descriptor.size)
            except DigestError as exc:
                self._errors.report(str(exc), "hash")
                continue
            groups.setdefault(key, []).append(descriptor.path)
            self._hashed += 1
