"""Output formatting for duplicate groups."""

from __future__ import annotations

import itertools
from collections.abc import Iterator, Mapping, Sequence
from typing import TextIO


def duplicate_buckets(groups: Mapping[bytes, Sequence[str]]) -> Iterator[Sequence[str]]:
    """Yield buckets holding two or more paths, in mapping order."""
    for paths in groups.values():
        if len(paths) > 1:
            yield paths


def iter_report_lines(groups: Mapping[bytes, Sequence[str]], pairs: bool = False) -> Iterator[str]:
    """Yield one line per bucket, or one line per unordered pair in pairs mode."""
    for paths in duplicate_buckets(groups):
        if not pairs:
            yield " ".join(paths)
            continue
        for first, second in itertools.combinations(paths, 2):
            yield f"{first} {second}"


def write_report(
    groups: Mapping[bytes, Sequence[str]],
    out_stream: TextIO,
    pairs: bool = False,
) -> int:
    """Write report lines and return the number of lines written."""
    written = 0
    for line in iter_report_lines(groups, pairs=pairs):
        out_stream.write(f"{line}\n")
        written += 1
    out_stream.flush()
    return written
