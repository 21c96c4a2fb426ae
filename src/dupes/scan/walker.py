"""Depth-first tree walk that feeds regular files to the hasher."""

from __future__ import annotations

import os
import stat

from dupes.scan.channel import Channel
from dupes.scan.errors import ErrorCollector
from dupes.scan.models import ExitStatus, FileDescriptor


def walk_tree(
    root: str,
    out: Channel[FileDescriptor],
    errors: ErrorCollector,
) -> ExitStatus:
    """Emit one descriptor per regular file under root, then close out.

    Symlinks are never followed. Errors on individual entries are reported
    and the walk continues. The returned status is PARTIAL_FAILURE when at
    least one traversal error occurred.
    """
    try:
        return _walk(root, out, errors)
    finally:
        out.close()


def _walk(root: str, out: Channel[FileDescriptor], errors: ErrorCollector) -> ExitStatus:
    status = ExitStatus.OK
    try:
        root_stat = os.lstat(root)
    except OSError as exc:
        errors.report(_describe(root, exc), "walk")
        return ExitStatus.PARTIAL_FAILURE

    if stat.S_ISREG(root_stat.st_mode):
        out.send(FileDescriptor(path=root, size=root_stat.st_size))
        return status
    if not stat.S_ISDIR(root_stat.st_mode):
        return status

    # Pending entries are pushed in reverse so they pop in name order, which
    # interleaves files and subdirectories the way a lexical walk does.
    stack: list[tuple[str, os.stat_result]] = [(root, root_stat)]
    while stack:
        path, path_stat = stack.pop()
        if stat.S_ISREG(path_stat.st_mode):
            out.send(FileDescriptor(path=path, size=path_stat.st_size))
            continue
        try:
            with os.scandir(path) as entries:
                ordered_entries = sorted(entries, key=lambda item: item.name)
        except OSError as exc:
            errors.report(_describe(path, exc), "walk")
            status = ExitStatus.PARTIAL_FAILURE
            continue
        children: list[tuple[str, os.stat_result]] = []
        for entry in ordered_entries:
            child = os.path.join(path, entry.name)
            try:
                entry_stat = entry.stat(follow_symlinks=False)
            except OSError as exc:
                errors.report(_describe(child, exc), "walk")
                status = ExitStatus.PARTIAL_FAILURE
                continue
            if stat.S_ISDIR(entry_stat.st_mode) or stat.S_ISREG(entry_stat.st_mode):
                children.append((child, entry_stat))
        stack.extend(reversed(children))
    return status


def _describe(path: str, exc: OSError) -> str:
    return f"{path}: {exc.strerror or exc}"
