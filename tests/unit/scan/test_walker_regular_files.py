from __future__ import annotations

import os
from pathlib import Path

import pytest

from dupes.scan import Channel, ErrorCollector, ExitStatus, FileDescriptor, walk_tree


def _walk(root: str) -> tuple[ExitStatus, list[FileDescriptor], list[str]]:
    out: Channel[FileDescriptor] = Channel(capacity=1000)
    errors = ErrorCollector(capacity=1000)
    status = walk_tree(root, out, errors)
    assert out.closed is True
    errors.close()
    return status, list(out), [record.message for record in errors.records()]


def test_walk_emits_regular_files_in_interleaved_name_order(tmp_path: Path) -> None:
    (tmp_path / "b").mkdir()
    (tmp_path / "b" / "inner").write_bytes(b"123")
    (tmp_path / "a").write_bytes(b"x")
    (tmp_path / "c").write_bytes(b"")

    status, descriptors, messages = _walk(str(tmp_path))

    assert status is ExitStatus.OK
    assert messages == []
    assert descriptors == [
        FileDescriptor(path=os.path.join(str(tmp_path), "a"), size=1),
        FileDescriptor(path=os.path.join(str(tmp_path), "b", "inner"), size=3),
        FileDescriptor(path=os.path.join(str(tmp_path), "c"), size=0),
    ]


def test_walk_skips_symlinks_and_does_not_follow_them(tmp_path: Path) -> None:
    real = tmp_path / "real"
    real.mkdir()
    (real / "f").write_bytes(b"data")
    os.symlink(real / "f", tmp_path / "link_to_file")
    os.symlink(real, tmp_path / "link_to_dir")

    status, descriptors, _ = _walk(str(tmp_path))

    assert status is ExitStatus.OK
    assert [item.path for item in descriptors] == [str(real / "f")]


def test_walk_skips_fifos(tmp_path: Path) -> None:
    if not hasattr(os, "mkfifo"):
        pytest.skip("mkfifo unavailable on this platform")
    os.mkfifo(tmp_path / "pipe")
    (tmp_path / "file").write_bytes(b"z")

    _, descriptors, _ = _walk(str(tmp_path))

    assert [item.path for item in descriptors] == [str(tmp_path / "file")]


def test_missing_root_reports_one_error_and_partial_failure(tmp_path: Path) -> None:
    missing = tmp_path / "nope"

    status, descriptors, messages = _walk(str(missing))

    assert status is ExitStatus.PARTIAL_FAILURE
    assert descriptors == []
    assert len(messages) == 1
    assert messages[0].startswith(str(missing))


def test_regular_file_root_is_emitted_as_itself(tmp_path: Path) -> None:
    target = tmp_path / "single"
    target.write_bytes(b"abc")

    status, descriptors, _ = _walk(str(target))

    assert status is ExitStatus.OK
    assert descriptors == [FileDescriptor(path=str(target), size=3)]


def test_unlistable_directory_is_reported_and_walk_continues(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / "locked").mkdir()
    (tmp_path / "locked" / "hidden").write_bytes(b"h")
    (tmp_path / "open").mkdir()
    (tmp_path / "open" / "visible").write_bytes(b"v")
    locked = os.path.join(str(tmp_path), "locked")
    real_scandir = os.scandir

    def fake_scandir(path: str):  # type: ignore[no-untyped-def]
        if path == locked:
            raise PermissionError(13, "Permission denied", path)
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", fake_scandir)

    status, descriptors, messages = _walk(str(tmp_path))

    assert status is ExitStatus.PARTIAL_FAILURE
    assert [item.path for item in descriptors] == [os.path.join(str(tmp_path), "open", "visible")]
    assert messages == [f"{locked}: Permission denied"]
