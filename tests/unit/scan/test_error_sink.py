from __future__ import annotations

import io

from dupes.scan import ErrorCollector, ErrorSink


def test_sink_prefixes_each_record_with_program_name() -> None:
    errors = ErrorCollector(capacity=1)
    stream = io.StringIO()
    sink = ErrorSink(errors, stream=stream, program="dupes")

    sink.start()
    errors.report("a: Permission denied", "walk")
    errors.report("b: No such file or directory", "hash")
    errors.close()
    sink.join()

    assert stream.getvalue() == (
        "dupes: a: Permission denied\n" "dupes: b: No such file or directory\n"
    )
    assert sink.drained == 2


def test_quiet_sink_drains_more_records_than_buffer_without_output() -> None:
    errors = ErrorCollector(capacity=1)
    stream = io.StringIO()
    sink = ErrorSink(errors, stream=stream, program="dupes", quiet=True)

    sink.start()
    for index in range(100):
        errors.report(f"file-{index}: boom", "hash")
    errors.close()
    sink.join()

    assert stream.getvalue() == ""
    assert sink.drained == 100
    assert errors.count("hash") == 100


class _BrokenStream(io.StringIO):
    def write(self, text: str) -> int:
        raise BrokenPipeError(32, "Broken pipe")


def test_sink_keeps_draining_after_stream_fails() -> None:
    errors = ErrorCollector(capacity=2)
    sink = ErrorSink(errors, stream=_BrokenStream(), program="dupes")

    sink.start()
    for index in range(50):
        errors.report(f"file-{index}: boom", "walk")
    errors.close()
    sink.join()

    assert sink.drained == 50


def test_sink_without_stream_discards_records() -> None:
    errors = ErrorCollector(capacity=1)
    sink = ErrorSink(errors, stream=None, program="dupes")

    sink.start()
    for index in range(5):
        errors.report(f"file-{index}: boom", "hash")
    errors.close()
    sink.join()

    assert sink.drained == 5
