"""Command-line entrypoint."""

from __future__ import annotations

import argparse
import sys
from dataclasses import asdict
from pathlib import Path
from typing import NoReturn, TextIO

from dupes.config import CliOverrides, ScanConfig, default_program_name, load_effective_config
from dupes.logging import JsonlAuditLogger, RunEvent, new_run_id, utc_timestamp
from dupes.report import write_report
from dupes.scan import ExitStatus, ScanResult, run_scan


class UsageError(Exception):
    """Raised for invalid invocations, before any traversal begins."""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def build_arg_parser(prog: str | None = None) -> argparse.ArgumentParser:
    """Build argument parser for scan options."""
    parser = _ArgumentParser(
        prog=prog or default_program_name(),
        description="Find files with identical size and SHA-1 content digest.",
    )
    parser.add_argument("root", nargs="*", help="directory to scan (default: .)")
    parser.add_argument(
        "--pairs", action="store_true", help="print duplicate files' pathnames in pairs"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="no error messages during the tree walk"
    )
    parser.add_argument("--queue-size", type=int, required=False, default=None)
    parser.add_argument("--error-buffer", type=int, required=False, default=None)
    parser.add_argument("--chunk-bytes", type=int, required=False, default=None)
    parser.add_argument("--audit-log", required=False, default=None)
    return parser


def parse_config(argv: list[str] | None = None, prog: str | None = None) -> ScanConfig:
    """Parse arguments into an effective config; raises UsageError."""
    parser = build_arg_parser(prog)
    args = parser.parse_args(argv)
    if len(args.root) > 1:
        raise UsageError("at most one root directory may be given")
    root = args.root[0] if args.root else "."
    overrides = CliOverrides(
        pairs=args.pairs,
        quiet=args.quiet,
        queue_size=args.queue_size,
        error_buffer=args.error_buffer,
        chunk_bytes=args.chunk_bytes,
        program=parser.prog,
        audit_log=Path(args.audit_log) if args.audit_log is not None else None,
    )
    try:
        return load_effective_config(root, overrides)
    except ValueError as exc:
        raise UsageError(str(exc)) from exc


def record_run(config: ScanConfig, result: ScanResult) -> None:
    """Append a run summary to the configured audit log, if any."""
    if config.audit_log is None:
        return
    logger = JsonlAuditLogger(config.audit_log)
    logger.append(
        RunEvent(
            timestamp=utc_timestamp(),
            run_id=new_run_id(),
            root=config.root,
            exit_status=int(result.exit_status),
            ok=result.exit_status is ExitStatus.OK,
            metadata={
                "config": config.to_public_dict(),
                "profile": asdict(result.profile),
            },
        )
    )


def main(
    argv: list[str] | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Entrypoint for the dupes command."""
    out_stream = stdout if stdout is not None else sys.stdout
    err_stream = stderr if stderr is not None else sys.stderr
    prog = default_program_name()
    try:
        config = parse_config(argv, prog=prog)
    except UsageError as exc:
        err_stream.write(f"usage: {prog} [flags] [root]\n")
        err_stream.write(f"{prog}: {exc}\n")
        return int(ExitStatus.USAGE_ERROR)

    result = run_scan(config, stderr=err_stream)
    write_report(result.groups, out_stream, pairs=config.pairs)
    record_run(config, result)
    return int(result.exit_status)


if __name__ == "__main__":
    raise SystemExit(main())
