"""Scan configuration and deterministic merge order."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

DEFAULT_QUEUE_SIZE = 10
DEFAULT_ERROR_BUFFER = 10
DEFAULT_CHUNK_BYTES = 1024 * 128
QUEUE_SIZE_CAP = 65_536
ERROR_BUFFER_CAP = 65_536
CHUNK_BYTES_CAP = 16 * 1024 * 1024


@dataclass(slots=True, frozen=True)
class ScanConfig:
    """Fully merged scan configuration."""

    root: str
    pairs: bool
    quiet: bool
    queue_size: int
    error_buffer: int
    chunk_bytes: int
    program: str
    audit_log: Path | None

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot for the run audit log."""
        return {
            "root": self.root,
            "pairs": self.pairs,
            "quiet": self.quiet,
            "queue_size": self.queue_size,
            "error_buffer": self.error_buffer,
            "chunk_bytes": self.chunk_bytes,
            "program": self.program,
            "audit_log": str(self.audit_log) if self.audit_log is not None else None,
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional command-line overrides applied at highest precedence."""

    pairs: bool | None = None
    quiet: bool | None = None
    queue_size: int | None = None
    error_buffer: int | None = None
    chunk_bytes: int | None = None
    program: str | None = None
    audit_log: Path | None = None


def default_program_name() -> str:
    """Return the invocation name used to prefix diagnostics."""
    name = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else ""
    if not name or name == "__main__.py":
        return "dupes"
    return name


def default_config(root: str = ".") -> ScanConfig:
    """Build default config for a scan root."""
    return ScanConfig(
        root=root,
        pairs=False,
        quiet=False,
        queue_size=DEFAULT_QUEUE_SIZE,
        error_buffer=DEFAULT_ERROR_BUFFER,
        chunk_bytes=DEFAULT_CHUNK_BYTES,
        program=default_program_name(),
        audit_log=None,
    )


def apply_cli_overrides(config: ScanConfig, overrides: CliOverrides) -> ScanConfig:
    """Apply command-line overrides at highest precedence."""
    queue_size = _optional_positive_int_with_cap(
        overrides.queue_size, "queue_size", config.queue_size, QUEUE_SIZE_CAP
    )
    error_buffer = _optional_positive_int_with_cap(
        overrides.error_buffer, "error_buffer", config.error_buffer, ERROR_BUFFER_CAP
    )
    chunk_bytes = _optional_positive_int_with_cap(
        overrides.chunk_bytes, "chunk_bytes", config.chunk_bytes, CHUNK_BYTES_CAP
    )
    program = config.program
    if overrides.program is not None:
        if not isinstance(overrides.program, str) or not overrides.program.strip():
            raise ValueError("Config field 'program' must be a non-empty string.")
        program = overrides.program
    audit_log = config.audit_log
    if overrides.audit_log is not None:
        audit_log = overrides.audit_log.resolve()
    return ScanConfig(
        root=config.root,
        pairs=_optional_bool(overrides.pairs, "pairs", config.pairs),
        quiet=_optional_bool(overrides.quiet, "quiet", config.quiet),
        queue_size=queue_size,
        error_buffer=error_buffer,
        chunk_bytes=chunk_bytes,
        program=program,
        audit_log=audit_log,
    )


def load_effective_config(root: str = ".", overrides: CliOverrides | None = None) -> ScanConfig:
    """Load effective config using merge order defaults -> overrides."""
    return apply_cli_overrides(default_config(root), overrides or CliOverrides())


def _optional_bool(value: object, name: str, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValueError(f"Config field '{name}' must be a boolean.")
    return value


def _optional_positive_int_with_cap(
    value: object,
    name: str,
    default: int,
    cap: int | None,
) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"Config field '{name}' must be a positive integer.")
    if cap is not None and value > cap:
        raise ValueError(f"Config field '{name}' must be <= {cap}.")
    return value
