"""Domain package exports for value objects and pure navigation/parsing logic."""

from .ansi_styles import parse_ansi, runs_to_html, strip_ansi
from .entities import (
    DiffResult,
    DiffStatus,
    Host,
    SnapshotContent,
    SnapshotFilename,
    StyledRun,
    Timestamp,
)
from .errors import SnapshotFilenameError
from .selection import FetchIntent, FetchKind, SelectionState, SelectionStateMachine
from .snapshot_filename import parse_snapshot_filename, validate_snapshot_filename

__all__ = [
    "DiffResult",
    "DiffStatus",
    "FetchIntent",
    "FetchKind",
    "Host",
    "SelectionState",
    "SelectionStateMachine",
    "SnapshotContent",
    "SnapshotFilename",
    "SnapshotFilenameError",
    "StyledRun",
    "Timestamp",
    "parse_ansi",
    "parse_snapshot_filename",
    "runs_to_html",
    "strip_ansi",
    "validate_snapshot_filename",
]
