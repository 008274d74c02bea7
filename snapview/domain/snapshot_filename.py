from __future__ import annotations

"""Client-side gate for snapshot upload filenames.

The grammar is shared with the snapshot service, which rejects anything else:
``host_<ip>_<YYYY-MM-DD>T<HH-MM-SS>[.fraction](Z|±HH-MM).json``. The check is
shape-only; octets are not range-checked against 0-255.
"""

import re
from typing import Optional

from .entities import SnapshotFilename
from .errors import SnapshotFilenameError

EXPECTED_PATTERN = "host_<ip>_<YYYY-MM-DD>T<HH-MM-SS>[.fraction](Z|±HH-MM).json"

_FILENAME_RE = re.compile(
    r"host_"
    r"(?P<host>\d{1,3}(?:\.\d{1,3}){3})_"
    r"(?P<timestamp>"
    r"\d{4}-\d{2}-\d{2}"  # date
    r"T\d{2}-\d{2}-\d{2}"  # clock with dashes
    r"(?:\.\d+)?"  # fraction
    r"(?:Z|[+-]\d{2}-\d{2})"  # zone
    r")"
    r"\.json",
    re.ASCII,
)


def _basename(filename: str) -> str:
    return re.split(r"[\\/]", filename)[-1]


def parse_snapshot_filename(filename: Optional[str]) -> Optional[SnapshotFilename]:
    """Return the parsed filename, or ``None`` when it does not match."""
    name = _basename(filename or "")
    match = _FILENAME_RE.fullmatch(name)
    if match is None:
        return None
    return SnapshotFilename(
        host=match.group("host"),
        timestamp=match.group("timestamp"),
        filename=name,
    )


def validate_snapshot_filename(filename: Optional[str]) -> SnapshotFilename:
    """Parse ``filename`` or raise ``SnapshotFilenameError`` with a readable reason."""
    parsed = parse_snapshot_filename(filename)
    if parsed is None:
        name = _basename(filename or "")
        if not name:
            reason = f"No file selected. Expected: {EXPECTED_PATTERN}"
        else:
            reason = f"Invalid filename format '{name}'. Expected: {EXPECTED_PATTERN}"
        raise SnapshotFilenameError(name, reason)
    return parsed


__all__ = [
    "EXPECTED_PATTERN",
    "parse_snapshot_filename",
    "validate_snapshot_filename",
]
