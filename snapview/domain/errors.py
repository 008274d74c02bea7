"""Domain-level error types for use-case and adapter mapping.

These errors cross layer boundaries without leaking transport-specific
exception details.
"""

from __future__ import annotations


class SnapshotFilenameError(ValueError):
    """Raised when an upload filename does not match the snapshot grammar."""

    def __init__(self, filename: str, reason: str) -> None:
        super().__init__(reason)
        self.filename = filename
        self.reason = reason


__all__ = ["SnapshotFilenameError"]
