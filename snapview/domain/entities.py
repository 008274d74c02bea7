from __future__ import annotations

"""Domain value objects shared across adapters, use-cases, and view models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

Host = str
Timestamp = str
SnapshotContent = Any


class DiffStatus(str, Enum):
    """Verdict returned by the upstream diff service for two snapshots."""

    IDENTICAL = "identical"
    DIFFERENT = "different"

    @property
    def label(self) -> str:
        return "Identical" if self is DiffStatus.IDENTICAL else "Different"


@dataclass(frozen=True)
class DiffResult:
    """Comparison payload for two snapshots of the same host."""

    status: DiffStatus
    """Normalized verdict; the raw upstream token is kept in ``raw_status``."""

    differences: Optional[str] = None
    """Colorized diff body (ANSI SGR codes), absent when the service sent none."""

    raw_status: str = ""
    """Status token exactly as the service returned it, for diagnostics."""

    def __post_init__(self) -> None:
        if not isinstance(self.status, DiffStatus):
            raise TypeError("DiffResult.status must be a DiffStatus.")

    @property
    def identical(self) -> bool:
        return self.status is DiffStatus.IDENTICAL

    @property
    def has_text(self) -> bool:
        return bool(self.differences)


@dataclass(frozen=True)
class StyledRun:
    """Contiguous text span paired with the style active while it was emitted."""

    text: str
    style: Dict[str, str] = field(default_factory=dict)

    def css(self) -> str:
        """Render ``style`` as an inline CSS declaration list."""
        return "; ".join(f"{key}: {value}" for key, value in self.style.items())


@dataclass(frozen=True)
class SnapshotFilename:
    """Structured view of an accepted upload filename."""

    host: Host
    timestamp: Timestamp
    """File-safe timestamp token as written in the name (``HH-MM-SS`` clock)."""

    filename: str

    @property
    def iso_timestamp(self) -> str:
        """Return the RFC 3339 spelling the backend uses when listing snapshots."""
        date_part, _, rest = self.timestamp.partition("T")
        clock = rest[:8].replace("-", ":")
        tail = rest[8:]
        if tail.endswith("Z"):
            return f"{date_part}T{clock}{tail}"
        # Offset suffix: fraction (optional) then +HH-MM
        offset = tail[-6:]
        fraction = tail[:-6]
        return f"{date_part}T{clock}{fraction}{offset[:3]}:{offset[4:]}"


def coerce_diff_status(raw: Any) -> DiffStatus:
    """Map an upstream verdict token onto ``DiffStatus``.

    The service either speaks the two-value vocabulary directly or forwards
    the comparison library's verdict, where only a full match means the
    documents are identical.
    """
    token = str(raw or "").strip()
    if token.lower() == DiffStatus.IDENTICAL.value or token == "FullMatch":
        return DiffStatus.IDENTICAL
    return DiffStatus.DIFFERENT


def diff_result_from_payload(payload: Mapping[str, Any]) -> DiffResult:
    """Build a ``DiffResult`` from the service's JSON object."""
    raw_status = payload.get("DiffStatus", payload.get("status"))
    text = payload.get("Differences", payload.get("differences"))
    if text is not None and not isinstance(text, str):
        text = str(text)
    return DiffResult(
        status=coerce_diff_status(raw_status),
        differences=text or None,
        raw_status=str(raw_status or ""),
    )


__all__ = [
    "DiffResult",
    "DiffStatus",
    "Host",
    "SnapshotContent",
    "SnapshotFilename",
    "StyledRun",
    "Timestamp",
    "coerce_diff_status",
    "diff_result_from_payload",
]
