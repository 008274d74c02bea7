from __future__ import annotations

"""Best-effort rendering of backend timestamp tokens for display."""

import re
from datetime import datetime
from typing import Optional

_FILE_SAFE_RE = re.compile(
    r"(\d{4}-\d{2}-\d{2})T(\d{2})-(\d{2})-(\d{2})(\.\d+)?(Z|[+-]\d{2}-\d{2})?",
    re.ASCII,
)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse RFC 3339 or file-safe (``HH-MM-SS``) tokens, ``None`` when unparseable."""
    text = str(value or "").strip()
    if not text:
        return None
    match = _FILE_SAFE_RE.fullmatch(text)
    if match:
        date_part, hh, mm, ss, fraction, zone = match.groups()
        if zone and zone != "Z":
            zone = f"{zone[:3]}:{zone[4:]}"
        text = f"{date_part}T{hh}:{mm}:{ss}{fraction or ''}{zone or ''}"
    normalized = text.replace(" ", "T")
    if normalized.endswith("Z"):
        normalized = normalized[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(normalized)
    except ValueError:
        return _parse_with_fallback(text)


def _parse_with_fallback(text: str) -> Optional[datetime]:
    fallback_formats = (
        "%Y-%m-%d_%H-%M-%S",
        "%Y-%m-%d %H:%M:%S",
        "%Y-%m-%dT%H:%M:%S",
    )
    for fmt in fallback_formats:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def format_timestamp(value: Optional[str]) -> str:
    """Return a ``YYYY-MM-DD HH:MM:SS`` label, or the raw token if it cannot be parsed."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return str(value or "")
    label = parsed.strftime("%Y-%m-%d %H:%M:%S")
    offset = parsed.utcoffset()
    if offset is None:
        return label
    if not offset:
        return f"{label} UTC"
    return f"{label} {parsed.strftime('%z')}"


__all__ = ["format_timestamp", "parse_timestamp"]
