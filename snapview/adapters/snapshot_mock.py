from __future__ import annotations

import difflib
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from snapview.adapters.api_errors import ApiClientError, ApiNoContentError
from snapview.domain.entities import DiffResult, DiffStatus, Host, SnapshotContent, Timestamp
from snapview.domain.ports import SnapshotPort
from snapview.domain.snapshot_filename import EXPECTED_PATTERN, parse_snapshot_filename

_RED = "\x1b[0;31m"
_GREEN = "\x1b[0;32m"
_CYAN = "\x1b[0;36m"
_RESET = "\x1b[0m"


@dataclass
class SnapshotMockAdapter(SnapshotPort):
    """Offline substitute for ``SnapshotRestAdapter`` with deterministic responses.

    Snapshots are kept per host in upload order, mirroring how the service
    lists them. Diffs are unified line diffs of the pretty-printed documents,
    colorized with the same SGR codes the service emits.
    """

    snapshots: Dict[Host, Dict[Timestamp, SnapshotContent]] = field(default_factory=dict)

    # ---------- SnapshotPort ----------

    def health(self) -> str:
        return "All Connected!"

    def list_hosts(self) -> List[Host]:
        return list(self.snapshots)

    def list_timestamps(self, host: Host) -> List[Timestamp]:
        return list(self.snapshots.get(host, {}))

    def get_snapshot(self, host: Host, timestamp: Timestamp) -> SnapshotContent:
        try:
            return self.snapshots[host][timestamp]
        except KeyError:
            raise ApiNoContentError(
                f"get_snapshot[{host}@{timestamp}]: snapshot not found",
                context="get_snapshot",
            ) from None

    def get_diff(
        self, host: Host, timestamp_a: Timestamp, timestamp_b: Timestamp
    ) -> DiffResult:
        left = self._lines(self.get_snapshot(host, timestamp_a))
        right = self._lines(self.get_snapshot(host, timestamp_b))
        if left == right:
            return DiffResult(status=DiffStatus.IDENTICAL, differences=None, raw_status="identical")
        body: List[str] = []
        for line in difflib.unified_diff(left, right, timestamp_a, timestamp_b, lineterm=""):
            if line.startswith(("---", "+++", "@@")):
                body.append(f"{_CYAN}{line}{_RESET}")
            elif line.startswith("-"):
                body.append(f"{_RED}{line}{_RESET}")
            elif line.startswith("+"):
                body.append(f"{_GREEN}{line}{_RESET}")
            else:
                body.append(line)
        return DiffResult(
            status=DiffStatus.DIFFERENT,
            differences="\n".join(body),
            raw_status="different",
        )

    def upload_snapshot(self, filename: str, data: bytes) -> None:
        parsed = parse_snapshot_filename(filename)
        if parsed is None:
            raise ApiClientError(
                f"upload_snapshot: expected {EXPECTED_PATTERN} (HTTP 400)",
                status=400,
                hint=f"expected {EXPECTED_PATTERN}",
            )
        try:
            content = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as exc:
            raise ApiClientError(
                "upload_snapshot: invalid JSON body (HTTP 400)", status=400, hint=str(exc)
            ) from exc
        timestamp = parsed.iso_timestamp
        bucket = self.snapshots.setdefault(parsed.host, {})
        if timestamp in bucket:
            raise ApiClientError(
                f"upload_snapshot: duplicate snapshot {parsed.filename} (HTTP 409)",
                status=409,
                hint=f"Attempting to add duplicate file for host: {parsed.filename}",
            )
        bucket[timestamp] = content

    # ------------------------------------------------------------------
    def add(self, host: Host, timestamp: Timestamp, content: SnapshotContent) -> None:
        self.snapshots.setdefault(host, {})[timestamp] = content

    @staticmethod
    def _lines(content: Any) -> List[str]:
        return json.dumps(content, indent=2, sort_keys=True).splitlines()


def demo_adapter() -> SnapshotMockAdapter:
    """Return a mock preloaded with two hosts for ``--demo`` runs."""
    adapter = SnapshotMockAdapter()
    samples: List[Tuple[Host, Timestamp, Dict[str, Any]]] = [
        ("10.0.0.5", "2024-01-01T00:00:00Z", {"services": [{"port": 22, "name": "ssh"}]}),
        (
            "10.0.0.5",
            "2024-01-02T00:00:00Z",
            {"services": [{"port": 22, "name": "ssh"}, {"port": 443, "name": "https"}]},
        ),
        ("192.168.1.1", "2024-01-15T10:30:00Z", {"services": [{"port": 80, "name": "http"}]}),
    ]
    for host, timestamp, content in samples:
        adapter.add(host, timestamp, content)
    return adapter


__all__ = ["SnapshotMockAdapter", "demo_adapter"]
