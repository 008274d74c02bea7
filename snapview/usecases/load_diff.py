from __future__ import annotations

from dataclasses import dataclass

from snapview.domain.entities import DiffResult, Host, Timestamp
from snapview.domain.ports import SnapshotPort, UseCaseError
from snapview.usecases.error_mapping import map_api_error


@dataclass
class LoadDiff:
    """Fetch the upstream diff between two snapshots of one host."""

    snapshot_port: SnapshotPort

    def __call__(self, host: Host, timestamp_a: Timestamp, timestamp_b: Timestamp) -> DiffResult:
        if not host or not timestamp_a or not timestamp_b:
            raise UseCaseError("NO_SELECTION", "Host and two timestamps are required.")
        if timestamp_a == timestamp_b:
            raise UseCaseError("SAME_TIMESTAMP", "Choose two different timestamps to compare.")
        try:
            return self.snapshot_port.get_diff(host, timestamp_a, timestamp_b)
        except UseCaseError:
            raise
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="LOAD_DIFF_FAILED",
                default_message="Could not load differences.",
            ) from exc


__all__ = ["LoadDiff"]
