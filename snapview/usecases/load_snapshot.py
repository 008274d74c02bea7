from __future__ import annotations

from dataclasses import dataclass

from snapview.domain.entities import Host, SnapshotContent, Timestamp
from snapview.domain.ports import SnapshotPort, UseCaseError
from snapview.usecases.error_mapping import map_api_error


@dataclass
class LoadSnapshot:
    snapshot_port: SnapshotPort

    def __call__(self, host: Host, timestamp: Timestamp) -> SnapshotContent:
        if not host or not timestamp:
            raise UseCaseError("NO_SELECTION", "Host and timestamp are required.")
        try:
            return self.snapshot_port.get_snapshot(host, timestamp)
        except UseCaseError:
            raise
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="LOAD_SNAPSHOT_FAILED",
                default_message="Could not load snapshot content.",
            ) from exc


__all__ = ["LoadSnapshot"]
