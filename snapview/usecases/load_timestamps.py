from __future__ import annotations

from dataclasses import dataclass
from typing import List

from snapview.domain.entities import Host, Timestamp
from snapview.domain.ports import SnapshotPort, UseCaseError
from snapview.usecases.error_mapping import map_api_error


@dataclass
class LoadTimestamps:
    snapshot_port: SnapshotPort

    def __call__(self, host: Host) -> List[Timestamp]:
        """Return snapshot timestamps for ``host`` in backend order (never re-sorted)."""
        normalized = str(host or "").strip()
        if not normalized:
            raise UseCaseError("NO_HOST", "Host is required.")
        try:
            return list(self.snapshot_port.list_timestamps(normalized))
        except UseCaseError:
            raise
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="LOAD_TIMESTAMPS_FAILED",
                default_message=f"Could not load timestamps for {normalized}.",
            ) from exc


__all__ = ["LoadTimestamps"]
