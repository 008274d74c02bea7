from __future__ import annotations

from dataclasses import dataclass
from typing import List

from snapview.domain.entities import Host
from snapview.domain.ports import SnapshotPort, UseCaseError
from snapview.usecases.error_mapping import map_api_error


@dataclass
class ListHosts:
    snapshot_port: SnapshotPort

    def __call__(self) -> List[Host]:
        """Return every host with at least one stored snapshot."""
        try:
            return list(self.snapshot_port.list_hosts())
        except UseCaseError:
            raise
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="LIST_HOSTS_FAILED",
                default_message="Could not load hosts.",
            ) from exc


__all__ = ["ListHosts"]
