from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from snapview.domain.ports import SnapshotPort, UseCaseError
from snapview.usecases.error_mapping import map_api_error


@dataclass
class TestConnection:
    """Probe the snapshot service health endpoint."""

    __test__ = False  # not a pytest class

    snapshot_port: SnapshotPort

    def __call__(self) -> Dict[str, Any]:
        try:
            message = self.snapshot_port.health()
        except UseCaseError:
            raise
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="HEALTH_FAILED",
                default_message="Snapshot service is not reachable.",
            ) from exc
        return {"ok": True, "message": message}


__all__ = ["TestConnection"]
