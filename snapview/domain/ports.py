from __future__ import annotations
from typing import Any, Dict, List, Optional, Protocol

from .entities import DiffResult, Host, SnapshotContent, Timestamp


# ---- Error model ----
class UseCaseError(Exception):
    """Base class for use case level errors (user-presentable)."""

    def __init__(self, code: str, message: str, meta: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.meta = meta or {}


# ---- Ports (Hexagonal boundaries) ----
class SnapshotPort(Protocol):
    """Host/snapshot listing, content, diff and upload against the snapshot API."""

    def health(self) -> str: ...
    def list_hosts(self) -> List[Host]: ...
    def list_timestamps(self, host: Host) -> List[Timestamp]: ...  # backend order
    def get_snapshot(self, host: Host, timestamp: Timestamp) -> SnapshotContent: ...
    def get_diff(
        self, host: Host, timestamp_a: Timestamp, timestamp_b: Timestamp
    ) -> DiffResult: ...
    def upload_snapshot(self, filename: str, data: bytes) -> None: ...


class StoragePort(Protocol):
    """Persistence for user preferences."""

    def save_user_prefs(self, prefs: Dict) -> None: ...
    def load_user_prefs(self) -> Dict: ...
