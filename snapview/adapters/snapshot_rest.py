"""REST adapter implementing ``SnapshotPort`` against the snapshot service.

Routes (relative to the configured base URL, e.g. ``http://localhost:8080/api``):
    - ``GET  /health``                         plain-text liveness
    - ``GET  /host/all``                       JSON list of hosts
    - ``GET  /host?ip=<host>``                 JSON list of timestamps
    - ``GET  /snapshot?ip=<host>&at=<ts>``     snapshot document
    - ``GET  /snapshot/diff?ip=&t1=&t2=``      ``{"DiffStatus", "Differences"}``
    - ``POST /snapshot``                       multipart upload, field ``file``
"""

from __future__ import annotations

import io
import logging
from typing import Any, List, Optional

import requests

from snapview.domain.entities import (
    DiffResult,
    Host,
    SnapshotContent,
    Timestamp,
    diff_result_from_payload,
)
from snapview.domain.ports import SnapshotPort

from snapview.adapters.api_errors import ApiError, ApiNoContentError, raise_for_status
from snapview.adapters.http_client import HttpConfig, RetryingSession

LOGGER = logging.getLogger(__name__)


class SnapshotRestAdapter(SnapshotPort):
    """HTTP adapter for host, snapshot, diff and upload endpoints."""

    def __init__(
        self,
        base_url: str,
        *,
        api_key: Optional[str] = None,
        request_timeout_s: int = 10,
        retries: int = 2,
    ) -> None:
        base = str(base_url or "").strip()
        if not base:
            raise ValueError("SnapshotRestAdapter requires a base URL")
        self.base_url = base.rstrip("/")
        self.cfg = HttpConfig(request_timeout_s=request_timeout_s, retries=retries)
        self.session = RetryingSession(api_key or None, self.cfg)

    # ---------- SnapshotPort ----------

    def health(self) -> str:
        resp = self.session.get(self._make_url("/health"), accept="text/plain")
        raise_for_status(resp, "health")
        return str(getattr(resp, "text", "") or "").strip()

    def list_hosts(self) -> List[Host]:
        resp = self.session.get(self._make_url("/host/all"))
        raise_for_status(resp, "list_hosts")
        return self._string_list(resp, "list_hosts")

    def list_timestamps(self, host: Host) -> List[Timestamp]:
        resp = self.session.get(self._make_url("/host"), params={"ip": host})
        raise_for_status(resp, f"list_timestamps[{host}]")
        return self._string_list(resp, f"list_timestamps[{host}]")

    def get_snapshot(self, host: Host, timestamp: Timestamp) -> SnapshotContent:
        ctx = f"get_snapshot[{host}@{timestamp}]"
        resp = self.session.get(self._make_url("/snapshot"), params={"ip": host, "at": timestamp})
        raise_for_status(resp, ctx)
        self._ensure_body(resp, ctx)
        return self._json(resp, ctx)

    def get_diff(
        self, host: Host, timestamp_a: Timestamp, timestamp_b: Timestamp
    ) -> DiffResult:
        ctx = f"get_diff[{host}:{timestamp_a}..{timestamp_b}]"
        resp = self.session.get(
            self._make_url("/snapshot/diff"),
            params={"ip": host, "t1": timestamp_a, "t2": timestamp_b},
        )
        raise_for_status(resp, ctx)
        self._ensure_body(resp, ctx)
        payload = self._json(resp, ctx)
        if not isinstance(payload, dict):
            raise ApiError(f"{ctx}: invalid JSON response shape: expected object", context=ctx)
        if not str(payload.get("DiffStatus") or payload.get("status") or "").strip():
            raise ApiError(f"{ctx}: diff status missing", payload=payload, context=ctx)
        return diff_result_from_payload(payload)

    def upload_snapshot(self, filename: str, data: bytes) -> None:
        ctx = f"upload_snapshot[{filename}]"
        files = {"file": (filename, io.BytesIO(data), "application/json")}
        resp = self.session.post_multipart(self._make_url("/snapshot"), files=files)
        raise_for_status(resp, ctx)
        LOGGER.info("Uploaded snapshot %s (%d bytes)", filename, len(data))

    # ------------------------------------------------------------------
    def _make_url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    @staticmethod
    def _ensure_body(resp: requests.Response, ctx: str) -> None:
        """The service answers 204 when a snapshot is missing on disk or in its index."""
        if resp.status_code == 204:
            raise ApiNoContentError(f"{ctx}: snapshot not found", context=ctx)

    @staticmethod
    def _json(resp: requests.Response, ctx: str) -> Any:
        try:
            return resp.json()
        except Exception:
            snippet = (getattr(resp, "text", "") or "")[:400]
            raise ApiError(f"{ctx}: invalid JSON response: {snippet}", context=ctx)

    def _string_list(self, resp: requests.Response, ctx: str) -> List[str]:
        payload = self._json(resp, ctx)
        # An empty collection is encoded as null.
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise ApiError(f"{ctx}: invalid JSON response shape: expected list", context=ctx)
        return [str(item) for item in payload if item is not None]


__all__ = ["SnapshotRestAdapter"]
