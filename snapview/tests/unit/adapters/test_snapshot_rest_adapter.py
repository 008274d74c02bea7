from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import pytest

from snapview.adapters.api_errors import (
    ApiClientError,
    ApiError,
    ApiNoContentError,
    ApiServerError,
)
from snapview.adapters.snapshot_rest import SnapshotRestAdapter
from snapview.domain.entities import DiffStatus

_NO_JSON = object()


class _ResponseStub:
    def __init__(self, payload: Any = _NO_JSON, status_code: int = 200, text: str = "") -> None:
        self._payload = payload
        self.status_code = status_code
        self.text = text if text or payload is _NO_JSON else str(payload)

    def json(self) -> Any:
        if self._payload is _NO_JSON:
            raise ValueError("no JSON body")
        return self._payload


class _SessionStub:
    def __init__(self, responses: Sequence[_ResponseStub]) -> None:
        self._responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def _next(self) -> _ResponseStub:
        if not self._responses:
            raise RuntimeError("No stub response configured")
        return self._responses.pop(0)

    def get(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        accept: str = "application/json",
        timeout: Optional[int] = None,
    ) -> _ResponseStub:
        self.calls.append({"method": "GET", "url": url, "params": params, "accept": accept})
        return self._next()

    def post_multipart(
        self,
        url: str,
        *,
        files: Dict[str, Any],
        timeout: Optional[int] = None,
    ) -> _ResponseStub:
        name, handle, content_type = files["file"]
        self.calls.append(
            {
                "method": "POST",
                "url": url,
                "filename": name,
                "body": handle.read(),
                "content_type": content_type,
            }
        )
        return self._next()


def _adapter(*responses: _ResponseStub) -> tuple[SnapshotRestAdapter, _SessionStub]:
    adapter = SnapshotRestAdapter("http://snapshots.local:8080/api/")
    stub = _SessionStub(responses)
    adapter.session = stub  # type: ignore[assignment]
    return adapter, stub


def test_base_url_is_required() -> None:
    with pytest.raises(ValueError):
        SnapshotRestAdapter("  ")


def test_health_returns_plain_text() -> None:
    adapter, stub = _adapter(_ResponseStub(text="All Connected!\n"))

    assert adapter.health() == "All Connected!"
    assert stub.calls[0]["url"] == "http://snapshots.local:8080/api/health"
    assert stub.calls[0]["accept"] == "text/plain"


def test_list_hosts_hits_host_all() -> None:
    adapter, stub = _adapter(_ResponseStub(["10.0.0.5", "192.168.1.1"]))

    assert adapter.list_hosts() == ["10.0.0.5", "192.168.1.1"]
    assert stub.calls[0]["url"] == "http://snapshots.local:8080/api/host/all"


def test_null_host_list_means_empty() -> None:
    adapter, _ = _adapter(_ResponseStub(None))
    assert adapter.list_hosts() == []


def test_list_hosts_rejects_non_list() -> None:
    adapter, _ = _adapter(_ResponseStub({"hosts": []}))
    with pytest.raises(ApiError):
        adapter.list_hosts()


def test_list_timestamps_keeps_backend_order() -> None:
    payload = ["2024-01-02T00:00:00Z", "2024-01-01T00:00:00Z"]
    adapter, stub = _adapter(_ResponseStub(payload))

    assert adapter.list_timestamps("10.0.0.5") == payload
    assert stub.calls[0]["url"] == "http://snapshots.local:8080/api/host"
    assert stub.calls[0]["params"] == {"ip": "10.0.0.5"}


def test_get_snapshot_passes_host_and_timestamp() -> None:
    adapter, stub = _adapter(_ResponseStub({"services": [{"port": 22}]}))

    content = adapter.get_snapshot("10.0.0.5", "2024-01-01T00:00:00Z")

    assert content == {"services": [{"port": 22}]}
    assert stub.calls[0]["url"].endswith("/snapshot")
    assert stub.calls[0]["params"] == {"ip": "10.0.0.5", "at": "2024-01-01T00:00:00Z"}


def test_get_snapshot_no_content_is_not_found() -> None:
    adapter, _ = _adapter(_ResponseStub(status_code=204))
    with pytest.raises(ApiNoContentError) as excinfo:
        adapter.get_snapshot("10.0.0.5", "2024-01-01T00:00:00Z")
    assert excinfo.value.status == 204


def test_get_snapshot_invalid_json_raises_api_error() -> None:
    adapter, _ = _adapter(_ResponseStub(text="<html>"))
    with pytest.raises(ApiError):
        adapter.get_snapshot("10.0.0.5", "2024-01-01T00:00:00Z")


def test_plain_text_server_error_becomes_hint() -> None:
    adapter, _ = _adapter(_ResponseStub(status_code=500, text="Error reading snapshot file"))
    with pytest.raises(ApiServerError) as excinfo:
        adapter.get_snapshot("10.0.0.5", "2024-01-01T00:00:00Z")
    assert excinfo.value.status == 500
    assert excinfo.value.hint == "Error reading snapshot file"


def test_bad_request_is_client_error() -> None:
    adapter, _ = _adapter(_ResponseStub(status_code=400, text="Missing 'ip' parameter"))
    with pytest.raises(ApiClientError) as excinfo:
        adapter.list_timestamps("")
    assert excinfo.value.status == 400


def test_get_diff_full_match_is_identical() -> None:
    adapter, stub = _adapter(_ResponseStub({"DiffStatus": "FullMatch", "Differences": ""}))

    result = adapter.get_diff("10.0.0.5", "t1", "t2")

    assert result.status is DiffStatus.IDENTICAL
    assert result.differences is None
    assert stub.calls[0]["url"].endswith("/snapshot/diff")
    assert stub.calls[0]["params"] == {"ip": "10.0.0.5", "t1": "t1", "t2": "t2"}


def test_get_diff_keeps_ansi_text() -> None:
    body = "\x1b[0;31m-a\x1b[0m\n\x1b[0;32m+b\x1b[0m"
    adapter, _ = _adapter(_ResponseStub({"DiffStatus": "NoMatch", "Differences": body}))

    result = adapter.get_diff("10.0.0.5", "t1", "t2")

    assert result.status is DiffStatus.DIFFERENT
    assert result.differences == body
    assert result.raw_status == "NoMatch"


def test_get_diff_without_status_is_rejected() -> None:
    adapter, _ = _adapter(_ResponseStub({"Differences": "x"}))
    with pytest.raises(ApiError):
        adapter.get_diff("10.0.0.5", "t1", "t2")


def test_upload_posts_multipart_file_field() -> None:
    adapter, stub = _adapter(_ResponseStub(text="Snapshot uploaded successfully", status_code=201))
    name = "host_10.0.0.5_2024-01-01T00-00-00Z.json"

    adapter.upload_snapshot(name, b'{"a": 1}')

    call = stub.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "http://snapshots.local:8080/api/snapshot"
    assert call["filename"] == name
    assert call["body"] == b'{"a": 1}'
    assert call["content_type"] == "application/json"


def test_upload_conflict_carries_server_text() -> None:
    adapter, _ = _adapter(
        _ResponseStub(status_code=409, text="Attempting to add duplicate file for host")
    )
    with pytest.raises(ApiClientError) as excinfo:
        adapter.upload_snapshot("host_10.0.0.5_2024-01-01T00-00-00Z.json", b"{}")
    assert excinfo.value.status == 409
    assert excinfo.value.hint == "Attempting to add duplicate file for host"
