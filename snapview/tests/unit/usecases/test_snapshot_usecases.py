from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import pytest

from snapview.adapters.api_errors import ApiClientError, ApiNoContentError, ApiTimeoutError
from snapview.domain.entities import DiffResult, DiffStatus
from snapview.domain.ports import UseCaseError
from snapview.usecases.list_hosts import ListHosts
from snapview.usecases.load_diff import LoadDiff
from snapview.usecases.load_snapshot import LoadSnapshot
from snapview.usecases.load_timestamps import LoadTimestamps
from snapview.usecases.test_connection import TestConnection
from snapview.usecases.upload_snapshot import UploadSnapshot

VALID_NAME = "host_10.0.0.5_2024-01-01T00-00-00Z.json"


class _PortStub:
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if self.error is not None:
            raise self.error

    def health(self) -> str:
        self._record("health")
        return "All Connected!"

    def list_hosts(self) -> List[str]:
        self._record("list_hosts")
        return ["10.0.0.5"]

    def list_timestamps(self, host: str) -> List[str]:
        self._record("list_timestamps", host)
        return ["2024-01-02T00:00:00Z", "2024-01-01T00:00:00Z"]

    def get_snapshot(self, host: str, timestamp: str) -> Dict[str, Any]:
        self._record("get_snapshot", host, timestamp)
        return {"host": host}

    def get_diff(self, host: str, timestamp_a: str, timestamp_b: str) -> DiffResult:
        self._record("get_diff", host, timestamp_a, timestamp_b)
        return DiffResult(status=DiffStatus.IDENTICAL)

    def upload_snapshot(self, filename: str, data: bytes) -> None:
        self._record("upload_snapshot", filename, data)


def test_list_hosts_returns_port_hosts() -> None:
    assert ListHosts(_PortStub())() == ["10.0.0.5"]


def test_list_hosts_maps_timeouts() -> None:
    with pytest.raises(UseCaseError) as excinfo:
        ListHosts(_PortStub(ApiTimeoutError("slow")))()
    assert excinfo.value.code == "REQUEST_TIMEOUT"


def test_load_timestamps_requires_host_and_keeps_order() -> None:
    port = _PortStub()
    with pytest.raises(UseCaseError) as excinfo:
        LoadTimestamps(port)("  ")
    assert excinfo.value.code == "NO_HOST"
    assert port.calls == []

    assert LoadTimestamps(port)(" 10.0.0.5 ") == ["2024-01-02T00:00:00Z", "2024-01-01T00:00:00Z"]
    assert port.calls == [("list_timestamps", ("10.0.0.5",))]


def test_load_snapshot_missing_is_not_found() -> None:
    with pytest.raises(UseCaseError) as excinfo:
        LoadSnapshot(_PortStub(ApiNoContentError("gone")))("10.0.0.5", "t1")
    assert excinfo.value.code == "NOT_FOUND"


def test_load_snapshot_requires_selection() -> None:
    with pytest.raises(UseCaseError) as excinfo:
        LoadSnapshot(_PortStub())("10.0.0.5", "")
    assert excinfo.value.code == "NO_SELECTION"


def test_load_diff_rejects_same_timestamp_without_calling_port() -> None:
    port = _PortStub()
    with pytest.raises(UseCaseError) as excinfo:
        LoadDiff(port)("10.0.0.5", "t1", "t1")
    assert excinfo.value.code == "SAME_TIMESTAMP"
    assert port.calls == []


def test_load_diff_unknown_failure_uses_default_code() -> None:
    with pytest.raises(UseCaseError) as excinfo:
        LoadDiff(_PortStub(RuntimeError("")))("10.0.0.5", "t1", "t2")
    assert excinfo.value.code == "LOAD_DIFF_FAILED"
    assert excinfo.value.message == "Could not load differences."


def test_connection_check_reports_health_text() -> None:
    assert TestConnection(_PortStub())() == {"ok": True, "message": "All Connected!"}


def test_connection_check_maps_auth_failure() -> None:
    with pytest.raises(UseCaseError) as excinfo:
        TestConnection(_PortStub(ApiClientError("ctx", status=401)))()
    assert excinfo.value.code == "AUTH_FAILED"


def test_upload_invalid_name_never_reaches_port() -> None:
    port = _PortStub()
    with pytest.raises(UseCaseError) as excinfo:
        UploadSnapshot(port)(filename="config.json", data=b"{}")
    assert excinfo.value.code == "INVALID_FILENAME"
    assert "Invalid filename format 'config.json'" in excinfo.value.message
    assert port.calls == []


def test_upload_rejects_empty_and_oversized_files() -> None:
    port = _PortStub()
    with pytest.raises(UseCaseError) as empty:
        UploadSnapshot(port)(filename=VALID_NAME, data=b"")
    assert empty.value.code == "UPLOAD_EMPTY"

    with pytest.raises(UseCaseError) as large:
        UploadSnapshot(port, max_bytes=4)(filename=VALID_NAME, data=b"{\"a\": 1}")
    assert large.value.code == "UPLOAD_TOO_LARGE"
    assert port.calls == []


def test_upload_sends_basename_and_returns_parsed_name() -> None:
    port = _PortStub()
    parsed = UploadSnapshot(port)(filename=f"/home/ops/{VALID_NAME}", data=b"{}")

    assert parsed.host == "10.0.0.5"
    assert port.calls == [("upload_snapshot", (VALID_NAME, b"{}"))]


def test_upload_conflict_and_unknown_failures() -> None:
    conflict = _PortStub(ApiClientError("ctx", status=409, hint="duplicate"))
    with pytest.raises(UseCaseError) as excinfo:
        UploadSnapshot(conflict)(filename=VALID_NAME, data=b"{}")
    assert excinfo.value.code == "CONFLICT"

    broken = _PortStub(RuntimeError("socket closed"))
    with pytest.raises(UseCaseError) as excinfo:
        UploadSnapshot(broken)(filename=VALID_NAME, data=b"{}")
    assert excinfo.value.code == "UPLOAD_FAILED"
    assert excinfo.value.message == "Snapshot upload failed."
