from __future__ import annotations

import json

from snapview.domain.entities import DiffResult, DiffStatus
from snapview.domain.selection import FetchKind
from snapview.viewmodels.browser_vm import BrowserVM, TimestampRow

HOST = "10.0.0.5"
T1 = "2024-01-01T00:00:00Z"
T2 = "2024-01-02T00:00:00Z"


def _loaded_vm() -> BrowserVM:
    vm = BrowserVM()
    vm.set_hosts([HOST, "192.168.1.1"])
    intent = vm.select_host(HOST)
    assert vm.apply_result(intent, [T1, T2])
    return vm


def test_commands_notify_listener() -> None:
    calls = []
    vm = BrowserVM(on_changed=lambda: calls.append(1))
    vm.set_hosts([HOST])
    vm.select_host(HOST)
    assert len(calls) == 2


def test_select_host_sets_loading_status() -> None:
    vm = BrowserVM()
    intent = vm.select_host(HOST)
    assert intent.kind is FetchKind.TIMESTAMPS
    assert vm.status_message == f"Loading timestamps for {HOST}..."
    assert vm.select_host("") is None


def test_timestamp_rows_mark_selection_and_format_labels() -> None:
    vm = _loaded_vm()
    vm.select_timestamp(T2)

    assert vm.timestamp_rows() == [
        TimestampRow(timestamp=T1, label="2024-01-01 00:00:00 UTC", selected=False),
        TimestampRow(timestamp=T2, label="2024-01-02 00:00:00 UTC", selected=True),
    ]


def test_content_text_is_pretty_json() -> None:
    vm = _loaded_vm()
    assert vm.content_placeholder() == "Select a timestamp to view file content."

    intent = vm.select_timestamp(T1)
    assert vm.content_placeholder() == "Loading snapshot..."
    vm.apply_result(intent, {"services": [{"port": 22}]})

    assert vm.content_placeholder() == ""
    assert vm.content_text() == json.dumps({"services": [{"port": 22}]}, indent=2)
    assert vm.status_message == f"Snapshot {T1} loaded."


def test_out_of_order_content_responses() -> None:
    vm = _loaded_vm()
    first = vm.select_timestamp(T1)
    second = vm.select_timestamp(T2)

    assert vm.apply_result(second, {"day": 2})
    assert not vm.apply_result(first, {"day": 1})
    assert vm.state.content == {"day": 2}
    assert vm.status_message == f"Snapshot {T2} loaded."


def test_compare_flow_projections() -> None:
    vm = _loaded_vm()
    content = vm.select_timestamp(T1)
    vm.apply_result(content, {"a": 1})

    assert vm.toggle_compare_mode()
    assert vm.state.comparison_mode
    assert vm.compare_options() == [(T2, "2024-01-02 00:00:00 UTC")]
    assert vm.diff_placeholder() == "Select a timestamp to compare and view differences"

    diff = vm.select_compare_timestamp(T2)
    assert vm.diff_placeholder() == "Loading differences..."
    body = "\x1b[0;31m-a\x1b[0m"
    vm.apply_result(diff, DiffResult(status=DiffStatus.DIFFERENT, differences=body))

    assert vm.diff_status_label() == "Status: different"
    assert vm.diff_placeholder() == ""
    assert [run.text for run in vm.diff_runs()] == ["-a"]
    assert vm.diff_html() == '<span style="color: #ff6b6b">-a</span>'

    assert vm.toggle_compare_mode()
    assert not vm.state.comparison_mode
    assert vm.state.diff is None


def test_identical_diff_has_no_differences_placeholder() -> None:
    vm = _loaded_vm()
    vm.select_timestamp(T1)
    vm.enter_compare_mode()
    diff = vm.select_compare_timestamp(T2)
    vm.apply_result(diff, DiffResult(status=DiffStatus.IDENTICAL))

    assert vm.diff_status_label() == "Status: identical"
    assert vm.diff_placeholder() == "No differences found"
    assert vm.diff_runs() == []


def test_failed_diff_keeps_content_and_reports_message() -> None:
    vm = _loaded_vm()
    content = vm.select_timestamp(T1)
    vm.apply_result(content, {"kept": True})
    vm.enter_compare_mode()
    diff = vm.select_compare_timestamp(T2)

    assert vm.apply_failure(diff, "Server error, try again.")

    assert vm.status_message == "Server error, try again."
    assert vm.state.last_error == "Server error, try again."
    assert vm.state.content == {"kept": True}


def test_stale_failure_does_not_touch_status() -> None:
    vm = BrowserVM()
    old = vm.select_host("a")
    vm.select_host("b")
    assert not vm.apply_failure(old, "boom")
    assert vm.status_message == "Loading timestamps for b..."


def test_upload_result_is_recorded() -> None:
    vm = BrowserVM()
    vm.set_upload_result(True, "File uploaded successfully!")
    assert vm.upload_ok
    assert vm.upload_message == "File uploaded successfully!"


def _failed_diff_vm() -> BrowserVM:
    vm = _loaded_vm()
    vm.apply_result(vm.select_timestamp(T1), {"kept": True})
    vm.enter_compare_mode()
    diff = vm.select_compare_timestamp(T2)
    vm.apply_failure(diff, "Server error, try again.")
    return vm


def test_failed_diff_shows_reason_instead_of_empty_output() -> None:
    vm = _failed_diff_vm()

    assert vm.diff_failed()
    assert vm.diff_placeholder() == "Could not load differences: Server error, try again."


def test_same_compare_timestamp_retries_after_failure() -> None:
    vm = _failed_diff_vm()

    retry = vm.select_compare_timestamp(T2)

    assert retry is not None
    assert retry.kind is FetchKind.DIFF
    assert vm.diff_placeholder() == "Loading differences..."
    assert not vm.diff_failed()
    assert vm.apply_result(retry, DiffResult(status=DiffStatus.IDENTICAL))
    assert vm.diff_placeholder() == "No differences found"


def test_same_compare_timestamp_is_ignored_while_loading_or_loaded() -> None:
    vm = _loaded_vm()
    vm.apply_result(vm.select_timestamp(T1), {"kept": True})
    vm.enter_compare_mode()
    diff = vm.select_compare_timestamp(T2)

    assert vm.select_compare_timestamp(T2) is None
    assert vm.state.pending_for(FetchKind.DIFF) == diff

    vm.apply_result(diff, DiffResult(status=DiffStatus.IDENTICAL))
    assert vm.select_compare_timestamp(T2) is None
