"""Snapshot browser view model: selection state plus render-ready projections.

Call context:
    ``snapview.web_ui.runtime.BrowserRuntime`` forwards UI commands here,
    performs the fetch each returned ``FetchIntent`` describes, and feeds the
    outcome back through ``apply_result`` / ``apply_failure``. NiceGUI pages
    read the projection helpers when refreshing.

Dependencies:
    Domain logic only (selection machine, ANSI parser, timestamp labels). No
    transport or use-case calls happen in this module.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Tuple

from ..domain.ansi_styles import parse_ansi, runs_to_html
from ..domain.entities import DiffResult, Host, StyledRun, Timestamp
from ..domain.selection import FetchIntent, FetchKind, SelectionState, SelectionStateMachine
from ..domain.time_utils import format_timestamp

LOGGER = logging.getLogger(__name__)


@dataclass
class TimestampRow:
    """Display row for one snapshot timestamp."""
    timestamp: Timestamp
    label: str
    selected: bool


class BrowserVM:
    """Owns the selection machine, host list and operator-facing status text."""

    def __init__(self, on_changed: Optional[Callable[[], None]] = None) -> None:
        self.machine = SelectionStateMachine()
        self.hosts: List[Host] = []
        self.status_message = "Ready."
        self.upload_message = ""
        self.upload_ok = False
        self.on_changed = on_changed

    @property
    def state(self) -> SelectionState:
        return self.machine.state

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def set_hosts(self, hosts: Iterable[Host]) -> None:
        self.hosts = list(hosts)
        self._changed()

    def select_host(self, host: Host) -> Optional[FetchIntent]:
        intent = self.machine.select_host(host)
        if intent is not None:
            self.status_message = f"Loading timestamps for {host}..."
        self._changed()
        return intent

    def select_timestamp(self, timestamp: Timestamp) -> Optional[FetchIntent]:
        intent = self.machine.select_timestamp_a(timestamp)
        if intent is not None:
            self.status_message = f"Loading snapshot {timestamp}..."
        self._changed()
        return intent

    def enter_compare_mode(self) -> bool:
        changed = self.machine.enter_compare_mode()
        self._changed()
        return changed

    def exit_compare_mode(self) -> bool:
        changed = self.machine.exit_compare_mode()
        self._changed()
        return changed

    def toggle_compare_mode(self) -> bool:
        if self.state.comparison_mode:
            return self.exit_compare_mode()
        return self.enter_compare_mode()

    def select_compare_timestamp(self, timestamp: Timestamp) -> Optional[FetchIntent]:
        """Pick the second comparison point; re-picking the current one retries a failed diff."""
        state = self.state
        if timestamp == state.timestamp_b and not self.diff_failed():
            return None
        intent = self.machine.select_timestamp_b(timestamp)
        if intent is not None:
            self.status_message = "Loading differences..."
        self._changed()
        return intent

    # ------------------------------------------------------------------
    # Responses
    # ------------------------------------------------------------------
    def apply_result(self, intent: FetchIntent, payload: Any) -> bool:
        """Feed a gateway response back; returns False for stale responses."""
        if intent.kind is FetchKind.TIMESTAMPS:
            applied = self.machine.timestamps_loaded(intent, payload or ())
            done = f"{len(self.state.timestamps)} snapshot(s) for {intent.host}."
        elif intent.kind is FetchKind.CONTENT:
            applied = self.machine.content_loaded(intent, payload)
            done = f"Snapshot {intent.timestamp_a} loaded."
        else:
            applied = self.machine.diff_loaded(intent, payload)
            done = "Differences loaded."
        if not applied:
            LOGGER.debug("Discarded stale %s response (token %s)", intent.kind.value, intent.token)
            return False
        self.status_message = done
        self._changed()
        return True

    def apply_failure(self, intent: FetchIntent, message: str) -> bool:
        applied = self.machine.fetch_failed(intent, message)
        if not applied:
            LOGGER.debug("Discarded stale %s failure (token %s)", intent.kind.value, intent.token)
            return False
        self.status_message = message
        self._changed()
        return True

    def set_upload_result(self, ok: bool, message: str) -> None:
        self.upload_ok = bool(ok)
        self.upload_message = message
        self._changed()

    # ------------------------------------------------------------------
    # Projections
    # ------------------------------------------------------------------
    def timestamp_rows(self) -> List[TimestampRow]:
        selected = self.state.timestamp_a
        return [
            TimestampRow(timestamp=ts, label=format_timestamp(ts), selected=ts == selected)
            for ts in self.state.timestamps
        ]

    def compare_options(self) -> List[Tuple[Timestamp, str]]:
        """(value, label) pairs offerable as the second comparison point."""
        return [(ts, format_timestamp(ts)) for ts in self.state.available_for_compare]

    def content_text(self) -> str:
        content = self.state.content
        if content is None:
            return ""
        return json.dumps(content, indent=2, ensure_ascii=False)

    def content_placeholder(self) -> str:
        if self.state.awaiting(FetchKind.CONTENT):
            return "Loading snapshot..."
        if self.state.content is None:
            return "Select a timestamp to view file content."
        return ""

    def diff_status_label(self) -> str:
        diff: Optional[DiffResult] = self.state.diff
        if diff is None:
            return ""
        return f"Status: {diff.status.value}"

    def diff_runs(self) -> List[StyledRun]:
        diff = self.state.diff
        return parse_ansi(diff.differences) if diff is not None else []

    def diff_html(self) -> str:
        return runs_to_html(self.diff_runs())

    def diff_failed(self) -> bool:
        state = self.state
        return bool(
            state.timestamp_b
            and state.diff is None
            and state.last_error
            and not state.awaiting(FetchKind.DIFF)
        )

    def diff_placeholder(self) -> str:
        state = self.state
        if not state.timestamp_b:
            return "Select a timestamp to compare and view differences"
        if state.awaiting(FetchKind.DIFF):
            return "Loading differences..."
        if self.diff_failed():
            return f"Could not load differences: {state.last_error}"
        if state.diff is not None and not state.diff.has_text:
            return "No differences found"
        return ""

    def _changed(self) -> None:
        if self.on_changed:
            self.on_changed()


__all__ = ["BrowserVM", "TimestampRow"]
