"""Hierarchical host -> timestamp -> comparison selection state machine.

``SelectionStateMachine`` owns one immutable :class:`SelectionState` and
replaces it wholesale on every accepted event. Events that need data return a
:class:`FetchIntent`; the caller performs the fetch and reports the outcome
back with the same intent object.

Stale-response guard:
    Every intent carries a monotonically increasing ``token`` and the
    selection key captured when it was issued. At most one intent per
    :class:`FetchKind` is pending. A response is applied only when its intent
    is still the pending one for that kind and its key still matches the
    current selection; anything else is ignored and reported as ``False``.
    There is no cancellation of in-flight requests.

Call context:
    ``snapview.viewmodels.browser_vm.BrowserVM`` drives the machine from UI
    commands and gateway responses on a single event loop.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Iterable, Optional, Tuple

from .entities import DiffResult, Host, Timestamp


class FetchKind(str, Enum):
    """Kinds of data a transition may ask the gateway for."""

    TIMESTAMPS = "timestamps"
    CONTENT = "content"
    DIFF = "diff"


SelectionKey = Tuple[Optional[Host], Optional[Timestamp], Optional[Timestamp]]


@dataclass(frozen=True)
class FetchIntent:
    """Request emitted by a transition, echoed back with its response."""

    kind: FetchKind
    host: Host
    timestamp_a: Optional[Timestamp] = None
    timestamp_b: Optional[Timestamp] = None
    token: int = 0

    @property
    def key(self) -> SelectionKey:
        return (self.host, self.timestamp_a, self.timestamp_b)


@dataclass(frozen=True)
class SelectionState:
    """Snapshot of the navigation state and the data loaded for it."""

    host: Optional[Host] = None
    timestamps: Tuple[Timestamp, ...] = ()
    timestamp_a: Optional[Timestamp] = None
    timestamp_b: Optional[Timestamp] = None
    comparison_mode: bool = False
    content: Any = None
    diff: Optional[DiffResult] = None
    pending: Tuple[FetchIntent, ...] = ()
    last_error: str = ""
    next_token: int = 1

    @property
    def available_for_compare(self) -> Tuple[Timestamp, ...]:
        """Loaded timestamps minus the first selection, in backend order."""
        return tuple(ts for ts in self.timestamps if ts != self.timestamp_a)

    def pending_for(self, kind: FetchKind) -> Optional[FetchIntent]:
        for intent in self.pending:
            if intent.kind is kind:
                return intent
        return None

    def awaiting(self, kind: FetchKind) -> bool:
        return self.pending_for(kind) is not None

    def key_for(self, kind: FetchKind) -> SelectionKey:
        """Selection key a response of ``kind`` must match to be applied."""
        if kind is FetchKind.TIMESTAMPS:
            return (self.host, None, None)
        if kind is FetchKind.CONTENT:
            return (self.host, self.timestamp_a, None)
        return (self.host, self.timestamp_a, self.timestamp_b)


def _without(pending: Iterable[FetchIntent], *kinds: FetchKind) -> Tuple[FetchIntent, ...]:
    return tuple(intent for intent in pending if intent.kind not in kinds)


class SelectionStateMachine:
    """Transition table for host/timestamp navigation.

    Command methods (``select_*``, ``enter_compare_mode``) return the emitted
    ``FetchIntent`` or ``None`` when the event is rejected; rejected events
    leave ``state`` untouched. Response methods (``*_loaded``,
    ``fetch_failed``) return whether the response was applied.
    """

    def __init__(self, state: Optional[SelectionState] = None) -> None:
        self._state = state or SelectionState()

    @property
    def state(self) -> SelectionState:
        return self._state

    # ------------------------------------------------------------------
    # User events
    # ------------------------------------------------------------------
    def select_host(self, host: Host) -> Optional[FetchIntent]:
        if not host:
            return None
        fresh = SelectionState(host=host, next_token=self._state.next_token)
        return self._issue(fresh, FetchKind.TIMESTAMPS, host=host)

    def select_timestamp_a(self, timestamp: Timestamp) -> Optional[FetchIntent]:
        state = self._state
        if not state.host or timestamp not in state.timestamps:
            return None
        cleared = replace(
            state,
            timestamp_a=timestamp,
            timestamp_b=None,
            comparison_mode=False,
            content=None,
            diff=None,
            pending=_without(state.pending, FetchKind.CONTENT, FetchKind.DIFF),
            last_error="",
        )
        return self._issue(cleared, FetchKind.CONTENT, host=state.host, timestamp_a=timestamp)

    def enter_compare_mode(self) -> bool:
        if not self._state.timestamp_a:
            return False
        self._state = replace(self._state, comparison_mode=True)
        return True

    def exit_compare_mode(self) -> bool:
        state = self._state
        if not state.comparison_mode:
            return False
        self._state = replace(
            state,
            comparison_mode=False,
            timestamp_b=None,
            diff=None,
            pending=_without(state.pending, FetchKind.DIFF),
        )
        return True

    def select_timestamp_b(self, timestamp: Timestamp) -> Optional[FetchIntent]:
        state = self._state
        if not (state.comparison_mode and state.host and state.timestamp_a):
            return None
        if timestamp == state.timestamp_a or timestamp not in state.timestamps:
            return None
        cleared = replace(state, timestamp_b=timestamp, diff=None, last_error="")
        return self._issue(
            cleared,
            FetchKind.DIFF,
            host=state.host,
            timestamp_a=state.timestamp_a,
            timestamp_b=timestamp,
        )

    # ------------------------------------------------------------------
    # Response events
    # ------------------------------------------------------------------
    def timestamps_loaded(self, intent: FetchIntent, timestamps: Iterable[Timestamp]) -> bool:
        if not self._is_current(intent, FetchKind.TIMESTAMPS):
            return False
        self._state = replace(
            self._settled(FetchKind.TIMESTAMPS),
            timestamps=tuple(timestamps),
        )
        return True

    def content_loaded(self, intent: FetchIntent, content: Any) -> bool:
        if not self._is_current(intent, FetchKind.CONTENT):
            return False
        self._state = replace(self._settled(FetchKind.CONTENT), content=content)
        return True

    def diff_loaded(self, intent: FetchIntent, result: DiffResult) -> bool:
        if not self._is_current(intent, FetchKind.DIFF):
            return False
        self._state = replace(self._settled(FetchKind.DIFF), diff=result)
        return True

    def fetch_failed(self, intent: FetchIntent, message: str) -> bool:
        """Record a failed fetch without disturbing data of other kinds."""
        if not self._is_current(intent, intent.kind):
            return False
        self._state = replace(self._settled(intent.kind), last_error=str(message or ""))
        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _issue(self, state: SelectionState, kind: FetchKind, **key: Any) -> FetchIntent:
        intent = FetchIntent(kind=kind, token=state.next_token, **key)
        self._state = replace(
            state,
            pending=_without(state.pending, kind) + (intent,),
            next_token=state.next_token + 1,
        )
        return intent

    def _settled(self, kind: FetchKind) -> SelectionState:
        return replace(self._state, pending=_without(self._state.pending, kind))

    def _is_current(self, intent: FetchIntent, kind: FetchKind) -> bool:
        if intent.kind is not kind:
            return False
        if self._state.pending_for(kind) != intent:
            return False
        return intent.key == self._state.key_for(kind)


__all__ = [
    "FetchIntent",
    "FetchKind",
    "SelectionKey",
    "SelectionState",
    "SelectionStateMachine",
]
