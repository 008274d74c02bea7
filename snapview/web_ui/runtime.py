"""NiceGUI runtime orchestration for the snapshot browser.

This module composes the settings/browser viewmodels with the use cases built
by ``AppController``. Gateway use cases are bound on the event loop by the
``*_call`` methods; pages push only the bound call onto a worker thread and
apply the outcome back on the loop.
"""

from __future__ import annotations

import functools
import logging
import os
from typing import Any, Callable, Dict, List, Mapping, Optional

from snapview.adapters.storage_local import StorageLocal
from snapview.app.controller import AppController
from snapview.domain.entities import Host, SnapshotFilename
from snapview.domain.ports import UseCaseError
from snapview.domain.selection import FetchIntent, FetchKind
from snapview.usecases.error_mapping import map_api_error
from snapview.utils.logging import apply_preferences
from snapview.viewmodels.browser_vm import BrowserVM
from snapview.viewmodels.settings_vm import SettingsVM


LOGGER = logging.getLogger(__name__)

UPLOAD_OK_MESSAGE = "File uploaded successfully!"


class BrowserRuntime:
    """Orchestration state used by NiceGUI views."""

    def __init__(
        self,
        *,
        demo: bool = False,
        settings_vm: Optional[SettingsVM] = None,
        storage: Optional[StorageLocal] = None,
        controller: Optional[AppController] = None,
    ) -> None:
        self.storage = storage or StorageLocal(
            root_dir=os.environ.get("SNAPVIEW_STORAGE_ROOT") or "."
        )
        self.settings_vm = settings_vm or SettingsVM()
        self.settings_vm.on_save = self.storage.save_user_prefs
        if settings_vm is None:
            self._load_settings_defaults()
            self.settings_vm.apply_env()
        self.browser_vm = BrowserVM()
        self.controller = controller or AppController(self.settings_vm, demo=demo)
        self.demo = demo

    # ------------------------------------------------------------------
    # Basic projections
    # ------------------------------------------------------------------
    @property
    def status_message(self) -> str:
        return self.browser_vm.status_message

    @status_message.setter
    def status_message(self, value: str) -> None:
        self.browser_vm.status_message = value

    def settings_payload(self) -> Dict[str, Any]:
        return self.settings_vm.to_dict()

    def apply_settings_payload(self, payload: Mapping[str, Any]) -> None:
        self.settings_vm.apply_dict(payload)
        self.controller.reset()
        apply_preferences(self.settings_vm.debug_logging)
        self.status_message = "Settings applied."

    def save_settings(self) -> None:
        self.settings_vm.cmd_save()
        self.status_message = "Settings saved."

    def ensure_adapter(self) -> bool:
        if self.controller.ensure_ready():
            return True
        self.status_message = "Configure the API URL in Settings first."
        return False

    # ------------------------------------------------------------------
    # Gateway workflows
    #
    # ``*_call`` methods run on the event loop: they build the use cases and
    # bind the callable, so a later ``controller.reset`` cannot pull it away.
    # Only the returned callable may run on a worker thread; its result goes
    # back through the matching apply method on the loop.
    # ------------------------------------------------------------------
    def connection_call(self) -> Callable[[], Dict[str, Any]]:
        return self._bind("uc_test_connection")

    def connection_checked(self, result: Mapping[str, Any]) -> None:
        self.status_message = f"Connected: {result.get('message') or 'ok'}"

    def test_connection(self) -> Dict[str, Any]:
        result = self.connection_call()()
        self.connection_checked(result)
        return result

    def hosts_call(self) -> Callable[[], List[Host]]:
        return self._bind("uc_list_hosts")

    def apply_hosts(self, hosts: List[Host]) -> None:
        self.browser_vm.set_hosts(hosts)
        self.status_message = f"{len(hosts)} host(s) available."

    def refresh_hosts(self) -> List[Host]:
        hosts = self.hosts_call()()
        self.apply_hosts(hosts)
        return hosts

    def gateway_call(self, intent: FetchIntent) -> Callable[[], Any]:
        """Bind the use case that serves ``intent``."""
        if intent.kind is FetchKind.TIMESTAMPS:
            return self._bind("uc_load_timestamps", intent.host)
        if intent.kind is FetchKind.CONTENT:
            return self._bind("uc_load_snapshot", intent.host, intent.timestamp_a)
        return self._bind("uc_load_diff", intent.host, intent.timestamp_a, intent.timestamp_b)

    def fetch(self, intent: FetchIntent) -> Any:
        """Run the blocking gateway call ``intent`` describes and return its payload."""
        return self.gateway_call(intent)()

    def complete(self, intent: FetchIntent, payload: Any) -> bool:
        return self.browser_vm.apply_result(intent, payload)

    def fail(self, intent: FetchIntent, exc: Exception) -> bool:
        err = map_api_error(exc, default_code="FETCH_FAILED", default_message="Request failed.")
        LOGGER.warning("%s fetch for %s failed: %s", intent.kind.value, intent.host, err.message)
        return self.browser_vm.apply_failure(intent, err.message)

    def resolve(self, intent: Optional[FetchIntent]) -> bool:
        """Fetch and apply ``intent`` synchronously; used by the CLI smoke path."""
        if intent is None:
            return False
        try:
            payload = self.fetch(intent)
        except Exception as exc:
            return self.fail(intent, exc)
        return self.complete(intent, payload)

    def upload_call(self, filename: str, data: bytes) -> Callable[[], SnapshotFilename]:
        return self._bind("uc_upload", filename=filename, data=data)

    def upload_failed(self, err: UseCaseError) -> None:
        self.browser_vm.set_upload_result(False, err.message)
        self.status_message = err.message

    def upload_done(self, parsed: SnapshotFilename, hosts: Optional[List[Host]] = None) -> None:
        """Record a successful upload; ``hosts`` is the refreshed list, if it loaded."""
        self.browser_vm.set_upload_result(True, UPLOAD_OK_MESSAGE)
        if hosts is not None:
            self.browser_vm.set_hosts(hosts)
        self.status_message = f"Uploaded snapshot for {parsed.host}."

    def upload(self, filename: str, data: bytes) -> bool:
        try:
            parsed = self.upload_call(filename, data)()
        except UseCaseError as err:
            self.upload_failed(err)
            return False
        hosts = None
        try:
            hosts = self.hosts_call()()
        except UseCaseError as err:
            LOGGER.warning("Host refresh after upload failed: %s", err.message)
        self.upload_done(parsed, hosts)
        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _require_ready(self) -> None:
        if not self.ensure_adapter():
            raise UseCaseError("MISSING_URL", "Configure the API URL in Settings first.")

    def _bind(self, name: str, *args: Any, **kwargs: Any) -> Callable[[], Any]:
        self._require_ready()
        return functools.partial(getattr(self.controller, name), *args, **kwargs)

    def _load_settings_defaults(self) -> None:
        try:
            payload = self.storage.load_user_prefs()
        except Exception as exc:
            LOGGER.warning("Could not load local settings defaults: %s", exc)
            return
        try:
            self.settings_vm.apply_dict(payload)
        except Exception as exc:
            LOGGER.warning("Could not apply local settings defaults: %s", exc)


__all__ = ["BrowserRuntime", "UPLOAD_OK_MESSAGE"]
