"""Adapter and use-case wiring for the snapshot browser runtime.

This module owns lazy construction of the snapshot gateway adapter and the
use-case objects that depend on values in
:class:`snapview.viewmodels.settings_vm.SettingsVM`. The web runtime calls
``ensure_ready`` before every network action.
"""

from __future__ import annotations

from typing import Optional

from ..adapters.snapshot_mock import demo_adapter
from ..adapters.snapshot_rest import SnapshotRestAdapter
from ..domain.ports import SnapshotPort
from ..usecases.list_hosts import ListHosts
from ..usecases.load_diff import LoadDiff
from ..usecases.load_snapshot import LoadSnapshot
from ..usecases.load_timestamps import LoadTimestamps
from ..usecases.test_connection import TestConnection
from ..usecases.upload_snapshot import UploadSnapshot
from ..viewmodels.settings_vm import SettingsVM


class AppController:
    """Create and cache the gateway adapter and use-cases from settings state.

    Call chain:
        ``snapview.web_ui.runtime.BrowserRuntime`` creates one instance and
        calls ``ensure_ready`` before list/load/diff/upload/test operations.
        ``reset`` is called whenever settings change.
    """

    def __init__(self, settings_vm: SettingsVM, *, demo: bool = False) -> None:
        """Initialize controller with settings-backed lazy dependencies.

        Args:
            settings_vm: UI state model holding the API base URL, key and
                timeout preferences used to build the adapter.
            demo: Serve an in-memory mock gateway instead of the REST API.
        """
        self.settings_vm = settings_vm
        self.demo = demo
        self._snapshot_adapter: Optional[SnapshotPort] = None
        self.uc_list_hosts: Optional[ListHosts] = None
        self.uc_load_timestamps: Optional[LoadTimestamps] = None
        self.uc_load_snapshot: Optional[LoadSnapshot] = None
        self.uc_load_diff: Optional[LoadDiff] = None
        self.uc_upload: Optional[UploadSnapshot] = None
        self.uc_test_connection: Optional[TestConnection] = None

    @property
    def snapshot_adapter(self) -> Optional[SnapshotPort]:
        """Return the cached gateway adapter, if built."""
        return self._snapshot_adapter

    def reset(self) -> None:
        """Drop cached objects so the next ``ensure_ready`` rebuilds them.

        The demo mock is kept across resets so uploads made in demo mode
        survive a settings change.
        """
        if not self.demo:
            self._snapshot_adapter = None
        self.uc_list_hosts = None
        self.uc_load_timestamps = None
        self.uc_load_snapshot = None
        self.uc_load_diff = None
        self.uc_upload = None
        self.uc_test_connection = None

    def ensure_ready(self) -> bool:
        """Ensure the adapter and use-cases exist.

        Returns:
            ``True`` when dependencies are available, ``False`` when no base
            URL is configured outside demo mode.
        """
        if self._snapshot_adapter is not None and self.uc_list_hosts is not None:
            return True

        if self._snapshot_adapter is None:
            if self.demo:
                self._snapshot_adapter = demo_adapter()
            else:
                base_url = str(self.settings_vm.api_base_url or "").strip()
                if not base_url:
                    return False
                self._snapshot_adapter = SnapshotRestAdapter(
                    base_url,
                    api_key=self.settings_vm.api_key or None,
                    request_timeout_s=self.settings_vm.request_timeout_s,
                    retries=self.settings_vm.retries,
                )

        port = self._snapshot_adapter
        self.uc_list_hosts = ListHosts(port)
        self.uc_load_timestamps = LoadTimestamps(port)
        self.uc_load_snapshot = LoadSnapshot(port)
        self.uc_load_diff = LoadDiff(port)
        self.uc_upload = UploadSnapshot(port, max_bytes=self.settings_vm.max_upload_bytes)
        self.uc_test_connection = TestConnection(port)
        return True
