"""Thin web-facing viewmodels for NiceGUI bindings.

These viewmodels hold browser form state and translate to/from the core
``SettingsVM`` without adding I/O or orchestration logic.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
from typing import Any, Dict, Mapping

from snapview.usecases.upload_snapshot import DEFAULT_MAX_UPLOAD_BYTES
from snapview.viewmodels.settings_vm import DEFAULT_API_BASE_URL, SettingsVM


def _as_int(value: Any, default: int) -> int:
    """Convert mixed values to int with deterministic fallback."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return int(default)


@dataclass
class WebSettingsVM:
    """Browser-editable settings projection for NiceGUI forms."""

    api_base_url: str = DEFAULT_API_BASE_URL
    api_key: str = ""
    request_timeout_s: int = 10
    retries: int = 2
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    debug_logging: bool = False

    @classmethod
    def from_settings_vm(cls, settings_vm: SettingsVM) -> "WebSettingsVM":
        """Build browser form state from the core ``SettingsVM`` snapshot."""
        return cls.from_payload(settings_vm.to_dict())

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "WebSettingsVM":
        """Build browser form state from a ``SettingsVM.to_dict`` shaped mapping."""
        if not isinstance(payload, Mapping):
            raise ValueError("Settings payload must be a mapping.")
        return cls(
            api_base_url=str(payload.get("api_base_url") or DEFAULT_API_BASE_URL),
            api_key=str(payload.get("api_key") or ""),
            request_timeout_s=_as_int(payload.get("request_timeout_s"), 10),
            retries=_as_int(payload.get("retries"), 2),
            max_upload_bytes=_as_int(payload.get("max_upload_bytes"), DEFAULT_MAX_UPLOAD_BYTES),
            debug_logging=bool(payload.get("debug_logging")),
        )

    def to_payload(self) -> Dict[str, Any]:
        """Serialize browser form state using ``SettingsVM`` payload shape."""
        return {
            "api_base_url": str(self.api_base_url or "").strip() or DEFAULT_API_BASE_URL,
            "api_key": str(self.api_key or ""),
            "request_timeout_s": _as_int(self.request_timeout_s, 10),
            "retries": _as_int(self.retries, 2),
            "max_upload_bytes": _as_int(self.max_upload_bytes, DEFAULT_MAX_UPLOAD_BYTES),
            "debug_logging": bool(self.debug_logging),
        }


def parse_settings_json(text: str) -> Dict[str, Any]:
    """Parse imported settings JSON into a mapping payload."""
    raw = json.loads(text)
    if not isinstance(raw, dict):
        raise ValueError("Imported settings must be a JSON object.")
    return dict(raw)
