from __future__ import annotations

import pytest

from snapview.viewmodels.settings_vm import SettingsVM
from snapview.web_ui.viewmodels import WebSettingsVM, parse_settings_json


def test_web_settings_vm_roundtrip() -> None:
    core = SettingsVM()
    core.apply_dict({"api_base_url": "http://10.0.0.1:8080/api", "retries": 4, "api_key": "k"})

    web_vm = WebSettingsVM.from_settings_vm(core)
    assert web_vm.api_base_url == "http://10.0.0.1:8080/api"
    assert web_vm.retries == 4

    web_vm.request_timeout_s = 30
    target = SettingsVM()
    target.apply_dict(web_vm.to_payload())
    assert target.request_timeout_s == 30
    assert target.api_key == "k"


def test_from_payload_falls_back_on_bad_numbers() -> None:
    web_vm = WebSettingsVM.from_payload({"request_timeout_s": "abc", "retries": None})
    assert web_vm.request_timeout_s == 10
    assert web_vm.retries == 2


def test_parse_settings_json_requires_object() -> None:
    assert parse_settings_json('{"retries": 1}') == {"retries": 1}
    with pytest.raises(ValueError):
        parse_settings_json("[1, 2]")
