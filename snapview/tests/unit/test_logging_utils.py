from __future__ import annotations

import logging

import pytest

from snapview.utils.logging import apply_preferences, configure_root, env_debug_enabled


@pytest.fixture(autouse=True)
def _restore_root_level():
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)


def test_env_level_wins_over_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SNAPVIEW_LOG_LEVEL", "warning")
    monkeypatch.delenv("SNAPVIEW_DEBUG", raising=False)

    assert configure_root(logging.DEBUG) == logging.WARNING
    assert logging.getLogger().level == logging.WARNING
    assert logging.getLogger("urllib3").level >= logging.WARNING


def test_debug_flag_forces_debug(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SNAPVIEW_LOG_LEVEL", raising=False)
    monkeypatch.setenv("SNAPVIEW_DEBUG", "1")

    assert env_debug_enabled()
    assert apply_preferences(False) == logging.DEBUG


def test_preferences_apply_without_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SNAPVIEW_LOG_LEVEL", raising=False)
    monkeypatch.delenv("SNAPVIEW_DEBUG", raising=False)

    assert not env_debug_enabled()
    assert apply_preferences(True) == logging.DEBUG
    assert apply_preferences(False) == logging.INFO
    assert configure_root("error") == logging.ERROR
