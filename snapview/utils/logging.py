"""Root logger setup with environment overrides.

Environment:
  - SNAPVIEW_LOG_LEVEL: explicit level name or number
  - SNAPVIEW_DEBUG: truthy -> DEBUG
"""

from __future__ import annotations

import logging
import os
from typing import Optional

_DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DEFAULT_DATEFMT = "%H:%M:%S"
_LEVEL_ENV_VAR = "SNAPVIEW_LOG_LEVEL"
_DEBUG_FLAG = "SNAPVIEW_DEBUG"


def _coerce_level(value: Optional[str], fallback: int) -> int:
    text = (value or "").strip()
    if not text:
        return fallback
    if text.isdigit():
        return int(text)
    candidate = logging.getLevelName(text.upper())
    return candidate if isinstance(candidate, int) else fallback


def _env_truthy(value: Optional[str]) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _resolve_env_level() -> Optional[int]:
    value = os.getenv(_LEVEL_ENV_VAR)
    if value:
        return _coerce_level(value, logging.INFO)
    if _env_truthy(os.getenv(_DEBUG_FLAG)):
        return logging.DEBUG
    return None


def configure_root(default_level: int | str = logging.INFO) -> int:
    """Configure the root logger with a compact format and return the effective level."""
    fallback = (
        _coerce_level(default_level, logging.INFO)
        if isinstance(default_level, str)
        else int(default_level)
    )
    env_level = _resolve_env_level()
    effective = env_level if env_level is not None else fallback

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=effective, format=_DEFAULT_FORMAT, datefmt=_DEFAULT_DATEFMT)
    root.setLevel(effective)
    # urllib3 connection chatter only helps when debugging transport issues.
    logging.getLogger("urllib3").setLevel(max(effective, logging.WARNING))
    return effective


def apply_preferences(debug_enabled: bool) -> int:
    """Update root log level from user settings while honoring env overrides."""
    env_level = _resolve_env_level()
    level = env_level if env_level is not None else (logging.DEBUG if debug_enabled else logging.INFO)
    logging.getLogger().setLevel(level)
    return level


def env_debug_enabled() -> bool:
    """Return True if environment variables force DEBUG logging."""
    env_level = _resolve_env_level()
    return env_level is not None and env_level <= logging.DEBUG


__all__ = ["apply_preferences", "configure_root", "env_debug_enabled"]
