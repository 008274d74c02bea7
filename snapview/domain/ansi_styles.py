"""ANSI SGR interpreter for colorized diff text.

Converts the diff body returned by the snapshot service into an ordered list
of :class:`~snapview.domain.entities.StyledRun` objects. Parsing is pure: the
current style is a local accumulator that lives for one ``parse_ansi`` call.

Unknown or malformed escape sequences never raise. Recognized SGR tokens that
are not in the color table are dropped; anything that does not match the SGR
shape at all stays in the text.
"""

from __future__ import annotations

import html
import re
from typing import Dict, Iterable, List, Optional

from .entities import StyledRun

# ESC [ params m, where params is empty (bare reset) or ;-separated digits.
_SGR_RE = re.compile(r"(\x1b\[(?:\d+(?:;\d+)*)?m)", re.ASCII)

# Palette tuned for a dark diff background.
ANSI_COLORS: Dict[str, str] = {
    "0;30": "#666666",
    "0;31": "#ff6b6b",
    "0;32": "#51cf66",
    "0;33": "#ffd43b",
    "0;34": "#74c0fc",
    "0;35": "#da77f2",
    "0;36": "#20c997",
    "0;37": "#ffffff",
    "1;30": "#868e96",
    "1;31": "#ff8787",
    "1;32": "#69db7c",
    "1;33": "#ffec99",
    "1;34": "#91d5ff",
    "1;35": "#e599f7",
    "1;36": "#63e6be",
    "1;37": "#ffffff",
}


def _params(token: str) -> Optional[str]:
    """Return the parameter list of an SGR token, or ``None`` for plain text."""
    if _SGR_RE.fullmatch(token) is None:
        return None
    return token[2:-1]


def _is_reset(params: str) -> bool:
    return all(int(part) == 0 for part in params.split(";")) if params else True


def parse_ansi(raw: Optional[str]) -> List[StyledRun]:
    """Split ``raw`` into styled runs in original text order.

    Adjacent runs with identical styles are not merged. A style set at the
    very end of the input with no following text produces nothing.
    """
    if not raw:
        return []

    runs: List[StyledRun] = []
    current: Dict[str, str] = {}
    for token in _SGR_RE.split(raw):
        if not token:
            continue
        params = _params(token)
        if params is None:
            runs.append(StyledRun(text=token, style=dict(current)))
            continue
        if _is_reset(params):
            current = {}
            continue
        color = ANSI_COLORS.get(params)
        if color is not None:
            current = {**current, "color": color}
    return runs


def strip_ansi(raw: Optional[str]) -> str:
    """Return ``raw`` with every SGR sequence removed."""
    return "".join(run.text for run in parse_ansi(raw))


def runs_to_html(runs: Iterable[StyledRun]) -> str:
    """Render runs as escaped ``<span>`` markup for a ``<pre>`` container."""
    parts: List[str] = []
    for run in runs:
        text = html.escape(run.text)
        if run.style:
            parts.append(f'<span style="{html.escape(run.css())}">{text}</span>')
        else:
            parts.append(f"<span>{text}</span>")
    return "".join(parts)


__all__ = ["ANSI_COLORS", "parse_ansi", "runs_to_html", "strip_ansi"]
