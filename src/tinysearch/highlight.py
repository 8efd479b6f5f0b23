from __future__ import annotations
from typing import Any

from .config import MARK_TAG
from .normalize import normalize, escape_html


def highlight(text: Any, query: Any) -> str:
    """
    Escape `text` and wrap the first case-insensitive hit of `query`.

    >>> highlight("Intro to Rust", "rust")
    'Intro to <mark>Rust</mark>'
    >>> highlight("<script>", "script")
    '&lt;<mark>script</mark>&gt;'

    Each piece is escaped on its own, so the marker always wraps escaped
    text and never splits an entity.
    """
    t = "" if text is None else str(text)
    q = normalize(query)
    if not q:
        return escape_html(t)
    idx = t.lower().find(q)
    if idx == -1:
        return escape_html(t)
    end = idx + len(q)
    before = escape_html(t[:idx])
    match = escape_html(t[idx:end])
    after = escape_html(t[end:])
    return f"{before}<{MARK_TAG}>{match}</{MARK_TAG}>{after}"
