from __future__ import annotations
from typing import Any

_HTML_ESCAPES = {"&": "&amp;", "<": "&lt;", ">": "&gt;", '"': "&quot;"}


def normalize(value: Any) -> str:
    """
    Case-fold a value for comparison.

    None becomes "", anything else is cast to str and lower-cased. Whitespace
    is kept as-is: a query of a single space is a real query.
    """
    if value is None:
        return ""
    return str(value).lower()


def clamp(value: int, lo: int, hi: int) -> int:
    return min(hi, max(lo, value))


def escape_html(value: Any) -> str:
    """Neutralise & < > " so document text can never inject markup."""
    s = "" if value is None else str(value)
    return "".join(_HTML_ESCAPES.get(ch, ch) for ch in s)
