# src/tinysearch/models.py
"""
Data models for the search widget.

Two small containers:

- Document: one searchable unit from the index (title, body, target url).
- ScoredCandidate: a Document paired with its score while a single match
  operation is ranking the index.

Neither class carries business logic; scoring lives in search.py and
rendering lives in controller.py.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Mapping


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else ""


@dataclass(frozen=True, slots=True)
class Document:
    """
    One entry of the index, immutable once loaded.

    Attributes
    ----------
    title : str
        Display title. Title hits always rank above body hits.
    body : str
        Searchable body text.
    url : str
        Destination the result navigates to when it is chosen.
    extra : Mapping[str, Any]
        Any other fields present in the index entry. Carried through
        untouched; the matcher never looks at them.
    """
    title: str
    body: str
    url: str
    extra: Mapping[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "Document":
        """Build a Document from one JSON object; non-string fields become ""."""
        extra = {k: v for k, v in raw.items() if k not in ("title", "body", "url")}
        return cls(
            title=_as_text(raw.get("title")),
            body=_as_text(raw.get("body")),
            url=_as_text(raw.get("url")),
            extra=extra,
        )

    def to_dict(self) -> dict[str, Any]:
        return {**self.extra, "title": self.title, "body": self.body, "url": self.url}


@dataclass(frozen=True, slots=True)
class ScoredCandidate:
    """A document and its integer score; only lives inside find_matches()."""
    document: Document
    score: int
