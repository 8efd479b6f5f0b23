from __future__ import annotations
from typing import Iterable, List, Optional

from .config import TOP_K, TITLE_SCORE_BASE, BODY_SCORE_BASE
from .models import Document, ScoredCandidate
from .normalize import normalize, clamp

NO_MATCH = -1


def score_document(doc: Document, q_norm: str) -> int:
    """
    Score one document against an already-normalized query.

    Title hits score TITLE_SCORE_BASE - position, so an earlier hit wins and
    any title hit outranks any body hit for titles under ~900 chars. Body
    hits score BODY_SCORE_BASE - position, floored at position 100.
    """
    ti = normalize(doc.title).find(q_norm)
    if ti != -1:
        return TITLE_SCORE_BASE - ti
    bi = normalize(doc.body).find(q_norm)
    if bi != -1:
        return BODY_SCORE_BASE - clamp(bi, 0, BODY_SCORE_BASE)
    return NO_MATCH


def rank(query: str, documents: Optional[Iterable[Document]]) -> List[ScoredCandidate]:
    """All matching documents as ScoredCandidates, best first (stable on ties)."""
    q_norm = normalize(query)
    if not q_norm or not documents:
        return []
    scored = [ScoredCandidate(doc, score_document(doc, q_norm)) for doc in documents]
    scored = [c for c in scored if c.score >= 0]
    scored.sort(key=lambda c: -c.score)
    return scored


def find_matches(query: str,
                 documents: Optional[Iterable[Document]],
                 limit: int = TOP_K) -> List[Document]:
    """Return at most `limit` documents matching `query`, best first."""
    if limit <= 0:
        return []
    return [c.document for c in rank(query, documents)[:limit]]
