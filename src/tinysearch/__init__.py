"""
Tiny site search.

A lightweight search widget core: a precomputed index of documents is
fetched once, scored against a free-text query, and shown in an accessible
autocomplete dropdown bound to a text input.

Pieces:
    IndexStore              - fetch-once, fail-soft holder of the index
    find_matches(q, docs)   - title-over-body substring ranking
    highlight(text, q)      - escaped text with the first hit in <mark>
    AutocompleteController  - debounce, list lifecycle, keyboard, ARIA
    boot(page, store)       - page-ready wiring for the default input
    Engine                  - synchronous facade for the CLI and web app

Example Usage:
    from tinysearch import Engine

    eng = Engine()
    eng.load(path="public/index.json")
    for doc in eng.search("rust"):
        print(doc.title, doc.url)
"""

# src/tinysearch/__init__.py
from .models import Document, ScoredCandidate
from .search import find_matches, score_document
from .highlight import highlight
from .normalize import escape_html, normalize
from .store import IndexStore
from .controller import AutocompleteController, setup_autocomplete, boot, build_href
from .engine import Engine

__version__ = "1.0.0"
__all__ = [
    "Document", "ScoredCandidate",
    "find_matches", "score_document", "highlight", "escape_html", "normalize",
    "IndexStore", "AutocompleteController", "setup_autocomplete", "boot", "build_href",
    "Engine",
]
