"""
Index loading.

The index is a single JSON array of objects carrying at least `title`,
`body` and `url`. It is produced by the site build and treated as given
here: this module only turns the decoded payload into Documents, either
from an HTTP response body (see store.py) or from a file on disk (used by
the CLI and the web frontend).
"""

from __future__ import annotations
import json
import logging
import os
from collections.abc import Mapping
from typing import Any, List

from .models import Document

log = logging.getLogger(__name__)


def parse_index(payload: Any) -> List[Document]:
    """
    Turn a decoded JSON payload into Documents, in source order.

    Raises ValueError when the top-level value is not a list. Entries that
    are not objects are skipped; missing or non-string fields become "".
    Duplicates are kept.
    """
    if not isinstance(payload, list):
        raise ValueError(f"index must be a JSON array, got {type(payload).__name__}")
    docs: List[Document] = []
    skipped = 0
    for raw in payload:
        if not isinstance(raw, Mapping):
            skipped += 1
            continue
        docs.append(Document.from_mapping(raw))
    if skipped:
        log.warning("Skipped %d index entries that are not objects", skipped)
    return docs


def load_index_file(path: str) -> List[Document]:
    """Read and parse an index.json from disk."""
    if not os.path.exists(path):
        raise FileNotFoundError(path)
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    docs = parse_index(payload)
    log.info("Loaded %d documents from %s", len(docs), path)
    return docs
