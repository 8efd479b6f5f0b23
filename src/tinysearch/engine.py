# tinysearch/engine.py
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

import httpx

from . import config as CFG
from .controller import build_href
from .highlight import highlight
from .loader import load_index_file
from .models import Document
from .search import find_matches
from .store import IndexStore

log = logging.getLogger(__name__)


class Engine:
    """
    Synchronous facade used by the CLI and the Flask frontend.

    Public API:
      * load(path=..., url=...): read index.json from disk, or fetch it once
        through an IndexStore (fail-soft: a broken index loads as empty)
      * search(query, top_k):    ranked Documents
      * suggest(query, top_k):   ranked rows with highlighted titles and hrefs
      * store():                 a ready IndexStore over the loaded documents
      * shutdown():              drop loaded state
    """

    # ------------- lifecycle -------------

    def __init__(self) -> None:
        self.documents: Optional[List[Document]] = None
        self.source: Optional[str] = None

    # /* ~~~ Load the index from a local file or over HTTP ~~~ */
    def load(
        self,
        *,
        path: Optional[str] = None,
        url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        verbose: bool = False,
    ) -> int:
        if verbose:
            logging.basicConfig(level=logging.INFO)

        if path:
            self.documents = load_index_file(path)
            self.source = path
        elif url:
            self.documents = asyncio.run(self._fetch(url, client))
            self.source = url
        else:
            raise ValueError("load(): require either a path or a url to load an index")

        log.info("Engine load() complete: documents=%d source=%s", len(self.documents), self.source)
        return len(self.documents)

    @staticmethod
    async def _fetch(url: str, client: Optional[httpx.AsyncClient]) -> List[Document]:
        store = IndexStore(url, client=client)
        try:
            return await store.ensure_loaded()
        finally:
            await store.aclose()

    # ------------- query -------------

    def search(self, query: str, *, top_k: int = CFG.TOP_K) -> List[Document]:
        if self.documents is None:
            raise RuntimeError("Engine not initialized. Call load() first.")
        return find_matches(query, self.documents, top_k)

    def suggest(self, query: str, *, top_k: int = CFG.TOP_K) -> List[dict]:
        return [
            {
                "title": doc.title,
                "url": doc.url,
                "href": build_href(doc.url, query),
                "highlighted": highlight(doc.title, query),
            }
            for doc in self.search(query, top_k=top_k)
        ]

    def store(self) -> IndexStore:
        if self.documents is None:
            raise RuntimeError("Engine not initialized. Call load() first.")
        return IndexStore.preloaded(self.documents)

    # ------------- teardown -------------

    def shutdown(self) -> None:
        self.documents = None
        self.source = None
        log.info("Engine shutdown complete")
