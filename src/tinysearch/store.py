from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List, Optional

import httpx

from .config import INDEX_PATH, INDEX_ACCEPT
from .loader import parse_index
from .models import Document

log = logging.getLogger(__name__)

UNLOADED = "unloaded"
LOADING = "loading"
READY = "ready"


class IndexStore:
    """
    Owns the in-memory index for one page session.

    The index is fetched lazily and at most once: the first caller starts a
    single load task, every caller (including ones arriving mid-load) awaits
    that same task and sees the same documents. A failed load settles to an
    empty list and is never retried.

    State: unloaded -> loading -> ready (terminal).
    """

    def __init__(
        self,
        url: str = INDEX_PATH,
        *,
        client: Optional[httpx.AsyncClient] = None,
        base_url: Optional[str] = None,
        timeout: float = 10.0,
    ) -> None:
        self.url = url
        self._client = client
        self._owns_client = client is None
        self._base_url = base_url or ""
        self._timeout = timeout
        self._documents: Optional[List[Document]] = None
        self._pending: Optional[asyncio.Task] = None
        self.fetch_count = 0

    @classmethod
    def preloaded(cls, documents: Iterable[Document]) -> "IndexStore":
        """A store that is already ready; never touches the network."""
        store = cls()
        store._documents = list(documents)
        return store

    # ------------- state -------------

    @property
    def state(self) -> str:
        if self._documents is not None:
            return READY
        if self._pending is not None:
            return LOADING
        return UNLOADED

    @property
    def documents(self) -> Optional[List[Document]]:
        return self._documents

    # ------------- loading -------------

    async def ensure_loaded(self) -> List[Document]:
        """Return the cached index, loading it first if needed."""
        if self._documents is not None:
            return self._documents
        task = self._pending or self.preload()
        # shield: a cancelled caller must not cancel the shared load
        return await asyncio.shield(task)

    def preload(self) -> Optional[asyncio.Task]:
        """
        Start the load in the background if nothing has started it yet.

        Must be called from inside a running event loop. Returns the shared
        load task, or None when the index is already cached.
        """
        if self._documents is not None:
            return None
        if self._pending is None:
            self._pending = asyncio.get_running_loop().create_task(self._load())
        return self._pending

    async def _load(self) -> List[Document]:
        self.fetch_count += 1
        log.info("Fetching search index %s", self.url)
        try:
            docs = await self._fetch()
        except Exception as exc:
            log.error("Search index error: %s", exc)
            docs = []
        else:
            log.info("Search index ready: documents=%d", len(docs))
        self._documents = docs
        return docs

    async def _fetch(self) -> List[Document]:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self._base_url, timeout=self._timeout)
        r = await self._client.get(
            self.url, headers={"Accept": INDEX_ACCEPT}, follow_redirects=True
        )
        r.raise_for_status()
        return parse_index(r.json())

    # ------------- teardown -------------

    async def aclose(self) -> None:
        """Close the HTTP client if the store created it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
