# src/e2e/test_index_store.py

import asyncio
import logging

import httpx

from tinysearch.models import Document
from tinysearch.store import IndexStore, UNLOADED, LOADING, READY

INDEX = [
    {"title": "Intro to Rust", "body": "...", "url": "/a", "date": "2024-01-01"},
    {"title": "Cooking", "body": "We used Rust-colored paint", "url": "/b"},
]


def _client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://site.test")


def test_loads_documents_once_and_caches():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=INDEX)

    async def runner():
        client = _client(handler)
        store = IndexStore(client=client)
        assert store.state == UNLOADED
        first = await store.ensure_loaded()
        second = await store.ensure_loaded()
        await client.aclose()
        return store, first, second

    store, first, second = asyncio.run(runner())
    assert store.state == READY
    assert first is second
    assert [d.url for d in first] == ["/a", "/b"]
    assert first[0].extra == {"date": "2024-01-01"}
    assert len(seen) == 1
    assert seen[0].url.path == "/index.json"
    assert seen[0].headers["accept"] == "application/json"


def test_concurrent_callers_share_a_single_fetch():
    calls = []

    async def handler(request):
        calls.append(request)
        await asyncio.sleep(0.02)
        return httpx.Response(200, json=INDEX)

    async def runner():
        client = _client(handler)
        store = IndexStore(client=client)
        t1 = asyncio.create_task(store.ensure_loaded())
        await asyncio.sleep(0)
        assert store.state == LOADING
        results = await asyncio.gather(t1, store.ensure_loaded(), store.ensure_loaded())
        await client.aclose()
        return store, results

    store, results = asyncio.run(runner())
    assert len(calls) == 1
    assert store.fetch_count == 1
    assert all(r is results[0] for r in results)
    assert len(results[0]) == 2


def test_http_500_settles_to_empty_and_is_logged(caplog):
    def handler(request):
        return httpx.Response(500, text="boom")

    async def runner():
        client = _client(handler)
        store = IndexStore(client=client)
        docs = await store.ensure_loaded()
        again = await store.ensure_loaded()
        await client.aclose()
        return store, docs, again

    with caplog.at_level(logging.ERROR, logger="tinysearch.store"):
        store, docs, again = asyncio.run(runner())
    assert docs == [] and again == []
    assert store.state == READY
    assert store.fetch_count == 1  # no retry
    assert "Search index error" in caplog.text


def test_transport_error_settles_to_empty():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    async def runner():
        client = _client(handler)
        store = IndexStore(client=client)
        docs = await store.ensure_loaded()
        await client.aclose()
        return docs

    assert asyncio.run(runner()) == []


def test_invalid_json_and_wrong_shape_settle_to_empty():
    bodies = [
        httpx.Response(200, text="{not json"),
        httpx.Response(200, json={"title": "not a list"}),
    ]

    async def runner(resp):
        client = _client(lambda request: resp)
        store = IndexStore(client=client)
        docs = await store.ensure_loaded()
        await client.aclose()
        return docs

    for resp in bodies:
        assert asyncio.run(runner(resp)) == []


def test_non_object_entries_are_skipped():
    payload = [INDEX[0], "junk", 3, None, {"url": "/c"}]

    async def runner():
        client = _client(lambda request: httpx.Response(200, json=payload))
        store = IndexStore(client=client)
        docs = await store.ensure_loaded()
        await client.aclose()
        return docs

    docs = asyncio.run(runner())
    assert [d.url for d in docs] == ["/a", "/c"]
    assert docs[1] == Document(title="", body="", url="/c")


def test_preload_starts_fetch_without_awaiting():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json=INDEX)

    async def runner():
        client = _client(handler)
        store = IndexStore(client=client)
        task = store.preload()
        assert store.preload() is task
        assert store.state == LOADING
        await task
        assert store.preload() is None
        await client.aclose()
        return store

    store = asyncio.run(runner())
    assert store.state == READY
    assert len(calls) == 1


def test_preloaded_store_never_fetches():
    docs = [Document("t", "b", "/u")]
    store = IndexStore.preloaded(docs)
    assert store.state == READY
    assert store.preload() is None
    assert asyncio.run(store.ensure_loaded()) == docs
    assert store.fetch_count == 0


def test_unexpected_fetch_error_still_settles_to_empty(caplog):
    deep = "[" * 100000 + "]" * 100000

    async def runner():
        client = _client(lambda request: httpx.Response(200, text=deep))
        store = IndexStore(client=client)
        results = [await store.ensure_loaded(), await store.ensure_loaded()]
        await client.aclose()
        return store, results

    with caplog.at_level(logging.ERROR, logger="tinysearch.store"):
        store, results = asyncio.run(runner())
    assert results == [[], []]
    assert store.state == READY
    assert store.fetch_count == 1
    assert "Search index error" in caplog.text


def test_non_http_error_from_transport_settles_to_empty():
    def handler(request):
        raise RuntimeError("transport bug")

    async def runner():
        client = _client(handler)
        store = IndexStore(client=client)
        docs = await store.ensure_loaded()
        await client.aclose()
        return store, docs

    store, docs = asyncio.run(runner())
    assert docs == [] and store.state == READY
