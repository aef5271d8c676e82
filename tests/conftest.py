import json

import httpx
import pytest

from gazette.config import GazetteConfig
from gazette.feed import FeedClient, make_client


def story(item_id, **overrides):
    doc = {
        "id": item_id,
        "title": f"Story {item_id}",
        "score": 10 * item_id,
        "url": f"https://example.com/{item_id}",
        "by": "pg",
        "descendants": 3,
        "kids": [100 + item_id],
        "time": 1700000000,
        "type": "story",
    }
    doc.update(overrides)
    return doc


def hn_transport(ids, items, pages=None, fail=None):
    """MockTransport serving the index, the items and linked pages.

    ``items`` maps id -> document (or raw string body); ``pages`` maps url ->
    bytes; ``fail`` maps url path -> exception class to raise.
    """
    pages = pages or {}
    fail = fail or {}

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path in fail:
            raise fail[path]("boom", request=request)
        if path == "/v0/topstories.json":
            return httpx.Response(200, json=ids)
        if path.startswith("/v0/item/"):
            item_id = int(path.rsplit("/", 1)[1].split(".")[0])
            if item_id not in items:
                return httpx.Response(404)
            body = items[item_id]
            if isinstance(body, str):
                return httpx.Response(200, content=body.encode())
            return httpx.Response(200, content=json.dumps(body).encode())
        url = str(request.url)
        if url in pages:
            return httpx.Response(200, content=pages[url])
        return httpx.Response(404)

    return httpx.MockTransport(handler)


@pytest.fixture
def config():
    return GazetteConfig()


@pytest.fixture
def make_feed(config):
    def factory(ids, items, **kwargs):
        client = make_client(config, transport=hn_transport(ids, items, **kwargs))
        return FeedClient(config, client=client)
    return factory
