"""Hacker News feed client.

The index document is a JSON array of story ids; each story is then fetched
one at a time, in index order.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

import httpx

from .config import GazetteConfig, DEFAULT_CONFIG
from .errors import DecodeFailure, NetworkFailure

logger = logging.getLogger(__name__)

DISCUSSION_URL = "https://news.ycombinator.com/item?id={id}"


@dataclass(frozen=True, slots=True)
class Entry:
    id: int = 0
    title: str = ""
    score: int = 0
    url: str = ""
    by: str = ""
    descendants: int = 0
    kids: Tuple[int, ...] = ()
    time: int = 0
    type: str = ""

    def filter_value(self) -> str:
        return self.title

    @property
    def discussion_url(self) -> str:
        return DISCUSSION_URL.format(id=self.id)

    @classmethod
    def from_json(cls, obj: Any) -> "Entry":
        """Build an entry from an item document.

        Missing fields take their zero value. Raises DecodeFailure when the
        document is not an object or a field has the wrong type.
        """
        if not isinstance(obj, dict):
            raise DecodeFailure(f"expected an item object, got {type(obj).__name__}")

        def pick(name: str, kind: type, default: Any) -> Any:
            value = obj.get(name)
            if value is None:
                return default
            # JSON booleans decode as ints in Python; reject them explicitly
            if isinstance(value, bool) or not isinstance(value, kind):
                raise DecodeFailure(f"item field {name!r} has unexpected type {type(value).__name__}")
            return value

        kids = pick("kids", list, [])
        if not all(isinstance(k, int) and not isinstance(k, bool) for k in kids):
            raise DecodeFailure("item field 'kids' must be a list of ints")

        return cls(
            id=pick("id", int, 0),
            title=pick("title", str, ""),
            score=max(pick("score", int, 0), 0),
            url=pick("url", str, ""),
            by=pick("by", str, ""),
            descendants=pick("descendants", int, 0),
            kids=tuple(kids),
            time=pick("time", int, 0),
            type=pick("type", str, ""),
        )


def make_client(config: GazetteConfig = DEFAULT_CONFIG, **kwargs: Any) -> httpx.Client:
    """HTTP client shared by the feed and content fetches"""
    return httpx.Client(
        timeout=config.timeout,
        headers={"User-Agent": config.user_agent},
        follow_redirects=True,
        **kwargs,
    )


def get(client: httpx.Client, url: str) -> httpx.Response:
    """GET ``url`` and translate transport problems into NetworkFailure."""
    try:
        response = client.get(url)
    except httpx.TimeoutException as exc:
        raise NetworkFailure(f"timed out fetching {url}") from exc
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise NetworkFailure(f"could not fetch {url}: {exc}") from exc

    if response.status_code != 200:
        raise NetworkFailure(f"{url} returned HTTP {response.status_code}")
    return response


class FeedClient:
    def __init__(self, config: GazetteConfig = DEFAULT_CONFIG, client: Optional[httpx.Client] = None) -> None:
        self.config = config
        self.client = client or make_client(config)

    def fetch_top_ids(self) -> List[int]:
        response = get(self.client, self.config.index_url)
        try:
            ids = response.json()
        except ValueError as exc:
            raise DecodeFailure(f"story index is not valid JSON: {exc}") from exc
        if not isinstance(ids, list) or not all(isinstance(i, int) and not isinstance(i, bool) for i in ids):
            raise DecodeFailure("story index is not a list of ids")
        return ids[: self.config.page_size]

    def fetch_entry(self, item_id: int) -> Optional[Entry]:
        """Fetch one story. Returns None when the item document is unusable."""
        url = self.config.item_url(item_id)
        response = get(self.client, url)
        try:
            return Entry.from_json(response.json())
        except (ValueError, DecodeFailure) as exc:
            # deleted stories come back as null
            logger.warning("skipping story %s: %s", item_id, exc)
            return None

    def fetch_top_entries(self) -> List[Entry]:
        """Fetch the index, then every story on it, sequentially and in order.

        A network failure on any request aborts the whole batch. Malformed or
        deleted stories are skipped.
        """
        ids = self.fetch_top_ids()
        logger.debug("fetching %d stories", len(ids))
        entries = []
        for item_id in ids:
            entry = self.fetch_entry(item_id)
            if entry is not None:
                entries.append(entry)
        logger.info("fetched %d of %d stories", len(entries), len(ids))
        return entries

    def close(self) -> None:
        self.client.close()
