from __future__ import annotations

import logging
from typing import Optional

import httpx

from .config import GazetteConfig, DEFAULT_CONFIG
from .errors import NetworkFailure
from .feed import get, make_client

logger = logging.getLogger(__name__)


def fetch_raw(url: str, config: GazetteConfig = DEFAULT_CONFIG, client: Optional[httpx.Client] = None) -> bytes:
    """Fetch the raw body behind a story link.

    Raises NetworkFailure for an empty url, transport errors, timeouts,
    non-200 responses and empty bodies.
    """
    if not url:
        raise NetworkFailure("story has no link to fetch")

    owned = client is None
    http = make_client(config) if owned else client
    try:
        body = get(http, url).content
    finally:
        if owned:
            http.close()

    if not body:
        raise NetworkFailure(f"{url} returned an empty body")
    logger.debug("fetched %d bytes from %s", len(body), url)
    return body
