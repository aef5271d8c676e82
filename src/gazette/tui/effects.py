"""Carry out the blocking commands and report the outcome as an event.

These functions run on worker threads. Library failures are already
translated into GazetteError by the feed and fetch modules; anything else is a
bug and propagates.
"""
from __future__ import annotations

import logging
from typing import Union

from ..errors import GazetteError
from ..feed import FeedClient
from ..fetch import fetch_raw
from .messages import (
    ContentFetchFailed,
    ContentFetchSucceeded,
    Event,
    FetchContent,
    FetchList,
    ListFetchFailed,
    ListFetchSucceeded,
)

logger = logging.getLogger(__name__)


def fetch_list(client: FeedClient) -> Union[ListFetchSucceeded, ListFetchFailed]:
    try:
        entries = client.fetch_top_entries()
    except GazetteError as exc:
        return ListFetchFailed(exc)
    return ListFetchSucceeded(tuple(entries))


def fetch_content(client: FeedClient, command: FetchContent) -> Union[ContentFetchSucceeded, ContentFetchFailed]:
    try:
        body = fetch_raw(command.url, client.config, client=client.client)
    except GazetteError as exc:
        return ContentFetchFailed(command.url, command.generation, exc)
    return ContentFetchSucceeded(command.url, command.generation, body)


def perform(command: Union[FetchList, FetchContent], client: FeedClient) -> Event:
    logger.debug("performing %s", command)
    if isinstance(command, FetchList):
        return fetch_list(client)
    if isinstance(command, FetchContent):
        return fetch_content(client, command)
    raise TypeError(f"not a background command: {command!r}")
