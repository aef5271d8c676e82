"""Events fed into the state machine and the commands it emits.

Both are plain frozen dataclasses so they compare by value in tests.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from ..errors import GazetteError
from ..feed import Entry


# Events


@dataclass(frozen=True)
class Start:
    pass


@dataclass(frozen=True)
class ListFetchSucceeded:
    entries: Tuple[Entry, ...]


@dataclass(frozen=True)
class ListFetchFailed:
    error: GazetteError


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


@dataclass(frozen=True)
class Key:
    # Textual key names for special keys ("enter", "up", "ctrl+c"),
    # the character itself for printable keys ("q", "/", " ")
    key: str


@dataclass(frozen=True)
class ContentFetchSucceeded:
    url: str
    generation: int
    body: bytes


@dataclass(frozen=True)
class ContentFetchFailed:
    url: str
    generation: int
    error: GazetteError


@dataclass(frozen=True)
class TimerTick:
    pass


Event = Union[
    Start, ListFetchSucceeded, ListFetchFailed, Resize, Key,
    ContentFetchSucceeded, ContentFetchFailed, TimerTick,
]


# Commands


@dataclass(frozen=True)
class FetchList:
    pass


@dataclass(frozen=True)
class FetchContent:
    url: str
    generation: int


@dataclass(frozen=True)
class ScheduleTick:
    delay: float


@dataclass(frozen=True)
class Quit:
    code: int = 0


Command = Union[FetchList, FetchContent, ScheduleTick, Quit]
