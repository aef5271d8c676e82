"""The application state machine.

``update(model, event)`` applies one event to the model in place and returns
the model together with the commands the runtime should carry out.
``view(model)`` renders the model without touching it. Neither performs I/O,
so the whole application can be driven from tests one event at a time.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, List, Optional, Tuple

from rich.cells import cell_len

from ..config import GazetteConfig, DEFAULT_CONFIG
from ..convert import convert, render_markdown
from ..errors import ConversionFailure, GazetteError
from ..feed import Entry
from .messages import (
    Command,
    ContentFetchFailed,
    ContentFetchSucceeded,
    Event,
    FetchContent,
    FetchList,
    Key,
    ListFetchFailed,
    ListFetchSucceeded,
    Quit,
    Resize,
    ScheduleTick,
    Start,
    TimerTick,
)
from .styles import error_style, header_style, loading_style, pad, paint, pager_help_style, status_style
from .widgets import ListWidget, Spinner, Viewport

logger = logging.getLogger(__name__)

QUIT_KEYS = ("q", "ctrl+c")
SELECT_KEYS = ("enter",)

LIST_PADDING_TOP = 2
FOOTER_HEIGHT = 4


class Mode(Enum):
    LOADING = "loading"
    LISTING = "listing"
    VIEWING = "viewing"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class Selection:
    entry: Entry
    url: str
    generation: int
    cursor: int


@dataclass(slots=True)
class Model:
    config: GazetteConfig = DEFAULT_CONFIG
    entries: Optional[Tuple[Entry, ...]] = None
    selection: Optional[Selection] = None
    display_text: Optional[str] = None
    failure: Optional[GazetteError] = None
    generation: int = 0
    width: Optional[int] = None
    height: Optional[int] = None
    list: ListWidget = field(default_factory=ListWidget)
    viewport: Viewport = field(default_factory=Viewport)
    spinner: Spinner = field(default_factory=Spinner)
    converter: Optional[Callable[[bytes], str]] = field(default=None, repr=False, compare=False)

    @property
    def mode(self) -> Mode:
        if self.failure is not None:
            return Mode.FAILED
        if self.display_text is not None:
            return Mode.VIEWING
        if self.entries is not None:
            return Mode.LISTING
        return Mode.LOADING

    @property
    def fetching(self) -> bool:
        """A content fetch is outstanding for the current selection."""
        return self.selection is not None and self.display_text is None and self.failure is None

    def convert(self, raw: bytes) -> str:
        if self.converter is not None:
            return self.converter(raw)
        return convert(raw, width=self.config.text_width)


def update(model: Model, event: Event) -> Tuple[Model, List[Command]]:
    before = model.mode
    handler = _HANDLERS.get(type(event))
    commands = handler(model, event) if handler is not None else []
    if model.mode is not before:
        logger.debug("%s: %s -> %s", type(event).__name__, before.value, model.mode.value)
    return model, commands


def _start(model: Model, event: Start) -> List[Command]:
    model.selection = None
    return [FetchList(), ScheduleTick(model.config.tick_interval)]


def _list_fetched(model: Model, event: ListFetchSucceeded) -> List[Command]:
    model.entries = tuple(event.entries)
    model.list.set_items(model.entries)
    return []


def _fail(model: Model, event: ListFetchFailed) -> List[Command]:
    logger.error("giving up: %s", event.error)
    model.failure = event.error
    return []


def _resize(model: Model, event: Resize) -> List[Command]:
    model.width, model.height = event.width, event.height
    model.list.set_size(event.width, event.height - LIST_PADDING_TOP)
    model.viewport.set_size(event.width, event.height - FOOTER_HEIGHT)
    return []


def _tick(model: Model, event: TimerTick) -> List[Command]:
    # the spinner only runs during the initial load; letting the chain lapse
    # here stops the timer
    if model.mode is not Mode.LOADING:
        return []
    model.spinner.tick()
    return [ScheduleTick(model.config.tick_interval)]


def _key(model: Model, event: Key) -> List[Command]:
    key = event.key
    mode = model.mode
    if mode is Mode.FAILED:
        return [Quit(1)] if key in QUIT_KEYS else []
    if key in QUIT_KEYS:
        return _exit_requested(model, key)
    if key in SELECT_KEYS and mode is Mode.LISTING and not model.list.is_filtering():
        return _select_requested(model)
    return _forward(model, key)


def _forward(model: Model, key: str) -> List[Command]:
    mode = model.mode
    if mode is Mode.LISTING:
        command = model.list.update(key)
    elif mode is Mode.VIEWING:
        command = model.viewport.update(key)
    else:
        command = None
    return [command] if command is not None else []


def _exit_requested(model: Model, key: str) -> List[Command]:
    mode = model.mode
    if mode is Mode.LISTING and model.list.is_filtering():
        return _forward(model, key)
    if mode is Mode.VIEWING:
        cursor = model.selection.cursor if model.selection else 0
        model.selection = None
        model.display_text = None
        model.viewport.set_content("")
        model.list.select(cursor)
        return []
    if model.fetching:
        logger.info("abandoning fetch of %s", model.selection.url)
        model.selection = None
        return []
    return [Quit(0)]


def _select_requested(model: Model) -> List[Command]:
    if model.fetching:
        return []
    entry = model.list.selected_item()
    if entry is None:
        return []

    model.generation += 1
    model.selection = Selection(entry=entry, url=entry.url, generation=model.generation, cursor=model.list.cursor)
    if not entry.url:
        _show(model, render_markdown(no_content_page(entry), width=model.config.text_width))
        return []
    return [FetchContent(entry.url, model.generation)]


def _is_current(model: Model, url: str, generation: int) -> bool:
    selection = model.selection
    return (
        model.fetching
        and selection is not None
        and selection.url == url
        and selection.generation == generation
    )


def _content_fetched(model: Model, event: ContentFetchSucceeded) -> List[Command]:
    if not _is_current(model, event.url, event.generation):
        logger.warning("dropping stale content for %s", event.url)
        return []
    try:
        text = model.convert(event.body)
    except ConversionFailure as exc:
        logger.error("giving up: %s", exc)
        model.failure = exc
        return []
    _show(model, text)
    return []


def _content_failed(model: Model, event: ContentFetchFailed) -> List[Command]:
    if not _is_current(model, event.url, event.generation):
        logger.warning("dropping stale failure for %s: %s", event.url, event.error)
        return []
    logger.error("giving up: %s", event.error)
    model.failure = event.error
    return []


def _show(model: Model, text: str) -> None:
    model.display_text = text
    model.viewport.set_content(text)
    model.viewport.goto_top()


_HANDLERS = {
    Start: _start,
    ListFetchSucceeded: _list_fetched,
    ListFetchFailed: _fail,
    Resize: _resize,
    TimerTick: _tick,
    Key: _key,
    ContentFetchSucceeded: _content_fetched,
    ContentFetchFailed: _content_failed,
}


def no_content_page(entry: Entry) -> str:
    """Markdown shown for stories without an external link (Ask HN and the like)."""
    posted = datetime.fromtimestamp(entry.time, tz=timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    return "\n\n".join([
        f"# {entry.title or 'Untitled'}",
        f"{entry.score} points by {entry.by or 'unknown'} on {posted} | {entry.descendants} comments",
        "This story has no linked page.",
        f"Discussion: {entry.discussion_url}",
    ])


def view(model: Model) -> str:
    mode = model.mode
    if mode is Mode.FAILED:
        return paint(str(model.failure), error_style)
    if mode is Mode.VIEWING:
        return f"{model.viewport.view()}\n{_footer(model.viewport)}"
    if mode is Mode.LOADING:
        header = pad(paint("Welcome to Gazette!", header_style), left=2, top=2)
        prompt = pad(paint(f"{model.spinner.view()} Fetching stories...", loading_style), left=2, top=1)
        return f"{header}\n{prompt}"

    status = ""
    if model.fetching:
        status = pad(paint(f"Fetching {model.selection.url} ...", status_style), left=2)
    return "\n".join(["", status, model.list.view()])


def _footer(viewport: Viewport) -> str:
    top = "╭──────╮"
    mid = f"┤ {viewport.scroll_percent() * 100:3.0f}% │"
    bottom = "╰──────╯"
    gap = max(viewport.width - cell_len(mid), 0)
    help_line = paint("Press q to return to list", pager_help_style)
    return "\n".join([
        " " * gap + top,
        "─" * gap + mid,
        " " * gap + bottom,
        help_line,
    ])
