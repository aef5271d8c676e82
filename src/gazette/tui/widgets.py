"""Sub-components the state machine delegates to.

Each widget owns its own state. The list and the viewport take keys through
``update(key)``, which returns an optional follow-up command; the spinner
advances on ``tick()``. ``view()`` never changes anything.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from ..feed import Entry
from .messages import Command
from .styles import (
    filter_prompt_style,
    fit,
    help_style,
    item_style,
    pad,
    paint,
    selected_item_style,
    status_style,
    title_style,
)

LIST_WIDTH = 30
LIST_HEIGHT = 50
ITEM_HEIGHT = 3
# title, blank, status, blank above the items; blank, pager, blank, help below
LIST_CHROME = 8

UP_KEYS = ("up", "k")
DOWN_KEYS = ("down", "j")
PREV_PAGE_KEYS = ("pageup", "left", "h", "b", "u")
NEXT_PAGE_KEYS = ("pagedown", "right", "l", "f", "d")
START_KEYS = ("home", "g")
END_KEYS = ("end", "G")
FILTER_KEY = "/"


class FilterState(Enum):
    UNFILTERED = "unfiltered"
    FILTERING = "filtering"
    APPLIED = "applied"


@dataclass(slots=True)
class ListWidget:
    title: str = "Top Stories"
    width: int = LIST_WIDTH
    height: int = LIST_HEIGHT
    items: List[Entry] = field(default_factory=list)
    cursor: int = 0
    filter_state: FilterState = FilterState.UNFILTERED
    filter_text: str = ""

    def set_items(self, entries: Sequence[Entry]) -> None:
        self.items = list(entries)
        self.cursor = 0
        self.reset_filter()

    def set_size(self, width: int, height: int) -> None:
        self.width = max(width, 1)
        self.height = max(height, 1)
        self._clamp()

    def is_filtering(self) -> bool:
        return self.filter_state is FilterState.FILTERING

    def reset_filter(self) -> None:
        self.filter_state = FilterState.UNFILTERED
        self.filter_text = ""

    def visible_items(self) -> List[Entry]:
        if not self.filter_text:
            return list(self.items)
        needle = self.filter_text.lower()
        return [e for e in self.items if needle in e.filter_value().lower()]

    def selected_item(self) -> Optional[Entry]:
        visible = self.visible_items()
        if not visible:
            return None
        return visible[min(self.cursor, len(visible) - 1)]

    def select(self, index: int) -> None:
        self.cursor = index
        self._clamp()

    def reset_selected(self) -> None:
        self.cursor = 0

    @property
    def per_page(self) -> int:
        return max((self.height - LIST_CHROME) // ITEM_HEIGHT, 1)

    @property
    def page(self) -> int:
        return self.cursor // self.per_page

    @property
    def total_pages(self) -> int:
        count = len(self.visible_items())
        return max((count + self.per_page - 1) // self.per_page, 1)

    def _clamp(self) -> None:
        count = len(self.visible_items())
        self.cursor = max(0, min(self.cursor, count - 1)) if count else 0

    def update(self, key: str) -> Optional[Command]:
        if self.is_filtering():
            self._update_filtering(key)
            return None

        if key in UP_KEYS:
            self.cursor -= 1
        elif key in DOWN_KEYS:
            self.cursor += 1
        elif key in PREV_PAGE_KEYS:
            self.cursor -= self.per_page
        elif key in NEXT_PAGE_KEYS:
            self.cursor += self.per_page
        elif key in START_KEYS:
            self.cursor = 0
        elif key in END_KEYS:
            self.cursor = len(self.visible_items()) - 1
        elif key == FILTER_KEY:
            self.filter_state = FilterState.FILTERING
        elif key == "escape" and self.filter_state is FilterState.APPLIED:
            self.reset_filter()
            self.cursor = 0
        self._clamp()
        return None

    def _update_filtering(self, key: str) -> None:
        if key == "escape":
            self.reset_filter()
            self.cursor = 0
        elif key in ("enter", "tab"):
            self.filter_state = FilterState.APPLIED if self.filter_text else FilterState.UNFILTERED
        elif key == "backspace":
            self.filter_text = self.filter_text[:-1]
            self.cursor = 0
        elif len(key) == 1 and key.isprintable():
            self.filter_text += key
            self.cursor = 0
        self._clamp()

    def _status_line(self) -> str:
        if self.is_filtering():
            return paint("Filter: ", filter_prompt_style) + self.filter_text + "█"
        count = len(self.visible_items())
        noun = "item" if count == 1 else "items"
        if self.filter_state is FilterState.APPLIED:
            return paint(f"“{self.filter_text}” {count} {noun}", status_style)
        if not self.items:
            return paint("No items.", status_style)
        return paint(f"{count} {noun}", status_style)

    def _render_item(self, entry: Entry, selected: bool) -> str:
        inner = self.width - 4
        lines = [
            fit(f"{entry.title} -  ({entry.score} points) ", inner),
            fit(f"       ({entry.url})", inner),
        ]
        style = selected_item_style if selected else item_style
        return pad("\n".join(paint(line, style) for line in lines), left=4, bottom=1)

    def view(self) -> str:
        parts = [paint(f" {self.title} ", title_style), "", self._status_line(), ""]

        visible = self.visible_items()
        start = self.page * self.per_page
        for index, entry in enumerate(visible[start:start + self.per_page], start=start):
            parts.append(self._render_item(entry, index == self.cursor))

        if self.total_pages > 1:
            parts.append(paint(f"{self.page + 1}/{self.total_pages}", status_style))
            parts.append("")

        if self.is_filtering():
            hint = "enter apply • esc cancel"
        else:
            hint = "↑/k up • ↓/j down • / filter • enter open • q quit"
        parts.append(paint(hint, help_style))
        return pad("\n".join(parts), left=2)


VIEWPORT_UP_KEYS = ("up", "k")
VIEWPORT_DOWN_KEYS = ("down", "j")
VIEWPORT_PAGE_UP_KEYS = ("pageup", "b")
VIEWPORT_PAGE_DOWN_KEYS = ("pagedown", "f", " ")
VIEWPORT_HALF_UP_KEYS = ("u", "ctrl+u")
VIEWPORT_HALF_DOWN_KEYS = ("d", "ctrl+d")


@dataclass(slots=True)
class Viewport:
    width: int = 80
    height: int = 20
    y_offset: int = 0
    lines: List[str] = field(default_factory=list)

    def set_content(self, text: str) -> None:
        self.lines = text.splitlines()
        self.y_offset = min(self.y_offset, self.max_y_offset)

    def set_size(self, width: int, height: int) -> None:
        self.width = max(width, 1)
        self.height = max(height, 1)
        self.y_offset = min(self.y_offset, self.max_y_offset)

    @property
    def max_y_offset(self) -> int:
        return max(len(self.lines) - self.height, 0)

    def goto_top(self) -> None:
        self.y_offset = 0

    def goto_bottom(self) -> None:
        self.y_offset = self.max_y_offset

    def scroll(self, delta: int) -> None:
        self.y_offset = max(0, min(self.y_offset + delta, self.max_y_offset))

    def scroll_percent(self) -> float:
        if self.height >= len(self.lines):
            return 1.0
        return max(0.0, min(self.y_offset / (len(self.lines) - self.height), 1.0))

    def update(self, key: str) -> Optional[Command]:
        if key in VIEWPORT_UP_KEYS:
            self.scroll(-1)
        elif key in VIEWPORT_DOWN_KEYS:
            self.scroll(1)
        elif key in VIEWPORT_PAGE_UP_KEYS:
            self.scroll(-self.height)
        elif key in VIEWPORT_PAGE_DOWN_KEYS:
            self.scroll(self.height)
        elif key in VIEWPORT_HALF_UP_KEYS:
            self.scroll(-(self.height // 2))
        elif key in VIEWPORT_HALF_DOWN_KEYS:
            self.scroll(self.height // 2)
        elif key in ("home", "g"):
            self.goto_top()
        elif key in ("end", "G"):
            self.goto_bottom()
        return None

    def view(self) -> str:
        window = self.lines[self.y_offset:self.y_offset + self.height]
        window += [""] * (self.height - len(window))
        return "\n".join(window)


DOT_FRAMES = ("⣾ ", "⣽ ", "⣻ ", "⢿ ", "⡿ ", "⣟ ", "⣯ ", "⣷ ")


@dataclass(slots=True)
class Spinner:
    frames: Sequence[str] = DOT_FRAMES
    frame: int = 0

    def tick(self) -> None:
        self.frame = (self.frame + 1) % len(self.frames)

    def view(self) -> str:
        return self.frames[self.frame]
