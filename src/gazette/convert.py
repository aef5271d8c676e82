"""HTML to styled terminal text.

The markup is reduced to markdown with markdownify, then rendered by Rich's
markdown renderer with a fixed dark theme into an ANSI string.
"""
from __future__ import annotations

import io
import re

from bs4 import BeautifulSoup
from markdownify import markdownify, ATX
from rich.console import Console
from rich.markdown import Markdown
from rich.theme import Theme

from .errors import ConversionFailure

DARK_THEME = Theme({
    "markdown.h1": "bold #f8f8f2 on #5f5fd7",
    "markdown.h2": "bold #5fafff",
    "markdown.h3": "bold #5fafff",
    "markdown.h4": "bold #87afd7",
    "markdown.link": "#ff5fd7",
    "markdown.link_url": "underline #5f87af",
    "markdown.code": "#ff875f on #303030",
    "markdown.block_quote": "italic #a8a8a8",
    "markdown.item.bullet": "bold #ffaf00",
    "markdown.hr": "#585858",
})

DROPPED_TAGS = ("script", "style", "noscript", "head", "template", "iframe")

_BLANK_RUNS = re.compile(r"\n\s*\n(\s*\n)+")


def html_to_markdown(raw: bytes) -> str:
    soup = BeautifulSoup(raw, "html.parser")
    for tag in soup(DROPPED_TAGS):
        tag.decompose()
    markdown = markdownify(str(soup), heading_style=ATX)
    return _BLANK_RUNS.sub("\n\n", markdown).strip()


def render_markdown(markdown: str, width: int = 80) -> str:
    console = Console(
        file=io.StringIO(),
        width=width,
        force_terminal=True,
        color_system="256",
        theme=DARK_THEME,
        legacy_windows=False,
        emoji=False,
    )
    with console.capture() as capture:
        console.print(Markdown(markdown, code_theme="monokai", hyperlinks=False))
    return capture.get()


def convert(raw: bytes, width: int = 80) -> str:
    """Convert raw markup into display text. Same input, same output."""
    try:
        return render_markdown(html_to_markdown(raw), width=width)
    except Exception as exc:
        raise ConversionFailure(f"could not convert page: {exc}") from exc
