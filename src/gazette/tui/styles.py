from __future__ import annotations

from rich.cells import cell_len, set_cell_size
from rich.color import ColorSystem
from rich.style import Style

header_style = Style(bold=True)
loading_style = Style(color="color(5)")
pager_help_style = Style(color="#5C5C5C")
title_style = Style(color="color(230)", bgcolor="color(62)")
item_style = Style()
selected_item_style = Style(color="color(170)")
status_style = Style(color="color(241)")
filter_prompt_style = Style(color="color(205)")
help_style = Style(color="color(241)")
error_style = Style(color="color(9)")


def paint(text: str, style: Style) -> str:
    """Wrap ``text`` in the ANSI codes for ``style``."""
    if not text:
        return text
    return style.render(text, color_system=ColorSystem.EIGHT_BIT)


def pad(text: str, left: int = 0, top: int = 0, bottom: int = 0) -> str:
    lines = text.split("\n")
    if left:
        lines = [" " * left + line for line in lines]
    return "\n".join([""] * top + lines + [""] * bottom)


def fit(text: str, width: int) -> str:
    """Truncate plain text to ``width`` cells, marking the cut with an ellipsis."""
    if width <= 0:
        return ""
    if cell_len(text) <= width:
        return text
    return set_cell_size(text, width - 1) + "…"
