"""Frame composer for the terminal UI.

Turns a ``NavigationState`` into a full-screen ANSI frame: the active
screen plus the info and help overlays. Composition never mutates state;
``render_frame`` is the only function that writes to the terminal.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from typing import TextIO

from ..ansi import clip_ansi_line, display_width
from ..models import RfcMeta
from ..runtime.state import NavigationState, Screen
from .help import help_box
from .info import info_box
from .reader import compose_reader_screen
from .search import compose_search_screen

MetadataLookup = Callable[[int], "RfcMeta | None"]

INFO_PANEL_WIDTH = 55
INFO_PANEL_HEIGHT = 24
INFO_PANEL_RIGHT_MARGIN = 2
INFO_PANEL_TOP = 2


def info_metadata(state: NavigationState, lookup: MetadataLookup | None) -> RfcMeta | None:
    """Return metadata the info panel should show for the current screen."""
    if state.screen is Screen.SEARCH:
        selected = state.selected_result
        return selected.metadata if selected is not None else None
    if state.current_rfc is None or lookup is None:
        return None
    return lookup(state.current_rfc)


def overlay(base: list[str], panel: list[str], col: int, row: int, width: int) -> list[str]:
    """Draw ``panel`` over ``base`` at ``(col, row)``; panel rows replace the rest of each row."""
    out = list(base)
    for offset, panel_line in enumerate(panel):
        target = row + offset
        if not 0 <= target < len(out):
            continue
        left = clip_ansi_line(out[target], col)
        left += " " * max(0, col - display_width(left))
        out[target] = clip_ansi_line(left + "\033[0m" + panel_line, width) + "\033[0m"
    return out


def compose_frame(
    state: NavigationState,
    width: int,
    height: int,
    lookup_metadata: MetadataLookup | None = None,
    spinner_frame: int = 0,
) -> list[str]:
    """Return the rows of one full frame, ``height`` rows of ``width`` columns."""
    width = max(1, width)
    height = max(1, height)
    if state.screen is Screen.SEARCH:
        lines = compose_search_screen(state, width, height)
    else:
        lines = compose_reader_screen(state, width, height, spinner_frame)

    if state.show_info:
        meta = info_metadata(state, lookup_metadata)
        if meta is not None:
            panel_width = min(INFO_PANEL_WIDTH, width - 6)
            panel_height = min(INFO_PANEL_HEIGHT, height - 4)
            if panel_width > 12 and panel_height > 2:
                panel = info_box(meta, panel_width, panel_height)
                col = max(0, width - panel_width - INFO_PANEL_RIGHT_MARGIN)
                lines = overlay(lines, panel, col, INFO_PANEL_TOP, width)

    if state.show_help:
        panel = help_box(state.keymap, height)
        panel_width = display_width(panel[0]) if panel else 0
        col = max(0, (width - panel_width) // 2)
        row = max(0, (height - len(panel)) // 2)
        lines = overlay(lines, panel, col, row, width)
    return lines


def render_frame(
    state: NavigationState,
    width: int,
    height: int,
    lookup_metadata: MetadataLookup | None = None,
    spinner_frame: int = 0,
    stream: TextIO | None = None,
) -> None:
    """Write one composed frame to ``stream`` (stdout by default)."""
    out = stream if stream is not None else sys.stdout
    rows = compose_frame(state, width, height, lookup_metadata, spinner_frame)
    buf = ["\033[H"]
    for idx, row in enumerate(rows):
        buf.append(f"\033[{idx + 1};1H{row}\033[0m\033[K")
    out.write("".join(buf))
    out.flush()


__all__ = ["compose_frame", "info_metadata", "overlay", "render_frame"]
