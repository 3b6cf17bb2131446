"""Viewport math for the result list and the document reader.

Row budgets here are shared with the renderer so clamping and drawing agree
on how many rows are visible.
"""

from __future__ import annotations

import os
from dataclasses import replace

from .state import NavigationState, Screen

# Search screen chrome: title row, query row, filter row, divider, divider,
# hint row.
SEARCH_CHROME_ROWS = 6
# Reader chrome: title row, divider, divider, status row.
READER_CHROME_ROWS = 4


def list_height(rows: int) -> int:
    """Return visible result rows for a terminal ``rows`` tall."""
    return max(1, rows - SEARCH_CHROME_ROWS)


def reader_height(rows: int) -> int:
    """Return visible document rows for a terminal ``rows`` tall."""
    return max(1, rows - READER_CHROME_ROWS)


def clamp_index(index: int, count: int) -> int:
    """Clamp ``index`` to ``[0, count - 1]``; ``0`` for empty sequences."""
    if count <= 0:
        return 0
    return max(0, min(index, count - 1))


def max_scroll(line_count: int, viewport_height: int) -> int:
    return max(0, line_count - max(1, viewport_height))


def clamp_scroll(scroll_y: int, line_count: int, viewport_height: int) -> int:
    return max(0, min(scroll_y, max_scroll(line_count, viewport_height)))


def adjust_list_offset(state: NavigationState, height: int) -> NavigationState:
    """Scroll the result window so ``selected_index`` is visible.

    Returns ``state`` itself when no change is needed, so repeated calls are
    cheap to detect.
    """
    height = max(1, height)
    selected = state.selected_index
    offset = state.list_offset
    if selected < offset:
        offset = selected
    elif selected > offset + height - 1:
        offset = selected - height + 1
    offset = max(0, offset)
    if offset == state.list_offset:
        return state
    return replace(state, list_offset=offset)


def fit_to_terminal(state: NavigationState, size: os.terminal_size) -> NavigationState:
    """Re-establish selection and scroll invariants after a terminal resize."""
    selected = clamp_index(state.selected_index, len(state.results))
    fitted = state if selected == state.selected_index else replace(state, selected_index=selected)
    fitted = adjust_list_offset(fitted, list_height(size.lines))
    if fitted.screen is Screen.READER:
        scroll_y = clamp_scroll(fitted.scroll_y, len(fitted.lines), reader_height(size.lines))
        if scroll_y != fitted.scroll_y:
            fitted = replace(fitted, scroll_y=scroll_y)
    return fitted
