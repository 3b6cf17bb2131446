"""Search screen: title, query bar, filter badges, result list, and hints."""

from __future__ import annotations

from ..ansi import fit_ansi_line, truncate_plain
from ..models import SearchResult
from ..runtime.state import STATUS_FILTERS, Keymap, NavigationState, SortOrder
from ..runtime.viewport import list_height
from .style import (
    ACCENT,
    BADGE_ACTIVE,
    BOLD,
    DIVIDER,
    FAINT,
    MUTED,
    NUMBER,
    OBSOLETE,
    RESET,
    SELECTED_BG,
    STATUS_BADGES,
    STRIKE,
    paint,
    short_status,
    status_color,
)

QUERY_PLACEHOLDER = "author:fielding  status:standard  wg:httpbis  year:2022"

SORT_LABELS: dict[SortOrder, str] = {
    SortOrder.NUMBER_DESC: "#↓",
    SortOrder.NUMBER_ASC: "#↑",
    SortOrder.DATE: "date",
    SortOrder.RELEVANCE: "rank",
}

BROWSE_HINTS: dict[Keymap, str] = {
    Keymap.VIM: "j/k ↕  Enter open  / search  s sort  Tab filter  i info  ? help  K keymap  q quit",
    Keymap.EMACS: "C-n/C-p ↕  Enter open  C-s search  s sort  Tab filter  i info  ? help  K keymap  C-c quit",
}
INPUT_HINTS = "Enter confirm  Esc cancel"

# Columns reserved right of the title: status (10), gaps, year (4).
_STATUS_COL_WIDTH = 10
_YEAR_COL_WIDTH = 4


def count_label(state: NavigationState) -> str:
    if state.total_matches <= 0:
        return ""
    if len(state.results) < state.total_matches:
        return f"{len(state.results)} of {state.total_matches:,}"
    return f"{state.total_matches:,}"


def _title_row(state: NavigationState, width: int) -> str:
    count = count_label(state)
    title = f"{BOLD}{ACCENT}lazyrfc{RESET}"
    if count:
        title += f" {MUTED}— {count}{RESET}"
    if state.index_total:
        title += f" {FAINT}({state.index_total:,} indexed){RESET}"
    sort_text = f"sort: {SORT_LABELS[state.sort_order]}"
    left_width = max(0, width - len(sort_text) - 1)
    return fit_ansi_line(title, left_width) + " " + paint(sort_text, FAINT)


def _query_row(state: NavigationState, width: int) -> str:
    if state.search_input_active:
        if not state.query:
            return fit_ansi_line(f"{BOLD}{ACCENT}/{RESET} {FAINT}{QUERY_PLACEHOLDER}{RESET}", width)
        cursor = max(0, min(state.cursor_pos, len(state.query)))
        before = state.query[:cursor]
        at = state.query[cursor : cursor + 1] or " "
        after = state.query[cursor + 1 :]
        return fit_ansi_line(f"{BOLD}{ACCENT}/{RESET} {before}\033[7m{at}{RESET}{after}", width)
    if state.query:
        return fit_ansi_line(paint(f"/ {state.query}", MUTED), width)
    return fit_ansi_line(paint("/ to search", FAINT), width)


def _filter_row(state: NavigationState, width: int) -> str:
    badges = []
    for status in STATUS_FILTERS:
        label = f" {STATUS_BADGES[status]} "
        badges.append(paint(label, BADGE_ACTIVE) if status == state.status_filter else paint(label, MUTED))
    return fit_ansi_line(" ".join(badges), width)


def format_result_row(result: SearchResult, width: int, selected: bool) -> str:
    """Render one result as ``› RFC n  title ... STATUS  year``."""
    meta = result.metadata
    obsoleted = bool(meta.obsoleted_by)
    bg = SELECTED_BG if selected else ""
    marker = f"{ACCENT}› " if selected else "  "
    number = f"{MUTED}RFC {RESET}{bg}{BOLD if selected else ''}{ACCENT if selected else NUMBER}{meta.number:<5}{RESET}{bg}"
    year = str(meta.date.year) if meta.date.year else ""
    status = paint(short_status(meta.status).rjust(_STATUS_COL_WIDTH), status_color(meta.status)) + bg

    title_width = max(1, width - 2 - 10 - _STATUS_COL_WIDTH - _YEAR_COL_WIDTH - 4)
    title_text = meta.title
    suffix = ""
    if obsoleted and not selected:
        suffix_text = " (obsoleted)"
        if len(title_text) + len(suffix_text) <= title_width:
            suffix = paint(suffix_text, OBSOLETE) + bg
    title_text = truncate_plain(title_text, title_width)
    pad = " " * max(0, title_width - len(title_text) - (len(" (obsoleted)") if suffix else 0))
    if obsoleted:
        title = paint(title_text, STRIKE, MUTED) + bg
    else:
        title = title_text
    row = f"{bg}{marker}{RESET}{bg}{number} {title}{suffix}{pad}  {status}  {MUTED}{year.rjust(_YEAR_COL_WIDTH)}{RESET}{bg}"
    return fit_ansi_line(row, width) + (RESET if selected else "")


def _result_rows(state: NavigationState, width: int, rows: int) -> list[str]:
    if not state.results:
        message = "No results" if state.query else "/ to search"
        out = [" " * width for _ in range(rows)]
        if rows:
            pad = max(0, (width - len(message)) // 2)
            out[rows // 3] = fit_ansi_line(" " * pad + paint(message, FAINT), width)
        return out
    out = []
    for row in range(rows):
        index = state.list_offset + row
        if index >= len(state.results):
            out.append(" " * width)
            continue
        out.append(format_result_row(state.results[index], width, index == state.selected_index))
    return out


def compose_search_screen(state: NavigationState, width: int, height: int) -> list[str]:
    """Return exactly ``height`` rows for the search screen."""
    divider = paint("─" * width, DIVIDER)
    hints = INPUT_HINTS if state.search_input_active else BROWSE_HINTS[state.keymap]
    if state.error:
        hints = f"error: {state.error}"
    lines = [
        _title_row(state, width),
        _query_row(state, width),
        _filter_row(state, width),
        divider,
    ]
    lines.extend(_result_rows(state, width, list_height(height)))
    lines.append(divider)
    lines.append(fit_ansi_line(paint(hints, FAINT), width))
    return lines[:height]
