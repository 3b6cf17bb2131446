"""Reader screen: document viewport with match and reference highlighting."""

from __future__ import annotations

from ..ansi import fit_ansi_line, truncate_plain
from ..runtime.state import Keymap, NavigationState
from ..runtime.viewport import reader_height
from ..search.references import iter_references
from .style import (
    ACCENT,
    BOLD,
    CURRENT_MATCH,
    DIVIDER,
    ERROR,
    FOCUSED_REF,
    MATCH_BG,
    MUTED,
    REF,
    RESET,
    SPINNER_FRAMES,
    paint,
)

READER_HINTS: dict[Keymap, str] = {
    Keymap.VIM: "j/k scroll  g/G top/bottom  / search  n/N match  Tab ref  Enter follow  i info  Esc back",
    Keymap.EMACS: "C-n/C-p scroll  M-</M-> top/bottom  C-s search  Tab ref  Enter follow  i info  C-g back",
}


def title_text(state: NavigationState) -> str:
    if state.current_title:
        return f"RFC {state.current_rfc} — {state.current_title}"
    return f"RFC {state.current_rfc}"


def highlight_references(line: str, focused: int | None) -> str:
    """Underline RFC citations; the focused reference number is emphasized."""
    out: list[str] = []
    pos = 0
    for ref in iter_references(line):
        out.append(line[pos : ref.start])
        style = FOCUSED_REF if focused is not None and ref.number == focused else REF
        out.append(paint(line[ref.start : ref.end], style))
        pos = ref.end
    out.append(line[pos:])
    return "".join(out)


def format_document_line(state: NavigationState, index: int, width: int, match_lines: frozenset[int]) -> str:
    line = state.lines[index].replace("\t", "    ")
    if index in match_lines:
        style = CURRENT_MATCH if index == state.current_match_line else MATCH_BG
        return style + fit_ansi_line(line, width) + RESET
    return fit_ansi_line(highlight_references(line, state.focused_ref), width)


def status_text(state: NavigationState) -> str:
    if state.content_search_active:
        return f"/{state.content_search}"
    parts = [f"{state.scroll_y + 1}/{len(state.lines)}"]
    if state.content_matches:
        parts.append(f"[{state.content_match_index + 1}/{len(state.content_matches)} matches]")
    if state.visible_refs:
        focused = state.focused_ref
        parts.append(f"→ RFC {focused}" if focused is not None else f"{len(state.visible_refs)} refs")
    if state.history:
        parts.append(f"← {len(state.history)} back")
    return " ".join(parts)


def _body_rows(state: NavigationState, width: int, rows: int, spinner_frame: int) -> list[str]:
    blank = " " * width
    out = [blank] * rows
    if state.loading:
        frame = SPINNER_FRAMES[spinner_frame % len(SPINNER_FRAMES)]
        label = f"{frame} Loading..."
        out[rows // 2] = fit_ansi_line(" " * max(0, (width - len(label)) // 2) + paint(label, ACCENT), width)
        return out
    if state.error:
        out[0] = fit_ansi_line(paint(f"Error: {state.error}", ERROR), width)
        return out
    match_lines = frozenset(state.content_matches)
    for row in range(rows):
        index = state.scroll_y + row
        if index >= len(state.lines):
            break
        out[row] = format_document_line(state, index, width, match_lines)
    return out


def compose_reader_screen(state: NavigationState, width: int, height: int, spinner_frame: int = 0) -> list[str]:
    """Return exactly ``height`` rows for the reader screen."""
    divider = paint("─" * width, DIVIDER)
    title = paint(truncate_plain(title_text(state), width), BOLD, ERROR if state.error else ACCENT)
    status = status_text(state)
    hints = READER_HINTS[state.keymap]
    hint_width = max(0, width - len(status) - 2)
    footer = paint(status, ACCENT) + "  " + paint(truncate_plain(hints, hint_width).rjust(hint_width), MUTED)
    lines = [fit_ansi_line(title, width), divider]
    lines.extend(_body_rows(state, width, reader_height(height), spinner_frame))
    lines.append(divider)
    lines.append(fit_ansi_line(footer, width))
    return lines[:height]
