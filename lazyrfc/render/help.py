"""Help overlay content per keymap.

Rendering helpers here are presentation-only and side-effect free.
"""

from __future__ import annotations

from ..ansi import display_width, fit_ansi_line
from ..runtime.state import Keymap
from .style import BOLD, FAINT, KEY, MUTED, PANEL_BG, RESET, ACCENT

HELP_TITLE = "Key Bindings"

_VIM_SECTIONS: tuple[tuple[str, tuple[tuple[str, str], ...]], ...] = (
    (
        "Browse",
        (
            ("j/k ↑↓", "Navigate results"),
            ("Ctrl-d/u", "Page down/up"),
            ("g / G", "Top / bottom"),
            ("Enter / l", "Open RFC"),
            ("/", "Search"),
            ("s", "Cycle sort order"),
            ("Tab / S-Tab", "Cycle status filter"),
            ("i", "Info panel"),
            ("Esc", "Clear search"),
            ("q", "Quit"),
        ),
    ),
    (
        "Reader",
        (
            ("j/k ↑↓", "Scroll"),
            ("Ctrl-d/u", "Half-page scroll"),
            ("Space/f / b", "Page down / up"),
            ("g / G", "Top / bottom"),
            ("/", "Search in document"),
            ("n / N", "Next / prev match"),
            ("Tab", "Cycle RFC references"),
            ("Enter / l", "Follow reference"),
            ("i", "Info panel"),
            ("Esc / q / h", "Back"),
        ),
    ),
)

_EMACS_SECTIONS: tuple[tuple[str, tuple[tuple[str, str], ...]], ...] = (
    (
        "Browse",
        (
            ("C-n/C-p ↑↓", "Navigate results"),
            ("C-v / M-v", "Page down / up"),
            ("M-< / M->", "Top / bottom"),
            ("Enter", "Open RFC"),
            ("C-s", "Search"),
            ("s", "Cycle sort order"),
            ("Tab / S-Tab", "Cycle status filter"),
            ("i", "Info panel"),
            ("Esc", "Clear search"),
            ("C-c", "Quit"),
        ),
    ),
    (
        "Reader",
        (
            ("C-n/C-p", "Scroll"),
            ("C-v / M-v", "Page down / up"),
            ("M-< / M->", "Top / bottom"),
            ("C-s", "Search in document"),
            ("n / N", "Next / prev match"),
            ("Tab", "Cycle RFC references"),
            ("Enter", "Follow reference"),
            ("i", "Info panel"),
            ("C-g", "Back"),
        ),
    ),
)

_SYNTAX_LINES: tuple[str, ...] = (
    "  author:name  status:standard",
    "  wg:httpbis   year:2022  stream:irtf",
)


def help_lines(keymap: Keymap) -> list[str]:
    """Return styled help rows for ``keymap``."""
    sections = _VIM_SECTIONS if keymap is Keymap.VIM else _EMACS_SECTIONS
    lines = [f"{BOLD}{ACCENT}{HELP_TITLE} ({keymap.value}){RESET}", ""]
    for heading, rows in sections:
        lines.append(f"{BOLD}{MUTED}{heading}:{RESET}")
        for keys, label in rows:
            lines.append(f"  {KEY}{keys.ljust(14)}{RESET} {label}")
        lines.append("")
    lines.append(f"{BOLD}{MUTED}Search syntax:{RESET}")
    lines.extend(_SYNTAX_LINES)
    lines.append("")
    other = keymap.toggled().value
    lines.append(f"{FAINT}  K switch to {other}  ? close{RESET}")
    return lines


def help_box(keymap: Keymap, max_height: int) -> list[str]:
    """Return the bordered help panel, clipped to ``max_height`` rows."""
    body = help_lines(keymap)
    inner = max(display_width(line) for line in body) + 2
    top = f"{FAINT}┌ Help {'─' * max(0, inner - 6)}┐{RESET}"
    bottom = f"{FAINT}└{'─' * inner}┘{RESET}"
    rows = [top]
    for line in body[: max(0, max_height - 2)]:
        rows.append(f"{FAINT}│{RESET}{PANEL_BG} {fit_ansi_line(line, inner - 2)}{PANEL_BG} {RESET}{FAINT}│{RESET}")
    rows.append(bottom)
    return rows
