"""ANSI-aware text measurement and line shaping utilities.

Clipping and padding count display columns, not characters, so styled
lines and wide glyphs stay aligned with terminal cells.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8
RESET = "\033[0m"


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``."""
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def display_width(text: str) -> int:
    """Return display columns used by ``text`` once escapes are removed."""
    col = 0
    for ch in strip_ansi(text):
        col += char_display_width(ch, col)
    return col


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    Escape sequences are kept and do not count toward width; tabs expand to
    spaces so clipping matches what the terminal draws.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    while i < len(text) and col < max_cols:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        ch = text[i]
        width = char_display_width(ch, col)
        if col + width > max_cols:
            break
        out.append(" " * width if ch == "\t" else ch)
        col += width
        i += 1
    return "".join(out)


def fit_ansi_line(text: str, width: int) -> str:
    """Clip then right-pad ``text`` to exactly ``width`` columns."""
    clipped = clip_ansi_line(text, width)
    return clipped + " " * max(0, width - display_width(clipped))


def truncate_plain(text: str, width: int, ellipsis: str = "…") -> str:
    """Shorten unstyled ``text`` to ``width`` columns, marking the cut."""
    if width <= 0:
        return ""
    if display_width(text) <= width:
        return text
    return clip_ansi_line(text, max(0, width - 1)) + ellipsis
