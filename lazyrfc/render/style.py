"""Fixed ANSI palette and status labels shared by the screen renderers."""

from __future__ import annotations

RESET = "\033[0m"
BOLD = "\033[1m"
DIM = "\033[2m"
UNDERLINE = "\033[4m"
STRIKE = "\033[9m"
REVERSE = "\033[7m"

ACCENT = "\033[38;5;45m"
KEY = "\033[38;5;229m"
MUTED = "\033[38;5;244m"
FAINT = "\033[38;5;240m"
DIVIDER = "\033[38;5;236m"
ERROR = "\033[38;5;203m"
NUMBER = "\033[38;5;221m"
OBSOLETE = "\033[38;5;131m"

SELECTED_BG = "\033[48;5;24m"
MATCH_BG = "\033[48;5;58m"
CURRENT_MATCH = "\033[30;48;5;220m"
REF = "\033[38;5;45;4m"
FOCUSED_REF = "\033[30;48;5;45m"
BADGE_ACTIVE = "\033[1;30;48;5;45m"
PANEL_BG = "\033[48;5;233m"

STATUS_COLORS: dict[str, str] = {
    "INTERNET STANDARD": "\033[38;5;114m",
    "DRAFT STANDARD": "\033[38;5;150m",
    "PROPOSED STANDARD": "\033[38;5;75m",
    "BEST CURRENT PRACTICE": "\033[38;5;176m",
    "INFORMATIONAL": "\033[38;5;250m",
    "EXPERIMENTAL": "\033[38;5;215m",
    "HISTORIC": "\033[38;5;243m",
}

STATUS_SHORT: dict[str, str] = {
    "INTERNET STANDARD": "STANDARD",
    "PROPOSED STANDARD": "PROPOSED",
    "BEST CURRENT PRACTICE": "BCP",
    "DRAFT STANDARD": "DRAFT STD",
    "INFORMATIONAL": "INFO",
    "EXPERIMENTAL": "EXP",
    "HISTORIC": "HISTORIC",
}

# Filter badge labels, aligned with ``STATUS_FILTERS``.
STATUS_BADGES: dict[str | None, str] = {
    None: "ALL",
    "INTERNET STANDARD": "STD",
    "PROPOSED STANDARD": "PROPOSED",
    "BEST CURRENT PRACTICE": "BCP",
    "INFORMATIONAL": "INFO",
    "EXPERIMENTAL": "EXP",
    "HISTORIC": "HIST",
}

SPINNER_FRAMES: tuple[str, ...] = ("⠋", "⠙", "⠸", "⠴", "⠦", "⠇")


def status_color(status: str) -> str:
    return STATUS_COLORS.get(status, MUTED)


def short_status(status: str) -> str:
    return STATUS_SHORT.get(status, status[:10])


def paint(text: str, *styles: str) -> str:
    """Wrap ``text`` in ``styles`` followed by a reset."""
    if not text or not styles:
        return text
    return "".join(styles) + text + RESET
