"""Document text preparation and in-document substring search."""

from __future__ import annotations

from collections.abc import Sequence


def prepare_rfc_text(raw: str) -> list[str]:
    """Split an RFC body into display lines, dropping form-feed page breaks."""
    cleaned = raw.replace("\f", "").replace("\r\n", "\n")
    return cleaned.split("\n")


def find_matching_lines(lines: Sequence[str], query: str) -> tuple[int, ...]:
    """Return ascending indices of lines containing ``query`` (case-insensitive)."""
    if not query:
        return ()
    needle = query.lower()
    return tuple(idx for idx, line in enumerate(lines) if needle in line.lower())
