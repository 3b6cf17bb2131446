"""RFC cross-reference scanning.

Matches ``RFC 1234``, ``RFC1234``, ``[RFC 1234]`` and ``[rfc1234]`` style
citations. Scanning is pure and restartable; matches never overlap.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

RFC_REF_RE = re.compile(r"\[?RFC\s*(\d{1,5})\]?", re.IGNORECASE)
VISIBLE_REFS_WINDOW = 40


@dataclass(frozen=True)
class RfcReference:
    """One citation: referenced number and its ``[start, end)`` span in the line."""

    number: int
    start: int
    end: int


def iter_references(line: str) -> Iterator[RfcReference]:
    """Yield references left to right."""
    for match in RFC_REF_RE.finditer(line):
        yield RfcReference(number=int(match.group(1)), start=match.start(), end=match.end())


def find_references(line: str) -> list[RfcReference]:
    return list(iter_references(line))


def collect_visible_refs(
    lines: Sequence[str],
    scroll_y: int,
    current_rfc: int | None,
    window: int = VISIBLE_REFS_WINDOW,
) -> tuple[int, ...]:
    """Return distinct referenced numbers near ``scroll_y`` in first-seen order.

    Scans ``window`` lines starting at ``scroll_y`` and skips self-references
    to ``current_rfc`` and ``RFC 0``, which names no document.
    """
    start = max(0, scroll_y)
    end = min(start + max(0, window), len(lines))
    seen: set[int] = set()
    refs: list[int] = []
    for idx in range(start, end):
        for ref in iter_references(lines[idx]):
            if ref.number == 0 or ref.number == current_rfc or ref.number in seen:
                continue
            seen.add(ref.number)
            refs.append(ref.number)
    return tuple(refs)
