"""Search query language.

``author:``, ``status:``, ``wg:``, ``year:`` and ``stream:`` tokens become
filters; every other token is free text for the full-text index.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

FILTER_FIELDS: tuple[str, ...] = ("author", "status", "wg", "year", "stream")
FILTER_TOKEN_RE = re.compile(r"^(author|status|wg|year|stream):(.+)$", re.IGNORECASE)


@dataclass(frozen=True)
class QueryFilter:
    field: str
    value: str


@dataclass(frozen=True)
class ParsedQuery:
    """Free text plus conjunctive field filters, in the order they were typed."""

    free_text: str = ""
    filters: tuple[QueryFilter, ...] = ()

    def values_for(self, field: str) -> list[str]:
        return [item.value for item in self.filters if item.field == field]


def _valid_year(value: str) -> bool:
    try:
        int(value)
    except ValueError:
        return False
    return True


def parse_query(raw: str) -> ParsedQuery:
    """Split ``raw`` on whitespace into free text and field filters.

    Field names match case-insensitively and are normalized to lowercase.
    Year filters that are not integers are dropped entirely.
    """
    filters: list[QueryFilter] = []
    free_terms: list[str] = []
    for token in raw.split():
        match = FILTER_TOKEN_RE.match(token)
        if match is None:
            free_terms.append(token)
            continue
        field = match.group(1).lower()
        value = match.group(2)
        if field == "year" and not _valid_year(value):
            continue
        filters.append(QueryFilter(field=field, value=value))
    return ParsedQuery(free_text=" ".join(free_terms), filters=tuple(filters))


def status_keyword(status: str) -> str:
    """Return the lowercased first word of a status label (``"proposed"``)."""
    words = status.split()
    return words[0].lower() if words else ""


def with_status_filter(query: str, status: str | None) -> str:
    """Prefix ``query`` with a ``status:`` token for the UI status filter."""
    if not status:
        return query
    keyword = status_keyword(status)
    if not keyword:
        return query
    return f"status:{keyword} {query}"
