"""Value types shared by the store, fetcher, CLI, and TUI.

Everything here is a frozen dataclass so results can be shared freely between
the search screen, the info overlay, and background fetch threads.
"""

from __future__ import annotations

from dataclasses import dataclass, field

RFC_STATUSES: tuple[str, ...] = (
    "INTERNET STANDARD",
    "DRAFT STANDARD",
    "PROPOSED STANDARD",
    "BEST CURRENT PRACTICE",
    "INFORMATIONAL",
    "EXPERIMENTAL",
    "HISTORIC",
    "UNKNOWN",
)

RFC_STREAMS: tuple[str, ...] = ("IETF", "IAB", "IRTF", "Independent", "Legacy")

RELATION_OBSOLETES = "obsoletes"
RELATION_UPDATES = "updates"


@dataclass(frozen=True)
class RfcDate:
    """Publication month name and year as listed by the RFC index."""

    month: str = ""
    year: int = 0

    def label(self) -> str:
        return f"{self.month} {self.year}".strip() if self.year else self.month


@dataclass(frozen=True)
class RfcMeta:
    """Index metadata for one RFC."""

    number: int
    title: str
    authors: tuple[str, ...] = ()
    date: RfcDate = field(default_factory=RfcDate)
    page_count: int = 0
    status: str = "UNKNOWN"
    stream: str = "Legacy"
    keywords: tuple[str, ...] = ()
    abstract: str | None = None
    obsoletes: tuple[int, ...] = ()
    obsoleted_by: tuple[int, ...] = ()
    updates: tuple[int, ...] = ()
    updated_by: tuple[int, ...] = ()
    wg: str | None = None
    area: str | None = None
    errata: str | None = None
    doi: str = ""
    formats: tuple[str, ...] = ()


@dataclass(frozen=True)
class RfcRelation:
    """Directed ``obsoletes``/``updates`` edge between two RFC numbers."""

    source: int
    target: int
    type: str


@dataclass(frozen=True)
class SearchResult:
    metadata: RfcMeta
    rank: float = 0.0


@dataclass(frozen=True)
class SearchPage:
    """One capped page of search results plus the uncapped match count."""

    results: tuple[SearchResult, ...] = ()
    total: int = 0
