"""SQLite-backed RFC metadata, body cache, and full-text index.

The ``rfcs`` table holds index metadata and cached bodies; ``rfc_fts`` is an
FTS5 external-content index over it, kept current by triggers. One
connection is shared between the UI thread and fetch threads, serialized by
an internal lock.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import threading
from collections.abc import Iterable, Iterator, Sequence
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from ..models import (
    RELATION_OBSOLETES,
    RELATION_UPDATES,
    RfcDate,
    RfcMeta,
    RfcRelation,
    SearchPage,
    SearchResult,
)
from ..runtime.state import SortOrder
from ..search.query import QueryFilter

logger = logging.getLogger(__name__)

SEARCH_RESULT_LIMIT = 500

SCHEMA = """
CREATE TABLE IF NOT EXISTS rfcs (
    number      INTEGER PRIMARY KEY,
    title       TEXT NOT NULL,
    authors     TEXT NOT NULL DEFAULT '[]',
    date_month  TEXT,
    date_year   INTEGER,
    page_count  INTEGER,
    status      TEXT,
    stream      TEXT,
    keywords    TEXT NOT NULL DEFAULT '[]',
    abstract    TEXT,
    wg          TEXT,
    area        TEXT,
    doi         TEXT,
    errata_url  TEXT,
    formats     TEXT NOT NULL DEFAULT '[]',
    body        TEXT,
    fetched_at  TEXT
);

CREATE TABLE IF NOT EXISTS rfc_relations (
    source   INTEGER NOT NULL,
    target   INTEGER NOT NULL,
    type     TEXT NOT NULL,
    PRIMARY KEY (source, target, type)
);

CREATE TABLE IF NOT EXISTS meta (
    key   TEXT PRIMARY KEY,
    value TEXT
);

CREATE VIRTUAL TABLE IF NOT EXISTS rfc_fts USING fts5(
    title, authors, keywords, abstract, body,
    content='rfcs',
    content_rowid='number',
    tokenize='porter unicode61'
);

CREATE TRIGGER IF NOT EXISTS rfcs_ai AFTER INSERT ON rfcs BEGIN
    INSERT INTO rfc_fts(rowid, title, authors, keywords, abstract, body)
    VALUES (new.number, new.title, new.authors, new.keywords, new.abstract, new.body);
END;

CREATE TRIGGER IF NOT EXISTS rfcs_au AFTER UPDATE ON rfcs BEGIN
    INSERT INTO rfc_fts(rfc_fts, rowid, title, authors, keywords, abstract, body)
    VALUES ('delete', old.number, old.title, old.authors, old.keywords, old.abstract, old.body);
    INSERT INTO rfc_fts(rowid, title, authors, keywords, abstract, body)
    VALUES (new.number, new.title, new.authors, new.keywords, new.abstract, new.body);
END;

CREATE TRIGGER IF NOT EXISTS rfcs_ad AFTER DELETE ON rfcs BEGIN
    INSERT INTO rfc_fts(rfc_fts, rowid, title, authors, keywords, abstract, body)
    VALUES ('delete', old.number, old.title, old.authors, old.keywords, old.abstract, old.body);
END;

CREATE INDEX IF NOT EXISTS idx_relations_source_type ON rfc_relations(source, type);
CREATE INDEX IF NOT EXISTS idx_relations_target_type ON rfc_relations(target, type);
"""

_ORDER_CLAUSES: dict[SortOrder, str] = {
    SortOrder.NUMBER_DESC: "ORDER BY r.number DESC",
    SortOrder.NUMBER_ASC: "ORDER BY r.number ASC",
    SortOrder.DATE: "ORDER BY r.date_year DESC, r.number DESC",
    SortOrder.RELEVANCE: "ORDER BY r.number DESC",
}


class Store(Protocol):
    """Read surface the interactive UI needs from the RFC store."""

    def search(
        self,
        free_text: str,
        filters: Sequence[QueryFilter] = (),
        sort_order: SortOrder = SortOrder.RELEVANCE,
        limit: int = SEARCH_RESULT_LIMIT,
    ) -> SearchPage: ...

    def get_metadata(self, number: int) -> RfcMeta | None: ...

    def get_body(self, number: int) -> str | None: ...


def fts_match_expression(free_text: str) -> str:
    """Quote each term and make it a prefix match: ``"http"* "cache"*``."""
    terms = free_text.split()
    return " ".join('"' + term.replace('"', '""') + '"*' for term in terms)


def _filter_clause(item: QueryFilter) -> tuple[str, object] | None:
    """Translate one filter into a SQL predicate and its parameter."""
    if item.field == "author":
        return "r.authors LIKE ? COLLATE NOCASE", f"%{item.value}%"
    if item.field == "status":
        return "UPPER(r.status) LIKE ?", f"%{item.value.upper()}%"
    if item.field == "stream":
        return "UPPER(r.stream) LIKE ?", f"%{item.value.upper()}%"
    if item.field == "wg":
        return "r.wg = ? COLLATE NOCASE", item.value
    if item.field == "year":
        try:
            return "r.date_year = ?", int(item.value)
        except ValueError:
            return None
    return None


def _json_list(raw: object) -> tuple:
    if not isinstance(raw, str) or not raw:
        return ()
    try:
        value = json.loads(raw)
    except ValueError:
        return ()
    return tuple(value) if isinstance(value, list) else ()


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class RfcStore:
    """RFC store over one SQLite database file (or ``":memory:"``)."""

    def __init__(self, path: Path | str) -> None:
        self.path = path
        self._lock = threading.RLock()
        self._conn = sqlite3.connect(str(path), check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        if str(path) != ":memory:":
            self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA foreign_keys=ON")
        self._conn.executescript(SCHEMA)
        logger.debug("opened RFC store at %s", path)

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def __enter__(self) -> RfcStore:
        return self

    def __exit__(self, *_exc) -> None:
        self.close()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Group writes into one commit, rolling back on any error."""
        with self._lock:
            try:
                yield
            except BaseException:
                self._conn.rollback()
                raise
            self._conn.commit()

    # --- key/value metadata ---

    def get_meta_value(self, key: str) -> str | None:
        with self._lock:
            row = self._conn.execute("SELECT value FROM meta WHERE key = ?", (key,)).fetchone()
        return row["value"] if row is not None else None

    def set_meta_value(self, key: str, value: str) -> None:
        with self._lock:
            self._conn.execute("INSERT OR REPLACE INTO meta (key, value) VALUES (?, ?)", (key, value))
            self._conn.commit()

    # --- writes ---

    def upsert_rfc(self, meta: RfcMeta, commit: bool = True) -> None:
        with self._lock:
            self._conn.execute(
                """
                INSERT INTO rfcs (number, title, authors, date_month, date_year, page_count,
                    status, stream, keywords, abstract, wg, area, doi, errata_url, formats)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(number) DO UPDATE SET
                    title=excluded.title, authors=excluded.authors, date_month=excluded.date_month,
                    date_year=excluded.date_year, page_count=excluded.page_count, status=excluded.status,
                    stream=excluded.stream, keywords=excluded.keywords, abstract=excluded.abstract,
                    wg=excluded.wg, area=excluded.area, doi=excluded.doi, errata_url=excluded.errata_url,
                    formats=excluded.formats
                """,
                (
                    meta.number,
                    meta.title,
                    json.dumps(list(meta.authors)),
                    meta.date.month,
                    meta.date.year,
                    meta.page_count,
                    meta.status,
                    meta.stream,
                    json.dumps(list(meta.keywords)),
                    meta.abstract,
                    meta.wg,
                    meta.area,
                    meta.doi,
                    meta.errata,
                    json.dumps(list(meta.formats)),
                ),
            )
            if commit:
                self._conn.commit()

    def upsert_relations(self, relations: Iterable[RfcRelation], commit: bool = True) -> None:
        with self._lock:
            self._conn.executemany(
                "INSERT OR IGNORE INTO rfc_relations (source, target, type) VALUES (?, ?, ?)",
                [(rel.source, rel.target, rel.type) for rel in relations],
            )
            if commit:
                self._conn.commit()

    def update_body(self, number: int, body: str) -> bool:
        """Store a fetched body; returns ``False`` when the RFC is not indexed."""
        with self._lock:
            cursor = self._conn.execute(
                "UPDATE rfcs SET body = ?, fetched_at = ? WHERE number = ?",
                (body, _now_iso(), number),
            )
            self._conn.commit()
        if cursor.rowcount == 0:
            logger.debug("RFC %d is not in the index; body not stored", number)
            return False
        return True

    # --- reads ---

    def get_metadata(self, number: int) -> RfcMeta | None:
        with self._lock:
            row = self._conn.execute("SELECT * FROM rfcs WHERE number = ?", (number,)).fetchone()
            if row is None:
                return None
            relations = self._load_relations([number])
        return self._row_to_meta(row, relations.get(number))

    def get_body(self, number: int) -> str | None:
        with self._lock:
            row = self._conn.execute("SELECT body FROM rfcs WHERE number = ?", (number,)).fetchone()
        if row is None:
            return None
        return row["body"] or None

    def is_fetched(self, number: int) -> bool:
        with self._lock:
            row = self._conn.execute("SELECT fetched_at FROM rfcs WHERE number = ?", (number,)).fetchone()
        return row is not None and row["fetched_at"] is not None

    def list_cached(self) -> list[RfcMeta]:
        with self._lock:
            rows = self._conn.execute(
                "SELECT * FROM rfcs WHERE fetched_at IS NOT NULL ORDER BY number"
            ).fetchall()
            relations = self._load_relations([row["number"] for row in rows])
        return [self._row_to_meta(row, relations.get(row["number"])) for row in rows]

    def index_count(self) -> int:
        with self._lock:
            row = self._conn.execute("SELECT COUNT(*) AS count FROM rfcs").fetchone()
        return int(row["count"])

    def cached_count(self) -> int:
        with self._lock:
            row = self._conn.execute(
                "SELECT COUNT(*) AS count FROM rfcs WHERE fetched_at IS NOT NULL"
            ).fetchone()
        return int(row["count"])

    def search(
        self,
        free_text: str,
        filters: Sequence[QueryFilter] = (),
        sort_order: SortOrder = SortOrder.RELEVANCE,
        limit: int = SEARCH_RESULT_LIMIT,
    ) -> SearchPage:
        """Run a filtered full-text search.

        Relevance ordering (FTS5 ``bm25``) applies only when free text is
        present and ``sort_order`` is ``RELEVANCE``; otherwise results are
        ordered by number or date. ``total`` counts every match even when
        ``limit`` truncates ``results``.
        """
        where: list[str] = []
        params: list[object] = []
        for item in filters:
            clause = _filter_clause(item)
            if clause is None:
                continue
            where.append(clause[0])
            params.append(clause[1])

        free_text = free_text.strip()
        if free_text and sort_order is SortOrder.RELEVANCE:
            order_clause = "ORDER BY rank"
        else:
            order_clause = _ORDER_CLAUSES[sort_order]

        if free_text:
            from_clause = "FROM rfc_fts JOIN rfcs r ON r.number = rfc_fts.rowid"
            where.insert(0, "rfc_fts MATCH ?")
            params.insert(0, fts_match_expression(free_text))
            select_clause = "SELECT r.*, bm25(rfc_fts) AS rank"
        else:
            from_clause = "FROM rfcs r"
            select_clause = "SELECT r.*, 0 AS rank"

        where_clause = f"WHERE {' AND '.join(where)}" if where else ""
        sql = f"{select_clause} {from_clause} {where_clause} {order_clause} LIMIT ?"
        count_sql = f"SELECT COUNT(*) AS total {from_clause} {where_clause}"

        with self._lock:
            rows = self._conn.execute(sql, (*params, max(0, limit))).fetchall()
            total = int(self._conn.execute(count_sql, params).fetchone()["total"])
            relations = self._load_relations([row["number"] for row in rows])

        results = tuple(
            SearchResult(
                metadata=self._row_to_meta(row, relations.get(row["number"])),
                rank=float(row["rank"] or 0.0),
            )
            for row in rows
        )
        logger.debug("search %r filters=%s order=%s -> %d/%d", free_text, list(filters), sort_order.value, len(results), total)
        return SearchPage(results=results, total=total)

    # --- helpers ---

    def _load_relations(self, numbers: Sequence[int]) -> dict[int, dict[str, list[int]]]:
        """Batch-load obsoletes/updates edges in both directions for ``numbers``."""
        out: dict[int, dict[str, list[int]]] = {
            number: {"obsoletes": [], "obsoleted_by": [], "updates": [], "updated_by": []}
            for number in numbers
        }
        if not numbers:
            return out
        placeholders = ",".join("?" for _ in numbers)
        for row in self._conn.execute(
            f"SELECT source, target, type FROM rfc_relations WHERE source IN ({placeholders}) "
            "ORDER BY target",
            list(numbers),
        ):
            if row["type"] == RELATION_OBSOLETES:
                out[row["source"]]["obsoletes"].append(row["target"])
            elif row["type"] == RELATION_UPDATES:
                out[row["source"]]["updates"].append(row["target"])
        for row in self._conn.execute(
            f"SELECT source, target, type FROM rfc_relations WHERE target IN ({placeholders}) "
            "ORDER BY source",
            list(numbers),
        ):
            if row["type"] == RELATION_OBSOLETES:
                out[row["target"]]["obsoleted_by"].append(row["source"])
            elif row["type"] == RELATION_UPDATES:
                out[row["target"]]["updated_by"].append(row["source"])
        return out

    @staticmethod
    def _row_to_meta(row: sqlite3.Row, relations: dict[str, list[int]] | None) -> RfcMeta:
        rels = relations or {}
        return RfcMeta(
            number=row["number"],
            title=row["title"],
            authors=_json_list(row["authors"]),
            date=RfcDate(month=row["date_month"] or "", year=row["date_year"] or 0),
            page_count=row["page_count"] or 0,
            status=row["status"] or "UNKNOWN",
            stream=row["stream"] or "Legacy",
            keywords=_json_list(row["keywords"]),
            abstract=row["abstract"] or None,
            obsoletes=tuple(rels.get("obsoletes", ())),
            obsoleted_by=tuple(rels.get("obsoleted_by", ())),
            updates=tuple(rels.get("updates", ())),
            updated_by=tuple(rels.get("updated_by", ())),
            wg=row["wg"] or None,
            area=row["area"] or None,
            errata=row["errata_url"] or None,
            doi=row["doi"] or "",
            formats=_json_list(row["formats"]),
        )
