"""RFC Editor index download and parsing.

``rfc-index.xml`` lists every RFC with its metadata and obsoletes/updates
relations. Downloads are conditional on the stored ETag and last sync time.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from email.utils import format_datetime

import requests

from ..errors import IndexSyncError
from ..models import RELATION_OBSOLETES, RELATION_UPDATES, RfcDate, RfcMeta, RfcRelation
from ..paths import HTTP_TIMEOUT_SECONDS, INDEX_MAX_AGE_SECONDS, RFC_INDEX_URL
from .store import RfcStore

logger = logging.getLogger(__name__)

NS = "{http://www.rfc-editor.org/rfc-index}"
DOC_ID_RE = re.compile(r"^RFC(\d+)$")

META_LAST_SYNC = "index_last_sync"
META_ETAG = "index_etag"

IndexEntry = tuple[RfcMeta, list[RfcRelation]]


def _text(elem: ET.Element | None) -> str:
    if elem is None or elem.text is None:
        return ""
    return elem.text.strip()


def _child_text(entry: ET.Element, tag: str) -> str:
    return _text(entry.find(NS + tag))


def _int(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        return 0


def _doc_number(value: str) -> int | None:
    match = DOC_ID_RE.match(value)
    return int(match.group(1)) if match else None


def _related_numbers(entry: ET.Element, tag: str) -> list[int]:
    container = entry.find(NS + tag)
    if container is None:
        return []
    numbers = []
    for doc_id in container.findall(NS + "doc-id"):
        number = _doc_number(_text(doc_id))
        if number is not None:
            numbers.append(number)
    return numbers


def _abstract(entry: ET.Element) -> str | None:
    node = entry.find(NS + "abstract")
    if node is None:
        return None
    paragraphs = [" ".join("".join(p.itertext()).split()) for p in node.findall(NS + "p")]
    text = "\n\n".join(p for p in paragraphs if p)
    return text or None


def parse_entry(entry: ET.Element) -> IndexEntry | None:
    """Parse one ``<rfc-entry>``; returns ``None`` for malformed doc ids."""
    number = _doc_number(_child_text(entry, "doc-id"))
    if number is None:
        return None

    authors = tuple(
        name
        for name in (_text(author.find(NS + "name")) for author in entry.findall(NS + "author"))
        if name
    )
    date = entry.find(NS + "date")
    month = _child_text(date, "month") if date is not None else ""
    year = _int(_child_text(date, "year")) if date is not None else 0

    keywords_node = entry.find(NS + "keywords")
    keywords = (
        tuple(kw for kw in (_text(k) for k in keywords_node.findall(NS + "kw")) if kw)
        if keywords_node is not None
        else ()
    )
    format_node = entry.find(NS + "format")
    formats = (
        tuple(f for f in (_text(ff) for ff in format_node.findall(NS + "file-format")) if f)
        if format_node is not None
        else ()
    )

    obsoletes = _related_numbers(entry, "obsoletes")
    updates = _related_numbers(entry, "updates")
    relations = [RfcRelation(number, target, RELATION_OBSOLETES) for target in obsoletes]
    relations += [RfcRelation(number, target, RELATION_UPDATES) for target in updates]

    meta = RfcMeta(
        number=number,
        title=_child_text(entry, "title") or f"RFC {number}",
        authors=authors,
        date=RfcDate(month=month, year=year),
        page_count=_int(_child_text(entry, "page-count")),
        status=_child_text(entry, "current-status") or "UNKNOWN",
        stream=_child_text(entry, "stream") or "Legacy",
        keywords=keywords,
        abstract=_abstract(entry),
        obsoletes=tuple(obsoletes),
        updates=tuple(updates),
        wg=_child_text(entry, "wg_acronym") or None,
        area=_child_text(entry, "area") or None,
        errata=_child_text(entry, "errata-url") or None,
        doi=_child_text(entry, "doi"),
        formats=formats,
    )
    return meta, relations


def parse_rfc_index(xml_bytes: bytes) -> list[IndexEntry]:
    """Parse a full ``rfc-index.xml`` document into metadata and relations."""
    try:
        root = ET.fromstring(xml_bytes)
    except ET.ParseError as exc:
        raise IndexSyncError(f"Invalid index XML: {exc}") from exc
    if root.tag != NS + "rfc-index":
        raise IndexSyncError("Invalid index XML: missing rfc-index root")
    entries = []
    for element in root.findall(NS + "rfc-entry"):
        parsed = parse_entry(element)
        if parsed is not None:
            entries.append(parsed)
    return entries


def _parse_iso(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _mark_synced(store: RfcStore) -> None:
    store.set_meta_value(META_LAST_SYNC, datetime.now(timezone.utc).isoformat())


def sync_index(
    store: RfcStore,
    session: requests.Session | None = None,
    url: str = RFC_INDEX_URL,
    timeout: float = HTTP_TIMEOUT_SECONDS,
) -> int:
    """Download and store the RFC index; returns entries indexed (0 if unchanged)."""
    session = session if session is not None else requests.Session()
    headers: dict[str, str] = {}
    etag = store.get_meta_value(META_ETAG)
    if etag:
        headers["If-None-Match"] = etag
    last_sync = _parse_iso(store.get_meta_value(META_LAST_SYNC))
    if last_sync is not None:
        headers["If-Modified-Since"] = format_datetime(last_sync, usegmt=True)

    logger.info("Fetching RFC index...")
    try:
        response = session.get(url, headers=headers, timeout=timeout)
    except requests.RequestException as exc:
        raise IndexSyncError(f"Failed to fetch index: {exc}") from exc

    if response.status_code == 304:
        logger.info("Index is up to date.")
        _mark_synced(store)
        return 0
    if not response.ok:
        raise IndexSyncError(f"Failed to fetch index: {response.status_code} {response.reason}")

    content = response.content
    logger.info("Parsing index (%.1f MB)...", len(content) / 1024 / 1024)
    entries = parse_rfc_index(content)
    logger.info("Indexing %d RFCs...", len(entries))

    with store.transaction():
        for meta, relations in entries:
            store.upsert_rfc(meta, commit=False)
            if relations:
                store.upsert_relations(relations, commit=False)

    new_etag = response.headers.get("ETag")
    if new_etag:
        store.set_meta_value(META_ETAG, new_etag)
    _mark_synced(store)
    logger.info("Indexed %d RFCs.", len(entries))
    return len(entries)


def index_is_stale(store: RfcStore, now: datetime | None = None) -> bool:
    """Return whether the index is empty or older than the max age."""
    if store.index_count() == 0:
        return True
    last_sync = _parse_iso(store.get_meta_value(META_LAST_SYNC))
    if last_sync is None:
        return True
    now = now if now is not None else datetime.now(timezone.utc)
    return (now - last_sync).total_seconds() >= INDEX_MAX_AGE_SECONDS


def ensure_index(store: RfcStore, session: requests.Session | None = None) -> None:
    """Refresh the index when it is empty or stale."""
    if index_is_stale(store):
        sync_index(store, session)
