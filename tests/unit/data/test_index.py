"""Tests for rfc-index.xml parsing and conditional index sync."""

from __future__ import annotations

import unittest
from datetime import datetime, timedelta, timezone
from unittest import mock

import requests

from lazyrfc.data.index import (
    META_ETAG,
    META_LAST_SYNC,
    ensure_index,
    index_is_stale,
    parse_rfc_index,
    sync_index,
)
from lazyrfc.data.store import RfcStore
from lazyrfc.errors import IndexSyncError
from lazyrfc.models import RELATION_OBSOLETES, RELATION_UPDATES, RfcDate, RfcMeta

INDEX_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<rfc-index xmlns="http://www.rfc-editor.org/rfc-index">
  <bcp-entry><doc-id>BCP0014</doc-id></bcp-entry>
  <rfc-entry>
    <doc-id>RFC2616</doc-id>
    <title>Hypertext Transfer Protocol -- HTTP/1.1</title>
    <author><name>R. Fielding</name></author>
    <author><name>J. Gettys</name></author>
    <date><month>June</month><year>1999</year></date>
    <format><file-format>ASCII</file-format><file-format>PDF</file-format></format>
    <page-count>176</page-count>
    <keywords><kw>http</kw><kw>hypertext</kw></keywords>
    <obsoletes><doc-id>RFC2068</doc-id></obsoletes>
    <obsoleted-by><doc-id>RFC7230</doc-id></obsoleted-by>
    <updated-by><doc-id>RFC2817</doc-id></updated-by>
    <current-status>DRAFT STANDARD</current-status>
    <publication-status>DRAFT STANDARD</publication-status>
    <stream>IETF</stream>
    <area>app</area>
    <wg_acronym>http</wg_acronym>
    <errata-url>https://www.rfc-editor.org/errata/rfc2616</errata-url>
    <doi>10.17487/RFC2616</doi>
  </rfc-entry>
  <rfc-entry>
    <doc-id>RFC2817</doc-id>
    <title>Upgrading to TLS Within HTTP/1.1</title>
    <date><month>May</month><year>2000</year></date>
    <updates><doc-id>RFC2616</doc-id></updates>
    <current-status>PROPOSED STANDARD</current-status>
    <abstract><p>This memo explains how to use   the Upgrade mechanism.</p><p>Second paragraph.</p></abstract>
  </rfc-entry>
  <rfc-not-issued-entry><doc-id>RFC1849</doc-id></rfc-not-issued-entry>
</rfc-index>
"""


def _response(status: int, content: bytes = b"", headers: dict | None = None) -> mock.Mock:
    response = mock.Mock()
    response.status_code = status
    response.ok = 200 <= status < 400
    response.reason = "reason"
    response.content = content
    response.headers = headers or {}
    return response


class ParseIndexTests(unittest.TestCase):
    def test_parses_rfc_entries_only(self) -> None:
        entries = parse_rfc_index(INDEX_XML)
        self.assertEqual([meta.number for meta, _rels in entries], [2616, 2817])

    def test_entry_fields(self) -> None:
        meta, relations = parse_rfc_index(INDEX_XML)[0]
        self.assertEqual(meta.title, "Hypertext Transfer Protocol -- HTTP/1.1")
        self.assertEqual(meta.authors, ("R. Fielding", "J. Gettys"))
        self.assertEqual(meta.date, RfcDate("June", 1999))
        self.assertEqual(meta.page_count, 176)
        self.assertEqual(meta.status, "DRAFT STANDARD")
        self.assertEqual(meta.stream, "IETF")
        self.assertEqual(meta.keywords, ("http", "hypertext"))
        self.assertEqual(meta.formats, ("ASCII", "PDF"))
        self.assertEqual(meta.wg, "http")
        self.assertEqual(meta.area, "app")
        self.assertEqual(meta.doi, "10.17487/RFC2616")
        self.assertEqual(meta.errata, "https://www.rfc-editor.org/errata/rfc2616")
        self.assertEqual(meta.obsoletes, (2068,))
        self.assertEqual([(r.source, r.target, r.type) for r in relations], [(2616, 2068, RELATION_OBSOLETES)])

    def test_defaults_and_abstract(self) -> None:
        meta, relations = parse_rfc_index(INDEX_XML)[1]
        self.assertEqual(meta.authors, ())
        self.assertEqual(meta.stream, "Legacy")
        self.assertIsNone(meta.wg)
        self.assertEqual(meta.abstract, "This memo explains how to use the Upgrade mechanism.\n\nSecond paragraph.")
        self.assertEqual([(r.source, r.target, r.type) for r in relations], [(2817, 2616, RELATION_UPDATES)])

    def test_invalid_xml_raises(self) -> None:
        with self.assertRaises(IndexSyncError):
            parse_rfc_index(b"<rfc-index")
        with self.assertRaises(IndexSyncError):
            parse_rfc_index(b"<other/>")


class SyncIndexTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = RfcStore(":memory:")
        self.addCleanup(self.store.close)
        self.session = mock.Mock()

    def test_sync_stores_entries_relations_and_etag(self) -> None:
        self.session.get.return_value = _response(200, INDEX_XML, {"ETag": '"v1"'})
        with self.assertLogs("lazyrfc.data.index", level="INFO"):
            count = sync_index(self.store, self.session, url="https://example.test/index.xml")
        self.assertEqual(count, 2)
        self.assertEqual(self.store.index_count(), 2)
        self.assertEqual(self.store.get_metadata(2616).updated_by, (2817,))
        self.assertEqual(self.store.get_meta_value(META_ETAG), '"v1"')
        self.assertIsNotNone(self.store.get_meta_value(META_LAST_SYNC))
        _args, kwargs = self.session.get.call_args
        self.assertEqual(kwargs["headers"], {})

    def test_second_sync_is_conditional_and_304_keeps_data(self) -> None:
        self.session.get.return_value = _response(200, INDEX_XML, {"ETag": '"v1"'})
        sync_index(self.store, self.session)
        self.session.get.return_value = _response(304)
        self.assertEqual(sync_index(self.store, self.session), 0)
        headers = self.session.get.call_args.kwargs["headers"]
        self.assertEqual(headers["If-None-Match"], '"v1"')
        self.assertTrue(headers["If-Modified-Since"].endswith("GMT"))
        self.assertEqual(self.store.index_count(), 2)

    def test_http_failure_raises(self) -> None:
        self.session.get.return_value = _response(500)
        with self.assertRaises(IndexSyncError):
            sync_index(self.store, self.session)
        self.session.get.side_effect = requests.Timeout("slow")
        with self.assertRaisesRegex(IndexSyncError, "slow"):
            sync_index(self.store, self.session)


class IndexStalenessTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = RfcStore(":memory:")
        self.addCleanup(self.store.close)

    def test_empty_index_is_stale(self) -> None:
        self.assertTrue(index_is_stale(self.store))

    def test_age_threshold(self) -> None:
        self.store.upsert_rfc(RfcMeta(number=1, title="Host Software"))
        synced = datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.store.set_meta_value(META_LAST_SYNC, synced.isoformat())
        self.assertFalse(index_is_stale(self.store, now=synced + timedelta(hours=23)))
        self.assertTrue(index_is_stale(self.store, now=synced + timedelta(hours=24)))

    def test_ensure_index_only_syncs_when_stale(self) -> None:
        with mock.patch("lazyrfc.data.index.sync_index") as sync:
            ensure_index(self.store, mock.sentinel.session)
        sync.assert_called_once_with(self.store, mock.sentinel.session)

        self.store.upsert_rfc(RfcMeta(number=1, title="Host Software"))
        self.store.set_meta_value(META_LAST_SYNC, datetime.now(timezone.utc).isoformat())
        with mock.patch("lazyrfc.data.index.sync_index") as sync:
            ensure_index(self.store)
        sync.assert_not_called()
