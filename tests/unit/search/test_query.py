"""Tests for the search query language and the status filter prefix."""

from __future__ import annotations

import unittest

from lazyrfc.search.query import (
    ParsedQuery,
    QueryFilter,
    parse_query,
    status_keyword,
    with_status_filter,
)


class ParseQueryTests(unittest.TestCase):
    def test_free_text_only(self) -> None:
        self.assertEqual(parse_query("http  caching"), ParsedQuery(free_text="http caching"))

    def test_filters_and_free_text_keep_order(self) -> None:
        parsed = parse_query("author:fielding HTTP status:standard semantics")
        self.assertEqual(parsed.free_text, "HTTP semantics")
        self.assertEqual(
            parsed.filters,
            (QueryFilter("author", "fielding"), QueryFilter("status", "standard")),
        )

    def test_field_names_are_case_insensitive_and_lowercased(self) -> None:
        parsed = parse_query("WG:httpbis Stream:IETF")
        self.assertEqual(parsed.filters, (QueryFilter("wg", "httpbis"), QueryFilter("stream", "IETF")))
        self.assertEqual(parsed.free_text, "")

    def test_repeated_fields_are_all_kept(self) -> None:
        parsed = parse_query("author:fielding author:reschke")
        self.assertEqual(parsed.values_for("author"), ["fielding", "reschke"])

    def test_malformed_year_is_dropped(self) -> None:
        parsed = parse_query("year:abc tls")
        self.assertEqual(parsed, ParsedQuery(free_text="tls"))
        self.assertEqual(parse_query("year:2022").filters, (QueryFilter("year", "2022"),))

    def test_unknown_field_and_empty_value_are_free_text(self) -> None:
        parsed = parse_query("title:http status:")
        self.assertEqual(parsed.free_text, "title:http status:")
        self.assertEqual(parsed.filters, ())

    def test_empty_query(self) -> None:
        self.assertEqual(parse_query("   "), ParsedQuery())


class StatusFilterTests(unittest.TestCase):
    def test_status_keyword_uses_first_word(self) -> None:
        self.assertEqual(status_keyword("BEST CURRENT PRACTICE"), "best")
        self.assertEqual(status_keyword(""), "")

    def test_with_status_filter_prefixes_query(self) -> None:
        self.assertEqual(with_status_filter("tls", "PROPOSED STANDARD"), "status:proposed tls")
        self.assertEqual(with_status_filter("tls", None), "tls")

    def test_prefixed_query_parses_into_status_filter(self) -> None:
        parsed = parse_query(with_status_filter("quic", "INTERNET STANDARD"))
        self.assertEqual(parsed.filters, (QueryFilter("status", "internet"),))
        self.assertEqual(parsed.free_text, "quic")
