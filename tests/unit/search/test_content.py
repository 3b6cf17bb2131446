"""Tests for document line preparation and in-document search."""

from __future__ import annotations

import unittest

from lazyrfc.search.content import find_matching_lines, prepare_rfc_text


class PrepareRfcTextTests(unittest.TestCase):
    def test_strips_form_feeds_and_carriage_returns(self) -> None:
        raw = "Page 1\r\n\fPage 2\nend"
        self.assertEqual(prepare_rfc_text(raw), ["Page 1", "Page 2", "end"])

    def test_empty_body_is_one_empty_line(self) -> None:
        self.assertEqual(prepare_rfc_text(""), [""])


class FindMatchingLinesTests(unittest.TestCase):
    def test_single_occurrence_yields_its_line(self) -> None:
        lines = ["alpha", "beta", "Gamma ray", "delta"]
        self.assertEqual(find_matching_lines(lines, "gamma"), (2,))

    def test_multiple_occurrences_are_sorted(self) -> None:
        lines = ["TLS", "none", "uses tls", "tls again"]
        self.assertEqual(find_matching_lines(lines, "TLS"), (0, 2, 3))

    def test_empty_query_matches_nothing(self) -> None:
        self.assertEqual(find_matching_lines(["a", "b"], ""), ())
