"""Search helpers: query translation, reference scanning, and in-document matching."""

from .content import find_matching_lines, prepare_rfc_text
from .query import ParsedQuery, QueryFilter, parse_query, status_keyword, with_status_filter
from .references import (
    VISIBLE_REFS_WINDOW,
    RfcReference,
    collect_visible_refs,
    find_references,
    iter_references,
)

__all__ = [
    "ParsedQuery",
    "QueryFilter",
    "RfcReference",
    "VISIBLE_REFS_WINDOW",
    "collect_visible_refs",
    "find_matching_lines",
    "find_references",
    "iter_references",
    "parse_query",
    "prepare_rfc_text",
    "status_keyword",
    "with_status_filter",
]
