"""Local RFC data: SQLite store, document fetcher, index and bulk sync."""

from .fetch import RfcFetcher, document_url
from .index import ensure_index, index_is_stale, parse_rfc_index, sync_index
from .store import SEARCH_RESULT_LIMIT, RfcStore, Store
from .sync import index_local_files, sync_all

__all__ = [
    "RfcFetcher",
    "RfcStore",
    "SEARCH_RESULT_LIMIT",
    "Store",
    "document_url",
    "ensure_index",
    "index_is_stale",
    "index_local_files",
    "parse_rfc_index",
    "sync_all",
    "sync_index",
]
