"""Cache-first RFC document retrieval.

Lookup order is the store's cached body, then an on-disk ``rfcNNNN.txt``
(e.g. from ``rsync``), then HTTP from the RFC Editor. Anything fetched over
the network is written to both the text cache and the store.
"""

from __future__ import annotations

import logging
from pathlib import Path

import requests

from ..errors import FetchError
from ..paths import HTTP_TIMEOUT_SECONDS, RFC_BASE_URL, rfc_file_name, rfc_file_path, rfcs_dir
from .store import RfcStore

logger = logging.getLogger(__name__)


def document_url(number: int, base_url: str = RFC_BASE_URL) -> str:
    """Return the plain-text URL for ``number`` (``.../rfc0791.txt``)."""
    return f"{base_url.rstrip('/')}/{rfc_file_name(number)}"


class RfcFetcher:
    """Fetch RFC bodies through the store, the text cache, then the network."""

    def __init__(
        self,
        store: RfcStore,
        session: requests.Session | None = None,
        cache_dir: Path | None = None,
        base_url: str = RFC_BASE_URL,
        timeout: float = HTTP_TIMEOUT_SECONDS,
    ) -> None:
        self.store = store
        self.session = session if session is not None else requests.Session()
        self.cache_dir = cache_dir if cache_dir is not None else rfcs_dir()
        self.base_url = base_url
        self.timeout = timeout

    def cache_path(self, number: int) -> Path:
        return rfc_file_path(number, self.cache_dir)

    def _read_cached_file(self, number: int) -> str | None:
        path = self.cache_path(number)
        try:
            return path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.debug("could not read %s: %s", path, exc)
            return None

    def _download(self, number: int) -> str:
        url = document_url(number, self.base_url)
        logger.info("Fetching RFC %d...", number)
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise FetchError(number, f"Failed to fetch RFC {number}: {exc}") from exc
        if response.status_code == 404:
            raise FetchError(number, f"RFC {number} not found")
        if not response.ok:
            raise FetchError(number, f"Failed to fetch RFC {number}: {response.status_code}")
        return response.text

    def _write_cache_file(self, number: int, text: str) -> None:
        path = self.cache_path(number)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except OSError as exc:
            logger.warning("could not cache RFC %d at %s: %s", number, path, exc)

    def fetch_document(self, number: int) -> str:
        """Return the body of RFC ``number``, raising ``FetchError`` on failure."""
        cached = self.store.get_body(number)
        if cached:
            return cached

        on_disk = self._read_cached_file(number)
        if on_disk is not None:
            self.store.update_body(number, on_disk)
            return on_disk

        text = self._download(number)
        self._write_cache_file(number, text)
        self.store.update_body(number, text)
        return text

    def fetch_to_file(self, number: int) -> Path:
        """Ensure RFC ``number`` is in the text cache and return its path."""
        path = self.cache_path(number)
        text = self.fetch_document(number)
        if not path.exists():
            self._write_cache_file(number, text)
        return path
