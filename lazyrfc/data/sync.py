"""Bulk document sync from the RFC Editor rsync mirror."""

from __future__ import annotations

import logging
import re
import subprocess
from pathlib import Path

import requests

from ..errors import SyncError
from ..paths import RSYNC_MODULE
from .index import sync_index
from .store import RfcStore

logger = logging.getLogger(__name__)

RFC_FILE_RE = re.compile(r"^rfc(\d+)\.txt$")


def index_local_files(store: RfcStore, cache_dir: Path) -> int:
    """Load bodies of cached text files not yet in the store; return count loaded."""
    if not cache_dir.is_dir():
        return 0
    indexed = 0
    for path in sorted(cache_dir.iterdir()):
        match = RFC_FILE_RE.match(path.name)
        if match is None or not path.is_file():
            continue
        number = int(match.group(1))
        if store.is_fetched(number):
            continue
        text = path.read_text(encoding="utf-8", errors="replace")
        if store.update_body(number, text):
            indexed += 1
    logger.info("Indexed %d local files.", indexed)
    return indexed


def run_rsync(cache_dir: Path, module: str = RSYNC_MODULE) -> int:
    """Mirror ``module`` into ``cache_dir``; returns files rsync reported."""
    cache_dir.mkdir(parents=True, exist_ok=True)
    command = ["rsync", "-av", module, f"{cache_dir}/"]
    logger.info("Syncing RFCs...")
    logger.debug("running %s", " ".join(command))
    try:
        proc = subprocess.Popen(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
        )
    except FileNotFoundError as exc:
        raise SyncError("rsync failed: rsync is not installed") from exc

    file_count = 0
    assert proc.stdout is not None
    for line in proc.stdout:
        if RFC_FILE_RE.match(line.strip()):
            file_count += 1
            if file_count % 500 == 0:
                logger.info("Syncing RFCs (%d new)...", file_count)
    stderr = proc.stderr.read() if proc.stderr is not None else ""
    code = proc.wait()
    if code != 0:
        raise SyncError(f"rsync failed: {stderr.strip() or f'exit code {code}'}")
    return file_count


def sync_all(
    store: RfcStore,
    cache_dir: Path,
    session: requests.Session | None = None,
    module: str = RSYNC_MODULE,
) -> int:
    """Fetch every RFC text via rsync and load it into the store.

    Returns how many RFCs gained a cached body.
    """
    if store.index_count() == 0:
        sync_index(store, session)
    cached_before = store.cached_count()
    run_rsync(cache_dir, module)
    index_local_files(store, cache_dir)
    cached_after = store.cached_count()
    new_count = cached_after - cached_before
    if new_count > 0:
        logger.info("%d new RFCs, %d total available.", new_count, cached_after)
    else:
        logger.info("%d RFCs available, already up to date.", cached_after)
    return new_count
