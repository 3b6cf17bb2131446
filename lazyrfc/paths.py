"""Filesystem locations and upstream endpoints.

Cache and log directories follow platform conventions via ``platformdirs``.
``LAZYRFC_HOME`` relocates the whole cache (database plus text files).
"""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_cache_dir, user_log_dir

APP_NAME = "lazyrfc"

RFC_INDEX_URL = "https://www.rfc-editor.org/rfc-index.xml"
RFC_BASE_URL = "https://www.rfc-editor.org/rfc"
RSYNC_MODULE = "rsync.rfc-editor.org::rfcs-text-only"

INDEX_MAX_AGE_SECONDS = 24 * 60 * 60
HTTP_TIMEOUT_SECONDS = 30.0


def app_dir() -> Path:
    """Return the cache root, honoring the ``LAZYRFC_HOME`` override."""
    override = os.environ.get("LAZYRFC_HOME", "").strip()
    if override:
        return Path(override).expanduser()
    return Path(user_cache_dir(APP_NAME, appauthor=False))


def db_path() -> Path:
    return app_dir() / "rfc.db"


def rfcs_dir() -> Path:
    return app_dir() / "rfcs"


def log_path() -> Path:
    return Path(user_log_dir(APP_NAME, appauthor=False)) / "lazyrfc.log"


def ensure_cache_dirs() -> None:
    """Create cache root and text-cache directories if missing."""
    rfcs_dir().mkdir(parents=True, exist_ok=True)


def rfc_file_name(number: int) -> str:
    """Return the rfc-editor file name for ``number`` (``rfc0791.txt``)."""
    return f"rfc{number:04d}.txt"


def rfc_file_path(number: int, directory: Path | None = None) -> Path:
    return (directory if directory is not None else rfcs_dir()) / rfc_file_name(number)
