"""Persistent JSON config helpers.

Stores the keymap preference.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path

from platformdirs import user_config_dir

from .state import Keymap

APP_NAME = "lazyrfc"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
LEGACY_CONFIG_PATH = Path.home() / ".config" / "rfc" / "config.json"
CONFIG_PATH = DEFAULT_CONFIG_PATH

KEYMAP_ENV_VARS: tuple[str, ...] = ("LAZYRFC_KEYMAP", "RFC_KEYMAP")


def _load_config_path() -> Path:
    """Return preferred config path, falling back to legacy location when needed."""
    if CONFIG_PATH.exists():
        return CONFIG_PATH
    if CONFIG_PATH == DEFAULT_CONFIG_PATH and LEGACY_CONFIG_PATH.exists():
        return LEGACY_CONFIG_PATH
    return CONFIG_PATH


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = _load_config_path()
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are ignored so a read-only config directory never
    interrupts the UI.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError:
        pass


def parse_keymap(value: object) -> Keymap | None:
    """Return the keymap named by ``value`` or ``None`` for anything else."""
    if not isinstance(value, str):
        return None
    try:
        return Keymap(value.strip().lower())
    except ValueError:
        return None


def load_keymap_preference() -> Keymap | None:
    return parse_keymap(load_config().get("keymap"))


def save_keymap_preference(keymap: Keymap) -> None:
    config = load_config()
    config["keymap"] = keymap.value
    save_config(config)


def resolve_keymap(
    env: Mapping[str, str] | None = None,
    override: Keymap | None = None,
) -> Keymap:
    """Pick the startup keymap.

    Precedence: explicit ``override``, environment variable, persisted
    preference, then vim.
    """
    if override is not None:
        return override
    environ = os.environ if env is None else env
    for name in KEYMAP_ENV_VARS:
        from_env = parse_keymap(environ.get(name))
        if from_env is not None:
            return from_env
    persisted = load_keymap_preference()
    if persisted is not None:
        return persisted
    return Keymap.VIM
