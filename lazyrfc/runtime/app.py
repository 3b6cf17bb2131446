"""Runtime composition layer for lazyrfc.

Opens the store, refreshes the index, builds the initial state, wires the
key router, document session and renderer together, and starts the loop.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import replace

import requests

from ..data.fetch import RfcFetcher
from ..data.index import ensure_index
from ..data.store import RfcStore
from ..input import KeyContext, KeyRouter
from ..input.key_common import run_search
from ..logs import configure_logging
from ..paths import db_path, ensure_cache_dirs, log_path, rfcs_dir
from ..render import render_frame
from .config import resolve_keymap, save_keymap_preference
from .loop import RuntimeLoopCallbacks, run_main_loop
from .session import DocumentSession
from .state import Keymap, NavigationState, initial_state
from .terminal import TerminalController

logger = logging.getLogger(__name__)


def build_initial_state(store, keymap: Keymap) -> NavigationState:
    """Return the startup state with the unfiltered result list loaded."""
    state = run_search(initial_state(keymap), store)
    return replace(state, index_total=store.index_count())


def title_lookup(store):
    """Return a ``number -> title`` callable backed by ``store``."""

    def lookup(number: int) -> str | None:
        meta = store.get_metadata(number)
        return meta.title if meta is not None else None

    return lookup


def run_tui(keymap_override: Keymap | None = None, verbose: bool = False) -> None:
    """Run the interactive UI until the user quits.

    The index is refreshed before the terminal switches to raw mode, so sync
    progress still reaches stderr. Once the UI owns the screen, log records
    go to the log file.
    """
    if not os.isatty(sys.stdin.fileno()) or not os.isatty(sys.stdout.fileno()):
        raise SystemExit("lazyrfc: the interactive UI needs a terminal")

    configure_logging(verbose=verbose)
    ensure_cache_dirs()
    http = requests.Session()
    with RfcStore(db_path()) as store:
        ensure_index(store, http)
        configure_logging(verbose=verbose, log_file=log_path())

        fetcher = RfcFetcher(store, session=http, cache_dir=rfcs_dir())
        session = DocumentSession(fetcher.fetch_document, title_lookup(store))
        router = KeyRouter(
            KeyContext(
                store=store,
                open_document=session.open,
                save_keymap=save_keymap_preference,
            )
        )
        state = build_initial_state(store, resolve_keymap(override=keymap_override))
        logger.info("starting UI with %d indexed RFCs", state.index_total)

        stdin_fd = sys.stdin.fileno()
        terminal = TerminalController(stdin_fd, sys.stdout.fileno())
        callbacks = RuntimeLoopCallbacks(
            handle_key=router.handle,
            drain_updates=session.drain,
            render=lambda st, size, frame: render_frame(
                st, size.columns, size.lines, store.get_metadata, frame
            ),
        )
        try:
            with terminal.raw_mode():
                run_main_loop(state, stdin_fd, callbacks)
        finally:
            configure_logging(verbose=verbose)
