"""Keyboard dispatch facade: global keys first, then per-mode handlers."""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import replace

from ..runtime.state import NavigationState, Screen
from .key_browse import handle_browse_key
from .key_common import NO_CHANGE, KeyContext, KeyOutcome
from .key_content_search import handle_content_search_key
from .key_reader import handle_reader_key
from .key_registry import KeyComboBinding, KeyComboRegistry
from .key_search_input import handle_search_input_key
from .keymaps import Action, global_registry

__all__ = [
    "KeyComboBinding",
    "KeyComboRegistry",
    "KeyContext",
    "KeyOutcome",
    "KeyRouter",
    "handle_key",
]

ModeHandler = Callable[[str, NavigationState, os.terminal_size, KeyContext], KeyOutcome]


def _mode_handler(state: NavigationState) -> ModeHandler | None:
    if state.screen is Screen.SEARCH:
        return handle_search_input_key if state.search_input_active else handle_browse_key
    if state.loading:
        return None
    return handle_content_search_key if state.content_search_active else handle_reader_key


def handle_key(
    key: str,
    state: NavigationState,
    size: os.terminal_size,
    context: KeyContext,
) -> KeyOutcome:
    """Route one key token and return the next state and quit request.

    ``?`` toggles help and ``K`` toggles the keymap unless a prompt has
    focus. While help is open, any other key only closes it.
    """
    if not key:
        return NO_CHANGE

    global_action = None if state.text_input_active else global_registry().resolve(key)
    if global_action is Action.TOGGLE_HELP:
        return KeyOutcome(state=replace(state, show_help=not state.show_help))
    if state.show_help:
        return KeyOutcome(state=replace(state, show_help=False))
    if global_action is Action.TOGGLE_KEYMAP:
        keymap = state.keymap.toggled()
        context.save_keymap(keymap)
        return KeyOutcome(state=replace(state, keymap=keymap))

    handler = _mode_handler(state)
    if handler is None:
        return NO_CHANGE
    return handler(key, state, size, context)


class KeyRouter:
    """Key handler with its collaborators bound once at startup."""

    def __init__(self, context: KeyContext) -> None:
        self.context = context

    def handle(self, key: str, state: NavigationState, size: os.terminal_size) -> KeyOutcome:
        return handle_key(key, state, size, self.context)
