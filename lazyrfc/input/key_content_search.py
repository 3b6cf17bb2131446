"""In-document search prompt on the reader screen."""

from __future__ import annotations

import os
from dataclasses import replace

from ..runtime.state import NavigationState
from ..runtime.viewport import reader_height
from ..search.content import find_matching_lines
from .key_common import (
    CONFIRM_MATCH_MARGIN,
    NO_CHANGE,
    QUIT,
    KeyContext,
    KeyOutcome,
    scroll_reader,
)
from .keymaps import Action, Mode, is_text_key, resolve_action


def _confirm(state: NavigationState, size: os.terminal_size) -> NavigationState:
    matches = find_matching_lines(state.lines, state.content_search)
    if not matches:
        return replace(
            state,
            content_search_active=False,
            content_matches=(),
            content_match_index=-1,
        )
    return scroll_reader(
        state,
        max(0, matches[0] - CONFIRM_MATCH_MARGIN),
        reader_height(size.lines),
        content_search_active=False,
        content_matches=matches,
        content_match_index=0,
    )


def handle_content_search_key(
    key: str,
    state: NavigationState,
    size: os.terminal_size,
    context: KeyContext,
) -> KeyOutcome:
    """Handle one key while the in-document search prompt has focus."""
    del context
    action = resolve_action(state.keymap, Mode.CONTENT_SEARCH, key)

    if action is Action.QUIT:
        return QUIT
    if action is Action.CANCEL:
        return KeyOutcome(
            state=replace(
                state,
                content_search="",
                content_search_active=False,
            )
        )
    if action is Action.CONFIRM:
        return KeyOutcome(state=_confirm(state, size))
    if action is Action.DELETE_BACK:
        if not state.content_search:
            return NO_CHANGE
        return KeyOutcome(state=replace(state, content_search=state.content_search[:-1]))

    if action is None and is_text_key(key):
        return KeyOutcome(state=replace(state, content_search=state.content_search + key))
    return NO_CHANGE
