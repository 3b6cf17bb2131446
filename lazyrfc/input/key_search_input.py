"""Query prompt editing on the search screen.

Every edit that changes the query re-runs the search immediately and resets
the selection to the first result.
"""

from __future__ import annotations

import os
from dataclasses import replace

from ..runtime.state import NavigationState
from .key_common import NO_CHANGE, QUIT, KeyContext, KeyOutcome, changed, run_search
from .keymaps import Action, Mode, is_text_key, resolve_action


def _edit_query(state: NavigationState, query: str, cursor_pos: int, context: KeyContext) -> KeyOutcome:
    edited = replace(state, query=query, cursor_pos=cursor_pos, selected_index=0, list_offset=0)
    return KeyOutcome(state=run_search(edited, context.store))


def handle_search_input_key(
    key: str,
    state: NavigationState,
    size: os.terminal_size,
    context: KeyContext,
) -> KeyOutcome:
    """Handle one key while the query prompt has focus."""
    del size
    query = state.query
    cursor = max(0, min(state.cursor_pos, len(query)))
    action = resolve_action(state.keymap, Mode.SEARCH_INPUT, key)

    if action is Action.QUIT:
        return QUIT
    if action is Action.CANCEL:
        return KeyOutcome(state=replace(state, search_input_active=False))
    if action is Action.CONFIRM:
        committed = replace(state, search_input_active=False, selected_index=0, list_offset=0)
        return KeyOutcome(state=run_search(committed, context.store))
    if action is Action.DELETE_BACK:
        if cursor == 0:
            if not query:
                return KeyOutcome(state=replace(state, search_input_active=False))
            return NO_CHANGE
        return _edit_query(state, query[: cursor - 1] + query[cursor:], cursor - 1, context)
    if action is Action.KILL_TO_START:
        if cursor == 0:
            return NO_CHANGE
        return _edit_query(state, query[cursor:], 0, context)
    if action is Action.CURSOR_START:
        return changed(state, replace(state, cursor_pos=0))
    if action is Action.CURSOR_END:
        return changed(state, replace(state, cursor_pos=len(query)))
    if action is Action.CURSOR_LEFT:
        return changed(state, replace(state, cursor_pos=max(0, cursor - 1)))
    if action is Action.CURSOR_RIGHT:
        return changed(state, replace(state, cursor_pos=min(len(query), cursor + 1)))

    if action is None and is_text_key(key):
        return _edit_query(state, query[:cursor] + key + query[cursor:], cursor + 1, context)
    return NO_CHANGE
