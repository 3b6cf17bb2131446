"""Browse-mode keyboard handling for the search screen."""

from __future__ import annotations

import os
from dataclasses import replace

from ..runtime.state import (
    NavigationState,
    Screen,
    cycle_sort_order,
    cycle_status_filter,
    reset_reader,
)
from ..runtime.viewport import adjust_list_offset, clamp_index, list_height
from .key_common import NO_CHANGE, QUIT, KeyContext, KeyOutcome, changed, run_search
from .keymaps import Action, Mode, resolve_action


def _select(state: NavigationState, index: int, height: int) -> NavigationState:
    selected = clamp_index(index, len(state.results))
    return adjust_list_offset(replace(state, selected_index=selected), height)


def _open_selected(state: NavigationState, context: KeyContext) -> KeyOutcome:
    result = state.selected_result
    if result is None:
        return NO_CHANGE
    meta = result.metadata
    context.open_document(meta.number, meta.title)
    return KeyOutcome(
        state=reset_reader(
            state,
            screen=Screen.READER,
            current_rfc=meta.number,
            current_title=meta.title,
            lines=(),
            history=(),
            loading=True,
        )
    )


def _refilter(state: NavigationState, step: int, height: int, context: KeyContext) -> NavigationState:
    searched = run_search(
        replace(
            state,
            status_filter=cycle_status_filter(state.status_filter, step),
            selected_index=0,
            list_offset=0,
        ),
        context.store,
    )
    return adjust_list_offset(searched, height)


def handle_browse_key(
    key: str,
    state: NavigationState,
    size: os.terminal_size,
    context: KeyContext,
) -> KeyOutcome:
    """Handle one key on the search screen while the query prompt is unfocused."""
    action = resolve_action(state.keymap, Mode.BROWSE, key)
    if action is None:
        return NO_CHANGE
    height = list_height(size.lines)
    last = len(state.results) - 1

    if action is Action.QUIT:
        return QUIT
    if action is Action.START_SEARCH:
        return changed(state, replace(state, search_input_active=True))
    if action is Action.MOVE_DOWN:
        return changed(state, _select(state, state.selected_index + 1, height))
    if action is Action.MOVE_UP:
        return changed(state, _select(state, state.selected_index - 1, height))
    if action is Action.PAGE_DOWN:
        return changed(state, _select(state, state.selected_index + height, height))
    if action is Action.PAGE_UP:
        return changed(state, _select(state, state.selected_index - height, height))
    if action is Action.TOP:
        return changed(state, _select(state, 0, height))
    if action is Action.BOTTOM:
        return changed(state, _select(state, max(0, last), height))
    if action is Action.OPEN:
        return _open_selected(state, context)
    if action is Action.TOGGLE_INFO:
        if not state.results:
            return NO_CHANGE
        return KeyOutcome(state=replace(state, show_info=not state.show_info))
    if action is Action.CYCLE_SORT:
        resorted = replace(
            state,
            sort_order=cycle_sort_order(state.sort_order),
            selected_index=0,
            list_offset=0,
        )
        return KeyOutcome(state=run_search(resorted, context.store))
    if action is Action.NEXT_FILTER:
        return KeyOutcome(state=_refilter(state, 1, height, context))
    if action is Action.PREV_FILTER:
        return KeyOutcome(state=_refilter(state, -1, height, context))
    if action is Action.CLEAR_QUERY:
        if not state.query:
            return NO_CHANGE
        cleared = replace(state, query="", cursor_pos=0, selected_index=0, list_offset=0)
        return KeyOutcome(state=run_search(cleared, context.store))
    return NO_CHANGE
