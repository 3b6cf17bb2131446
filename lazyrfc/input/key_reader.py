"""Reader-mode keyboard handling: scrolling, match cycling, and references."""

from __future__ import annotations

import logging
import os
from dataclasses import replace

from ..runtime.state import NavigationState, Screen, reset_reader
from ..runtime.viewport import max_scroll, reader_height
from ..search.content import prepare_rfc_text
from .key_common import (
    NO_CHANGE,
    QUIT,
    KeyContext,
    KeyOutcome,
    changed,
    scroll_reader,
    scroll_to_match,
)
from .keymaps import Action, Mode, resolve_action

logger = logging.getLogger(__name__)


def _back_to_browse(state: NavigationState) -> NavigationState:
    return replace(
        state,
        screen=Screen.SEARCH,
        show_info=False,
        history=(),
        content_search="",
        content_search_active=False,
        content_matches=(),
        content_match_index=-1,
        ref_index=-1,
        visible_refs=(),
        error=None,
    )


def _go_back(state: NavigationState, context: KeyContext) -> NavigationState:
    """Pop one history entry from the local cache, else return to the list."""
    if not state.history:
        return _back_to_browse(state)
    previous = state.history[-1]
    meta = context.store.get_metadata(previous)
    body = context.store.get_body(previous) if meta is not None else None
    if meta is None or body is None:
        logger.debug("RFC %d is no longer cached; returning to search", previous)
        return _back_to_browse(state)
    return reset_reader(
        state,
        current_rfc=previous,
        current_title=meta.title,
        lines=tuple(prepare_rfc_text(body)),
        history=state.history[:-1],
    )


def _follow_reference(state: NavigationState, context: KeyContext) -> KeyOutcome:
    target = state.focused_ref
    if target is None and state.visible_refs:
        target = state.visible_refs[0]
    if not target:
        return NO_CHANGE
    history = state.history
    if state.current_rfc is not None:
        history = history + (state.current_rfc,)
    context.open_document(target, "")
    return KeyOutcome(
        state=reset_reader(
            state,
            screen=Screen.READER,
            current_rfc=target,
            current_title="",
            lines=(),
            history=history,
            loading=True,
        )
    )


def _cycle_match(state: NavigationState, step: int, height: int) -> KeyOutcome:
    count = len(state.content_matches)
    if count == 0:
        return NO_CHANGE
    index = (state.content_match_index + step) % count
    target = scroll_to_match(state.content_matches[index], height)
    return KeyOutcome(state=scroll_reader(state, target, height, content_match_index=index))


def handle_reader_key(
    key: str,
    state: NavigationState,
    size: os.terminal_size,
    context: KeyContext,
) -> KeyOutcome:
    """Handle one key on the reader screen outside the search prompt."""
    action = resolve_action(state.keymap, Mode.READER, key)
    if action is None:
        return NO_CHANGE
    height = reader_height(size.lines)

    if action is Action.BACK:
        return KeyOutcome(state=_go_back(state, context))
    if action is Action.QUIT:
        return QUIT
    if action is Action.SCROLL_DOWN:
        return changed(state, scroll_reader(state, state.scroll_y + 1, height))
    if action is Action.SCROLL_UP:
        return changed(state, scroll_reader(state, state.scroll_y - 1, height))
    if action is Action.HALF_PAGE_DOWN:
        return changed(state, scroll_reader(state, state.scroll_y + max(1, height // 2), height))
    if action is Action.HALF_PAGE_UP:
        return changed(state, scroll_reader(state, state.scroll_y - max(1, height // 2), height))
    if action is Action.PAGE_DOWN:
        return changed(state, scroll_reader(state, state.scroll_y + height, height))
    if action is Action.PAGE_UP:
        return changed(state, scroll_reader(state, state.scroll_y - height, height))
    if action is Action.TOP:
        return changed(state, scroll_reader(state, 0, height))
    if action is Action.BOTTOM:
        return changed(state, scroll_reader(state, max_scroll(len(state.lines), height), height))
    if action is Action.START_SEARCH:
        return KeyOutcome(state=replace(state, content_search_active=True, content_search=""))
    if action is Action.NEXT_MATCH:
        return _cycle_match(state, 1, height)
    if action is Action.PREV_MATCH:
        return _cycle_match(state, -1, height)
    if action is Action.NEXT_REF:
        if not state.visible_refs:
            return NO_CHANGE
        return KeyOutcome(state=replace(state, ref_index=(state.ref_index + 1) % len(state.visible_refs)))
    if action is Action.TOGGLE_INFO:
        return KeyOutcome(state=replace(state, show_info=not state.show_info))
    if action is Action.FOLLOW:
        return _follow_reference(state, context)
    return NO_CHANGE
