"""Shared key-handling types and state helpers."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace

from ..data.store import SEARCH_RESULT_LIMIT, Store
from ..runtime.state import Keymap, NavigationState
from ..runtime.viewport import clamp_index, clamp_scroll
from ..search.query import parse_query, with_status_filter
from ..search.references import collect_visible_refs

# Lines kept above the first hit when a content search is confirmed.
CONFIRM_MATCH_MARGIN = 10


def _ignore_keymap(_keymap: Keymap) -> None:
    return None


@dataclass(frozen=True)
class KeyContext:
    """Collaborators a key handler may call besides the state itself."""

    store: Store
    open_document: Callable[[int, str], object]
    save_keymap: Callable[[Keymap], None] = _ignore_keymap


@dataclass(frozen=True)
class KeyOutcome:
    """Result of one key: the next state (``None`` for no change) and quit flag."""

    state: NavigationState | None = None
    quit: bool = False


NO_CHANGE = KeyOutcome()
QUIT = KeyOutcome(quit=True)


def changed(before: NavigationState, after: NavigationState) -> KeyOutcome:
    """Wrap ``after``, collapsing to ``NO_CHANGE`` when nothing differs."""
    if after is before or after == before:
        return NO_CHANGE
    return KeyOutcome(state=after)


def run_search(state: NavigationState, store: Store) -> NavigationState:
    """Re-run the current query, status filter and sort order against ``store``."""
    parsed = parse_query(with_status_filter(state.query, state.status_filter))
    page = store.search(parsed.free_text, parsed.filters, state.sort_order, limit=SEARCH_RESULT_LIMIT)
    return replace(
        state,
        results=page.results,
        total_matches=page.total,
        selected_index=clamp_index(state.selected_index, len(page.results)),
        error=None,
    )


def scroll_reader(state: NavigationState, scroll_y: int, viewport_height: int, **changes) -> NavigationState:
    """Move the reader to ``scroll_y`` (clamped) and rescan nearby references."""
    scroll_y = clamp_scroll(scroll_y, len(state.lines), viewport_height)
    return replace(
        state,
        scroll_y=scroll_y,
        ref_index=-1,
        visible_refs=collect_visible_refs(state.lines, scroll_y, state.current_rfc),
        **changes,
    )


def scroll_to_match(line_index: int, viewport_height: int) -> int:
    """Return a scroll offset placing ``line_index`` a third of the way down."""
    return max(0, line_index - max(1, viewport_height) // 3)
