"""Navigation state for the interactive UI.

``NavigationState`` is immutable: every transition builds a new value with
``dataclasses.replace``. The store handle and the fetch generation counter
live outside it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from ..models import SearchResult


class Screen(str, Enum):
    SEARCH = "search"
    READER = "reader"


class Keymap(str, Enum):
    VIM = "vim"
    EMACS = "emacs"

    def toggled(self) -> Keymap:
        return Keymap.EMACS if self is Keymap.VIM else Keymap.VIM


class SortOrder(str, Enum):
    NUMBER_DESC = "number_desc"
    NUMBER_ASC = "number_asc"
    DATE = "date"
    RELEVANCE = "relevance"


SORT_CYCLE: tuple[SortOrder, ...] = (
    SortOrder.NUMBER_DESC,
    SortOrder.NUMBER_ASC,
    SortOrder.DATE,
    SortOrder.RELEVANCE,
)

# ``None`` is the "all statuses" slot.
STATUS_FILTERS: tuple[str | None, ...] = (
    None,
    "INTERNET STANDARD",
    "PROPOSED STANDARD",
    "BEST CURRENT PRACTICE",
    "INFORMATIONAL",
    "EXPERIMENTAL",
    "HISTORIC",
)


@dataclass(frozen=True)
class NavigationState:
    screen: Screen = Screen.SEARCH
    keymap: Keymap = Keymap.VIM

    # Search / browse
    query: str = ""
    cursor_pos: int = 0
    search_input_active: bool = False
    results: tuple[SearchResult, ...] = ()
    total_matches: int = 0
    selected_index: int = 0
    status_filter: str | None = None
    list_offset: int = 0
    sort_order: SortOrder = SortOrder.NUMBER_DESC

    # Reader
    current_rfc: int | None = None
    current_title: str = ""
    lines: tuple[str, ...] = ()
    scroll_y: int = 0
    content_search: str = ""
    content_search_active: bool = False
    content_matches: tuple[int, ...] = ()
    content_match_index: int = -1
    ref_index: int = -1
    visible_refs: tuple[int, ...] = ()

    history: tuple[int, ...] = ()

    show_info: bool = False
    show_help: bool = False

    loading: bool = False
    error: str | None = None

    index_total: int = 0

    @property
    def text_input_active(self) -> bool:
        """Whether keystrokes are currently being typed into a prompt."""
        return self.search_input_active or self.content_search_active

    @property
    def selected_result(self) -> SearchResult | None:
        if 0 <= self.selected_index < len(self.results):
            return self.results[self.selected_index]
        return None

    @property
    def current_match_line(self) -> int | None:
        if 0 <= self.content_match_index < len(self.content_matches):
            return self.content_matches[self.content_match_index]
        return None

    @property
    def focused_ref(self) -> int | None:
        if 0 <= self.ref_index < len(self.visible_refs):
            return self.visible_refs[self.ref_index]
        return None


def initial_state(keymap: Keymap = Keymap.VIM) -> NavigationState:
    return NavigationState(keymap=keymap)


def reset_reader(state: NavigationState, **changes) -> NavigationState:
    """Return ``state`` with reader-local fields cleared for a fresh document."""
    return replace(
        state,
        scroll_y=0,
        content_search="",
        content_search_active=False,
        content_matches=(),
        content_match_index=-1,
        ref_index=-1,
        visible_refs=(),
        error=None,
        **changes,
    )


def cycle_sort_order(order: SortOrder, step: int = 1) -> SortOrder:
    idx = SORT_CYCLE.index(order)
    return SORT_CYCLE[(idx + step) % len(SORT_CYCLE)]


def cycle_status_filter(status: str | None, step: int = 1) -> str | None:
    try:
        idx = STATUS_FILTERS.index(status)
    except ValueError:
        idx = 0
    return STATUS_FILTERS[(idx + step) % len(STATUS_FILTERS)]
