"""Keymap tables: logical actions per mode, bound to key tokens per keymap.

Each mode has a binding set shared by both keymaps plus per-keymap extras.
Handlers resolve a key token to an ``Action`` and never compare raw keys,
except for plain text insertion in the two prompt modes.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from ..runtime.state import Keymap
from .key_registry import KeyComboBinding, KeyComboRegistry


class Mode(str, Enum):
    BROWSE = "browse"
    SEARCH_INPUT = "search_input"
    READER = "reader"
    CONTENT_SEARCH = "content_search"


class Action(str, Enum):
    QUIT = "quit"
    TOGGLE_HELP = "toggle_help"
    TOGGLE_KEYMAP = "toggle_keymap"
    TOGGLE_INFO = "toggle_info"

    # Result list
    MOVE_DOWN = "move_down"
    MOVE_UP = "move_up"
    PAGE_DOWN = "page_down"
    PAGE_UP = "page_up"
    TOP = "top"
    BOTTOM = "bottom"
    OPEN = "open"
    START_SEARCH = "start_search"
    CYCLE_SORT = "cycle_sort"
    NEXT_FILTER = "next_filter"
    PREV_FILTER = "prev_filter"
    CLEAR_QUERY = "clear_query"

    # Prompts
    CANCEL = "cancel"
    CONFIRM = "confirm"
    DELETE_BACK = "delete_back"
    KILL_TO_START = "kill_to_start"
    CURSOR_START = "cursor_start"
    CURSOR_END = "cursor_end"
    CURSOR_LEFT = "cursor_left"
    CURSOR_RIGHT = "cursor_right"

    # Reader
    BACK = "back"
    SCROLL_DOWN = "scroll_down"
    SCROLL_UP = "scroll_up"
    HALF_PAGE_DOWN = "half_page_down"
    HALF_PAGE_UP = "half_page_up"
    NEXT_MATCH = "next_match"
    PREV_MATCH = "prev_match"
    NEXT_REF = "next_ref"
    FOLLOW = "follow"


# Checked before mode dispatch whenever no prompt has focus.
GLOBAL_BINDINGS: dict[Action, tuple[str, ...]] = {
    Action.TOGGLE_HELP: ("?",),
    Action.TOGGLE_KEYMAP: ("K",),
}

_SHARED: dict[Mode, dict[Action, tuple[str, ...]]] = {
    Mode.BROWSE: {
        Action.QUIT: ("q", "CTRL_C"),
        Action.START_SEARCH: ("/", "CTRL_S"),
        Action.MOVE_DOWN: ("DOWN", "j"),
        Action.MOVE_UP: ("UP", "k"),
        Action.PAGE_DOWN: ("PAGE_DOWN", "CTRL_D"),
        Action.PAGE_UP: ("PAGE_UP", "CTRL_U"),
        Action.TOP: ("g", "HOME"),
        Action.BOTTOM: ("G", "END"),
        Action.OPEN: ("ENTER", "l", "RIGHT"),
        Action.TOGGLE_INFO: ("i",),
        Action.CYCLE_SORT: ("s",),
        Action.NEXT_FILTER: ("TAB",),
        Action.PREV_FILTER: ("SHIFT_TAB",),
        Action.CLEAR_QUERY: ("ESC",),
    },
    Mode.SEARCH_INPUT: {
        Action.QUIT: ("CTRL_C",),
        Action.CANCEL: ("ESC", "CTRL_G"),
        Action.CONFIRM: ("ENTER",),
        Action.DELETE_BACK: ("BACKSPACE",),
        Action.KILL_TO_START: ("CTRL_U",),
        Action.CURSOR_START: ("CTRL_A", "HOME"),
        Action.CURSOR_END: ("CTRL_E", "END"),
        Action.CURSOR_LEFT: ("LEFT",),
        Action.CURSOR_RIGHT: ("RIGHT",),
    },
    Mode.READER: {
        Action.BACK: ("ESC", "h", "LEFT"),
        Action.QUIT: ("CTRL_C",),
        Action.SCROLL_DOWN: ("DOWN", "j"),
        Action.SCROLL_UP: ("UP", "k"),
        Action.HALF_PAGE_DOWN: ("CTRL_D",),
        Action.HALF_PAGE_UP: ("CTRL_U",),
        Action.PAGE_DOWN: ("PAGE_DOWN",),
        Action.PAGE_UP: ("PAGE_UP",),
        Action.TOP: ("g", "HOME"),
        Action.BOTTOM: ("G", "END"),
        Action.START_SEARCH: ("/",),
        Action.NEXT_MATCH: ("n",),
        Action.PREV_MATCH: ("N",),
        Action.NEXT_REF: ("TAB",),
        Action.TOGGLE_INFO: ("i",),
        Action.FOLLOW: ("ENTER", "l", "RIGHT"),
    },
    Mode.CONTENT_SEARCH: {
        Action.QUIT: ("CTRL_C",),
        Action.CANCEL: ("ESC",),
        Action.CONFIRM: ("ENTER",),
        Action.DELETE_BACK: ("BACKSPACE",),
    },
}

_EXTRAS: dict[Keymap, dict[Mode, dict[Action, tuple[str, ...]]]] = {
    Keymap.VIM: {
        Mode.READER: {
            Action.BACK: ("q",),
            Action.PAGE_DOWN: (" ", "f"),
            Action.PAGE_UP: ("b",),
        },
    },
    Keymap.EMACS: {
        Mode.BROWSE: {
            Action.MOVE_DOWN: ("CTRL_N",),
            Action.MOVE_UP: ("CTRL_P",),
            Action.PAGE_DOWN: ("CTRL_V",),
            Action.PAGE_UP: ("ALT_v",),
            Action.TOP: ("ALT_<",),
            Action.BOTTOM: ("ALT_>",),
        },
        Mode.SEARCH_INPUT: {
            Action.CURSOR_LEFT: ("CTRL_B",),
            Action.CURSOR_RIGHT: ("CTRL_F",),
        },
        Mode.READER: {
            Action.BACK: ("CTRL_G",),
            Action.SCROLL_DOWN: ("CTRL_N",),
            Action.SCROLL_UP: ("CTRL_P",),
            Action.PAGE_DOWN: ("CTRL_V",),
            Action.PAGE_UP: ("ALT_v",),
            Action.TOP: ("ALT_<",),
            Action.BOTTOM: ("ALT_>",),
            Action.START_SEARCH: ("CTRL_S",),
        },
        Mode.CONTENT_SEARCH: {
            Action.CANCEL: ("CTRL_G",),
        },
    },
}


def bindings_for(keymap: Keymap, mode: Mode) -> dict[Action, tuple[str, ...]]:
    """Return the merged action → keys table for ``keymap`` in ``mode``."""
    merged = {action: tuple(keys) for action, keys in _SHARED[mode].items()}
    for action, keys in _EXTRAS[keymap].get(mode, {}).items():
        merged[action] = merged.get(action, ()) + keys
    return merged


@lru_cache(maxsize=None)
def registry_for(keymap: Keymap, mode: Mode) -> KeyComboRegistry[Action]:
    """Return a cached key → action registry for ``keymap`` in ``mode``."""
    registry: KeyComboRegistry[Action] = KeyComboRegistry()
    return registry.register_bindings(
        KeyComboBinding(combos=keys, target=action)
        for action, keys in bindings_for(keymap, mode).items()
    )


@lru_cache(maxsize=1)
def global_registry() -> KeyComboRegistry[Action]:
    registry: KeyComboRegistry[Action] = KeyComboRegistry()
    return registry.register_bindings(
        KeyComboBinding(combos=keys, target=action) for action, keys in GLOBAL_BINDINGS.items()
    )


def resolve_action(keymap: Keymap, mode: Mode, key: str) -> Action | None:
    return registry_for(keymap, mode).resolve(key)


def is_text_key(key: str) -> bool:
    """Return whether ``key`` is one printable character for prompt insertion."""
    return len(key) == 1 and key.isprintable()
