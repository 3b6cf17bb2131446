"""Unit tests for reader-mode keys: scrolling, in-document search,
reference cycling, following references, and back navigation.
"""

from __future__ import annotations

import os
import unittest
from dataclasses import replace
from unittest import mock

from lazyrfc.data.store import RfcStore
from lazyrfc.input import KeyContext, handle_key
from lazyrfc.models import RfcMeta
from lazyrfc.runtime.state import Keymap, NavigationState, Screen
from lazyrfc.runtime.viewport import reader_height

SIZE = os.terminal_size((100, 24))
HEIGHT = reader_height(SIZE.lines)


def _reader_state(lines: list[str], **changes) -> NavigationState:
    base = NavigationState(
        screen=Screen.READER,
        current_rfc=9999,
        current_title="Test Protocol",
        lines=tuple(lines),
    )
    return replace(base, **changes)


def _plain_lines(count: int) -> list[str]:
    return [f"line {idx}" for idx in range(count)]


class _ReaderTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.store = RfcStore(":memory:")
        self.addCleanup(self.store.close)
        self.open_document = mock.Mock()
        self.context = KeyContext(store=self.store, open_document=self.open_document)

    def press(self, state: NavigationState, *keys: str) -> NavigationState:
        for key in keys:
            outcome = handle_key(key, state, SIZE, self.context)
            self.assertFalse(outcome.quit, key)
            if outcome.state is not None:
                state = outcome.state
        return state


class ReaderScrollTests(_ReaderTestCase):
    def test_down_twice_then_up(self) -> None:
        state = _reader_state(_plain_lines(100))
        state = self.press(state, "DOWN", "DOWN")
        self.assertEqual(state.scroll_y, 2)
        self.assertEqual(self.press(state, "UP").scroll_y, 1)

    def test_scroll_is_clamped(self) -> None:
        state = _reader_state(_plain_lines(100))
        self.assertIsNone(handle_key("k", state, SIZE, self.context).state)
        bottom = self.press(state, "G")
        self.assertEqual(bottom.scroll_y, 100 - HEIGHT)
        self.assertIsNone(handle_key("j", bottom, SIZE, self.context).state)
        self.assertEqual(self.press(bottom, "g").scroll_y, 0)

    def test_page_and_half_page(self) -> None:
        state = _reader_state(_plain_lines(100))
        self.assertEqual(self.press(state, "CTRL_D").scroll_y, HEIGHT // 2)
        self.assertEqual(self.press(state, "PAGE_DOWN").scroll_y, HEIGHT)
        self.assertEqual(self.press(state, " ").scroll_y, HEIGHT)
        self.assertEqual(self.press(state, "PAGE_DOWN", "b").scroll_y, 0)

    def test_short_document_does_not_scroll(self) -> None:
        state = _reader_state(_plain_lines(5))
        self.assertEqual(self.press(state, "j", "G", "CTRL_D").scroll_y, 0)

    def test_scrolling_recomputes_visible_refs(self) -> None:
        lines = _plain_lines(100)
        lines[0] = "see RFC 1000"
        lines[45] = "see RFC 2000"
        state = _reader_state(lines, visible_refs=(1000,), ref_index=0)
        state = self.press(state, "PAGE_DOWN")
        self.assertEqual(state.visible_refs, (2000,))
        self.assertEqual(state.ref_index, -1)

    def test_emacs_reader_keys(self) -> None:
        state = _reader_state(_plain_lines(100), keymap=Keymap.EMACS)
        self.assertEqual(self.press(state, "CTRL_N", "CTRL_N", "CTRL_P").scroll_y, 1)
        self.assertEqual(self.press(state, "CTRL_V").scroll_y, HEIGHT)
        self.assertIsNone(handle_key("q", state, SIZE, self.context).state)

    def test_keys_are_ignored_while_loading(self) -> None:
        state = _reader_state(_plain_lines(100), loading=True)
        self.assertIsNone(handle_key("j", state, SIZE, self.context).state)
        self.assertIsNone(handle_key("ESC", state, SIZE, self.context).state)


class ContentSearchTests(_ReaderTestCase):
    def _document(self) -> NavigationState:
        lines = _plain_lines(100)
        lines[50] = "the needle is here"
        lines[70] = "another Needle"
        return _reader_state(lines)

    def _search(self, state: NavigationState, text: str) -> NavigationState:
        state = self.press(state, "/")
        self.assertTrue(state.content_search_active)
        for ch in text:
            state = self.press(state, ch)
        return self.press(state, "ENTER")

    def test_confirm_scrolls_near_first_match(self) -> None:
        state = self._search(self._document(), "needle")
        self.assertFalse(state.content_search_active)
        self.assertEqual(state.content_matches, (50, 70))
        self.assertEqual(state.content_match_index, 0)
        self.assertEqual(state.scroll_y, 40)

    def test_single_match_line(self) -> None:
        state = self._search(self._document(), "is here")
        self.assertEqual(state.content_matches, (50,))

    def test_no_matches_leaves_index_unset(self) -> None:
        state = self._search(self._document(), "absent")
        self.assertEqual(state.content_matches, ())
        self.assertEqual(state.content_match_index, -1)
        self.assertEqual(state.scroll_y, 0)
        self.assertIsNone(handle_key("n", state, SIZE, self.context).state)

    def test_next_then_previous_restores_index(self) -> None:
        state = self._search(self._document(), "needle")
        forward = self.press(state, "n")
        self.assertEqual(forward.content_match_index, 1)
        self.assertEqual(forward.scroll_y, 70 - HEIGHT // 3)
        back = self.press(forward, "N")
        self.assertEqual(back.content_match_index, 0)
        self.assertEqual(self.press(back, "n", "n").content_match_index, 0)

    def test_previous_wraps_to_last(self) -> None:
        state = self._search(self._document(), "needle")
        self.assertEqual(self.press(state, "N").content_match_index, 1)

    def test_prompt_editing_and_cancel(self) -> None:
        state = self.press(self._document(), "/", "a", "b", "BACKSPACE")
        self.assertEqual(state.content_search, "a")
        cancelled = self.press(state, "ESC")
        self.assertFalse(cancelled.content_search_active)
        self.assertEqual(cancelled.content_search, "")
        self.assertEqual(cancelled.content_matches, ())
        self.assertEqual(cancelled.content_match_index, -1)
        self.assertIs(cancelled.screen, Screen.READER)

    def test_cancel_keeps_confirmed_matches_for_cycling(self) -> None:
        state = self._search(self._document(), "needle")
        cancelled = self.press(state, "/", "x", "ESC")
        self.assertFalse(cancelled.content_search_active)
        self.assertEqual(cancelled.content_search, "")
        self.assertEqual(cancelled.content_matches, (50, 70))
        self.assertEqual(cancelled.content_match_index, 0)
        forward = self.press(cancelled, "n")
        self.assertEqual(forward.content_match_index, 1)
        self.assertEqual(forward.scroll_y, 70 - HEIGHT // 3)

    def test_reader_keys_are_text_in_prompt(self) -> None:
        state = self.press(self._document(), "/", "q", "j", "?")
        self.assertEqual(state.content_search, "qj?")
        self.assertEqual(state.scroll_y, 0)


class ReferenceNavigationTests(_ReaderTestCase):
    def _document(self) -> NavigationState:
        lines = ["Intro cites RFC 7230 and [RFC 7231].", "Also RFC 9999 itself.", "And rfc3986."]
        lines += _plain_lines(50)
        return _reader_state(lines, visible_refs=(7230, 7231, 3986), history=(1000,))

    def test_tab_cycles_back_after_ref_count_presses(self) -> None:
        state = self.press(self._document(), "TAB")
        self.assertEqual(state.ref_index, 0)
        self.assertEqual(state.focused_ref, 7230)
        cycled = self.press(state, "TAB", "TAB", "TAB")
        self.assertEqual(cycled.ref_index, 0)

    def test_tab_without_refs_does_nothing(self) -> None:
        state = _reader_state(_plain_lines(10))
        self.assertIsNone(handle_key("TAB", state, SIZE, self.context).state)

    def test_follow_focused_reference_pushes_history(self) -> None:
        state = self.press(self._document(), "TAB", "TAB", "ENTER")
        self.open_document.assert_called_once_with(7231, "")
        self.assertEqual(state.current_rfc, 7231)
        self.assertEqual(state.history, (1000, 9999))
        self.assertTrue(state.loading)
        self.assertEqual(state.lines, ())
        self.assertEqual(state.ref_index, -1)
        self.assertEqual(state.visible_refs, ())

    def test_follow_without_focus_uses_first_visible_ref(self) -> None:
        self.press(self._document(), "l")
        self.open_document.assert_called_once_with(7230, "")

    def test_follow_without_refs_does_nothing(self) -> None:
        state = _reader_state(_plain_lines(10))
        self.assertIsNone(handle_key("ENTER", state, SIZE, self.context).state)
        self.open_document.assert_not_called()

    def test_rfc_zero_citation_is_not_followed(self) -> None:
        lines = ["Header", "The value RFC 0 is reserved."] + _plain_lines(50)
        state = self.press(_reader_state(lines), "j")
        self.assertEqual(state.visible_refs, ())
        self.assertIsNone(handle_key("ENTER", state, SIZE, self.context).state)
        self.assertIsNone(handle_key("ENTER", replace(state, visible_refs=(0,)), SIZE, self.context).state)
        self.open_document.assert_not_called()


class BackNavigationTests(_ReaderTestCase):
    def test_back_restores_cached_previous_document(self) -> None:
        self.store.upsert_rfc(RfcMeta(number=1000, title="Previous Doc"))
        self.store.update_body(1000, "Previous\n\fbody\nRFC 2000 cited")
        state = _reader_state(_plain_lines(40), history=(500, 1000), scroll_y=12, visible_refs=(3,))
        back = self.press(state, "ESC")
        self.assertIs(back.screen, Screen.READER)
        self.assertEqual(back.current_rfc, 1000)
        self.assertEqual(back.current_title, "Previous Doc")
        self.assertEqual(back.lines, ("Previous", "body", "RFC 2000 cited"))
        self.assertEqual(back.history, (500,))
        self.assertEqual(back.scroll_y, 0)
        self.assertEqual(back.visible_refs, ())

    def test_back_with_uncached_history_returns_to_search(self) -> None:
        self.store.upsert_rfc(RfcMeta(number=1000, title="Never fetched"))
        state = _reader_state(_plain_lines(40), history=(1000,), show_info=True)
        back = self.press(state, "h")
        self.assertIs(back.screen, Screen.SEARCH)
        self.assertEqual(back.history, ())
        self.assertFalse(back.show_info)

    def test_back_with_empty_history_returns_to_search(self) -> None:
        state = _reader_state(_plain_lines(40), content_matches=(3,), content_match_index=0, error="x")
        back = self.press(state, "q")
        self.assertIs(back.screen, Screen.SEARCH)
        self.assertEqual(back.content_matches, ())
        self.assertEqual(back.content_match_index, -1)
        self.assertIsNone(back.error)

    def test_ctrl_c_quits_reader(self) -> None:
        state = _reader_state(_plain_lines(10))
        self.assertTrue(handle_key("CTRL_C", state, SIZE, self.context).quit)
