"""Tests for background document loading and the stale-result guard."""

from __future__ import annotations

import threading
import unittest

from lazyrfc.errors import FetchError
from lazyrfc.runtime.session import DocumentSession, PendingUpdate, fallback_title
from lazyrfc.runtime.state import NavigationState, Screen


def _loading_state(number: int) -> NavigationState:
    return NavigationState(screen=Screen.READER, current_rfc=number, loading=True)


class _DeferredWorkers:
    """Collects worker callables so tests control completion order."""

    def __init__(self) -> None:
        self.pending: list = []

    def __call__(self, target) -> None:
        self.pending.append(target)

    def run(self, index: int) -> None:
        self.pending[index]()


class DocumentSessionTests(unittest.TestCase):
    def test_loaded_document_is_applied(self) -> None:
        bodies = {9110: "HTTP Semantics\f\nsee RFC 9111\nand RFC 9110"}
        session = DocumentSession(bodies.__getitem__, lambda _n: None, start_worker=lambda fn: fn())
        generation = session.open(9110, "HTTP Semantics")
        self.assertEqual(generation, 1)

        state = session.drain(_loading_state(9110))
        self.assertFalse(state.loading)
        self.assertIsNone(state.error)
        self.assertEqual(state.current_title, "HTTP Semantics")
        self.assertEqual(state.lines, ("HTTP Semantics", "see RFC 9111", "and RFC 9110"))
        self.assertEqual(state.visible_refs, (9111,))

    def test_title_falls_back_to_lookup_then_number(self) -> None:
        titles = {1: "Host Software"}
        session = DocumentSession(lambda _n: "body", titles.get, start_worker=lambda fn: fn())
        session.open(1)
        self.assertEqual(session.drain(_loading_state(1)).current_title, "Host Software")
        session.open(2)
        self.assertEqual(session.drain(_loading_state(2)).current_title, "RFC 2")
        self.assertEqual(fallback_title(2), "RFC 2")

    def test_fetch_error_becomes_state_error(self) -> None:
        def fail(number: int) -> str:
            raise FetchError(number, f"RFC {number} not found")

        session = DocumentSession(fail, lambda _n: None, start_worker=lambda fn: fn())
        session.open(99999)
        state = session.drain(_loading_state(99999))
        self.assertFalse(state.loading)
        self.assertEqual(state.error, "RFC 99999 not found")
        self.assertEqual(state.lines, ())

    def test_unexpected_error_is_reported(self) -> None:
        def explode(_number: int) -> str:
            raise OSError("disk gone")

        session = DocumentSession(explode, lambda _n: None, start_worker=lambda fn: fn())
        with self.assertLogs("lazyrfc.runtime.session", level="ERROR"):
            session.open(5)
        state = session.drain(_loading_state(5))
        self.assertEqual(state.error, "Failed to open RFC 5: disk gone")

    def test_stale_result_is_discarded(self) -> None:
        workers = _DeferredWorkers()
        session = DocumentSession(lambda n: f"body of {n}", lambda _n: None, start_worker=workers)
        session.open(100, "First")
        session.open(200, "Second")
        self.assertEqual(session.generation, 2)

        state = _loading_state(200)
        workers.run(0)
        drained = session.drain(state)
        self.assertIs(drained, state)
        self.assertTrue(drained.loading)

        workers.run(1)
        drained = session.drain(state)
        self.assertFalse(drained.loading)
        self.assertEqual(drained.lines, ("body of 200",))
        self.assertEqual(drained.current_title, "Second")

    def test_late_stale_result_after_current_does_not_override(self) -> None:
        workers = _DeferredWorkers()
        session = DocumentSession(lambda n: f"body of {n}", lambda _n: None, start_worker=workers)
        session.open(100, "First")
        session.open(200, "Second")
        workers.run(1)
        workers.run(0)
        state = session.drain(_loading_state(200))
        self.assertEqual(state.lines, ("body of 200",))

    def test_drain_without_updates_returns_same_state(self) -> None:
        session = DocumentSession(lambda _n: "", lambda _n: None, start_worker=lambda fn: None)
        state = NavigationState()
        self.assertIs(session.drain(state), state)

    def test_default_worker_runs_on_daemon_thread(self) -> None:
        done = threading.Event()
        seen: list[threading.Thread] = []

        def fetch(_number: int) -> str:
            seen.append(threading.current_thread())
            done.set()
            return "text"

        session = DocumentSession(fetch, lambda _n: None)
        session.open(7, "Seven")
        self.assertTrue(done.wait(2.0))
        self.assertTrue(seen[0].daemon)
        self.assertIsNot(seen[0], threading.main_thread())


class PendingUpdateTests(unittest.TestCase):
    def test_error_update_keeps_lines(self) -> None:
        state = NavigationState(lines=("old",), loading=True)
        applied = PendingUpdate(generation=1, number=3, error="nope").apply(state)
        self.assertEqual(applied.lines, ("old",))
        self.assertEqual(applied.error, "nope")
        self.assertFalse(applied.loading)
