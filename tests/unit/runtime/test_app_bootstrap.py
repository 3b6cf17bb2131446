"""Tests for UI bootstrap helpers, cache paths, and logging setup."""

from __future__ import annotations

import io
import logging
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazyrfc import paths
from lazyrfc.data.store import RfcStore
from lazyrfc.logs import configure_logging
from lazyrfc.models import RfcMeta
from lazyrfc.runtime.app import build_initial_state, run_tui, title_lookup
from lazyrfc.runtime.state import Keymap, Screen


class BootstrapTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = RfcStore(":memory:")
        self.addCleanup(self.store.close)
        for number in (1, 2, 3):
            self.store.upsert_rfc(RfcMeta(number=number, title=f"Doc {number}"))

    def test_initial_state_lists_index(self) -> None:
        state = build_initial_state(self.store, Keymap.EMACS)
        self.assertIs(state.screen, Screen.SEARCH)
        self.assertIs(state.keymap, Keymap.EMACS)
        self.assertEqual([r.metadata.number for r in state.results], [3, 2, 1])
        self.assertEqual(state.total_matches, 3)
        self.assertEqual(state.index_total, 3)

    def test_title_lookup(self) -> None:
        lookup = title_lookup(self.store)
        self.assertEqual(lookup(2), "Doc 2")
        self.assertIsNone(lookup(99))

    def test_run_tui_requires_a_terminal(self) -> None:
        with mock.patch("lazyrfc.runtime.app.os.isatty", return_value=False), mock.patch(
            "lazyrfc.runtime.app.sys.stdin"
        ), mock.patch("lazyrfc.runtime.app.sys.stdout"):
            with self.assertRaises(SystemExit):
                run_tui()


class RunTuiLoggingTests(unittest.TestCase):
    def setUp(self) -> None:
        root = logging.getLogger()
        saved_handlers = list(root.handlers)
        saved_level = root.level

        def restore() -> None:
            for handler in list(root.handlers):
                root.removeHandler(handler)
                handler.close()
            for handler in saved_handlers:
                root.addHandler(handler)
            root.setLevel(saved_level)

        self.addCleanup(restore)

    def test_index_sync_progress_reaches_stderr_before_ui_starts(self) -> None:
        def fake_ensure_index(store, session) -> None:
            logging.getLogger("lazyrfc.data.index").info("Fetching RFC index...")

        stderr = io.StringIO()
        with tempfile.TemporaryDirectory() as tmp, mock.patch.dict(
            os.environ, {"LAZYRFC_HOME": tmp}
        ), mock.patch("lazyrfc.runtime.app.sys.stderr", stderr), mock.patch(
            "lazyrfc.runtime.app.os.isatty", return_value=True
        ), mock.patch("lazyrfc.runtime.app.sys.stdin"), mock.patch(
            "lazyrfc.runtime.app.sys.stdout"
        ), mock.patch(
            "lazyrfc.runtime.app.ensure_index", side_effect=fake_ensure_index
        ), mock.patch(
            "lazyrfc.runtime.app.log_path", return_value=Path(tmp) / "logs" / "lazyrfc.log"
        ), mock.patch("lazyrfc.runtime.app.TerminalController"), mock.patch(
            "lazyrfc.runtime.app.run_main_loop"
        ) as run_main_loop:
            run_tui(keymap_override=Keymap.VIM)

        run_main_loop.assert_called_once()
        self.assertIn("Fetching RFC index...", stderr.getvalue())


class PathTests(unittest.TestCase):
    def test_home_override_and_file_names(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch.dict(os.environ, {"LAZYRFC_HOME": tmp}):
                self.assertEqual(paths.app_dir(), Path(tmp))
                self.assertEqual(paths.db_path(), Path(tmp) / "rfc.db")
                self.assertEqual(paths.rfc_file_path(791), Path(tmp) / "rfcs" / "rfc0791.txt")
                paths.ensure_cache_dirs()
                self.assertTrue((Path(tmp) / "rfcs").is_dir())
        self.assertEqual(paths.rfc_file_name(9110), "rfc9110.txt")


class LoggingSetupTests(unittest.TestCase):
    def setUp(self) -> None:
        root = logging.getLogger()
        saved_handlers = list(root.handlers)
        saved_level = root.level

        def restore() -> None:
            for handler in list(root.handlers):
                root.removeHandler(handler)
                handler.close()
            for handler in saved_handlers:
                root.addHandler(handler)
            root.setLevel(saved_level)

        self.addCleanup(restore)

    def test_cli_logging_goes_to_one_stream_handler(self) -> None:
        configure_logging()
        configure_logging(verbose=True)
        root = logging.getLogger()
        self.assertEqual(len(root.handlers), 1)
        self.assertIsInstance(root.handlers[0], logging.StreamHandler)
        self.assertEqual(root.level, logging.DEBUG)

    def test_ui_logging_goes_to_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            log_file = Path(tmp) / "logs" / "lazyrfc.log"
            configure_logging(log_file=log_file)
            logging.getLogger("lazyrfc.test").info("hello file")
            for handler in logging.getLogger().handlers:
                handler.flush()
            self.assertIn("hello file", log_file.read_text(encoding="utf-8"))
            configure_logging()
