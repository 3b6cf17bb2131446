"""Logging setup for CLI commands and the interactive UI.

CLI commands report progress on stderr. The TUI owns the terminal, so its
records are routed to a log file instead.
"""

from __future__ import annotations

import logging
from pathlib import Path

CLI_FORMAT = "%(message)s"
VERBOSE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False, log_file: Path | None = None) -> None:
    """Install one root handler, replacing any handler from an earlier call."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
        except OSError:
            handler = logging.NullHandler()
        handler.setFormatter(logging.Formatter(VERBOSE_FORMAT))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(VERBOSE_FORMAT if verbose else CLI_FORMAT))

    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
