"""Command-line front door for lazyrfc.

With no arguments the interactive UI starts. A bare RFC number opens that
document in ``$PAGER``; the remaining subcommands print to stdout.
"""

from __future__ import annotations

import argparse
import logging
import os
import shlex
import shutil
import subprocess
import sys
from pathlib import Path
from typing import TextIO

import requests

from .ansi import truncate_plain
from .data.fetch import RfcFetcher
from .data.index import ensure_index, sync_index
from .data.store import RfcStore
from .data.sync import sync_all
from .errors import LazyRfcError
from .logs import configure_logging
from .models import RfcMeta
from .paths import db_path, ensure_cache_dirs, rfcs_dir
from .render.info import info_lines
from .runtime import run_tui
from .runtime.config import parse_keymap
from .runtime.state import SortOrder
from .search.query import parse_query

logger = logging.getLogger(__name__)

COMMANDS = ("search", "info", "list", "path", "sync")
DEFAULT_PAGER = "less -R"

NUM_COL_WIDTH = 8
STATUS_COL_WIDTH = 16
YEAR_COL_WIDTH = 6

EPILOG = """\
commands:
  lazyrfc                      open the interactive UI
  lazyrfc <number>             read an RFC in $PAGER
  lazyrfc search <query>       search titles, authors, keywords and text
  lazyrfc info <number>        show RFC metadata
  lazyrfc list                 list locally cached RFCs
  lazyrfc path <number>        print the local file path for an RFC
  lazyrfc sync [--index]       download all RFCs, or only refresh the index

query syntax:
  author:fielding  status:standard  wg:httpbis  year:2022  stream:ietf
"""


def _rfc_number(value: str | None, usage: str) -> int:
    """Parse a positive RFC number or exit with ``usage``."""
    try:
        number = int(value) if value is not None else 0
    except ValueError:
        number = 0
    if number <= 0:
        raise SystemExit(f"Usage: {usage}")
    return number


def _terminal_width() -> int:
    return max(20, shutil.get_terminal_size((80, 24)).columns)


def format_title(meta: RfcMeta) -> str:
    """Return the title with an ``(obsoleted by ...)`` suffix when replaced."""
    if meta.obsoleted_by:
        return f"{meta.title} (obsoleted by {', '.join(str(n) for n in meta.obsoleted_by)})"
    return meta.title


def format_search_line(meta: RfcMeta, width: int) -> str:
    """Return one fixed-column search result line fitted to ``width``."""
    number = f"RFC {meta.number}".ljust(NUM_COL_WIDTH)
    year = str(meta.date.year).rjust(4) if meta.date.year else "    "
    status = truncate_plain(meta.status, STATUS_COL_WIDTH).ljust(STATUS_COL_WIDTH)
    title_width = max(10, width - NUM_COL_WIDTH - YEAR_COL_WIDTH - STATUS_COL_WIDTH - 4)
    title = truncate_plain(format_title(meta), title_width).ljust(title_width)
    return f"{number} {title} {status} {year}"


def search_command(store: RfcStore, query: str, out: TextIO, width: int) -> int:
    """Print matches for ``query``; returns the number of printed rows."""
    parsed = parse_query(query)
    page = store.search(parsed.free_text, parsed.filters, SortOrder.RELEVANCE)
    if not page.results:
        out.write("No results found.\n")
        return 0
    for result in page.results:
        out.write(format_search_line(result.metadata, width) + "\n")
    if page.total > len(page.results):
        out.write(f"... {page.total - len(page.results)} more, refine the query to narrow down.\n")
    return len(page.results)


def info_command(store: RfcStore, number: int, out: TextIO, width: int, color: bool) -> None:
    """Print the metadata block for RFC ``number``."""
    meta = store.get_metadata(number)
    if meta is None:
        raise SystemExit(f"RFC {number} not found in index.")
    out.write(f"RFC {meta.number}\n")
    for line in info_lines(meta, width, color=color):
        out.write(line + "\n")


def list_command(store: RfcStore, out: TextIO) -> int:
    """Print every RFC whose text is cached locally."""
    cached = store.list_cached()
    if not cached:
        out.write(
            "No RFCs cached locally. Use 'lazyrfc <number>' to fetch one, "
            "or 'lazyrfc sync' to download all.\n"
        )
        return 0
    for meta in cached:
        out.write(f"RFC {str(meta.number).ljust(5)} {meta.title}\n")
    return len(cached)


def pager_command(env: dict[str, str] | None = None) -> list[str]:
    """Return the pager argv from ``$PAGER``, defaulting to ``less -R``."""
    env = os.environ if env is None else env
    return shlex.split(env.get("PAGER") or DEFAULT_PAGER)


def open_in_pager(path: Path, env: dict[str, str] | None = None) -> None:
    """Show ``path`` in the user's pager, falling back to ``more``."""
    argv = pager_command(env) + [str(path)]
    try:
        proc = subprocess.run(argv, check=False)
    except FileNotFoundError:
        logger.debug("pager %s not found", argv[0])
    else:
        if proc.returncode == 0:
            return
    if argv[0] != "more":
        try:
            subprocess.run(["more", str(path)], check=False)
        except FileNotFoundError as exc:
            raise SystemExit(f"No pager available: {exc}") from exc


def read_command(fetcher: RfcFetcher, number: int, out: TextIO) -> None:
    """Fetch RFC ``number`` and page it, or print it when stdout is not a tty."""
    path = fetcher.fetch_to_file(number)
    if not out.isatty():
        out.write(path.read_text(encoding="utf-8", errors="replace"))
        return
    open_in_pager(path)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazyrfc",
        description="Read, search, and navigate IETF RFCs.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("command", nargs="?", default=None, help="RFC number or command.")
    parser.add_argument("args", nargs="*", help="Command arguments.")
    parser.add_argument("--index", action="store_true", help="With sync: only refresh the metadata index.")
    parser.add_argument("--keymap", choices=("vim", "emacs"), default=None, help="Keymap for the interactive UI.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log debug output.")
    return parser


def _run_command(args: argparse.Namespace, out: TextIO) -> None:
    command = args.command
    http = requests.Session()
    ensure_cache_dirs()
    with RfcStore(db_path()) as store:
        if command == "sync":
            if args.index:
                sync_index(store, http)
            else:
                sync_all(store, rfcs_dir(), http)
            return

        ensure_index(store, http)
        if command == "search":
            query = " ".join(args.args).strip()
            if not query:
                raise SystemExit("Usage: lazyrfc search <query>")
            search_command(store, query, out, _terminal_width())
        elif command == "info":
            number = _rfc_number(args.args[0] if args.args else None, "lazyrfc info <number>")
            info_command(store, number, out, _terminal_width(), color=out.isatty())
        elif command == "list":
            list_command(store, out)
        elif command == "path":
            number = _rfc_number(args.args[0] if args.args else None, "lazyrfc path <number>")
            out.write(f"{RfcFetcher(store, http, rfcs_dir()).fetch_to_file(number)}\n")
        else:
            number = _rfc_number(command, "lazyrfc <number>")
            read_command(RfcFetcher(store, http, rfcs_dir()), number, out)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the UI or a one-shot command."""
    parser = build_parser()
    args = parser.parse_args(argv)
    out = sys.stdout

    if args.command is None:
        try:
            run_tui(keymap_override=parse_keymap(args.keymap), verbose=args.verbose)
        except LazyRfcError as exc:
            raise SystemExit(f"error: {exc}") from exc
        return

    if args.command not in COMMANDS and not args.command.isdigit():
        raise SystemExit(f"Unknown command: {args.command}\nRun 'lazyrfc --help' for usage.")

    configure_logging(verbose=args.verbose)
    try:
        _run_command(args, out)
    except LazyRfcError as exc:
        raise SystemExit(f"error: {exc}") from exc


if __name__ == "__main__":
    main()
