"""Background document fetch-and-open with a latest-request-wins guard.

Every ``open`` call takes the next generation number and starts a daemon
fetch thread. Finished fetches are queued as ``PendingUpdate`` messages;
``drain`` applies them on the main loop and drops any whose generation has
been superseded. Superseded fetches are never cancelled, only ignored.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, replace
from queue import Empty, Queue

from ..errors import LazyRfcError
from ..search.content import prepare_rfc_text
from ..search.references import collect_visible_refs
from .state import NavigationState

logger = logging.getLogger(__name__)

FetchDocument = Callable[[int], str]
LookupTitle = Callable[[int], "str | None"]
StartWorker = Callable[[Callable[[], None]], None]


@dataclass(frozen=True)
class PendingUpdate:
    """Outcome of one fetch, tagged with the generation that requested it."""

    generation: int
    number: int
    lines: tuple[str, ...] = ()
    title: str = ""
    error: str | None = None

    def apply(self, state: NavigationState) -> NavigationState:
        if self.error is not None:
            return replace(state, loading=False, error=self.error)
        return replace(
            state,
            lines=self.lines,
            current_title=self.title,
            loading=False,
            error=None,
            visible_refs=collect_visible_refs(self.lines, 0, state.current_rfc),
        )


def _start_daemon_thread(target: Callable[[], None]) -> None:
    worker = threading.Thread(target=target, name="lazyrfc-document-fetch", daemon=True)
    worker.start()


def fallback_title(number: int) -> str:
    return f"RFC {number}"


class DocumentSession:
    """Single-consumer fetch coordinator owned by the main loop."""

    def __init__(
        self,
        fetch_document: FetchDocument,
        lookup_title: LookupTitle,
        start_worker: StartWorker | None = None,
    ) -> None:
        self._fetch_document = fetch_document
        self._lookup_title = lookup_title
        self._start_worker = start_worker if start_worker is not None else _start_daemon_thread
        self._lock = threading.Lock()
        self._generation = 0
        self._updates: Queue[PendingUpdate] = Queue()

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def open(self, number: int, known_title: str = "") -> int:
        """Start fetching ``number`` and return the generation assigned to it."""
        with self._lock:
            self._generation += 1
            generation = self._generation
        logger.debug("opening RFC %d (generation %d)", number, generation)
        self._start_worker(lambda: self._run(generation, number, known_title))
        return generation

    def _resolve_title(self, number: int, known_title: str) -> str:
        if known_title:
            return known_title
        return self._lookup_title(number) or fallback_title(number)

    def _run(self, generation: int, number: int, known_title: str) -> None:
        try:
            body = self._fetch_document(number)
            title = self._resolve_title(number, known_title)
        except LazyRfcError as exc:
            logger.info("fetch of RFC %d failed: %s", number, exc)
            self._updates.put(PendingUpdate(generation=generation, number=number, error=str(exc)))
            return
        except Exception as exc:
            logger.exception("unexpected failure fetching RFC %d", number)
            self._updates.put(
                PendingUpdate(generation=generation, number=number, error=f"Failed to open RFC {number}: {exc}")
            )
            return
        self._updates.put(
            PendingUpdate(
                generation=generation,
                number=number,
                lines=tuple(prepare_rfc_text(body)),
                title=title,
            )
        )

    def drain(self, state: NavigationState) -> NavigationState:
        """Apply queued updates in arrival order, skipping stale generations.

        Returns ``state`` itself when nothing was applied.
        """
        current = self.generation
        while True:
            try:
                update = self._updates.get_nowait()
            except Empty:
                return state
            if update.generation != current:
                logger.debug(
                    "discarding stale result for RFC %d (generation %d, current %d)",
                    update.number,
                    update.generation,
                    current,
                )
                continue
            state = update.apply(state)
