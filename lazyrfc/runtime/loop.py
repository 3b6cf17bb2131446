"""Main interactive event loop for the terminal UI.

The loop is the only consumer of ``NavigationState``: it applies finished
document fetches, re-fits the state to the terminal, renders on change, and
routes one key at a time.
"""

from __future__ import annotations

import os
import shutil
import time
from collections.abc import Callable
from dataclasses import dataclass

from ..input import KeyOutcome, read_key
from .state import NavigationState
from .viewport import fit_to_terminal


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Timing constants controlling interactive loop behavior."""

    key_timeout_ms: int = 80
    spinner_frame_seconds: float = 0.08


@dataclass(frozen=True)
class RuntimeLoopCallbacks:
    """Injected operations used by ``run_main_loop``."""

    handle_key: Callable[[str, NavigationState, os.terminal_size], KeyOutcome]
    drain_updates: Callable[[NavigationState], NavigationState]
    render: Callable[[NavigationState, os.terminal_size, int], None]
    read_key: Callable[[int, int], str] = read_key
    terminal_size: Callable[[], os.terminal_size] = lambda: shutil.get_terminal_size((80, 24))


def run_main_loop(
    state: NavigationState,
    stdin_fd: int,
    callbacks: RuntimeLoopCallbacks,
    timing: RuntimeLoopTiming | None = None,
) -> NavigationState:
    """Run until a key requests quit; return the final state.

    Rendering happens only when the state, the terminal size, or the loading
    spinner frame changed since the last frame.
    """
    timing = timing if timing is not None else RuntimeLoopTiming()
    ops = callbacks
    last_rendered: tuple[NavigationState, os.terminal_size, int] | None = None

    while True:
        size = ops.terminal_size()
        state = ops.drain_updates(state)
        state = fit_to_terminal(state, size)

        spinner_frame = int(time.monotonic() / timing.spinner_frame_seconds) if state.loading else 0
        if (
            last_rendered is None
            or last_rendered[0] is not state
            or last_rendered[1:] != (size, spinner_frame)
        ):
            ops.render(state, size, spinner_frame)
            last_rendered = (state, size, spinner_frame)

        try:
            key = ops.read_key(stdin_fd, timing.key_timeout_ms)
        except KeyboardInterrupt:
            return state
        if key == "":
            continue

        outcome = ops.handle_key(key, state, size)
        if outcome.state is not None:
            state = outcome.state
        if outcome.quit:
            return state
