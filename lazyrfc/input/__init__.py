"""Input-layer public API for key decoding and key routing.

Exports are split between low-level terminal decoding (`read_key`) and the
key router that turns one key token into the next navigation state.
"""

from .key_common import KeyContext, KeyOutcome
from .keymaps import Action, Mode, bindings_for, resolve_action
from .keys import KeyComboBinding, KeyComboRegistry, KeyRouter, handle_key
from .reader import ESC_SEQUENCE_TIMEOUT_MS, read_key

__all__ = [
    "read_key",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "Action",
    "Mode",
    "KeyComboBinding",
    "KeyComboRegistry",
    "KeyContext",
    "KeyOutcome",
    "KeyRouter",
    "bindings_for",
    "handle_key",
    "resolve_action",
]
