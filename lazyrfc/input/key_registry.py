"""Reusable key-combo registry primitives."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class KeyComboBinding(Generic[T]):
    """Mapping from one or more key tokens to a single bound value."""

    combos: tuple[str, ...]
    target: T


class KeyComboRegistry(Generic[T]):
    """Small key-lookup table with optional key normalization strategy."""

    def __init__(self, normalize: Callable[[str], str] | None = None) -> None:
        self._normalize = normalize if normalize is not None else self._identity
        self._targets: dict[str, T] = {}

    @staticmethod
    def _identity(key: str) -> str:
        return key

    def register_binding(self, binding: KeyComboBinding[T]) -> KeyComboRegistry[T]:
        """Register one binding, overwriting existing targets for same combos."""
        for combo in binding.combos:
            self._targets[self._normalize(combo)] = binding.target
        return self

    def register_bindings(self, bindings: Iterable[KeyComboBinding[T]]) -> KeyComboRegistry[T]:
        """Register multiple bindings and return ``self`` for fluent usage."""
        for binding in bindings:
            self.register_binding(binding)
        return self

    def resolve(self, key: str) -> T | None:
        """Return the value bound to ``key`` or ``None`` when unbound."""
        return self._targets.get(self._normalize(key))

    def combos_for(self, target: T) -> tuple[str, ...]:
        """Return every registered key bound to ``target``, in insertion order."""
        return tuple(combo for combo, bound in self._targets.items() if bound == target)
