"""Reusable key-combo registry primitives."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more combo tokens to a single handler."""

    combos: tuple[str, ...]
    handler: Callable[..., Any]


class KeyComboRegistry:
    """Small combo-dispatch table with optional combo normalization strategy.

    Handlers return ``None`` for "not handled" so callers can fall through
    to the next registry.
    """

    def __init__(self, normalize: Callable[[str], str] | None = None) -> None:
        self._normalize = normalize if normalize is not None else self._identity
        self._handlers: dict[str, Callable[..., Any]] = {}

    @staticmethod
    def _identity(combo: str) -> str:
        return combo

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding, overwriting existing handlers for same combos."""
        for combo in binding.combos:
            self._handlers[self._normalize(combo)] = binding.handler
        return self

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        """Register multiple bindings and return ``self`` for fluent usage."""
        for binding in bindings:
            self.register_binding(binding)
        return self

    def dispatch(self, combo: str, *args: Any) -> Any:
        """Invoke the handler bound to ``combo`` with ``args`` and return its result."""
        handler = self._handlers.get(self._normalize(combo))
        if handler is None:
            return None
        return handler(*args)
