"""Input-layer public API: key events, actions, bindings, and the router."""

from .key_registry import KeyComboBinding, KeyComboRegistry
from .keys import (
    ACTION_GROUPS,
    DEFAULT_KEY_BINDINGS,
    Action,
    ActionAvailability,
    EventTarget,
    KeyEvent,
    normalize_combo,
    resolve_key_bindings,
)
from .router import InputRouter, RouterHandlers

__all__ = [
    "ACTION_GROUPS",
    "DEFAULT_KEY_BINDINGS",
    "Action",
    "ActionAvailability",
    "EventTarget",
    "InputRouter",
    "KeyComboBinding",
    "KeyComboRegistry",
    "KeyEvent",
    "RouterHandlers",
    "normalize_combo",
    "resolve_key_bindings",
]
