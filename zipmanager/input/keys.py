"""Key events, logical actions, default bindings, and action availability."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

MODIFIER_ORDER = ("CTRL", "ALT", "SHIFT")
MODIFIER_ALIASES = {"CONTROL": "CTRL", "OPTION": "ALT"}
NAMED_KEYS = (
    "Enter",
    "Delete",
    "Backspace",
    "ArrowUp",
    "ArrowDown",
    "ArrowLeft",
    "ArrowRight",
    "PageUp",
    "PageDown",
    "Home",
    "End",
    "Escape",
    "Tab",
)
_NAMED_KEYS_FOLDED = {name.lower(): name for name in NAMED_KEYS}


class Action(enum.Enum):
    CUT = "cut"
    COPY = "copy"
    RENAME = "rename"
    PASTE = "paste"
    DELETE = "delete"
    ACTIVATE = "activate"
    CREATE_FOLDER = "create_folder"
    ADD_FILES = "add_files"
    IMPORT_ZIP = "import_zip"
    EXPORT_ZIP = "export_zip"
    HISTORY_BACK = "history_back"
    HISTORY_FORWARD = "history_forward"
    HIGHLIGHT_PREVIOUS = "highlight_previous"
    HIGHLIGHT_NEXT = "highlight_next"
    HIGHLIGHT_PREVIOUS_PAGE = "highlight_previous_page"
    HIGHLIGHT_NEXT_PAGE = "highlight_next_page"
    HIGHLIGHT_FIRST = "highlight_first"
    HIGHLIGHT_LAST = "highlight_last"


# Dispatch order: earlier groups win when a combo is bound twice.
ACTION_GROUPS: tuple[tuple[Action, ...], ...] = (
    (Action.CUT, Action.COPY, Action.RENAME, Action.PASTE),
    (Action.DELETE,),
    (Action.ACTIVATE,),
    (Action.CREATE_FOLDER, Action.ADD_FILES, Action.IMPORT_ZIP, Action.EXPORT_ZIP),
    (Action.HISTORY_BACK, Action.HISTORY_FORWARD),
    (
        Action.HIGHLIGHT_PREVIOUS,
        Action.HIGHLIGHT_NEXT,
        Action.HIGHLIGHT_PREVIOUS_PAGE,
        Action.HIGHLIGHT_NEXT_PAGE,
        Action.HIGHLIGHT_FIRST,
        Action.HIGHLIGHT_LAST,
    ),
)

DEFAULT_KEY_BINDINGS: dict[Action, tuple[str, ...]] = {
    Action.CUT: ("CTRL+x",),
    Action.COPY: ("CTRL+c",),
    Action.RENAME: ("CTRL+r",),
    Action.PASTE: ("CTRL+v",),
    Action.DELETE: ("Delete", "Backspace"),
    Action.ACTIVATE: ("Enter",),
    Action.CREATE_FOLDER: ("CTRL+d",),
    Action.ADD_FILES: ("CTRL+f",),
    Action.IMPORT_ZIP: ("CTRL+i",),
    Action.EXPORT_ZIP: ("CTRL+e",),
    Action.HISTORY_BACK: ("ALT+ArrowLeft",),
    Action.HISTORY_FORWARD: ("ALT+ArrowRight",),
    Action.HIGHLIGHT_PREVIOUS: ("ArrowUp",),
    Action.HIGHLIGHT_NEXT: ("ArrowDown",),
    Action.HIGHLIGHT_PREVIOUS_PAGE: ("PageUp",),
    Action.HIGHLIGHT_NEXT_PAGE: ("PageDown",),
    Action.HIGHLIGHT_FIRST: ("Home",),
    Action.HIGHLIGHT_LAST: ("End",),
}


def _normalize_key(key: str) -> str:
    if len(key) == 1:
        return key.lower()
    return _NAMED_KEYS_FOLDED.get(key.lower(), key)


def normalize_combo(combo: str) -> str:
    """Canonicalize ``"ctrl+X"``-style tokens to ``"CTRL+x"``.

    Modifiers are upper-cased and ordered, single-character keys are
    lower-cased, and named keys get their canonical spelling. A trailing
    ``"+"`` after a separator is the plus key itself.
    """
    if combo in {"+", " "}:
        return combo
    if combo.endswith("++"):
        head, key = combo[:-2], "+"
    else:
        head, _sep, key = combo.rpartition("+")
    modifiers = {MODIFIER_ALIASES.get(part.upper(), part.upper()) for part in head.split("+") if part}
    ordered = [name for name in MODIFIER_ORDER if name in modifiers]
    return "+".join([*ordered, _normalize_key(key)])


class EventTarget(enum.Enum):
    WINDOW = "window"
    ENTRY_NAME = "entry_name"


@dataclass(frozen=True)
class KeyEvent:
    """One key release, independent of any host event object."""

    key: str
    ctrl: bool = False
    alt: bool = False
    shift: bool = False
    target: EventTarget = EventTarget.WINDOW
    entry: Any = None

    @property
    def has_modifiers(self) -> bool:
        return self.ctrl or self.alt or self.shift

    @property
    def combo(self) -> str:
        modifiers = [
            name
            for name, pressed in zip(MODIFIER_ORDER, (self.ctrl, self.alt, self.shift))
            if pressed
        ]
        return "+".join([*modifiers, _normalize_key(self.key)])


@dataclass(frozen=True)
class ActionAvailability:
    """Disabled state of each action, mirroring the buttons that expose them."""

    disabled_cut: bool = True
    disabled_copy: bool = True
    disabled_rename: bool = True
    disabled_paste: bool = True
    disabled_delete: bool = True
    disabled_reset_clipboard: bool = True
    disabled_export_zip: bool = True
    disabled_reset: bool = True
    disabled_history_back: bool = True
    disabled_history_forward: bool = True
    page_size: int = 10

    def is_enabled(self, action: Action) -> bool:
        disabled = getattr(self, f"disabled_{action.value}", False)
        return not disabled


def resolve_key_bindings(overrides: Mapping[str, tuple[str, ...]] | None = None) -> dict[Action, tuple[str, ...]]:
    """Merge config overrides (keyed by action value) over the defaults."""
    bindings = dict(DEFAULT_KEY_BINDINGS)
    for name, combos in (overrides or {}).items():
        try:
            action = Action(name)
        except ValueError:
            continue
        bindings[action] = tuple(combos)
    return bindings
