"""Keyboard dispatch from key events to session operations."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from ..logger import get_logger
from .key_registry import KeyComboBinding, KeyComboRegistry
from .keys import (
    ACTION_GROUPS,
    Action,
    ActionAvailability,
    EventTarget,
    KeyEvent,
    normalize_combo,
    resolve_key_bindings,
)

logger = get_logger(__name__)

TOGGLE_HIGHLIGHT_KEY = " "


@dataclass(frozen=True)
class RouterHandlers:
    """Bound session operations invoked by the router."""

    cut_entry: Callable[[], None]
    copy_entry: Callable[[], None]
    rename_entry: Callable[[], None]
    paste_entry: Callable[[], None]
    delete_entry: Callable[[], None]
    activate_entry: Callable[[Any], None]
    toggle_highlight: Callable[[Any], None]
    create_folder: Callable[[], None]
    add_files: Callable[[], None]
    import_zip: Callable[[], None]
    export_zip: Callable[[], None]
    navigate_back: Callable[[], None]
    navigate_forward: Callable[[], None]
    highlight_previous: Callable[[], None]
    highlight_next: Callable[[], None]
    highlight_previous_page: Callable[[int], None]
    highlight_next_page: Callable[[int], None]
    highlight_first: Callable[[], None]
    highlight_last: Callable[[], None]


class InputRouter:
    """Maps ``(modifiers, key)`` combos onto actions, honoring availability.

    Groups are tried in a fixed order and the first group whose enabled
    binding matches wins. A disabled action never runs.
    """

    def __init__(
        self,
        handlers: RouterHandlers,
        key_bindings: Mapping[str, tuple[str, ...]] | None = None,
    ) -> None:
        self.handlers = handlers
        self.bindings = resolve_key_bindings(key_bindings)
        self._operations: dict[Action, Callable[[ActionAvailability], None]] = {
            Action.CUT: lambda _context: handlers.cut_entry(),
            Action.COPY: lambda _context: handlers.copy_entry(),
            Action.RENAME: lambda _context: handlers.rename_entry(),
            Action.PASTE: lambda _context: handlers.paste_entry(),
            Action.DELETE: lambda _context: handlers.delete_entry(),
            Action.ACTIVATE: lambda _context: handlers.activate_entry(None),
            Action.CREATE_FOLDER: lambda _context: handlers.create_folder(),
            Action.ADD_FILES: lambda _context: handlers.add_files(),
            Action.IMPORT_ZIP: lambda _context: handlers.import_zip(),
            Action.EXPORT_ZIP: lambda _context: handlers.export_zip(),
            Action.HISTORY_BACK: lambda _context: handlers.navigate_back(),
            Action.HISTORY_FORWARD: lambda _context: handlers.navigate_forward(),
            Action.HIGHLIGHT_PREVIOUS: lambda _context: handlers.highlight_previous(),
            Action.HIGHLIGHT_NEXT: lambda _context: handlers.highlight_next(),
            Action.HIGHLIGHT_PREVIOUS_PAGE: lambda context: handlers.highlight_previous_page(context.page_size),
            Action.HIGHLIGHT_NEXT_PAGE: lambda context: handlers.highlight_next_page(context.page_size),
            Action.HIGHLIGHT_FIRST: lambda _context: handlers.highlight_first(),
            Action.HIGHLIGHT_LAST: lambda _context: handlers.highlight_last(),
        }
        self._registries = [self._build_group_registry(group) for group in ACTION_GROUPS]

    def _build_group_registry(self, group: tuple[Action, ...]) -> KeyComboRegistry:
        registry = KeyComboRegistry(normalize=normalize_combo)
        for action in group:
            registry.register_binding(KeyComboBinding(self.bindings.get(action, ()), self._gated(action)))
        return registry

    def _gated(self, action: Action) -> Callable[[ActionAvailability], Action | None]:
        operation = self._operations[action]

        def run(context: ActionAvailability) -> Action | None:
            if not context.is_enabled(action):
                return None
            operation(context)
            return action

        return run

    def is_bound(self, action: Action, event: KeyEvent) -> bool:
        combo = normalize_combo(event.combo)
        return any(normalize_combo(candidate) == combo for candidate in self.bindings.get(action, ()))

    def dispatch(self, event: KeyEvent, context: ActionAvailability) -> Action | None:
        """Run the action bound to ``event`` and return it, or ``None``."""
        if event.target is EventTarget.ENTRY_NAME and event.entry is not None:
            if event.key == TOGGLE_HIGHLIGHT_KEY and not event.has_modifiers:
                self.handlers.toggle_highlight(event.entry)
            elif self.is_bound(Action.ACTIVATE, event):
                # Stops propagation: the row's entry is activated, not the highlighted one.
                self.handlers.activate_entry(event.entry)
                return Action.ACTIVATE

        combo = event.combo
        for registry in self._registries:
            handled = registry.dispatch(combo, context)
            if handled is not None:
                logger.debug("key %r -> %s", combo, handled.value)
                return handled
        return None
