"""Folder navigation history with deletion-aware pruning.

This module intentionally has no UI concerns.
It keeps an ordered list of visited folders and a pointer into it.
"""

from __future__ import annotations

from ..archive import Entry
from ..logger import get_logger

logger = get_logger(__name__)


class HistoryNavigator:
    """Browser-style back/forward folder history.

    ``history[index]`` is always the selected folder while history is
    non-empty. Going into a folder drops the forward branch.
    """

    def __init__(self, root: Entry | None = None) -> None:
        self.history: list[Entry] = []
        self.index = 0
        if root is not None:
            self.reset(root)

    def reset(self, root: Entry) -> None:
        self.history = [root]
        self.index = 0

    @property
    def current(self) -> Entry | None:
        if not self.history:
            return None
        return self.history[self.index]

    @property
    def can_go_back(self) -> bool:
        return bool(self.history) and self.index > 0

    @property
    def can_go_forward(self) -> bool:
        return bool(self.history) and self.index < len(self.history) - 1

    def go_into(self, folder: Entry) -> Entry:
        """Truncate the forward branch, push ``folder``, and make it current."""
        if self.current is folder:
            return folder
        del self.history[self.index + 1 :]
        self.history.append(folder)
        self.index = len(self.history) - 1
        logger.debug("history: go into %r (step %d)", folder.name, self.index)
        return folder

    def back(self) -> Entry | None:
        """Step back one folder; ``None`` when already at the oldest step."""
        return self._navigate(-1)

    def forward(self) -> Entry | None:
        """Step forward one folder; ``None`` when already at the newest step."""
        return self._navigate(1)

    def _navigate(self, offset: int) -> Entry | None:
        new_index = self.index + offset
        if not self.history or new_index < 0 or new_index >= len(self.history):
            return None
        self.index = new_index
        return self.history[new_index]

    def on_entry_removed(self, removed: Entry) -> None:
        """Prune ``removed`` and its descendants, then collapse adjacent repeats.

        The pointer is shifted back by the number of steps dropped at or
        before it, so it keeps designating the nearest surviving step.
        """
        kept: list[Entry] = []
        offset = 0
        for position, entry in enumerate(self.history):
            dropped = (
                (kept and kept[-1] is entry)
                or entry is removed
                or entry.is_descendant_of(removed)
            )
            if dropped:
                if position <= self.index:
                    offset += 1
            else:
                kept.append(entry)
        self.history = kept
        self.index = max(0, min(self.index - offset, len(kept) - 1))
        logger.debug("history: pruned %r, %d steps left", removed.name, len(kept))
