"""In-memory archive filesystem owning one entry tree."""

from __future__ import annotations

from .entries import DirectoryEntry, Entry
from .errors import ArchiveError


class ArchiveFS:
    """Entry tree plus the structural operations that span several entries."""

    def __init__(self) -> None:
        self._next_id = 0
        self.root = DirectoryEntry(self, self.allocate_id(), "")

    def allocate_id(self) -> int:
        entry_id = self._next_id
        self._next_id += 1
        return entry_id

    def move(self, entry: Entry, target: Entry) -> None:
        """Reparent ``entry`` under ``target``.

        Detached entries (clones) are attached. Moving into the current
        parent is a no-op.
        """
        if entry is self.root:
            raise ArchiveError("Root directory cannot be moved")
        if entry.removed:
            raise ArchiveError(f"Entry has been removed: {entry.name!r}")
        if not isinstance(target, DirectoryEntry):
            raise ArchiveError(f"Target entry is not a directory: {target.name!r}")
        if target is entry or target.is_descendant_of(entry):
            raise ArchiveError("Entry is an ancestor of target entry")
        if entry.parent is target:
            return
        target.check_name_available(entry.name)
        if entry.parent is not None:
            entry.parent.detach(entry)
        target.attach(entry)

    def remove(self, entry: Entry) -> None:
        if entry is self.root:
            raise ArchiveError("Root directory cannot be removed")
        if entry.parent is not None:
            entry.parent.detach(entry)
        _mark_removed(entry)

    def is_descendant_of(self, entry: Entry, ancestor: Entry) -> bool:
        return entry.is_descendant_of(ancestor)


def _mark_removed(entry: Entry) -> None:
    entry.removed = True
    for child in getattr(entry, "children", ()):
        _mark_removed(child)
