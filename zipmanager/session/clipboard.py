"""Cut/copy/paste protocol over archive entries."""

from __future__ import annotations

from dataclasses import dataclass

from ..archive import ArchiveError, ArchiveFS, DirectoryEntry, Entry
from ..logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ClipboardData:
    """Held entry: a live attached reference when ``cut``, else a detached clone."""

    entry: Entry
    cut: bool = False


class ClipboardController:
    """Clipboard that persists across pastes until explicitly reset.

    Copy mode refills itself with a fresh clone on every paste, so each paste
    attaches a new independent entry. Cut mode keeps the live entry, so each
    paste moves that same entry again.
    """

    def __init__(self, fs: ArchiveFS) -> None:
        self.fs = fs
        self.data: ClipboardData | None = None

    @property
    def is_empty(self) -> bool:
        return self.data is None

    def copy(self, entry: Entry) -> ClipboardData:
        self.data = ClipboardData(entry.clone(deep=True), cut=False)
        return self.data

    def cut(self, entry: Entry) -> ClipboardData:
        self.data = ClipboardData(entry, cut=True)
        return self.data

    def paste(self, target: Entry) -> Entry | None:
        """Attach the held entry under ``target`` and return it.

        A copy whose name is taken in ``target`` is pasted under the first
        free ``"name (n)"`` variant. ``ArchiveError`` from the move propagates
        and leaves the clipboard untouched.
        """
        if self.data is None:
            return None
        entry, cut = self.data.entry, self.data.cut
        if cut:
            self.fs.move(entry, target)
        else:
            refill = entry.clone(deep=True)
            held_name = entry.name
            if isinstance(target, DirectoryEntry):
                entry.name = target.available_name(held_name)
            try:
                self.fs.move(entry, target)
            except ArchiveError:
                entry.name = held_name
                raise
            self.data = ClipboardData(refill, cut=False)
        logger.debug("clipboard: pasted %r into %r (cut=%s)", entry.name, target.name, cut)
        return entry

    def reset(self) -> None:
        self.data = None
