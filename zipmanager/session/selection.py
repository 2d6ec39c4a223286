"""Cursor movement and highlight state over the current folder listing."""

from __future__ import annotations

import locale
from collections.abc import Callable
from dataclasses import dataclass

from ..archive import Entry

PARENT_FOLDER_LABEL = ".."


@dataclass(frozen=True, eq=False)
class ParentEntry:
    """Synthetic ".." row leading to the listed folder's parent."""

    target: Entry
    name: str = PARENT_FOLDER_LABEL
    directory: bool = True


ListedEntry = Entry | ParentEntry


def _name_sort_key(entry: Entry) -> tuple[str, str]:
    # strxfrm rejects embedded NULs
    return (locale.strxfrm(entry.name.casefold().replace("\x00", "")), entry.name)


def list_folder_entries(folder: Entry | None) -> list[ListedEntry]:
    """Return the display order: "..", then directories, then files."""
    if folder is None:
        return []
    children: list[Entry] = list(getattr(folder, "children", ()))
    folders = sorted((child for child in children if child.directory), key=_name_sort_key)
    files = sorted((child for child in children if not child.directory), key=_name_sort_key)
    listed: list[ListedEntry] = []
    if folder.parent is not None:
        listed.append(ParentEntry(folder.parent))
    listed.extend(folders)
    listed.extend(files)
    return listed


class SelectionNavigator:
    """Highlight cursor over ``entries`` with circular and paged movement."""

    def __init__(
        self,
        go_into_folder: Callable[[Entry], None],
        download_file: Callable[[Entry], None],
    ) -> None:
        self.go_into_folder = go_into_folder
        self.download_file = download_file
        self.entries: list[ListedEntry] = []
        self.highlighted: ListedEntry | None = None

    @property
    def highlighted_entry(self) -> Entry | None:
        """Highlighted real entry; the ".." row never counts."""
        if isinstance(self.highlighted, ParentEntry):
            return None
        return self.highlighted

    def refresh(self, folder: Entry | None, highlight: ListedEntry | None = None) -> None:
        """Rebuild the listing for ``folder`` and keep only a still-listed highlight.

        A highlighted ".." row is matched by its target, since the row is
        rebuilt on every refresh.
        """
        self.entries = list_folder_entries(folder)
        candidate = highlight if highlight is not None else self.highlighted
        self.highlighted = self._listed_match(candidate)

    def _listed_match(self, entry: ListedEntry | None) -> ListedEntry | None:
        if isinstance(entry, ParentEntry):
            for listed in self.entries:
                if isinstance(listed, ParentEntry) and listed.target is entry.target:
                    return listed
            return None
        return entry if self._is_listed(entry) else None

    def _is_listed(self, entry: ListedEntry | None) -> bool:
        return entry is not None and any(listed is entry for listed in self.entries)

    def _highlighted_index(self) -> int:
        for index, listed in enumerate(self.entries):
            if listed is self.highlighted:
                return index
        return -1

    def _highlight_index(self, index: int) -> ListedEntry | None:
        self.highlighted = self.entries[index]
        return self.highlighted

    def next(self) -> ListedEntry | None:
        if not self.entries:
            return None
        return self._highlight_index((self._highlighted_index() + 1) % len(self.entries))

    def previous(self) -> ListedEntry | None:
        if not self.entries:
            return None
        index = self._highlighted_index()
        if index < 0:
            index = 0
        return self._highlight_index((index - 1) % len(self.entries))

    def page_next(self, page_size: int) -> ListedEntry | None:
        if not self.entries:
            return None
        index = self._highlighted_index() + max(1, page_size)
        return self._highlight_index(min(index, len(self.entries) - 1))

    def page_previous(self, page_size: int) -> ListedEntry | None:
        if not self.entries:
            return None
        index = self._highlighted_index() - max(1, page_size)
        return self._highlight_index(max(index, 0))

    def first(self) -> ListedEntry | None:
        if not self.entries:
            return None
        return self._highlight_index(0)

    def last(self) -> ListedEntry | None:
        if not self.entries:
            return None
        return self._highlight_index(len(self.entries) - 1)

    def set_highlighted(self, entry: ListedEntry | None) -> None:
        self.highlighted = entry if self._is_listed(entry) else None

    def toggle_highlight(self, entry: ListedEntry) -> None:
        """Flip highlight on ``entry``; the ".." row activates instead."""
        if isinstance(entry, ParentEntry):
            self.activate(entry)
            return
        if not self._is_listed(entry):
            return
        self.highlighted = None if self.highlighted is entry else entry

    def activate(self, entry: ListedEntry | None = None) -> None:
        """Open directories (including "..") and download files."""
        if entry is None:
            entry = self.highlighted
        if entry is None:
            return
        if isinstance(entry, ParentEntry):
            self.go_into_folder(entry.target)
        elif entry.directory:
            self.go_into_folder(entry)
        else:
            self.download_file(entry)
