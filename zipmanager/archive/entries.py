"""Archive tree entries: directories, files, and their blob conversions.

Every entry belongs to one ``ArchiveFS`` which allocates its ids.
Directories own their children; ``parent`` is a lookup link only.
"""

from __future__ import annotations

import asyncio
import io
import zipfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .errors import ArchiveError
from .signal import CancelToken, ProgressCallback, check_cancelled, notify_progress

if TYPE_CHECKING:
    from .fs import ArchiveFS

DEFAULT_MIME_TYPE = "application/octet-stream"
ZIP_MIME_TYPE = "application/zip"
BLOB_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class Blob:
    """Materialized bytes handed to the save-to-disk collaborator."""

    data: bytes
    mime_type: str = DEFAULT_MIME_TYPE

    @property
    def size(self) -> int:
        return len(self.data)


def validate_entry_name(name: object) -> str:
    """Return ``name`` when it is usable as a single path segment."""
    if not isinstance(name, str) or not name or name in {".", ".."} or "/" in name or "\x00" in name:
        raise ArchiveError(f"Invalid entry name: {name!r}")
    return name


class Entry(ABC):
    """Common state for file and directory nodes."""

    directory = False

    def __init__(self, fs: ArchiveFS, entry_id: int, name: str, parent: DirectoryEntry | None = None) -> None:
        self.fs = fs
        self.id = entry_id
        self.name = name
        self.parent = parent
        self.removed = False

    def __repr__(self) -> str:
        kind = "dir" if self.directory else "file"
        return f"<{type(self).__name__} {kind} id={self.id} name={self.name!r}>"

    @property
    def full_name(self) -> str:
        """Slash-joined path from the root, without the root's empty name."""
        parts: list[str] = []
        entry: Entry | None = self
        while entry is not None and entry.parent is not None:
            parts.append(entry.name)
            entry = entry.parent
        return "/".join(reversed(parts))

    def is_descendant_of(self, ancestor: Entry) -> bool:
        parent = self.parent
        while parent is not None:
            if parent is ancestor:
                return True
            parent = parent.parent
        return False

    def rename(self, name: str) -> None:
        validate_entry_name(name)
        if self.parent is not None:
            self.parent.check_name_available(name, ignore=self)
        self.name = name

    @abstractmethod
    def clone(self, deep: bool = True) -> Entry:
        """Return a detached duplicate with fresh ids."""

    @abstractmethod
    def iter_files(self, prefix: str = "") -> list[tuple[str, Entry]]:
        """Return ``(archive_path, entry)`` pairs below this entry, files and empty dirs."""

    async def export_blob(
        self,
        *,
        signal: CancelToken | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> Blob:
        """Serialize this entry into a zip blob.

        Directories export their contents relative to themselves; a file
        exports a zip containing just that file. Cancellation is checked
        before each member and progress is reported in uncompressed bytes.
        """
        members = self.iter_files() if self.directory else [(self.name, self)]
        total = sum(len(member.data) for _path, member in members if isinstance(member, FileEntry))
        done = 0
        notify_progress(on_progress, done, total)
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for archive_path, member in members:
                check_cancelled(signal)
                if isinstance(member, FileEntry):
                    archive.writestr(archive_path, member.data)
                    done += len(member.data)
                else:
                    archive.writestr(archive_path + "/", b"")
                notify_progress(on_progress, done, total)
                await asyncio.sleep(0)
        check_cancelled(signal)
        return Blob(buffer.getvalue(), ZIP_MIME_TYPE)


class FileEntry(Entry):
    """Leaf entry holding raw bytes."""

    def __init__(
        self,
        fs: ArchiveFS,
        entry_id: int,
        name: str,
        data: bytes,
        parent: DirectoryEntry | None = None,
    ) -> None:
        super().__init__(fs, entry_id, name, parent)
        self.data = bytes(data)

    def clone(self, deep: bool = True) -> FileEntry:
        return FileEntry(self.fs, self.fs.allocate_id(), self.name, self.data)

    def iter_files(self, prefix: str = "") -> list[tuple[str, Entry]]:
        return [(prefix + self.name, self)]

    async def get_blob(
        self,
        mime_type: str = DEFAULT_MIME_TYPE,
        *,
        signal: CancelToken | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> Blob:
        """Copy file content chunk by chunk, yielding to the loop in between."""
        total = len(self.data)
        chunks: list[bytes] = []
        notify_progress(on_progress, 0, total)
        for offset in range(0, total, BLOB_CHUNK_SIZE):
            check_cancelled(signal)
            chunk = self.data[offset : offset + BLOB_CHUNK_SIZE]
            chunks.append(chunk)
            notify_progress(on_progress, offset + len(chunk), total)
            await asyncio.sleep(0)
        check_cancelled(signal)
        return Blob(b"".join(chunks), mime_type)


class DirectoryEntry(Entry):
    """Folder entry owning an insertion-ordered list of children."""

    directory = True

    def __init__(self, fs: ArchiveFS, entry_id: int, name: str, parent: DirectoryEntry | None = None) -> None:
        super().__init__(fs, entry_id, name, parent)
        self.children: list[Entry] = []

    def get_child(self, name: str) -> Entry | None:
        for child in self.children:
            if child.name == name:
                return child
        return None

    def check_name_available(self, name: str, ignore: Entry | None = None) -> None:
        existing = self.get_child(name)
        if existing is not None and existing is not ignore:
            raise ArchiveError(f"Entry filename already exists: {name!r}")

    def available_name(self, name: str) -> str:
        """Return ``name`` or the first free ``"stem (n).ext"`` variant of it."""
        if self.get_child(name) is None:
            return name
        dot = name.rfind(".")
        stem, suffix = (name[:dot], name[dot:]) if dot > 0 else (name, "")
        counter = 2
        while self.get_child(f"{stem} ({counter}){suffix}") is not None:
            counter += 1
        return f"{stem} ({counter}){suffix}"

    def attach(self, entry: Entry) -> Entry:
        """Append ``entry`` as the last child after validating its name."""
        validate_entry_name(entry.name)
        self.check_name_available(entry.name)
        entry.parent = self
        self.children.append(entry)
        return entry

    def detach(self, entry: Entry) -> None:
        self.children = [child for child in self.children if child is not entry]
        entry.parent = None

    def add_directory(self, name: str) -> DirectoryEntry:
        validate_entry_name(name)
        self.check_name_available(name)
        return self.attach(DirectoryEntry(self.fs, self.fs.allocate_id(), name))

    def add_blob(self, name: str, data: bytes) -> FileEntry:
        validate_entry_name(name)
        self.check_name_available(name)
        return self.attach(FileEntry(self.fs, self.fs.allocate_id(), name, data))

    def clone(self, deep: bool = True) -> DirectoryEntry:
        copy = DirectoryEntry(self.fs, self.fs.allocate_id(), self.name)
        if deep:
            for child in self.children:
                copy.attach(child.clone(deep=True))
        return copy

    def iter_files(self, prefix: str = "") -> list[tuple[str, Entry]]:
        members: list[tuple[str, Entry]] = []
        for child in self.children:
            if child.directory:
                nested = child.iter_files(prefix + child.name + "/")
                members.extend(nested if nested else [(prefix + child.name, child)])
            else:
                members.extend(child.iter_files(prefix))
        return members

    async def import_blob(
        self,
        data: bytes,
        *,
        signal: CancelToken | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> list[Entry]:
        """Merge a zip archive into this folder and return the created entries.

        Existing directories are reused; a file whose name is already taken
        raises ``ArchiveError`` and leaves earlier members imported.
        """
        try:
            archive = zipfile.ZipFile(io.BytesIO(data))
        except (zipfile.BadZipFile, OSError) as exc:
            raise ArchiveError(f"Invalid zip file: {exc}") from exc

        created: list[Entry] = []
        with archive:
            infos = archive.infolist()
            notify_progress(on_progress, 0, len(infos))
            for index, info in enumerate(infos):
                check_cancelled(signal)
                parts = [part for part in info.filename.split("/") if part]
                if not parts:
                    continue
                folder: DirectoryEntry = self
                dir_parts = parts if info.is_dir() else parts[:-1]
                for part in dir_parts:
                    existing = folder.get_child(part)
                    if existing is None:
                        existing = folder.add_directory(part)
                        created.append(existing)
                    elif not isinstance(existing, DirectoryEntry):
                        raise ArchiveError(f"Entry filename already exists: {part!r}")
                    folder = existing
                if not info.is_dir():
                    created.append(folder.add_blob(parts[-1], archive.read(info)))
                notify_progress(on_progress, index + 1, len(infos))
                await asyncio.sleep(0)
        return created


def folder_ancestors(folder: Entry | None) -> list[Entry]:
    """Return the root-first chain ending at ``folder``."""
    chain: list[Entry] = []
    while folder is not None:
        chain.append(folder)
        folder = folder.parent
    chain.reverse()
    return chain
