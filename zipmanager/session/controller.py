"""Session controller: owns the archive tree and every piece of session state.

Folder and entry handlers live here; each catches archive failures at the
operation boundary, reports them through the environment, and then
resynchronizes the listing.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

from ..archive import DEFAULT_MIME_TYPE, ArchiveError, ArchiveFS, Entry, FileEntry, folder_ancestors
from ..config import SessionConfig
from ..input import ActionAvailability, InputRouter, KeyEvent, RouterHandlers
from ..input.keys import Action
from ..logger import get_logger
from .clipboard import ClipboardController
from .downloads import Download, DownloadQueue
from .environment import CREATE_FOLDER_MESSAGE, DELETE_MESSAGE, RENAME_MESSAGE, RESET_MESSAGE, SessionEnvironment
from .history import HistoryNavigator
from .selection import SelectionNavigator

logger = get_logger(__name__)

ZIP_EXTENSION = ".zip"
ROOT_ZIP_FILENAME = "Download" + ZIP_EXTENSION


class SessionController:
    """One archive-browsing session: tree, history, selection, clipboard, downloads."""

    def __init__(self, env: SessionEnvironment, config: SessionConfig | None = None) -> None:
        self.env = env
        self.config = config if config is not None else SessionConfig()
        self.downloads = DownloadQueue(env, prompt_name=self.config.prompt_download_name)
        self.selection = SelectionNavigator(self.go_into_folder, self.download_file)
        self.history = HistoryNavigator()
        self._pending: set[asyncio.Task[None]] = set()
        self._router: InputRouter | None = None
        self._load_filesystem(ArchiveFS())

    def _load_filesystem(self, fs: ArchiveFS) -> None:
        self.fs = fs
        self.clipboard = ClipboardController(fs)
        self.history.reset(fs.root)
        self.selection.highlighted = None
        self.update_selected_folder()

    @property
    def selected_folder(self) -> Entry | None:
        return self.history.current

    @property
    def entries(self) -> list:
        return self.selection.entries

    @property
    def highlighted_entry(self) -> Entry | None:
        return self.selection.highlighted_entry

    def update_selected_folder(self, highlight: Entry | None = None) -> None:
        """Re-list the selected folder after any tree mutation."""
        self.selection.refresh(self.selected_folder, highlight)

    def breadcrumb(self) -> list[Entry]:
        return folder_ancestors(self.selected_folder)

    def availability(self, page_size: int | None = None) -> ActionAvailability:
        """Compute which actions are currently enabled for shortcut gating."""
        no_entry = self.highlighted_entry is None
        no_clipboard = self.clipboard.is_empty
        folder = self.selected_folder
        empty_folder = folder is None or not getattr(folder, "children", None)
        return ActionAvailability(
            disabled_cut=no_entry,
            disabled_copy=no_entry,
            disabled_rename=no_entry,
            disabled_delete=no_entry,
            disabled_paste=no_clipboard,
            disabled_reset_clipboard=no_clipboard,
            disabled_export_zip=empty_folder,
            disabled_reset=empty_folder,
            disabled_history_back=not self.history.can_go_back,
            disabled_history_forward=not self.history.can_go_forward,
            page_size=page_size if page_size is not None else self.config.page_size,
        )

    def _report(self, error: Exception) -> None:
        logger.warning("%s", error)
        self.env.alert(str(error))

    def _spawn(self, loop: asyncio.AbstractEventLoop, coro) -> asyncio.Task[None]:
        task = loop.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def wait_idle(self) -> None:
        """Wait for pending imports and downloads to settle."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
        await self.downloads.wait_all()

    # Folder navigation

    def _set_selected_folder(self, folder: Entry | None, previous: Entry | None) -> None:
        """Show ``folder``, highlighting the folder just left when it is listed."""
        if folder is None:
            return
        self.selection.highlighted = None
        self.update_selected_folder(highlight=previous)
        logger.debug("selected folder: %r", folder.full_name or "/")

    def go_into_folder(self, folder: Entry) -> None:
        previous = self.selected_folder
        self.history.go_into(folder)
        self._set_selected_folder(folder, previous)

    def navigate_back(self) -> None:
        previous = self.selected_folder
        self._set_selected_folder(self.history.back(), previous)

    def navigate_forward(self) -> None:
        previous = self.selected_folder
        self._set_selected_folder(self.history.forward(), previous)

    # Folder-level handlers

    def create_folder(self) -> Entry | None:
        folder_name = self.env.prompt(CREATE_FOLDER_MESSAGE, None)
        if not folder_name:
            return None
        created = None
        try:
            created = self.selected_folder.add_directory(folder_name)
        except ArchiveError as error:
            self._report(error)
        self.update_selected_folder(highlight=created)
        return created

    def add_files(self, files: Iterable[tuple[str, bytes]]) -> list[Entry]:
        added: list[Entry] = []
        for name, data in files:
            try:
                added.append(self.selected_folder.add_blob(name, data))
            except ArchiveError as error:
                self._report(error)
        self.update_selected_folder()
        return added

    def add_chosen_files(self) -> list[Entry]:
        files = self.env.choose_files()
        if not files:
            return []
        return self.add_files(files)

    async def import_zip_file(self, data: bytes) -> None:
        folder = self.selected_folder
        try:
            await folder.import_blob(data)
        except ArchiveError as error:
            self._report(error)
        self.update_selected_folder()

    def import_chosen_zip_file(self) -> asyncio.Task[None] | None:
        """Schedule an import; ``RuntimeError`` before the picker opens when no loop runs."""
        loop = asyncio.get_running_loop()
        data = self.env.choose_zip_file()
        if not data:
            return None
        return self._spawn(loop, self.import_zip_file(data))

    def export_zip_file(self) -> Download | None:
        folder = self.selected_folder
        name = folder.name + ZIP_EXTENSION if folder.name else ROOT_ZIP_FILENAME
        return self.downloads.start(
            name,
            lambda signal, on_progress: folder.export_blob(signal=signal, on_progress=on_progress),
        )

    def download_file(self, entry: Entry) -> Download | None:
        if not isinstance(entry, FileEntry):
            return None
        return self.downloads.start(
            entry.name,
            lambda signal, on_progress: entry.get_blob(DEFAULT_MIME_TYPE, signal=signal, on_progress=on_progress),
        )

    def abort_download(self, download: Download) -> None:
        self.downloads.abort(download)

    def reset(self) -> bool:
        """Replace the whole tree after confirmation; downloads keep running."""
        if not self.env.confirm(RESET_MESSAGE):
            return False
        self._load_filesystem(ArchiveFS())
        logger.info("session reset")
        return True

    # Highlighted-entry handlers

    def copy_entry(self) -> None:
        entry = self.highlighted_entry
        if entry is not None:
            self.clipboard.copy(entry)

    def cut_entry(self) -> None:
        entry = self.highlighted_entry
        if entry is not None:
            self.clipboard.cut(entry)

    def paste_entry(self) -> None:
        if self.clipboard.is_empty:
            return
        try:
            self.clipboard.paste(self.selected_folder)
        except ArchiveError as error:
            self._report(error)
        self.update_selected_folder()

    def reset_clipboard(self) -> None:
        self.clipboard.reset()

    def rename_entry(self) -> None:
        entry = self.highlighted_entry
        if entry is None:
            return
        entry_name = self.env.prompt(RENAME_MESSAGE, entry.name)
        if not entry_name or entry_name == entry.name:
            return
        try:
            entry.rename(entry_name)
        except ArchiveError as error:
            self._report(error)
        self.update_selected_folder()

    def delete_entry(self) -> None:
        entry = self.highlighted_entry
        if entry is None or not self.env.confirm(DELETE_MESSAGE):
            return
        try:
            self.fs.remove(entry)
        except ArchiveError as error:
            self._report(error)
        else:
            self.history.on_entry_removed(entry)
            self.selection.highlighted = None
        self.update_selected_folder()

    # Keyboard

    def create_input_router(self) -> InputRouter:
        selection = self.selection
        handlers = RouterHandlers(
            cut_entry=self.cut_entry,
            copy_entry=self.copy_entry,
            rename_entry=self.rename_entry,
            paste_entry=self.paste_entry,
            delete_entry=self.delete_entry,
            activate_entry=selection.activate,
            toggle_highlight=selection.toggle_highlight,
            create_folder=self.create_folder,
            add_files=self.add_chosen_files,
            import_zip=self.import_chosen_zip_file,
            export_zip=self.export_zip_file,
            navigate_back=self.navigate_back,
            navigate_forward=self.navigate_forward,
            highlight_previous=selection.previous,
            highlight_next=selection.next,
            highlight_previous_page=selection.page_previous,
            highlight_next_page=selection.page_next,
            highlight_first=selection.first,
            highlight_last=selection.last,
        )
        return InputRouter(handlers, self.config.key_bindings)

    def handle_key(self, event: KeyEvent, page_size: int | None = None) -> Action | None:
        """Dispatch ``event`` against the current availability of every action."""
        if self._router is None:
            self._router = self.create_input_router()
        return self._router.dispatch(event, self.availability(page_size))

    async def open_archive(self, data: bytes) -> None:
        """Start a fresh tree and merge the zip ``data`` into its root."""
        self._load_filesystem(ArchiveFS())
        await self.import_zip_file(data)
