"""Concurrent, cancellable, progress-tracked export tasks."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace

from ..archive import Blob, CancelToken, ProgressCallback, is_cancellation
from ..logger import get_logger
from .environment import DOWNLOAD_NAME_MESSAGE, SessionEnvironment

logger = get_logger(__name__)

BlobProducer = Callable[[CancelToken, ProgressCallback], Awaitable[Blob]]


@dataclass(frozen=True)
class Download:
    """One active export as shown in the downloads list."""

    id: int
    name: str
    cancel: CancelToken
    progress_value: int | None = None
    progress_max: int | None = None


class DownloadQueue:
    """Newest-first list of running downloads, mutated only on the event loop.

    Each download is removed exactly once: by ``abort`` or when its task
    settles, whichever comes first.
    """

    def __init__(self, env: SessionEnvironment, prompt_name: bool = True) -> None:
        self.env = env
        self.prompt_name = prompt_name
        self._downloads: list[Download] = []
        self._last_id = 0
        self._tasks: dict[int, asyncio.Task[None]] = {}

    @property
    def active(self) -> tuple[Download, ...]:
        return tuple(self._downloads)

    def get(self, download_id: int) -> Download | None:
        for download in self._downloads:
            if download.id == download_id:
                return download
        return None

    def start(self, suggested_name: str, produce_blob: BlobProducer) -> Download | None:
        """Register a download and schedule ``produce_blob`` on the running loop.

        Returns ``None`` without side effects when the user clears the name.
        Raises ``RuntimeError`` before prompting or registering anything when
        no event loop is running.
        """
        loop = asyncio.get_running_loop()
        name = self.env.prompt(DOWNLOAD_NAME_MESSAGE, suggested_name) if self.prompt_name else suggested_name
        if not name:
            return None
        self._last_id += 1
        download = Download(id=self._last_id, name=name, cancel=CancelToken())
        self._downloads.insert(0, download)
        logger.info("download %d started: %s", download.id, name)

        def on_progress(value: int | None, maximum: int | None) -> None:
            self.report_progress(download.id, value, maximum)

        task = loop.create_task(self._run(download, produce_blob, on_progress))
        self._tasks[download.id] = task
        task.add_done_callback(lambda _task: self._tasks.pop(download.id, None))
        return download

    async def _run(self, download: Download, produce_blob: BlobProducer, on_progress: ProgressCallback) -> None:
        try:
            blob = await produce_blob(download.cancel, on_progress)
            download.cancel.raise_if_cancelled()
            self.env.save_blob(blob, download.name)
            logger.info("download %d saved: %s (%d bytes)", download.id, download.name, blob.size)
        except Exception as exc:
            if is_cancellation(exc):
                logger.debug("download %d cancelled", download.id)
            else:
                message = str(exc) or type(exc).__name__
                logger.warning("download %d failed: %s", download.id, message)
                self.env.alert(message)
        finally:
            self._remove(download.id)

    def abort(self, download: Download) -> bool:
        """Signal cancellation and drop ``download`` from the list right away."""
        download.cancel.cancel()
        removed = self._remove(download.id)
        if removed:
            logger.info("download %d aborted: %s", download.id, download.name)
        return removed

    def abort_all(self) -> None:
        for download in list(self._downloads):
            self.abort(download)

    def _remove(self, download_id: int) -> bool:
        remaining = [download for download in self._downloads if download.id != download_id]
        removed = len(remaining) != len(self._downloads)
        self._downloads = remaining
        return removed

    def report_progress(self, download_id: int, value: int | None, maximum: int | None) -> None:
        """Replace progress fields of the matching download; order is unchanged."""
        self._downloads = [
            replace(download, progress_value=value, progress_max=maximum) if download.id == download_id else download
            for download in self._downloads
        ]

    async def wait_all(self) -> None:
        """Wait until every scheduled download task has settled."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks.values()), return_exceptions=True)
