"""Cooperative cancellation token shared by blob producers and downloads."""

from __future__ import annotations

from collections.abc import Callable

from .errors import CANCELLED_DOWNLOAD_MESSAGE, DownloadCancelled

ProgressCallback = Callable[[int | None, int | None], None]


class CancelToken:
    """One-shot abort flag observed by long-running archive operations."""

    def __init__(self) -> None:
        self.cancelled = False
        self.reason = ""

    def cancel(self, reason: str = CANCELLED_DOWNLOAD_MESSAGE) -> None:
        if self.cancelled:
            return
        self.cancelled = True
        self.reason = reason

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise DownloadCancelled(self.reason or CANCELLED_DOWNLOAD_MESSAGE)


def check_cancelled(signal: CancelToken | None) -> None:
    """Raise ``DownloadCancelled`` when ``signal`` has been set."""
    if signal is not None:
        signal.raise_if_cancelled()


def notify_progress(on_progress: ProgressCallback | None, value: int | None, maximum: int | None) -> None:
    if on_progress is not None:
        on_progress(value, maximum)
