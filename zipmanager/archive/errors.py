"""Failure types raised by the archive filesystem."""

from __future__ import annotations

CANCELLED_DOWNLOAD_MESSAGE = "download cancelled"


class ArchiveError(Exception):
    """Structural or naming failure reported by an archive operation."""


class DownloadCancelled(ArchiveError):
    """Raised by blob producers once their cancel token has been set."""

    def __init__(self, message: str = CANCELLED_DOWNLOAD_MESSAGE) -> None:
        super().__init__(message)


def is_cancellation(error: BaseException) -> bool:
    """Return whether ``error`` is the user-initiated abort sentinel."""
    if isinstance(error, DownloadCancelled):
        return True
    return str(error) == CANCELLED_DOWNLOAD_MESSAGE


__all__ = [
    "CANCELLED_DOWNLOAD_MESSAGE",
    "ArchiveError",
    "DownloadCancelled",
    "is_cancellation",
]
