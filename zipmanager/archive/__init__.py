"""Archive filesystem collaborator used by the session controller.

Holds the entry tree and converts folders/files to and from zip blobs.
"""

from .entries import (
    DEFAULT_MIME_TYPE,
    ZIP_MIME_TYPE,
    Blob,
    DirectoryEntry,
    Entry,
    FileEntry,
    folder_ancestors,
    validate_entry_name,
)
from .errors import CANCELLED_DOWNLOAD_MESSAGE, ArchiveError, DownloadCancelled, is_cancellation
from .fs import ArchiveFS
from .signal import CancelToken, ProgressCallback

__all__ = [
    "ArchiveFS",
    "ArchiveError",
    "Blob",
    "CANCELLED_DOWNLOAD_MESSAGE",
    "CancelToken",
    "DEFAULT_MIME_TYPE",
    "DirectoryEntry",
    "DownloadCancelled",
    "Entry",
    "FileEntry",
    "ProgressCallback",
    "ZIP_MIME_TYPE",
    "folder_ancestors",
    "is_cancellation",
    "validate_entry_name",
]
