"""Environment collaborators: user prompts, alerts, file pickers, saving."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ..archive import Blob

CREATE_FOLDER_MESSAGE = "Please enter the folder name"
RENAME_MESSAGE = "Please enter the entry name"
DOWNLOAD_NAME_MESSAGE = "Please enter the file name"
DELETE_MESSAGE = "Please confirm the deletion"
RESET_MESSAGE = "Please confirm the reset"


def _no_files() -> list[tuple[str, bytes]]:
    return []


def _no_zip_file() -> bytes | None:
    return None


@dataclass(frozen=True)
class SessionEnvironment:
    """Bound host operations required by the session controller.

    ``prompt`` returns ``None`` (or an empty string) when the user cancels;
    ``confirm`` returns ``False`` when the user declines.
    """

    prompt: Callable[[str, str | None], str | None]
    confirm: Callable[[str], bool]
    alert: Callable[[str], None]
    save_blob: Callable[[Blob, str], None]
    choose_files: Callable[[], list[tuple[str, bytes]]] = _no_files
    choose_zip_file: Callable[[], bytes | None] = _no_zip_file
