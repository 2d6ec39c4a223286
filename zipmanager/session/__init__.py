"""Session state components and the controller that owns them."""

from .clipboard import ClipboardController, ClipboardData
from .controller import ROOT_ZIP_FILENAME, SessionController
from .downloads import Download, DownloadQueue
from .environment import SessionEnvironment
from .history import HistoryNavigator
from .selection import ParentEntry, SelectionNavigator, list_folder_entries

__all__ = [
    "ClipboardController",
    "ClipboardData",
    "Download",
    "DownloadQueue",
    "HistoryNavigator",
    "ParentEntry",
    "ROOT_ZIP_FILENAME",
    "SelectionNavigator",
    "SessionController",
    "SessionEnvironment",
    "list_folder_entries",
]
