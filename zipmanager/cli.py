"""Command-line front door for zipmanager.

Loads a zip archive into a session, prints the root listing in session
order, and optionally exports it again through the download queue.
Settings options (page size, download-name prompt, key bindings) are
saved to the config file before the session starts.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from .archive import Blob, FileEntry
from .config import (
    load_key_bindings,
    load_session_config,
    save_key_bindings,
    save_page_size,
    save_prompt_download_name,
)
from .input import Action
from .logger import DEFAULT_LEVEL, setup_logging
from .session import ParentEntry, SessionController, SessionEnvironment


def terminal_environment(output: Path | None = None) -> SessionEnvironment:
    """Non-interactive environment: prompts accept defaults, confirms succeed."""

    def save_blob(blob: Blob, name: str) -> None:
        target = output if output is not None else Path.cwd() / name
        target.write_bytes(blob.data)

    def alert(message: str) -> None:
        print(message, file=sys.stderr)

    return SessionEnvironment(
        prompt=lambda _message, default: default,
        confirm=lambda _message: True,
        alert=alert,
        save_blob=save_blob,
    )


def format_listing(controller: SessionController) -> str:
    """Render the selected folder's entries one per line, directories with a slash."""
    lines: list[str] = []
    for entry in controller.entries:
        if isinstance(entry, ParentEntry):
            lines.append(entry.name)
        elif isinstance(entry, FileEntry):
            lines.append(f"{entry.name}\t{len(entry.data)}")
        else:
            lines.append(entry.name + "/")
    return "\n".join(lines)


async def run_session(archive_path: Path, show_listing: bool, export_path: Path | None) -> int:
    controller = SessionController(terminal_environment(export_path), load_session_config())
    await controller.open_archive(archive_path.read_bytes())
    if show_listing:
        listing = format_listing(controller)
        if listing:
            sys.stdout.write(listing + "\n")
    if export_path is not None:
        controller.export_zip_file()
        await controller.wait_idle()
    return 0


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from exc
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1: {number}")
    return number


def _key_binding(value: str) -> tuple[str, tuple[str, ...]]:
    """Parse ``ACTION=COMBO[,COMBO...]`` into an override entry."""
    action_name, _sep, raw_combos = value.partition("=")
    action_name = action_name.strip().lower()
    try:
        Action(action_name)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"unknown action: {action_name!r}") from exc
    combos = tuple(combo.strip() for combo in raw_combos.split(",") if combo.strip())
    if not combos:
        raise argparse.ArgumentTypeError(f"no key combo given for {action_name!r}")
    return action_name, combos


def save_settings(args: argparse.Namespace) -> bool:
    """Persist settings options to the config file; return whether any was given."""
    saved = False
    if args.page_size is not None:
        save_page_size(args.page_size)
        saved = True
    if args.prompt_download_name is not None:
        save_prompt_download_name(args.prompt_download_name == "on")
        saved = True
    if args.bind:
        bindings = load_key_bindings()
        bindings.update(dict(args.bind))
        save_key_bindings(bindings)
        saved = True
    return saved


def main() -> None:
    """Parse CLI arguments, persist any settings, and run one non-interactive session."""
    parser = argparse.ArgumentParser(description="Browse and re-export zip archives.")
    parser.add_argument("archive", nargs="?", default=None, help="Path to a zip file.")
    parser.add_argument("--list", action="store_true", help="Print the root listing (default without --export).")
    parser.add_argument("--export", metavar="OUT", default=None, help="Write the archive back out to OUT.")
    parser.add_argument("--log-level", default=None, help="Logging level (default: ZIPMANAGER_LOG_LEVEL or WARNING).")
    settings = parser.add_argument_group("saved settings")
    settings.add_argument("--page-size", type=_positive_int, default=None, help="Save the page-key step size.")
    settings.add_argument(
        "--prompt-download-name",
        choices=("on", "off"),
        default=None,
        help="Save whether downloads ask for a file name.",
    )
    settings.add_argument(
        "--bind",
        metavar="ACTION=COMBO[,COMBO]",
        type=_key_binding,
        action="append",
        default=[],
        help="Save a key-binding override, e.g. paste=CTRL+b. Repeatable.",
    )
    args = parser.parse_args()

    setup_logging(args.log_level.upper() if args.log_level else DEFAULT_LEVEL, force=bool(args.log_level))
    saved = save_settings(args)
    if args.archive is None:
        if saved:
            raise SystemExit(0)
        parser.error("an archive path is required unless settings are given")

    archive_path = Path(args.archive)
    if not archive_path.is_file():
        raise SystemExit(f"Path not found: {archive_path}")

    export_path = Path(args.export) if args.export else None
    show_listing = args.list or export_path is None
    raise SystemExit(asyncio.run(run_session(archive_path, show_listing, export_path)))


if __name__ == "__main__":
    main()
