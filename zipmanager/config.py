"""Persistent JSON config helpers.

Stores the page size used by page keys, whether downloads prompt for a
file name, and key-binding overrides. All access is defensive: malformed
or missing config falls back to defaults.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "zipmanager"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH
DEFAULT_PAGE_SIZE = 10


@dataclass(frozen=True)
class SessionConfig:
    """Validated settings consumed by the session controller and input router."""

    page_size: int = DEFAULT_PAGE_SIZE
    prompt_download_name: bool = True
    key_bindings: dict[str, tuple[str, ...]] = field(default_factory=dict)


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Any filesystem/serialization error is ignored to keep runtime behavior
    non-fatal when config cannot be written.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


def load_page_size() -> int:
    """Return the persisted page size; booleans and non-positive ints are ignored."""
    value = load_config().get("page_size")
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        return DEFAULT_PAGE_SIZE
    return value


def save_page_size(page_size: int) -> None:
    if page_size < 1:
        return
    config = load_config()
    config["page_size"] = int(page_size)
    save_config(config)


def load_prompt_download_name() -> bool:
    value = load_config().get("prompt_download_name")
    return value if isinstance(value, bool) else True


def save_prompt_download_name(enabled: bool) -> None:
    config = load_config()
    config["prompt_download_name"] = bool(enabled)
    save_config(config)


def load_key_bindings() -> dict[str, tuple[str, ...]]:
    """Load key-binding overrides keyed by lower-case action name.

    Each value may be one combo string or a list of them. Blank combos,
    non-string items, and entries left without combos are dropped.
    """
    value = load_config().get("key_bindings")
    if not isinstance(value, dict):
        return {}

    bindings: dict[str, tuple[str, ...]] = {}
    for action_name, raw_combos in value.items():
        if not isinstance(action_name, str) or not action_name.strip():
            continue
        if isinstance(raw_combos, str):
            raw_combos = [raw_combos]
        if not isinstance(raw_combos, list):
            continue
        combos = tuple(combo.strip() for combo in raw_combos if isinstance(combo, str) and combo.strip())
        if combos:
            bindings[action_name.strip().lower()] = combos
    return bindings


def save_key_bindings(bindings: dict[str, tuple[str, ...]]) -> None:
    config = load_config()
    config["key_bindings"] = {name: list(combos) for name, combos in bindings.items() if combos}
    save_config(config)


def load_session_config() -> SessionConfig:
    return SessionConfig(
        page_size=load_page_size(),
        prompt_download_name=load_prompt_download_name(),
        key_bindings=load_key_bindings(),
    )
