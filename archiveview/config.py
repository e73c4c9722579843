"""Persistent JSON config helpers.

Stores the last active container fingerprint, the highlight style, and the
directory names expanded after each load.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_cache_dir, user_config_dir

APP_NAME = "archiveview"
CONFIG_FILENAME = "config.json"
CACHE_DB_FILENAME = "archives.sqlite3"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_CACHE_DB_PATH = Path(user_cache_dir(APP_NAME, appauthor=False)) / CACHE_DB_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

LAST_ACTIVE_KEY = "last_active_fingerprint"
DEFAULT_STYLE = "monokai"


def _config_path(path: Path | None = None) -> Path:
    return path if path is not None else CONFIG_PATH


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(_config_path(path).read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object], path: Path | None = None) -> None:
    """Persist config data as pretty-printed JSON.

    Any filesystem/serialization error is ignored to keep runtime behavior
    non-fatal when config cannot be written.
    """
    target = _config_path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


def load_style() -> str:
    """Load persisted Pygments style name, defaulting to ``monokai``."""
    value = load_config().get("style")
    if not isinstance(value, str):
        return DEFAULT_STYLE
    stripped = value.strip()
    return stripped if stripped else DEFAULT_STYLE


def load_auto_expand() -> tuple[str, ...]:
    """Return directory names that start expanded after a load.

    Non-list values and non-string or blank items are dropped.
    """
    value = load_config().get("auto_expand")
    if not isinstance(value, list):
        return ()
    names: list[str] = []
    for item in value:
        if isinstance(item, str) and item.strip():
            names.append(item.strip())
    return tuple(names)


class LastActivePointer:
    """The remembered "last active" container fingerprint.

    One string value in the JSON config, read at startup and written or
    cleared on upload and clear. Passing ``config_path`` gives each caller
    (tests in particular) an isolated pointer.
    """

    def __init__(self, config_path: Path | None = None) -> None:
        self._config_path = config_path

    def read(self) -> str | None:
        value = load_config(self._config_path).get(LAST_ACTIVE_KEY)
        if not isinstance(value, str) or not value:
            return None
        return value

    def write(self, key: str) -> None:
        config = load_config(self._config_path)
        config[LAST_ACTIVE_KEY] = key
        save_config(config, self._config_path)

    def clear(self) -> None:
        config = load_config(self._config_path)
        if LAST_ACTIVE_KEY not in config:
            return
        del config[LAST_ACTIVE_KEY]
        save_config(config, self._config_path)


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "DEFAULT_CACHE_DB_PATH",
    "DEFAULT_STYLE",
    "LastActivePointer",
    "load_config",
    "save_config",
    "load_style",
    "load_auto_expand",
]
