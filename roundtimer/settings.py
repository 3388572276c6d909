"""User settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/RoundTimer/settings.json

Only preferences live here; the state of a running round is never saved.

Usage::

    store = SettingsStore()
    round_time = store.get(ROUND_TIME_KEY, DEFAULT_ROUND_TIME)
    store.set(ROUND_TIME_KEY, 90_000)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "RoundTimer"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"

# ── keys ──────────────────────────────────────────────────────────────────

ROUND_TIME_KEY = "round_time"        # milliseconds
SOUND_ENABLED_KEY = "sound_enabled"
SOUND_VOLUME_KEY = "sound_volume"    # 0-100


class SettingsStore:
    """Flat key/value store backed by one JSON file.

    Every :meth:`set` rewrites the file.  A missing or unreadable file
    behaves like an empty store.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or SETTINGS_PATH
        self._data: dict[str, Any] = self._load()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._save()

    # ── internal ──────────────────────────────────────────────────────

    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("ignoring unreadable settings file %s: %s", self._path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("ignoring settings file %s: not a JSON object", self._path)
            return {}
        return data

    def _save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            json.dumps(self._data, indent=2) + "\n",
            encoding="utf-8",
        )
