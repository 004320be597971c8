from __future__ import annotations

import json
import logging
from pathlib import Path
from threading import Lock
from typing import Any

logger = logging.getLogger(__name__)

INTRO_SEEN_KEY = "intro_seen"
DEFAULT_PREFERENCES_PATH = Path.home() / ".whatsorder" / "preferences.json"


class PreferenceStore:
    """Small per-user JSON key-value file."""

    def __init__(self, path: Path | str = DEFAULT_PREFERENCES_PATH) -> None:
        self.path = Path(path)
        self._lock = Lock()

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("[PREFERENCES] unreadable file path=%s; starting empty", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
        tmp_path.replace(self.path)

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def has_seen_intro(self) -> bool:
        return bool(self.get(INTRO_SEEN_KEY, False))

    def mark_intro_seen(self) -> None:
        self.set(INTRO_SEEN_KEY, True)
