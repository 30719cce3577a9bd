from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional, Protocol

logger = logging.getLogger(__name__)


class BestScoreStore(Protocol):
    """Single global personal-best record (WPM)."""

    def get(self) -> int:
        ...

    def set(self, value: int) -> None:
        ...


def coerce_score(raw: Any) -> int:
    """Turn a stored value into a usable score; anything corrupt reads as 0."""
    if isinstance(raw, bool):
        return 0
    try:
        value = int(float(raw))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, value)


class MemoryBestScoreStore:
    """In-process store, for hosts without persistence and for tests."""

    def __init__(self, value: int = 0) -> None:
        self._value = coerce_score(value)

    def get(self) -> int:
        return self._value

    def set(self, value: int) -> None:
        self._value = coerce_score(value)

    def reset(self) -> None:
        self._value = 0


class JsonBestScoreStore:
    """Stores the best WPM under one key in a small JSON file.

    Reads and writes are best-effort: an unreadable or corrupt file reads as
    "no best score yet" and a failed write is logged, never raised.
    """

    def __init__(self, file_path: Path, key: str = "best_wpm") -> None:
        self._file_path = Path(file_path)
        self._key = key

    @property
    def file_path(self) -> Path:
        return self._file_path

    def get(self) -> int:
        payload = self._load()
        if payload is None:
            return 0
        return coerce_score(payload.get(self._key, 0))

    def set(self, value: int) -> None:
        payload = self._load() or {}
        payload[self._key] = coerce_score(value)
        self._save(payload)

    def reset(self) -> None:
        """Forget the recorded best. The only way the record goes down."""
        payload = self._load() or {}
        payload[self._key] = 0
        self._save(payload)

    def _load(self) -> Optional[dict]:
        if not self._file_path.exists():
            return None
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.warning("Could not load best score from %s: %s", self._file_path, e)
            return None
        if not isinstance(payload, dict):
            logger.warning("Ignoring malformed best score file %s", self._file_path)
            return None
        return payload

    def _save(self, payload: dict) -> None:
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save best score to %s: %s", self._file_path, e)
