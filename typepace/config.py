"""Application settings with the defaults of the typing test."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class Settings:
    default_mode: str = "timed"
    default_difficulty: str = "hard"
    default_duration_sec: int = 60
    # Hosts should call TypingSession.tick() at this interval while timed.
    tick_interval_ms: int = 200
    pb_floor_wpm: int = 10
    pb_badge_seconds: float = 2.6
    accuracy_warning_below: int = 98
    data_dir: Path = field(default_factory=lambda: Path.home() / ".typepace")
    best_score_file: str = "best.json"
    best_score_key: str = "best_wpm"

    @property
    def best_score_path(self) -> Path:
        return self.data_dir / self.best_score_file


settings = Settings()
