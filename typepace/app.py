"""Composition root: wires the typing session to its default collaborators."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from typepace.config import Settings, settings as default_settings
from typepace.core.best_score import JsonBestScoreStore
from typepace.core.clock import Clock, MonotonicClock
from typepace.core.passages import PassageRepository
from typepace.core.session import TypingSession


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_session(
    settings: Optional[Settings] = None,
    clock: Optional[Clock] = None,
    on_personal_best: Optional[Callable[[int], None]] = None,
) -> TypingSession:
    """Create a session backed by the bundled passages and the on-disk best score,
    already started with the configured default mode and difficulty."""
    settings = settings or default_settings
    store = JsonBestScoreStore(settings.best_score_path, key=settings.best_score_key)
    session = TypingSession(
        passages=PassageRepository(),
        best_store=store,
        clock=clock or MonotonicClock(),
        settings=settings,
        on_personal_best=on_personal_best,
    )
    session.restart()
    logging.getLogger(__name__).info("Best score file: %s", store.file_path)
    return session
