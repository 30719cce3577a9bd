from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from typepace.config import Settings, settings as default_settings
from typepace.core.best_score import BestScoreStore, coerce_score
from typepace.core.clock import Clock, MonotonicClock
from typepace.core.keys import RESTART, Edit, EditKind, KeyEvent, classify_key
from typepace.core.metrics import Metrics, compute_metrics, elapsed_ms
from typepace.core.passages import Difficulty, PassageRepository

logger = logging.getLogger(__name__)


class SessionMode(str, Enum):
    TIMED = "timed"
    PASSAGE = "passage"


class SessionPhase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    FINISHED = "finished"


class FinishReason(str, Enum):
    DONE = "done"
    TIME = "time"


@dataclass
class Countdown:
    """Deadline handle for one timed session. Dead once cancelled."""

    deadline: float
    cancelled: bool = False

    def remaining(self, now: float) -> int:
        """Whole seconds left, rounded up, never below zero."""
        return max(0, math.ceil(self.deadline - now))

    def cancel(self) -> None:
        self.cancelled = True


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of a session for the rendering layer."""

    phase: SessionPhase
    mode: SessionMode
    difficulty: Difficulty
    passage: str
    typed: Tuple[str, ...]
    metrics: Metrics
    remaining_sec: Optional[int]
    best_score: int
    just_hit_new_pb: bool
    finish_reason: Optional[FinishReason]
    accuracy_warning: bool

    @property
    def current_index(self) -> int:
        return len(self.typed)

    @property
    def finished(self) -> bool:
        return self.phase == SessionPhase.FINISHED


def format_clock(seconds: float) -> str:
    """Format a second count as ``m:ss``."""
    s = max(0, int(math.floor(seconds)))
    return f"{s // 60}:{s % 60:02d}"


class TypingSession:
    """Typing test state machine: idle until the first keystroke, then running
    until the passage is typed (passage mode) or the countdown expires (timed
    mode).

    The session owns no timer. In timed mode the host calls :meth:`tick` every
    ``settings.tick_interval_ms`` while the session is running. Finishing or
    restarting cancels the session's :class:`Countdown`, after which ticks are
    ignored.
    """

    def __init__(
        self,
        passages: PassageRepository,
        best_store: BestScoreStore,
        clock: Optional[Clock] = None,
        settings: Optional[Settings] = None,
        on_personal_best: Optional[Callable[[int], None]] = None,
    ) -> None:
        self._passages = passages
        self._best_store = best_store
        self._clock = clock or MonotonicClock()
        self._settings = settings or default_settings
        self._on_personal_best = on_personal_best

        self._mode = SessionMode(self._settings.default_mode)
        self._difficulty = Difficulty(self._settings.default_difficulty)
        self._duration_sec = int(self._settings.default_duration_sec)

        self._passage: Optional[str] = None
        self._typed: List[str] = []
        self._phase = SessionPhase.IDLE
        self._start_ts: Optional[float] = None
        self._end_ts: Optional[float] = None
        self._finish_reason: Optional[FinishReason] = None
        self._countdown: Optional[Countdown] = None
        self._remaining_sec: Optional[int] = None
        self._best = self._read_best()
        self._best_at_start = self._best
        self._pb_celebrated = False
        self._pb_celebrated_at: Optional[float] = None

    # -- properties ---------------------------------------------------------

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def mode(self) -> SessionMode:
        return self._mode

    @property
    def difficulty(self) -> Difficulty:
        return self._difficulty

    @property
    def duration_sec(self) -> int:
        return self._duration_sec

    @property
    def passage(self) -> str:
        return self._passage or ""

    @property
    def typed(self) -> str:
        return "".join(self._typed)

    @property
    def current_index(self) -> int:
        """Position of the next character to type; always ``len(typed)``."""
        return len(self._typed)

    @property
    def countdown(self) -> Optional[Countdown]:
        """The live countdown handle, or None outside a running timed session."""
        return self._countdown

    @property
    def best_at_start(self) -> int:
        return self._best_at_start

    @property
    def finish_reason(self) -> Optional[FinishReason]:
        return self._finish_reason

    # -- lifecycle ----------------------------------------------------------

    def start_session(
        self,
        mode: SessionMode,
        difficulty: Difficulty,
        duration_sec: Optional[int] = None,
    ) -> None:
        """Reset to idle with a fresh passage for ``difficulty``."""
        if duration_sec is None:
            duration_sec = self._settings.default_duration_sec
        if not isinstance(duration_sec, int) or isinstance(duration_sec, bool) or duration_sec <= 0:
            raise ValueError(f"duration_sec must be a positive integer, got {duration_sec!r}")
        mode = SessionMode(mode)
        difficulty = Difficulty(difficulty)

        passage = self._passages.choose(difficulty)
        if not passage:
            raise ValueError(f"passage source returned an empty {difficulty.value} passage")

        self._cancel_countdown()
        self._mode = mode
        self._difficulty = difficulty
        self._duration_sec = int(duration_sec)
        self._passage = passage
        self._typed = []
        self._phase = SessionPhase.IDLE
        self._start_ts = None
        self._end_ts = None
        self._finish_reason = None
        self._remaining_sec = self._duration_sec if mode == SessionMode.TIMED else None
        self._best = self._read_best()
        self._best_at_start = self._best
        self._pb_celebrated = False
        self._pb_celebrated_at = None
        logger.info(
            "New %s session (%s, %ds), best so far %d WPM",
            mode.value, difficulty.value, self._duration_sec, self._best,
        )

    def restart(self) -> None:
        """Start over with the current mode, difficulty and duration. Valid from any phase."""
        self.start_session(self._mode, self._difficulty, self._duration_sec)

    # -- input ----------------------------------------------------------------

    def handle_key(self, event: KeyEvent) -> bool:
        """Route a raw key event. Returns True if the session changed."""
        action = classify_key(event)
        if action is None:
            logger.debug("Ignoring key %r", event)
            return False
        if action is RESTART:
            self.restart()
            return True
        return self.submit_edit(action)

    def submit_edit(self, edit: Edit) -> bool:
        """Apply one edit. Returns True if the typed log changed."""
        if self._passage is None:
            logger.debug("Edit before any session was started; ignored")
            return False
        if self._phase == SessionPhase.FINISHED:
            return False

        if edit.kind == EditKind.BACKSPACE:
            if not self._typed:
                return False
        elif len(self._typed) >= len(self._passage):
            return False

        now = self._clock.now()
        if self._phase == SessionPhase.IDLE:
            self._begin(now)

        char = edit.appended_char()
        if char is None:
            self._typed.pop()
        else:
            self._typed.append(char)

        self._refresh(now)
        if self._mode == SessionMode.PASSAGE and len(self._typed) >= len(self._passage):
            self._finish(FinishReason.DONE, now)
        return True

    def tick(self, now: Optional[float] = None, countdown: Optional[Countdown] = None) -> bool:
        """Advance the timed-mode countdown.

        Hosts that keep a timer per session may pass the handle they armed it
        with; ticks carrying a handle other than the live one are dropped.
        """
        live = self._countdown
        if live is None or live.cancelled:
            return False
        if countdown is not None and countdown is not live:
            logger.debug("Dropping tick from a superseded countdown")
            return False
        if self._phase != SessionPhase.RUNNING or self._mode != SessionMode.TIMED:
            return False

        if now is None:
            now = self._clock.now()
        self._remaining_sec = live.remaining(now)
        self._refresh(now)
        if self._remaining_sec <= 0:
            self._finish(FinishReason.TIME, now)
        return True

    # -- views ------------------------------------------------------------------

    def metrics(self) -> Metrics:
        return self._compute(self._clock.now())

    def snapshot(self) -> SessionSnapshot:
        now = self._clock.now()
        metrics = self._compute(now)
        return SessionSnapshot(
            phase=self._phase,
            mode=self._mode,
            difficulty=self._difficulty,
            passage=self.passage,
            typed=tuple(self._typed),
            metrics=metrics,
            remaining_sec=self._remaining_sec if self._mode == SessionMode.TIMED else None,
            best_score=self._best,
            just_hit_new_pb=self._badge_visible(now),
            finish_reason=self._finish_reason,
            accuracy_warning=metrics.accuracy < self._settings.accuracy_warning_below,
        )

    # -- internals ----------------------------------------------------------------

    def _begin(self, now: float) -> None:
        self._start_ts = now
        self._phase = SessionPhase.RUNNING
        if self._mode == SessionMode.TIMED:
            self._countdown = Countdown(deadline=now + self._duration_sec)
            self._remaining_sec = self._duration_sec
        logger.debug("Session running (%s)", self._mode.value)

    def _finish(self, reason: FinishReason, now: float) -> None:
        if self._phase == SessionPhase.FINISHED:
            return
        self._phase = SessionPhase.FINISHED
        self._end_ts = now
        self._finish_reason = reason
        self._cancel_countdown()
        if reason == FinishReason.TIME:
            self._remaining_sec = 0
        metrics = self._refresh(now)
        logger.info(
            "Session finished (%s): %d WPM, %d%% accuracy",
            reason.value, metrics.wpm, metrics.accuracy,
        )

    def _cancel_countdown(self) -> None:
        if self._countdown is not None:
            self._countdown.cancel()
            self._countdown = None

    def _compute(self, now: float) -> Metrics:
        finished = self._phase == SessionPhase.FINISHED
        elapsed = elapsed_ms(self._start_ts, self._end_ts, now, finished)
        return compute_metrics(self.passage, self._typed, elapsed, finished)

    def _refresh(self, now: float) -> Metrics:
        metrics = self._compute(now)
        self._arbitrate_best(metrics.wpm, now)
        return metrics

    def _arbitrate_best(self, wpm: int, now: float) -> None:
        best = self._read_best()
        if wpm > best:
            self._write_best(wpm)
            best = wpm
        self._best = best

        if (
            not self._pb_celebrated
            and wpm > self._best_at_start
            and wpm >= self._settings.pb_floor_wpm
        ):
            self._pb_celebrated = True
            self._pb_celebrated_at = now
            logger.info("New personal best: %d WPM (was %d)", wpm, self._best_at_start)
            if self._on_personal_best is not None:
                self._on_personal_best(wpm)

    def _badge_visible(self, now: float) -> bool:
        if self._pb_celebrated_at is None:
            return False
        return now - self._pb_celebrated_at < self._settings.pb_badge_seconds

    def _read_best(self) -> int:
        try:
            return coerce_score(self._best_store.get())
        except Exception as e:
            logger.warning("Could not read best score, assuming 0: %s", e)
            return 0

    def _write_best(self, value: int) -> None:
        try:
            self._best_store.set(value)
        except Exception as e:
            logger.warning("Could not save best score %d: %s", value, e)
