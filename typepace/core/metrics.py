"""Live speed and accuracy for a typing session.

Only correctly typed characters count toward words (5 characters per word),
so mistakes lower WPM as well as accuracy.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

CHARS_PER_WORD = 5
MS_PER_MINUTE = 60_000


@dataclass(frozen=True)
class Metrics:
    wpm: int = 0
    accuracy: int = 100


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def count_correct(passage: str, typed: Sequence[str]) -> int:
    """Number of typed positions that match the passage."""
    return sum(1 for a, b in zip(typed, passage) if a == b)


def elapsed_ms(
    start_ts: Optional[float],
    end_ts: Optional[float],
    now: float,
    finished: bool,
) -> float:
    """Milliseconds between the first keystroke and ``now`` (or the end, once finished).

    Timestamps are monotonic seconds. Never returns less than 1 ms, so a clock
    that steps backwards cannot produce negative speeds.
    """
    if start_ts is None:
        return 1.0
    until = end_ts if finished and end_ts is not None else now
    return max(1.0, (until - start_ts) * 1000.0)


def compute_metrics(
    passage: str,
    typed: Sequence[str],
    elapsed: float,
    finished: bool = False,
) -> Metrics:
    """Compute WPM and accuracy percentage.

    ``elapsed`` is in milliseconds. ``finished`` does not change the math; the
    caller already picked the end timestamp when building ``elapsed``.
    """
    typed_count = len(typed)
    if typed_count == 0:
        return Metrics(wpm=0, accuracy=100)
    if typed_count > len(passage):
        raise ValueError(
            f"typed log ({typed_count} chars) is longer than the passage ({len(passage)} chars)"
        )

    correct = count_correct(passage, typed)
    minutes = max(elapsed, 1) / MS_PER_MINUTE
    wpm = max(0, round_half_up((correct / CHARS_PER_WORD) / minutes))
    accuracy = round_half_up(correct / typed_count * 100)
    return Metrics(wpm=wpm, accuracy=accuracy)
