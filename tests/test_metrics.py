"""Tests for typepace.core.metrics – WPM and accuracy calculation."""

from __future__ import annotations

import pytest

from typepace.core.metrics import (
    Metrics,
    compute_metrics,
    count_correct,
    elapsed_ms,
    round_half_up,
)


# ---------------------------------------------------------------------------
# compute_metrics – empty input
# ---------------------------------------------------------------------------

class TestEmptyTyped:
    def test_no_keystrokes(self):
        assert compute_metrics("cat", [], 5000) == Metrics(wpm=0, accuracy=100)

    def test_no_keystrokes_ignores_elapsed(self):
        assert compute_metrics("cat", "", 1, finished=True) == Metrics(wpm=0, accuracy=100)

    def test_defaults(self):
        m = Metrics()
        assert m.wpm == 0
        assert m.accuracy == 100


# ---------------------------------------------------------------------------
# compute_metrics – accuracy
# ---------------------------------------------------------------------------

class TestAccuracy:
    def test_all_correct(self):
        assert compute_metrics("cat", list("cat"), 1000).accuracy == 100

    def test_prefix_all_correct(self):
        assert compute_metrics("hello world", list("hello"), 1000).accuracy == 100

    def test_one_mistake_in_three(self):
        # round(2/3 * 100) = 67
        assert compute_metrics("cat", list("cxt"), 1000).accuracy == 67

    def test_all_wrong(self):
        assert compute_metrics("cat", list("xyz"), 1000).accuracy == 0

    def test_rounds_half_up(self):
        # 1/8 = 12.5% -> 13, not banker's 12
        assert compute_metrics("abcdefgh", list("axxxxxxx"), 1000).accuracy == 13

    def test_space_counts_as_character(self):
        assert compute_metrics("a b", list("a b"), 1000).accuracy == 100


# ---------------------------------------------------------------------------
# compute_metrics – WPM
# ---------------------------------------------------------------------------

class TestWpm:
    def test_one_word_in_six_seconds(self):
        # 5 correct chars = 1 word in 0.1 min -> 10 WPM
        assert compute_metrics("abcde", list("abcde"), 6000).wpm == 10

    def test_two_words_in_one_minute(self):
        assert compute_metrics("abcdefghij", list("abcdefghij"), 60_000).wpm == 2

    def test_mistakes_do_not_count_toward_words(self):
        correct = compute_metrics("abcdefghij", list("abcdefghij"), 6000).wpm
        sloppy = compute_metrics("abcdefghij", list("abcdexxxxx"), 6000).wpm
        assert correct == 20
        assert sloppy == 10

    def test_all_wrong_is_zero(self):
        assert compute_metrics("abc", list("xyz"), 6000).wpm == 0

    def test_wpm_rounds_half_up(self):
        # 1 word in 0.4 min = 2.5 WPM -> 3
        assert compute_metrics("abcde", list("abcde"), 24_000).wpm == 3

    def test_zero_elapsed_clamped_to_one_ms(self):
        # 1 word per 1 ms = 60000 WPM, finite
        assert compute_metrics("abcde", list("abcde"), 0).wpm == 60_000

    def test_negative_elapsed_clamped_to_one_ms(self):
        assert compute_metrics("abcde", list("abcde"), -500).wpm == 60_000

    def test_finished_flag_does_not_change_result(self):
        a = compute_metrics("abcde", list("abc"), 3000, finished=False)
        b = compute_metrics("abcde", list("abc"), 3000, finished=True)
        assert a == b

    def test_pure(self):
        args = ("hello", list("hexlo"), 4321, False)
        assert compute_metrics(*args) == compute_metrics(*args)


class TestTypedBeyondPassage:
    def test_raises(self):
        with pytest.raises(ValueError):
            compute_metrics("ab", list("abc"), 1000)


# ---------------------------------------------------------------------------
# count_correct
# ---------------------------------------------------------------------------

class TestCountCorrect:
    def test_partial(self):
        assert count_correct("cat", "cxt") == 2

    def test_non_decreasing_while_typing_correctly(self):
        passage = "the quick brown fox"
        counts = [count_correct(passage, passage[:i]) for i in range(len(passage) + 1)]
        assert counts == sorted(counts)
        assert counts[-1] == len(passage)

    def test_correct_append_never_lowers_accuracy(self):
        passage = "typing test"
        typed = list("tx")
        before = compute_metrics(passage, typed, 1000).accuracy
        typed.append(passage[len(typed)])
        after = compute_metrics(passage, typed, 1000).accuracy
        assert after >= before


# ---------------------------------------------------------------------------
# elapsed_ms
# ---------------------------------------------------------------------------

class TestElapsedMs:
    def test_not_started(self):
        assert elapsed_ms(None, None, 123.0, finished=False) == 1.0

    def test_running_uses_now(self):
        assert elapsed_ms(10.0, None, 12.5, finished=False) == pytest.approx(2500.0)

    def test_finished_uses_end(self):
        assert elapsed_ms(10.0, 11.0, 99.0, finished=True) == pytest.approx(1000.0)

    def test_backwards_clock_clamped(self):
        assert elapsed_ms(10.0, None, 9.0, finished=False) == 1.0

    def test_same_instant_clamped(self):
        assert elapsed_ms(10.0, None, 10.0, finished=False) == 1.0


class TestRoundHalfUp:
    @pytest.mark.parametrize(
        "value, expected",
        [(0.5, 1), (1.5, 2), (2.5, 3), (2.49, 2), (66.666, 67), (0.0, 0)],
    )
    def test_values(self, value, expected):
        assert round_half_up(value) == expected
