"""
Tests for review scheduling.

Covers:
- counter updates
- per-difficulty intervals
- failed reviews always coming back after one day
"""
from datetime import timedelta

import pytest

from studydeck.models.flashcard import Difficulty
from studydeck.services.scheduler import interval_days, schedule

from conftest import T0, make_card


class TestIntervals:
    @pytest.mark.parametrize(
        "difficulty, correct, expected",
        [
            (Difficulty.EASY, 1, 2.0),
            (Difficulty.EASY, 3, 6.0),
            (Difficulty.MEDIUM, 1, 1.5),
            (Difficulty.MEDIUM, 2, 3.0),
            (Difficulty.HARD, 1, 1.0),
            (Difficulty.HARD, 4, 4.0),
        ],
    )
    def test_correct_interval(self, difficulty, correct, expected):
        assert interval_days(difficulty, correct, True) == expected

    def test_interval_never_below_one_day(self):
        assert interval_days(Difficulty.HARD, 0, True) == 1.0

    @pytest.mark.parametrize("difficulty", list(Difficulty))
    def test_incorrect_is_one_day(self, difficulty):
        assert interval_days(difficulty, 10, False) == 1.0


class TestSchedule:
    def test_medium_second_correct_adds_three_days(self):
        card = make_card("m", Difficulty.MEDIUM, review_count=1, correct_count=1)
        update = schedule(card, True, T0)
        assert update.correct_count == 2
        assert update.review_count == 2
        assert update.next_review == T0 + timedelta(days=3)

    def test_same_card_incorrect_adds_one_day(self):
        card = make_card("m", Difficulty.MEDIUM, review_count=1, correct_count=1)
        update = schedule(card, False, T0)
        assert update.correct_count == 1
        assert update.review_count == 2
        assert update.next_review == T0 + timedelta(days=1)

    def test_fractional_days_are_kept(self):
        card = make_card("m", Difficulty.MEDIUM)
        update = schedule(card, True, T0)
        assert update.next_review == T0 + timedelta(hours=36)

    def test_does_not_mutate_card(self):
        card = make_card("e", Difficulty.EASY)
        schedule(card, True, T0)
        assert card.review_count == 0
        assert card.correct_count == 0
        assert card.next_review == T0

    @pytest.mark.parametrize("difficulty", list(Difficulty))
    def test_consecutive_correct_answers(self, difficulty):
        card = make_card("c", difficulty)
        now = T0
        previous_due = None
        for n in range(1, 8):
            update = schedule(card, True, now)
            assert update.review_count == n
            assert update.correct_count == n
            if previous_due is not None:
                assert update.next_review >= previous_due
            previous_due = update.next_review
            card = card.model_copy(
                update={
                    "review_count": update.review_count,
                    "correct_count": update.correct_count,
                    "next_review": update.next_review,
                }
            )

    def test_incorrect_after_long_streak_resets_interval_only(self):
        card = make_card("s", Difficulty.EASY, review_count=9, correct_count=9)
        update = schedule(card, False, T0)
        assert update.next_review - T0 == timedelta(days=1)
        assert update.correct_count == 9
        assert update.review_count == 10
