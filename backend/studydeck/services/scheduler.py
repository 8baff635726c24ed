"""
Review scheduling for study sessions.

A failed review always comes back tomorrow. A passed review is pushed out
by a multiple of the card's lifetime correct answers, scaled by difficulty:

    easy    max(1, correct * 2)   days
    medium  max(1, correct * 1.5) days
    hard    max(1, correct)       days

Intervals are added to the review time as-is; they are not snapped to
day boundaries.
"""
from __future__ import annotations

from datetime import datetime, timedelta

from studydeck.models.flashcard import Difficulty, Flashcard, ReviewUpdate

FAILED_INTERVAL_DAYS = 1.0

_DIFFICULTY_MULTIPLIER = {
    Difficulty.EASY: 2.0,
    Difficulty.MEDIUM: 1.5,
    Difficulty.HARD: 1.0,
}


def interval_days(difficulty: Difficulty, correct_count: int, was_correct: bool) -> float:
    if not was_correct:
        return FAILED_INTERVAL_DAYS
    return max(1.0, correct_count * _DIFFICULTY_MULTIPLIER[difficulty])


def schedule(card: Flashcard, was_correct: bool, now: datetime) -> ReviewUpdate:
    """Compute the card's scheduling fields after one study review."""
    new_correct = card.correct_count + (1 if was_correct else 0)
    days = interval_days(card.difficulty, new_correct, was_correct)
    return ReviewUpdate(
        review_count=card.review_count + 1,
        correct_count=new_correct,
        next_review=now + timedelta(days=days),
        interval_days=days,
    )
