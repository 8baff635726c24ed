from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from studydeck.models.flashcard import Difficulty, Flashcard, FlashcardCreate
from studydeck.services.repository import FlashcardRepository, SessionLog

T0 = datetime(2024, 3, 1, 9, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, start: datetime = T0) -> None:
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


class KeepOrder:
    """Random source that leaves every list as it is."""

    def shuffle(self, x: list) -> None:
        pass


class Reverse:
    def shuffle(self, x: list) -> None:
        x.reverse()


def make_card(
    card_id: str,
    difficulty: Difficulty = Difficulty.MEDIUM,
    next_review: datetime = T0,
    answer: str | None = None,
    note_id: str | None = None,
    review_count: int = 0,
    correct_count: int = 0,
) -> Flashcard:
    return Flashcard(
        id=card_id,
        question=f"Question {card_id}?",
        answer=answer if answer is not None else f"Answer {card_id}",
        difficulty=difficulty,
        note_id=note_id,
        next_review=next_review,
        review_count=review_count,
        correct_count=correct_count,
        created_at=T0 - timedelta(days=30),
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session_log() -> SessionLog:
    return SessionLog()


@pytest.fixture
def repository() -> FlashcardRepository:
    return FlashcardRepository()


def fill(repository: FlashcardRepository, count: int, clock: FakeClock) -> list[Flashcard]:
    return [
        repository.create(
            FlashcardCreate(question=f"Q{i}?", answer=f"A{i}"), clock.now()
        )
        for i in range(count)
    ]
