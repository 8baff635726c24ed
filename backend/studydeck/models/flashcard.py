from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Flashcard(BaseModel):
    id: str
    question: str
    answer: str
    difficulty: Difficulty
    note_id: str | None = None  # weak reference; the note may no longer exist
    next_review: datetime
    review_count: int = Field(default=0, ge=0)
    correct_count: int = Field(default=0, ge=0)
    created_at: datetime

    @model_validator(mode="after")
    def _check_counts(self) -> Flashcard:
        if self.correct_count > self.review_count:
            raise ValueError("correct_count cannot exceed review_count")
        return self


class FlashcardCreate(BaseModel):
    question: str = Field(min_length=1)
    answer: str = Field(min_length=1)
    difficulty: Difficulty = Difficulty.MEDIUM
    note_id: str | None = None


class FlashcardUpdate(BaseModel):
    question: str | None = Field(default=None, min_length=1)
    answer: str | None = Field(default=None, min_length=1)


class FlashcardList(BaseModel):
    items: list[Flashcard]
    total: int


class ReviewUpdate(BaseModel):
    """Scheduling fields produced by one study review."""

    review_count: int
    correct_count: int
    next_review: datetime
    interval_days: float
