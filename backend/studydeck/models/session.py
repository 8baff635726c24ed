from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SessionMode(str, Enum):
    STUDY = "study"
    QUIZ = "quiz"


class StudySession(BaseModel):
    """One completed study or quiz pass. Never modified after creation."""

    model_config = ConfigDict(frozen=True)

    id: str
    mode: SessionMode
    flashcard_ids: list[str] = Field(min_length=1)
    score: int = Field(ge=0, le=100)
    duration: int = Field(ge=0)  # milliseconds
    completed_at: datetime

    @field_validator("flashcard_ids")
    @classmethod
    def _unique_ids(cls, value: list[str]) -> list[str]:
        if len(set(value)) != len(value):
            raise ValueError("flashcard_ids must not contain duplicates")
        return value


class StudySessionList(BaseModel):
    items: list[StudySession]
    total: int


class AverageScore(BaseModel):
    average_score: int
    sample_size: int


def percent_score(correct: int, total: int) -> int:
    """Integer percentage, halves rounded up."""
    if total <= 0:
        raise ValueError("score needs at least one graded card")
    return (200 * correct + total) // (2 * total)
