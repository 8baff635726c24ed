from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from studydeck.models.flashcard import Difficulty
from studydeck.models.session import StudySession


class StudyStatus(str, Enum):
    IDLE = "idle"
    AWAITING_ANSWER = "awaiting_answer"
    AWAITING_GRADE = "awaiting_grade"
    COMPLETE = "complete"
    NO_CARDS_AVAILABLE = "no_cards_available"
    ABANDONED = "abandoned"


class StudyCard(BaseModel):
    """The card being studied. `answer` stays None until it is revealed."""

    id: str
    question: str
    difficulty: Difficulty
    note_id: str | None = None
    answer: str | None = None


class StudyState(BaseModel):
    session_id: str
    status: StudyStatus
    card_index: int
    total_cards: int
    current_card: StudyCard | None
    answer_revealed: bool
    correct: int
    incorrect: int
    record: StudySession | None = None


class GradeRequest(BaseModel):
    correct: bool


class StudySessionCreate(BaseModel):
    # Explicit card ids to study; None resolves the due set (or catch-up batch).
    flashcard_ids: list[str] | None = None
