from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from studydeck.config import settings
from studydeck.models.flashcard import Difficulty
from studydeck.models.session import StudySession


class DifficultyFilter(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    MIXED = "mixed"


class QuizConfiguration(BaseModel):
    question_count: int = Field(default_factory=lambda: settings.default_question_count, gt=0)
    difficulty_filter: DifficultyFilter = DifficultyFilter.MIXED
    time_limit_seconds: int = Field(
        default_factory=lambda: settings.default_time_limit_seconds, gt=0
    )
    show_hints: bool = True  # display-only


class QuizStatus(str, Enum):
    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"
    NO_QUESTIONS_AVAILABLE = "no_questions_available"
    ABANDONED = "abandoned"


class QuizQuestion(BaseModel):
    flashcard_id: str
    question: str
    difficulty: Difficulty
    options: list[str]


class QuizAnswerReview(BaseModel):
    flashcard_id: str
    question: str
    selected_option: str | None
    correct_answer: str
    is_correct: bool


class QuizState(BaseModel):
    session_id: str
    status: QuizStatus
    question_index: int
    total_questions: int
    current_question: QuizQuestion | None
    selected_option: str | None
    answered: int
    remaining_seconds: int
    deadline: datetime | None
    show_hints: bool
    record: StudySession | None = None
    review: list[QuizAnswerReview] = []


class OptionSelect(BaseModel):
    option: str
