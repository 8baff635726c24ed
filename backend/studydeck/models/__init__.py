from studydeck.models.flashcard import (
    Difficulty,
    Flashcard,
    FlashcardCreate,
    FlashcardList,
    FlashcardUpdate,
    ReviewUpdate,
)
from studydeck.models.quiz import (
    DifficultyFilter,
    OptionSelect,
    QuizAnswerReview,
    QuizConfiguration,
    QuizQuestion,
    QuizState,
    QuizStatus,
)
from studydeck.models.session import (
    AverageScore,
    SessionMode,
    StudySession,
    StudySessionList,
)
from studydeck.models.stats import DeckStats
from studydeck.models.study import (
    GradeRequest,
    StudyCard,
    StudySessionCreate,
    StudyState,
    StudyStatus,
)

__all__ = [
    "AverageScore",
    "DeckStats",
    "Difficulty",
    "DifficultyFilter",
    "Flashcard",
    "FlashcardCreate",
    "FlashcardList",
    "FlashcardUpdate",
    "GradeRequest",
    "OptionSelect",
    "QuizAnswerReview",
    "QuizConfiguration",
    "QuizQuestion",
    "QuizState",
    "QuizStatus",
    "ReviewUpdate",
    "SessionMode",
    "StudyCard",
    "StudySession",
    "StudySessionCreate",
    "StudySessionList",
    "StudyState",
    "StudyStatus",
]
