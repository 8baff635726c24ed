from __future__ import annotations

from collections.abc import Iterable

from studydeck.config import settings
from studydeck.models.flashcard import Flashcard
from studydeck.models.session import StudySession
from studydeck.services.repository import FlashcardRepository, SessionLog
from studydeck.services.study_service import StudyService

_service: StudyService | None = None


def init_store(
    cards: Iterable[Flashcard], sessions: Iterable[StudySession]
) -> StudyService:
    """Build the process-wide repository and log from persisted records."""
    global _service
    _service = StudyService(
        FlashcardRepository(cards),
        SessionLog(sessions),
        catch_up_size=settings.catch_up_batch_size,
    )
    return _service


def get_service() -> StudyService:
    if _service is None:
        raise RuntimeError("Store not initialized")
    return _service
