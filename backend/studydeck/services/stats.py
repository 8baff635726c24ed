from __future__ import annotations

from datetime import datetime

from studydeck.models.flashcard import Difficulty
from studydeck.models.stats import DeckStats
from studydeck.services.repository import FlashcardRepository, SessionLog
from studydeck.services.selector import select_due

MASTERED_CORRECT_COUNT = 3


def deck_stats(
    repository: FlashcardRepository,
    session_log: SessionLog,
    now: datetime,
    recent_limit: int,
) -> DeckStats:
    """Dashboard summary: card counts plus recent session performance."""
    cards = repository.list_all()
    per_difficulty = {d.value: 0 for d in Difficulty}
    for card in cards:
        per_difficulty[card.difficulty.value] += 1

    return DeckStats(
        total_cards=len(cards),
        due_now=len(select_due(cards, now)),
        mastered=sum(1 for c in cards if c.correct_count >= MASTERED_CORRECT_COUNT),
        linked_to_notes=sum(1 for c in cards if c.note_id),
        total_sessions=len(session_log),
        average_score=session_log.average_score(recent_limit),
        per_difficulty=per_difficulty,
    )
