"""
In-memory flashcard repository and session log.

Both keep their records in insertion order, which is the "natural order"
the due-set selector and the catch-up batch rely on. Each also keeps a
change journal so the application layer can flush writes to SQLite
without the engines knowing about persistence.
"""
from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterable
from datetime import datetime

from studydeck.models.flashcard import Flashcard, FlashcardCreate
from studydeck.models.session import StudySession

logger = logging.getLogger(__name__)

# Fields a caller may change after creation
_MUTABLE_FIELDS = frozenset(
    {"question", "answer", "next_review", "review_count", "correct_count"}
)


class FlashcardRepository:
    def __init__(self, cards: Iterable[Flashcard] = ()) -> None:
        self._cards: dict[str, Flashcard] = {card.id: card for card in cards}
        self._changed: set[str] = set()
        self._deleted: set[str] = set()

    def __len__(self) -> int:
        return len(self._cards)

    def list_all(self) -> list[Flashcard]:
        return list(self._cards.values())

    def get(self, card_id: str) -> Flashcard | None:
        return self._cards.get(card_id)

    def query(self, predicate: Callable[[Flashcard], bool]) -> list[Flashcard]:
        return [card for card in self._cards.values() if predicate(card)]

    def create(self, data: FlashcardCreate, now: datetime) -> Flashcard:
        card = Flashcard(
            id=str(uuid.uuid4()),
            question=data.question,
            answer=data.answer,
            difficulty=data.difficulty,
            note_id=data.note_id,
            next_review=now,
            review_count=0,
            correct_count=0,
            created_at=now,
        )
        self._cards[card.id] = card
        self._mark_changed(card.id)
        return card

    def update(self, card_id: str, **fields: object) -> Flashcard | None:
        """Apply a partial update. Returns None if the card does not exist."""
        illegal = set(fields) - _MUTABLE_FIELDS
        if illegal:
            raise ValueError(f"flashcard fields are immutable: {sorted(illegal)}")
        card = self._cards.get(card_id)
        if card is None:
            return None
        # Re-validate so counter invariants hold after the update
        updated = Flashcard.model_validate({**card.model_dump(), **fields})
        self._cards[card_id] = updated
        self._mark_changed(card_id)
        return updated

    def delete(self, card_id: str) -> bool:
        if self._cards.pop(card_id, None) is None:
            return False
        self._changed.discard(card_id)
        self._deleted.add(card_id)
        return True

    def delete_for_note(self, note_id: str) -> int:
        """Cascade for a deleted note. Returns the number of cards removed."""
        doomed = [c.id for c in self._cards.values() if c.note_id == note_id]
        for card_id in doomed:
            self.delete(card_id)
        if doomed:
            logger.info("Removed %d flashcards for deleted note %s", len(doomed), note_id)
        return len(doomed)

    def take_changes(self) -> tuple[list[Flashcard], list[str]]:
        """Return (upserted cards, deleted ids) since the last call and reset."""
        changed = [self._cards[i] for i in self._cards if i in self._changed]
        deleted = sorted(self._deleted)
        self._changed.clear()
        self._deleted.clear()
        return changed, deleted

    def requeue_changes(self, changed_ids: Iterable[str], deleted_ids: Iterable[str]) -> None:
        """Put back changes taken by a flush that did not commit."""
        for card_id in deleted_ids:
            if card_id not in self._cards:
                self._deleted.add(card_id)
        for card_id in changed_ids:
            if card_id in self._cards:
                self._changed.add(card_id)

    def _mark_changed(self, card_id: str) -> None:
        self._deleted.discard(card_id)
        self._changed.add(card_id)


class SessionLog:
    """Append-only log of completed sessions, oldest first."""

    def __init__(self, sessions: Iterable[StudySession] = ()) -> None:
        self._sessions: list[StudySession] = list(sessions)
        self._unsaved: list[StudySession] = []

    def __len__(self) -> int:
        return len(self._sessions)

    def append(self, session: StudySession) -> None:
        self._sessions.append(session)
        self._unsaved.append(session)

    def recent(self, limit: int) -> list[StudySession]:
        """Newest first."""
        if limit <= 0:
            return []
        return list(reversed(self._sessions[-limit:]))

    def average_score(self, limit: int) -> int:
        scores = [s.score for s in self.recent(limit)]
        if not scores:
            return 0
        total = sum(scores)
        return (2 * total + len(scores)) // (2 * len(scores))

    def take_unsaved(self) -> list[StudySession]:
        unsaved, self._unsaved = self._unsaved, []
        return unsaved

    def requeue_unsaved(self, sessions: Iterable[StudySession]) -> None:
        self._unsaved[:0] = sessions
