"""
Study session engine.

Runs one pass over a snapshot of cards: reveal the answer, grade it, move
on. Each grade is written back to the repository immediately, so an
abandoned session keeps the reviews it already made but records no
session.

    IDLE -> AWAITING_ANSWER(i) -> AWAITING_GRADE(i) -> ... -> COMPLETE
    IDLE -> NO_CARDS_AVAILABLE          (empty study set)
    any non-terminal -> ABANDONED
"""
from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from datetime import datetime

from studydeck.models.flashcard import Flashcard
from studydeck.models.session import SessionMode, StudySession, percent_score
from studydeck.models.study import StudyCard, StudyState, StudyStatus
from studydeck.services.clock import Clock, SystemClock, elapsed_ms
from studydeck.services.repository import FlashcardRepository, SessionLog
from studydeck.services.scheduler import schedule
from studydeck.services.selector import CATCH_UP_BATCH_SIZE, resolve_study_set
from studydeck.services.transitions import require_state

logger = logging.getLogger(__name__)

_TERMINAL = (StudyStatus.COMPLETE, StudyStatus.NO_CARDS_AVAILABLE, StudyStatus.ABANDONED)


def _unique_by_id(cards: Iterable[Flashcard]) -> list[Flashcard]:
    seen: set[str] = set()
    unique = []
    for card in cards:
        if card.id not in seen:
            seen.add(card.id)
            unique.append(card)
    return unique


class StudySessionEngine:
    def __init__(
        self,
        repository: FlashcardRepository,
        session_log: SessionLog,
        clock: Clock | None = None,
        study_set: Iterable[Flashcard] | None = None,
        catch_up_size: int = CATCH_UP_BATCH_SIZE,
    ) -> None:
        self.id = str(uuid.uuid4())
        self._repository = repository
        self._log = session_log
        self._clock = clock or SystemClock()
        self._explicit_set = list(study_set) if study_set is not None else None
        self._catch_up_size = catch_up_size

        self._status = StudyStatus.IDLE
        self._cards: list[Flashcard] = []
        self._index = 0
        self._correct = 0
        self._incorrect = 0
        self._started_at: datetime | None = None
        self._record: StudySession | None = None

    @property
    def status(self) -> StudyStatus:
        return self._status

    @property
    def record(self) -> StudySession | None:
        return self._record

    @property
    def is_terminal(self) -> bool:
        return self._status in _TERMINAL

    def start(self) -> StudyState:
        require_state("start", self._status, StudyStatus.IDLE)
        now = self._clock.now()
        if self._explicit_set is not None:
            cards = self._explicit_set
        else:
            cards = resolve_study_set(self._repository.list_all(), now, self._catch_up_size)
        self._cards = _unique_by_id(cards)

        if not self._cards:
            self._status = StudyStatus.NO_CARDS_AVAILABLE
            logger.info("Study session %s: no cards available", self.id)
        else:
            self._started_at = now
            self._status = StudyStatus.AWAITING_ANSWER
            logger.info("Study session %s started with %d cards", self.id, len(self._cards))
        return self.current_state()

    def reveal_answer(self) -> StudyState:
        require_state("reveal the answer", self._status, StudyStatus.AWAITING_ANSWER)
        self._status = StudyStatus.AWAITING_GRADE
        return self.current_state()

    def grade(self, correct: bool) -> StudyState:
        require_state("grade", self._status, StudyStatus.AWAITING_GRADE)
        card = self._cards[self._index]
        now = self._clock.now()

        # Counters may have moved since the snapshot (another session graded the card)
        stored = self._repository.get(card.id)
        update = schedule(stored or card, correct, now)
        written = self._repository.update(
            card.id,
            review_count=update.review_count,
            correct_count=update.correct_count,
            next_review=update.next_review,
        )
        if written is None:
            logger.warning(
                "Card %s was deleted during study session %s; review not saved",
                card.id,
                self.id,
            )

        if correct:
            self._correct += 1
        else:
            self._incorrect += 1

        if self._index == len(self._cards) - 1:
            self._complete(now)
        else:
            self._index += 1
            self._status = StudyStatus.AWAITING_ANSWER
        return self.current_state()

    def abandon(self) -> StudyState:
        require_state(
            "abandon",
            self._status,
            StudyStatus.IDLE,
            StudyStatus.AWAITING_ANSWER,
            StudyStatus.AWAITING_GRADE,
        )
        self._status = StudyStatus.ABANDONED
        logger.info(
            "Study session %s abandoned after %d of %d cards",
            self.id,
            self._correct + self._incorrect,
            len(self._cards),
        )
        return self.current_state()

    def current_state(self) -> StudyState:
        in_loop = self._status in (StudyStatus.AWAITING_ANSWER, StudyStatus.AWAITING_GRADE)
        return StudyState(
            session_id=self.id,
            status=self._status,
            card_index=self._index,
            total_cards=len(self._cards),
            current_card=self._card_view() if in_loop else None,
            answer_revealed=self._status == StudyStatus.AWAITING_GRADE,
            correct=self._correct,
            incorrect=self._incorrect,
            record=self._record,
        )

    def _card_view(self) -> StudyCard:
        card = self._cards[self._index]
        revealed = self._status == StudyStatus.AWAITING_GRADE
        return StudyCard(
            id=card.id,
            question=card.question,
            difficulty=card.difficulty,
            note_id=card.note_id,
            answer=card.answer if revealed else None,
        )

    def _complete(self, now: datetime) -> None:
        if self._started_at is None:
            raise RuntimeError(f"Study session {self.id} completed before it started")
        total = self._correct + self._incorrect
        self._record = StudySession(
            id=str(uuid.uuid4()),
            mode=SessionMode.STUDY,
            flashcard_ids=[card.id for card in self._cards],
            score=percent_score(self._correct, total),
            duration=elapsed_ms(self._started_at, now),
            completed_at=now,
        )
        self._log.append(self._record)
        self._status = StudyStatus.COMPLETE
        logger.info(
            "Study session %s complete: %d/%d correct (%d%%)",
            self.id,
            self._correct,
            total,
            self._record.score,
        )
