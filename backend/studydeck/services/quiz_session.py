"""
Quiz engine.

A quiz samples a fixed list of cards at start, shows each as a
multiple-choice question, and grades everything at once when it ends. It
ends when the last question is answered, when the user finishes early, or
when the countdown runs out. Quizzes never touch a card's review schedule.

    IDLE -> IN_PROGRESS(i, deadline) -> COMPLETE
    IDLE -> NO_QUESTIONS_AVAILABLE      (nothing matches the filter)
    IDLE | IN_PROGRESS -> ABANDONED
"""
from __future__ import annotations

import logging
import math
import random
import uuid
from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta
from typing import Any, Protocol

from studydeck.models.flashcard import Flashcard
from studydeck.models.quiz import (
    DifficultyFilter,
    QuizAnswerReview,
    QuizConfiguration,
    QuizQuestion,
    QuizState,
    QuizStatus,
)
from studydeck.models.session import SessionMode, StudySession, percent_score
from studydeck.services.clock import Clock, SystemClock, elapsed_ms
from studydeck.services.repository import SessionLog
from studydeck.services.transitions import InvalidTransitionError, require_state

logger = logging.getLogger(__name__)

MAX_DISTRACTORS = 3

_TERMINAL = (QuizStatus.COMPLETE, QuizStatus.NO_QUESTIONS_AVAILABLE, QuizStatus.ABANDONED)


class RandomSource(Protocol):
    def shuffle(self, x: list[Any]) -> None: ...


def sample_questions(
    cards: Iterable[Flashcard],
    config: QuizConfiguration,
    rng: RandomSource,
) -> list[Flashcard]:
    """Filter by difficulty, shuffle, keep the first question_count."""
    pool = list(cards)
    if config.difficulty_filter != DifficultyFilter.MIXED:
        wanted = config.difficulty_filter.value
        pool = [card for card in pool if card.difficulty.value == wanted]
    rng.shuffle(pool)
    return pool[: config.question_count]


def build_options(
    card: Flashcard,
    questions: Sequence[Flashcard],
    rng: RandomSource,
) -> list[str]:
    """
    The correct answer plus up to three distinct answers taken from the
    other questions, in shuffled order. With fewer distinct answers
    available the list is simply shorter.
    """
    candidates = [q.answer for q in questions if q.id != card.id]
    rng.shuffle(candidates)

    distractors: list[str] = []
    for answer in candidates:
        if answer == card.answer or answer in distractors:
            continue
        distractors.append(answer)
        if len(distractors) == MAX_DISTRACTORS:
            break

    options = [card.answer, *distractors]
    rng.shuffle(options)
    return options


class QuizEngine:
    def __init__(
        self,
        cards: Iterable[Flashcard],
        config: QuizConfiguration,
        session_log: SessionLog,
        clock: Clock | None = None,
        rng: RandomSource | None = None,
    ) -> None:
        self.id = str(uuid.uuid4())
        self.config = config
        self._source = list(cards)
        self._log = session_log
        self._clock = clock or SystemClock()
        self._rng = rng or random.Random()

        self._status = QuizStatus.IDLE
        self._cards: list[Flashcard] = []
        self._questions: list[QuizQuestion] = []
        self._selected: dict[int, str] = {}
        self._index = 0
        self._started_at: datetime | None = None
        self._deadline: datetime | None = None
        self._record: StudySession | None = None

    @property
    def status(self) -> QuizStatus:
        return self._status

    @property
    def record(self) -> StudySession | None:
        return self._record

    @property
    def is_terminal(self) -> bool:
        return self._status in _TERMINAL

    def start(self) -> QuizState:
        require_state("start", self._status, QuizStatus.IDLE)
        self._cards = sample_questions(self._source, self.config, self._rng)
        self._source = []

        if not self._cards:
            self._status = QuizStatus.NO_QUESTIONS_AVAILABLE
            logger.info(
                "Quiz %s: no questions for filter %s",
                self.id,
                self.config.difficulty_filter.value,
            )
            return self.current_state()

        self._questions = [
            QuizQuestion(
                flashcard_id=card.id,
                question=card.question,
                difficulty=card.difficulty,
                options=build_options(card, self._cards, self._rng),
            )
            for card in self._cards
        ]
        self._started_at = self._clock.now()
        self._deadline = self._started_at + timedelta(seconds=self.config.time_limit_seconds)
        self._status = QuizStatus.IN_PROGRESS
        logger.info(
            "Quiz %s started: %d questions, %ds limit",
            self.id,
            len(self._questions),
            self.config.time_limit_seconds,
        )
        return self.current_state()

    def select_option(self, option: str) -> QuizState:
        self._expire_if_due(self._clock.now())
        require_state("select an option", self._status, QuizStatus.IN_PROGRESS)
        if option not in self._questions[self._index].options:
            raise ValueError(f"{option!r} is not an option for this question")
        self._selected[self._index] = option
        return self.current_state()

    def next(self) -> QuizState:
        now = self._clock.now()
        self._expire_if_due(now)
        require_state("advance", self._status, QuizStatus.IN_PROGRESS)
        if self._index not in self._selected:
            raise InvalidTransitionError("advance without an answer", self._status)
        if self._index == len(self._questions) - 1:
            self._complete(now, reason="answered")
        else:
            self._index += 1
        return self.current_state()

    def previous(self) -> QuizState:
        self._expire_if_due(self._clock.now())
        require_state("go back", self._status, QuizStatus.IN_PROGRESS)
        if self._index == 0:
            raise InvalidTransitionError("go back from the first question", self._status)
        self._index -= 1
        return self.current_state()

    def finish(self) -> QuizState:
        """End the quiz now. Repeated calls after completion do nothing."""
        if self._status == QuizStatus.COMPLETE:
            return self.current_state()
        require_state("finish", self._status, QuizStatus.IN_PROGRESS)
        now = self._clock.now()
        if not self._expire_if_due(now):
            self._complete(now, reason="finished early")
        return self.current_state()

    def tick(self) -> int:
        """Re-read the clock; complete on time-out. Returns remaining seconds."""
        if self._status == QuizStatus.IN_PROGRESS:
            self._expire_if_due(self._clock.now())
        return self.remaining_seconds()

    def abandon(self) -> QuizState:
        require_state("abandon", self._status, QuizStatus.IDLE, QuizStatus.IN_PROGRESS)
        self._status = QuizStatus.ABANDONED
        logger.info("Quiz %s abandoned", self.id)
        return self.current_state()

    def remaining_seconds(self, now: datetime | None = None) -> int:
        if self._started_at is None:
            return self.config.time_limit_seconds
        if self._status != QuizStatus.IN_PROGRESS:
            return 0
        now = now or self._clock.now()
        elapsed = math.floor((now - self._started_at).total_seconds())
        return max(0, self.config.time_limit_seconds - elapsed)

    def current_state(self) -> QuizState:
        in_progress = self._status == QuizStatus.IN_PROGRESS
        return QuizState(
            session_id=self.id,
            status=self._status,
            question_index=self._index,
            total_questions=len(self._questions),
            current_question=self._questions[self._index] if in_progress else None,
            selected_option=self._selected.get(self._index) if in_progress else None,
            answered=len(self._selected),
            remaining_seconds=self.remaining_seconds(),
            deadline=self._deadline,
            show_hints=self.config.show_hints,
            record=self._record,
            review=self._review() if self._status == QuizStatus.COMPLETE else [],
        )

    def _expire_if_due(self, now: datetime) -> bool:
        if self._status != QuizStatus.IN_PROGRESS:
            return False
        if self.remaining_seconds(now) > 0:
            return False
        if self._deadline is None:
            raise RuntimeError(f"Quiz {self.id} has no deadline")
        self._complete(self._deadline, reason="time expired")
        return True

    def _review(self) -> list[QuizAnswerReview]:
        return [
            QuizAnswerReview(
                flashcard_id=card.id,
                question=card.question,
                selected_option=self._selected.get(i),
                correct_answer=card.answer,
                is_correct=self._selected.get(i) == card.answer,
            )
            for i, card in enumerate(self._cards)
        ]

    def _complete(self, ended_at: datetime, reason: str) -> None:
        if self._status == QuizStatus.COMPLETE:
            return
        if self._started_at is None:
            raise RuntimeError(f"Quiz {self.id} completed before it started")
        correct = sum(1 for item in self._review() if item.is_correct)
        self._record = StudySession(
            id=str(uuid.uuid4()),
            mode=SessionMode.QUIZ,
            flashcard_ids=[card.id for card in self._cards],
            score=percent_score(correct, len(self._cards)),
            duration=elapsed_ms(self._started_at, ended_at),
            completed_at=ended_at,
        )
        self._log.append(self._record)
        self._status = QuizStatus.COMPLETE
        logger.info(
            "Quiz %s complete (%s): %d/%d correct (%d%%)",
            self.id,
            reason,
            correct,
            len(self._cards),
            self._record.score,
        )
