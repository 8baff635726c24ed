"""
Entry point for callers that drive study and quiz sessions.

Wraps a flashcard repository and session log (owned by the application)
together with an injectable clock and random source.
"""
from __future__ import annotations

import random
from collections.abc import Iterable
from datetime import datetime

from studydeck.models.flashcard import Flashcard
from studydeck.models.quiz import QuizConfiguration
from studydeck.models.session import StudySession
from studydeck.models.stats import DeckStats
from studydeck.services.clock import Clock, SystemClock
from studydeck.services.quiz_session import QuizEngine, RandomSource
from studydeck.services.repository import FlashcardRepository, SessionLog
from studydeck.services.selector import CATCH_UP_BATCH_SIZE, select_due
from studydeck.services.stats import deck_stats
from studydeck.services.study_session import StudySessionEngine


class StudyService:
    def __init__(
        self,
        repository: FlashcardRepository,
        session_log: SessionLog,
        clock: Clock | None = None,
        rng: RandomSource | None = None,
        catch_up_size: int = CATCH_UP_BATCH_SIZE,
    ) -> None:
        self.repository = repository
        self.session_log = session_log
        self.clock = clock or SystemClock()
        self.rng = rng or random.Random()
        self.catch_up_size = catch_up_size

    def list_due(self, now: datetime | None = None) -> list[Flashcard]:
        return select_due(self.repository.list_all(), now or self.clock.now())

    def list_all(self) -> list[Flashcard]:
        return self.repository.list_all()

    def create_study_session(
        self, study_set: Iterable[Flashcard] | None = None
    ) -> StudySessionEngine:
        """Build and start a study engine. Check its status for NO_CARDS_AVAILABLE."""
        engine = StudySessionEngine(
            self.repository,
            self.session_log,
            clock=self.clock,
            study_set=study_set,
            catch_up_size=self.catch_up_size,
        )
        engine.start()
        return engine

    def create_quiz_session(self, config: QuizConfiguration) -> QuizEngine:
        engine = QuizEngine(
            self.repository.list_all(),
            config,
            self.session_log,
            clock=self.clock,
            rng=self.rng,
        )
        engine.start()
        return engine

    def recent_sessions(self, limit: int) -> list[StudySession]:
        return self.session_log.recent(limit)

    def average_score(self, limit: int) -> int:
        return self.session_log.average_score(limit)

    def deck_stats(self, recent_limit: int, now: datetime | None = None) -> DeckStats:
        return deck_stats(
            self.repository, self.session_log, now or self.clock.now(), recent_limit
        )
