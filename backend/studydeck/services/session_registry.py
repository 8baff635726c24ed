"""
Live study and quiz engines by session ID.

Finished engines stay readable for a retention window so clients can
fetch the final state (and repeat `finish`) after completion. They are
evicted the next time a session is registered once the window has passed.
"""
from __future__ import annotations

import time

from studydeck.config import settings
from studydeck.services.quiz_session import QuizEngine
from studydeck.services.study_session import StudySessionEngine

_study_sessions: dict[str, StudySessionEngine] = {}
_quiz_sessions: dict[str, QuizEngine] = {}
# session id -> monotonic time the engine was first seen terminal
_finished_at: dict[str, float] = {}


def register_study(engine: StudySessionEngine) -> None:
    prune()
    _study_sessions[engine.id] = engine


def register_quiz(engine: QuizEngine) -> None:
    prune()
    _quiz_sessions[engine.id] = engine


def get_study(session_id: str) -> StudySessionEngine | None:
    return _study_sessions.get(session_id)


def get_quiz(session_id: str) -> QuizEngine | None:
    return _quiz_sessions.get(session_id)


def discard_study(session_id: str) -> StudySessionEngine | None:
    _finished_at.pop(session_id, None)
    return _study_sessions.pop(session_id, None)


def discard_quiz(session_id: str) -> QuizEngine | None:
    _finished_at.pop(session_id, None)
    return _quiz_sessions.pop(session_id, None)


def prune(now: float | None = None, retention_seconds: float | None = None) -> int:
    """Drop engines that have been terminal longer than the retention window."""
    if now is None:
        now = time.monotonic()
    if retention_seconds is None:
        retention_seconds = settings.finished_session_retention_seconds

    removed = 0
    for sessions in (_study_sessions, _quiz_sessions):
        for session_id, engine in list(sessions.items()):
            if not engine.is_terminal:
                continue
            finished = _finished_at.setdefault(session_id, now)
            if now - finished >= retention_seconds:
                del sessions[session_id]
                del _finished_at[session_id]
                removed += 1
    return removed


def active_count() -> int:
    return len(_study_sessions) + len(_quiz_sessions)


def clear() -> None:
    _study_sessions.clear()
    _quiz_sessions.clear()
    _finished_at.clear()
