"""
Background countdown for quiz sessions.

One asyncio task per live quiz calls QuizEngine.tick() once per second.
The engine derives the remaining time from its start timestamp, so a late
or skipped wake-up never drifts the deadline. The task ends on its own once
the engine is terminal and must be cancelled when the quiz is finished or
abandoned by the user.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from studydeck.models.quiz import QuizStatus
from studydeck.services.quiz_session import QuizEngine

logger = logging.getLogger(__name__)

TICK_SECONDS = 1.0

OnComplete = Callable[[QuizEngine], Awaitable[None]]

_running_timers: dict[str, asyncio.Task[None]] = {}


def start_timer(
    engine: QuizEngine,
    on_complete: OnComplete | None = None,
    tick_seconds: float = TICK_SECONDS,
) -> asyncio.Task[None]:
    """Create the countdown task and register it by quiz session ID."""
    task = asyncio.create_task(
        _run(engine, on_complete, tick_seconds), name=f"quiz-timer-{engine.id}"
    )
    _running_timers[engine.id] = task
    task.add_done_callback(lambda _: _running_timers.pop(engine.id, None))
    return task


def is_running(session_id: str) -> bool:
    task = _running_timers.get(session_id)
    return task is not None and not task.done()


def stop_timer(session_id: str) -> bool:
    task = _running_timers.pop(session_id, None)
    if task is None or task.done():
        return False
    task.cancel()
    return True


async def stop_all() -> None:
    tasks = list(_running_timers.values())
    _running_timers.clear()
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)


async def _run(
    engine: QuizEngine, on_complete: OnComplete | None, tick_seconds: float
) -> None:
    while not engine.is_terminal:
        await asyncio.sleep(tick_seconds)
        remaining = engine.tick()
        logger.debug("Quiz %s: %ds remaining", engine.id, remaining)

    if engine.status == QuizStatus.COMPLETE and on_complete is not None:
        try:
            await on_complete(engine)
        except Exception:
            logger.exception("Quiz %s: completion callback failed", engine.id)
