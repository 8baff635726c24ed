"""
Quiz router.

Endpoints:
  POST   /quiz/sessions                  — sample questions and start the countdown
  GET    /quiz/sessions/{id}             — current state (re-reads the clock)
  POST   /quiz/sessions/{id}/select      — choose an option for the current question
  POST   /quiz/sessions/{id}/next        — advance; completes on the last question
  POST   /quiz/sessions/{id}/previous    — go back one question
  POST   /quiz/sessions/{id}/finish      — end now and grade
  POST   /quiz/sessions/{id}/tick        — manual clock check for clients without the timer
  DELETE /quiz/sessions/{id}             — abandon; nothing is recorded
"""
from __future__ import annotations

import logging

import aiosqlite
from fastapi import APIRouter, Depends, HTTPException

from studydeck.db.sqlite import flush_store, get_db
from studydeck.models.quiz import OptionSelect, QuizConfiguration, QuizState
from studydeck.services import quiz_timer, session_registry
from studydeck.services.quiz_session import QuizEngine
from studydeck.services.store import get_service
from studydeck.services.study_service import StudyService

logger = logging.getLogger(__name__)
router = APIRouter()


def _get_engine(session_id: str) -> QuizEngine:
    engine = session_registry.get_quiz(session_id)
    if engine is None:
        raise HTTPException(status_code=404, detail="Quiz session not found")
    return engine


async def _persist_timed_out(engine: QuizEngine) -> None:
    async for db in get_db():
        await flush_store(db, get_service())
    logger.info("Quiz %s timed out; result saved", engine.id)


async def _settle(
    engine: QuizEngine, service: StudyService, db: aiosqlite.Connection
) -> QuizState:
    """Stop the countdown once the quiz is over and save any new record."""
    if engine.is_terminal:
        quiz_timer.stop_timer(engine.id)
        await flush_store(db, service)
    return engine.current_state()


@router.post("/sessions", response_model=QuizState, status_code=201)
async def start_quiz(
    config: QuizConfiguration,
    service: StudyService = Depends(get_service),
) -> QuizState:
    engine = service.create_quiz_session(config)
    session_registry.register_quiz(engine)
    if not engine.is_terminal:
        quiz_timer.start_timer(engine, on_complete=_persist_timed_out)
    return engine.current_state()


@router.get("/sessions/{session_id}", response_model=QuizState)
async def get_quiz(
    session_id: str,
    service: StudyService = Depends(get_service),
    db: aiosqlite.Connection = Depends(get_db),
) -> QuizState:
    engine = _get_engine(session_id)
    engine.tick()
    return await _settle(engine, service, db)


@router.post("/sessions/{session_id}/select", response_model=QuizState)
async def select_option(
    session_id: str,
    body: OptionSelect,
    service: StudyService = Depends(get_service),
    db: aiosqlite.Connection = Depends(get_db),
) -> QuizState:
    engine = _get_engine(session_id)
    try:
        engine.select_option(body.option)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    finally:
        await _settle(engine, service, db)
    return engine.current_state()


@router.post("/sessions/{session_id}/next", response_model=QuizState)
async def next_question(
    session_id: str,
    service: StudyService = Depends(get_service),
    db: aiosqlite.Connection = Depends(get_db),
) -> QuizState:
    engine = _get_engine(session_id)
    try:
        engine.next()
    finally:
        await _settle(engine, service, db)
    return engine.current_state()


@router.post("/sessions/{session_id}/previous", response_model=QuizState)
async def previous_question(
    session_id: str,
    service: StudyService = Depends(get_service),
    db: aiosqlite.Connection = Depends(get_db),
) -> QuizState:
    engine = _get_engine(session_id)
    try:
        engine.previous()
    finally:
        await _settle(engine, service, db)
    return engine.current_state()


@router.post("/sessions/{session_id}/finish", response_model=QuizState)
async def finish_quiz(
    session_id: str,
    service: StudyService = Depends(get_service),
    db: aiosqlite.Connection = Depends(get_db),
) -> QuizState:
    engine = _get_engine(session_id)
    engine.finish()
    return await _settle(engine, service, db)


@router.post("/sessions/{session_id}/tick")
async def tick(
    session_id: str,
    service: StudyService = Depends(get_service),
    db: aiosqlite.Connection = Depends(get_db),
) -> dict:
    engine = _get_engine(session_id)
    remaining = engine.tick()
    state = await _settle(engine, service, db)
    return {"remaining_seconds": remaining, "status": state.status}


@router.delete("/sessions/{session_id}", response_model=QuizState)
async def abandon_quiz(session_id: str) -> QuizState:
    engine = _get_engine(session_id)
    quiz_timer.stop_timer(session_id)
    if not engine.is_terminal:
        engine.abandon()
    session_registry.discard_quiz(session_id)
    return engine.current_state()
