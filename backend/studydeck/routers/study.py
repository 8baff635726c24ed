"""
Study session router.

Endpoints:
  POST   /study/sessions               — start a session over the due set (or given ids)
  GET    /study/sessions/{id}          — current state
  POST   /study/sessions/{id}/reveal   — show the answer
  POST   /study/sessions/{id}/grade    — record correct / incorrect, reschedule the card
  DELETE /study/sessions/{id}          — abandon; reviews already graded are kept
"""
from __future__ import annotations

import aiosqlite
from fastapi import APIRouter, Depends, HTTPException

from studydeck.db.sqlite import flush_store, get_db
from studydeck.models.study import GradeRequest, StudySessionCreate, StudyState
from studydeck.services import session_registry
from studydeck.services.store import get_service
from studydeck.services.study_service import StudyService
from studydeck.services.study_session import StudySessionEngine

router = APIRouter()


def _get_engine(session_id: str) -> StudySessionEngine:
    engine = session_registry.get_study(session_id)
    if engine is None:
        raise HTTPException(status_code=404, detail="Study session not found")
    return engine


@router.post("/sessions", response_model=StudyState, status_code=201)
async def start_session(
    body: StudySessionCreate | None = None,
    service: StudyService = Depends(get_service),
) -> StudyState:
    study_set = None
    if body is not None and body.flashcard_ids is not None:
        study_set = []
        for card_id in body.flashcard_ids:
            card = service.repository.get(card_id)
            if card is None:
                raise HTTPException(status_code=404, detail=f"Flashcard {card_id} not found")
            study_set.append(card)

    engine = service.create_study_session(study_set)
    session_registry.register_study(engine)
    return engine.current_state()


@router.get("/sessions/{session_id}", response_model=StudyState)
async def get_session(session_id: str) -> StudyState:
    return _get_engine(session_id).current_state()


@router.post("/sessions/{session_id}/reveal", response_model=StudyState)
async def reveal_answer(session_id: str) -> StudyState:
    return _get_engine(session_id).reveal_answer()


@router.post("/sessions/{session_id}/grade", response_model=StudyState)
async def grade_card(
    session_id: str,
    body: GradeRequest,
    service: StudyService = Depends(get_service),
    db: aiosqlite.Connection = Depends(get_db),
) -> StudyState:
    state = _get_engine(session_id).grade(body.correct)
    await flush_store(db, service)
    return state


@router.delete("/sessions/{session_id}", response_model=StudyState)
async def abandon_session(session_id: str) -> StudyState:
    engine = _get_engine(session_id)
    if not engine.is_terminal:
        engine.abandon()
    session_registry.discard_study(session_id)
    return engine.current_state()
