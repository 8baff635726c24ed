"""
Flashcard router.

Endpoints:
  GET    /flashcards                  — list cards (optional search / difficulty / note filters)
  POST   /flashcards                  — create a card, due immediately
  GET    /flashcards/due              — cards due now, in deck order
  GET    /flashcards/stats            — dashboard summary
  DELETE /flashcards/by-note/{id}     — cascade for a deleted note
  GET    /flashcards/{id}             — single card
  PATCH  /flashcards/{id}             — edit question / answer
  DELETE /flashcards/{id}             — delete card
"""
from __future__ import annotations

import aiosqlite
from fastapi import APIRouter, Depends, HTTPException, Query

from studydeck.config import settings
from studydeck.db.sqlite import flush_store, get_db
from studydeck.models.flashcard import (
    Difficulty,
    Flashcard,
    FlashcardCreate,
    FlashcardList,
    FlashcardUpdate,
)
from studydeck.models.stats import DeckStats
from studydeck.services.store import get_service
from studydeck.services.study_service import StudyService

router = APIRouter()


@router.get("", response_model=FlashcardList)
async def list_cards(
    search: str | None = Query(default=None),
    difficulty: Difficulty | None = Query(default=None),
    note_id: str | None = Query(default=None),
    service: StudyService = Depends(get_service),
) -> FlashcardList:
    """List cards in deck order, optionally filtered."""
    needle = search.lower() if search else None

    def matches(card: Flashcard) -> bool:
        if difficulty is not None and card.difficulty != difficulty:
            return False
        if note_id is not None and card.note_id != note_id:
            return False
        if needle and needle not in card.question.lower() and needle not in card.answer.lower():
            return False
        return True

    items = service.repository.query(matches)
    return FlashcardList(items=items, total=len(items))


@router.post("", response_model=Flashcard, status_code=201)
async def create_card(
    body: FlashcardCreate,
    service: StudyService = Depends(get_service),
    db: aiosqlite.Connection = Depends(get_db),
) -> Flashcard:
    card = service.repository.create(body, service.clock.now())
    await flush_store(db, service)
    return card


@router.get("/due", response_model=FlashcardList)
async def list_due(service: StudyService = Depends(get_service)) -> FlashcardList:
    items = service.list_due()
    return FlashcardList(items=items, total=len(items))


@router.get("/stats", response_model=DeckStats)
async def stats(service: StudyService = Depends(get_service)) -> DeckStats:
    return service.deck_stats(settings.recent_sessions_limit)


@router.delete("/by-note/{note_id}")
async def remove_note_cards(
    note_id: str,
    service: StudyService = Depends(get_service),
    db: aiosqlite.Connection = Depends(get_db),
) -> dict:
    """Called when a note is deleted; its cards go with it."""
    removed = service.repository.delete_for_note(note_id)
    await flush_store(db, service)
    return {"note_id": note_id, "deleted": removed}


@router.get("/{card_id}", response_model=Flashcard)
async def get_card(
    card_id: str,
    service: StudyService = Depends(get_service),
) -> Flashcard:
    card = service.repository.get(card_id)
    if not card:
        raise HTTPException(status_code=404, detail="Flashcard not found")
    return card


@router.patch("/{card_id}", response_model=Flashcard)
async def edit_card(
    card_id: str,
    body: FlashcardUpdate,
    service: StudyService = Depends(get_service),
    db: aiosqlite.Connection = Depends(get_db),
) -> Flashcard:
    updated = service.repository.update(card_id, **body.model_dump(exclude_none=True))
    if not updated:
        raise HTTPException(status_code=404, detail="Flashcard not found")
    await flush_store(db, service)
    return updated


@router.delete("/{card_id}", status_code=204)
async def remove_card(
    card_id: str,
    service: StudyService = Depends(get_service),
    db: aiosqlite.Connection = Depends(get_db),
) -> None:
    if not service.repository.delete(card_id):
        raise HTTPException(status_code=404, detail="Flashcard not found")
    await flush_store(db, service)
