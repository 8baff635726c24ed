import json
import logging
from pathlib import Path
from typing import AsyncIterator

import aiosqlite

from studydeck.config import settings
from studydeck.models.flashcard import Flashcard
from studydeck.models.session import StudySession
from studydeck.services.study_service import StudyService

logger = logging.getLogger(__name__)

_db_path: Path | None = None

SCHEMA_SQL = """
PRAGMA journal_mode=WAL;

CREATE TABLE IF NOT EXISTS flashcards (
    id            TEXT PRIMARY KEY,
    note_id       TEXT,
    question      TEXT NOT NULL,
    answer        TEXT NOT NULL,
    difficulty    TEXT NOT NULL DEFAULT 'medium',
    next_review   TEXT NOT NULL,
    review_count  INTEGER NOT NULL DEFAULT 0,
    correct_count INTEGER NOT NULL DEFAULT 0,
    created_at    TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_flashcards_note ON flashcards(note_id);
CREATE INDEX IF NOT EXISTS idx_flashcards_review ON flashcards(next_review);

CREATE TABLE IF NOT EXISTS study_sessions (
    id            TEXT PRIMARY KEY,
    mode          TEXT NOT NULL,
    flashcard_ids TEXT NOT NULL,
    score         INTEGER NOT NULL,
    duration      INTEGER NOT NULL,
    completed_at  TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_sessions_time ON study_sessions(completed_at);

CREATE TABLE IF NOT EXISTS schema_version (
    version    INTEGER PRIMARY KEY,
    applied_at TEXT NOT NULL DEFAULT (datetime('now'))
);
INSERT OR IGNORE INTO schema_version(version) VALUES (1);
"""


async def init_sqlite(data_dir: Path) -> None:
    global _db_path
    _db_path = data_dir / settings.sqlite_filename
    async with aiosqlite.connect(_db_path) as db:
        await db.executescript(SCHEMA_SQL)
        await db.commit()


async def get_db() -> AsyncIterator[aiosqlite.Connection]:
    assert _db_path is not None, "SQLite not initialized"
    async with aiosqlite.connect(_db_path) as db:
        db.row_factory = aiosqlite.Row
        yield db


def _row_to_flashcard(row: aiosqlite.Row) -> Flashcard:
    return Flashcard(**dict(row))


def _row_to_session(row: aiosqlite.Row) -> StudySession:
    d = dict(row)
    d["flashcard_ids"] = json.loads(d["flashcard_ids"])
    return StudySession(**d)


async def load_flashcards(db: aiosqlite.Connection) -> list[Flashcard]:
    """All cards in insertion order."""
    cursor = await db.execute("SELECT * FROM flashcards ORDER BY rowid ASC")
    rows = await cursor.fetchall()
    return [_row_to_flashcard(r) for r in rows]


async def load_sessions(db: aiosqlite.Connection) -> list[StudySession]:
    cursor = await db.execute("SELECT * FROM study_sessions ORDER BY rowid ASC")
    rows = await cursor.fetchall()
    return [_row_to_session(r) for r in rows]


async def upsert_flashcard(db: aiosqlite.Connection, card: Flashcard) -> None:
    await db.execute(
        """INSERT INTO flashcards
           (id, note_id, question, answer, difficulty, next_review,
            review_count, correct_count, created_at)
           VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
           ON CONFLICT(id) DO UPDATE SET
             question = excluded.question,
             answer = excluded.answer,
             next_review = excluded.next_review,
             review_count = excluded.review_count,
             correct_count = excluded.correct_count""",
        (
            card.id,
            card.note_id,
            card.question,
            card.answer,
            card.difficulty.value,
            card.next_review.isoformat(),
            card.review_count,
            card.correct_count,
            card.created_at.isoformat(),
        ),
    )


async def delete_flashcards(db: aiosqlite.Connection, card_ids: list[str]) -> None:
    if not card_ids:
        return
    placeholders = ", ".join("?" for _ in card_ids)
    await db.execute(
        f"DELETE FROM flashcards WHERE id IN ({placeholders})",  # noqa: S608
        card_ids,
    )


async def insert_session(db: aiosqlite.Connection, session: StudySession) -> None:
    await db.execute(
        """INSERT OR IGNORE INTO study_sessions
           (id, mode, flashcard_ids, score, duration, completed_at)
           VALUES (?, ?, ?, ?, ?, ?)""",
        (
            session.id,
            session.mode.value,
            json.dumps(session.flashcard_ids),
            session.score,
            session.duration,
            session.completed_at.isoformat(),
        ),
    )


async def flush_store(db: aiosqlite.Connection, service: StudyService) -> int:
    """Write pending repository and log changes. Returns the number of rows touched."""
    changed, deleted = service.repository.take_changes()
    sessions = service.session_log.take_unsaved()
    if not (changed or deleted or sessions):
        return 0

    try:
        for card in changed:
            await upsert_flashcard(db, card)
        await delete_flashcards(db, deleted)
        for session in sessions:
            await insert_session(db, session)
        await db.commit()
    except Exception:
        # Keep the changes pending so the next flush writes them
        service.repository.requeue_changes([c.id for c in changed], deleted)
        service.session_log.requeue_unsaved(sessions)
        logger.warning(
            "SQLite flush failed; %d cards, %d deletes, %d sessions kept pending",
            len(changed),
            len(deleted),
            len(sessions),
        )
        raise
    return len(changed) + len(deleted) + len(sessions)
