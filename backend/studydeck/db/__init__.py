from pathlib import Path

from studydeck.db.sqlite import get_db, init_sqlite, load_flashcards, load_sessions
from studydeck.services.store import init_store


async def init_storage(data_dir: Path) -> None:
    data_dir.mkdir(parents=True, exist_ok=True)
    await init_sqlite(data_dir)
    async for db in get_db():
        init_store(await load_flashcards(db), await load_sessions(db))
