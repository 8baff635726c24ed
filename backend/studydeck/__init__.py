import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from studydeck.config import settings
from studydeck.db import init_storage
from studydeck.services.transitions import InvalidTransitionError


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_storage(settings.studydeck_data_dir)
    yield
    from studydeck.db.sqlite import flush_store, get_db
    from studydeck.services import quiz_timer, session_registry
    from studydeck.services.store import get_service

    await quiz_timer.stop_all()
    async for db in get_db():
        await flush_store(db, get_service())
    session_registry.clear()


async def invalid_transition_handler(
    request: Request, exc: InvalidTransitionError
) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": str(exc)})


def create_app() -> FastAPI:
    logging.basicConfig(level=settings.log_level.upper())

    application = FastAPI(
        title="StudyDeck Backend", version="0.1.0", lifespan=lifespan
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_exception_handler(InvalidTransitionError, invalid_transition_handler)

    from studydeck.routers import flashcards, health, quiz, sessions, study

    application.include_router(health.router)
    application.include_router(
        flashcards.router, prefix="/flashcards", tags=["flashcards"]
    )
    application.include_router(
        study.router, prefix="/study", tags=["study"]
    )
    application.include_router(
        quiz.router, prefix="/quiz", tags=["quiz"]
    )
    application.include_router(
        sessions.router, prefix="/sessions", tags=["sessions"]
    )

    return application


app = create_app()
