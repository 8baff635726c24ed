from fastapi import APIRouter, Depends, Query

from studydeck.config import settings
from studydeck.models.session import AverageScore, StudySessionList
from studydeck.services.store import get_service
from studydeck.services.study_service import StudyService

router = APIRouter()


@router.get("/recent", response_model=StudySessionList)
async def recent_sessions(
    limit: int = Query(default=settings.recent_sessions_limit, ge=1, le=100),
    service: StudyService = Depends(get_service),
) -> StudySessionList:
    """Completed study and quiz sessions, newest first."""
    items = service.recent_sessions(limit)
    return StudySessionList(items=items, total=len(service.session_log))


@router.get("/average", response_model=AverageScore)
async def average_score(
    limit: int = Query(default=settings.recent_sessions_limit, ge=1, le=100),
    service: StudyService = Depends(get_service),
) -> AverageScore:
    return AverageScore(
        average_score=service.average_score(limit),
        sample_size=len(service.recent_sessions(limit)),
    )
