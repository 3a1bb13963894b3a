"""
Lesson endpoints: lesson content and lesson sessions (the server-side player).
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from api.config import get_db
from api.schemas.lesson_schemas import LessonResponse, SessionEventRequest, SessionResponse, StartSessionRequest
from api.schemas.user_schemas import User
from api.services.catalog_service import get_lesson_by_id, load_lesson_content
from api.services.lesson_session_service import LessonSessionService
from api.utils.auth import get_optional_user
from api.utils.common import iso_format

lesson_routes = APIRouter()


@lesson_routes.get("/lessons/{lesson_id}", response_model=LessonResponse)
async def get_lesson(lesson_id: str, db: Session = Depends(get_db)) -> LessonResponse:
    lesson = get_lesson_by_id(db, lesson_id)
    if lesson is None:
        raise HTTPException(status_code=404, detail="Lesson not found")
    return LessonResponse(
        id=lesson.id,
        course_id=lesson.course_id,
        title=lesson.title,
        order_index=lesson.order_index,
        content=load_lesson_content(lesson),
        created_at=iso_format(lesson.created_at),
        updated_at=iso_format(lesson.updated_at),
    )


@lesson_routes.post("/lessons/{lesson_id}/sessions", response_model=SessionResponse)
async def start_lesson_session(
    lesson_id: str,
    req: Optional[StartSessionRequest] = None,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
) -> SessionResponse:
    """
    Open a lesson. ``position_token`` (e.g. "#block=2") restores the block
    the learner was on; anonymous callers play in preview mode.
    """
    token = req.position_token if req else None
    return LessonSessionService(db).start(lesson_id, current_user, token)


@lesson_routes.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_lesson_session(
    session_id: str,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
) -> SessionResponse:
    return LessonSessionService(db).get(session_id, current_user)


@lesson_routes.post("/sessions/{session_id}/events", response_model=SessionResponse)
async def post_lesson_session_event(
    session_id: str,
    event: SessionEventRequest,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
) -> SessionResponse:
    """Apply one learner action (answer, next question, continue, back/forward...)."""
    return LessonSessionService(db).apply(session_id, current_user, event)
