"""
User progress endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.config import get_db
from api.schemas.user_progress_schemas import (
    MarkLessonCompletedRequest,
    MarkLessonCompletedResponse,
    UserCourseProgressResponse,
    UserPathProgressResponse,
)
from api.schemas.user_schemas import User
from api.services import catalog_service
from api.services.progress_service import mark_lesson_completed
from api.utils.auth import get_current_user
from api.utils.common import course_progress_response, path_progress_response

progress_routes = APIRouter()


@progress_routes.get("/progress/courses/{course_id}", response_model=Optional[UserCourseProgressResponse])
async def get_course_progress(
    course_id: str,
    user_id: int = Query(..., description="Owner of the progress record"),
    db: Session = Depends(get_db),
) -> Optional[UserCourseProgressResponse]:
    """
    Progress record for (user, course), or null when the user never completed a lesson there.

    Public read keyed by the ``user_id`` query argument, like the catalog
    queries it mirrors: no session is required and any user's record can be
    read. Only the completion mutation is scoped to the signed-in caller.
    """
    record = catalog_service.get_user_course_progress(db, user_id, course_id)
    return course_progress_response(record) if record else None


@progress_routes.get("/progress/paths/{path_id}", response_model=Optional[UserPathProgressResponse])
async def get_path_progress(
    path_id: str,
    user_id: int = Query(..., description="Owner of the progress record"),
    db: Session = Depends(get_db),
) -> Optional[UserPathProgressResponse]:
    """Path progress record for (user, path), or null. Public read by ``user_id``, as above."""
    record = catalog_service.get_user_path_progress(db, user_id, path_id)
    return path_progress_response(record) if record else None


@progress_routes.post("/progress/lessons/complete", response_model=MarkLessonCompletedResponse)
async def complete_lesson(
    req: MarkLessonCompletedRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MarkLessonCompletedResponse:
    """Mark a lesson completed for the caller. Repeating the call changes nothing."""
    return mark_lesson_completed(db, current_user.id, req.lesson_id, req.course_id)
