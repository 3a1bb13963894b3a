"""
Catalog endpoints: courses, lessons and learning paths.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from api.config import get_db
from api.schemas.course_schemas import (
    CourseListResponse,
    CourseOverviewResponse,
    CourseResponse,
    CoursesByIdsRequest,
    LearningPathListResponse,
    LearningPathResponse,
    LessonListResponse,
    PathOverviewResponse,
)
from api.schemas.user_schemas import User
from api.services import catalog_service
from api.utils.auth import get_optional_user
from api.utils.common import course_response, lesson_summary, path_response

catalog_routes = APIRouter()


@catalog_routes.get("/courses/featured", response_model=CourseListResponse)
async def featured_courses(db: Session = Depends(get_db)) -> CourseListResponse:
    """Most recently updated courses for the home page."""
    courses = catalog_service.get_featured_courses(db)
    return CourseListResponse(courses=[course_response(c) for c in courses])


@catalog_routes.post("/courses/by-ids", response_model=CourseListResponse)
async def courses_by_ids(req: CoursesByIdsRequest, db: Session = Depends(get_db)) -> CourseListResponse:
    """Existing courses among ``course_ids``; missing ids are dropped, order is not preserved."""
    courses = catalog_service.get_courses_by_ids(db, req.course_ids)
    return CourseListResponse(courses=[course_response(c) for c in courses])


@catalog_routes.get("/courses/{course_id}", response_model=CourseResponse)
async def get_course(course_id: str, db: Session = Depends(get_db)) -> CourseResponse:
    course = catalog_service.get_course_by_id(db, course_id)
    if course is None:
        raise HTTPException(status_code=404, detail="Course not found")
    return course_response(course)


@catalog_routes.get("/courses/{course_id}/lessons", response_model=LessonListResponse)
async def get_course_lessons(course_id: str, db: Session = Depends(get_db)) -> LessonListResponse:
    """Lessons of a course in ``order_index`` order. Unknown course gives an empty list."""
    lessons = catalog_service.get_course_lessons(db, course_id)
    return LessonListResponse(lessons=[lesson_summary(lesson) for lesson in lessons])


@catalog_routes.get("/courses/{course_id}/overview", response_model=CourseOverviewResponse)
async def get_course_overview(
    course_id: str,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
) -> CourseOverviewResponse:
    """Course page: timeline with completion marks, next lesson and the main action label."""
    return catalog_service.build_course_overview(db, course_id, current_user)


@catalog_routes.get("/paths", response_model=LearningPathListResponse)
async def list_paths(db: Session = Depends(get_db)) -> LearningPathListResponse:
    paths = catalog_service.get_learning_paths(db)
    return LearningPathListResponse(paths=[path_response(p) for p in paths])


@catalog_routes.get("/paths/{path_id}", response_model=LearningPathResponse)
async def get_path(path_id: str, db: Session = Depends(get_db)) -> LearningPathResponse:
    path = catalog_service.get_learning_path_by_id(db, path_id)
    if path is None:
        raise HTTPException(status_code=404, detail="Learning path not found")
    return path_response(path)


@catalog_routes.get("/paths/{path_id}/overview", response_model=PathOverviewResponse)
async def get_path_overview(
    path_id: str,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
) -> PathOverviewResponse:
    return catalog_service.build_path_overview(db, path_id, current_user)
