"""
Catalog queries: courses, lessons, learning paths and progress records.

Point lookups return None when the record does not exist; routes turn that
into a 404. Each query mirrors one read the client issues.
"""

import logging
from typing import Optional

from fastapi import HTTPException
from pydantic import ValidationError
from sqlalchemy.orm import Session

from api.config import settings
from api.models.models import Course, LearningPath, Lesson, UserCourseProgress, UserPathProgress
from api.schemas.course_schemas import CourseOverviewResponse, PathCourseItem, PathOverviewResponse
from api.schemas.user_schemas import User
from api.utils.common import course_response, lesson_summary, path_response
from lessons.aggregator import (
    compute_course_progress,
    compute_next_lesson,
    course_action_label,
    order_courses,
    path_action_label,
)
from lessons.blocks import LessonContent

logger = logging.getLogger(__name__)


def get_featured_courses(db: Session, limit: Optional[int] = None) -> list[Course]:
    """Most recently updated courses first."""
    return (
        db.query(Course)
        .order_by(Course.updated_at.desc(), Course.id.asc())
        .limit(limit or settings.featured_course_limit)
        .all()
    )


def get_learning_paths(db: Session) -> list[LearningPath]:
    return db.query(LearningPath).order_by(LearningPath.created_at.asc(), LearningPath.id.asc()).all()


def get_course_lessons(db: Session, course_id: str) -> list[Lesson]:
    return (
        db.query(Lesson)
        .filter(Lesson.course_id == course_id)
        .order_by(Lesson.order_index.asc(), Lesson.id.asc())
        .all()
    )


def get_course_by_id(db: Session, course_id: str) -> Optional[Course]:
    return db.query(Course).filter(Course.id == course_id).first()


def get_learning_path_by_id(db: Session, path_id: str) -> Optional[LearningPath]:
    return db.query(LearningPath).filter(LearningPath.id == path_id).first()


def get_courses_by_ids(db: Session, course_ids: list[str]) -> list[Course]:
    """Existing courses only; order is not guaranteed (see order_courses)."""
    if not course_ids:
        return []
    return db.query(Course).filter(Course.id.in_(set(course_ids))).all()


def get_user_course_progress(db: Session, user_id: int, course_id: str) -> Optional[UserCourseProgress]:
    return (
        db.query(UserCourseProgress)
        .filter(UserCourseProgress.user_id == user_id, UserCourseProgress.course_id == course_id)
        .one_or_none()
    )


def get_user_path_progress(db: Session, user_id: int, path_id: str) -> Optional[UserPathProgress]:
    return (
        db.query(UserPathProgress)
        .filter(UserPathProgress.user_id == user_id, UserPathProgress.path_id == path_id)
        .one_or_none()
    )


def get_lesson_by_id(db: Session, lesson_id: str) -> Optional[Lesson]:
    lesson = db.query(Lesson).filter(Lesson.id == lesson_id).first()
    if lesson is None:
        logger.warning("lesson not found id=%s", lesson_id)
    return lesson


def load_lesson_content(lesson: Lesson) -> LessonContent:
    """Validate the stored block sequence of ``lesson``."""
    try:
        return LessonContent.model_validate(lesson.content or {})
    except ValidationError:
        logger.exception("invalid content lesson=%s", lesson.id)
        raise HTTPException(status_code=500, detail="Lesson content is invalid")


# -----------------------------------------------------------------------------
# Page overviews
# -----------------------------------------------------------------------------

def build_course_overview(db: Session, course_id: str, user: Optional[User]) -> CourseOverviewResponse:
    course = get_course_by_id(db, course_id)
    if course is None:
        raise HTTPException(status_code=404, detail="Course not found")

    lessons = get_course_lessons(db, course_id)
    record = get_user_course_progress(db, user.id, course_id) if user else None
    completed = list(record.completed_lessons or []) if record else []

    next_lesson = compute_next_lesson(lessons, completed)
    completed_in_course = {lesson.id for lesson in lessons} & set(completed)
    percent = compute_course_progress(len(completed_in_course), len(lessons))

    return CourseOverviewResponse(
        course=course_response(course),
        lessons=[lesson_summary(lesson, completed_in_course) for lesson in lessons],
        status=next_lesson.status,
        next_lesson_id=next_lesson.next_lesson_id,
        progress=percent or 0,
        action_label=course_action_label(next_lesson, authenticated=user is not None, lesson_count=len(lessons)),
    )


def build_path_overview(db: Session, path_id: str, user: Optional[User]) -> PathOverviewResponse:
    path = get_learning_path_by_id(db, path_id)
    if path is None:
        raise HTTPException(status_code=404, detail="Learning path not found")

    course_ids = list(path.course_ids or [])
    courses = order_courses(course_ids, get_courses_by_ids(db, course_ids))
    record = get_user_path_progress(db, user.id, path_id) if user else None
    completed = set(record.completed_courses or []) if record else set()

    return PathOverviewResponse(
        path=path_response(path),
        courses=[
            PathCourseItem(position=i, course=course_response(c), completed=c.id in completed)
            for i, c in enumerate(courses, start=1)
        ],
        progress=int(record.progress) if record else 0,
        action_label=path_action_label(authenticated=user is not None, has_progress=record is not None),
    )
