"""
Common utility functions used across multiple routes.
"""

from datetime import datetime
from typing import Optional
from uuid import uuid4

from api.models.models import Course, LearningPath, Lesson, UserCourseProgress, UserPathProgress
from api.schemas.course_schemas import CourseResponse, LearningPathResponse, LessonSummaryResponse
from api.schemas.user_progress_schemas import UserCourseProgressResponse, UserPathProgressResponse
from api.schemas.user_schemas import User


def iso_format(dt: datetime) -> str:
    """Format datetime as ISO string with Z suffix."""
    return dt.isoformat() + "Z"


def iso_or_none(dt: Optional[datetime]) -> Optional[str]:
    return iso_format(dt) if dt is not None else None


def new_id() -> str:
    return str(uuid4())


def display_name(current_user: User) -> str:
    """Get display name from user preferences or email."""
    prefs = current_user.preferences or {}
    name = None
    if isinstance(prefs, dict):
        name = prefs.get("name") or prefs.get("full_name")
    if isinstance(name, str) and name.strip():
        return name.strip()
    # fallback: email prefix
    return current_user.email.split("@", 1)[0]


def block_count(lesson: Lesson) -> int:
    content = lesson.content if isinstance(lesson.content, dict) else {}
    blocks = content.get("blocks")
    return len(blocks) if isinstance(blocks, list) else 0


def course_response(c: Course) -> CourseResponse:
    return CourseResponse(
        id=c.id,
        title=c.title,
        description=c.description or "",
        level=c.level.value if hasattr(c.level, "value") else str(c.level),
        created_at=iso_format(c.created_at),
        updated_at=iso_format(c.updated_at),
    )


def lesson_summary(lesson: Lesson, completed: Optional[set[str]] = None) -> LessonSummaryResponse:
    return LessonSummaryResponse(
        id=lesson.id,
        course_id=lesson.course_id,
        title=lesson.title,
        order_index=lesson.order_index,
        block_count=block_count(lesson),
        completed=lesson.id in (completed or set()),
    )


def path_response(p: LearningPath) -> LearningPathResponse:
    return LearningPathResponse(
        id=p.id,
        title=p.title,
        description=p.description or "",
        course_ids=list(p.course_ids or []),
        created_at=iso_format(p.created_at),
        updated_at=iso_format(p.updated_at),
    )


def course_progress_response(p: UserCourseProgress) -> UserCourseProgressResponse:
    return UserCourseProgressResponse(
        id=p.id,
        user_id=p.user_id,
        course_id=p.course_id,
        completed_lessons=list(p.completed_lessons or []),
        progress=int(p.progress or 0),
        last_accessed_at=iso_format(p.last_accessed_at),
        completed_at=iso_or_none(p.completed_at),
    )


def path_progress_response(p: UserPathProgress) -> UserPathProgressResponse:
    return UserPathProgressResponse(
        id=p.id,
        user_id=p.user_id,
        path_id=p.path_id,
        completed_courses=list(p.completed_courses or []),
        progress=int(p.progress or 0),
        last_accessed_at=iso_format(p.last_accessed_at),
        completed_at=iso_or_none(p.completed_at),
    )
