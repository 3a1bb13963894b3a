"""
Progress service: the lesson-completion mutation.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from api.models.models import Lesson, UserCourseProgress
from api.schemas.user_progress_schemas import MarkLessonCompletedResponse
from api.services.catalog_service import get_course_by_id, get_lesson_by_id, get_user_course_progress
from api.utils.common import new_id
from api.utils.logger import log_request
from lessons.aggregator import compute_course_progress, merge_completed

logger = logging.getLogger(__name__)


def _apply_completion(record: UserCourseProgress, completed: list[str], progress: int, now: datetime) -> None:
    record.completed_lessons = completed
    record.progress = progress
    record.last_accessed_at = now
    if progress == 100 and record.completed_at is None:
        record.completed_at = now


def _save(db: Session, existing: Optional[UserCourseProgress], user_id: int, course_id: str,
          completed: list[str], progress: int, now: datetime) -> None:
    if existing is not None:
        _apply_completion(existing, completed, progress, now)
        db.add(existing)
    else:
        record = UserCourseProgress(id=new_id(), user_id=user_id, course_id=course_id)
        _apply_completion(record, completed, progress, now)
        db.add(record)
    db.commit()


def mark_lesson_completed(db: Session, user_id: int, lesson_id: str, course_id: str) -> MarkLessonCompletedResponse:
    """
    Add ``lesson_id`` to the caller's completed set for ``course_id``.

    Idempotent. The first completion for a (user, course) pair creates the
    progress record; later ones patch it. The percentage is recomputed from
    the course's current lesson count. Read-then-write, last write wins.
    """
    with log_request(logger, f"mark_lesson_completed user={user_id} lesson={lesson_id}"):
        if get_course_by_id(db, course_id) is None:
            raise HTTPException(status_code=404, detail="Course not found")
        lesson = get_lesson_by_id(db, lesson_id)
        if lesson is None or lesson.course_id != course_id:
            raise HTTPException(status_code=404, detail="Lesson not found in course")

        existing = get_user_course_progress(db, user_id, course_id)
        total_lessons = db.query(Lesson).filter(Lesson.course_id == course_id).count()
        completed = merge_completed(existing.completed_lessons if existing else [], lesson_id)
        progress = compute_course_progress(len(completed), total_lessons)
        if progress is None:
            logger.warning("course %s has no lessons, progress unchanged", course_id)
            return MarkLessonCompletedResponse(success=True, progress=existing.progress if existing else 0)

        now = datetime.utcnow()
        try:
            _save(db, existing, user_id, course_id, completed, progress, now)
        except IntegrityError:
            # Another request inserted the (user, course) record between our read and insert.
            db.rollback()
            existing = get_user_course_progress(db, user_id, course_id)
            if existing is None:
                raise
            completed = merge_completed(existing.completed_lessons, lesson_id)
            progress = compute_course_progress(len(completed), total_lessons)
            try:
                _save(db, existing, user_id, course_id, completed, progress, now)
            except SQLAlchemyError:
                db.rollback()
                raise
        except SQLAlchemyError:
            db.rollback()
            raise

        logger.info(
            "%s progress user=%s course=%s progress=%s",
            "updated" if existing is not None else "inserted", user_id, course_id, progress,
        )
        return MarkLessonCompletedResponse(success=True, progress=progress)
