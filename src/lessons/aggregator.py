"""
Progress aggregation - derived values over course, lesson and progress records.

Provides:
- Next actionable lesson and course status
- Completion percentage
- Idempotent completed-set merge
- Path course ordering and action labels

``None`` inputs mean "not loaded yet" and are kept distinct from empty ones.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Protocol, Sequence, TypeVar


class CourseStatus(str, Enum):
    LOADING = "loading"          # inputs missing, or no lessons
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class OrderedLesson(Protocol):
    id: str
    order_index: int


@dataclass(frozen=True)
class LessonRef:
    id: str
    order_index: int


@dataclass(frozen=True)
class NextLesson:
    status: CourseStatus
    next_lesson_id: Optional[str] = None

    @property
    def actionable(self) -> bool:
        return self.next_lesson_id is not None


def order_lessons(lessons: Iterable[OrderedLesson]) -> list[OrderedLesson]:
    """Total order by (order_index, id) so equal indexes never share a position."""
    return sorted(lessons, key=lambda lesson: (lesson.order_index, str(lesson.id)))


def compute_next_lesson(
    lessons: Optional[Sequence[OrderedLesson]],
    completed: Optional[Iterable[str]],
) -> NextLesson:
    """
    Decide what the learner should open next.

    - lessons or completed not loaded, or no lessons -> loading, no lesson
    - nothing completed -> not_started, first lesson
    - some completed -> in_progress, first uncompleted lesson
    - all completed -> completed, first lesson (for review)
    """
    if lessons is None or completed is None or len(lessons) == 0:
        return NextLesson(CourseStatus.LOADING, None)

    ordered = order_lessons(lessons)
    completed_set = set(completed)
    if not completed_set:
        return NextLesson(CourseStatus.NOT_STARTED, ordered[0].id)

    for lesson in ordered:
        if lesson.id not in completed_set:
            return NextLesson(CourseStatus.IN_PROGRESS, lesson.id)
    return NextLesson(CourseStatus.COMPLETED, ordered[0].id)


def compute_course_progress(completed_count: int, total_lessons: int) -> Optional[int]:
    """
    Completion percentage, rounded half up and capped at 100.

    Returns None when the course has no lessons: the update is rejected
    rather than dividing by zero.
    """
    if total_lessons <= 0:
        return None
    percent = math.floor(completed_count * 100 / total_lessons + 0.5)
    return max(0, min(100, percent))


def merge_completed(existing: Optional[Iterable[str]], lesson_id: str) -> list[str]:
    """Add ``lesson_id`` to the completed list; duplicates are dropped, order kept."""
    merged: list[str] = []
    for lid in list(existing or []) + [lesson_id]:
        if lid not in merged:
            merged.append(lid)
    return merged


T = TypeVar("T")


def order_courses(course_ids: Sequence[str], courses: Iterable[T], key=lambda c: c.id) -> list[T]:
    """Put fetched courses back into path order; ids with no course are skipped."""
    by_id = {key(c): c for c in courses}
    return [by_id[cid] for cid in course_ids if cid in by_id]


def course_action_label(next_lesson: NextLesson, *, authenticated: bool, lesson_count: Optional[int]) -> str:
    """Text for the course page's main button."""
    if lesson_count == 0:
        return "No lessons yet"
    if not authenticated:
        return "Start Course (Preview)"
    if next_lesson.status == CourseStatus.COMPLETED:
        return "Review Course"
    if next_lesson.status == CourseStatus.IN_PROGRESS:
        return "Continue Course"
    if next_lesson.status == CourseStatus.NOT_STARTED:
        return "Start Course"
    return "Loading"


def path_action_label(*, authenticated: bool, has_progress: bool) -> str:
    if not authenticated:
        return "Sign in to track progress"
    return "Continue Path" if has_progress else "Start Path"
