"""
Catalog schemas: courses, lessons, learning paths.
"""

from pydantic import BaseModel, Field
from typing import Optional

from lessons.aggregator import CourseStatus


class CourseResponse(BaseModel):
    id: str
    title: str
    description: str
    level: str  # Beginner | Intermediate | Advanced
    created_at: str
    updated_at: str


class CourseListResponse(BaseModel):
    courses: list[CourseResponse]


class CoursesByIdsRequest(BaseModel):
    course_ids: list[str] = Field(..., max_length=200)


class LessonSummaryResponse(BaseModel):
    id: str
    course_id: str
    title: str
    order_index: int
    block_count: int
    completed: bool = False


class LessonListResponse(BaseModel):
    lessons: list[LessonSummaryResponse]


class CourseOverviewResponse(BaseModel):
    """Everything the course page needs: course, timeline, caller's progress, next step."""
    course: CourseResponse
    lessons: list[LessonSummaryResponse]
    status: CourseStatus
    next_lesson_id: Optional[str] = None
    progress: int = 0  # 0-100
    action_label: str


class LearningPathResponse(BaseModel):
    id: str
    title: str
    description: str
    course_ids: list[str]
    created_at: str
    updated_at: str


class LearningPathListResponse(BaseModel):
    paths: list[LearningPathResponse]


class PathCourseItem(BaseModel):
    position: int  # 1-based, path order
    course: CourseResponse
    completed: bool


class PathOverviewResponse(BaseModel):
    path: LearningPathResponse
    courses: list[PathCourseItem]
    progress: int = 0
    action_label: str
