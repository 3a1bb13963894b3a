"""
User progress schemas (course and learning path progress records, completion mutation).
"""

from pydantic import BaseModel
from typing import Optional


class UserCourseProgressResponse(BaseModel):
    """Per-(user, course) progress record."""
    id: str
    user_id: int
    course_id: str
    completed_lessons: list[str]
    progress: int
    last_accessed_at: str
    completed_at: Optional[str] = None  # ISO when every lesson is done


class UserPathProgressResponse(BaseModel):
    """Per-(user, path) progress record. Read-only."""
    id: str
    user_id: int
    path_id: str
    completed_courses: list[str]
    progress: int
    last_accessed_at: str
    completed_at: Optional[str] = None


class MarkLessonCompletedRequest(BaseModel):
    lesson_id: str
    course_id: str


class MarkLessonCompletedResponse(BaseModel):
    success: bool
    progress: int
