"""
API data models. Single import surface for DB entities.

DB entities (api.models.models):
- User, Course, Lesson, LearningPath, UserCourseProgress, UserPathProgress,
  LessonSession
"""

from api.models.models import (
    CourseLevel,
    User,
    Course,
    Lesson,
    LearningPath,
    UserCourseProgress,
    UserPathProgress,
    LessonSession,
)

__all__ = [
    "CourseLevel",
    "User",
    "Course",
    "Lesson",
    "LearningPath",
    "UserCourseProgress",
    "UserPathProgress",
    "LessonSession",
]
