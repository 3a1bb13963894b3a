"""
API schemas package. Import from submodules or from this package.

Example:
    from api.schemas import CourseResponse, SessionResponse
    from api.schemas.course_schemas import CourseResponse
"""

from api.schemas.auth_schemas import (
    AuthTokenPayload,
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    RegisterRequest,
    RegisterResponse,
)
from api.schemas.user_schemas import User, MeResponse
from api.schemas.course_schemas import (
    CourseResponse,
    CourseListResponse,
    CoursesByIdsRequest,
    LessonSummaryResponse,
    LessonListResponse,
    CourseOverviewResponse,
    LearningPathResponse,
    LearningPathListResponse,
    PathCourseItem,
    PathOverviewResponse,
)
from api.schemas.user_progress_schemas import (
    UserCourseProgressResponse,
    UserPathProgressResponse,
    MarkLessonCompletedRequest,
    MarkLessonCompletedResponse,
)
from api.schemas.lesson_schemas import (
    LessonResponse,
    SessionEventType,
    StartSessionRequest,
    SessionEventRequest,
    EffectResponse,
    NotificationLevel,
    Notification,
    SessionResponse,
)

__all__ = [
    # auth
    "AuthTokenPayload",
    "LoginRequest",
    "LoginResponse",
    "LogoutResponse",
    "RegisterRequest",
    "RegisterResponse",
    # user
    "User",
    "MeResponse",
    # catalog
    "CourseResponse",
    "CourseListResponse",
    "CoursesByIdsRequest",
    "LessonSummaryResponse",
    "LessonListResponse",
    "CourseOverviewResponse",
    "LearningPathResponse",
    "LearningPathListResponse",
    "PathCourseItem",
    "PathOverviewResponse",
    # user progress
    "UserCourseProgressResponse",
    "UserPathProgressResponse",
    "MarkLessonCompletedRequest",
    "MarkLessonCompletedResponse",
    # lessons
    "LessonResponse",
    "SessionEventType",
    "StartSessionRequest",
    "SessionEventRequest",
    "EffectResponse",
    "NotificationLevel",
    "Notification",
    "SessionResponse",
]
