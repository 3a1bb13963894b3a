"""
Lesson and lesson session schemas.
"""

from enum import Enum
from pydantic import BaseModel
from typing import Any, Optional

from lessons.blocks import LessonBlock, LessonContent
from lessons.position import HistoryMode


class LessonResponse(BaseModel):
    id: str
    course_id: str
    title: str
    order_index: int
    content: LessonContent
    created_at: str
    updated_at: str


class SessionEventType(str, Enum):
    """Learner actions a lesson session accepts."""
    SELECT_OPTION = "select_option"      # answer the current question
    NEXT_QUESTION = "next_question"      # spelling challenge: move to the next sub-question
    PROCEED = "proceed"                  # skip past an unsupported block
    COMPLETE_BLOCK = "complete_block"    # raw completion signal from a block
    ADVANCE = "advance"                  # "Continue" / "Finish Lesson"
    NAVIGATE = "navigate"                # position token changed (back/forward)


class StartSessionRequest(BaseModel):
    position_token: Optional[str] = None  # e.g. "#block=2"


class SessionEventRequest(BaseModel):
    type: SessionEventType
    option: Optional[str] = None
    block_id: Optional[str] = None
    position_token: Optional[str] = None


class EffectResponse(BaseModel):
    kind: str  # position_write | lesson_completed
    token: Optional[str] = None
    mode: Optional[HistoryMode] = None
    lesson_id: Optional[str] = None


class NotificationLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


class Notification(BaseModel):
    level: NotificationLevel
    message: str


class SessionResponse(BaseModel):
    session_id: str
    lesson_id: str
    course_id: str
    block_count: int
    current_index: int
    current_block: Optional[LessonBlock] = None
    current_block_supported: bool = True
    current_block_complete: bool
    can_advance: bool
    advance_label: Optional[str] = None  # "Continue" | "Finish Lesson"
    finished: bool
    position_token: Optional[str] = None
    interaction: Optional[dict[str, Any]] = None
    feedback: Optional[dict[str, Any]] = None
    effects: list[EffectResponse] = []
    notifications: list[Notification] = []
    progress: Optional[int] = None  # course progress after a saved completion
