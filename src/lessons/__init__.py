"""
Lessons core - block content, lesson progression and progress aggregation.

This package provides:
- Block content models (discovery, pronunciation, multiple-choice,
  spelling-challenge, recap)
- Block dispatch: per-type interaction handler and completion policy
- The lesson progression state machine and the LessonPlayer driving it
- Progress aggregation: next lesson, completion percentage
"""

from .blocks import (
    BlockType,
    DiscoveryContent,
    PronunciationContent,
    MultipleChoiceContent,
    SpellingChallengeContent,
    RecapContent,
    LessonBlock,
    LessonContent,
    parse_block_content,
)

from .dispatch import (
    BlockDispatcher,
    BlockPolicy,
    DEFAULT_DISPATCHER,
    build_dispatcher,
)

from .interactions import (
    AnswerFeedback,
    BlockInteraction,
    InteractionError,
)

from .position import (
    HistoryMode,
    decode_position,
    encode_position,
)

from .progression import (
    ProgressionState,
    EnterLesson,
    ExternalPositionChange,
    BlockCompleted,
    Advance,
    PositionWrite,
    LessonCompleted,
    Transition,
    reduce,
)

from .player import LessonPlayer

from .aggregator import (
    CourseStatus,
    LessonRef,
    NextLesson,
    compute_next_lesson,
    compute_course_progress,
    merge_completed,
    order_courses,
    order_lessons,
)

__all__ = [
    # Blocks
    "BlockType",
    "DiscoveryContent",
    "PronunciationContent",
    "MultipleChoiceContent",
    "SpellingChallengeContent",
    "RecapContent",
    "LessonBlock",
    "LessonContent",
    "parse_block_content",
    # Dispatch
    "BlockDispatcher",
    "BlockPolicy",
    "DEFAULT_DISPATCHER",
    "build_dispatcher",
    "AnswerFeedback",
    "BlockInteraction",
    "InteractionError",
    # Position
    "HistoryMode",
    "decode_position",
    "encode_position",
    # Progression
    "ProgressionState",
    "EnterLesson",
    "ExternalPositionChange",
    "BlockCompleted",
    "Advance",
    "PositionWrite",
    "LessonCompleted",
    "Transition",
    "reduce",
    "LessonPlayer",
    # Aggregation
    "CourseStatus",
    "LessonRef",
    "NextLesson",
    "compute_next_lesson",
    "compute_course_progress",
    "merge_completed",
    "order_courses",
    "order_lessons",
]
