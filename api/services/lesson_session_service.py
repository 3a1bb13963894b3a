"""
Lesson session service: a server-side LessonPlayer per lesson view.

The player snapshot is stored on the LessonSession row between requests, so
each event request restores the player, applies one learner action and
writes the snapshot back.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session as DBSession

from api.models.models import LessonSession
from api.schemas.lesson_schemas import (
    EffectResponse,
    Notification,
    NotificationLevel,
    SessionEventRequest,
    SessionEventType,
    SessionResponse,
)
from api.schemas.user_schemas import User
from api.services.catalog_service import get_lesson_by_id, load_lesson_content
from api.services.progress_service import mark_lesson_completed
from api.utils.common import new_id
from lessons.interactions import AnswerFeedback
from lessons.player import LessonPlayer
from lessons.progression import Effect, LessonCompleted, PositionWrite

logger = logging.getLogger(__name__)

ANONYMOUS_FINISH_MESSAGE = "Lesson finished! Sign in to save your progress."
SAVED_FINISH_MESSAGE = "Lesson completed!"


def _effect_response(effect: Effect) -> EffectResponse:
    if isinstance(effect, PositionWrite):
        return EffectResponse(kind="position_write", token=effect.token, mode=effect.mode)
    if isinstance(effect, LessonCompleted):
        return EffectResponse(kind="lesson_completed", lesson_id=effect.lesson_id)
    raise TypeError(f"unknown effect {type(effect).__name__}")


class LessonSessionService:
    """Start, read and drive lesson sessions."""

    def __init__(self, db: DBSession):
        self.db = db
        self.notifications: list[Notification] = []

    # -------------------------------------------------------------------------
    # Player wiring
    # -------------------------------------------------------------------------

    def _notify(self, level: NotificationLevel, message: str) -> None:
        self.notifications.append(Notification(level=level, message=message))

    def _completion_sink(self, user: Optional[User], course_id: str):
        def sink(lesson_id: str):
            if user is None:
                # Preview mode: finishing is local only.
                self._notify(NotificationLevel.INFO, ANONYMOUS_FINISH_MESSAGE)
                return None
            result = mark_lesson_completed(self.db, user.id, lesson_id, course_id)
            self._notify(NotificationLevel.SUCCESS, SAVED_FINISH_MESSAGE)
            return result

        return sink

    def _player_kwargs(self, user: Optional[User], course_id: str) -> dict:
        return {
            "on_lesson_complete": self._completion_sink(user, course_id),
            "on_error": lambda message: self._notify(NotificationLevel.ERROR, message),
        }

    def _load_record(self, session_id: str, user: Optional[User]) -> LessonSession:
        record = self.db.query(LessonSession).filter(LessonSession.id == session_id).first()
        # Sessions owned by a user are invisible to everyone else.
        if record is None or (record.user_id is not None and (user is None or user.id != record.user_id)):
            raise HTTPException(status_code=404, detail="Session not found")
        return record

    def _restore(self, record: LessonSession, user: Optional[User]) -> LessonPlayer:
        lesson = get_lesson_by_id(self.db, record.lesson_id)
        if lesson is None:
            raise HTTPException(status_code=404, detail="Lesson not found")
        content = load_lesson_content(lesson)
        kwargs = self._player_kwargs(user, record.course_id)
        if record.state:
            return LessonPlayer.restore(lesson.id, content, record.state, **kwargs)
        player = LessonPlayer(lesson.id, content, **kwargs)
        player.start()
        return player

    def _save(self, record: LessonSession, player: LessonPlayer) -> None:
        record.state = player.snapshot()
        record.updated_at = datetime.utcnow()
        self.db.add(record)
        self.db.commit()

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def start(self, lesson_id: str, user: Optional[User], position_token: Optional[str] = None) -> SessionResponse:
        lesson = get_lesson_by_id(self.db, lesson_id)
        if lesson is None:
            raise HTTPException(status_code=404, detail="Lesson not found")
        content = load_lesson_content(lesson)

        player = LessonPlayer(lesson.id, content, **self._player_kwargs(user, lesson.course_id))
        effects = player.start(position_token)

        record = LessonSession(
            id=new_id(),
            lesson_id=lesson.id,
            course_id=lesson.course_id,
            user_id=user.id if user else None,
        )
        self._save(record, player)
        logger.info(
            "started lesson session id=%s lesson=%s user=%s index=%s",
            record.id, lesson.id, record.user_id, player.current_index,
        )
        return self._response(record, player, effects=effects)

    def get(self, session_id: str, user: Optional[User]) -> SessionResponse:
        record = self._load_record(session_id, user)
        player = self._restore(record, user)
        return self._response(record, player)

    def apply(self, session_id: str, user: Optional[User], event: SessionEventRequest) -> SessionResponse:
        """Apply one learner action; InteractionError propagates to the caller."""
        record = self._load_record(session_id, user)
        player = self._restore(record, user)

        effects: list[Effect] = []
        feedback: Optional[AnswerFeedback] = None

        if event.type == SessionEventType.SELECT_OPTION:
            if event.option is None:
                raise HTTPException(status_code=400, detail="option is required")
            feedback = player.select(event.option)
        elif event.type == SessionEventType.NEXT_QUESTION:
            player.next_question()
        elif event.type == SessionEventType.PROCEED:
            effects = player.proceed()
        elif event.type == SessionEventType.COMPLETE_BLOCK:
            if not event.block_id:
                raise HTTPException(status_code=400, detail="block_id is required")
            effects = player.complete_block(event.block_id)
        elif event.type == SessionEventType.ADVANCE:
            effects = player.advance()
        elif event.type == SessionEventType.NAVIGATE:
            effects = player.navigate(event.position_token)

        self._save(record, player)
        logger.debug(
            "session event id=%s type=%s index=%s finished=%s",
            record.id, event.type.value, player.current_index, player.finished,
        )
        return self._response(record, player, effects=effects, feedback=feedback)

    # -------------------------------------------------------------------------
    # Response
    # -------------------------------------------------------------------------

    def _response(
        self,
        record: LessonSession,
        player: LessonPlayer,
        effects: Optional[list[Effect]] = None,
        feedback: Optional[AnswerFeedback] = None,
    ) -> SessionResponse:
        state = player.state
        block = player.current_block
        interaction = None
        if player.interaction is not None and not state.finished:
            interaction = {"kind": player.interaction.kind, **player.interaction.to_state()}

        advance_label = None
        if not state.finished and state.block_count:
            advance_label = "Finish Lesson" if state.is_last_block else "Continue"

        result = player.completion_result
        return SessionResponse(
            session_id=record.id,
            lesson_id=record.lesson_id,
            course_id=record.course_id,
            block_count=state.block_count,
            current_index=state.current_index,
            current_block=block,
            current_block_supported=block.supported if block is not None else True,
            current_block_complete=state.current_block_complete,
            can_advance=state.can_advance,
            advance_label=advance_label,
            finished=state.finished,
            position_token=player.position_token,
            interaction=interaction,
            feedback=feedback.to_dict() if feedback else None,
            effects=[_effect_response(e) for e in effects or []],
            notifications=list(self.notifications),
            progress=result.progress if result is not None else None,
        )
