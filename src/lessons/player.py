"""
LessonPlayer - one lesson view.

Owns the progression state of a single lesson plus the interaction state of
the block currently shown, and applies the effects produced by the state
machine to its collaborators:
- on_position(token, mode): mirror the current block in the position token
- on_lesson_complete(lesson_id): persist the completion (may raise)
- on_error(message): show a transient error to the learner

A player is created fresh for each lesson view; nothing is shared between
instances.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from lessons.blocks import LessonBlock, LessonContent
from lessons.dispatch import DEFAULT_DISPATCHER, BlockDispatcher
from lessons.interactions import AnswerFeedback, BlockInteraction, InteractionError
from lessons.position import HistoryMode
from lessons.progression import (
    Advance,
    BlockCompleted,
    Effect,
    EnterLesson,
    Event,
    ExternalPositionChange,
    LessonCompleted,
    PositionWrite,
    ProgressionState,
    reduce,
)

logger = logging.getLogger(__name__)

PositionWriter = Callable[[str, HistoryMode], None]
CompletionSink = Callable[[str], Any]
ErrorNotifier = Callable[[str], None]


class LessonPlayer:
    def __init__(
        self,
        lesson_id: str,
        content: LessonContent,
        *,
        dispatcher: BlockDispatcher = DEFAULT_DISPATCHER,
        on_position: Optional[PositionWriter] = None,
        on_lesson_complete: Optional[CompletionSink] = None,
        on_error: Optional[ErrorNotifier] = None,
    ):
        self.lesson_id = lesson_id
        self.content = content
        self.dispatcher = dispatcher
        self.on_position = on_position
        self.on_lesson_complete = on_lesson_complete
        self.on_error = on_error

        self.state = ProgressionState()
        self.interaction: Optional[BlockInteraction] = None
        self.position_token: Optional[str] = None
        self.completion_result: Any = None
        self.persist_error: Optional[str] = None

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def current_block(self) -> Optional[LessonBlock]:
        if self.state.lesson_id is None:
            return None
        return self.content.block_at(self.state.current_index)

    @property
    def current_index(self) -> int:
        return self.state.current_index

    @property
    def current_block_complete(self) -> bool:
        return self.state.current_block_complete

    @property
    def finished(self) -> bool:
        return self.state.finished

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self, position_token: Optional[str] = None) -> list[Effect]:
        """First load of the lesson; restores the position from the token if valid."""
        self.position_token = position_token
        return self._dispatch(EnterLesson(self.lesson_id, tuple(self.content.blocks), position_token))

    def load_lesson(self, lesson_id: str, content: LessonContent) -> list[Effect]:
        """Switch this view to another lesson. A different lesson always starts at block 0."""
        self.lesson_id = lesson_id
        self.content = content
        self.completion_result = None
        self.persist_error = None
        return self._dispatch(EnterLesson(lesson_id, tuple(content.blocks), self.position_token))

    @classmethod
    def restore(cls, lesson_id: str, content: LessonContent, snapshot: dict[str, Any], **kwargs: Any) -> "LessonPlayer":
        """Rebuild a player from ``snapshot()``; falls back to a fresh start if the lesson changed shape."""
        player = cls(lesson_id, content, **kwargs)
        state = ProgressionState.from_dict(snapshot.get("progression") or {})
        if state.lesson_id != lesson_id or state.block_ids != tuple(b.id for b in content.blocks):
            logger.warning("lesson %s changed since snapshot, restarting", lesson_id)
            player.start(snapshot.get("position_token"))
            return player

        player.state = state
        player.position_token = snapshot.get("position_token")
        player.persist_error = snapshot.get("persist_error")
        player.interaction = player._create_interaction()
        if player.interaction is not None and snapshot.get("interaction"):
            player.interaction.load_state(snapshot["interaction"])
        return player

    def snapshot(self) -> dict[str, Any]:
        return {
            "progression": self.state.to_dict(),
            "interaction": self.interaction.to_state() if self.interaction else None,
            "position_token": self.position_token,
            "persist_error": self.persist_error,
        }

    # -------------------------------------------------------------------------
    # Learner actions
    # -------------------------------------------------------------------------

    def navigate(self, position_token: Optional[str]) -> list[Effect]:
        """Back/forward navigation changed the position token."""
        self.position_token = position_token
        return self._dispatch(ExternalPositionChange(position_token))

    def select(self, option: str) -> AnswerFeedback:
        feedback = self._require_interaction().select(option)
        if feedback.completes_block:
            self._dispatch(BlockCompleted(feedback.block_id))
        return feedback

    def next_question(self) -> int:
        return self._require_interaction().next_question()

    def proceed(self) -> list[Effect]:
        """Force past an unsupported block."""
        interaction = self._require_interaction()
        interaction.proceed()
        return self._dispatch(BlockCompleted(interaction.block.id))

    def complete_block(self, block_id: str) -> list[Effect]:
        """
        Completion signal from a block. Ignored unless it names the current,
        incomplete block and that block's own completion condition holds.
        """
        if self.interaction is None or not self.interaction.complete:
            logger.debug("ignoring completion block=%s, interaction not complete", block_id)
            return []
        return self._dispatch(BlockCompleted(block_id))

    def advance(self) -> list[Effect]:
        return self._dispatch(Advance())

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _require_interaction(self) -> BlockInteraction:
        if self.state.finished:
            raise InteractionError(f"lesson {self.lesson_id!r} is already finished")
        if self.interaction is None:
            raise InteractionError(f"lesson {self.lesson_id!r} has no current block")
        return self.interaction

    def _create_interaction(self) -> Optional[BlockInteraction]:
        block = self.current_block
        if block is None:
            return None
        return self.dispatcher.resolve(block.type).create(block)

    def _dispatch(self, event: Event) -> list[Effect]:
        previous = self.state
        transition = reduce(previous, event, self.dispatcher)
        self.state = transition.state

        entered = isinstance(event, (EnterLesson, ExternalPositionChange))
        moved = (
            self.state.current_index != previous.current_index
            or self.state.lesson_id != previous.lesson_id
        )
        if self.state is not previous and (entered or moved):
            self.interaction = self._create_interaction()

        for effect in transition.effects:
            self._apply(effect)
        return list(transition.effects)

    def _apply(self, effect: Effect) -> None:
        if isinstance(effect, PositionWrite):
            self.position_token = effect.token
            if self.on_position is not None:
                self.on_position(effect.token, effect.mode)
        elif isinstance(effect, LessonCompleted):
            self._persist_completion(effect.lesson_id)

    def _persist_completion(self, lesson_id: str) -> None:
        if self.on_lesson_complete is None:
            return
        try:
            self.completion_result = self.on_lesson_complete(lesson_id)
        except Exception as e:
            # The finished state stands; the learner only gets told.
            logger.exception("saving completion failed lesson=%s", lesson_id)
            self.persist_error = str(e) or type(e).__name__
            if self.on_error is not None:
                self.on_error(f"Error saving progress: {self.persist_error}")
