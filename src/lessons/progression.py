"""
Lesson progression state machine.

All changes to "which block is current" and "may the learner continue" go
through one pure transition function, ``reduce(state, event)``. It returns the
next state plus the effects the caller has to apply (position-token writes,
the lesson-completed signal).

States: InProgress(index, complete) -> InProgress(index + 1, recomputed) -> ...
-> Finished. Finished is terminal until a different lesson is entered.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Optional, Sequence, Union

from lessons.blocks import LessonBlock
from lessons.dispatch import DEFAULT_DISPATCHER, BlockDispatcher
from lessons.position import HistoryMode, encode_position, resolve_position

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressionState:
    lesson_id: Optional[str] = None
    block_ids: tuple[str, ...] = ()
    block_types: tuple[str, ...] = ()
    current_index: int = 0
    current_block_complete: bool = False
    finished: bool = False

    @property
    def block_count(self) -> int:
        return len(self.block_ids)

    @property
    def last_index(self) -> int:
        return max(0, self.block_count - 1)

    @property
    def current_block_id(self) -> Optional[str]:
        if not self.block_ids:
            return None
        return self.block_ids[self.current_index]

    @property
    def current_block_type(self) -> Optional[str]:
        if not self.block_types:
            return None
        return self.block_types[self.current_index]

    @property
    def is_last_block(self) -> bool:
        return self.current_index >= self.last_index

    @property
    def can_advance(self) -> bool:
        return self.current_block_complete and not self.finished

    def to_dict(self) -> dict[str, Any]:
        return {
            "lesson_id": self.lesson_id,
            "block_ids": list(self.block_ids),
            "block_types": list(self.block_types),
            "current_index": self.current_index,
            "current_block_complete": self.current_block_complete,
            "finished": self.finished,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProgressionState":
        return cls(
            lesson_id=data.get("lesson_id"),
            block_ids=tuple(data.get("block_ids") or ()),
            block_types=tuple(data.get("block_types") or ()),
            current_index=int(data.get("current_index", 0)),
            current_block_complete=bool(data.get("current_block_complete", False)),
            finished=bool(data.get("finished", False)),
        )


# -----------------------------------------------------------------------------
# Events
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class EnterLesson:
    lesson_id: str
    blocks: Sequence[LessonBlock] = field(default_factory=tuple)
    position_token: Optional[str] = None


@dataclass(frozen=True)
class ExternalPositionChange:
    position_token: Optional[str]


@dataclass(frozen=True)
class BlockCompleted:
    block_id: str


@dataclass(frozen=True)
class Advance:
    pass


Event = Union[EnterLesson, ExternalPositionChange, BlockCompleted, Advance]


# -----------------------------------------------------------------------------
# Effects
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class PositionWrite:
    token: str
    mode: HistoryMode


@dataclass(frozen=True)
class LessonCompleted:
    lesson_id: str


Effect = Union[PositionWrite, LessonCompleted]


@dataclass(frozen=True)
class Transition:
    state: ProgressionState
    effects: tuple[Effect, ...] = ()


# -----------------------------------------------------------------------------
# Transition function
# -----------------------------------------------------------------------------

def _enter_block(state: ProgressionState, index: int, dispatcher: BlockDispatcher) -> ProgressionState:
    """Move to ``index`` and recompute completion from the block's policy."""
    if state.block_count == 0:
        return replace(state, current_index=0, current_block_complete=False)
    block_type = state.block_types[index]
    complete = dispatcher.resolve(block_type).auto_completes
    return replace(state, current_index=index, current_block_complete=complete)


def _reduce_enter(state: ProgressionState, event: EnterLesson, dispatcher: BlockDispatcher) -> Transition:
    fresh = ProgressionState(
        lesson_id=event.lesson_id,
        block_ids=tuple(b.id for b in event.blocks),
        block_types=tuple(b.type for b in event.blocks),
    )

    if state.lesson_id is not None and state.lesson_id != event.lesson_id:
        logger.debug("lesson changed %s -> %s, resetting to block 0", state.lesson_id, event.lesson_id)
        target = encode_position(0)
        effects = () if event.position_token == target else (PositionWrite(target, HistoryMode.REPLACE),)
        return Transition(_enter_block(fresh, 0, dispatcher), effects)

    if state.finished:
        return Transition(state)

    position = resolve_position(event.position_token, fresh.block_count)
    next_state = _enter_block(fresh, position.index, dispatcher)
    if position.canonical:
        return Transition(next_state)
    return Transition(next_state, (PositionWrite(encode_position(position.index), HistoryMode.REPLACE),))


def reduce(state: ProgressionState, event: Event, dispatcher: BlockDispatcher = DEFAULT_DISPATCHER) -> Transition:
    """Apply ``event`` to ``state``. Never mutates ``state``."""
    if isinstance(event, EnterLesson):
        return _reduce_enter(state, event, dispatcher)

    if state.finished:
        logger.debug("lesson %s finished, ignoring %s", state.lesson_id, type(event).__name__)
        return Transition(state)

    if isinstance(event, ExternalPositionChange):
        position = resolve_position(event.position_token, state.block_count)
        next_state = _enter_block(state, position.index, dispatcher)
        if position.canonical:
            return Transition(next_state)
        return Transition(next_state, (PositionWrite(encode_position(position.index), HistoryMode.REPLACE),))

    if isinstance(event, BlockCompleted):
        if event.block_id != state.current_block_id or state.current_block_complete:
            # Late callback from a block the learner already moved past.
            logger.debug(
                "ignoring completion block=%s current=%s complete=%s",
                event.block_id, state.current_block_id, state.current_block_complete,
            )
            return Transition(state)
        return Transition(replace(state, current_block_complete=True))

    if isinstance(event, Advance):
        if not state.current_block_complete:
            return Transition(state)
        if state.current_index < state.last_index:
            next_state = _enter_block(state, state.current_index + 1, dispatcher)
            return Transition(next_state, (PositionWrite(encode_position(next_state.current_index), HistoryMode.PUSH),))
        logger.info("lesson %s finished", state.lesson_id)
        return Transition(replace(state, finished=True), (LessonCompleted(state.lesson_id),))

    raise TypeError(f"Unknown progression event: {event!r}")
