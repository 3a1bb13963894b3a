"""
Per-block interaction handlers.

One handler instance exists for the block that is currently shown; it is
recreated whenever the block becomes current again, so revisiting an
interactive block starts from a clean slate.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from typing import Any, Optional

from lessons.blocks import LessonBlock, MultipleChoiceContent, SpellingChallengeContent

logger = logging.getLogger(__name__)


class InteractionError(Exception):
    """An interaction was attempted that the current block does not accept."""


@dataclass(frozen=True)
class AnswerFeedback:
    block_id: str
    option: str
    correct: bool
    completes_block: bool  # True only on the answer that completes the block
    question_index: Optional[int] = None
    correct_answer: Optional[str] = None  # revealed after a wrong answer

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class BlockInteraction(ABC):
    """Interaction state of the current block."""

    kind: str = "base"

    def __init__(self, block: LessonBlock):
        self.block = block

    @property
    @abstractmethod
    def complete(self) -> bool:
        """Whether the block's completion condition has been met."""

    def select(self, option: str) -> AnswerFeedback:
        raise InteractionError(f"block {self.block.id!r} ({self.block.type}) does not accept answers")

    def next_question(self) -> int:
        raise InteractionError(f"block {self.block.id!r} ({self.block.type}) has no sub-questions")

    def proceed(self) -> None:
        raise InteractionError(f"block {self.block.id!r} ({self.block.type}) cannot be skipped")

    def to_state(self) -> dict[str, Any]:
        return {}

    def load_state(self, state: dict[str, Any]) -> None:
        return None


class PresentationInteraction(BlockInteraction):
    """Discovery, pronunciation and recap blocks: shown means done."""

    kind = "presentation"

    @property
    def complete(self) -> bool:
        return True


class MultipleChoiceInteraction(BlockInteraction):
    """
    Single question, retry until correct.

    Wrong answers give feedback and may be retried; once the correct option
    is chosen the answer is locked.
    """

    kind = "multiple_choice"

    def __init__(self, block: LessonBlock):
        super().__init__(block)
        self.content: MultipleChoiceContent = block.typed_content()
        self.selected: Optional[str] = None
        self.correct: Optional[bool] = None  # None = unanswered
        self.attempts = 0

    @property
    def complete(self) -> bool:
        return self.correct is True

    def select(self, option: str) -> AnswerFeedback:
        if self.correct:
            raise InteractionError(f"block {self.block.id!r} already answered correctly")
        if option not in self.content.options:
            raise InteractionError(f"{option!r} is not an option of block {self.block.id!r}")

        self.selected = option
        self.correct = option == self.content.correct_answer
        self.attempts += 1
        logger.debug("multiple choice block=%s attempt=%s correct=%s", self.block.id, self.attempts, self.correct)
        return AnswerFeedback(
            block_id=self.block.id,
            option=option,
            correct=self.correct,
            completes_block=self.correct,
            correct_answer=None if self.correct else self.content.correct_answer,
        )

    def to_state(self) -> dict[str, Any]:
        return {"selected": self.selected, "correct": self.correct, "attempts": self.attempts}

    def load_state(self, state: dict[str, Any]) -> None:
        self.selected = state.get("selected")
        self.correct = state.get("correct")
        self.attempts = int(state.get("attempts", 0))


class SpellingChallengeInteraction(BlockInteraction):
    """
    Sequence of sub-questions, one answer each.

    Each sub-question takes exactly one answer; after its feedback the learner
    moves on to the next one, never further and never back. The block is
    complete once feedback for the last sub-question has been shown, whether
    or not that answer was right.
    """

    kind = "spelling_challenge"

    def __init__(self, block: LessonBlock):
        super().__init__(block)
        self.content: SpellingChallengeContent = block.typed_content()
        self.question_index = 0
        self.selected: Optional[str] = None
        self.correct: Optional[bool] = None
        self.feedback_shown = False
        self.results: list[bool] = []

    @property
    def question_count(self) -> int:
        return len(self.content.questions)

    @property
    def is_last_question(self) -> bool:
        return self.question_index == self.question_count - 1

    @property
    def score(self) -> int:
        return sum(1 for r in self.results if r)

    @property
    def complete(self) -> bool:
        return self.feedback_shown and self.is_last_question

    def select(self, option: str) -> AnswerFeedback:
        if self.feedback_shown:
            raise InteractionError(
                f"question {self.question_index + 1} of block {self.block.id!r} was already answered"
            )
        question = self.content.questions[self.question_index]
        if option not in question.options:
            raise InteractionError(f"{option!r} is not an option of question {self.question_index + 1}")

        self.selected = option
        self.correct = option == question.correct_answer
        self.feedback_shown = True
        self.results.append(self.correct)
        return AnswerFeedback(
            block_id=self.block.id,
            option=option,
            correct=self.correct,
            completes_block=self.is_last_question,
            question_index=self.question_index,
            correct_answer=None if self.correct else question.correct_answer,
        )

    def next_question(self) -> int:
        if not self.feedback_shown:
            raise InteractionError("answer the current question before moving on")
        if self.is_last_question:
            raise InteractionError(f"block {self.block.id!r} has no further questions")
        self.question_index += 1
        self.selected = None
        self.correct = None
        self.feedback_shown = False
        return self.question_index

    def to_state(self) -> dict[str, Any]:
        return {
            "question_index": self.question_index,
            "question_count": self.question_count,
            "selected": self.selected,
            "correct": self.correct,
            "feedback_shown": self.feedback_shown,
            "results": list(self.results),
            "score": self.score,
        }

    def load_state(self, state: dict[str, Any]) -> None:
        self.question_index = int(state.get("question_index", 0))
        self.selected = state.get("selected")
        self.correct = state.get("correct")
        self.feedback_shown = bool(state.get("feedback_shown", False))
        self.results = [bool(r) for r in state.get("results", [])]


class UnsupportedInteraction(BlockInteraction):
    """Unknown block type: the learner may proceed past it by hand."""

    kind = "unsupported"

    def __init__(self, block: LessonBlock):
        super().__init__(block)
        self.proceeded = False

    @property
    def complete(self) -> bool:
        return self.proceeded

    def proceed(self) -> None:
        self.proceeded = True

    def to_state(self) -> dict[str, Any]:
        return {"proceeded": self.proceeded}

    def load_state(self, state: dict[str, Any]) -> None:
        self.proceeded = bool(state.get("proceeded", False))
