"""
Lesson block content schemas.

Defines Pydantic models for the typed block variants a lesson is built from:
- Discovery (scenario + word/answer pairs)
- Pronunciation (ordered word list)
- Multiple choice
- Spelling challenge (sequence of sub-questions)
- Recap

Wire names are camelCase (``correctAnswer``); attributes are snake_case.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, RootModel, ValidationError, field_validator, model_validator


class BlockType(str, Enum):
    """Known block types. Other strings are allowed and treated as unsupported."""
    DISCOVERY = "discovery"
    PRONUNCIATION = "pronunciation"
    MULTIPLE_CHOICE = "multiple-choice"
    SPELLING_CHALLENGE = "spelling-challenge"
    RECAP = "recap"


class _ContentModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# -----------------------------------------------------------------------------
# Block content variants
# -----------------------------------------------------------------------------

class DiscoveryQuestion(_ContentModel):
    word: str
    answer: str


class DiscoveryContent(_ContentModel):
    scenario: str
    questions: list[DiscoveryQuestion] = []


class PronunciationItem(_ContentModel):
    word: str
    pronunciation: str
    mnemonic: Optional[str] = None
    audio_url: Optional[str] = Field(default=None, alias="audioUrl")


class PronunciationContent(RootModel[list[PronunciationItem]]):
    """Ordered list of words to pronounce."""


class MultipleChoiceContent(_ContentModel):
    question: str
    options: list[str] = Field(..., min_length=1)
    correct_answer: str = Field(..., alias="correctAnswer")


class SpellingQuestion(_ContentModel):
    question: str  # e.g. "How do you spell 'Hello' in Polish?"
    options: list[str] = Field(..., min_length=1)
    correct_answer: str = Field(..., alias="correctAnswer")


class SpellingChallengeContent(_ContentModel):
    instructions: str
    questions: list[SpellingQuestion] = Field(..., min_length=1)


class RecapWord(_ContentModel):
    word: str
    meaning: str
    pronunciation: str
    spelling_tips: Optional[str] = Field(default=None, alias="spellingTips")


class RecapContent(_ContentModel):
    words: list[RecapWord] = []
    challenge_prompt: Optional[str] = Field(default=None, alias="challengePrompt")


CONTENT_MODELS: dict[str, type[BaseModel]] = {
    BlockType.DISCOVERY.value: DiscoveryContent,
    BlockType.PRONUNCIATION.value: PronunciationContent,
    BlockType.MULTIPLE_CHOICE.value: MultipleChoiceContent,
    BlockType.SPELLING_CHALLENGE.value: SpellingChallengeContent,
    BlockType.RECAP.value: RecapContent,
}


def is_known_block_type(block_type: str) -> bool:
    return block_type in CONTENT_MODELS


def parse_block_content(block_type: str, content: Any) -> Any:
    """
    Validate ``content`` against the shape declared by ``block_type``.

    Returns the typed model for a known type and the raw content, untouched,
    for an unknown one. Raises ``pydantic.ValidationError`` on a mismatch.
    """
    model = CONTENT_MODELS.get(block_type)
    if model is None:
        return content
    return model.model_validate(content)


# -----------------------------------------------------------------------------
# Block and lesson content
# -----------------------------------------------------------------------------

class LessonBlock(BaseModel):
    id: str
    type: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    content: Any = None

    @field_validator("metadata", mode="before")
    @classmethod
    def _default_metadata(cls, value: Any) -> Any:
        return {} if value is None else value

    @model_validator(mode="after")
    def _check_content_shape(self) -> "LessonBlock":
        try:
            parse_block_content(self.type, self.content)
        except ValidationError as e:
            raise ValueError(
                f"block {self.id!r} content does not match type {self.type!r}: {e.error_count()} error(s)"
            ) from e
        return self

    @property
    def supported(self) -> bool:
        return is_known_block_type(self.type)

    def typed_content(self) -> Any:
        """Content parsed into its variant model (raw content for unknown types)."""
        return parse_block_content(self.type, self.content)


class LessonContent(BaseModel):
    type: str = "standard"  # e.g. "language-lesson"
    blocks: list[LessonBlock] = []

    @model_validator(mode="after")
    def _unique_block_ids(self) -> "LessonContent":
        seen: set[str] = set()
        for block in self.blocks:
            if block.id in seen:
                raise ValueError(f"duplicate block id {block.id!r}")
            seen.add(block.id)
        return self

    def block_at(self, index: int) -> Optional[LessonBlock]:
        if 0 <= index < len(self.blocks):
            return self.blocks[index]
        return None
