"""Unit tests for lesson block content models."""
import pytest
from pydantic import ValidationError

from lessons.blocks import (
    BlockType,
    LessonBlock,
    LessonContent,
    MultipleChoiceContent,
    PronunciationContent,
    SpellingChallengeContent,
    is_known_block_type,
    parse_block_content,
)


@pytest.mark.unit
class TestParseBlockContent:
    def test_multiple_choice_aliases(self):
        content = parse_block_content(
            "multiple-choice",
            {"question": "Q?", "options": ["a", "b"], "correctAnswer": "b"},
        )
        assert isinstance(content, MultipleChoiceContent)
        assert content.correct_answer == "b"

    def test_pronunciation_is_a_list(self):
        content = parse_block_content(
            "pronunciation",
            [{"word": "Cześć", "pronunciation": "cheshch", "audioUrl": "/a.mp3"}],
        )
        assert isinstance(content, PronunciationContent)
        assert content.root[0].audio_url == "/a.mp3"

    def test_spelling_requires_questions(self):
        with pytest.raises(ValidationError):
            parse_block_content("spelling-challenge", {"instructions": "Spell", "questions": []})

    def test_unknown_type_returns_raw_content(self):
        raw = {"anything": [1, 2, 3]}
        assert parse_block_content("matching-pairs", raw) is raw

    def test_known_types(self):
        assert all(is_known_block_type(t.value) for t in BlockType)
        assert not is_known_block_type("video")


@pytest.mark.unit
class TestLessonBlock:
    def test_content_must_match_type(self):
        with pytest.raises(ValidationError):
            LessonBlock(id="b1", type="multiple-choice", content={"question": "Q?"})

    def test_metadata_none_becomes_empty(self):
        block = LessonBlock(id="b1", type="recap", metadata=None, content={"words": []})
        assert block.metadata == {}

    def test_unknown_type_is_unsupported_but_valid(self):
        block = LessonBlock(id="b1", type="video", content={"url": "x"})
        assert block.supported is False
        assert block.typed_content() == {"url": "x"}

    def test_typed_content(self, lesson_content):
        spelling = lesson_content.blocks[3]
        typed = spelling.typed_content()
        assert isinstance(typed, SpellingChallengeContent)
        assert len(typed.questions) == 2


@pytest.mark.unit
class TestLessonContent:
    def test_sample_lesson_parses(self, lesson_content):
        assert lesson_content.type == "language-lesson"
        assert [b.type for b in lesson_content.blocks] == [
            "discovery", "pronunciation", "multiple-choice", "spelling-challenge", "recap",
        ]

    def test_duplicate_block_ids_rejected(self):
        block = {"id": "same", "type": "recap", "content": {"words": []}}
        with pytest.raises(ValidationError):
            LessonContent.model_validate({"blocks": [block, dict(block)]})

    def test_block_at_out_of_range(self, lesson_content):
        assert lesson_content.block_at(4).id == "block_5_recap"
        assert lesson_content.block_at(5) is None
        assert lesson_content.block_at(-1) is None

    def test_empty_lesson(self):
        content = LessonContent()
        assert content.blocks == []
        assert content.block_at(0) is None
