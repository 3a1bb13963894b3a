"""
Unit test fixtures. Pure core tests need no DB; service tests use the
in-memory db_session from the root conftest.
"""
import pytest

from lessons.blocks import LessonContent


@pytest.fixture
def lesson_content(lesson_content_data) -> LessonContent:
    return LessonContent.model_validate(lesson_content_data)


@pytest.fixture
def block_ids(lesson_content) -> list[str]:
    return [b.id for b in lesson_content.blocks]
