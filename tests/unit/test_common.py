"""Unit tests for common utils (pure functions only; DB-backed ones need integration)."""
from datetime import datetime
import pytest

from api.models.models import Course, CourseLevel, Lesson
from api.utils.common import block_count, course_response, display_name, iso_format, iso_or_none
from api.schemas.user_schemas import User


@pytest.mark.unit
class TestIsoFormat:
    def test_appends_z(self):
        dt = datetime(2025, 1, 15, 12, 30, 0)
        result = iso_format(dt)
        assert result.endswith("Z")
        assert "2025" in result and "01" in result

    def test_none(self):
        assert iso_or_none(None) is None


@pytest.mark.unit
class TestDisplayName:
    def test_preferences_name(self):
        user = User(id=1, email="u@example.com", preferences={"name": "Alice"})
        assert display_name(user) == "Alice"

    def test_preferences_full_name(self):
        user = User(id=1, email="u@example.com", preferences={"full_name": "Bob Smith"})
        assert display_name(user) == "Bob Smith"

    def test_fallback_email_prefix(self):
        user = User(id=1, email="ola@example.com", preferences=None)
        assert display_name(user) == "ola"

    def test_empty_prefs_fallback(self):
        user = User(id=1, email="test@test.com", preferences={})
        assert display_name(user) == "test"


@pytest.mark.unit
class TestBlockCount:
    def test_counts_blocks(self, lesson_content_data):
        lesson = Lesson(id="l", course_id="c", title="t", order_index=0, content=lesson_content_data)
        assert block_count(lesson) == 5

    def test_malformed_content(self):
        assert block_count(Lesson(id="l", course_id="c", title="t", order_index=0, content=None)) == 0
        assert block_count(Lesson(id="l", course_id="c", title="t", order_index=0, content={"blocks": "x"})) == 0


@pytest.mark.unit
def test_course_response_uses_level_value():
    now = datetime(2025, 1, 1)
    course = Course(id="c", title="Polish", description=None, level=CourseLevel.ADVANCED, created_at=now, updated_at=now)
    response = course_response(course)
    assert response.level == "Advanced"
    assert response.description == ""
