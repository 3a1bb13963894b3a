"""
Pytest configuration and shared fixtures for the test suite.
Ensures proper Python path and provides common fixtures for unit and integration tests.
"""
import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add project root and src to Python path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))
src_path = project_root / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


# ----- Sample lesson content (five blocks, Polish greetings) -----
def polish_lesson_content() -> dict:
    return {
        "type": "language-lesson",
        "blocks": [
            {
                "id": "block_1_discovery",
                "type": "discovery",
                "metadata": {"difficulty": "easy", "language": "Polish"},
                "content": {
                    "scenario": "You're meeting your new Polish friend, Ola, for the first time.",
                    "questions": [
                        {"word": "Cześć", "answer": "Hello / Hi"},
                        {"word": "Dziękuję", "answer": "Thank you"},
                    ],
                },
            },
            {
                "id": "block_2_pronunciation",
                "type": "pronunciation",
                "metadata": {"interactivity": "audio", "language": "Polish"},
                "content": [
                    {"word": "Cześć", "pronunciation": "cheshch", "audioUrl": "/audio/polish/czesc.mp3"},
                    {"word": "Dziękuję", "pronunciation": "jen-KOO-yeh"},
                ],
            },
            {
                "id": "block_3_choice",
                "type": "multiple-choice",
                "metadata": {"language": "Polish"},
                "content": {
                    "question": "How do you say 'Thank you'?",
                    "options": ["Cześć", "Dziękuję", "Proszę"],
                    "correctAnswer": "Dziękuję",
                },
            },
            {
                "id": "block_4_spelling",
                "type": "spelling-challenge",
                "metadata": {"language": "Polish"},
                "content": {
                    "instructions": "Select the correct spelling for each word.",
                    "questions": [
                        {
                            "question": "How do you spell 'Hello' in Polish?",
                            "options": ["Cześt", "Cześć", "Czesc"],
                            "correctAnswer": "Cześć",
                        },
                        {
                            "question": "How do you spell 'Thank you' in Polish?",
                            "options": ["Dzienkuje", "Dziękuję", "Dźękuję"],
                            "correctAnswer": "Dziękuję",
                        },
                    ],
                },
            },
            {
                "id": "block_5_recap",
                "type": "recap",
                "metadata": {"language": "Polish"},
                "content": {
                    "words": [
                        {"word": "Cześć", "meaning": "Hello / Hi", "pronunciation": "cheshch"},
                        {"word": "Dziękuję", "meaning": "Thank you", "pronunciation": "jen-KOO-yeh"},
                    ],
                    "challengePrompt": "Can you type out both words?",
                },
            },
        ],
    }


@pytest.fixture
def lesson_content_data() -> dict:
    return polish_lesson_content()


# ----- In-memory DB (for tests that need DB without touching real DB) -----
@pytest.fixture
def in_memory_engine():
    """Create an in-memory SQLite engine for tests (one shared connection)."""
    return create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
def db_session(in_memory_engine):
    """Create an in-memory database session. Uses api.config.Base for schema."""
    import api.models.models  # noqa: F401
    from api.config import Base
    Base.metadata.create_all(in_memory_engine)
    SessionLocal = sessionmaker(bind=in_memory_engine)
    session = SessionLocal()
    yield session
    session.close()


def seed_catalog(db) -> dict:
    """Polish course with three lessons, an empty course and a path over both."""
    from api.models.models import Course, CourseLevel, LearningPath, Lesson, User
    from api.utils.jwt import get_password_hash

    base = datetime(2025, 1, 1, 12, 0, 0)
    polish = Course(
        id="course-polish",
        title="Polish Basics",
        description="Greetings and courtesy",
        level=CourseLevel.BEGINNER,
        created_at=base,
        updated_at=base + timedelta(days=3),
    )
    empty = Course(
        id="course-empty",
        title="Polish Grammar",
        description="Coming soon",
        level=CourseLevel.INTERMEDIATE,
        created_at=base + timedelta(days=1),
        updated_at=base + timedelta(days=1),
    )
    db.add_all([polish, empty])
    lessons = [
        Lesson(id="lesson-1", course_id=polish.id, title="Greetings", order_index=0, content=polish_lesson_content()),
        Lesson(id="lesson-2", course_id=polish.id, title="Thanks", order_index=1, content=polish_lesson_content()),
        Lesson(id="lesson-3", course_id=polish.id, title="Goodbyes", order_index=2, content=polish_lesson_content()),
    ]
    db.add_all(lessons)
    path = LearningPath(
        id="path-polish",
        title="Polish from zero",
        description="Start here",
        course_ids=[empty.id, "course-missing", polish.id],
        created_at=base,
        updated_at=base,
    )
    db.add(path)
    user = User(email="learner@example.com", hashed_password=get_password_hash("secret123"), preferences={})
    db.add(user)
    db.commit()
    db.refresh(user)
    return {"course": polish, "empty_course": empty, "lessons": lessons, "path": path, "user": user}


@pytest.fixture
def seeded(db_session) -> dict:
    return seed_catalog(db_session)
