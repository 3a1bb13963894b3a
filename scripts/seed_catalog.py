#!/usr/bin/env python3
"""
Seed the catalog with a sample Polish course and learning path.

Run: python scripts/seed_catalog.py
     python scripts/seed_catalog.py --reset

Idempotent: existing rows with the sample ids are left alone unless --reset
is given, which drops and recreates every table first.
"""
from __future__ import annotations

import argparse
import sys
from datetime import datetime
from pathlib import Path

_project_root = Path(__file__).resolve().parent.parent
for _path in (_project_root, _project_root / "src"):
    if str(_path) not in sys.path:
        sys.path.insert(0, str(_path))

COURSE_ID = "polish-basics"
PATH_ID = "polish-from-zero"

GREETINGS_LESSON = {
    "type": "language-lesson",
    "blocks": [
        {
            "id": "block_1_discovery",
            "type": "discovery",
            "metadata": {"difficulty": "easy", "language": "Polish"},
            "content": {
                "scenario": (
                    "You're meeting your new Polish friend, Ola, for the first time. "
                    "How do you greet her and thank her when she offers you coffee?"
                ),
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
                {
                    "word": "Cześć",
                    "pronunciation": "cheshch",
                    "mnemonic": 'Imagine saying "cheese" but ending with "shhh"',
                    "audioUrl": "/audio/polish/czesc.mp3",
                },
                {
                    "word": "Dziękuję",
                    "pronunciation": "jen-KOO-yeh",
                    "mnemonic": 'Think "Jen, cool, yay!" when thanking someone.',
                    "audioUrl": "/audio/polish/dziekuje.mp3",
                },
            ],
        },
        {
            "id": "block_3_multiple_choice",
            "type": "multiple-choice",
            "metadata": {"language": "Polish"},
            "content": {
                "question": "How do you say 'Thank you'?",
                "options": ["Cześć", "Dziękuję", "Proszę"],
                "correctAnswer": "Dziękuję",
            },
        },
        {
            "id": "block_4_spell_check",
            "type": "spelling-challenge",
            "metadata": {"language": "Polish"},
            "content": {
                "instructions": "Select the correct spelling for each word.",
                "questions": [
                    {
                        "question": "How do you spell 'Hello' in Polish?",
                        "options": ["Cześt", "Cześć", "Czesc", "Czezt"],
                        "correctAnswer": "Cześć",
                    },
                    {
                        "question": "How do you spell 'Thank you' in Polish?",
                        "options": ["Dzienkuje", "Dziękuję", "Dźękuję", "Dzienkuję"],
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
                    {
                        "word": "Cześć",
                        "meaning": "Hello / Hi",
                        "pronunciation": "cheshch",
                        "spellingTips": "Watch out for 'ś' and 'ć': they soften the sound.",
                    },
                    {
                        "word": "Dziękuję",
                        "meaning": "Thank you",
                        "pronunciation": "jen-KOO-yeh",
                        "spellingTips": "Look closely at the nasal 'ę'.",
                    },
                ],
                "challengePrompt": "Without looking, can you type out both words with the correct Polish letters?",
            },
        },
    ],
}


def seed(db) -> bool:
    """Insert the sample rows; returns False when they already exist."""
    from api.models.models import Course, CourseLevel, LearningPath, Lesson
    from lessons.blocks import LessonContent

    if db.query(Course).filter(Course.id == COURSE_ID).first():
        return False

    # Fail before writing anything if the sample lesson is invalid.
    LessonContent.model_validate(GREETINGS_LESSON)

    now = datetime.utcnow()
    db.add(Course(
        id=COURSE_ID,
        title="Polish Basics",
        description="Greet people and say thank you in Polish.",
        level=CourseLevel.BEGINNER,
        created_at=now,
        updated_at=now,
    ))
    db.add(Lesson(
        id=f"{COURSE_ID}-greetings",
        course_id=COURSE_ID,
        title="Greetings and thanks",
        order_index=0,
        content=GREETINGS_LESSON,
    ))
    db.add(LearningPath(
        id=PATH_ID,
        title="Polish from zero",
        description="Everything a beginner needs for a first conversation.",
        course_ids=[COURSE_ID],
    ))
    db.commit()
    return True


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed the catalog with a sample Polish course.")
    parser.add_argument("--reset", action="store_true", help="Drop and recreate all tables first")
    args = parser.parse_args()

    from api.config import SessionLocal, create_db, reset_db

    if args.reset:
        reset_db()
    else:
        create_db()

    db = SessionLocal()
    try:
        if seed(db):
            print(f"Seeded course {COURSE_ID!r} and path {PATH_ID!r}.")
        else:
            print(f"Course {COURSE_ID!r} already present. Nothing to do.")
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
