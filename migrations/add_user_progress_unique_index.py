"""
Migration script to add the unique (user_id, course_id) index on user_progress
and the (user_id, path_id) index on user_path_progress.

Databases created before the constraints existed may hold duplicate progress
rows; those are merged into the most recently accessed row first.
"""

import json
import math
import sqlite3
import os


def _merge_duplicates(cursor, user_id, course_id):
    cursor.execute(
        "SELECT id, completed_lessons FROM user_progress WHERE user_id = ? AND course_id = ? "
        "ORDER BY last_accessed_at DESC",
        (user_id, course_id),
    )
    rows = cursor.fetchall()
    keep_id = rows[0][0]
    merged = []
    for _, completed in rows:
        for lesson_id in json.loads(completed or "[]"):
            if lesson_id not in merged:
                merged.append(lesson_id)

    cursor.execute("SELECT COUNT(*) FROM lessons WHERE course_id = ?", (course_id,))
    total = cursor.fetchone()[0]
    progress = min(100, math.floor(len(merged) * 100 / total + 0.5)) if total else 0

    cursor.execute(
        "UPDATE user_progress SET completed_lessons = ?, progress = ? WHERE id = ?",
        (json.dumps(merged), progress, keep_id),
    )
    cursor.execute(
        "DELETE FROM user_progress WHERE user_id = ? AND course_id = ? AND id != ?",
        (user_id, course_id, keep_id),
    )


def run_migration():
    db_path = os.getenv("DATABASE_URL", "sqlite:///./lingo-path.db").replace("sqlite:///", "")
    conn = None
    try:
        conn = sqlite3.connect(db_path)
        cursor = conn.cursor()

        cursor.execute("SELECT name FROM sqlite_master WHERE type='table' AND name='user_progress'")
        if not cursor.fetchone():
            print("user_progress table does not exist. Skipping migration.")
            return

        cursor.execute(
            "SELECT user_id, course_id FROM user_progress GROUP BY user_id, course_id HAVING COUNT(*) > 1"
        )
        duplicates = cursor.fetchall()
        for user_id, course_id in duplicates:
            _merge_duplicates(cursor, user_id, course_id)
        if duplicates:
            print(f"Merged duplicate progress rows for {len(duplicates)} (user, course) pairs.")

        print("Creating unique progress indexes...")
        cursor.execute(
            "CREATE UNIQUE INDEX IF NOT EXISTS uq_user_progress_user_course "
            "ON user_progress(user_id, course_id)"
        )
        cursor.execute("SELECT name FROM sqlite_master WHERE type='table' AND name='user_path_progress'")
        if cursor.fetchone():
            cursor.execute(
                "CREATE UNIQUE INDEX IF NOT EXISTS uq_user_path_progress_user_path "
                "ON user_path_progress(user_id, path_id)"
            )

        conn.commit()
        print("✓ Migration completed successfully!")

    except sqlite3.Error as e:
        print(f"Error during migration: {e}")
        if conn:
            conn.rollback()
        raise
    finally:
        if conn:
            conn.close()


if __name__ == "__main__":
    run_migration()
