from api.config import Base
from sqlalchemy import Column, Integer, String, JSON, DateTime, ForeignKey, Index, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import datetime
from enum import Enum


class CourseLevel(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True)
    hashed_password = Column(String)
    preferences = Column(JSON)


class Course(Base):
    __tablename__ = "courses"
    id = Column(String, primary_key=True, index=True)  # uuid
    title = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    level = Column(SQLEnum(CourseLevel, values_callable=lambda e: [m.value for m in e]), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    lessons = relationship("Lesson", backref="course", cascade="all, delete-orphan")


class Lesson(Base):
    __tablename__ = "lessons"
    id = Column(String, primary_key=True, index=True)  # uuid
    course_id = Column(String, ForeignKey("courses.id"), index=True, nullable=False)
    title = Column(String, nullable=False)
    order_index = Column(Integer, nullable=False)  # position in course sequence
    content = Column(JSON, nullable=False)  # {"type": str, "blocks": [LessonBlock]}
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (Index("ix_lessons_course_order", "course_id", "order_index"),)


class LearningPath(Base):
    __tablename__ = "learning_paths"
    id = Column(String, primary_key=True, index=True)  # uuid
    title = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    course_ids = Column(JSON, nullable=False)  # ordered list[str]; canonical display order
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class UserCourseProgress(Base):
    __tablename__ = "user_progress"
    id = Column(String, primary_key=True, index=True)  # uuid
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    course_id = Column(String, ForeignKey("courses.id"), index=True, nullable=False)
    completed_lessons = Column(JSON, nullable=False)  # list[str], deduplicated
    progress = Column(Integer, default=0, nullable=False)  # 0-100
    last_accessed_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    completed_at = Column(DateTime, nullable=True)

    __table_args__ = (UniqueConstraint("user_id", "course_id", name="uq_user_progress_user_course"),)

    user = relationship("User", backref="course_progress", foreign_keys=[user_id])


class UserPathProgress(Base):
    __tablename__ = "user_path_progress"
    id = Column(String, primary_key=True, index=True)  # uuid
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    path_id = Column(String, ForeignKey("learning_paths.id"), index=True, nullable=False)
    completed_courses = Column(JSON, nullable=False)  # list[str]
    progress = Column(Integer, default=0, nullable=False)
    last_accessed_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    completed_at = Column(DateTime, nullable=True)

    __table_args__ = (UniqueConstraint("user_id", "path_id", name="uq_user_path_progress_user_path"),)


class LessonSession(Base):
    __tablename__ = "lesson_sessions"
    id = Column(String, primary_key=True, index=True)  # uuid
    lesson_id = Column(String, ForeignKey("lessons.id"), index=True, nullable=False)
    course_id = Column(String, ForeignKey("courses.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=True)  # None = anonymous preview
    state = Column(JSON, nullable=True)  # LessonPlayer snapshot
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    lesson = relationship("Lesson", foreign_keys=[lesson_id])
