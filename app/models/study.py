"""Study records read by the statistics views.

Bookmarks, flashcards, quiz attempts and study sessions are written by other
flows; this service only counts and sums them.
"""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text

from app.database import Base


class Bookmark(Base):
    """Marked position inside a lecture recording."""

    __tablename__ = "bookmark"

    id = Column(Integer, primary_key=True, autoincrement=True)
    lecture_id = Column(String(36), ForeignKey("lecture.id"), nullable=False, index=True)
    position_seconds = Column(Integer, nullable=False, default=0)
    label = Column(String(255), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class Flashcard(Base):
    """Question/answer card generated from a lecture."""

    __tablename__ = "flashcard"

    id = Column(Integer, primary_key=True, autoincrement=True)
    lecture_id = Column(String(36), ForeignKey("lecture.id"), nullable=False, index=True)
    front = Column(Text, nullable=False)
    back = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class QuizAttempt(Base):
    """Single answered quiz question."""

    __tablename__ = "quiz_attempt"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    lecture_id = Column(String(36), ForeignKey("lecture.id"), nullable=True, index=True)
    is_correct = Column(Boolean, nullable=False, default=False)
    attempted_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class StudySession(Base):
    """Timed study session."""

    __tablename__ = "study_session"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    lecture_id = Column(String(36), ForeignKey("lecture.id"), nullable=True, index=True)
    started_at = Column(DateTime, nullable=False, index=True)
    duration = Column(Integer, nullable=False, default=0)  # seconds
