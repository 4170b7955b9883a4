"""Lecture model."""

import secrets
import uuid
from datetime import datetime

from sqlalchemy import BigInteger, Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text

from app.database import Base

STATUS_RECORDING = "recording"
STATUS_PROCESSING = "processing"
STATUS_COMPLETED = "completed"
STATUS_FAILED = "failed"

RECORDING_QUALITIES = ("auto", "standard", "high")


def _new_share_token() -> str:
    return secrets.token_urlsafe(24)


class Lecture(Base):
    """A recorded lecture and its audio descriptor."""

    __tablename__ = "lecture"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("category.id"), nullable=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    # Audio descriptor, empty while status == recording
    audio_url = Column(Text, nullable=False, default="")
    audio_format = Column(String(10), nullable=True)
    file_size = Column(BigInteger, nullable=False, default=0)
    duration = Column(Integer, nullable=False, default=0)  # seconds

    recording_date = Column(Date, nullable=False)
    recording_quality = Column(String(16), nullable=False, default="auto")
    status = Column(String(32), nullable=False, default=STATUS_RECORDING, index=True)  # recording, processing, completed, failed
    processing_progress = Column(Integer, nullable=False, default=0)

    is_favorite = Column(Boolean, nullable=False, default=False)
    play_count = Column(Integer, nullable=False, default=0)
    last_played_at = Column(DateTime, nullable=True)
    playback_position = Column(Integer, nullable=False, default=0)  # seconds

    is_public = Column(Boolean, nullable=False, default=False)
    share_token = Column(String(64), nullable=False, unique=True, default=_new_share_token)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    deleted_at = Column(DateTime, nullable=True)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def has_audio(self) -> bool:
        return bool(self.audio_url)
