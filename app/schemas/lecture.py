"""Pydantic schemas for lecture endpoints.

Request bodies are loosely typed; field rules live in the lecture service so
that API and service callers get the same validation errors.
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel


class LectureCreateRequest(BaseModel):
    title: Any = None
    description: str | None = None
    category_id: int | None = None
    recording_date: Any = None


class LectureUpdateRequest(BaseModel):
    title: Any = None
    description: Any = None
    category_id: Any = None
    notes: Any = None
    is_favorite: Any = None
    playback_position: Any = None


class LectureResponse(BaseModel):
    id: str
    category_id: int | None
    title: str
    description: str | None
    notes: str | None
    audio_url: str
    audio_format: str | None
    file_size: int
    duration: int
    recording_date: date
    recording_quality: str
    status: str
    processing_progress: int
    is_favorite: bool
    play_count: int
    last_played_at: datetime | None
    playback_position: int
    is_public: bool
    share_token: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class LectureListResponse(BaseModel):
    items: list[LectureResponse]
    total: int


class FavoriteResponse(BaseModel):
    is_favorite: bool


class PlayResponse(BaseModel):
    play_count: int
    last_played_at: datetime | None
