"""Lecture API endpoints."""

import logging
import os
from datetime import datetime
from pathlib import Path

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import CurrentUser, get_current_user
from app.errors import QuotaExceededError
from app.rate_limit import limiter
from app.schemas.lecture import (
    FavoriteResponse,
    LectureCreateRequest,
    LectureListResponse,
    LectureResponse,
    LectureUpdateRequest,
    PlayResponse,
)
from app.services.lecture import get_lecture_service
from app.services.storage import get_audio_storage_service

logger = logging.getLogger("lecture_vault")

router = APIRouter(prefix="/api/v1/lectures", tags=["Lectures"])


def _upload_size(upload: UploadFile) -> int:
    """Size of a spooled upload, measured without reading it into memory."""
    if upload.size is not None:
        return upload.size
    upload.file.seek(0, os.SEEK_END)
    size = upload.file.tell()
    upload.file.seek(0)
    return size


@router.get("/", response_model=LectureListResponse)
def list_lectures(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> LectureListResponse:
    """List the current user's lectures, newest first."""
    items, total = get_lecture_service().list_lectures(db, user.user_id, limit=limit, offset=offset)
    return LectureListResponse(
        items=[LectureResponse.model_validate(lecture) for lecture in items],
        total=total,
    )


@router.post("/", response_model=LectureResponse, status_code=201)
def create_lecture(
    body: LectureCreateRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> LectureResponse:
    """Create a lecture. Audio is attached in a second step."""
    lecture = get_lecture_service().create_lecture(
        db,
        user.user_id,
        title=body.title,
        recording_date=body.recording_date,
        description=body.description,
        category_id=body.category_id,
    )
    return LectureResponse.model_validate(lecture)


@router.post("/{lecture_id}/audio", response_model=LectureResponse)
@limiter.limit("20/minute")
def upload_audio(
    request: Request,
    lecture_id: str,
    audio_file: UploadFile | None = File(None),
    recording_quality: str | None = Form(None),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> LectureResponse:
    """Upload the audio recording for a lecture and start processing."""
    service = get_lecture_service()
    storage = get_audio_storage_service()

    file_size = _upload_size(audio_file) if audio_file else 0
    audio_format = Path(audio_file.filename or "").suffix.lower().lstrip(".") if audio_file else ""

    stored: list[str] = []

    def persist() -> str:
        audio_url = storage.save_audio(user.user_id, audio_file.file, audio_format)
        stored.append(audio_url)
        return audio_url

    try:
        lecture = service.attach_audio(
            db,
            lecture_id,
            user.user_id,
            file_size=file_size,
            audio_format=audio_format,
            persist=persist,
            quality=recording_quality,
            content_type=audio_file.content_type if audio_file else None,
        )
    except QuotaExceededError:
        logger.warning("Storage limit exceeded: user %s tried to add %d bytes", user.user_id, file_size)
        raise
    except Exception:
        # Rolled back after the file was written
        for audio_url in stored:
            storage.delete_audio(audio_url)
        raise

    logger.info("Audio attached to lecture %s (%d bytes, %s)", lecture.id, lecture.file_size, lecture.audio_format)
    return LectureResponse.model_validate(lecture)


@router.get("/{lecture_id}", response_model=LectureResponse)
def get_lecture(
    lecture_id: str,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> LectureResponse:
    """Get a single lecture by ID."""
    lecture = get_lecture_service().get_owned_lecture(db, lecture_id, user.user_id)
    return LectureResponse.model_validate(lecture)


@router.patch("/{lecture_id}", response_model=LectureResponse)
def update_lecture(
    lecture_id: str,
    body: LectureUpdateRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> LectureResponse:
    """Update lecture metadata (title, notes, favorite, playback position, ...)."""
    lecture = get_lecture_service().update_metadata(
        db, lecture_id, user.user_id, body.model_dump(exclude_unset=True)
    )
    return LectureResponse.model_validate(lecture)


@router.delete("/{lecture_id}")
def delete_lecture(
    lecture_id: str,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    """Move a lecture to the trash."""
    get_lecture_service().soft_delete(db, lecture_id, user.user_id, now=datetime.utcnow())
    return {"detail": "Lecture moved to trash"}


@router.post("/{lecture_id}/favorite", response_model=FavoriteResponse)
def toggle_favorite(
    lecture_id: str,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> FavoriteResponse:
    """Toggle the favorite flag."""
    lecture = get_lecture_service().toggle_favorite(db, lecture_id, user.user_id)
    return FavoriteResponse(is_favorite=lecture.is_favorite)


@router.post("/{lecture_id}/play", response_model=PlayResponse)
def play_lecture(
    lecture_id: str,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PlayResponse:
    """Record a playback."""
    lecture = get_lecture_service().record_play(db, lecture_id, user.user_id, now=datetime.utcnow())
    return PlayResponse(play_count=lecture.play_count, last_played_at=lecture.last_played_at)
