"""Lecture lifecycle service: creation, audio attachment, metadata and processing state."""

from collections.abc import Callable
from datetime import date, datetime
from typing import Any

from sqlalchemy.orm import Session

from app.config import get_settings
from app.errors import InvalidStateError, NotFoundError, QuotaExceededError, ValidationError
from app.models.category import Category
from app.models.lecture import (
    RECORDING_QUALITIES,
    STATUS_COMPLETED,
    STATUS_FAILED,
    STATUS_PROCESSING,
    STATUS_RECORDING,
    Lecture,
)
from app.services.quota import QuotaLedger, get_quota_ledger

ALLOWED_AUDIO_FORMATS = ("mp3", "m4a", "wav")
ALLOWED_AUDIO_MIME_TYPES = {
    "audio/mpeg",
    "audio/mp3",
    "audio/mp4",
    "audio/x-m4a",
    "audio/wav",
    "audio/x-wav",
    "audio/wave",
}
MAX_TITLE_LENGTH = 255
EDITABLE_FIELDS = ("title", "description", "category_id", "notes", "is_favorite", "playback_position")

# Status can only move forward
ALLOWED_TRANSITIONS = {
    STATUS_RECORDING: {STATUS_PROCESSING},
    STATUS_PROCESSING: {STATUS_COMPLETED, STATUS_FAILED},
    STATUS_COMPLETED: set(),
    STATUS_FAILED: set(),
}


def parse_date(value: Any) -> date | None:
    """Parse an ISO date (or datetime) string. Returns None if it is not one."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


class LectureService:
    """Owns the lecture state machine: recording -> processing -> completed | failed."""

    def __init__(self, quota_ledger: QuotaLedger | None = None) -> None:
        self.quota_ledger = quota_ledger or get_quota_ledger()

    # --- validation helpers ---

    def _check_title(self, title: Any, errors: dict[str, list[str]]) -> None:
        if not isinstance(title, str) or not title.strip():
            errors["title"] = ["The title field is required."]
        elif len(title) > MAX_TITLE_LENGTH:
            errors["title"] = [f"The title may not be greater than {MAX_TITLE_LENGTH} characters."]

    def _check_category(self, db: Session, user_id: int, category_id: Any, errors: dict[str, list[str]]) -> None:
        if category_id is None:
            return
        if isinstance(category_id, int) and not isinstance(category_id, bool):
            owned = db.query(Category.id).filter(Category.id == category_id, Category.user_id == user_id).first()
            if owned:
                return
        errors["category_id"] = ["The selected category is invalid."]

    # --- queries ---

    def get_lecture(
        self, db: Session, lecture_id: str, user_id: int, include_deleted: bool = False
    ) -> Lecture | None:
        """Get a single lecture by ID, scoped to its owner."""
        query = db.query(Lecture).filter(Lecture.id == lecture_id, Lecture.user_id == user_id)
        if not include_deleted:
            query = query.filter(Lecture.deleted_at.is_(None))
        return query.first()

    def get_owned_lecture(self, db: Session, lecture_id: str, user_id: int) -> Lecture:
        """Like get_lecture, but raises NotFoundError instead of returning None."""
        lecture = self.get_lecture(db, lecture_id, user_id)
        if lecture is None:
            raise NotFoundError("Lecture not found")
        return lecture

    def list_lectures(
        self, db: Session, user_id: int, limit: int = 20, offset: int = 0, include_deleted: bool = False
    ) -> tuple[list[Lecture], int]:
        """Get a page of the user's lectures, newest first. Returns (items, total_count)."""
        query = db.query(Lecture).filter(Lecture.user_id == user_id)
        if not include_deleted:
            query = query.filter(Lecture.deleted_at.is_(None))
        total = query.count()
        items = query.order_by(Lecture.created_at.desc()).offset(offset).limit(limit).all()
        return items, total

    # --- commands ---

    def create_lecture(
        self,
        db: Session,
        user_id: int,
        title: Any,
        recording_date: Any,
        description: str | None = None,
        category_id: int | None = None,
    ) -> Lecture:
        """Create a lecture waiting for its audio (status 'recording')."""
        errors: dict[str, list[str]] = {}
        self._check_title(title, errors)

        parsed_date = parse_date(recording_date)
        if recording_date is None or (isinstance(recording_date, str) and not recording_date.strip()):
            errors["recording_date"] = ["The recording date field is required."]
        elif parsed_date is None:
            errors["recording_date"] = ["The recording date is not a valid date."]

        self._check_category(db, user_id, category_id, errors)
        if errors:
            raise ValidationError(errors)

        lecture = Lecture(
            user_id=user_id,
            category_id=category_id,
            title=title,
            description=description,
            audio_url="",
            recording_date=parsed_date,
            status=STATUS_RECORDING,
        )
        db.add(lecture)
        db.commit()
        db.refresh(lecture)
        return lecture

    def attach_audio(
        self,
        db: Session,
        lecture_id: str,
        user_id: int,
        file_size: int,
        audio_format: str | None,
        persist: Callable[[], str],
        quality: str | None = None,
        duration: int | None = None,
        content_type: str | None = None,
    ) -> Lecture:
        """Attach audio to a lecture in 'recording' state and move it to 'processing'.

        Checks run in order: ownership, lifecycle state, input validation,
        then quota admission. `persist` stores the bytes and returns the
        audio url; it is only called once quota has been reserved. Any
        failure after the reservation rolls the whole transaction back.
        """
        lecture = self.get_owned_lecture(db, lecture_id, user_id)
        if lecture.status != STATUS_RECORDING:
            raise InvalidStateError("This lecture already has an audio file")

        settings = get_settings()
        audio_format = (audio_format or "").lower().lstrip(".")
        quality = quality or "auto"
        errors: dict[str, list[str]] = {}
        if not audio_format and file_size <= 0:
            errors["audio_file"] = ["The audio file field is required."]
        elif audio_format not in ALLOWED_AUDIO_FORMATS:
            errors["audio_file"] = [
                f"Unsupported audio format '{audio_format}'. Allowed: {', '.join(ALLOWED_AUDIO_FORMATS)}"
            ]
        elif content_type and content_type not in ALLOWED_AUDIO_MIME_TYPES and not content_type.startswith("audio/"):
            errors["audio_file"] = [f"Invalid content type '{content_type}'. Must be an audio file."]
        elif file_size <= 0:
            errors["audio_file"] = ["The audio file is empty."]
        elif file_size > settings.max_upload_bytes:
            errors["audio_file"] = [
                f"File too large ({file_size // (1024 * 1024)}MB). Maximum: {settings.MAX_UPLOAD_SIZE_MB}MB"
            ]
        if quality not in RECORDING_QUALITIES:
            errors["recording_quality"] = [f"Recording quality must be one of: {', '.join(RECORDING_QUALITIES)}"]
        if duration is not None and duration < 0:
            errors["duration"] = ["Duration must not be negative."]
        if errors:
            raise ValidationError(errors)

        if not self.quota_ledger.reserve(db, user_id, file_size):
            raise QuotaExceededError("Storage limit exceeded")

        # Claim the lecture; a concurrent upload may have moved it on already
        claimed = (
            db.query(Lecture)
            .filter(Lecture.id == lecture.id, Lecture.status == STATUS_RECORDING)
            .update({Lecture.status: STATUS_PROCESSING}, synchronize_session=False)
        )
        if not claimed:
            db.rollback()
            raise InvalidStateError("This lecture already has an audio file")

        try:
            audio_url = persist()
            lecture.audio_url = audio_url
            lecture.audio_format = audio_format
            lecture.file_size = file_size
            lecture.duration = int(duration or 0)
            lecture.recording_quality = quality
            lecture.status = STATUS_PROCESSING
            lecture.processing_progress = 0
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(lecture)
        return lecture

    def update_metadata(self, db: Session, lecture_id: str, user_id: int, fields: dict[str, Any]) -> Lecture:
        """Update editable metadata. Status and audio fields are never touched here."""
        lecture = self.get_owned_lecture(db, lecture_id, user_id)
        changes = {key: value for key, value in fields.items() if key in EDITABLE_FIELDS}

        errors: dict[str, list[str]] = {}
        if "title" in changes:
            self._check_title(changes["title"], errors)
        if "category_id" in changes:
            self._check_category(db, user_id, changes["category_id"], errors)
        for key in ("description", "notes"):
            if key in changes and changes[key] is not None and not isinstance(changes[key], str):
                errors[key] = [f"The {key} must be a string."]
        if "is_favorite" in changes and not isinstance(changes["is_favorite"], bool):
            errors["is_favorite"] = ["The is favorite field must be true or false."]
        if "playback_position" in changes:
            position = changes["playback_position"]
            if position is None:
                changes["playback_position"] = 0
            elif not isinstance(position, int) or isinstance(position, bool) or position < 0:
                errors["playback_position"] = ["The playback position must be a non-negative integer."]
        if errors:
            raise ValidationError(errors)

        for key, value in changes.items():
            setattr(lecture, key, value)
        db.commit()
        db.refresh(lecture)
        return lecture

    def toggle_favorite(self, db: Session, lecture_id: str, user_id: int) -> Lecture:
        """Flip the favorite flag."""
        lecture = self.get_owned_lecture(db, lecture_id, user_id)
        lecture.is_favorite = not lecture.is_favorite
        db.commit()
        db.refresh(lecture)
        return lecture

    def record_play(self, db: Session, lecture_id: str, user_id: int, now: datetime) -> Lecture:
        """Count a playback and stamp it with `now`."""
        lecture = self.get_owned_lecture(db, lecture_id, user_id)
        db.query(Lecture).filter(Lecture.id == lecture.id).update(
            {Lecture.play_count: Lecture.play_count + 1, Lecture.last_played_at: now},
            synchronize_session=False,
        )
        db.commit()
        db.refresh(lecture)
        return lecture

    def soft_delete(self, db: Session, lecture_id: str, user_id: int, now: datetime) -> None:
        """Move a lecture to the trash. The row is kept and storage usage is not released."""
        lecture = self.get_owned_lecture(db, lecture_id, user_id)
        lecture.deleted_at = now
        db.commit()

    # --- processing collaborator transitions ---

    def _get_for_processing(self, db: Session, lecture_id: str) -> Lecture:
        lecture = db.query(Lecture).filter(Lecture.id == lecture_id, Lecture.deleted_at.is_(None)).first()
        if lecture is None:
            raise NotFoundError("Lecture not found")
        return lecture

    def _transition(self, lecture: Lecture, target: str) -> None:
        if target not in ALLOWED_TRANSITIONS.get(lecture.status, set()):
            raise InvalidStateError(f"Cannot move lecture from '{lecture.status}' to '{target}'")
        lecture.status = target

    def record_progress(self, db: Session, lecture_id: str, progress: int) -> Lecture:
        """Report processing progress (0-100). Progress never goes backwards."""
        lecture = self._get_for_processing(db, lecture_id)
        if lecture.status != STATUS_PROCESSING:
            raise InvalidStateError(f"Cannot record progress for lecture with status '{lecture.status}'")
        if not 0 <= progress <= 100:
            raise ValidationError({"processing_progress": ["Progress must be between 0 and 100."]})
        if progress < lecture.processing_progress:
            raise InvalidStateError("Processing progress cannot decrease")
        lecture.processing_progress = progress
        db.commit()
        db.refresh(lecture)
        return lecture

    def complete_processing(self, db: Session, lecture_id: str, duration: int | None = None) -> Lecture:
        """Mark processing finished, optionally with the extracted duration."""
        lecture = self._get_for_processing(db, lecture_id)
        self._transition(lecture, STATUS_COMPLETED)
        lecture.processing_progress = 100
        if duration is not None:
            lecture.duration = duration
        db.commit()
        db.refresh(lecture)
        return lecture

    def fail_processing(self, db: Session, lecture_id: str) -> Lecture:
        """Mark processing failed."""
        lecture = self._get_for_processing(db, lecture_id)
        self._transition(lecture, STATUS_FAILED)
        db.commit()
        db.refresh(lecture)
        return lecture


_lecture_service: LectureService | None = None


def get_lecture_service() -> LectureService:
    """Get singleton lecture service instance."""
    global _lecture_service
    if _lecture_service is None:
        _lecture_service = LectureService()
    return _lecture_service
