"""Statistics service: read-only study and storage summaries for a user."""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from app.errors import ValidationError
from app.models.lecture import Lecture
from app.models.study import Bookmark, Flashcard, QuizAttempt, StudySession
from app.models.user import User
from app.services.lecture import parse_date

PERIODS = ("today", "week", "month", "year")
DEFAULT_PERIOD = "week"


@dataclass
class DateRange:
    """Inclusive datetime range used to bucket study activity."""

    period: str
    start: datetime
    end: datetime

    @property
    def days(self) -> int:
        """Number of calendar days the range touches."""
        return (self.end.date() - self.start.date()).days + 1


def _day_bounds(first: date, last: date) -> tuple[datetime, datetime]:
    return datetime.combine(first, time.min), datetime.combine(last, time.max)


def resolve_date_range(
    period: str | None, start_date: Any = None, end_date: Any = None, now: datetime | None = None
) -> DateRange:
    """Resolve the reporting window.

    An explicit start and end date win and cover whole days; the requested
    period is still reported. Otherwise the period picks calendar-aligned
    bounds around `now`; weeks run Monday to Sunday. Unknown or missing
    periods fall back to the current week.
    """
    errors: dict[str, list[str]] = {}
    start = parse_date(start_date) if start_date not in (None, "") else None
    end = parse_date(end_date) if end_date not in (None, "") else None
    if start_date not in (None, "") and start is None:
        errors["start_date"] = ["The start date is not a valid date."]
    if end_date not in (None, "") and end is None:
        errors["end_date"] = ["The end date is not a valid date."]
    if start and end and end < start:
        errors["end_date"] = ["The end date must be a date after or equal to start date."]
    if errors:
        raise ValidationError(errors)

    if period not in PERIODS:
        period = DEFAULT_PERIOD
    if start and end:
        return DateRange(period, *_day_bounds(start, end))

    today = (now or datetime.utcnow()).date()

    if period == "today":
        first, last = today, today
    elif period == "month":
        first = today.replace(day=1)
        last = today.replace(day=calendar.monthrange(today.year, today.month)[1])
    elif period == "year":
        first, last = date(today.year, 1, 1), date(today.year, 12, 31)
    else:
        first = today - timedelta(days=today.weekday())
        last = first + timedelta(days=6)
    return DateRange(period, *_day_bounds(first, last))


def _percentage(part: int, whole: int) -> float:
    return round(part / whole * 100, 2) if whole > 0 else 0


class StatisticsService:
    """Computes derived views over a user's lectures and study records."""

    def overview(self, db: Session, user_id: int) -> dict:
        """Lecture, play time, bookmark and flashcard totals. Trashed lectures are excluded."""
        active = (Lecture.user_id == user_id, Lecture.deleted_at.is_(None))
        total_lectures, total_play_time = (
            db.query(func.count(Lecture.id), func.coalesce(func.sum(Lecture.duration), 0)).filter(*active).one()
        )
        total_bookmarks = (
            db.query(func.count(Bookmark.id)).join(Lecture, Bookmark.lecture_id == Lecture.id).filter(*active).scalar()
        )
        total_flashcards = (
            db.query(func.count(Flashcard.id))
            .join(Lecture, Flashcard.lecture_id == Lecture.id)
            .filter(*active)
            .scalar()
        )
        return {
            "total_lectures": total_lectures or 0,
            "total_play_time": int(total_play_time or 0),
            "total_bookmarks": total_bookmarks or 0,
            "total_flashcards": total_flashcards or 0,
        }

    def storage_summary(self, user: User) -> dict:
        used = user.storage_used or 0
        limit = user.storage_limit or 0
        return {
            "used": used,
            "limit": limit,
            "percentage": _percentage(used, limit),
            "available": limit - used,
        }

    def quiz_summary(self, db: Session, user_id: int) -> dict:
        total, correct = (
            db.query(
                func.count(QuizAttempt.id),
                func.coalesce(func.sum(case((QuizAttempt.is_correct.is_(True), 1), else_=0)), 0),
            )
            .filter(QuizAttempt.user_id == user_id)
            .one()
        )
        total = total or 0
        correct = int(correct or 0)
        return {
            "total_attempts": total,
            "correct_attempts": correct,
            "accuracy_rate": _percentage(correct, total),
        }

    def recent_activity(self, db: Session, user_id: int, limit: int = 5) -> list[dict]:
        """Most recently played lectures; never-played ones sort last."""
        rows = (
            db.query(Lecture.title, Lecture.last_played_at, Lecture.play_count)
            .filter(Lecture.user_id == user_id, Lecture.deleted_at.is_(None))
            .order_by(Lecture.last_played_at.is_(None), Lecture.last_played_at.desc(), Lecture.created_at.desc())
            .limit(limit)
            .all()
        )
        return [
            {"title": title, "last_played_at": last_played_at, "play_count": play_count}
            for title, last_played_at, play_count in rows
        ]

    def statistics(self, db: Session, user: User) -> dict:
        """Everything shown on the statistics screen."""
        return {
            "overview": self.overview(db, user.id),
            "storage": self.storage_summary(user),
            "quizzes": self.quiz_summary(db, user.id),
            "recent_activity": self.recent_activity(db, user.id),
        }

    def study_time(
        self,
        db: Session,
        user_id: int,
        now: datetime,
        period: str | None = None,
        start_date: Any = None,
        end_date: Any = None,
    ) -> dict:
        """Per-day study session and lecture play totals over a date range."""
        date_range = resolve_date_range(period, start_date, end_date, now)

        session_day = func.date(StudySession.started_at)
        session_rows = (
            db.query(
                session_day.label("date"),
                func.coalesce(func.sum(StudySession.duration), 0),
                func.count(StudySession.id),
            )
            .filter(
                StudySession.user_id == user_id,
                StudySession.started_at.between(date_range.start, date_range.end),
            )
            .group_by(session_day)
            .order_by(session_day)
            .all()
        )

        play_day = func.date(Lecture.last_played_at)
        play_rows = (
            db.query(
                play_day.label("date"),
                func.coalesce(func.sum(Lecture.duration), 0),
                func.count(Lecture.id),
            )
            .filter(
                Lecture.user_id == user_id,
                Lecture.deleted_at.is_(None),
                Lecture.last_played_at.isnot(None),
                Lecture.last_played_at.between(date_range.start, date_range.end),
            )
            .group_by(play_day)
            .order_by(play_day)
            .all()
        )

        study_sessions = [
            {"date": str(day), "total_duration": int(duration), "session_count": count}
            for day, duration, count in session_rows
        ]
        lecture_plays = [
            {"date": str(day), "total_play_time": int(duration), "lecture_count": count}
            for day, duration, count in play_rows
        ]

        total_study_time = sum(row["total_duration"] for row in study_sessions)
        total_play_time = sum(row["total_play_time"] for row in lecture_plays)
        total_sessions = sum(row["session_count"] for row in study_sessions)
        days = max(1, date_range.days)

        return {
            "period": date_range.period,
            "date_range": {
                "start": date_range.start.date().isoformat(),
                "end": date_range.end.date().isoformat(),
            },
            "totals": {
                "study_time": total_study_time,
                "play_time": total_play_time,
                "sessions": total_sessions,
            },
            "averages": {
                "daily_study_time": round(total_study_time / days),
                "daily_play_time": round(total_play_time / days),
            },
            "daily_breakdown": {
                "study_sessions": study_sessions,
                "lecture_plays": lecture_plays,
            },
        }


_statistics_service: StatisticsService | None = None


def get_statistics_service() -> StatisticsService:
    """Get singleton statistics service instance."""
    global _statistics_service
    if _statistics_service is None:
        _statistics_service = StatisticsService()
    return _statistics_service
