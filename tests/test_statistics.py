"""Tests for statistics and study-time summaries."""

from datetime import date, datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.errors import ValidationError
from app.models.lecture import Lecture
from app.models.study import Bookmark, Flashcard, QuizAttempt, StudySession
from app.models.user import User
from app.services.statistics import StatisticsService, resolve_date_range

NOW = datetime(2025, 1, 15, 10, 30)  # a Wednesday


def _lecture(db: Session, user: User, title: str = "Lecture", **fields) -> Lecture:
    lecture = Lecture(user_id=user.id, title=title, recording_date=date(2025, 1, 10), **fields)
    db.add(lecture)
    db.commit()
    return lecture


class TestResolveDateRange:
    def test_today(self):
        r = resolve_date_range("today", now=NOW)
        assert (r.start, r.end.date()) == (datetime(2025, 1, 15), date(2025, 1, 15))
        assert r.end.hour == 23 and r.end.minute == 59
        assert r.days == 1

    def test_week_runs_monday_to_sunday(self):
        r = resolve_date_range("week", now=NOW)
        assert r.start == datetime(2025, 1, 13)
        assert r.end.date() == date(2025, 1, 19)
        assert r.days == 7

    def test_month(self):
        r = resolve_date_range("month", now=datetime(2024, 2, 10))
        assert (r.start.date(), r.end.date()) == (date(2024, 2, 1), date(2024, 2, 29))

    def test_year(self):
        r = resolve_date_range("year", now=NOW)
        assert (r.start.date(), r.end.date()) == (date(2025, 1, 1), date(2025, 12, 31))
        assert r.days == 365

    @pytest.mark.parametrize("period", [None, "", "decade"])
    def test_unknown_period_defaults_to_week(self, period):
        r = resolve_date_range(period, now=NOW)
        assert r.period == "week"
        assert r.start == datetime(2025, 1, 13)

    def test_explicit_range_wins(self):
        r = resolve_date_range("year", "2025-01-01", "2025-01-03", now=NOW)
        assert r.period == "year"
        assert r.start == datetime(2025, 1, 1)
        assert r.end.date() == date(2025, 1, 3)
        assert r.days == 3

    def test_explicit_range_with_unknown_period_reports_week(self):
        r = resolve_date_range("decade", "2025-03-01", "2025-03-31", now=NOW)
        assert r.period == "week"
        assert (r.start.date(), r.end.date()) == (date(2025, 3, 1), date(2025, 3, 31))
        assert r.days == 31

    def test_single_bound_is_ignored(self):
        r = resolve_date_range("today", start_date="2024-01-01", now=NOW)
        assert r.period == "today"

    def test_end_before_start(self):
        with pytest.raises(ValidationError) as exc_info:
            resolve_date_range(None, "2025-01-10", "2025-01-01", now=NOW)
        assert "end_date" in exc_info.value.errors

    def test_malformed_date(self):
        with pytest.raises(ValidationError) as exc_info:
            resolve_date_range(None, "yesterday", "2025-01-01", now=NOW)
        assert "start_date" in exc_info.value.errors


class TestSummaries:
    def test_storage_zero_limit(self):
        summary = StatisticsService().storage_summary(User(storage_used=0, storage_limit=0))
        assert summary == {"used": 0, "limit": 0, "percentage": 0, "available": 0}

    def test_storage_percentage(self):
        summary = StatisticsService().storage_summary(User(storage_used=1, storage_limit=3))
        assert summary["percentage"] == 33.33
        assert summary["available"] == 2

    def test_quiz_no_attempts(self, db_session: Session, owner: User):
        summary = StatisticsService().quiz_summary(db_session, owner.id)
        assert summary == {"total_attempts": 0, "correct_attempts": 0, "accuracy_rate": 0}

    def test_quiz_accuracy(self, db_session: Session, owner: User):
        for correct in (True, True, False):
            db_session.add(QuizAttempt(user_id=owner.id, is_correct=correct))
        db_session.commit()

        summary = StatisticsService().quiz_summary(db_session, owner.id)
        assert summary == {"total_attempts": 3, "correct_attempts": 2, "accuracy_rate": 66.67}

    def test_overview_excludes_trashed(self, db_session: Session, owner: User):
        first = _lecture(db_session, owner, duration=100)
        second = _lecture(db_session, owner, duration=200)
        trashed = _lecture(db_session, owner, duration=50, deleted_at=NOW)
        db_session.add_all(
            [
                Bookmark(lecture_id=first.id, position_seconds=10),
                Bookmark(lecture_id=second.id, position_seconds=20),
                Bookmark(lecture_id=trashed.id, position_seconds=30),
                Flashcard(lecture_id=first.id, front="f'(x)", back="derivative"),
            ]
        )
        db_session.commit()

        assert StatisticsService().overview(db_session, owner.id) == {
            "total_lectures": 2,
            "total_play_time": 300,
            "total_bookmarks": 2,
            "total_flashcards": 1,
        }

    def test_overview_empty(self, db_session: Session, owner: User):
        assert StatisticsService().overview(db_session, owner.id) == {
            "total_lectures": 0,
            "total_play_time": 0,
            "total_bookmarks": 0,
            "total_flashcards": 0,
        }

    def test_recent_activity_order(self, db_session: Session, owner: User):
        _lecture(db_session, owner, "never")
        _lecture(db_session, owner, "old", last_played_at=datetime(2025, 1, 1), play_count=1)
        _lecture(db_session, owner, "new", last_played_at=datetime(2025, 1, 14), play_count=4)

        activity = StatisticsService().recent_activity(db_session, owner.id)
        assert [a["title"] for a in activity] == ["new", "old", "never"]
        assert activity[0]["play_count"] == 4
        assert activity[2]["last_played_at"] is None

    def test_recent_activity_limit(self, db_session: Session, owner: User):
        for i in range(7):
            _lecture(db_session, owner, f"L{i}", last_played_at=datetime(2025, 1, i + 1))
        activity = StatisticsService().recent_activity(db_session, owner.id)
        assert len(activity) == 5
        assert activity[0]["title"] == "L6"


class TestStudyTime:
    def test_today_without_sessions(self, db_session: Session, owner: User):
        data = StatisticsService().study_time(db_session, owner.id, now=NOW, period="today")
        assert data["period"] == "today"
        assert data["date_range"] == {"start": "2025-01-15", "end": "2025-01-15"}
        assert data["totals"] == {"study_time": 0, "play_time": 0, "sessions": 0}
        assert data["averages"] == {"daily_study_time": 0, "daily_play_time": 0}
        assert data["daily_breakdown"] == {"study_sessions": [], "lecture_plays": []}

    def test_week_buckets(self, db_session: Session, owner: User):
        db_session.add_all(
            [
                StudySession(user_id=owner.id, started_at=datetime(2025, 1, 15, 9), duration=1200),
                StudySession(user_id=owner.id, started_at=datetime(2025, 1, 13, 8), duration=600),
                StudySession(user_id=owner.id, started_at=datetime(2025, 1, 13, 20), duration=300),
                StudySession(user_id=owner.id, started_at=datetime(2025, 1, 20, 8), duration=999),
            ]
        )
        db_session.commit()
        _lecture(db_session, owner, "played", duration=3600, last_played_at=datetime(2025, 1, 14, 18))
        _lecture(db_session, owner, "earlier", duration=60, last_played_at=datetime(2025, 1, 2))
        _lecture(db_session, owner, "trashed", duration=500, last_played_at=datetime(2025, 1, 14), deleted_at=NOW)

        data = StatisticsService().study_time(db_session, owner.id, now=NOW)

        assert data["period"] == "week"
        assert data["date_range"] == {"start": "2025-01-13", "end": "2025-01-19"}
        assert data["daily_breakdown"]["study_sessions"] == [
            {"date": "2025-01-13", "total_duration": 900, "session_count": 2},
            {"date": "2025-01-15", "total_duration": 1200, "session_count": 1},
        ]
        assert data["daily_breakdown"]["lecture_plays"] == [
            {"date": "2025-01-14", "total_play_time": 3600, "lecture_count": 1},
        ]
        assert data["totals"] == {"study_time": 2100, "play_time": 3600, "sessions": 3}
        assert data["averages"] == {"daily_study_time": 300, "daily_play_time": 514}

    def test_explicit_range_includes_end_day(self, db_session: Session, owner: User):
        db_session.add(StudySession(user_id=owner.id, started_at=datetime(2025, 1, 20, 23, 59), duration=60))
        db_session.commit()

        data = StatisticsService().study_time(
            db_session, owner.id, now=NOW, start_date="2025-01-20", end_date="2025-01-20"
        )
        assert data["period"] == "week"
        assert data["totals"]["study_time"] == 60
        assert data["averages"]["daily_study_time"] == 60

    def test_other_users_sessions_ignored(self, db_session: Session, owner: User):
        other = User(email="other@example.com", password_hash="x", display_name="Other", storage_limit=0)
        db_session.add(other)
        db_session.commit()
        db_session.add(StudySession(user_id=other.id, started_at=NOW, duration=60))
        db_session.commit()

        data = StatisticsService().study_time(db_session, owner.id, now=NOW, period="today")
        assert data["totals"]["sessions"] == 0


class TestStatisticsApi:
    def test_statistics_endpoint(self, client: TestClient, test_user: dict):
        client.post(
            "/api/v1/lectures/",
            json={"title": "Calculus 101", "recording_date": "2025-01-10"},
            headers=test_user["headers"],
        )
        resp = client.get("/api/v1/users/me/statistics", headers=test_user["headers"])
        assert resp.status_code == 200
        data = resp.json()
        assert data["overview"]["total_lectures"] == 1
        assert data["storage"]["used"] == 0
        assert data["storage"]["percentage"] == 0
        assert data["quizzes"]["accuracy_rate"] == 0
        assert data["recent_activity"][0]["title"] == "Calculus 101"

    def test_study_time_endpoint(self, client: TestClient, test_user: dict):
        resp = client.get("/api/v1/users/me/study-time?period=today", headers=test_user["headers"])
        assert resp.status_code == 200
        data = resp.json()
        assert data["period"] == "today"
        assert data["daily_breakdown"] == {"study_sessions": [], "lecture_plays": []}

    def test_study_time_bad_range(self, client: TestClient, test_user: dict):
        resp = client.get(
            "/api/v1/users/me/study-time?start_date=2025-02-01&end_date=2025-01-01",
            headers=test_user["headers"],
        )
        assert resp.status_code == 422
        assert "end_date" in resp.json()["errors"]

    def test_statistics_requires_auth(self, client: TestClient):
        assert client.get("/api/v1/users/me/statistics").status_code == 401
