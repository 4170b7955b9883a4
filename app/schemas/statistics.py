"""Pydantic schemas for statistics endpoints."""

from datetime import datetime

from pydantic import BaseModel


class OverviewStats(BaseModel):
    total_lectures: int
    total_play_time: int
    total_bookmarks: int
    total_flashcards: int


class StorageStats(BaseModel):
    used: int
    limit: int
    percentage: float
    available: int


class QuizStats(BaseModel):
    total_attempts: int
    correct_attempts: int
    accuracy_rate: float


class RecentLecture(BaseModel):
    title: str
    last_played_at: datetime | None
    play_count: int


class StatisticsResponse(BaseModel):
    overview: OverviewStats
    storage: StorageStats
    quizzes: QuizStats
    recent_activity: list[RecentLecture]


class DateRangeResponse(BaseModel):
    start: str
    end: str


class StudyTimeTotals(BaseModel):
    study_time: int
    play_time: int
    sessions: int


class StudyTimeAverages(BaseModel):
    daily_study_time: int
    daily_play_time: int


class StudySessionBucket(BaseModel):
    date: str
    total_duration: int
    session_count: int


class LecturePlayBucket(BaseModel):
    date: str
    total_play_time: int
    lecture_count: int


class DailyBreakdown(BaseModel):
    study_sessions: list[StudySessionBucket]
    lecture_plays: list[LecturePlayBucket]


class StudyTimeResponse(BaseModel):
    period: str
    date_range: DateRangeResponse
    totals: StudyTimeTotals
    averages: StudyTimeAverages
    daily_breakdown: DailyBreakdown
