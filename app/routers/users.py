"""User statistics endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user_record
from app.models.user import User
from app.schemas.statistics import StatisticsResponse, StudyTimeResponse
from app.services.statistics import get_statistics_service

router = APIRouter(prefix="/api/v1/users", tags=["Users"])


@router.get("/me/statistics", response_model=StatisticsResponse)
def get_statistics(
    user: User = Depends(get_current_user_record),
    db: Session = Depends(get_db),
) -> StatisticsResponse:
    """Lecture, storage, quiz and recent activity summary."""
    return StatisticsResponse(**get_statistics_service().statistics(db, user))


@router.get("/me/study-time", response_model=StudyTimeResponse)
def get_study_time(
    period: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    user: User = Depends(get_current_user_record),
    db: Session = Depends(get_db),
) -> StudyTimeResponse:
    """Daily study and playback time for today, this week/month/year, or an explicit range."""
    data = get_statistics_service().study_time(
        db,
        user.id,
        now=datetime.utcnow(),
        period=period,
        start_date=start_date,
        end_date=end_date,
    )
    return StudyTimeResponse(**data)
