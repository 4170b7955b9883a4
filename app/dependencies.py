"""Authentication dependencies for FastAPI routes."""

from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.services.jwt import get_jwt_service


@dataclass
class CurrentUser:
    """Authenticated owner principal."""

    user_id: int
    email: str
    display_name: str


def get_current_user(request: Request) -> CurrentUser:
    """Extract and validate the user from the Bearer token. Raises 401 if invalid."""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Not authenticated")

    payload = get_jwt_service().decode_token(auth_header[7:])
    if not payload:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    return CurrentUser(
        user_id=int(payload["sub"]),
        email=payload.get("email", ""),
        display_name=payload.get("name", ""),
    )


def get_current_user_record(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> User:
    """Load the authenticated user's row. Raises 401 if the account is gone or deactivated."""
    record = db.query(User).filter(User.id == user.user_id).first()
    if record is None or not record.is_active:
        raise HTTPException(status_code=401, detail="Account not found or deactivated")
    return record
