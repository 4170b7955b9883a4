"""User model."""

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, CheckConstraint, Column, DateTime, Integer, String

from app.database import Base


class User(Base):
    """Application user and owner of lectures."""

    __tablename__ = "user"
    __table_args__ = (CheckConstraint("storage_used >= 0", name="ck_user_storage_used_non_negative"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(256), unique=True, nullable=False, index=True)
    password_hash = Column(String(256), nullable=False)
    display_name = Column(String(256), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    storage_used = Column(BigInteger, nullable=False, default=0)  # bytes
    storage_limit = Column(BigInteger, nullable=False, default=0)  # bytes
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    last_login_at = Column(DateTime, nullable=True)
