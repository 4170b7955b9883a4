"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import get_settings
from app.database import Base, get_db
from app.models.category import Category  # noqa: F401
from app.models.lecture import Lecture  # noqa: F401
from app.models.study import Bookmark, Flashcard, QuizAttempt, StudySession  # noqa: F401
from app.models.user import User
from app.services.auth import AuthService

MB = 1024 * 1024


@pytest.fixture(name="db_session")
def db_session_fixture():
    """Create an in-memory SQLite database for tests."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="upload_dir", autouse=True)
def upload_dir_fixture(tmp_path, monkeypatch):
    """Point audio storage at a temporary directory."""
    directory = tmp_path / "uploads"
    monkeypatch.setattr(get_settings(), "UPLOAD_DIR", str(directory))
    return directory


@pytest.fixture(name="client")
def client_fixture(db_session: Session):
    """Create a test client with overridden DB dependency and disabled rate limiting."""
    from app.rate_limit import limiter
    from main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False
    with TestClient(app) as c:
        yield c
    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture(name="test_user")
def test_user_fixture(db_session: Session):
    """Register a test user and return its data, token and auth headers."""
    from app.services.jwt import get_jwt_service

    result = AuthService().register(db_session, "test@example.com", "password123", "Test User")
    token = get_jwt_service().create_token(
        user_id=result.user_id,
        email=result.email,
        display_name=result.display_name,
    )

    return {
        "user_id": result.user_id,
        "email": result.email,
        "display_name": result.display_name,
        "token": token,
        "headers": {"Authorization": f"Bearer {token}"},
    }


@pytest.fixture(name="owner")
def owner_fixture(db_session: Session) -> User:
    """A user with 100MB of storage, for service-level tests."""
    user = User(
        email="owner@example.com",
        password_hash="x",
        display_name="Owner",
        storage_used=0,
        storage_limit=100 * MB,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user
