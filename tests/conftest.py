"""Pytest configuration and fixtures."""

import os

os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["COOKIE_SECURE"] = "false"

from collections.abc import Generator  # noqa: E402
from datetime import UTC, datetime, timedelta  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
from dependency_injector import providers  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from accessedu import models  # noqa: E402
from accessedu.core import container  # noqa: E402
from accessedu.database import Base, get_db  # noqa: E402
from accessedu.infrastructure.identity.services.password_service import (  # noqa: E402
    hash_password,
)
from accessedu.infrastructure.identity.services.token_service import (  # noqa: E402
    create_access_token,
)
from accessedu.main import app  # noqa: E402

# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite:///:memory:"

TEST_PASSWORD = "correct-horse-battery"  # noqa: S105

# Create test engine; StaticPool keeps the single in-memory database
# visible from the TestClient's worker thread
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Create test session factory
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


class FakeClock:
    """Settable time source injected in place of the wall clock."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    # Create all tables
    Base.metadata.create_all(bind=test_engine)

    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        # Drop all tables after test
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, Any, None]:
    """Create a test client with database session."""

    def override_get_db() -> Generator[Session, None, None]:
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def clock() -> Generator[FakeClock, None, None]:
    """Freeze the application clock at 2026-01-15 10:00:00 UTC."""
    fake = FakeClock(datetime(2026, 1, 15, 10, 0, 0, tzinfo=UTC))
    container.clock.override(providers.Object(fake))
    try:
        yield fake
    finally:
        container.clock.reset_override()


def create_test_user(
    db_session: Session,
    email: str = "student@example.com",
    with_profile: bool = True,
    name: str = "Test Student",
) -> models.User:
    """Insert a user (and by default its profile) directly into the database."""
    user = models.User(email=email, hashed_password=hash_password(TEST_PASSWORD))
    db_session.add(user)
    db_session.flush()
    if with_profile:
        db_session.add(models.Profile(id=user.id, name=name, email=email, role="student"))
    db_session.commit()
    db_session.refresh(user)
    return user


def auth_headers(user_id: int) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


@pytest.fixture
def test_user(db_session: Session) -> models.User:
    return create_test_user(db_session)


@pytest.fixture
def other_user(db_session: Session) -> models.User:
    return create_test_user(db_session, email="other@example.com", name="Other Student")
