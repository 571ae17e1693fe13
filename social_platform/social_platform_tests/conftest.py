"""
Pytest configuration for Feed Service tests.

The service reads its settings at import time, so the signing secret and a
throwaway SQLite database are configured here before any test module
imports the app.
"""
import os
import tempfile

_tmp_dir = tempfile.mkdtemp(prefix="feed_service_tests_")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmp_dir, 'test_feed.db')}"
os.environ["JWT_SECRET"] = "test-signing-secret-not-for-production"
os.environ.pop("LOG_DIR", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from social_platform.social_platform.feed_service.main import app  # noqa: E402
from social_platform.social_platform.feed_service.db import Base, engine, SessionLocal  # noqa: E402
from social_platform.social_platform.feed_service.auth import create_access_token  # noqa: E402
from social_platform.social_platform.feed_service.models import User  # noqa: E402


@pytest.fixture(scope="session")
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture(autouse=True)
def reset_database():
    # Drop all tables and recreate them before each test
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def signup(client, username, email=None, password="secret123", full_name="Test User", bio=None):
    body = {
        "email": email or f"{username}@example.com",
        "password": password,
        "username": username,
        "fullName": full_name,
    }
    if bio is not None:
        body["bio"] = bio
    return client.post("/signup", json=body)


def auth_header_for(username: str) -> dict:
    session = SessionLocal()
    try:
        user = session.query(User).filter(User.username == username).one()
        token = create_access_token(user.id, user.username)
    finally:
        session.close()
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_user(client):
    """Register a user and return its auth header."""
    def _make(username, **kwargs):
        response = signup(client, username, **kwargs)
        assert response.status_code == 200, response.text
        return auth_header_for(username)
    return _make
