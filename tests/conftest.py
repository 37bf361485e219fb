"""
Study Plan Tracker - Test Configuration and Fixtures
"""
import os
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set testing environment before the application reads its config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret-key-for-testing"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

from app import app
from core.database import get_db
from models.base import Base

DEFAULT_PASSWORD = "secret123"


@pytest.fixture
def engine():
    """Fresh in-memory database for each test"""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory) -> Generator[TestClient, None, None]:
    """Create test client with database override"""
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def register(client: TestClient, name: str, email: str, college: str = "State College") -> dict:
    """Register a user and return the response body plus auth headers"""
    response = client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": DEFAULT_PASSWORD, "college": college},
    )
    assert response.status_code == 201, response.text
    data = response.json()
    data["headers"] = {"Authorization": f"Bearer {data['token']}"}
    return data


@pytest.fixture
def alice(client) -> dict:
    return register(client, "Alice", "a@x.com")


@pytest.fixture
def bob(client) -> dict:
    return register(client, "Bob", "b@x.com")


@pytest.fixture
def carol(client) -> dict:
    return register(client, "Carol", "c@x.com")


def create_plan(client: TestClient, headers: dict, title: str = "Finals prep") -> dict:
    response = client.post(
        "/api/plans",
        json={
            "title": title,
            "description": "Revise everything",
            "startDate": "2026-11-01",
            "endDate": "2026-12-15",
        },
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


def add_member(client: TestClient, plan: dict, owner: dict, user: dict) -> dict:
    """Invite ``user`` to ``plan`` and accept as them"""
    response = client.post(
        f"/api/plans/{plan['id']}/invite",
        json={"email": user["user"]["email"]},
        headers=owner["headers"],
    )
    assert response.status_code == 200, response.text
    invitation = response.json()["invitations"][-1]
    response = client.post(
        f"/api/plans/{plan['id']}/invitations/{invitation['id']}",
        json={"status": "accepted"},
        headers=user["headers"],
    )
    assert response.status_code == 200, response.text
    return response.json()


def add_task(client: TestClient, plan: dict, headers: dict, title: str = "Read chapter 1") -> dict:
    response = client.post(
        f"/api/plans/{plan['id']}/tasks",
        json={"title": title, "dueDate": "2026-11-10", "priority": "high"},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()
