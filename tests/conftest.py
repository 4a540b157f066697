"""
Shared test fixtures.

Provides a fresh in-memory database per test, a TestClient wired to it, and
signed-up manager/worker accounts with ready-to-use auth headers.
"""
import os
import tempfile

# Settings are read at import time, so set them before importing the app
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="workforce-uploads-")
os.environ["MANAGER_ACCESS_CODE"] = "let-me-manage"
for _name in ("OPENAI_API_KEY", "GEMINI_API_KEY", "SMTP_HOST", "MANAGERS_CAN_REPORT_INCIDENTS"):
    os.environ.pop(_name, None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.database import Base, get_db
from main import app
from utils.auth import pwd_context

# Keep bcrypt cheap in tests
pwd_context.update(bcrypt__default_rounds=4)

MANAGER_CODE = "let-me-manage"


@pytest.fixture
def session_factory():
    """Session factory bound to a fresh in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def client(session_factory):
    """TestClient whose requests each get their own session on the test database."""
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def signup(client, email, display_name, password="secret123", manager=False):
    payload = {"email": email, "display_name": display_name, "password": password}
    if manager:
        payload["manager_access_code"] = MANAGER_CODE
    response = client.post("/api/users/", json=payload)
    assert response.status_code == 200, response.text
    body = response.json()
    return {
        "id": body["id"],
        "email": body["email"],
        "headers": {"Authorization": f"Bearer {body['access_token']}"},
    }


@pytest.fixture
def manager(client):
    return signup(client, "manager@example.com", "Maria Manager", manager=True)


@pytest.fixture
def worker(client):
    return signup(client, "worker@example.com", "Walt Worker")


@pytest.fixture
def other_worker(client):
    return signup(client, "other@example.com", "Olive Other")


def quiz_payload(**overrides):
    payload = {
        "title": "Forklift Safety",
        "description": "Basics of operating a forklift safely.",
        "category": "Safety",
        "duration_minutes": 10,
        "questions": [
            {
                "text": "What do you check first?",
                "options": ["Brakes", "Radio", "Paint", "Seat colour"],
                "correct_option": 0,
                "points": 10,
            },
            {
                "text": "Maximum load is found where?",
                "options": ["Rumour", "Data plate", "Guesswork", "Nowhere"],
                "correct_option": 1,
                "points": 20,
            },
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def quiz(client, manager):
    response = client.post("/api/quizzes/", json=quiz_payload(), headers=manager["headers"])
    assert response.status_code == 200, response.text
    return response.json()


def upload_material(client, headers, title="Lockout procedure", links=None, files=None, category="Safety"):
    data = {
        "title": title,
        "description": "Step by step lockout and tagout.",
        "category": category,
        "links": links if links is not None else ["https://example.com/lockout.pdf"],
    }
    return client.post("/api/training/materials", data=data, files=files, headers=headers)
