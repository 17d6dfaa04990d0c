"""Fixtures for API integration tests."""

import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from lessonbook.api.app import create_app
from lessonbook.config import Settings

ADMIN_TOKEN = "s3cret-admin-token"
ADMIN = {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def temp_db_path() -> str:
    """Create a temporary database path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        return f.name


@pytest.fixture
def client(temp_db_path: str):
    """Create a test client with a temporary database and an admin token."""
    app = create_app(Settings(db_path=temp_db_path, admin_token=ADMIN_TOKEN))
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client
    # Cleanup
    Path(temp_db_path).unlink(missing_ok=True)
    Path(f"{temp_db_path}-wal").unlink(missing_ok=True)
    Path(f"{temp_db_path}-shm").unlink(missing_ok=True)


@pytest.fixture
def create_lesson(client: TestClient):
    """Create a lesson through the API and return its JSON."""

    def _create(**overrides):
        body = {
            "title": "Toddler Gym",
            "date": "2099-06-15",
            "day_of_week": "Monday",
            "time": "09:00",
            "location": "Hall A",
            "age_group": "1-2 years",
            "capacity": 3,
        }
        body.update(overrides)
        response = client.post("/api/v1/lessons", json=body, headers=ADMIN)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create


@pytest.fixture
def create_participant(client: TestClient):
    """Create a participant through the API and return its JSON."""

    def _create(name: str = "Emma", age_group: str = "1-2 years"):
        response = client.post(
            "/api/v1/participants",
            json={
                "name": name,
                "email": f"{name.lower()}@example.com",
                "phone": "+420 777 123 456",
                "age_group": age_group,
            },
            headers=ADMIN,
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create
