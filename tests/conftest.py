"""
Pytest configuration and shared fixtures.
Run from project root: python -m pytest tests/ -v

Every test gets a fresh application backed by an in-memory SQLite database.
"""

import os
import sys
from pathlib import Path
from typing import Callable, Dict

# Set env vars before any app imports (ensures deterministic test behavior)
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

# Ensure backend/ is on path when running tests without an install
BACKEND_ROOT = Path(__file__).resolve().parent.parent / "backend"
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

import pytest
from fastapi.testclient import TestClient

from courtdesk.core.config import Settings
from courtdesk.main import create_app

PASSWORD = "correct-horse-42"


# Test markers
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line(
        "markers", "integration: Integration tests through the HTTP API"
    )
    config.addinivalue_line("markers", "websocket: Tests that open a live notification socket")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        JWT_SECRET_KEY="test-secret-key",
        BCRYPT_ROUNDS=4,
        WS_PING_INTERVAL_SECONDS=30.0,
        WS_PING_TIMEOUT_SECONDS=5.0,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db_session(client):
    """Direct session on the running app's database, for asserting stored state."""
    session = client.app.state.db.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def register(client) -> Callable[..., Dict]:
    """
    Factory: register a user and return {"token", "user", "headers"}.
    """

    def _register(role: str, username: str, name: str = None, **extra) -> Dict:
        payload = {
            "username": username,
            "password": PASSWORD,
            "role": role,
            "name": name or username.replace("_", " ").title(),
            "email": f"{username}@courtdesk.org",
        }
        payload.update(extra)
        resp = client.post("/api/auth/register", json=payload)
        assert resp.status_code == 201, resp.text
        data = resp.json()["data"]
        return {
            "token": data["token"],
            "user": data["user"],
            "headers": {"Authorization": f"Bearer {data['token']}"},
        }

    return _register


@pytest.fixture
def staff(register):
    return register("staff", "clerk_kent")


@pytest.fixture
def judge(register):
    return register("judge", "judge_dredd", name="Judge Dredd")


@pytest.fixture
def other_judge(register):
    return register("judge", "judge_judy", name="Judge Judy")


@pytest.fixture
def lawyer(register):
    return register("lawyer", "atticus_finch", name="Atticus Finch")


@pytest.fixture
def second_lawyer(register):
    return register("lawyer", "saul_goodman", name="Saul Goodman")


@pytest.fixture
def case(client, staff) -> Dict:
    resp = client.post(
        "/api/cases",
        headers=staff["headers"],
        json={
            "title": "Smith v. Jones",
            "description": "Contract dispute",
            "priority": "high",
            "parties": [
                {"name": "Smith", "role": "plaintiff", "contact": "smith@mail.com"},
                {"name": "Jones", "role": "defendant"},
            ],
        },
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


@pytest.fixture
def schedule(client, judge):
    """Factory: schedule a hearing as ``judge`` (or another judge) and return the response."""

    def _schedule(case_id: str, lawyer_ids, by=None, **overrides):
        payload = {
            "caseId": case_id,
            "date": "2025-03-05",
            "startTime": "09:30",
            "endTime": "10:30",
            "lawyerIds": list(lawyer_ids),
        }
        payload.update(overrides)
        return client.post("/api/hearings", headers=(by or judge)["headers"], json=payload)

    return _schedule
