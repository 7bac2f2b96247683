"""
Shared fixtures: isolated settings, storage and app per test.
"""

import pytest
from fastapi.testclient import TestClient

from riddles.api.app import create_app
from riddles.auth.service import AuthService
from riddles.config import Settings
from riddles.services.players import PlayerService
from riddles.services.riddles import RiddleService
from riddles.storage import create_storage

ADMIN_CODE = "test-admin-code-123"


@pytest.fixture
def settings():
    """Test settings - fast hashing, fixed secrets, no .env."""
    return Settings(
        _env_file=None,
        environment="test",
        jwt_secret_key="test-jwt-secret-key-for-testing-only",
        admin_secret_code=ADMIN_CODE,
        password_hash_iterations=1_000,
        storage_backend="memory",
        sentry_dsn="",
    )


@pytest.fixture
def storage():
    return create_storage("memory")


@pytest.fixture
def auth_service(settings, storage):
    return AuthService(settings, storage.players)


@pytest.fixture
def player_service(storage):
    return PlayerService(storage.players)


@pytest.fixture
def riddle_service(storage):
    return RiddleService(storage.riddles)


@pytest.fixture
def client(settings, storage):
    with TestClient(create_app(settings, storage=storage)) as test_client:
        yield test_client


@pytest.fixture
def register(client):
    """Register through the API and return the issued token."""
    def _register(username: str, password: str = "secret1", admin_code: str | None = None) -> str:
        body = {"username": username, "password": password}
        if admin_code:
            body["adminCode"] = admin_code
        response = client.post("/auth/register", json=body)
        assert response.status_code == 201, response.text
        return response.json()["data"]["token"]
    return _register


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
