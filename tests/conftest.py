import pytest
from fastapi.testclient import TestClient

from backend.app.core.config import Settings
from backend.app.main import create_application

ADMIN_EMAIL = "boss@x.com"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        BCRYPT_ROUNDS=4,
        ADMIN_EMAILS=ADMIN_EMAIL,
        CORS_ORIGINS="",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def client(settings):
    app = create_application(settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def register_user(client):
    def _register(username="ana", email="a@x.com", password="password123"):
        resp = client.post(
            "/users",
            json={"username": username, "email": email, "password": password},
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _register


@pytest.fixture
def create_thought(client):
    def _create(token, message="Feeling great today", category=None):
        body = {"message": message}
        if category is not None:
            body["category"] = category
        resp = client.post("/thoughts", json=body, headers={"Authorization": token})
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _create
