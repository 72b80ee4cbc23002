import pytest
from fastapi.testclient import TestClient

from juslearn.config import Settings
from juslearn.main import create_app


@pytest.fixture
def settings(tmp_path, monkeypatch):
    """Settings pointing at a fresh SQLite file and uploads dir per test."""
    monkeypatch.setenv("ENV", "dev")
    monkeypatch.setenv("JUSLEARN_DATABASE_URL", f"sqlite:///{tmp_path / 'juslearn.db'}")
    monkeypatch.setenv("JUSLEARN_UPLOAD_DIR", str(tmp_path / "uploads"))
    monkeypatch.setenv("JUSLEARN_RESET_ON_STARTUP", "true")
    monkeypatch.delenv("JUSLEARN_ENFORCE_FOREIGN_KEYS", raising=False)
    # keep hashing fast in tests
    monkeypatch.setenv("JUSLEARN_PASSWORD_ROUNDS", "1000")
    return Settings()


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def signup(client):
    """Register a user and return its id."""
    def _signup(username='alice', email='a@x.com', password='pw123'):
        r = client.post('/api/signup', json={'username': username, 'email': email, 'password': password})
        assert r.status_code == 200, r.text
        return r.json()['userId']
    return _signup
