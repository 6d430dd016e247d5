from unittest.mock import MagicMock
import pytest
from sqlalchemy.orm import Session
from fastapi.testclient import TestClient

from src.auth.security import hash_password, issue_token
from src.config import settings
from src.database.core import Database, make_session
from src.database.models import Teacher
from src.main import app

TEST_PASSWORD = "s3cret-pass"

# Fixtures for tests
@pytest.fixture(scope="session", autouse=True)
def override_security_settings():
    """Ensure tests always use a fixed signing key and cheap bcrypt rounds"""
    jwt_secret, rounds = settings.jwt_secret, settings.bcrypt_rounds
    settings.jwt_secret = "TEST_SECRET"
    settings.bcrypt_rounds = 4
    yield
    settings.jwt_secret, settings.bcrypt_rounds = jwt_secret, rounds

@pytest.fixture(scope="session")
def client():
    """Shared FastAPI test client, no auth header by default"""
    return TestClient(app)

@pytest.fixture(scope="function")
def sqlite_db():
    """In-memory credential store, overrides the session dependency for the duration of a test"""
    database = Database("sqlite://")
    database.create_all()
    app.dependency_overrides[make_session] = database.session
    yield database
    app.dependency_overrides.pop(make_session)
    database.dispose()

@pytest.fixture(scope="function")
def db_session(sqlite_db):
    """Direct session on the same database the app is using"""
    session = sqlite_db.SessionFactory()
    yield session
    session.close()

@pytest.fixture(scope="function")
def mock_postgresql_db():
    """Fixture to mock a database session for testing."""
    db = MagicMock(spec=Session)
    app.dependency_overrides[make_session] = lambda: db
    yield db
    app.dependency_overrides.pop(make_session)

@pytest.fixture(scope="function")
def teacher(db_session):
    """A registered teacher with a configured web app"""
    row = Teacher(
        username="t1",
        password_hash=hash_password(TEST_PASSWORD, rounds=4),
        sheet_url="https://docs.google.com/spreadsheets/d/SHEET123/edit#gid=0",
        webapp_url="https://script.google.com/macros/s/WEBAPP/exec",
        webapp_secret="hook-secret",
    )
    db_session.add(row)
    db_session.commit()
    db_session.refresh(row)
    return row

@pytest.fixture(scope="function")
def auth_headers(teacher):
    """Authorization header for the `teacher` fixture"""
    token = issue_token(teacher.id, teacher.username, secret=settings.jwt_secret)
    return {"Authorization": f"Bearer {token}"}

class MockResponse:
    """Stand-in for requests.Response as returned by requests.post"""

    def __init__(self, status_code=200, text="", json_data=None):
        self.status_code = status_code
        self.text = text
        self._json_data = json_data

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._json_data is None:
            raise ValueError("No JSON object could be decoded")
        return self._json_data

@pytest.fixture(scope="function")
def webapp_calls(monkeypatch):
    """
    Replace requests.post with a recorder.
    Set `webapp_calls.response` (a MockResponse or an exception instance) before calling the API.
    """
    class Recorder:
        def __init__(self):
            self.calls = []
            self.response = MockResponse(200, text='{"status":"ok"}', json_data={"status": "ok"})

        def __call__(self, url, *args, **kwargs):
            self.calls.append({"url": url, **kwargs})
            if isinstance(self.response, Exception):
                raise self.response
            return self.response

    recorder = Recorder()
    monkeypatch.setattr("requests.post", recorder)
    return recorder

@pytest.fixture(scope="session")
def make_response():
    """Factory for MockResponse objects"""
    return MockResponse
