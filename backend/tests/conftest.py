"""Shared fixtures: a file-backed SQLite database, fake collaborators and a test client."""

import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="waitlist-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'waitlist.db')}"
os.environ["RESEND_API_KEY"] = ""
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD_SALT"] = "test-salt"

from utils.security import hash_password  # noqa: E402

ADMIN_PASSWORD = "correct horse battery staple"
os.environ["ADMIN_PASSWORD_HASH"] = hash_password(ADMIN_PASSWORD, "test-salt")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from core.rate_limit import get_signup_rate_limiter, limiter  # noqa: E402
from db.base_class import Base  # noqa: E402
from db.session import SessionLocal, engine, init_db  # noqa: E402
from main import app  # noqa: E402
from services.welcome_email import NotifyResult, get_notifier  # noqa: E402


class FakeNotifier:
    def __init__(self, success: bool = True, error: Exception | None = None) -> None:
        self.success = success
        self.error = error
        self.calls: list[tuple[str, str | None]] = []

    def notify(self, email: str, display_name: str | None = None) -> NotifyResult:
        self.calls.append((email, display_name))
        if self.error is not None:
            raise self.error
        if not self.success:
            return NotifyResult(success=False, detail="simulated failure")
        return NotifyResult(success=True, detail="fake-message-id")


@pytest.fixture
def tables():
    init_db(engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(tables):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def reset_rate_limits():
    get_signup_rate_limiter().reset()
    limiter.reset()
    yield
    get_signup_rate_limiter().reset()


@pytest.fixture
def admin_password():
    return ADMIN_PASSWORD


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def failing_notifier():
    return FakeNotifier(success=False)


@pytest.fixture
def exploding_notifier():
    return FakeNotifier(error=TimeoutError("email provider timed out"))


@pytest.fixture
def client(tables, notifier):
    app.dependency_overrides[get_notifier] = lambda: notifier
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def csrf_headers(client):
    token = client.get("/api/csrf-token").json()["csrf_token"]
    return {"x-csrf-token": token}


@pytest.fixture
def admin_client(client, csrf_headers):
    response = client.post(
        "/api/admin/login",
        json={"username": "admin", "password": ADMIN_PASSWORD},
        headers=csrf_headers,
    )
    assert response.status_code == 200
    return client
