import os
import tempfile
from pathlib import Path
from uuid import uuid4

import pytest

_TEST_DB_DIR = Path(tempfile.mkdtemp(prefix='solopack-tests-'))
DEFAULT_TEST_DB_URL = f"sqlite:///{_TEST_DB_DIR / 'test.db'}"
TEST_DB_URL = os.getenv("TEST_DB_URL", DEFAULT_TEST_DB_URL)
os.environ["DATABASE_URL"] = TEST_DB_URL
os.environ.setdefault("SECRET_KEY", "test-secret")

from fastapi.testclient import TestClient
from sqlmodel import Session

from app.core.config import settings
from app.db.init_db import init_db
from app.db.session import engine
from app.main import app
from app.services.user_service import ensure_admin

settings.DATABASE_URL = TEST_DB_URL

PASSWORD = 'secret123'


@pytest.fixture(autouse=True, scope="session")
def _configure_test_database():
    init_db(drop_all=True)
    yield


@pytest.fixture
def db():
    init_db(drop_all=True)
    with Session(engine) as session:
        yield session


@pytest.fixture
def client():
    init_db(drop_all=True)
    with TestClient(app) as test_client:
        yield test_client


def _login(client: TestClient, email: str) -> dict:
    login = client.post('/api/v1/auth/login', json={'email': email, 'password': PASSWORD})
    token = login.json()['access_token']
    return {'Authorization': f"Bearer {token}"}


@pytest.fixture
def user_headers(client):
    """Register a regular user and return ``(user_id, headers)``."""

    def _make() -> tuple[str, dict]:
        email = f"{uuid4()}@b.com"
        registered = client.post('/api/v1/auth/register', json={'email': email, 'password': PASSWORD})
        return registered.json()['id'], _login(client, email)

    return _make


@pytest.fixture
def admin_headers(client):
    """Create an admin account and return ``(user_id, headers)``."""

    def _make() -> tuple[str, dict]:
        email = f"admin-{uuid4()}@b.com"
        with Session(engine) as session:
            user, _ = ensure_admin(session, email, password_factory=lambda: PASSWORD)
            user_id = user.id
        return user_id, _login(client, email)

    return _make
