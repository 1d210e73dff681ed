import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="noteshare-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["ADMIN_USERNAMES"] = "admin"
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient

from db import engine
from main import app
from models import Base


@pytest.fixture(autouse=True)
def fresh_schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_user():
    """Register a user and hand back a TestClient logged in as them."""
    def _make(username, password="password123", email=None, **extra):
        c = TestClient(app)
        body = {
            "username": username,
            "password": password,
            "email": email or f"{username}@example.com",
            **extra,
        }
        res = c.post("/api/auth/register", json=body)
        assert res.status_code == 201, res.text
        c.user = res.json()["user"]
        return c
    return _make


def create_file(c, title="Notes", content="Some content"):
    res = c.post("/api/files", json={"title": title, "content": content})
    assert res.status_code == 201, res.text
    return res.json()["file"]
