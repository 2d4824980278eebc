from __future__ import annotations

"""Functional test bootstrap.

Points the service at a process-wide in-memory SQLite database before any
storefront module is imported, builds one app for the session and restores
seed data, sessions, challenges and buffered events before every test.
"""

import os

import pytest

os.environ["TEST_DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["APPLICATION_DOMAIN"] = "juice-sh.op"
os.environ["AUTO_APPLY_MIGRATIONS"] = "1"
os.environ.pop("CAPTCHA_TTL_SECONDS", None)
os.environ.pop("CAPTCHA_LENGTH", None)

from fastapi.testclient import TestClient  # noqa: E402

from storefront.config import reset_config  # noqa: E402

reset_config()

from storefront.db.base import get_engine  # noqa: E402
from storefront.db.seed import reset_database  # noqa: E402
from storefront.logic import events, inmemory_state  # noqa: E402
from storefront.main import create_app  # noqa: E402

ADMIN = ("admin@juice-sh.op", "admin123")
JIM = ("jim@juice-sh.op", "ncc-1701")
BENDER = ("bender@juice-sh.op", "OhG0dPlease1nsertLiquor!")
BJOERN = ("bjoern.kimminich@gmail.com", "bW9jLmxpYW1nQGhjaW5pbW1pay5ucmVvamI=")
AMY = ("amy@juice-sh.op", "K1f.....................")


@pytest.fixture(scope="session")
def app():
    return create_app(enable_test_routes=True)


@pytest.fixture(autouse=True)
def clean_state(app):
    """Fresh seed data and empty in-memory state for every test.

    Depends on `app` so migrations exist before the first reset.
    """
    reset_database(get_engine())
    inmemory_state.reset_state()
    events.EVENT_BUFFER.clear()
    yield


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


def login(client: TestClient, credentials: tuple[str, str]) -> str:
    email, password = credentials
    resp = client.post("/rest/user/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["authentication"]["token"]


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
