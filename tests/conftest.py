import os
from datetime import datetime, timedelta, timezone

# Settings require a JWT secret; set it before anything imports storefront.
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from storefront.core.config import get_settings


class FakeClock:
    """Deterministic clock: each call is one second after the previous."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        current = self.now
        self.now = current + timedelta(seconds=1)
        return current


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


@pytest.fixture
def client(data_dir, monkeypatch):
    monkeypatch.setenv("DATA_DIR", str(data_dir))
    get_settings.cache_clear()

    from storefront.main import app

    with TestClient(app) as c:
        yield c

    get_settings.cache_clear()


def make_token(sub: str, email: str, role: str) -> str:
    settings = get_settings()
    claims = {
        "sub": sub,
        "email": email,
        "role": role,
        "exp": datetime.now(timezone.utc) + timedelta(hours=1),
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {make_token('admin-1', 'admin@example.com', 'admin')}"}


@pytest.fixture
def customer_headers():
    return {"Authorization": f"Bearer {make_token('user-1', 'alice@example.com', 'customer')}"}


@pytest.fixture
def other_customer_headers():
    return {"Authorization": f"Bearer {make_token('user-2', 'bob@example.com', 'customer')}"}
