from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from docs_admin import rate_limit
from docs_admin.config import config
from docs_admin.main import create_app
from docs_admin.passwords import legacy_digest
from docs_admin.rate_limit import LoginThrottle

SECRET = "test-signing-secret-0123456789abcdef"
PASSWORD = "correct horse battery staple"


class FakeClock:
    """Manually advanced replacement for time.time()."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def limiter(monkeypatch, clock) -> LoginThrottle:
    limiter = LoginThrottle(
        clock=clock,
        window_seconds=600,
        max_attempts=5,
        lockout_seconds=1800,
        cleanup_interval=200,
    )
    monkeypatch.setattr(rate_limit, "_limiter", limiter)
    return limiter


@pytest.fixture
def configured(monkeypatch):
    monkeypatch.setattr(config, "admin_password_hash", legacy_digest(PASSWORD))
    monkeypatch.setattr(config, "admin_jwt_secret", SECRET)
    monkeypatch.setattr(config, "environment", "development")


@pytest.fixture
def client(configured, limiter):
    with TestClient(create_app()) as c:
        yield c


@pytest.fixture
def secret() -> str:
    return SECRET


@pytest.fixture
def password() -> str:
    return PASSWORD
