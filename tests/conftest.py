"""
tests/conftest.py -- Shared test fixtures for Turnstile.

This module provides:
  - client: TestClient over the real app; each test gets a fresh lifespan,
    therefore a fresh AuthService with an empty CredentialStore
  - service / store: isolated core objects for unit tests
  - registration / login: valid request bodies (fresh dict per test)

The bcrypt cost env var must be set before any app import so get_settings()
caches the cheap test value. Cost 4 is bcrypt's minimum; it keeps the suite
fast without changing any code path.
"""

from __future__ import annotations

import os
from collections.abc import Generator

# CRITICAL: Set before any api/core import -- get_settings() is cached.
os.environ.setdefault("TURNSTILE_BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.service import AuthService
from auth.store import CredentialStore

TEST_ROUNDS = 4


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Yield a TestClient whose lifespan built a brand-new AuthService."""
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def store() -> CredentialStore:
    return CredentialStore()


@pytest.fixture
def service(store: CredentialStore) -> AuthService:
    return AuthService(rounds=TEST_ROUNDS, store=store)


@pytest.fixture
def registration() -> dict:
    return {
        "username": "alice",
        "email": "alice@example.com",
        "type": "user",
        "password": "Secr3t!pw",
    }


@pytest.fixture
def login() -> dict:
    return {"username": "alice", "password": "Secr3t!pw"}
