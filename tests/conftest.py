"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any application import so the global
settings object sees them: the in-memory store backend and rate limiting
disabled (tests that exercise the limiter enable it explicitly).
"""

import os

# CRITICAL: Set these before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("DB_BACKEND", "memory")
os.environ.setdefault("APP_RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from collections.abc import Iterator  # noqa: E402

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from restaurant_api.core.app_factory import create_app  # noqa: E402


@pytest.fixture
def app() -> FastAPI:
    """Fresh application instance (own store, own lifespan)."""
    return create_app()


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    """Test client with the lifespan running, so the memory store is open."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def pasta_place() -> dict:
    return {"name": "Pasta Place", "cuisine": "Italian", "rating": 4.5}
