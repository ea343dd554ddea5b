# kriedko/tests/conftest.py

import pytest

SETTINGS_ENV = (
    "ENVIRONMENT",
    "DEBUG",
    "STORAGE_BACKEND",
    "DATA_FILE",
    "REDIS_URL",
    "DATABASE_URL",
    "SESSION_SECRET",
    "SESSION_TTL_HOURS",
    "ADMIN_USER",
    "ADMIN_PASS",
    "ADMIN_TOKEN",
    "REMOTE_AGGREGATOR_URL",
    "CORS_ORIGINS",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the developer's shell and .env out of settings under test."""
    for name in SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
