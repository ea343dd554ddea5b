# kriedko/tests/test_config.py

import pytest

from kriedko.app.startup import run_startup_checks
from kriedko.core.config import (
    DEFAULT_ADMIN_TOKEN,
    Settings,
    StoreBackend,
    validate_production_config,
)


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


SECURE = {
    "session_secret": "prod-secret",
    "admin_pass": "prod-pass",
    "admin_token": "prod-token",
}


class TestSettings:

    def test_defaults(self):
        settings = make_settings()

        assert settings.storage_backend == StoreBackend.FILE
        assert settings.data_file == "data/submissions.json"
        assert settings.session_cookie_name == "kriedko_admin"
        assert settings.session_ttl_hours == 12
        assert settings.stream_poll_interval_seconds == 1.0
        assert settings.stream_keepalive_seconds == 25.0
        assert settings.stream_max_lifetime_seconds == 55.0
        assert settings.forwarding_enabled is False

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "SQL")
        monkeypatch.setenv("DATABASE_URL", "sqlite:///./tmp/test.db")
        monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")
        monkeypatch.setenv("REMOTE_AGGREGATOR_URL", "http://agg.test")

        settings = make_settings()

        assert settings.storage_backend == StoreBackend.SQL
        assert settings.database_url == "sqlite:///./tmp/test.db"
        assert settings.cors_origins == ["http://a.test", "http://b.test"]
        assert settings.forwarding_enabled is True

    def test_unknown_backend_is_rejected(self):
        with pytest.raises(ValueError):
            make_settings(storage_backend="mongo")


class TestProductionValidation:

    def test_development_allows_defaults(self):
        validate_production_config(make_settings(environment="development"))

    def test_production_refuses_defaults(self):
        with pytest.raises(ValueError) as exc_info:
            validate_production_config(make_settings(environment="production"))

        assert "SESSION_SECRET" in str(exc_info.value)
        assert "ADMIN_TOKEN" in str(exc_info.value)

    def test_production_with_secrets(self):
        validate_production_config(make_settings(environment="production", **SECURE))

    def test_production_refuses_memory_backend(self):
        with pytest.raises(ValueError):
            validate_production_config(
                make_settings(environment="production", storage_backend="memory", **SECURE)
            )

    def test_production_kv_needs_redis_url(self):
        with pytest.raises(ValueError):
            validate_production_config(
                make_settings(environment="production", storage_backend="kv", redis_url=None, **SECURE)
            )


class TestStartupChecks:

    def test_warns_on_default_secrets(self):
        warnings = run_startup_checks(make_settings(environment="development"))

        assert len(warnings) == 3

    def test_quiet_with_custom_secrets(self):
        warnings = run_startup_checks(make_settings(environment="development", **SECURE))

        assert warnings == []

    def test_production_failure_propagates(self):
        with pytest.raises(ValueError):
            run_startup_checks(
                make_settings(environment="production", admin_token=DEFAULT_ADMIN_TOKEN)
            )
