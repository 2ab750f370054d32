"""Tests for environment-driven settings."""

import pytest

from waitlist_api.core.config import AppSettings, DatabaseSettings, load_settings


def test_missing_database_url_exits(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)

    with pytest.raises(SystemExit) as exc_info:
        load_settings()

    assert "DATABASE_URL" in str(exc_info.value)


def test_blank_database_url_exits(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "   ")

    with pytest.raises(SystemExit):
        load_settings()


def test_load_settings_reads_environment(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://db/waitlist")
    monkeypatch.setenv("APP_RATE_LIMIT_REQUESTS", "5")

    loaded = load_settings()

    assert loaded.database.url == "postgresql://db/waitlist"
    assert loaded.app.rate_limit_requests == 5


def test_postgres_scheme_is_rewritten():
    db = DatabaseSettings(url="postgres://user:pw@host:5432/waitlist")

    assert db.url == "postgresql://user:pw@host:5432/waitlist"


def test_reference_rate_limit_defaults(monkeypatch):
    monkeypatch.delenv("APP_RATE_LIMIT_REQUESTS", raising=False)
    monkeypatch.delenv("APP_RATE_LIMIT_WINDOW_SECONDS", raising=False)

    app = AppSettings()

    assert app.rate_limit_requests == 12
    assert app.rate_limit_window_seconds == 10
    assert app.rate_limit_trust_forwarded_for is False


def test_bare_port_variable_is_honoured(monkeypatch):
    monkeypatch.delenv("APP_PORT", raising=False)
    monkeypatch.setenv("PORT", "8080")

    assert AppSettings().port == 8080


def test_cors_origins_are_split_and_trimmed(monkeypatch):
    monkeypatch.setenv("APP_CORS_ALLOWED_ORIGINS", " https://a.example , ,https://b.example")

    assert AppSettings().cors_origins == ["https://a.example", "https://b.example"]


def test_default_cors_origins():
    app = AppSettings(cors_allowed_origins="https://meetcasa.com,https://www.meetcasa.com")

    assert app.cors_origins == ["https://meetcasa.com", "https://www.meetcasa.com"]
