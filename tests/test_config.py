from __future__ import annotations

import pytest

from core import config


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db:5432/pm?sslmode=require&application_name=api")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.test, https://b.test")
    monkeypatch.setenv("PROGRESS_TIMEOUT_S", "5")
    monkeypatch.setenv("MAX_UPLOAD_BYTES", "not-a-number")

    settings = config.load_settings()

    assert settings.database_url == "postgresql://u:p@db:5432/pm?application_name=api"
    assert settings.cors_origins == ("https://a.test", "https://b.test")
    assert settings.progress_timeout_s == 5.0
    assert settings.max_upload_bytes == config.DEFAULT_MAX_UPLOAD_BYTES


def test_database_url_is_required(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(RuntimeError):
        config.load_settings()


def test_upload_limit_must_be_positive(monkeypatch):
    monkeypatch.setenv("MAX_UPLOAD_BYTES", "0")
    with pytest.raises(RuntimeError):
        config.load_settings()
