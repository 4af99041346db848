"""Tests for settings helper."""

import pytest
from pydantic import ValidationError

from olofalumni.settings import DEFAULT_UPLOAD_EXTENSIONS, Settings, get_settings


def test_allowed_upload_extensions_parsed_lowercase() -> None:
    settings = Settings(allowed_upload_extensions=" JPG, .png ,pdf")
    assert settings.get_allowed_upload_extensions() == {"jpg", "png", "pdf"}


def test_allowed_upload_extensions_empty_logs_warning_and_uses_defaults(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """When nothing parses, log a warning and fall back to the default whitelist."""
    caplog.set_level("WARNING")
    settings = Settings(allowed_upload_extensions=" , ,")
    result = settings.get_allowed_upload_extensions()
    assert result == set(DEFAULT_UPLOAD_EXTENSIONS.split(","))
    assert "olofalumni.settings" in [r.name for r in caplog.records]
    warnings = [r for r in caplog.records if r.levelname == "WARNING"]
    assert len(warnings) == 1


def test_cors_origins_split() -> None:
    settings = Settings(cors_origins="https://a.example, https://b.example")
    assert settings.get_cors_origins() == ["https://a.example", "https://b.example"]
    assert Settings(cors_origins="").get_cors_origins() == ["*"]


def test_email_backend_normalized() -> None:
    assert Settings(email_backend="Console").email_backend == "console"
    with pytest.raises(ValidationError):
        Settings(email_backend="carrier-pigeon")


def test_get_settings_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JWT_EXPIRE_DAYS", "3")
    get_settings.cache_clear()
    assert get_settings().jwt_expire_days == 3
    assert get_settings() is get_settings()
