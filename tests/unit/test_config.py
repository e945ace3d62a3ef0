"""
Unit Tests for Settings
"""
from resus.config import Settings


def test_defaults(monkeypatch):
    for name in ("LOG_LEVEL", "LOG_FILE", "CORS_ORIGINS", "PORT"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings()
    assert settings.log_level == "INFO"
    assert settings.log_file is None
    assert settings.cors_origins == ["*"]
    assert settings.port == 8000


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test,")
    monkeypatch.setenv("PORT", "9001")
    settings = Settings()
    assert settings.log_level == "DEBUG"
    assert settings.cors_origins == ["http://a.test", "http://b.test"]
    assert settings.port == 9001
