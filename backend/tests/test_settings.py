"""
Environment configuration tests.
"""

import pytest

from pregnancy_forecast.config.settings import load_settings

ENV_VARS = ("HOST", "PORT", "ALLOWED_ORIGINS", "LOG_LEVEL",
            "PROJECTION_SEED", "DETERMINISTIC_PROJECTION")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestLoadSettings:

    def test_defaults(self):
        settings = load_settings()
        assert settings.host == "0.0.0.0"
        assert settings.port == 8001
        assert settings.allowed_origins == ["*"]
        assert settings.log_level == "INFO"
        assert settings.projection_seed is None
        assert settings.deterministic_projection is False

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("PORT", "9100")
        monkeypatch.setenv("ALLOWED_ORIGINS", "http://localhost:3000, https://clinic.example.org")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("PROJECTION_SEED", "1234")
        monkeypatch.setenv("DETERMINISTIC_PROJECTION", "true")

        settings = load_settings()
        assert settings.port == 9100
        assert settings.allowed_origins == ["http://localhost:3000", "https://clinic.example.org"]
        assert settings.log_level == "DEBUG"
        assert settings.projection_seed == 1234
        assert settings.deterministic_projection is True

    def test_invalid_values_fall_back(self, monkeypatch):
        monkeypatch.setenv("PORT", "eighty")
        monkeypatch.setenv("PROJECTION_SEED", "random")
        monkeypatch.setenv("LOG_LEVEL", "chatty")

        settings = load_settings()
        assert settings.port == 8001
        assert settings.projection_seed is None
        assert settings.log_level == "INFO"
