import pytest
from flash_finder.config import FinderSettings
from pydantic import ValidationError


class TestFinderSettings:
    def test_defaults(self, monkeypatch):
        for name in ("DEFAULT_PER_PAGE", "MAX_PER_PAGE", "LOG_SQL", "DATABASE_URL"):
            monkeypatch.delenv(name, raising=False)

        settings = FinderSettings(_env_file=None)

        assert settings.DEFAULT_PER_PAGE == 20
        assert settings.MAX_PER_PAGE == 500
        assert settings.LOG_SQL is False
        assert settings.DATABASE_URL is None

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_PER_PAGE", "50")
        monkeypatch.setenv("LOG_SQL", "true")

        settings = FinderSettings(_env_file=None)

        assert settings.DEFAULT_PER_PAGE == 50
        assert settings.LOG_SQL is True

    def test_default_page_size_must_be_positive(self):
        with pytest.raises(ValidationError, match="must be at least 1"):
            FinderSettings(_env_file=None, DEFAULT_PER_PAGE=0)

    def test_default_page_size_cannot_exceed_maximum(self):
        with pytest.raises(ValidationError, match="cannot exceed MAX_PER_PAGE"):
            FinderSettings(_env_file=None, DEFAULT_PER_PAGE=100, MAX_PER_PAGE=50)

    def test_is_development(self):
        settings = FinderSettings(
            _env_file=None, DEBUG=False, ENVIRONMENT="production"
        )
        assert settings.is_development() is False
