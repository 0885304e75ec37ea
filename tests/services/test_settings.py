# tests/services/test_settings.py
"""Tests for database URL selection in Settings."""

import pytest

from viet_kconnect.core.settings import Settings


def _settings(**overrides) -> Settings:
    values = {"SECRET_KEY": "test-secret", "USE_TEST_DATABASE": False}
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestEffectiveDatabaseUrl:
    """Which URL the engine and Alembic connect to."""

    def test_primary_url_by_default(self):
        config = _settings(DATABASE_URL="sqlite:///./kconnect.db", TEST_DATABASE_URL="sqlite://")
        assert config.effective_database_url == "sqlite:///./kconnect.db"

    def test_test_database_when_enabled(self):
        config = _settings(
            DATABASE_URL="sqlite:///./kconnect.db",
            TEST_DATABASE_URL="sqlite://",
            USE_TEST_DATABASE=True,
        )
        assert config.effective_database_url == "sqlite://"

    def test_enabled_without_test_url_keeps_primary(self):
        config = _settings(DATABASE_URL="sqlite:///./kconnect.db", USE_TEST_DATABASE=True)
        assert config.effective_database_url == "sqlite:///./kconnect.db"

    @pytest.mark.parametrize(
        "url",
        ["postgresql://app@db/kconnect", "postgres://app@db/kconnect"],
    )
    def test_bare_postgres_urls_use_psycopg(self, url):
        config = _settings(DATABASE_URL=url)
        assert config.effective_database_url == "postgresql+psycopg://app@db/kconnect"

    def test_explicit_driver_is_untouched(self):
        config = _settings(DATABASE_URL="postgresql+psycopg://app@db/kconnect")
        assert config.effective_database_url == "postgresql+psycopg://app@db/kconnect"
