"""Tests for configuration resolution."""

import pytest

from film_recipes.utils.config import Config, get_config, reset_config


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    monkeypatch.delenv("FILM_RECIPES_DATABASE_URL", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("FILM_RECIPES_ENV", raising=False)
    reset_config()
    yield
    reset_config()


class TestConfig:
    """Tests for Config database URL resolution."""

    def test_sqlite_file_by_default(self):
        config = Config("development")
        assert config.database_url.startswith("sqlite:///")
        assert config.database_url.endswith("film_recipes.db")

    def test_project_override_wins(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://generic/db")
        monkeypatch.setenv("FILM_RECIPES_DATABASE_URL", "postgresql://specific/db")
        assert Config().database_url == "postgresql://specific/db"

    def test_generic_override(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://generic/db")
        config = Config()
        assert config.database_url == "postgresql://generic/db"
        assert config.database_exists()


class TestGetConfig:
    """Tests for the configuration singleton."""

    def test_environment_from_variable(self, monkeypatch):
        monkeypatch.setenv("FILM_RECIPES_ENV", "development")
        assert get_config().is_development

    def test_singleton(self):
        assert get_config() is get_config()

    def test_reset(self):
        first = get_config()
        reset_config()
        assert get_config() is not first
