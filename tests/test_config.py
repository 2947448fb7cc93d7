"""Tests for settings and application wiring."""

import asyncio
from pathlib import Path

import pytest
from pydantic import ValidationError

from wealth_dashboard.actions import create_account_action
from wealth_dashboard.config import AppSettings, DatabaseSettings, StorageSettings, validate_all_settings
from wealth_dashboard.orchestrator import create_app_components
from wealth_dashboard.services.storage import RequestCache


class TestSettings:
    def test_database_defaults_to_sqlite(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        settings = DatabaseSettings()
        assert settings.url.startswith("sqlite")
        assert settings.is_sqlite is True

    def test_postgres_scheme_is_normalized(self):
        settings = DatabaseSettings(url="postgres://u:p@db:5432/wealth")
        assert settings.url == "postgresql://u:p@db:5432/wealth"
        assert settings.is_sqlite is False

    def test_database_url_from_environment(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite:///other.db")
        assert DatabaseSettings().url == "sqlite:///other.db"

    def test_log_level_is_validated(self):
        assert AppSettings(log_level="debug").log_level == "DEBUG"
        with pytest.raises(ValidationError):
            AppSettings(log_level="chatty")

    def test_app_settings_read_unprefixed_variables(self, monkeypatch):
        monkeypatch.setenv("APP_ENVIRONMENT", "production")
        monkeypatch.setenv("DASHBOARD_USER_ID", "member-3")
        monkeypatch.setenv("LOG_LEVEL", "warning")
        settings = AppSettings(_env_file=None)
        assert settings.app_environment == "production"
        assert settings.dashboard_user_id == "member-3"
        assert settings.log_level == "WARNING"

    def test_state_path(self, tmp_path):
        settings = StorageSettings(dir=str(tmp_path))
        assert settings.path == Path(tmp_path) / "local_storage.json"

    def test_validate_all_settings(self):
        status = validate_all_settings()
        assert status["database"] is True
        assert status["storage"] is True
        assert status["app"] is True


class TestCreateAppComponents:
    """End-to-end wiring: action → tag registry → page loader."""

    def test_mutation_clears_registered_loaders(self, tmp_path):
        components = create_app_components(
            database_url="sqlite://",
            state_path=tmp_path / "state.json",
        )
        cleared = []
        components.tag_registry.register("accounts", lambda: cleared.append("accounts"))

        result = asyncio.run(create_account_action(
            components.action_context("user-9"),
            {"name": "Main", "type": "cash", "balance": "25"},
        ))
        assert result.success is True
        assert cleared == ["accounts"]

        view = asyncio.run(components.pages.accounts_page("user-9", RequestCache()))
        assert view.total_accounts == 1
        assert view.positive_accounts == 1

    def test_filter_store_uses_state_path(self, tmp_path):
        path = tmp_path / "state.json"
        components = create_app_components(database_url="sqlite://", state_path=path)
        components.filter_store.set_filter("member-2")
        assert path.exists()
