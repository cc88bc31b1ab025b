# tests/test_app.py
"""
Startup Tests - Settings Validation and Component Wiring

Covers the fatal missing-credential condition, settings defaults and
validators, and wiring of the components from settings.

Files that this module USES:
- fxsync.app (load_settings, build_components, main)
- fxsync.config.settings (Settings)
- pytest (testing framework)
"""
import pytest  # Testing framework for writing and running tests

from datetime import timedelta
from pathlib import Path

from pydantic import ValidationError

from fxsync import app
from fxsync.config.settings import Settings
from fxsync.domain.errors import ConfigurationError

VALID_TOKEN = "123456789:" + "A" * 35


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.setenv("FIXER_API_KEY", "abcdef0123456789")
        settings = Settings(_env_file=None)
        assert settings.fixer_base_url == "http://data.fixer.io/api"
        assert settings.http_timeout_seconds == 10
        assert settings.sync_interval is None
        assert settings.sync_on_startup is True
        assert settings.pid_file == Path("./data") / "fxsync.pid"

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("FIXER_API_KEY", raising=False)
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_short_api_key_rejected(self, monkeypatch):
        monkeypatch.setenv("FIXER_API_KEY", "short")
        with pytest.raises(ValidationError, match="FIXER_API_KEY"):
            Settings(_env_file=None)

    def test_interval_and_base_url(self, monkeypatch):
        monkeypatch.setenv("FIXER_API_KEY", "abcdef0123456789")
        monkeypatch.setenv("SYNC_INTERVAL_MINUTES", "2")
        monkeypatch.setenv("FIXER_BASE_URL", "https://data.fixer.io/api/")
        settings = Settings(_env_file=None)
        assert settings.sync_interval == timedelta(minutes=2)
        assert settings.fixer_base_url == "https://data.fixer.io/api"

    @pytest.mark.parametrize("url", ["sqlite://", "sqlite:///:memory:"])
    def test_in_memory_database_rejected(self, monkeypatch, url):
        monkeypatch.setenv("FIXER_API_KEY", "abcdef0123456789")
        monkeypatch.setenv("DATABASE_URL", url)
        with pytest.raises(ValidationError, match="in-memory"):
            Settings(_env_file=None)

    def test_file_database_accepted(self, monkeypatch, tmp_path):
        monkeypatch.setenv("FIXER_API_KEY", "abcdef0123456789")
        monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'rates.db'}")
        assert Settings(_env_file=None).database_url.endswith("rates.db")

    def test_bot_token_validated_when_set(self, monkeypatch):
        monkeypatch.setenv("FIXER_API_KEY", "abcdef0123456789")
        monkeypatch.setenv("BOT_TOKEN", "not-a-token")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)
        monkeypatch.setenv("BOT_TOKEN", VALID_TOKEN)
        assert Settings(_env_file=None).bot_token == VALID_TOKEN


class TestStartup:
    def test_load_settings_missing_key_is_configuration_error(self, monkeypatch):
        monkeypatch.delenv("FIXER_API_KEY", raising=False)
        monkeypatch.setattr(app, "get_settings", lambda: Settings(_env_file=None))
        with pytest.raises(ConfigurationError, match="FIXER_API_KEY"):
            app.load_settings()

    def test_main_exits_without_key(self, monkeypatch):
        monkeypatch.delenv("FIXER_API_KEY", raising=False)
        monkeypatch.setattr(app, "get_settings", lambda: Settings(_env_file=None))
        monkeypatch.setattr(app, "setup_logging", lambda *a, **k: None)
        with pytest.raises(SystemExit) as exc_info:
            app.main()
        assert exc_info.value.code == 1

    def test_build_components(self, monkeypatch, tmp_path):
        monkeypatch.setenv("FIXER_API_KEY", "abcdef0123456789")
        monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'rates.db'}")
        monkeypatch.setenv("SYNC_INTERVAL_MINUTES", "5")
        settings = Settings(_env_file=None)

        components = app.build_components(settings)
        try:
            assert components.provider.api_key == "abcdef0123456789"
            assert components.scheduler.interval == timedelta(minutes=5)
            assert components.query_service.store is components.store
            assert components.store.latest_date() is None
        finally:
            components.store.dispose()


class TestInstanceLock:
    def test_stale_pid_file_removed(self, tmp_path):
        pid_file = tmp_path / "fxsync.pid"
        pid_file.write_text("not-a-pid")
        app._check_existing_instance(pid_file)
        assert not pid_file.exists()

    def test_running_instance_refused(self, tmp_path):
        import os
        pid_file = tmp_path / "fxsync.pid"
        pid_file.write_text(str(os.getpid()))
        with pytest.raises(RuntimeError, match="already running"):
            app._check_existing_instance(pid_file)

    def test_create_and_remove(self, tmp_path):
        pid_file = tmp_path / "sub" / "fxsync.pid"
        app._create_pid_file(pid_file)
        assert pid_file.exists()
        app._remove_pid_file(pid_file)
        assert not pid_file.exists()
