"""Unit tests for application settings."""
import importlib

import pytest


@pytest.fixture
def reload_config(monkeypatch):
    """Reload src.config under a patched environment."""
    import src.config

    def _reload(**env):
        for key in ("REGISTRATION_DATA_DIR", "REGISTRATION_BACKUP", "REGISTRATION_LOG_LEVEL"):
            monkeypatch.delenv(key, raising=False)
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        monkeypatch.setattr("dotenv.load_dotenv", lambda *args, **kwargs: False)
        return importlib.reload(src.config)

    yield _reload
    monkeypatch.undo()
    importlib.reload(src.config)


class TestConfig:
    """Tests for environment-driven settings."""

    def test_defaults(self, reload_config):
        """Defaults apply when nothing is set."""
        config = reload_config()

        assert config.DATA_DIR == "data"
        assert config.BACKUP_ENABLED is True
        assert config.LOG_LEVEL == "INFO"

    def test_environment_overrides(self, reload_config, tmp_path):
        """Environment variables override defaults."""
        config = reload_config(
            REGISTRATION_DATA_DIR=str(tmp_path),
            REGISTRATION_BACKUP="off",
            REGISTRATION_LOG_LEVEL="debug",
        )

        assert config.DATA_DIR == str(tmp_path)
        assert config.BACKUP_ENABLED is False
        assert config.LOG_LEVEL == "DEBUG"

    def test_get_store_uses_settings(self, reload_config, tmp_path):
        """get_store builds a file store on the configured directory."""
        from src.services.record_store import JsonFileRecordStore

        config = reload_config(REGISTRATION_DATA_DIR=str(tmp_path), REGISTRATION_BACKUP="0")
        store = config.get_store()

        assert isinstance(store, JsonFileRecordStore)
        assert store.data_dir == str(tmp_path)
        assert store.backup is False
