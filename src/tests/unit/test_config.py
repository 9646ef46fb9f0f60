"""Tests for daybook.core.config module."""

import importlib
import logging
from pathlib import Path

import pytest

import daybook.core.config as config


@pytest.fixture
def reload_config():
    """Reload config under patched env, restoring module state afterwards."""
    yield lambda: importlib.reload(config)
    importlib.reload(config)


class TestEnvHelpers:
    """Tests for environment variable helpers."""

    def test_get_env_returns_value(self, monkeypatch):
        """get_env returns environment variable value."""
        monkeypatch.setenv("TEST_VAR", "test_value")

        assert config.get_env("TEST_VAR") == "test_value"

    def test_get_env_returns_default(self, monkeypatch):
        """get_env returns default when var not set."""
        monkeypatch.delenv("NONEXISTENT_VAR", raising=False)

        assert config.get_env("NONEXISTENT_VAR", "default") == "default"

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("42", 42),
            ("not_a_number", 99),
            (None, 123),
        ],
    )
    def test_get_env_int(self, monkeypatch, value, expected):
        """get_env_int parses or falls back to default."""
        if value is None:
            monkeypatch.delenv("INT_VAR", raising=False)
        else:
            monkeypatch.setenv("INT_VAR", value)

        assert config.get_env_int("INT_VAR", expected) == expected

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("true", True),
            ("True", True),
            ("1", True),
            ("yes", True),
            ("false", False),
            ("False", False),
            ("0", False),
            ("no", False),
        ],
    )
    def test_get_env_bool_parses_known_values(self, monkeypatch, value, expected):
        """get_env_bool parses known values."""
        monkeypatch.setenv("BOOL_VAR", value)

        assert config.get_env_bool("BOOL_VAR") is expected

    @pytest.mark.parametrize("default", [True, False])
    def test_get_env_bool_default(self, monkeypatch, default):
        """get_env_bool returns default for unknown values."""
        monkeypatch.setenv("BOOL_VAR", "maybe")

        assert config.get_env_bool("BOOL_VAR", default) is default


class TestPaths:
    """Tests for data directory and database path settings."""

    def test_database_path_under_data_dir(self, monkeypatch, tmp_path, reload_config):
        """DATABASE_PATH defaults to daybook.db inside DAYBOOK_DATA_DIR."""
        monkeypatch.setenv("DAYBOOK_DATA_DIR", str(tmp_path))
        monkeypatch.delenv("DAYBOOK_DATABASE_PATH", raising=False)

        reloaded = reload_config()

        assert reloaded.DAYBOOK_DATA_DIR == tmp_path
        assert reloaded.DATABASE_PATH == tmp_path / "daybook.db"

    def test_database_path_override(self, monkeypatch, tmp_path, reload_config):
        """DAYBOOK_DATABASE_PATH wins over the data directory."""
        target = tmp_path / "elsewhere.db"
        monkeypatch.setenv("DAYBOOK_DATABASE_PATH", str(target))

        reloaded = reload_config()

        assert reloaded.DATABASE_PATH == target

    def test_import_does_not_create_data_dir(
        self, monkeypatch, tmp_path, reload_config
    ):
        """The data directory is created on open, not at import."""
        data_dir = tmp_path / "lazy"
        monkeypatch.setenv("DAYBOOK_DATA_DIR", str(data_dir))

        reload_config()

        assert not data_dir.exists()

    def test_default_data_dir_in_home(self, monkeypatch, reload_config):
        """Without env the data directory is ~/.daybook."""
        monkeypatch.delenv("DAYBOOK_DATA_DIR", raising=False)

        reloaded = reload_config()

        assert reloaded.DAYBOOK_DATA_DIR == Path("~/.daybook").expanduser()


class TestSqliteSettings:
    """Tests for SQLite connection settings."""

    def test_defaults(self, monkeypatch, reload_config):
        """WAL is on with a five second busy timeout by default."""
        monkeypatch.delenv("DAYBOOK_WAL", raising=False)
        monkeypatch.delenv("DAYBOOK_SQLITE_TIMEOUT", raising=False)

        reloaded = reload_config()

        assert reloaded.SQLITE_WAL is True
        assert reloaded.SQLITE_TIMEOUT == 5

    def test_env_overrides(self, monkeypatch, reload_config):
        """DAYBOOK_WAL and DAYBOOK_SQLITE_TIMEOUT are read from env."""
        monkeypatch.setenv("DAYBOOK_WAL", "false")
        monkeypatch.setenv("DAYBOOK_SQLITE_TIMEOUT", "30")

        reloaded = reload_config()

        assert reloaded.SQLITE_WAL is False
        assert reloaded.SQLITE_TIMEOUT == 30


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_setup_logging_returns_logger(self, monkeypatch):
        """setup_logging returns the config module logger."""
        calls = {}
        monkeypatch.setattr(
            logging, "basicConfig", lambda **kwargs: calls.update(kwargs)
        )
        monkeypatch.setattr(config, "LOG_LEVEL", "debug")

        logger = config.setup_logging()

        assert logger.name == "daybook.core.config"
        assert calls["level"] == logging.DEBUG
