"""
Tests for configuration loading
"""

import os

import pytest

from utils.config import APP_VERSION, AppConfig, load_config

ENV_KEYS = ["EXPENSE_DB_PATH", "EXPORT_DIR", "LOG_LEVEL", "LOG_FILE", "TREND_WINDOW_DAYS"]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    # load_dotenv writes into os.environ, so work on a throwaway copy
    environ = {k: v for k, v in os.environ.items() if k not in ENV_KEYS}
    monkeypatch.setattr(os, "environ", environ)
    empty = tmp_path / ".env"
    empty.write_text("", encoding="utf-8")
    return str(empty)


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self, clean_env):
        """Test the values used when nothing is configured."""
        config = load_config(clean_env)
        assert config == AppConfig()
        assert config.db_path == "expenses.db"
        assert config.trend_window_days == 7

    def test_env_file(self, clean_env, tmp_path):
        """Test values read from a .env file."""
        env_file = tmp_path / "custom.env"
        env_file.write_text(
            "EXPENSE_DB_PATH=data/my.db\nEXPORT_DIR=out\nLOG_LEVEL=debug\nTREND_WINDOW_DAYS=14\n",
            encoding="utf-8")
        config = load_config(str(env_file))
        assert config.db_path == "data/my.db"
        assert config.export_dir == "out"
        assert config.log_level == "DEBUG"
        assert config.trend_window_days == 14

    def test_environment_wins_over_file(self, clean_env, tmp_path, monkeypatch):
        """Test that existing environment variables are not overridden."""
        env_file = tmp_path / "custom.env"
        env_file.write_text("EXPENSE_DB_PATH=from_file.db\n", encoding="utf-8")
        monkeypatch.setenv("EXPENSE_DB_PATH", "from_env.db")
        assert load_config(str(env_file)).db_path == "from_env.db"

    def test_blank_log_file_disables_file_logging(self, clean_env, monkeypatch):
        """Test that LOG_FILE= turns the file handler off."""
        monkeypatch.setenv("LOG_FILE", "")
        assert load_config(clean_env).log_file is None

    @pytest.mark.parametrize("value", ["0", "-3", "seven"])
    def test_invalid_trend_window(self, clean_env, monkeypatch, value):
        """Test that a bad window length is refused."""
        monkeypatch.setenv("TREND_WINDOW_DAYS", value)
        with pytest.raises(ValueError):
            load_config(clean_env)

    def test_display_dict(self):
        """Test the Settings screen values."""
        shown = AppConfig(log_file=None).as_display_dict()
        assert shown['Version'] == APP_VERSION
        assert shown['Log File'] == 'disabled'
