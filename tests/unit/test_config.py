"""
Unit Tests for Config
=====================

Test Coverage
-------------
- Environment variable parsing with the ASYNCEMIT_ prefix
- Fallback to defaults on malformed values
- Environment helpers and summaries
- Emitter default taken from METRICS_ENABLED
"""

from pathlib import Path

import pytest

from asyncemit import Emitter
from asyncemit.core.config import Config, Environment


@pytest.fixture
def reload_config(monkeypatch):
    """Reload Config after the test so monkeypatched values do not leak."""
    yield monkeypatch
    monkeypatch.undo()
    Config.reload()


@pytest.mark.unit
class TestConfigLoading:
    """Test Config.load()/reload() from the environment."""

    def test_testing_environment_from_conftest(self):
        assert Config.is_testing()
        assert Config.LOG_LEVEL == "DEBUG"

    def test_reads_prefixed_values(self, reload_config):
        # Arrange
        reload_config.setenv("ASYNCEMIT_ENV", "production")
        reload_config.setenv("ASYNCEMIT_LOG_QUEUE_SIZE", "500")
        reload_config.setenv("ASYNCEMIT_LOG_JSON", "yes")
        reload_config.setenv("ASYNCEMIT_LOGS_DIR", "/tmp/asyncemit-logs")

        # Act
        Config.reload()

        # Assert
        assert Config.is_production()
        assert Config.LOG_QUEUE_SIZE == 500
        assert Config.LOG_JSON is True
        assert Config.LOGS_DIR == Path("/tmp/asyncemit-logs")

    def test_log_json_unset_is_none(self, reload_config):
        reload_config.delenv("ASYNCEMIT_LOG_JSON", raising=False)

        Config.reload()

        assert Config.LOG_JSON is None

    @pytest.mark.parametrize("raw", ["lots", "0", "2000000"])
    def test_bad_queue_size_falls_back(self, reload_config, raw):
        reload_config.setenv("ASYNCEMIT_LOG_QUEUE_SIZE", raw)

        Config.reload()

        assert Config.LOG_QUEUE_SIZE == 10_000
        assert "ASYNCEMIT_LOG_QUEUE_SIZE" in Config.get_metrics().validation_errors

    def test_bad_boolean_falls_back(self, reload_config):
        reload_config.setenv("ASYNCEMIT_METRICS_ENABLED", "maybe")

        Config.reload()

        assert Config.METRICS_ENABLED is True

    def test_bad_log_level_falls_back(self, reload_config):
        reload_config.setenv("ASYNCEMIT_LOG_LEVEL", "chatty")

        Config.reload()

        assert Config.LOG_LEVEL == "INFO"

    def test_unknown_environment_falls_back(self, reload_config):
        reload_config.setenv("ASYNCEMIT_ENV", "moon")

        Config.reload()

        assert Config.is_development()

    def test_reload_does_not_read_env_file_by_default(self, reload_config, mocker):
        load_dotenv = mocker.patch("asyncemit.core.config.config.load_dotenv")

        Config.reload()

        load_dotenv.assert_not_called()

    def test_reload_reads_env_file_when_asked(self, reload_config, tmp_path):
        # Arrange
        env_file = tmp_path / ".env"
        env_file.write_text("ASYNCEMIT_LOG_QUEUE_SIZE=123\n")
        # Registered with monkeypatch so undo() removes what the file sets.
        reload_config.setenv("ASYNCEMIT_LOG_QUEUE_SIZE", "1")
        reload_config.delenv("ASYNCEMIT_LOG_QUEUE_SIZE")

        # Act
        Config.reload(load_env_file=True, dotenv_path=env_file)

        # Assert
        assert Config.LOG_QUEUE_SIZE == 123

    def test_metrics_default_for_new_emitters(self, reload_config):
        reload_config.setenv("ASYNCEMIT_METRICS_ENABLED", "off")
        Config.reload()

        emitter = Emitter()

        assert emitter.get_metrics() is None


@pytest.mark.unit
class TestConfigSummary:
    """Test summaries and load metrics."""

    def test_summary_keys(self):
        summary = Config.get_config_summary()

        assert set(summary) == {
            "environment",
            "log_level",
            "log_json",
            "log_colors",
            "log_file",
            "logs_dir",
            "log_queue_size",
            "metrics_enabled",
        }
        assert summary["environment"] == "testing"

    def test_load_metrics_track_environment_values(self):
        summary = Config.get_metrics().get_summary()

        assert summary["from_environment"] >= 2
        assert summary["last_reload"] is not None

    def test_environment_from_string(self):
        assert Environment.from_string("STAGING") is Environment.STAGING
