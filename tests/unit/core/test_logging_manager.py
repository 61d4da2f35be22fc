"""Unit tests for the Logging Manager."""

import json
import logging
import os
from unittest.mock import MagicMock

import pytest
import structlog

from ormayu_build.core.logging_manager import LoggingManager
from ormayu_build.utils.exceptions import ManagerInitializationError


@pytest.fixture
def logging_config(tmp_path):
    """Create a logging configuration for testing."""
    return {
        "level": "INFO",
        "format": "text",
        "file": {
            "enabled": True,
            "path": os.path.join(str(tmp_path), "logs", "test.log"),
            "rotation": "1 MB",
            "retention": "5 days",
        },
        "console": {"enabled": True, "level": "DEBUG"},
    }


@pytest.fixture
def config_manager_mock(logging_config):
    """Create a mock ConfigManager for the LoggingManager."""
    config_manager = MagicMock()
    config_manager.get.return_value = logging_config
    return config_manager


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)


@pytest.mark.usefixtures("restore_root_logger")
class TestLoggingManager:
    def test_initialization(self, config_manager_mock, tmp_path):
        """Test that the LoggingManager initializes correctly."""
        logging_manager = LoggingManager(config_manager_mock)
        logging_manager.initialize()

        assert logging_manager.initialized
        assert logging_manager.healthy
        assert (tmp_path / "logs").is_dir()

        status = logging_manager.status()
        assert status["handlers"] == {"console": True, "file": True}
        assert status["format"] == "text"

        config_manager_mock.register_listener.assert_called_once_with(
            "logging", logging_manager._on_config_changed
        )

        logging_manager.shutdown()
        assert not logging_manager.initialized
        config_manager_mock.unregister_listener.assert_called_once()

    def test_rotation_and_retention(self, config_manager_mock):
        logging_manager = LoggingManager(config_manager_mock)
        logging_manager.initialize()

        assert logging_manager._file_handler.maxBytes == 1024 * 1024
        assert logging_manager._file_handler.backupCount == 5

        logging_manager.shutdown()

    def test_get_logger_before_and_after_initialize(self, config_manager_mock):
        logging_manager = LoggingManager(config_manager_mock)
        assert isinstance(logging_manager.get_logger("early"), logging.Logger)

        logging_manager.initialize()
        logger = logging_manager.get_logger("resolver")
        assert not isinstance(logger, logging.Logger)
        assert hasattr(logger, "info")

        logging_manager.shutdown()

    def test_json_file_output(self, config_manager_mock, logging_config):
        logging_config["format"] = "json"
        logging_config["console"]["enabled"] = False

        logging_manager = LoggingManager(config_manager_mock)
        logging_manager.initialize()
        logging_manager.get_logger("resolver").info("Resolved build descriptor", compile_sdk=35)
        logging_manager.shutdown()

        with open(logging_config["file"]["path"], encoding="utf-8") as f:
            records = [json.loads(line) for line in f if line.strip()]

        record = next(r for r in records if r["message"] == "Resolved build descriptor")
        assert record["compile_sdk"] == 35
        assert record["name"] == "resolver"

    def test_text_file_output(self, config_manager_mock, logging_config):
        logging_manager = LoggingManager(config_manager_mock)
        logging_manager.initialize()
        logging_manager.get_logger("builder").warning("Gradle stderr output", stderr="boom")
        logging_manager.shutdown()

        with open(logging_config["file"]["path"], encoding="utf-8") as f:
            content = f.read()

        assert "builder - WARNING - event='Gradle stderr output'" in content
        assert "stderr='boom'" in content

    def test_level_change_listener(self, config_manager_mock):
        logging_manager = LoggingManager(config_manager_mock)
        logging_manager.initialize()

        logging_manager._on_config_changed("logging.level", "ERROR")
        assert logging.getLogger().level == logging.ERROR

        logging_manager._on_config_changed("logging.console.enabled", False)
        assert logging_manager.status()["handlers"]["console"] is False

        logging_manager.shutdown()

    def test_initialization_failure(self):
        config_manager = MagicMock()
        config_manager.get.side_effect = RuntimeError("config unavailable")

        with pytest.raises(ManagerInitializationError):
            LoggingManager(config_manager).initialize()

    def test_shutdown_without_initialize(self, config_manager_mock):
        logging_manager = LoggingManager(config_manager_mock)
        logging_manager.shutdown()
        config_manager_mock.unregister_listener.assert_not_called()
