from __future__ import annotations

import logging
import logging.handlers
import os
import pathlib
import sys
from typing import Any, Dict, List, Optional

import structlog
from pythonjsonlogger.json import JsonFormatter

from ormayu_build.core.base import BaseManager
from ormayu_build.utils.exceptions import ManagerInitializationError, ManagerShutdownError


class LoggingManager(BaseManager):
    """Manages logging configuration and access for the build tool.

    Configures Python's logging module with console and file handlers based
    on the ``logging`` configuration section, and wires structlog on top so
    components log structured key/value events.
    """

    # Mapping from string log levels to logging module constants
    LOG_LEVELS = {
        "debug": logging.DEBUG,
        "info": logging.INFO,
        "warning": logging.WARNING,
        "error": logging.ERROR,
        "critical": logging.CRITICAL,
    }

    TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    def __init__(self, config_manager: Any) -> None:
        """Initialize the Logging Manager.

        Args:
            config_manager: The Configuration Manager to use for logging settings.
        """
        super().__init__(name="logging_manager")
        self._config_manager = config_manager
        self._root_logger: Optional[logging.Logger] = None
        self._file_handler: Optional[logging.Handler] = None
        self._console_handler: Optional[logging.Handler] = None
        self._log_directory: Optional[pathlib.Path] = None
        self._log_format = "text"
        self._handlers: List[logging.Handler] = []

    def _level(self, value: Any, default: int = logging.INFO) -> int:
        return self.LOG_LEVELS.get(str(value).lower(), default)

    def initialize(self) -> None:
        """Initialize the Logging Manager.

        Raises:
            ManagerInitializationError: If initialization fails.
        """
        try:
            logging_config = self._config_manager.get("logging", {}) or {}
            log_level = self._level(logging_config.get("level", "INFO"))
            self._log_format = str(logging_config.get("format", "text")).lower()
            file_config = logging_config.get("file", {}) or {}
            console_config = logging_config.get("console", {}) or {}

            if file_config.get("enabled", False):
                log_file_path = file_config.get("path", "logs/ormayu-build.log")
                self._log_directory = pathlib.Path(log_file_path).parent
                os.makedirs(self._log_directory, exist_ok=True)

            self._root_logger = logging.getLogger()
            self._root_logger.setLevel(log_level)

            for handler in list(self._root_logger.handlers):
                self._root_logger.removeHandler(handler)

            formatter = self._create_formatter()

            if console_config.get("enabled", True):
                self._console_handler = logging.StreamHandler(sys.stderr)
                self._console_handler.setLevel(self._level(console_config.get("level", "INFO")))
                self._console_handler.setFormatter(formatter)
                self._root_logger.addHandler(self._console_handler)
                self._handlers.append(self._console_handler)

            if file_config.get("enabled", False):
                self._file_handler = logging.handlers.RotatingFileHandler(
                    file_config.get("path", "logs/ormayu-build.log"),
                    maxBytes=self._parse_rotation(file_config.get("rotation", "10 MB")),
                    backupCount=self._parse_retention(file_config.get("retention", "30 days")),
                    encoding="utf-8",
                )
                self._file_handler.setLevel(log_level)
                self._file_handler.setFormatter(formatter)
                self._root_logger.addHandler(self._file_handler)
                self._handlers.append(self._file_handler)

            self._configure_structlog()

            self._config_manager.register_listener("logging", self._on_config_changed)

            self._initialized = True
            self._healthy = True

            self.get_logger("logging_manager").debug(
                "Logging Manager initialized", format=self._log_format
            )

        except Exception as e:
            raise ManagerInitializationError(
                f"Failed to initialize LoggingManager: {str(e)}",
                manager_name=self.name,
            ) from e

    @staticmethod
    def _parse_rotation(rotation: Any) -> int:
        """Parse a rotation size such as ``"10 MB"`` into bytes."""
        if isinstance(rotation, str) and "MB" in rotation:
            return int(rotation.split()[0]) * 1024 * 1024
        return 10 * 1024 * 1024

    @staticmethod
    def _parse_retention(retention: Any) -> int:
        """Parse a retention such as ``"30 days"`` into a backup count."""
        if isinstance(retention, str) and "days" in retention:
            return int(retention.split()[0])
        return 30

    def _create_formatter(self) -> logging.Formatter:
        if self._log_format == "json":
            return JsonFormatter(
                fmt="%(asctime)s %(name)s %(levelname)s %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S%z",
                json_ensure_ascii=False,
            )
        return logging.Formatter(self.TEXT_FORMAT)

    def _configure_structlog(self) -> None:
        """Configure structlog for structured logging."""
        if self._log_format == "json":
            # event fields travel as ``extra`` so the JSON formatter emits them as keys
            renderer: Any = structlog.stdlib.render_to_log_kwargs
        else:
            renderer = structlog.processors.KeyValueRenderer(
                key_order=["event"], drop_missing=True
            )

        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.UnicodeDecoder(),
                renderer,
            ],
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    def get_logger(self, name: str) -> Any:
        """Get a logger for a specific component.

        Args:
            name: The name of the component requesting a logger.

        Returns:
            A structlog logger once initialized, a stdlib logger before.
        """
        if not self._initialized:
            return logging.getLogger(name)
        return structlog.get_logger(name)

    def _on_config_changed(self, key: str, value: Any) -> None:
        """Handle configuration changes for logging.

        Args:
            key: The configuration key that changed.
            value: The new value.
        """
        if key == "logging.level" and self._root_logger:
            log_level = self._level(value)
            self._root_logger.setLevel(log_level)
            if self._file_handler:
                self._file_handler.setLevel(log_level)

        elif key == "logging.console.level" and self._console_handler:
            self._console_handler.setLevel(self._level(value))

        elif key == "logging.console.enabled" and self._console_handler and self._root_logger:
            if not value and self._console_handler in self._root_logger.handlers:
                self._root_logger.removeHandler(self._console_handler)
            elif value and self._console_handler not in self._root_logger.handlers:
                self._root_logger.addHandler(self._console_handler)

    def shutdown(self) -> None:
        """Shut down the Logging Manager.

        Raises:
            ManagerShutdownError: If shutdown fails.
        """
        if not self._initialized:
            return

        try:
            for handler in self._handlers:
                if self._root_logger:
                    self._root_logger.removeHandler(handler)
                handler.flush()
                handler.close()
            self._handlers.clear()

            self._config_manager.unregister_listener("logging", self._on_config_changed)

            self._initialized = False
            self._healthy = False

        except Exception as e:
            raise ManagerShutdownError(
                f"Failed to shut down LoggingManager: {str(e)}",
                manager_name=self.name,
            ) from e

    def status(self) -> Dict[str, Any]:
        """Get the status of the Logging Manager.

        Returns:
            Status information about the Logging Manager.
        """
        status = super().status()

        if self._initialized:
            status.update(
                {
                    "log_directory": str(self._log_directory) if self._log_directory else None,
                    "format": self._log_format,
                    "handlers": {
                        "console": self._console_handler is not None
                        and self._root_logger is not None
                        and self._console_handler in self._root_logger.handlers,
                        "file": self._file_handler is not None
                        and self._root_logger is not None
                        and self._file_handler in self._root_logger.handlers,
                    },
                }
            )

        return status
