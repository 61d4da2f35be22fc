from __future__ import annotations

from ormayu_build.core.base import BaseManager
from ormayu_build.core.config_manager import ConfigManager, ConfigSchema
from ormayu_build.core.logging_manager import LoggingManager

__all__ = [
    "BaseManager",
    "ConfigManager",
    "ConfigSchema",
    "LoggingManager",
]
