from __future__ import annotations

from ormayu_build.utils.exceptions import (
    ConfigurationError,
    ManagerError,
    ManagerInitializationError,
    ManagerShutdownError,
    OrmayuError,
    ProviderError,
)

__all__ = [
    "ConfigurationError",
    "ManagerError",
    "ManagerInitializationError",
    "ManagerShutdownError",
    "OrmayuError",
    "ProviderError",
]
