from __future__ import annotations

from typing import Any, Dict, Optional


class OrmayuError(Exception):
    """Base exception for all ormayu-build errors."""

    def __init__(
            self,
            message: str,
            *args: Any,
            code: Optional[str] = None,
            details: Optional[Dict[str, Any]] = None,
            **kwargs: Any
    ) -> None:
        """
        Initialize exception.

        Args:
            message: Error message
            *args: Additional positional arguments to pass to Exception
            code: Error code (defaults to the class name)
            details: Additional error information
            **kwargs: Extra detail entries merged into ``details``
        """
        self.message = message
        self.code = code or self.__class__.__name__
        self.details: Dict[str, Any] = dict(details or {})
        self.details.update({k: v for k, v in kwargs.items() if v is not None})
        super().__init__(message, *args)

    def __str__(self) -> str:
        """String representation."""
        return f"{self.message}"


class ManagerError(OrmayuError):
    """Base exception for manager-related errors."""

    def __init__(self, message: str, manager_name: Optional[str] = None, **kwargs: Any) -> None:
        """
        Initialize manager error.

        Args:
            message: Error message
            manager_name: Name of the affected manager
            **kwargs: Additional error information
        """
        super().__init__(message, manager_name=manager_name, **kwargs)
        self.manager_name = manager_name


class ManagerInitializationError(ManagerError):
    """Exception raised when a manager fails to initialize."""

    pass


class ManagerShutdownError(ManagerError):
    """Exception raised when a manager fails to shut down cleanly."""

    pass


class ConfigurationError(OrmayuError):
    """Exception raised for configuration-related errors."""

    def __init__(
            self, message: str, *args: Any, config_key: Optional[str] = None, **kwargs: Any
    ) -> None:
        """Initialize a ConfigurationError.

        Args:
            message: A descriptive error message.
            *args: Additional positional arguments to pass to the parent Exception.
            config_key: The configuration key that caused the error.
            **kwargs: Additional keyword arguments to pass to the parent Exception.
        """
        super().__init__(message, *args, config_key=config_key, **kwargs)
        self.config_key = config_key


class ProviderError(ConfigurationError):
    """Exception raised when the SDK-info provider cannot supply a value."""

    def __init__(
            self, message: str, *args: Any, field: Optional[str] = None, **kwargs: Any
    ) -> None:
        """Initialize a ProviderError.

        Args:
            message: A descriptive error message.
            *args: Additional positional arguments to pass to the parent Exception.
            field: The provider field that could not be resolved.
            **kwargs: Additional keyword arguments to pass to the parent Exception.
        """
        super().__init__(message, *args, field=field, **kwargs)
        self.field = field

