"""Core modules for CargoLink.

Configuration, error hierarchy and logging shared by the API client
and the command line front end.
"""

from .config_manager import AppConfig, APIConfig, ConfigManager, LoggingConfig, SessionConfig
from .error_handler import (
    CargoLinkError,
    ConfigurationError,
    SessionStorageError,
    ErrorHandler,
    ErrorSeverity
)
from .logging_manager import LoggingManager

__all__ = [
    "AppConfig",
    "APIConfig",
    "ConfigManager",
    "LoggingConfig",
    "SessionConfig",
    "CargoLinkError",
    "ConfigurationError",
    "SessionStorageError",
    "ErrorHandler",
    "ErrorSeverity",
    "LoggingManager"
]
