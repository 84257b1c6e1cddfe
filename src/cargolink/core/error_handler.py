"""Global Error Handling for CargoLink

Base exception hierarchy, severity classification and per-type error
callbacks for front ends built on the client.
"""

import logging
from enum import Enum
from typing import Callable, Dict, Optional, Type


class ErrorSeverity(Enum):
    """How loudly an error is reported."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class CargoLinkError(Exception):
    """Base exception class for CargoLink."""

    def __init__(self, message: str, severity: ErrorSeverity = ErrorSeverity.MEDIUM):
        self.message = message
        self.severity = severity
        super().__init__(message)


class ConfigurationError(CargoLinkError):
    """Invalid configuration, or settings that cannot be resolved into a base URL."""

    def __init__(self, message: str):
        super().__init__(message, ErrorSeverity.HIGH)


class SessionStorageError(CargoLinkError):
    """A session scope cannot be read or written."""
    pass


ErrorCallback = Callable[[Exception], None]


class ErrorHandler:
    """Classifies errors, logs them and dispatches registered callbacks.

    Callbacks are looked up along the error's MRO, so one registered for
    ``APIError`` also receives every status-specific subclass unless a
    more specific callback exists.
    """

    # Exceptions from outside the CargoLink hierarchy, most specific first
    BUILTIN_SEVERITIES = (
        (MemoryError, ErrorSeverity.CRITICAL),
        (PermissionError, ErrorSeverity.HIGH),
        (ConnectionError, ErrorSeverity.HIGH),
        (TimeoutError, ErrorSeverity.MEDIUM),
        (KeyboardInterrupt, ErrorSeverity.LOW),
    )

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.error_callbacks: Dict[Type[BaseException], ErrorCallback] = {}

    def register_error_callback(self, exception_type: Type[BaseException], callback: ErrorCallback):
        """Run ``callback`` for errors of ``exception_type`` (or a subclass)."""
        self.error_callbacks[exception_type] = callback

    def handle_error(self, error: Exception, context: Optional[str] = None) -> ErrorSeverity:
        """Log an error at the level matching its severity and run its callback.

        Args:
            error: The exception that occurred
            context: What was being attempted, prefixed to the log message

        Returns:
            Severity assigned to the error
        """
        severity = self.get_error_severity(error)
        message = f"{context}: {error}" if context else str(error)
        self._log_methods()[severity](message)

        callback = self._find_callback(type(error))
        if callback is not None:
            callback(error)

        return severity

    def get_error_severity(self, error: BaseException) -> ErrorSeverity:
        if isinstance(error, CargoLinkError):
            return error.severity
        for error_type, severity in self.BUILTIN_SEVERITIES:
            if isinstance(error, error_type):
                return severity
        return ErrorSeverity.MEDIUM

    def _find_callback(self, error_type: Type[BaseException]) -> Optional[ErrorCallback]:
        for klass in error_type.__mro__:
            if klass in self.error_callbacks:
                return self.error_callbacks[klass]
        return None

    def _log_methods(self) -> Dict[ErrorSeverity, Callable[[str], None]]:
        return {
            ErrorSeverity.LOW: self.logger.info,
            ErrorSeverity.MEDIUM: self.logger.warning,
            ErrorSeverity.HIGH: self.logger.error,
            ErrorSeverity.CRITICAL: self.logger.critical,
        }
