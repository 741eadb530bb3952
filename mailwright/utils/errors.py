"""Centralized error handling module."""

from enum import Enum
from typing import Any, Dict

from mailwright.utils.logging import get_logger

_logger = None


def _get_logger():
    """Get logger with lazy initialisation."""
    global _logger
    if _logger is None:
        _logger = get_logger(__name__)
    return _logger


## Error Categories


class ErrorCategory(Enum):
    """Categories of errors for better handling."""

    VALIDATION = "validation"
    COMPOSITION = "composition"
    NETWORK = "network"
    FILE_SYSTEM = "file_system"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


## Custom Exceptions


class MailwrightError(Exception):
    """Base exception for all mailwright errors."""

    category = ErrorCategory.UNKNOWN
    user_message = "An error occurred"

    def __init__(
        self, message: str | None = None, details: Dict[str, Any] | None = None
    ):
        """Initialise MailwrightError with optional message and details."""
        self.message = message or self.user_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error details to a dictionary."""
        return {
            "error_type": self.__class__.__name__,
            "category": self.category.value,
            "message": self.message,
            "details": self.details,
        }


## Validation Errors


class ValidationError(MailwrightError):
    """Base exception for validation-related errors."""

    category = ErrorCategory.VALIDATION
    user_message = "Invalid input"


class MissingRequiredFieldError(ValidationError):
    """Exception for missing required fields."""

    user_message = "A required field is missing"


class MissingBodyError(MissingRequiredFieldError):
    """Raised when a message has neither a text nor an HTML body."""

    user_message = "At least one of text or html must be provided"


class MissingRecipientError(MissingRequiredFieldError):
    """Raised when a message has no primary recipient."""

    user_message = "At least one recipient must be provided in 'to'"


## Composition Errors


class CompositionError(MailwrightError):
    """Base exception for message composition errors."""

    category = ErrorCategory.COMPOSITION
    user_message = "Failed to compose message"


class CompletionAlreadySettledError(CompositionError):
    """Raised when a completion signal is settled more than once."""

    user_message = "Completion signal has already been settled"


## Network Errors


class NetworkError(MailwrightError):
    """Base exception for network-related errors."""

    category = ErrorCategory.NETWORK
    user_message = "A network error occurred"


class SMTPError(NetworkError):
    """Exception for SMTP protocol errors."""

    user_message = "Failed to send email"


class NetworkTimeoutError(NetworkError):
    """Exception for network timeout errors."""

    user_message = "The connection timed out"


## File System Errors


class FileSystemError(MailwrightError):
    """Base exception for file system-related errors."""

    category = ErrorCategory.FILE_SYSTEM
    user_message = "A file system error occurred"


## Configuration Errors


class ConfigurationError(MailwrightError):
    """Base exception for configuration-related errors."""

    category = ErrorCategory.CONFIGURATION
    user_message = "A configuration error occurred"


class InvalidConfigError(ConfigurationError):
    """Exception for invalid configuration settings."""

    user_message = "Invalid configuration settings"


## Error Handler


class ErrorHandler:
    """Centralized error handling and logging."""

    @staticmethod
    def handle(
        error: Exception, context: str = "", log_traceback: bool = True
    ) -> Dict[str, Any]:
        """Handle errors with logging and user-friendly message."""
        if isinstance(error, MailwrightError):
            _get_logger().error(
                f"{context}: {error.message}", extra={"context": error.details}
            )
            if log_traceback:
                _get_logger().exception(error)
            return error.to_dict()
        else:
            _get_logger().error(f"{context}: {str(error)}")
            if log_traceback:
                _get_logger().exception(error)
            return {
                "error_type": "UnknownError",
                "category": ErrorCategory.UNKNOWN.value,
                "message": str(error),
                "details": {"context": context},
            }
