"""SMTP constants and configuration values."""

from dataclasses import dataclass


class SMTPResponse:
    """SMTP response codes the transport reacts to."""

    # 4xx Transient Failure
    SERVICE_NOT_AVAILABLE = 421  # Service not available, closing channel
    MAILBOX_BUSY = 450  # Mailbox unavailable (e.g., busy)
    LOCAL_ERROR = 451  # Local error in processing
    INSUFFICIENT_STORAGE = 452  # Insufficient system storage


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""

    BASE_DELAY: float = 1.0  # Base delay for exponential backoff (seconds)
    MAX_DELAY: float = 60.0  # Maximum delay between retries (seconds)


class TransientErrors:
    """SMTP error codes that warrant retry attempts."""

    CODES = [
        SMTPResponse.SERVICE_NOT_AVAILABLE,  # 421
        SMTPResponse.MAILBOX_BUSY,  # 450
        SMTPResponse.LOCAL_ERROR,  # 451
        SMTPResponse.INSUFFICIENT_STORAGE,  # 452
    ]

    @classmethod
    def is_transient(cls, code: int) -> bool:
        """Check if an error code is transient.

        Args:
            code: SMTP response code

        Returns:
            True if transient, False otherwise
        """
        return code in cls.CODES


class SMTPPorts:
    """Standard SMTP port numbers."""

    SUBMISSION_SSL = 465  # Implicit TLS/SSL

    @classmethod
    def is_implicit_ssl(cls, port: int) -> bool:
        """Check if port uses implicit SSL."""
        return port == cls.SUBMISSION_SSL
