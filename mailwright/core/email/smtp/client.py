"""SMTP transport: delivers composed messages and settles their completion."""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

import aiosmtplib

from mailwright.core.models.message import Message
from mailwright.utils.config import ConfigManager, SMTPConfig
from mailwright.utils.errors import (
    CompletionAlreadySettledError,
    CompositionError,
    ErrorHandler,
    MailwrightError,
    NetworkTimeoutError,
    SMTPError,
)
from mailwright.utils.logging import async_log_call, get_logger

from .constants import RetryConfig, SMTPPorts, TransientErrors
from .dsn import dsn_mail_options, dsn_rcpt_options

logger = get_logger(__name__)


@dataclass
class SendStats:
    """Statistics for one delivery."""

    attempts: int = 0
    send_duration: float = 0.0
    success: bool = False
    error_message: Optional[str] = None
    refused: Dict[str, str] = field(default_factory=dict)


class SMTPTransport:
    """Asynchronous SMTP transport for composed messages.

    Reads the envelope sender, every recipient (BCC included), the payload
    and the DSN request from the message, and settles
    ``message.completion`` exactly once per send.
    """

    def __init__(
        self,
        config: SMTPConfig,
        client_factory: Optional[Callable[[], aiosmtplib.SMTP]] = None,
        base_delay: float = RetryConfig.BASE_DELAY,
    ):
        """Initialise the transport.

        Args:
            config: SMTP settings
            client_factory: Callable returning an unconnected aiosmtplib.SMTP
            base_delay: Base delay for exponential backoff between retries
        """
        self.config = config
        self.max_retries = config.max_retries
        self.base_delay = base_delay
        self._client_factory = client_factory or self._create_client

    def _create_client(self) -> aiosmtplib.SMTP:
        use_tls = self.config.use_tls or SMTPPorts.is_implicit_ssl(self.config.port)
        return aiosmtplib.SMTP(
            hostname=self.config.host,
            port=self.config.port,
            username=self.config.username or None,
            password=self.config.password or None,
            use_tls=use_tls,
            start_tls=False if use_tls else self.config.start_tls,
            timeout=self.config.timeout,
        )

    def _is_transient_error(self, error: Exception) -> bool:
        """Check if error is transient and retry-worthy.

        Args:
            error: Exception to check

        Returns:
            True if transient, False otherwise
        """
        if isinstance(error, aiosmtplib.SMTPResponseException):
            return TransientErrors.is_transient(error.code)

        if isinstance(
            error,
            (
                aiosmtplib.SMTPServerDisconnected,
                aiosmtplib.SMTPConnectError,
                ConnectionError,
            ),
        ):
            return True

        return False

    def _retry_delay(self, attempt: int) -> float:
        return min(self.base_delay * 2 ** (attempt - 1), RetryConfig.MAX_DELAY)

    @async_log_call
    async def send(self, message: Message) -> SendStats:
        """Deliver a message with retry logic for transient errors.

        The message's completion signal is settled with success, or with
        an SMTPError / NetworkTimeoutError describing the last failure. If
        composition fails or the send is cancelled, the signal is settled
        with the error before it propagates.

        Args:
            message: Message to deliver

        Returns:
            SendStats with operation statistics

        Raises:
            CompletionAlreadySettledError: If the message was already sent
            CompositionError: If the message cannot be composed
        """
        if message.completion.is_settled:
            raise CompletionAlreadySettledError(
                "Message has already been handed to a transport"
            )

        try:
            return await self._send(message)
        except BaseException as e:
            if not message.completion.is_settled:
                message.completion.set_sent_error(self._interrupted_error(e))
            raise

    async def _send(self, message: Message) -> SendStats:
        stats = SendStats()
        start_time = time.time()
        last_error: Optional[Exception] = None

        recipients = message.recipients
        try:
            data = message.compose().content.encode("utf-8")
        except Exception as e:
            error = CompositionError(
                f"Failed to compose message: {e}", details={"error": str(e)}
            )
            ErrorHandler.handle(error, "Failed to send email", log_traceback=False)
            raise error from e

        mail_options = dsn_mail_options(message.dsn_override)
        rcpt_options = dsn_rcpt_options(message.dsn_override)

        logger.info(
            "Sending email",
            extra={"context": {"recipients": len(recipients), "size": len(data)}},
        )

        while stats.attempts <= self.max_retries:
            stats.attempts += 1
            try:
                refused = await self._deliver(
                    message.envelope_sender, recipients, data, mail_options, rcpt_options
                )

                stats.send_duration = time.time() - start_time
                stats.success = True
                stats.refused = refused

                if refused:
                    logger.warning(
                        "Some recipients were refused",
                        extra={"context": {"refused": list(refused)}},
                    )

                logger.info(
                    "Email sent successfully",
                    extra={
                        "context": {
                            "duration": round(stats.send_duration, 2),
                            "attempts": stats.attempts,
                        }
                    },
                )
                message.completion.set_sent()
                return stats

            except Exception as e:
                last_error = e

                if self._is_transient_error(e) and stats.attempts <= self.max_retries:
                    delay = self._retry_delay(stats.attempts)
                    logger.warning(
                        "Transient SMTP error, retrying",
                        extra={
                            "context": {
                                "attempt": stats.attempts,
                                "max_retries": self.max_retries,
                                "retry_delay": delay,
                                "error": str(e),
                            }
                        },
                    )
                    await asyncio.sleep(delay)
                    continue

                break

        stats.send_duration = time.time() - start_time
        stats.success = False
        stats.error_message = str(last_error) if last_error else "Unknown error"

        error = self._delivery_error(last_error, stats)
        ErrorHandler.handle(error, "Failed to send email after retries", log_traceback=False)
        message.completion.set_sent_error(error)

        return stats

    async def _deliver(
        self,
        sender: str,
        recipients: List[str],
        data: bytes,
        mail_options: List[str],
        rcpt_options: List[str],
    ) -> Dict[str, str]:
        """One SMTP session. Returns the recipients the server refused."""
        client = self._client_factory()
        async with client:
            errors, response = await client.sendmail(
                sender,
                recipients,
                data,
                mail_options=mail_options,
                rcpt_options=rcpt_options,
            )

        logger.debug(f"Server accepted message: {response}")
        return {address: str(reply) for address, reply in errors.items()}

    def _interrupted_error(self, error: BaseException) -> MailwrightError:
        if isinstance(error, MailwrightError):
            return error
        interrupted = SMTPError(
            "Send was interrupted before delivery completed",
            details={"error": repr(error)},
        )
        interrupted.__cause__ = error
        return interrupted

    def _delivery_error(
        self, error: Optional[Exception], stats: SendStats
    ) -> MailwrightError:
        details = {"attempts": stats.attempts, "error": stats.error_message}

        if isinstance(error, (aiosmtplib.SMTPTimeoutError, asyncio.TimeoutError)):
            return NetworkTimeoutError("SMTP send operation timed out", details=details)

        if isinstance(error, aiosmtplib.SMTPResponseException):
            details["code"] = error.code

        error_msg = (
            f"Failed to send email after {stats.attempts} attempt(s): "
            f"{stats.error_message}"
        )
        delivery_error = SMTPError(error_msg, details=details)
        delivery_error.__cause__ = error
        return delivery_error


## SMTP Transport Factory


def get_smtp_transport(config: Optional[ConfigManager] = None) -> SMTPTransport:
    """Factory function to get an SMTPTransport from application config."""
    if config is None:
        config = ConfigManager()
    return SMTPTransport(config.config.smtp)
