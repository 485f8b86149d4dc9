"""
Retry Logic Helper Module

Opt-in retry for callers who want to re-attempt transient failures
(transport errors, 429 and 5xx responses). Nothing inside the client retries
on its own; callers wrap the calls they consider safe to repeat.
Includes structured logging with correlation IDs for request tracing.
"""

import asyncio
import logging
import uuid
import contextvars
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from ..errors import ApiError, OneMoneyError, TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Context variable for correlation ID (task-local under asyncio)
_correlation_id: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    'correlation_id', default=None
)


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for request tracing."""
    return uuid.uuid4().hex[:12]


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from context."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: Optional[str]) -> contextvars.Token:
    """Set the correlation ID in context. Returns token for reset."""
    return _correlation_id.set(correlation_id)


class CorrelationContext:
    """
    Context manager for correlation ID scoping.

    Usage:
        with CorrelationContext("payment") as cid:
            logger.info(f"[{cid}] Submitting payment")
            result = await client.transactions.send_payment(...)
    """

    def __init__(self, prefix: Optional[str] = None):
        """
        Initialize correlation context.

        Args:
            prefix: Optional prefix for the correlation ID (e.g., "poll", "payment")
        """
        self.correlation_id = generate_correlation_id()
        if prefix:
            self.correlation_id = f"{prefix}_{self.correlation_id}"
        self._token: Optional[contextvars.Token] = None

    def __enter__(self) -> str:
        self._token = set_correlation_id(self.correlation_id)
        return self.correlation_id

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._token is not None:
            _correlation_id.reset(self._token)


def log_with_correlation(
    level: int,
    message: str,
    operation_name: str,
    attempt: Optional[int] = None,
    max_attempts: Optional[int] = None,
    **extra
):
    """
    Log message with correlation ID and structured context.

    Args:
        level: Logging level (logging.INFO, logging.WARNING, etc.)
        message: Log message
        operation_name: Name of the operation being executed
        attempt: Current attempt number (1-indexed)
        max_attempts: Maximum number of attempts
        **extra: Additional context fields
    """
    cid = get_correlation_id()

    parts = []
    if cid:
        parts.append(f"[{cid}]")
    parts.append(f"[{operation_name}]")
    if attempt is not None and max_attempts is not None:
        parts.append(f"[{attempt}/{max_attempts}]")
    parts.append(message)

    log_message = " ".join(parts)

    # Extra context for structured logging systems
    extra_context = {
        "correlation_id": cid,
        "operation": operation_name,
        "attempt": attempt,
        "max_attempts": max_attempts,
        **extra
    }

    logger.log(level, log_message, extra=extra_context)


@dataclass(frozen=True)
class RetryConfig:
    """
    Exponential backoff policy

    Attempt 0 runs immediately; attempt n waits
    initial_delay * backoff_multiplier ** (n - 1), capped at max_delay.
    """
    max_attempts: int = 3
    initial_delay: float = 0.1
    max_delay: float = 60.0
    backoff_multiplier: float = 2.0

    def delay_for_attempt(self, attempt: int) -> float:
        """Seconds to wait before the given 0-indexed attempt"""
        if attempt <= 0:
            return 0.0
        delay = self.initial_delay * (self.backoff_multiplier ** (attempt - 1))
        return min(delay, self.max_delay)

    def should_retry(self, attempt: int) -> bool:
        """Whether another attempt is allowed after `attempt` attempts"""
        return attempt < self.max_attempts


def is_retryable_status(status_code: int) -> bool:
    """429 and 5xx are worth retrying; other statuses are not"""
    return status_code == 429 or 500 <= status_code < 600


def is_retryable_error(error: Exception) -> bool:
    """
    Classify an error for retry purposes

    Transport errors and retryable API statuses are transient; encoding,
    crypto and decoding errors would fail the same way again.
    """
    if isinstance(error, TransportError):
        return True
    if isinstance(error, ApiError):
        return is_retryable_status(error.status_code)
    return False


async def execute_with_retry(
    operation: Callable[[], Awaitable[T]],
    operation_name: str,
    retry_config: Optional[RetryConfig] = None,
    sleep: Optional[Callable[[float], Awaitable[None]]] = None,
) -> T:
    """
    Run an async operation, retrying transient failures with backoff.

    Only use this for idempotent operations (queries, or a submission whose
    nonce makes a duplicate harmless). Non-retryable errors and the last
    transient error are re-raised unchanged.

    Args:
        operation: Zero-argument coroutine function
        operation_name: Name for logging purposes
        retry_config: Backoff policy (defaults to RetryConfig())
        sleep: Awaitable sleep (defaults to asyncio.sleep)

    Returns:
        The operation's result

    Example:
        nonce = await execute_with_retry(
            lambda: client.accounts.get_nonce(address),
            "get_nonce",
        )
    """
    retry_config = retry_config or RetryConfig()
    sleep = sleep or asyncio.sleep

    attempt = 0
    while True:
        delay = retry_config.delay_for_attempt(attempt)
        if delay > 0:
            await sleep(delay)
        attempt += 1

        try:
            result = await operation()
        except OneMoneyError as e:
            if is_retryable_error(e) and retry_config.should_retry(attempt):
                log_with_correlation(
                    logging.WARNING,
                    f"Recoverable error: {e}",
                    operation_name,
                    attempt,
                    retry_config.max_attempts,
                    error_type="recoverable",
                )
                continue

            log_with_correlation(
                logging.ERROR,
                f"Failed: {e}",
                operation_name,
                attempt,
                retry_config.max_attempts,
                error_type="fatal" if not is_retryable_error(e) else "exhausted",
            )
            raise

        if attempt > 1:
            log_with_correlation(
                logging.INFO,
                f"Succeeded after {attempt} attempts",
                operation_name,
                attempt,
                retry_config.max_attempts,
            )
        return result
