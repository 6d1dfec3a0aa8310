"""Retry with exponential backoff.

Provides automatic re-execution of failed operations with:
- Bounded attempt count
- Exponential backoff with additive jitter, capped at a maximum delay
- Retry decisions taken from the error taxonomy (transient transport failures only)
"""

import asyncio
import functools
import inspect
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, TypeVar

from ..monitoring import metrics
from ..errors import ApiError, classify, is_retryable

logger = logging.getLogger(__name__)

T = TypeVar("T")

Operation = Callable[[], Awaitable[T]]
SleepFunc = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry behavior."""

    max_attempts: int = 3
    base_delay_ms: float = 1000.0
    max_delay_ms: float = 10_000.0
    backoff_multiplier: float = 2.0
    jitter_ms: float = 100.0  # Upper bound of the uniform random addition

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")
        for name in ("base_delay_ms", "max_delay_ms", "backoff_multiplier", "jitter_ms"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")


DEFAULT_RETRY_CONFIG = RetryConfig()


def calculate_backoff(
    attempt: int,
    config: RetryConfig,
    rng: Callable[[float, float], float] = random.uniform,
) -> float:
    """Calculate the delay before the next attempt.

    Args:
        attempt: Attempt that just failed (1-indexed)
        config: Retry configuration
        rng: Source of jitter, called as rng(0, jitter_ms)

    Returns:
        Delay in milliseconds
    """
    # base_delay * multiplier ^ (attempt - 1), plus fresh jitter every attempt
    delay = config.base_delay_ms * (config.backoff_multiplier ** (attempt - 1))
    delay += rng(0, config.jitter_ms)
    return min(delay, config.max_delay_ms)


def should_retry(error: BaseException) -> bool:
    """Determine if a failure may be retried.

    Args:
        error: The exception raised by the operation

    Returns:
        True if the taxonomy marks it retryable
    """
    if isinstance(error, ApiError):
        return error.retryable
    status_code = None
    response = getattr(error, "response", None)
    if response is not None:
        status_code = getattr(response, "status_code", None)
    return is_retryable(classify(error), status_code)


class RetryPolicy:
    """Re-executes an operation while its failures are retryable.

    Attributes:
        last_attempts: Attempts made so far by the latest execute call.
            Diagnostic only: a policy shared by concurrent callers
            reports whichever call wrote it last.

    Usage:
        policy = RetryPolicy(RetryConfig(max_attempts=5))
        record = await policy.execute(lambda: transport.request(req))
    """

    def __init__(
        self,
        config: Optional[RetryConfig] = None,
        sleep: Optional[SleepFunc] = None,
        rng: Optional[Callable[[float, float], float]] = None,
    ):
        """Initialize retry policy.

        Args:
            config: Retry configuration
            sleep: Async sleep taking seconds (defaults to asyncio.sleep)
            rng: Jitter source (defaults to random.uniform)
        """
        self.config = config or DEFAULT_RETRY_CONFIG
        self._sleep = sleep or asyncio.sleep
        self._rng = rng or random.uniform
        self.last_attempts = 0

    def delay_ms(self, attempt: int) -> float:
        """Delay after the given failed attempt, in milliseconds."""
        return calculate_backoff(attempt, self.config, self._rng)

    async def execute(self, operation: Operation[T], name: Optional[str] = None) -> T:
        """Run an operation, retrying retryable failures.

        Args:
            operation: Zero-argument coroutine function
            name: Label used in log messages

        Returns:
            The operation's result

        Raises:
            Exception: The most recent failure, unchanged
        """
        label = name or getattr(operation, "__name__", "operation")
        max_attempts = self.config.max_attempts

        for attempt in range(1, max_attempts + 1):
            self.last_attempts = attempt
            try:
                return await operation()
            except Exception as e:
                if not should_retry(e):
                    logger.warning(f"Non-retryable error in {label}: {e!r}")
                    raise

                if attempt == max_attempts:
                    metrics.retries_exhausted_total.inc()
                    logger.error(f"All {max_attempts} attempts failed for {label}: {e!r}")
                    raise

                delay = self.delay_ms(attempt)
                metrics.retry_attempts_total.inc()
                logger.warning(
                    f"Attempt {attempt}/{max_attempts} failed for {label}: {e!r}. "
                    f"Retrying in {delay / 1000:.2f}s"
                )
                await self._sleep(delay / 1000)

        # max_attempts >= 1, so the loop always returns or raises
        raise AssertionError("unreachable")


def retry_with_backoff(
    config: Optional[RetryConfig] = None,
    sleep: Optional[SleepFunc] = None,
):
    """Decorator for retry with exponential backoff.

    Args:
        config: Retry configuration
        sleep: Async sleep override

    Returns:
        Decorated coroutine function

    Usage:
        @retry_with_backoff(RetryConfig(max_attempts=3))
        async def fetch_users():
            ...
    """
    policy = RetryPolicy(config, sleep=sleep)

    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"retry_with_backoff requires a coroutine function, got {func!r}")

        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            return await policy.execute(lambda: func(*args, **kwargs), name=func.__name__)

        wrapper.retry_policy = policy
        return wrapper

    return decorator
