"""
Retry policies for calls to factomd and factom-walletd.

Failed HTTP calls are retried with exponential backoff. Errors that retrying
cannot fix (JSON-RPC rejections, bad requests, authentication failures) are
raised on the first attempt; once attempts run out the last error is raised.
"""

from __future__ import annotations
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional, Tuple, Type

from ..config import RetryOptions

logger = logging.getLogger(__name__)


class RetryPolicy(ABC):
    """
    Base retry policy.

    Subclasses only decide how long to wait before retry n; which errors
    are retried and how many attempts are made is decided here.

    Args:
        max_attempts: Attempts including the first call
        max_delay: Upper bound of any delay in seconds
        non_retryable_exceptions: Errors raised without retrying
        retry_condition: Predicate an error must also satisfy to be retried
    """

    def __init__(self, max_attempts: int = 4, max_delay: float = 2.0,
                 non_retryable_exceptions: Tuple[Type[BaseException], ...] = (),
                 retry_condition: Optional[Callable[[Exception], bool]] = None):
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        self.max_attempts = max_attempts
        self.max_delay = max_delay
        self.non_retryable_exceptions = non_retryable_exceptions
        self.retry_condition = retry_condition

    @abstractmethod
    def calculate_delay(self, attempt: int) -> float:
        """Seconds to wait after failed attempt number ``attempt`` (1-based)."""

    def should_retry(self, attempt: int, error: Exception) -> bool:
        if attempt >= self.max_attempts or isinstance(error, self.non_retryable_exceptions):
            return False
        return self.retry_condition is None or self.retry_condition(error)

    async def execute(self, func: Callable[..., Awaitable[Any]], *args, **kwargs) -> Any:
        """
        Await ``func(*args, **kwargs)`` until it succeeds or may not be retried.

        Returns:
            Result of the first successful attempt

        Raises:
            The error of the last attempt
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                if not self.should_retry(attempt, e):
                    raise

                delay = min(self.calculate_delay(attempt), self.max_delay)
                logger.warning(f"Attempt {attempt}/{self.max_attempts} failed: {e}. Retrying in {delay:.2f}s")
                await asyncio.sleep(delay)
                continue

            if attempt > 1:
                logger.info(f"Call succeeded on attempt {attempt}")
            return result


class ExponentialBackoff(RetryPolicy):
    """
    Delay before retry n is ``base_delay * factor^(n - 1)``, capped at max_delay.
    """

    def __init__(self, max_attempts: int = 4, base_delay: float = 0.5,
                 max_delay: float = 2.0, factor: float = 2.0, **kwargs):
        super().__init__(max_attempts, max_delay, **kwargs)
        self.base_delay = base_delay
        self.factor = factor

    @classmethod
    def from_options(cls, options: RetryOptions, **kwargs) -> ExponentialBackoff:
        """Policy matching connection retry options."""
        return cls(
            max_attempts=options.max_attempts,
            base_delay=options.min_timeout,
            max_delay=options.max_timeout,
            factor=options.factor,
            **kwargs,
        )

    def calculate_delay(self, attempt: int) -> float:
        return min(self.base_delay * self.factor ** (attempt - 1), self.max_delay)


__all__ = [
    "RetryPolicy",
    "ExponentialBackoff",
]
