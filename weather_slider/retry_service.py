"""
Retry service with exponential backoff and jitter for provider calls.

Only transient failures (network errors, timeouts and 5xx responses) are
retried. Client errors are raised on the first attempt.
"""

import asyncio
import functools
import logging
import random
from typing import Any, Callable, Tuple, Type

import aiohttp

logger = logging.getLogger(__name__)


class RetryError(Exception):
    """Exception raised when all retry attempts are exhausted."""

    def __init__(self, message: str, last_exception: Exception):
        self.message = message
        self.last_exception = last_exception
        super().__init__(message)


class RetryConfig:
    """Configuration for retry behavior."""

    def __init__(  # pylint: disable=too-many-arguments,R0917
        self,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        backoff_multiplier: float = 2.0,
        max_delay: float = 60.0,
        jitter: bool = True,
        jitter_range: float = 0.1,
    ):
        """
        Initialize retry configuration.

        Args:
            max_attempts: Maximum number of attempts, first one included
            base_delay: Delay in seconds before the first retry
            backoff_multiplier: Multiplier for exponential backoff
            max_delay: Upper bound for a single delay
            jitter: Whether to randomize delays
            jitter_range: Jitter range as a fraction of the delay (0.1 = ±10%)
        """
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.backoff_multiplier = backoff_multiplier
        self.max_delay = max_delay
        self.jitter = jitter
        self.jitter_range = jitter_range


def calculate_delay(attempt: int, config: RetryConfig) -> float:
    """
    Calculate delay with exponential backoff and jitter.

    Args:
        attempt: Current attempt number (1-based)
        config: Retry configuration

    Returns:
        Delay in seconds
    """
    delay = config.base_delay * (config.backoff_multiplier ** (attempt - 1))
    delay = min(delay, config.max_delay)

    if config.jitter:
        jitter_amount = delay * config.jitter_range
        jitter_offset = random.uniform(-jitter_amount, jitter_amount)
        delay = max(0, delay + jitter_offset)

    return delay


def should_retry_exception(
    exception: Exception, retryable_exceptions: Tuple[Type[Exception], ...]
) -> bool:
    """
    Determine if an exception should trigger a retry.

    Args:
        exception: The exception that occurred
        retryable_exceptions: Exception types that may be retried

    Returns:
        True if the exception should be retried, False otherwise
    """
    if not isinstance(exception, retryable_exceptions):
        return False

    if isinstance(exception, aiohttp.ClientResponseError):
        # 4xx means the request itself is wrong
        if 400 <= exception.status < 500:
            return False
        return True

    return True


def retry_async(
    config: RetryConfig,
    retryable_exceptions: Tuple[Type[Exception], ...] = (Exception,),
    log_attempts: bool = True,
) -> Callable:
    """
    Decorator for asynchronous functions with retry logic.

    Args:
        config: Retry configuration
        retryable_exceptions: Exception types to retry on
        log_attempts: Whether to log retry attempts

    Returns:
        Decorator function
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            last_exception = None

            for attempt in range(1, config.max_attempts + 1):
                try:
                    result = await func(*args, **kwargs)
                    if attempt > 1 and log_attempts:
                        logger.info(
                            "Function %s succeeded on attempt %d/%d",
                            func.__name__,
                            attempt,
                            config.max_attempts,
                        )
                    return result

                except Exception as e:  # pylint: disable=broad-exception-caught
                    last_exception = e

                    if not should_retry_exception(e, retryable_exceptions):
                        raise

                    if attempt == config.max_attempts:
                        if log_attempts:
                            logger.error(
                                "Function %s failed after %d attempts. Last error: %s",
                                func.__name__,
                                config.max_attempts,
                                str(e),
                            )
                        break

                    delay = calculate_delay(attempt, config)
                    if log_attempts:
                        logger.warning(
                            "Function %s failed on attempt %d/%d: %s. Retrying in %.2f seconds",  # pylint: disable=line-too-long
                            func.__name__,
                            attempt,
                            config.max_attempts,
                            str(e),
                            delay,
                        )

                    await asyncio.sleep(delay)

            raise RetryError(
                f"Function {func.__name__} failed after {config.max_attempts} attempts",
                last_exception,
            )

        return wrapper

    return decorator


def api_retry(config: RetryConfig) -> Callable:
    """
    Retry decorator for OpenWeatherMap calls.

    Retries on network errors, timeouts, and server errors (5xx).
    Does not retry on client errors (4xx).
    """
    retryable_exceptions = (
        aiohttp.ClientError,
        asyncio.TimeoutError,
        ConnectionError,
    )
    return retry_async(config, retryable_exceptions)
