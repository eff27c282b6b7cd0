"""Retry policies for supplier feeds that rate-limit their callers."""
import asyncio
from typing import Any, Awaitable, Callable, Optional, TypeVar
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    stop_after_attempt,
    wait_incrementing,
    retry_if_exception_type,
)
from distributor_search.analytics.logger import logger

T = TypeVar("T")

RATE_LIMIT_MESSAGE = "too many requests"


class RetryConfig:
    """Configuration for retry behavior."""

    def __init__(
        self,
        max_attempts: int = 3,
        initial_wait: float = 10.0,
        wait_increment: float = 10.0,
        retry_on: Optional[tuple] = None,
    ):
        self.max_attempts = max_attempts
        self.initial_wait = initial_wait
        self.wait_increment = wait_increment
        self.retry_on = retry_on or (Exception,)


def is_rate_limit_message(message: Any) -> bool:
    """True when an upstream ``Message`` field reports throttling."""
    return isinstance(message, str) and RATE_LIMIT_MESSAGE in message.lower()


async def retry_async(
    func: Callable[[], Awaitable[T]],
    config: RetryConfig,
    name: str,
    sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
) -> T:
    """Await ``func`` until it succeeds or ``config.max_attempts`` is used up.

    The wait before retry *n* is ``initial_wait + (n - 1) * wait_increment``
    seconds. Only exceptions in ``config.retry_on`` are retried; anything else
    propagates at once. On exhaustion the last exception is re-raised.
    """

    def _log_retry(retry_state: RetryCallState) -> None:
        remaining = config.max_attempts - retry_state.attempt_number
        wait = retry_state.next_action.sleep if retry_state.next_action else 0
        logger.warning(
            f"{name}: {retry_state.outcome.exception()}. "
            f"Waiting {wait:.0f}s before retry ({remaining} left)"
        )

    retrying = AsyncRetrying(
        stop=stop_after_attempt(config.max_attempts),
        wait=wait_incrementing(start=config.initial_wait, increment=config.wait_increment),
        retry=retry_if_exception_type(config.retry_on),
        before_sleep=_log_retry,
        sleep=sleep or asyncio.sleep,
        reraise=True,
    )
    try:
        return await retrying(func)
    except config.retry_on as e:
        logger.error(f"{name}: retries exhausted after {config.max_attempts} attempts: {e}")
        raise
