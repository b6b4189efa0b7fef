"""Retry helpers for calls into the host driver API and the release server.

Callers name the exceptions they consider transient; nothing is retried by
default. A RetryPolicy carries the attempt/backoff numbers so they can come
from the settings file.
"""
import asyncio
import logging
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, TypeVar

from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """How often to call before giving up; one attempt means no retrying."""
    max_attempts: int = 1
    min_wait: float = 0.1
    max_wait: float = 1.0


def with_retry(
    exceptions: tuple[type[BaseException], ...],
    max_attempts: int = 1,
    min_wait: float = 0.1,
    max_wait: float = 1.0,
) -> Callable:
    """Decorator factory retrying ``exceptions`` with exponential backoff.

    Works on plain and coroutine functions. Once the attempts are used up
    the last exception is re-raised unchanged.

    Args:
        exceptions: Exception types that count as transient
        max_attempts: Total number of calls, 1 disables retrying
        min_wait: First backoff delay in seconds, doubled per attempt
        max_wait: Upper bound for the backoff delay
    """
    if not exceptions:
        raise ValueError("with_retry needs at least one exception type")

    policy = retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=min_wait, min=min_wait, max=max_wait),
        retry=retry_if_exception_type(exceptions),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        if asyncio.iscoroutinefunction(func):
            @wraps(func)
            async def async_call(*args: Any, **kwargs: Any) -> T:
                return await func(*args, **kwargs)  # type: ignore[misc]
            return policy(async_call)  # type: ignore[return-value]

        @wraps(func)
        def call(*args: Any, **kwargs: Any) -> T:
            return func(*args, **kwargs)
        return policy(call)

    return decorator


def retry_with_policy(policy: RetryPolicy, exceptions: tuple[type[BaseException], ...]) -> Callable:
    """with_retry configured from a RetryPolicy."""
    return with_retry(
        exceptions,
        max_attempts=policy.max_attempts,
        min_wait=policy.min_wait,
        max_wait=policy.max_wait,
    )
