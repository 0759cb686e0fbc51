# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Retry with exponential backoff and an overall deadline."""

import asyncio
import functools
import logging
from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
P = ParamSpec("P")

SleepFunc = Callable[[float], Awaitable[None]]


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int,
    base_delay: float,
    timeout: float | None = None,
    retry_on: type[BaseException] | tuple[type[BaseException], ...] = Exception,
    sleep: SleepFunc = asyncio.sleep,
) -> T:
    """Run operation until it succeeds, retrying with exponential backoff.

    The n-th retry waits ``base_delay * 2 ** (n - 1)`` seconds. When all
    attempts fail the last exception is re-raised. When ``timeout``
    elapses first the pending attempt is cancelled and TimeoutError is
    raised.

    Args:
        operation: Zero-argument coroutine factory, called once per attempt
        max_attempts: Upper bound on the number of attempts
        base_delay: Delay before the first retry, in seconds
        timeout: Overall deadline in seconds, None for no deadline
        retry_on: Exception types that trigger another attempt
        sleep: Awaitable sleep used between attempts
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    async def attempts() -> T:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(max_attempts),
            wait=wait_exponential(multiplier=base_delay, min=0),
            retry=retry_if_exception_type(retry_on),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            sleep=sleep,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await operation()
        raise AssertionError("unreachable")

    if timeout is None:
        return await attempts()

    try:
        return await asyncio.wait_for(attempts(), timeout)
    except asyncio.TimeoutError:
        raise TimeoutError(f"Operation timed out after {timeout}s") from None


def retrying(
    max_attempts: int,
    base_delay: float,
    timeout: float | None = None,
    retry_on: type[BaseException] | tuple[type[BaseException], ...] = Exception,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Decorator form of with_retry for coroutine functions."""

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            return await with_retry(
                lambda: func(*args, **kwargs),
                max_attempts=max_attempts,
                base_delay=base_delay,
                timeout=timeout,
                retry_on=retry_on,
            )

        return wrapper

    return decorator
