"""Retry decorator with exponential backoff — stdlib only."""
from __future__ import annotations

import functools
import logging
import random
import time
from typing import Any, Callable, Tuple, Type

logger = logging.getLogger(__name__)


def retry(
    *,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    backoff_factor: float = 2.0,
    jitter: bool = True,
    retryable: Tuple[Type[BaseException], ...] = (Exception,),
    fatal: Tuple[Type[BaseException], ...] = (),
) -> Callable:
    """Decorator: retries the wrapped function with exponential backoff.

    Exceptions listed in *fatal* are re-raised on the first occurrence even
    when they are also *retryable* (e.g. a quota error that should go straight
    to a fallback instead of burning more attempts).
    """

    def decorator(fn: Callable) -> Callable:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            last_exc: BaseException | None = None
            for attempt in range(1, max_attempts + 1):
                try:
                    return fn(*args, **kwargs)
                except retryable as exc:
                    if fatal and isinstance(exc, fatal):
                        logger.warning("%s aborted without retry: %s", fn.__qualname__, exc)
                        raise
                    last_exc = exc
                    if attempt == max_attempts:
                        logger.error(
                            "%s failed after %d attempts: %s",
                            fn.__qualname__,
                            max_attempts,
                            exc,
                        )
                        raise
                    delay = backoff_delay(
                        attempt, base_delay=base_delay, max_delay=max_delay,
                        backoff_factor=backoff_factor,
                    )
                    if jitter:
                        delay *= 0.5 + random.random()
                    logger.warning(
                        "%s attempt %d/%d failed (%s), retrying in %.1fs",
                        fn.__qualname__,
                        attempt,
                        max_attempts,
                        exc,
                        delay,
                    )
                    time.sleep(delay)
            raise last_exc  # type: ignore[misc]

        return wrapper

    return decorator


def backoff_delay(
    attempt: int, *, base_delay: float = 1.0, max_delay: float = 30.0, backoff_factor: float = 2.0,
) -> float:
    """Delay before the retry that follows *attempt* (1-based): 1s, 2s, 4s, ..."""
    return min(base_delay * (backoff_factor ** (attempt - 1)), max_delay)
