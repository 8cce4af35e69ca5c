"""Exponential backoff for transient node RPC failures."""

import logging
import time
from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryConfig(BaseModel):
    """
    Backoff schedule for retrying a failed request.

    Attributes
    ----------
    max_retries : int
        Attempts after the first one (0 disables retrying)
    base_delay : float
        Delay in seconds before the first retry
    max_delay : float
        Upper bound for any single delay
    exponential_base : float
        Growth factor between consecutive delays

    """

    model_config = ConfigDict(frozen=True)

    max_retries: int = Field(default=1, ge=0)
    base_delay: float = Field(default=0.5, ge=0)
    max_delay: float = Field(default=5.0, ge=0)
    exponential_base: float = Field(default=2.0, ge=1)

    def get_delay(self, attempt: int) -> float:
        """Delay before retry number ``attempt`` (0-indexed), capped at ``max_delay``."""
        return min(self.base_delay * self.exponential_base**attempt, self.max_delay)

    def delays(self) -> list[float]:
        """Every delay of the schedule, in order."""
        return [self.get_delay(attempt) for attempt in range(self.max_retries)]


def with_retry(
    config: RetryConfig | None = None,
    retry_on: tuple[type[Exception], ...] = (Exception,),
    sleep: Callable[[float], None] = time.sleep,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator retrying a function on selected exceptions.

    Parameters
    ----------
    config : RetryConfig | None
        Backoff schedule (default: ``RetryConfig()``)
    retry_on : tuple[type[Exception], ...]
        Exception types worth retrying; anything else propagates at once
    sleep : Callable[[float], None]
        Sleep function, replaceable in tests

    Returns
    -------
    Callable
        Decorator; the wrapped function re-raises the last exception once
        the schedule is exhausted

    """
    config = config or RetryConfig()

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            for delay in config.delays():
                try:
                    return func(*args, **kwargs)
                except retry_on as e:
                    logger.debug("%s failed (%s), retrying in %.2fs", func.__name__, e, delay)
                    sleep(delay)
            return func(*args, **kwargs)

        return wrapper

    return decorator
