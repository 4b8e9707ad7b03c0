"""
Retry policy shared by outbound calls (email provider, geocoder)
"""
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def exponential_backoff(base_delay: float = 1.0, factor: float = 2.0) -> Callable[[int], float]:
    """Delay before retry number `attempt` (1-based): base, base*2, base*4, ..."""

    def backoff(attempt: int) -> float:
        return base_delay * (factor ** (attempt - 1))

    return backoff


def always_retry(exc: BaseException) -> bool:
    return True


@dataclass
class RetryPolicy:
    """
    Run a callable up to `max_attempts` times.

    After a failed attempt the `retryable` predicate decides whether the error is
    transient; if it is and attempts remain, the policy sleeps for
    `backoff(attempt)` seconds and tries again. The last error is re-raised.
    """

    max_attempts: int = 3
    backoff: Callable[[int], float] = field(default_factory=exponential_backoff)
    retryable: Callable[[BaseException], bool] = always_retry
    sleep: Callable[[float], None] = time.sleep
    name: str = "outbound call"

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def delays(self):
        """Sleep durations between attempts, in order"""
        return [self.backoff(attempt) for attempt in range(1, self.max_attempts)]

    def call(
        self,
        func: Callable[..., T],
        *args,
        on_retry: Optional[Callable[[int, BaseException], None]] = None,
        **kwargs,
    ) -> T:
        attempt = 1
        while True:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                if attempt >= self.max_attempts or not self.retryable(e):
                    logger.error(f"{self.name} failed after {attempt} attempt(s): {e}")
                    raise
                delay = self.backoff(attempt)
                logger.warning(f"{self.name} attempt {attempt} failed ({e}), retrying in {delay:.1f}s")
                if on_retry is not None:
                    on_retry(attempt, e)
                self.sleep(delay)
                attempt += 1
