"""
Retry policies and per-route attempt accounting.
"""

import asyncio
import threading
from abc import ABC, abstractmethod
from typing import Dict, Hashable, Optional, Tuple, Type

from shared.errors import BadResponseError, InterceptorError, NoResponseError, TransportError
from shared.logging import get_logger
from shared.retry import RetryConfig, calculate_delay
from .route import Route


class Retrier(ABC):
    """Decide whether a failed attempt should be repeated."""

    @abstractmethod
    async def should_retry(self, route: Route, error: BaseException, attempt_count: int) -> bool:
        """``attempt_count`` is the number of retries already made for this request."""


class DefaultRetrier(Retrier):
    """Never retries."""

    async def should_retry(self, route: Route, error: BaseException, attempt_count: int) -> bool:
        return False


class BackoffRetrier(Retrier):
    """Retry matching errors up to ``config.max_attempts`` total attempts.

    Sleeps the configured backoff before authorizing each retry, so the
    caller's next attempt starts after the delay.
    """

    DEFAULT_RETRY_ON: Tuple[Type[BaseException], ...] = (TransportError, NoResponseError)

    def __init__(
        self,
        config: Optional[RetryConfig] = None,
        retry_on: Tuple[Type[BaseException], ...] = DEFAULT_RETRY_ON,
        retry_statuses: Tuple[int, ...] = (502, 503, 504),
    ):
        self.config = config or RetryConfig()
        self.retry_on = retry_on
        self.retry_statuses = retry_statuses
        self.logger = get_logger("route_client.retrier")

    def is_retryable(self, error: BaseException) -> bool:
        if isinstance(error, BadResponseError):
            return error.status_code in self.retry_statuses
        if isinstance(error, InterceptorError):
            return False
        return isinstance(error, self.retry_on)

    async def should_retry(self, route: Route, error: BaseException, attempt_count: int) -> bool:
        if attempt_count >= self.config.max_retries or not self.is_retryable(error):
            return False

        delay = calculate_delay(attempt_count + 1, self.config)
        self.logger.warning(
            "Request attempt failed, waiting before next attempt",
            route=route.describe(),
            attempt=attempt_count + 1,
            max_attempts=self.config.max_attempts,
            delay=delay,
            error=str(error)
        )
        await asyncio.sleep(delay)
        return True


class AttemptCounter:
    """Per-key attempt counts behind one lock.

    Every read and write takes the same lock so concurrent retries never lose
    an update. Counts live as long as the owning orchestrator.
    """

    def __init__(self):
        self._counts: Dict[Hashable, int] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> int:
        with self._lock:
            return self._counts.get(key, 0)

    def set(self, key: Hashable, count: int) -> None:
        if count < 0:
            raise ValueError("count must be non-negative")
        with self._lock:
            self._counts[key] = count

    def increment(self, key: Hashable, amount: int = 1) -> int:
        """Add ``amount`` and return the new count."""
        with self._lock:
            count = self._counts.get(key, 0) + amount
            self._counts[key] = count
            return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._counts)
