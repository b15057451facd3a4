"""
Retry configuration and backoff calculation for the route client.
"""

import random
from enum import Enum
from typing import Union


class BackoffStrategy(str, Enum):
    """How the delay grows between retries."""

    EXPONENTIAL = "exponential"
    LINEAR = "linear"
    FIXED = "fixed"


class RetryConfig:
    """Retry budget and backoff shape.

    ``max_attempts`` counts the first attempt, so ``max_attempts=3`` allows
    two retries.
    """

    def __init__(self,
                 max_attempts: int = 3,
                 base_delay: float = 1.0,
                 max_delay: float = 60.0,
                 exponential_base: float = 2.0,
                 jitter: bool = True,
                 backoff_strategy: Union[BackoffStrategy, str] = BackoffStrategy.EXPONENTIAL):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if base_delay < 0 or max_delay < 0:
            raise ValueError("delays must be non-negative")

        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.jitter = jitter
        self.backoff_strategy = BackoffStrategy(backoff_strategy)

    @property
    def max_retries(self) -> int:
        """Retries allowed after the first attempt."""
        return self.max_attempts - 1


def calculate_delay(retry_number: int, config: RetryConfig) -> float:
    """Seconds to wait before retry ``retry_number`` (1-based)."""
    strategy = config.backoff_strategy
    if strategy is BackoffStrategy.EXPONENTIAL:
        delay = config.base_delay * config.exponential_base ** (retry_number - 1)
    elif strategy is BackoffStrategy.LINEAR:
        delay = config.base_delay * retry_number
    else:
        delay = config.base_delay

    delay = min(delay, config.max_delay)

    if config.jitter:
        # +/- 10%
        spread = delay * 0.1
        delay += random.uniform(-spread, spread)

    return max(0.0, delay)
