"""Backoff policy for HTTP retries.

Provides exponential backoff delays between retry attempts.
"""

from dataclasses import dataclass
from typing import Optional

from ..config.schema import ClientConfig


@dataclass(frozen=True)
class BackoffPolicy:
    """Exponential backoff: ``min_timeout_ms * backoff_factor ** (k - 1)``."""
    min_timeout_ms: float = 1000
    backoff_factor: float = 2
    max_timeout_ms: Optional[float] = None

    @classmethod
    def from_config(cls, config: ClientConfig) -> "BackoffPolicy":
        return cls(
            min_timeout_ms=config.min_timeout_ms,
            backoff_factor=config.backoff_factor,
            max_timeout_ms=config.max_timeout_ms,
        )

    def delay_for(self, attempt_index: int) -> float:
        """Calculate the delay before a retry.

        Args:
            attempt_index: Retry number, 1 for the first retry.

        Returns:
            Delay in milliseconds. Always 0 when the factor is 0.
        """
        if self.backoff_factor == 0:
            return 0.0
        exponent = max(0, attempt_index - 1)
        delay = self.min_timeout_ms * (self.backoff_factor ** exponent)
        if self.max_timeout_ms is not None:
            delay = min(delay, self.max_timeout_ms)
        return max(0.0, float(delay))

    def delay_seconds(self, attempt_index: int) -> float:
        """Same as delay_for, in seconds."""
        return self.delay_for(attempt_index) / 1000.0

    def schedule(self, retries: int) -> list[float]:
        """Delays (ms) for the first ``retries`` retries."""
        return [self.delay_for(k) for k in range(1, retries + 1)]

