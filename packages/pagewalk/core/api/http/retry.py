from __future__ import annotations

import random

from pydantic import BaseModel, Field, model_validator


class RetryPolicy(BaseModel):
    """Transport-level retry settings for AsyncApiClient.

    The client makes a single attempt unless a policy is passed in. Only the
    transport retries; paginated iteration above it never does.

    Args:
        max_attempts: Attempts including the first one
        base_delay_s: First backoff delay in seconds
        max_delay_s: Cap on a single backoff delay
        jitter: Random spread as a fraction of the delay (0.1 = +/-10%)
        retry_on_status: Statuses that are retried
        retry_methods: Methods that are retried (idempotent ones)
    """

    model_config = {"frozen": True}

    max_attempts: int = Field(default=3, ge=1)
    base_delay_s: float = Field(default=0.5, ge=0.0)
    max_delay_s: float = Field(default=8.0, ge=0.0)
    jitter: float = Field(default=0.1, ge=0.0, le=1.0)
    retry_on_status: tuple[int, ...] = (429, 500, 502, 503, 504)
    retry_methods: tuple[str, ...] = ("GET", "HEAD", "OPTIONS")

    @model_validator(mode="after")
    def check_delays(self) -> RetryPolicy:
        if self.max_delay_s < self.base_delay_s:
            raise ValueError("max_delay_s must be >= base_delay_s")
        return self

    def should_retry(self, method: str, attempt: int, status_code: int | None = None) -> bool:
        """Decide whether a failed attempt gets another go.

        Args:
            method: HTTP method of the request
            attempt: Number of the attempt that just failed (1-indexed)
            status_code: Response status, or None for timeouts/network errors

        Returns:
            True if another attempt should be made
        """
        if attempt >= self.max_attempts:
            return False
        if method.upper() not in self.retry_methods:
            return False
        return status_code is None or status_code in self.retry_on_status

    def compute_delay(self, attempt: int) -> float:
        """Exponential backoff with jitter for the given failed attempt."""
        delay = min(self.max_delay_s, self.base_delay_s * (2 ** (attempt - 1)))
        if self.jitter > 0:
            spread = delay * self.jitter
            delay = max(0.0, delay + random.uniform(-spread, spread))
        return delay


NO_RETRY = RetryPolicy(max_attempts=1)


def parse_retry_after_seconds(value: str | None) -> float | None:
    """Parse a numeric Retry-After header (HTTP-date form is not supported)."""
    if not value:
        return None
    try:
        seconds = float(value.strip())
    except ValueError:
        return None
    return seconds if seconds >= 0 else None
