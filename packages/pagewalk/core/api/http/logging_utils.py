from __future__ import annotations

import logging
import time
from collections.abc import Mapping

from pydantic import BaseModel

logger = logging.getLogger("pagewalk.core.api.http")

REDACTED = "***REDACTED***"


def redact_headers(headers: Mapping[str, str], redact: tuple[str, ...]) -> dict[str, str]:
    """Copy headers with sensitive values masked.

    Args:
        headers: Headers to copy
        redact: Header names to mask (case-insensitive)

    Returns:
        New dict with masked values replaced by ``REDACTED``
    """
    hidden = {name.lower() for name in redact}
    return {k: (REDACTED if k.lower() in hidden else v) for k, v in headers.items()}


class RequestLogContext(BaseModel):
    """Fields shared by the request and response log lines of one attempt."""

    method: str
    url: str
    attempt: int
    request_id: str | None = None

    def as_extra(self) -> dict[str, object]:
        return {
            "method": self.method,
            "url": self.url,
            "attempt": self.attempt,
            "request_id": self.request_id,
        }


def log_request(
    ctx: RequestLogContext, headers: Mapping[str, str], redact: tuple[str, ...]
) -> float:
    """Log an outgoing request and return its start timestamp."""
    logger.debug(
        "HTTP request",
        extra={**ctx.as_extra(), "headers": redact_headers(headers, redact)},
    )
    return time.perf_counter()


def log_response(ctx: RequestLogContext, status_code: int, started: float) -> None:
    """Log a received response with elapsed time since ``started``."""
    logger.debug(
        "HTTP response",
        extra={
            **ctx.as_extra(),
            "status_code": status_code,
            "elapsed_ms": int((time.perf_counter() - started) * 1000),
        },
    )


def log_retry(ctx: RequestLogContext, delay_s: float, reason: str) -> None:
    logger.warning(
        "Retrying HTTP request",
        extra={**ctx.as_extra(), "delay_s": round(delay_s, 3), "reason": reason},
    )
