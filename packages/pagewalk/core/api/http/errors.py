from __future__ import annotations

from pydantic import BaseModel, Field


class ApiErrorData(BaseModel):
    """Structured data for a failed HTTP call.

    Args:
        message: Human-readable error description
        method: HTTP method (GET, POST, etc.)
        url: Request URL
        status_code: HTTP status code (None for transport failures)
        request_id: Request ID for tracing
        response_headers: Response headers (if a response was received)
        response_body_snippet: Truncated response body for debugging
        cause: Underlying httpx/json exception
    """

    model_config = {"arbitrary_types_allowed": True}

    message: str
    method: str
    url: str
    status_code: int | None = None
    request_id: str | None = None
    response_headers: dict[str, str] | None = None
    response_body_snippet: str | None = None
    cause: BaseException | None = Field(default=None, repr=False)


class ApiError(Exception):
    """Base exception for everything the HTTP client raises.

    The structured payload lives in ``data``; the most used fields are also
    exposed as attributes.
    """

    def __init__(
        self,
        *,
        message: str,
        method: str,
        url: str,
        status_code: int | None = None,
        request_id: str | None = None,
        response_headers: dict[str, str] | None = None,
        response_body_snippet: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.data = ApiErrorData(
            message=message,
            method=method,
            url=url,
            status_code=status_code,
            request_id=request_id,
            response_headers=response_headers,
            response_body_snippet=response_body_snippet,
            cause=cause,
        )
        super().__init__(str(self))

    @property
    def message(self) -> str:
        return self.data.message

    @property
    def method(self) -> str:
        return self.data.method

    @property
    def url(self) -> str:
        return self.data.url

    @property
    def status_code(self) -> int | None:
        return self.data.status_code

    @property
    def request_id(self) -> str | None:
        return self.data.request_id

    @property
    def response_headers(self) -> dict[str, str] | None:
        return self.data.response_headers

    @property
    def response_body_snippet(self) -> str | None:
        return self.data.response_body_snippet

    def __str__(self) -> str:
        parts = [self.data.message, f"{self.data.method} {self.data.url}"]
        if self.data.status_code is not None:
            parts.append(f"status={self.data.status_code}")
        if self.data.request_id:
            parts.append(f"request_id={self.data.request_id}")
        return " | ".join(parts)


class NetworkError(ApiError):
    """Connection-level failure (DNS, refused, reset)."""


class RequestTimeoutError(ApiError):
    """Request did not complete within the configured timeout."""


class DecodeError(ApiError):
    """Response body is not the JSON we asked for."""


class RateLimitError(ApiError):
    """HTTP 429."""


class AuthError(ApiError):
    """HTTP 401/403."""


class ClientError(ApiError):
    """Other HTTP 4xx."""


class ServerError(ApiError):
    """HTTP 5xx."""


class UnexpectedStatusError(ApiError):
    """Status outside every other category."""


def categorize_status(status_code: int) -> type[ApiError]:
    """Map an HTTP error status to its exception class."""
    if status_code in (401, 403):
        return AuthError
    if status_code == 429:
        return RateLimitError
    if 400 <= status_code < 500:
        return ClientError
    if 500 <= status_code < 600:
        return ServerError
    return UnexpectedStatusError
