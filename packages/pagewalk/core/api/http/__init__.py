"""HTTPX wrapper used to fetch pages.

Exposes:
- AsyncApiClient: async client with get_json()
- HttpClientConfig / RetryPolicy: configuration
- Exceptions: ApiError and subclasses
- BearerTokenAuth: static token auth
"""

from pagewalk.core.api.http.auth import BearerTokenAuth
from pagewalk.core.api.http.client import AsyncApiClient
from pagewalk.core.api.http.config import HttpClientConfig
from pagewalk.core.api.http.errors import (
    ApiError,
    AuthError,
    ClientError,
    DecodeError,
    NetworkError,
    RateLimitError,
    RequestTimeoutError,
    ServerError,
    UnexpectedStatusError,
)
from pagewalk.core.api.http.retry import RetryPolicy

__all__ = [
    "AsyncApiClient",
    "HttpClientConfig",
    "RetryPolicy",
    "BearerTokenAuth",
    "ApiError",
    "NetworkError",
    "RequestTimeoutError",
    "DecodeError",
    "RateLimitError",
    "AuthError",
    "ClientError",
    "ServerError",
    "UnexpectedStatusError",
]
