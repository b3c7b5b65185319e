"""Async HTTP client built on HTTPX.

Provides:
- Structured, categorized errors (ApiError hierarchy)
- Request/response debug logging with header redaction
- Optional transport-level retries
- JSON decoding with DecodeError on bad bodies
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Mapping, Sequence
from typing import Any

import httpx

from pagewalk.core.api.http.config import HttpClientConfig
from pagewalk.core.api.http.errors import (
    ApiError,
    DecodeError,
    NetworkError,
    RequestTimeoutError,
    categorize_status,
)
from pagewalk.core.api.http.logging_utils import (
    RequestLogContext,
    log_request,
    log_response,
    log_retry,
)
from pagewalk.core.api.http.retry import NO_RETRY, RetryPolicy, parse_retry_after_seconds
from pagewalk.core.api.http.utils import get_request_id, join_url, merge_query_params, safe_snippet


def _is_json_response(resp: httpx.Response) -> bool:
    ctype = resp.headers.get("content-type", "")
    return "application/json" in ctype or "+json" in ctype


class AsyncApiClient:
    """Asynchronous HTTP API client.

    Args:
        config: Client configuration
        auth: Optional httpx auth (e.g. BearerTokenAuth)
        retry_policy: Transport retry policy (default: single attempt)
        transport: Optional custom transport (httpx.MockTransport in tests)

    Example:
        >>> config = HttpClientConfig(base_url="https://api.example.com")
        >>> async with AsyncApiClient(config) as client:
        ...     body = await client.get_json("/v1/users?$top=50")
    """

    def __init__(
        self,
        config: HttpClientConfig,
        *,
        auth: httpx.Auth | None = None,
        retry_policy: RetryPolicy | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self.retry_policy = retry_policy or NO_RETRY
        self._client = httpx.AsyncClient(
            headers={"User-Agent": config.user_agent, **config.headers},
            timeout=config.timeout,
            limits=config.limits,
            follow_redirects=config.follow_redirects,
            verify=config.verify,
            auth=auth,
            transport=transport,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client and release connections."""
        await self._client.aclose()

    async def __aenter__(self) -> AsyncApiClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def _error(
        self,
        exc_type: type[ApiError],
        message: str,
        *,
        method: str,
        url: str,
        request_id: str | None,
        response: httpx.Response | None = None,
        cause: BaseException | None = None,
    ) -> ApiError:
        headers: dict[str, str] | None = None
        snippet: str | None = None
        status_code: int | None = None
        if response is not None:
            status_code = response.status_code
            headers = dict(response.headers)
            snippet = safe_snippet(response.content or b"", self.config.max_response_body_for_error)
            request_id = get_request_id(response.headers) or request_id
        return exc_type(
            message=message,
            method=method,
            url=url,
            status_code=status_code,
            request_id=request_id,
            response_headers=headers,
            response_body_snippet=snippet,
            cause=cause,
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: httpx.Timeout | None = None,
        expected_status: Sequence[int] | None = None,
    ) -> httpx.Response:
        """Send one logical request, retrying per the retry policy.

        Args:
            method: HTTP method
            path: Path relative to base_url; may already contain a query string
            params: Extra query parameters merged over the configured defaults;
                names already in the path's query string are left as they are
            headers: Extra headers for this request
            timeout: Per-request timeout override
            expected_status: Accepted statuses (default: anything below 400)

        Returns:
            The successful response

        Raises:
            ApiError: Categorized by status or transport failure
        """
        method_u = method.upper()

        merged_headers = dict(self._client.headers)
        if headers:
            merged_headers.update(headers)
        request_id = merged_headers.setdefault("X-Request-Id", uuid.uuid4().hex)

        merged_params = dict(self.config.params)
        if params:
            merged_params.update({k: str(v) for k, v in params.items()})
        url = merge_query_params(join_url(self.config.base_url, path), merged_params)

        attempt = 0
        while True:
            attempt += 1
            ctx = RequestLogContext(method=method_u, url=url, attempt=attempt, request_id=request_id)
            started = log_request(ctx, merged_headers, self.config.redact_headers)

            try:
                resp = await self._client.request(
                    method_u,
                    url,
                    headers=merged_headers,
                    timeout=timeout or self.config.timeout,
                )
            except httpx.TimeoutException as e:
                if self.retry_policy.should_retry(method_u, attempt):
                    delay = self.retry_policy.compute_delay(attempt)
                    log_retry(ctx, delay, "timeout")
                    await asyncio.sleep(delay)
                    continue
                raise self._error(
                    RequestTimeoutError,
                    "Request timed out",
                    method=method_u,
                    url=url,
                    request_id=request_id,
                    cause=e,
                ) from e
            except httpx.RequestError as e:
                if self.retry_policy.should_retry(method_u, attempt):
                    delay = self.retry_policy.compute_delay(attempt)
                    log_retry(ctx, delay, e.__class__.__name__)
                    await asyncio.sleep(delay)
                    continue
                raise self._error(
                    NetworkError,
                    "Network error while sending request",
                    method=method_u,
                    url=url,
                    request_id=request_id,
                    cause=e,
                ) from e

            log_response(ctx, resp.status_code, started)

            if expected_status is not None:
                ok = resp.status_code in expected_status
            else:
                ok = resp.status_code < 400
            if ok:
                return resp

            if self.retry_policy.should_retry(method_u, attempt, resp.status_code):
                retry_after = parse_retry_after_seconds(resp.headers.get("Retry-After"))
                delay = (
                    retry_after
                    if retry_after is not None
                    else self.retry_policy.compute_delay(attempt)
                )
                log_retry(ctx, delay, f"status {resp.status_code}")
                await asyncio.sleep(delay)
                continue

            message = (
                f"Unexpected status code (expected {list(expected_status)})"
                if expected_status is not None
                else "HTTP error response"
            )
            raise self._error(
                categorize_status(resp.status_code),
                message,
                method=method_u,
                url=url,
                request_id=request_id,
                response=resp,
            )

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """Perform a GET request (see ``request``)."""
        return await self.request("GET", path, **kwargs)

    def json(self, response: httpx.Response) -> Any:
        """Decode a JSON body.

        Returns:
            Decoded data, or None for 204/empty bodies

        Raises:
            DecodeError: If the body is not JSON or fails to parse
        """
        if response.status_code == 204 or not response.content:
            return None
        method = response.request.method
        url = str(response.request.url)
        request_id = response.request.headers.get("X-Request-Id")
        if not _is_json_response(response):
            raise self._error(
                DecodeError,
                "Response is not JSON (content-type mismatch)",
                method=method,
                url=url,
                request_id=request_id,
                response=response,
            )
        try:
            return response.json()
        except ValueError as e:
            raise self._error(
                DecodeError,
                "Failed to parse JSON response",
                method=method,
                url=url,
                request_id=request_id,
                response=response,
                cause=e,
            ) from e

    async def get_json(self, path: str, **kwargs: Any) -> Any:
        """GET ``path`` and decode the JSON body."""
        return self.json(await self.get(path, **kwargs))
