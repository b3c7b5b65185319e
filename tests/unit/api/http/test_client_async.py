"""Tests for AsyncApiClient.

Uses anyio for async test support (pytest-anyio).
"""

from __future__ import annotations

import logging

import httpx
import pytest

from pagewalk.core.api.http.auth import BearerTokenAuth
from pagewalk.core.api.http.client import AsyncApiClient
from pagewalk.core.api.http.config import HttpClientConfig
from pagewalk.core.api.http.errors import (
    AuthError,
    ClientError,
    DecodeError,
    NetworkError,
    RateLimitError,
    RequestTimeoutError,
    ServerError,
    UnexpectedStatusError,
    categorize_status,
)
from pagewalk.core.api.http.retry import RetryPolicy

BASE = "https://example.test/api"


@pytest.mark.anyio
async def test_get_json_success() -> None:
    """Test successful GET with JSON body."""

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v1/ping"
        return httpx.Response(200, json={"ok": True})

    cfg = HttpClientConfig(base_url=BASE)
    async with AsyncApiClient(cfg, transport=httpx.MockTransport(handler)) as c:
        assert await c.get_json("/v1/ping") == {"ok": True}


@pytest.mark.anyio
async def test_default_params_and_headers_sent() -> None:
    seen: dict[str, httpx.Request] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["req"] = request
        return httpx.Response(200, json={})

    cfg = HttpClientConfig(
        base_url=BASE, params={"$fields": "id"}, headers={"Accept": "application/json"}
    )
    async with AsyncApiClient(cfg, transport=httpx.MockTransport(handler)) as c:
        await c.get("/items?next=abc")

    req = seen["req"]
    assert req.url.params["next"] == "abc"
    assert req.url.params["$fields"] == "id"
    assert req.headers["Accept"] == "application/json"
    assert req.headers["User-Agent"] == cfg.user_agent
    assert req.headers["X-Request-Id"]


@pytest.mark.anyio
async def test_request_params_merge_into_path_query() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    cfg = HttpClientConfig(base_url=BASE, params={"$top": "2", "state": "Any"})
    async with AsyncApiClient(cfg, transport=httpx.MockTransport(handler)) as c:
        await c.get("/reviews?state=Opened&%24skip=4", params={"$top": 10})

    query = seen[0].url.query
    assert query.startswith(b"state=Opened&%24skip=4&")
    assert seen[0].url.params["state"] == "Opened"
    assert seen[0].url.params["$skip"] == "4"
    assert seen[0].url.params["$top"] == "10"


@pytest.mark.anyio
async def test_no_retry_by_default() -> None:
    """Without a retry policy a 500 is raised after one attempt."""
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        return httpx.Response(500, text="boom")

    cfg = HttpClientConfig(base_url=BASE)
    async with AsyncApiClient(cfg, transport=httpx.MockTransport(handler)) as c:
        with pytest.raises(ServerError) as ei:
            await c.get("/v1/flaky")

    assert calls["n"] == 1
    assert ei.value.status_code == 500
    assert ei.value.response_body_snippet == "boom"


@pytest.mark.anyio
async def test_retry_500_then_ok() -> None:
    """Test retry on 500 error when a policy is configured."""
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        if calls["n"] == 1:
            return httpx.Response(500, text="boom")
        return httpx.Response(200, json={"ok": True})

    cfg = HttpClientConfig(base_url=BASE)
    policy = RetryPolicy(max_attempts=2, base_delay_s=0.0, max_delay_s=0.0, jitter=0.0)

    async with AsyncApiClient(cfg, transport=httpx.MockTransport(handler), retry_policy=policy) as c:
        resp = await c.get("/v1/flaky")

    assert resp.status_code == 200
    assert calls["n"] == 2


@pytest.mark.anyio
async def test_retry_honours_retry_after() -> None:
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        if calls["n"] == 1:
            return httpx.Response(429, json={"error": "rate"}, headers={"Retry-After": "0"})
        return httpx.Response(200, json={"ok": True})

    cfg = HttpClientConfig(base_url=BASE)
    policy = RetryPolicy(max_attempts=2, base_delay_s=5.0, max_delay_s=5.0, jitter=0.0)

    async with AsyncApiClient(cfg, transport=httpx.MockTransport(handler), retry_policy=policy) as c:
        assert await c.get_json("/v1/rate") == {"ok": True}
    assert calls["n"] == 2


@pytest.mark.anyio
async def test_retry_gives_up_after_max_attempts() -> None:
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        return httpx.Response(503)

    cfg = HttpClientConfig(base_url=BASE)
    policy = RetryPolicy(max_attempts=3, base_delay_s=0.0, max_delay_s=0.0, jitter=0.0)

    async with AsyncApiClient(cfg, transport=httpx.MockTransport(handler), retry_policy=policy) as c:
        with pytest.raises(ServerError):
            await c.get("/v1/down")
    assert calls["n"] == 3


@pytest.mark.anyio
@pytest.mark.parametrize(
    ("status", "exc_type"),
    [
        (400, ClientError),
        (401, AuthError),
        (403, AuthError),
        (404, ClientError),
        (429, RateLimitError),
        (502, ServerError),
    ],
)
async def test_status_categorization(status: int, exc_type: type) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json={"error": "x"}, headers={"x-request-id": "srv-1"})

    cfg = HttpClientConfig(base_url=BASE)
    async with AsyncApiClient(cfg, transport=httpx.MockTransport(handler)) as c:
        with pytest.raises(exc_type) as ei:
            await c.get("/v1/x")

    assert ei.value.status_code == status
    assert ei.value.request_id == "srv-1"
    assert f"status={status}" in str(ei.value)


def test_categorize_unusual_status() -> None:
    assert categorize_status(302) is UnexpectedStatusError


@pytest.mark.anyio
async def test_expected_status_enforced() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(202, json={})

    cfg = HttpClientConfig(base_url=BASE)
    async with AsyncApiClient(cfg, transport=httpx.MockTransport(handler)) as c:
        with pytest.raises(UnexpectedStatusError, match="expected"):
            await c.get("/v1/x", expected_status=[200])


@pytest.mark.anyio
async def test_timeout_maps_to_request_timeout_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    cfg = HttpClientConfig(base_url=BASE)
    async with AsyncApiClient(cfg, transport=httpx.MockTransport(handler)) as c:
        with pytest.raises(RequestTimeoutError) as ei:
            await c.get("/v1/slow")

    assert isinstance(ei.value.data.cause, httpx.ReadTimeout)
    assert ei.value.status_code is None


@pytest.mark.anyio
async def test_connect_error_maps_to_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    cfg = HttpClientConfig(base_url=BASE)
    async with AsyncApiClient(cfg, transport=httpx.MockTransport(handler)) as c:
        with pytest.raises(NetworkError):
            await c.get("/v1/x")


@pytest.mark.anyio
async def test_non_json_body_raises_decode_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>login</html>", headers={"content-type": "text/html"})

    cfg = HttpClientConfig(base_url=BASE)
    async with AsyncApiClient(cfg, transport=httpx.MockTransport(handler)) as c:
        with pytest.raises(DecodeError, match="not JSON"):
            await c.get_json("/v1/x")


@pytest.mark.anyio
async def test_broken_json_raises_decode_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, content=b"{not json", headers={"content-type": "application/json"}
        )

    cfg = HttpClientConfig(base_url=BASE)
    async with AsyncApiClient(cfg, transport=httpx.MockTransport(handler)) as c:
        with pytest.raises(DecodeError, match="parse"):
            await c.get_json("/v1/x")


@pytest.mark.anyio
async def test_empty_body_decodes_to_none() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(204)

    cfg = HttpClientConfig(base_url=BASE)
    async with AsyncApiClient(cfg, transport=httpx.MockTransport(handler)) as c:
        assert await c.get_json("/v1/x") is None


@pytest.mark.anyio
async def test_bearer_token_sent_and_redacted_in_logs(caplog: pytest.LogCaptureFixture) -> None:
    seen: dict[str, str] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["Authorization"]
        return httpx.Response(200, json={})

    cfg = HttpClientConfig(base_url=BASE, headers={"X-Api-Key": "k-123"})
    auth = BearerTokenAuth(token="s3cret")

    with caplog.at_level(logging.DEBUG, logger="pagewalk.core.api.http"):
        async with AsyncApiClient(cfg, auth=auth, transport=httpx.MockTransport(handler)) as c:
            await c.get("/v1/me")

    assert seen["auth"] == "Bearer s3cret"
    request_records = [r for r in caplog.records if r.getMessage() == "HTTP request"]
    assert request_records
    logged_headers = request_records[0].headers
    assert "k-123" not in logged_headers.values()
    assert "s3cret" not in repr(auth)
