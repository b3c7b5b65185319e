from __future__ import annotations

from collections.abc import AsyncGenerator, Generator

import httpx
from pydantic import BaseModel, Field


class BearerTokenAuth(httpx.Auth, BaseModel):
    """Static bearer token sent with every request.

    Where the token comes from is up to the caller (config file,
    ``PAGEWALK_API_TOKEN``); this only puts it on the wire.

    Example:
        >>> auth = BearerTokenAuth(token="secret")
        >>> # Custom header:
        >>> auth = BearerTokenAuth(token="secret", header_name="X-Auth-Token", scheme=None)
    """

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    token: str = Field(min_length=1, repr=False)
    header_name: str = "Authorization"
    scheme: str | None = "Bearer"

    def header_value(self) -> str:
        return f"{self.scheme} {self.token}" if self.scheme else self.token

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers[self.header_name] = self.header_value()
        yield request

    async def async_auth_flow(
        self, request: httpx.Request
    ) -> AsyncGenerator[httpx.Request, httpx.Response]:
        request.headers[self.header_name] = self.header_value()
        yield request
