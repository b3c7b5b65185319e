"""pagewalk session: one configured HTTP client plus named paginated endpoints."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from uuid import uuid4

import httpx

from pagewalk.core.api.http.auth import BearerTokenAuth
from pagewalk.core.api.http.client import AsyncApiClient
from pagewalk.core.config.loader import load_app_config
from pagewalk.core.config.models import AppConfig, EndpointConfig
from pagewalk.core.pagination.sequence import PaginatedSequence
from pagewalk.core.utils.logging import get_logger


class PagewalkSession:
    """Owns the HTTP client and hands out sequences for configured endpoints.

    The client is created on first use and closed with the session.

    Example:
        >>> async with PagewalkSession("pagewalk.yaml") as session:
        ...     reviews = await session.sequence("merge_requests").all()
    """

    def __init__(
        self,
        app_config: AppConfig | Path | str,
        *,
        session_id: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize session.

        Args:
            app_config: AppConfig instance or path to a JSON/YAML config file
            session_id: Optional ID attached to this session's log records
            transport: Optional httpx transport for the client (tests)

        Raises:
            TypeError: If app_config is of the wrong type
            FileNotFoundError: If the config file doesn't exist
            ValidationError: If the config is invalid
        """
        self.app_config = self._resolve_config(app_config)
        self.session_id = session_id or str(uuid4())
        self._transport = transport
        self._client: AsyncApiClient | None = None
        self._logger = get_logger(__name__, session_id=self.session_id)
        self._logger.debug(
            f"Session initialized: base_url={self.app_config.http.base_url}, "
            f"endpoints={sorted(self.app_config.endpoints)}"
        )

    @staticmethod
    def _resolve_config(value: Any) -> AppConfig:
        if isinstance(value, AppConfig):
            return value
        if isinstance(value, (Path, str)):
            return load_app_config(value)
        raise TypeError(f"Expected AppConfig, Path or str; got {type(value).__name__}")

    @property
    def client(self) -> AsyncApiClient:
        if self._client is None:
            auth = (
                BearerTokenAuth(token=self.app_config.api_token)
                if self.app_config.api_token
                else None
            )
            self._client = AsyncApiClient(
                self.app_config.http,
                auth=auth,
                retry_policy=self.app_config.retry,
                transport=self._transport,
            )
        return self._client

    def sequence(self, endpoint: str | EndpointConfig) -> PaginatedSequence[Any]:
        """Build a paginated sequence for a named or ad-hoc endpoint.

        Raises:
            KeyError: If a name is given that isn't configured
        """
        cfg = self.app_config.endpoint(endpoint) if isinstance(endpoint, str) else endpoint
        return PaginatedSequence.from_using(self.client, cfg.path, cfg.pagination_config())

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            self._logger.debug("Session closed")

    async def __aenter__(self) -> PagewalkSession:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
