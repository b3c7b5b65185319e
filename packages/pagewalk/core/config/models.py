"""Configuration models for pagewalk."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from pagewalk.core.api.http.config import HttpClientConfig
from pagewalk.core.api.http.retry import RetryPolicy
from pagewalk.core.pagination.config import NEXT_CURSOR, SKIP_OFFSET, PaginationConfig


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = Field(default=False, description="Emit JSON lines instead of text")
    filename: str | None = Field(default=None, description="Log file (stdout if unset)")


class EndpointConfig(BaseModel):
    """A named paginated endpoint.

    ``style`` picks the conventional cursor parameter (``next`` or ``skip``);
    ``custom`` requires an explicit ``pagination`` block.
    """

    model_config = {"frozen": True}

    path: str = Field(min_length=1, description="Path relative to http.base_url")
    style: Literal["next", "skip", "custom"] = "next"
    pagination: PaginationConfig | None = None

    @model_validator(mode="after")
    def check_custom_pagination(self) -> EndpointConfig:
        if self.style == "custom" and self.pagination is None:
            raise ValueError("style 'custom' requires a pagination block")
        return self

    def pagination_config(self) -> PaginationConfig:
        if self.pagination is not None:
            return self.pagination
        return SKIP_OFFSET if self.style == "skip" else NEXT_CURSOR


class AppConfig(BaseModel):
    """Application-level configuration."""

    http: HttpClientConfig
    retry: RetryPolicy | None = Field(
        default=None, description="Transport retries (single attempt if unset)"
    )
    api_token: str | None = Field(
        default=None, repr=False, description="Bearer token (falls back to PAGEWALK_API_TOKEN)"
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    endpoints: dict[str, EndpointConfig] = Field(default_factory=dict)

    def endpoint(self, name: str) -> EndpointConfig:
        """Look up a configured endpoint by name.

        Raises:
            KeyError: If no endpoint with that name is configured
        """
        try:
            return self.endpoints[name]
        except KeyError:
            known = ", ".join(sorted(self.endpoints)) or "none"
            raise KeyError(f"Unknown endpoint '{name}' (configured: {known})") from None
