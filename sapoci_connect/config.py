"""Configuration models for the connection client."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from sapoci_connect.http.constants import DEFAULT_TIMEOUT_SECONDS, DEFAULT_USER_AGENT
from sapoci_connect.redirects.models import RedirectConfig
from sapoci_connect.settings.app import AppSettings


class ConnectConfig(BaseModel):
    """Configuration for a ConnectClient.

    Central configuration for the transport, default headers and
    redirect handling.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    user_agent: Annotated[str, Field(min_length=1, max_length=500)] = (
        DEFAULT_USER_AGENT
    )
    timeout_seconds: Annotated[float, Field(gt=0.0, le=300.0)] = (
        DEFAULT_TIMEOUT_SECONDS
    )
    proxy: str | None = Field(default=None, description="Proxy URL for all requests")
    log_requests: bool = Field(
        default=True, description="Log every request and response hop"
    )
    redirects: RedirectConfig = Field(default_factory=RedirectConfig)

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        **overrides: object,
    ) -> "ConnectConfig":
        """Build a config from environment settings.

        Explicit overrides win over environment values; ``None`` overrides
        are ignored.

        Args:
            settings: Environment settings.
            **overrides: Field values to set explicitly.

        Returns:
            New ConnectConfig.
        """
        values: dict[str, object] = {}
        if settings.http_proxy:
            values["proxy"] = settings.http_proxy
        if settings.user_agent:
            values["user_agent"] = settings.user_agent
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(values)
