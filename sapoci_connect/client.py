"""High-level client that sends requests through the default pipeline."""

from collections.abc import Mapping
from types import TracebackType

from sapoci_connect.config import ConnectConfig
from sapoci_connect.http.constants import (
    HEADER_ACCEPT,
    HEADER_USER_AGENT,
    METHOD_GET,
    METHOD_POST,
)
from sapoci_connect.http.models import HttpRequest, HttpResponse
from sapoci_connect.http.transport import HttpxTransport, Transport
from sapoci_connect.pipeline import DefaultHeadersStage, LoggingStage, Pipeline, Stage
from sapoci_connect.redirects.middleware import FollowRedirectsStage


def build_stages(config: ConnectConfig) -> list[Stage]:
    """Build the default stage list for a config.

    Logging sits inside redirect following so every hop is logged.

    Args:
        config: Client configuration.

    Returns:
        Stages in outermost-first order.
    """
    stages: list[Stage] = [
        DefaultHeadersStage(
            {HEADER_USER_AGENT: config.user_agent, HEADER_ACCEPT: "*/*"}
        ),
        FollowRedirectsStage(config.redirects),
    ]
    if config.log_requests:
        stages.append(LoggingStage())
    return stages


class ConnectClient:
    """Sends requests through the default pipeline.

    Raises RedirectLimitReachedError or RedirectWithoutLocationError when a
    redirect chain cannot be completed; transport errors propagate as-is.
    """

    def __init__(
        self,
        config: ConnectConfig | None = None,
        transport: Transport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Client configuration.
            transport: Transport to use. Defaults to an HttpxTransport
                built from the config, owned and closed by this client.
        """
        self._config = config or ConnectConfig()
        self._owns_transport = transport is None
        self._transport = transport or HttpxTransport(
            timeout_seconds=self._config.timeout_seconds,
            proxy=self._config.proxy,
        )
        self._pipeline = Pipeline(build_stages(self._config), self._transport)

    @property
    def config(self) -> ConnectConfig:
        """Get the client configuration."""
        return self._config

    @property
    def pipeline(self) -> Pipeline:
        """Get the request pipeline."""
        return self._pipeline

    def request(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
    ) -> HttpResponse:
        """Send a request.

        Args:
            method: HTTP method.
            url: Absolute URL.
            headers: Extra request headers.
            body: Request body.

        Returns:
            The terminal response after redirects.
        """
        request = HttpRequest(method=method, url=url, headers=headers, body=body)
        return self._pipeline.send(request)

    def get(self, url: str, headers: Mapping[str, str] | None = None) -> HttpResponse:
        """Send a GET request."""
        return self.request(METHOD_GET, url, headers=headers)

    def post(
        self,
        url: str,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> HttpResponse:
        """Send a POST request."""
        return self.request(METHOD_POST, url, headers=headers, body=body)

    def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport and isinstance(self._transport, HttpxTransport):
            self._transport.close()

    def __enter__(self) -> "ConnectClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
