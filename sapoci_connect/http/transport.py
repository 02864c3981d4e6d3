"""Transports perform exactly one request/response exchange."""

from http.cookiejar import CookieJar, DefaultCookiePolicy
from types import TracebackType
from typing import Protocol, runtime_checkable

import httpx
import structlog

from sapoci_connect.http.constants import DEFAULT_TIMEOUT_SECONDS
from sapoci_connect.http.models import HttpRequest, HttpResponse
from sapoci_connect.http.redact import redact_url_credentials


logger = structlog.get_logger()


@runtime_checkable
class Transport(Protocol):
    """Protocol for the innermost request handler.

    A transport sends one request and returns the response as received.
    It must not follow redirects or retry on its own; errors it raises
    are passed through the pipeline untouched.
    """

    def send(self, request: HttpRequest) -> HttpResponse:
        """Send a request.

        Args:
            request: Request to send.

        Returns:
            Response for exactly this request.
        """
        ...


class HttpxTransport:
    """Transport backed by an ``httpx.Client``.

    Redirect following is disabled on the client so the pipeline sees every
    3xx response. The client keeps no cookies between exchanges: its jar,
    injected clients included, is replaced by one that refuses every cookie.
    httpx exceptions (timeouts, connection errors) propagate unchanged.
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        proxy: str | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            client: Client to use. When omitted one is created and owned by
                this transport.
            timeout_seconds: Timeout for a created client.
            proxy: Proxy URL for a created client.
        """
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=timeout_seconds,
            proxy=proxy,
            follow_redirects=False,
        )
        # Cookies travel only as explicit request headers
        self._client.cookies = CookieJar(
            policy=DefaultCookiePolicy(allowed_domains=[])
        )
        self._log = logger.bind(component="transport")
        if proxy:
            self._log.debug("proxy_configured", proxy=redact_url_credentials(proxy))

    def send(self, request: HttpRequest) -> HttpResponse:
        """Send a request and read the full response body.

        Args:
            request: Request to send.

        Returns:
            The response, with repeated headers preserved.
        """
        httpx_request = self._client.build_request(
            request.method,
            request.url,
            headers=list(request.headers),
            content=request.body,
        )
        response = self._client.send(httpx_request, follow_redirects=False)
        try:
            body = response.read()
        finally:
            response.close()

        return HttpResponse(
            status_code=response.status_code,
            url=str(response.request.url),
            headers=response.headers.multi_items(),
            body=body,
        )

    def close(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
