"""Pipeline stage protocol and general-purpose stages."""

import time
from collections.abc import Callable, Mapping
from typing import Protocol, runtime_checkable

import structlog

from sapoci_connect.http.models import HttpRequest, HttpResponse
from sapoci_connect.http.redact import redact_headers, redact_url_credentials


logger = structlog.get_logger()

Handler = Callable[[HttpRequest], HttpResponse]


@runtime_checkable
class Stage(Protocol):
    """Protocol for one request-handling stage.

    A stage receives a request and the handler for the rest of the
    pipeline. It returns a response by delegating to ``next_handler`` (any
    number of times) and post-processing what comes back.
    """

    def handle(self, request: HttpRequest, next_handler: Handler) -> HttpResponse:
        """Handle a request.

        Args:
            request: Incoming request.
            next_handler: Handler for the remaining stages and transport.

        Returns:
            Response for the request.
        """
        ...


class DefaultHeadersStage:
    """Adds headers the request does not already carry."""

    def __init__(self, headers: Mapping[str, str]) -> None:
        self._headers = dict(headers)

    def handle(self, request: HttpRequest, next_handler: Handler) -> HttpResponse:
        for name, value in self._headers.items():
            if not request.has_header(name):
                request = request.with_header(name, value)
        return next_handler(request)


class LoggingStage:
    """Logs every request and response passing through it.

    Sensitive headers and URL credentials are redacted. Exceptions from the
    inner handler are logged and re-raised unchanged.
    """

    def __init__(self) -> None:
        self._log = logger.bind(component="pipeline")

    def handle(self, request: HttpRequest, next_handler: Handler) -> HttpResponse:
        log = self._log.bind(
            method=request.method,
            url=redact_url_credentials(request.url),
        )
        log.debug("http_request", headers=redact_headers(request.headers))

        start_time_ns = time.perf_counter_ns()
        try:
            response = next_handler(request)
        except Exception as e:
            log.warning(
                "http_transport_error",
                error_type=type(e).__name__,
                error=str(e),
            )
            raise

        duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
        log.info(
            "http_response",
            status_code=response.status_code,
            bytes=response.body_size,
            duration_ms=round(duration_ms, 2),
            headers=redact_headers(response.headers),
        )
        return response
