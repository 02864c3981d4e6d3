"""CLI commands for sending requests through the pipeline."""

import sys
import uuid

import click
import httpx
import structlog

from sapoci_connect.client import ConnectClient
from sapoci_connect.config import ConnectConfig
from sapoci_connect.http.constants import METHOD_GET
from sapoci_connect.observability.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
    parse_log_level,
)
from sapoci_connect.redirects.constants import DEFAULT_FOLLOW_LIMIT, MAX_FOLLOW_LIMIT
from sapoci_connect.redirects.errors import RedirectFailure
from sapoci_connect.redirects.models import CookiePolicy, RedirectConfig
from sapoci_connect.settings.app import get_settings


logger = structlog.get_logger()

EXIT_FAILURE = 1
EXIT_TRANSPORT_ERROR = 2


def parse_header(value: str) -> tuple[str, str]:
    """Parse a ``Name: value`` header option.

    Args:
        value: Raw option value.

    Returns:
        (name, value) pair.

    Raises:
        click.BadParameter: If the value has no colon or an empty name.
    """
    name, sep, header_value = value.partition(":")
    if not sep or not name.strip():
        msg = f"Invalid header '{value}', expected 'Name: value'"
        raise click.BadParameter(msg, param_hint="--header")
    return name.strip(), header_value.strip()


@click.group()
@click.version_option(version="0.1.0")
def cli() -> None:
    """SAP OCI connect HTTP client CLI."""


@cli.command()
@click.argument("url")
@click.option("--method", "-X", default=METHOD_GET, help="HTTP method.")
@click.option(
    "--header",
    "-H",
    "headers",
    multiple=True,
    help="Extra request header as 'Name: value'. Repeatable.",
)
@click.option("--data", "-d", default=None, help="Request body (sent as UTF-8).")
@click.option(
    "--limit",
    type=click.IntRange(min=0, max=MAX_FOLLOW_LIMIT),
    default=None,
    help=f"Maximum number of redirects to follow (default: {DEFAULT_FOLLOW_LIMIT}).",
)
@click.option(
    "--standards-compliant",
    is_flag=True,
    default=False,
    help="Replay the original request on 302 instead of switching to GET.",
)
@click.option(
    "--no-cookies",
    is_flag=True,
    default=False,
    help="Do not forward cookies set by redirect responses.",
)
@click.option("--proxy", default=None, help="Proxy URL (default: $SAPOCI_HTTP_PROXY).")
@click.option(
    "--timeout",
    "timeout_seconds",
    type=click.FloatRange(min=0.0, min_open=True, max=300.0),
    default=None,
    help="Request timeout in seconds.",
)
@click.option(
    "--json-logs/--console-logs",
    default=True,
    help="Log format written to stderr.",
)
@click.option(
    "--log-level",
    default=None,
    help="Log level (default: $SAPOCI_LOG_LEVEL or INFO).",
)
@click.option(
    "--body/--no-body",
    "show_body",
    default=True,
    help="Print the response body.",
)
def get(
    url: str,
    method: str,
    headers: tuple[str, ...],
    data: str | None,
    limit: int | None,
    standards_compliant: bool,
    no_cookies: bool,
    proxy: str | None,
    timeout_seconds: float | None,
    json_logs: bool,
    log_level: str | None,
    show_body: bool,
) -> None:
    """Send a request to URL, following redirects."""
    settings = get_settings()

    try:
        level = parse_log_level(log_level or settings.log_level)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--log-level") from e
    configure_logging(level=level, json_format=json_logs)

    request_headers = dict(parse_header(h) for h in headers)

    redirect_values: dict[str, object] = {
        "standards_compliant": standards_compliant,
        "cookie_policy": CookiePolicy.NONE if no_cookies else CookiePolicy.ALL,
    }
    if limit is not None:
        redirect_values["limit"] = limit

    config = ConnectConfig.from_settings(
        settings,
        proxy=proxy,
        timeout_seconds=timeout_seconds,
        redirects=RedirectConfig.model_validate(redirect_values),
    )

    request_id = uuid.uuid4().hex[:12]
    bind_request_context(request_id)
    log = logger.bind(component="cli")

    body = data.encode("utf-8") if data is not None else None

    try:
        with ConnectClient(config) as client:
            response = client.request(method, url, headers=request_headers, body=body)
    except RedirectFailure as e:
        log.error("request_failed", **e.to_dict())
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(EXIT_FAILURE)
    except httpx.HTTPError as e:
        log.error("transport_failed", error_type=type(e).__name__, error=str(e))
        click.echo(f"Error: {type(e).__name__}: {e}", err=True)
        sys.exit(EXIT_TRANSPORT_ERROR)
    finally:
        clear_request_context()

    click.echo(f"HTTP {response.status_code} {response.url}")
    if show_body and response.body:
        click.echo(response.body)

    if not response.is_success:
        sys.exit(EXIT_FAILURE)


if __name__ == "__main__":
    cli()
