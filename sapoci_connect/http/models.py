"""Request and response models passed between pipeline stages."""

from collections.abc import Iterable, Mapping
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sapoci_connect.http.constants import (
    HEADER_LOCATION,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
)


HeaderItems = tuple[tuple[str, str], ...]


def normalize_headers(value: Any) -> Any:
    """Coerce a header mapping or iterable of pairs into ordered pairs.

    Mappings keep their iteration order. Anything else is returned untouched
    so pydantic can report it as a validation error.

    Args:
        value: Raw header input.

    Returns:
        Tuple of (name, value) pairs, or the original value.
    """
    if value is None:
        return ()
    if isinstance(value, Mapping):
        return tuple((str(k), str(v)) for k, v in value.items())
    if isinstance(value, Iterable) and not isinstance(value, str | bytes):
        return tuple(tuple(pair) for pair in value)
    return value


def header_values(headers: HeaderItems, name: str) -> list[str]:
    """Get every value of a header, matching the name case-insensitively.

    Args:
        headers: Ordered header pairs.
        name: Header name to look up.

    Returns:
        Values in the order they appear.
    """
    wanted = name.lower()
    return [value for key, value in headers if key.lower() == wanted]


class HttpRequest(BaseModel):
    """An outgoing HTTP request.

    Requests are immutable. Stages that need a different request build one
    with ``with_header`` or ``model_copy(update=...)``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    method: Annotated[str, Field(min_length=1, description="HTTP method")]
    url: Annotated[str, Field(min_length=1, description="Absolute request URL")]
    headers: HeaderItems = Field(
        default=(), description="Ordered request header pairs"
    )
    body: bytes | None = Field(default=None, description="Request body")

    @field_validator("method")
    @classmethod
    def normalize_method(cls, v: str) -> str:
        """Upper-case the method token."""
        return v.strip().upper()

    @field_validator("headers", mode="before")
    @classmethod
    def coerce_headers(cls, v: Any) -> Any:
        """Accept dicts as well as pair sequences."""
        return normalize_headers(v)

    def header(self, name: str) -> str | None:
        """Get the first value of a header, or None if absent."""
        values = header_values(self.headers, name)
        return values[0] if values else None

    def has_header(self, name: str) -> bool:
        """Check whether a header is present (case-insensitive)."""
        return bool(header_values(self.headers, name))

    def with_header(self, name: str, value: str) -> "HttpRequest":
        """Return a copy with ``name`` set to a single ``value``.

        An existing header keeps its position; every other occurrence of the
        same name is dropped. A new header is appended.

        Args:
            name: Header name.
            value: Header value.

        Returns:
            New request with the header replaced.
        """
        wanted = name.lower()
        updated: list[tuple[str, str]] = []
        replaced = False
        for key, current in self.headers:
            if key.lower() != wanted:
                updated.append((key, current))
            elif not replaced:
                updated.append((key, value))
                replaced = True
        if not replaced:
            updated.append((name, value))
        return self.model_copy(update={"headers": tuple(updated)})

    def headers_dict(self) -> dict[str, str]:
        """Flatten headers to a dict (last value wins), for logging."""
        return dict(self.headers)


class HttpResponse(BaseModel):
    """Response received for a single request.

    Headers are kept as ordered pairs so that repeated headers such as
    ``Set-Cookie`` survive.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    status_code: int = Field(ge=100, le=599, description="HTTP status code")
    url: Annotated[
        str, Field(min_length=1, description="URL of the request that produced it")
    ]
    headers: HeaderItems = Field(
        default=(), description="Ordered response header pairs"
    )
    body: bytes = Field(default=b"", description="Response body")

    @field_validator("headers", mode="before")
    @classmethod
    def coerce_headers(cls, v: Any) -> Any:
        """Accept dicts as well as pair sequences."""
        return normalize_headers(v)

    def header(self, name: str) -> str | None:
        """Get the first value of a header, or None if absent."""
        values = header_values(self.headers, name)
        return values[0] if values else None

    def header_values(self, name: str) -> list[str]:
        """Get all values of a header."""
        return header_values(self.headers, name)

    @property
    def location(self) -> str | None:
        """The Location header, if any."""
        return self.header(HEADER_LOCATION)

    @property
    def is_success(self) -> bool:
        """Check if the status code is 2xx."""
        return HTTP_STATUS_OK_MIN <= self.status_code < HTTP_STATUS_OK_MAX

    @property
    def body_size(self) -> int:
        """Get the size of the response body in bytes."""
        return len(self.body)
