"""Data models for redirect following."""

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from sapoci_connect.http.models import HttpResponse
from sapoci_connect.redirects.constants import DEFAULT_FOLLOW_LIMIT, MAX_FOLLOW_LIMIT


class RedirectAction(str, Enum):
    """Outcome of evaluating a response against the redirect policy.

    - NO_REDIRECT: Hand the response back to the caller
    - FOLLOW_AS_GET: Request the new location with a bodyless GET
    - FOLLOW_AS_REPLAY: Resend the original method and body to the new location
    """

    NO_REDIRECT = "NO_REDIRECT"
    FOLLOW_AS_GET = "FOLLOW_AS_GET"
    FOLLOW_AS_REPLAY = "FOLLOW_AS_REPLAY"


class CookiePolicy(str, Enum):
    """Which cookies received during a chain are sent on the next hop."""

    NONE = "none"
    ALL = "all"


class RedirectConfig(BaseModel):
    """Configuration for redirect following.

    The default mirrors common browser behavior: a 302 turns into a GET.
    With ``standards_compliant`` enabled a 302 replays the original request
    like a 307.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    limit: Annotated[int, Field(ge=0, le=MAX_FOLLOW_LIMIT)] = DEFAULT_FOLLOW_LIMIT
    standards_compliant: bool = Field(
        default=False,
        description="Replay the original request on 302 instead of switching to GET",
    )
    cookie_policy: CookiePolicy = Field(
        default=CookiePolicy.ALL,
        description="Forward cookies set by redirect responses",
    )


class Cookie(BaseModel):
    """A cookie parsed from a Set-Cookie header.

    ``path`` and ``domain`` are recorded but not used to decide where the
    cookie is sent.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: Annotated[str, Field(min_length=1)]
    value: str = ""
    path: str | None = None
    domain: str | None = None

    @property
    def pair(self) -> str:
        """The ``name=value`` form used in the Cookie header."""
        return f"{self.name}={self.value}"


class RedirectErrorClass(str, Enum):
    """Classification of redirect failures.

    - LIMIT_REACHED: A redirect arrived after the hop limit was used up
    - MISSING_LOCATION: A redirect status arrived without a Location header
    """

    LIMIT_REACHED = "LIMIT_REACHED"
    MISSING_LOCATION = "MISSING_LOCATION"


class RedirectError(BaseModel):
    """Typed error from a redirect chain.

    Carries the response of the hop that ended the chain.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    error_class: RedirectErrorClass = Field(description="Classification of the error")
    message: Annotated[str, Field(min_length=1, description="Human-readable message")]
    response: HttpResponse = Field(description="Response that triggered the error")


class RedirectResult(BaseModel):
    """Result of following a redirect chain.

    Exactly one of two shapes: a terminal response with ``error`` unset, or
    an ``error`` describing why the chain stopped. ``response`` is always the
    last response received.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    response: HttpResponse = Field(description="Last response received")
    error: RedirectError | None = Field(
        default=None, description="Error details if the chain failed"
    )
    hops: int = Field(default=0, ge=0, description="Redirects followed")
    history: tuple[HttpResponse, ...] = Field(
        default=(), description="Responses of the redirects that were followed"
    )

    @property
    def is_success(self) -> bool:
        """Check if the chain ended in a terminal response."""
        return self.error is None
