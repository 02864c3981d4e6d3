"""Cookie jar for a single redirect chain."""

from collections.abc import Iterable
from http.cookies import CookieError, SimpleCookie

import structlog

from sapoci_connect.http.constants import HEADER_SET_COOKIE
from sapoci_connect.http.models import HeaderItems, header_values
from sapoci_connect.redirects.constants import COOKIE_SEPARATOR
from sapoci_connect.redirects.models import Cookie


logger = structlog.get_logger()


def parse_set_cookie(value: str) -> list[Cookie]:
    """Parse one Set-Cookie header value.

    Args:
        value: Raw header value, e.g. ``"sid=abc; Path=/; HttpOnly"``.

    Returns:
        Parsed cookies; empty if the value cannot be parsed.
    """
    parsed: SimpleCookie = SimpleCookie()
    try:
        parsed.load(value)
    except CookieError as e:
        logger.warning(
            "set_cookie_unparseable",
            component="redirects",
            error=str(e),
        )
        return []

    return [
        Cookie(
            name=morsel.key,
            value=morsel.coded_value,
            path=morsel["path"] or None,
            domain=morsel["domain"] or None,
        )
        for morsel in parsed.values()
    ]


def parse_set_cookies(values: Iterable[str]) -> list[Cookie]:
    """Parse several Set-Cookie header values, keeping encounter order."""
    cookies: list[Cookie] = []
    for value in values:
        cookies.extend(parse_set_cookie(value))
    return cookies


class CookieJar:
    """Tracks cookies received while following one redirect chain.

    Each call to ``collect`` replaces the jar contents with the cookies of
    the response just received; cookies from earlier hops are not merged in.
    A jar belongs to one chain and must not be shared between chains.
    """

    def __init__(self) -> None:
        """Initialize an empty jar."""
        self._cookies: list[Cookie] = []

    @property
    def cookies(self) -> tuple[Cookie, ...]:
        """Cookies from the most recently collected response."""
        return tuple(self._cookies)

    def collect(self, response_headers: HeaderItems) -> str | None:
        """Build a Cookie header value from a response's Set-Cookie headers.

        Args:
            response_headers: Header pairs of the response just received.

        Returns:
            ``name=value`` pairs joined with ``;``, deduplicated in encounter
            order, or None if the response set no cookies.
        """
        set_cookies = header_values(response_headers, HEADER_SET_COOKIE)
        if not set_cookies:
            return None

        self._cookies = parse_set_cookies(set_cookies)

        pairs: list[str] = []
        for cookie in self._cookies:
            if cookie.pair not in pairs:
                pairs.append(cookie.pair)

        return COOKIE_SEPARATOR.join(pairs) or None
