"""Redirect policy: which responses are followed, and how."""

from sapoci_connect.http.constants import HTTP_STATUS_FOUND
from sapoci_connect.redirects.constants import (
    ALLOWED_METHODS,
    ALWAYS_REPLAY_STATUS_CODES,
    REDIRECT_STATUS_CODES,
)
from sapoci_connect.redirects.models import RedirectAction


def replay_status_codes(standards_compliant: bool) -> frozenset[int]:
    """Get the status codes that replay the original request.

    Args:
        standards_compliant: Whether 302 replays the request as RFC 7231 describes.

    Returns:
        307, plus 302 in standards-compliant mode.
    """
    if standards_compliant:
        return ALWAYS_REPLAY_STATUS_CODES | {HTTP_STATUS_FOUND}
    return ALWAYS_REPLAY_STATUS_CODES


def decide(
    method: str,
    status_code: int,
    standards_compliant: bool = False,
) -> RedirectAction:
    """Decide how to handle a response.

    Only GET, POST, PUT, PATCH and DELETE requests are redirected, and only
    for 301, 302, 303 and 307. A 307 always replays the original request.
    A 302 replays it in standards-compliant mode; otherwise, like 301 and
    303, it turns into a GET without a body.

    Args:
        method: Method of the request that produced the response.
        status_code: Response status code.
        standards_compliant: Whether 302 replays the request as RFC 7231 describes.

    Returns:
        The action to take.
    """
    if method.upper() not in ALLOWED_METHODS:
        return RedirectAction.NO_REDIRECT

    if status_code not in REDIRECT_STATUS_CODES:
        return RedirectAction.NO_REDIRECT

    if status_code in replay_status_codes(standards_compliant):
        return RedirectAction.FOLLOW_AS_REPLAY

    return RedirectAction.FOLLOW_AS_GET
