"""Redirect following for the request pipeline.

Follows HTTP 301, 302, 303 and 307 redirects for GET, POST, PUT, PATCH and
DELETE requests:
- 301, 303 and (by default) 302 switch the next request to a bodyless GET
- 307, and 302 in standards-compliant mode, replay the original request
- Cookies set by a redirect response are sent on the next hop
- The number of redirects followed per request is bounded
"""

from sapoci_connect.redirects.constants import (
    ALLOWED_METHODS,
    DEFAULT_FOLLOW_LIMIT,
    REDIRECT_STATUS_CODES,
)
from sapoci_connect.redirects.cookies import CookieJar, parse_set_cookie
from sapoci_connect.redirects.errors import (
    RedirectFailure,
    RedirectLimitReachedError,
    RedirectWithoutLocationError,
)
from sapoci_connect.redirects.follower import RedirectFollower, RedirectState
from sapoci_connect.redirects.metrics import RedirectMetrics
from sapoci_connect.redirects.middleware import FollowRedirectsStage
from sapoci_connect.redirects.models import (
    Cookie,
    CookiePolicy,
    RedirectAction,
    RedirectConfig,
    RedirectError,
    RedirectErrorClass,
    RedirectResult,
)
from sapoci_connect.redirects.policy import decide, replay_status_codes
from sapoci_connect.redirects.state_machine import (
    RedirectPhase,
    RedirectStateMachine,
    RedirectStateTransitionError,
)


__all__ = [
    # Follower
    "RedirectFollower",
    "RedirectState",
    "FollowRedirectsStage",
    # Policy
    "decide",
    "replay_status_codes",
    # Cookies
    "CookieJar",
    "parse_set_cookie",
    # Models
    "Cookie",
    "CookiePolicy",
    "RedirectAction",
    "RedirectConfig",
    "RedirectError",
    "RedirectErrorClass",
    "RedirectResult",
    # Errors
    "RedirectFailure",
    "RedirectLimitReachedError",
    "RedirectWithoutLocationError",
    # State machine
    "RedirectPhase",
    "RedirectStateMachine",
    "RedirectStateTransitionError",
    # Constants
    "ALLOWED_METHODS",
    "DEFAULT_FOLLOW_LIMIT",
    "REDIRECT_STATUS_CODES",
    # Metrics
    "RedirectMetrics",
]
