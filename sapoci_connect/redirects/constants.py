"""Constants for redirect following."""

from sapoci_connect.http.constants import (
    HTTP_STATUS_FOUND,
    HTTP_STATUS_MOVED_PERMANENTLY,
    HTTP_STATUS_SEE_OTHER,
    HTTP_STATUS_TEMPORARY_REDIRECT,
    METHOD_DELETE,
    METHOD_GET,
    METHOD_PATCH,
    METHOD_POST,
    METHOD_PUT,
)


# HTTP methods for which redirects can be followed
ALLOWED_METHODS = frozenset(
    {METHOD_GET, METHOD_POST, METHOD_PUT, METHOD_PATCH, METHOD_DELETE}
)

# Redirect status codes that are followed
REDIRECT_STATUS_CODES = frozenset(
    {
        HTTP_STATUS_MOVED_PERMANENTLY,
        HTTP_STATUS_FOUND,
        HTTP_STATUS_SEE_OTHER,
        HTTP_STATUS_TEMPORARY_REDIRECT,
    }
)

# Status codes that always replay the original request
ALWAYS_REPLAY_STATUS_CODES = frozenset({HTTP_STATUS_TEMPORARY_REDIRECT})

# Default number of redirects followed before giving up
DEFAULT_FOLLOW_LIMIT = 3
MAX_FOLLOW_LIMIT = 50

# Separator between name=value pairs in the Cookie header
COOKIE_SEPARATOR = ";"

MESSAGE_LIMIT_REACHED = "too many redirects; last one to: {location}"
MESSAGE_MISSING_LOCATION = "redirect with empty location header"
