"""HTTP constants shared by the transport, pipeline and redirect layers.

Centralizes status codes, method names and header names to avoid duplication
across modules.
"""

# HTTP Status Code Ranges
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300

# Redirect status codes
HTTP_STATUS_MOVED_PERMANENTLY = 301
HTTP_STATUS_FOUND = 302
HTTP_STATUS_SEE_OTHER = 303
HTTP_STATUS_TEMPORARY_REDIRECT = 307

# Methods
METHOD_GET = "GET"
METHOD_POST = "POST"
METHOD_PUT = "PUT"
METHOD_PATCH = "PATCH"
METHOD_DELETE = "DELETE"

# Header names
HEADER_LOCATION = "Location"
HEADER_SET_COOKIE = "Set-Cookie"
HEADER_COOKIE = "Cookie"
HEADER_USER_AGENT = "User-Agent"
HEADER_ACCEPT = "Accept"

# Default request timeout (seconds)
DEFAULT_TIMEOUT_SECONDS = 30.0

DEFAULT_USER_AGENT = "sapoci-connect/0.1.0"
