"""HTTP request/response models and transports."""

from sapoci_connect.http.models import HttpRequest, HttpResponse
from sapoci_connect.http.redact import redact_headers, redact_url_credentials
from sapoci_connect.http.transport import HttpxTransport, Transport


__all__ = [
    # Models
    "HttpRequest",
    "HttpResponse",
    # Transports
    "HttpxTransport",
    "Transport",
    # Redaction
    "redact_headers",
    "redact_url_credentials",
]
