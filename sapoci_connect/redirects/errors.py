"""Exceptions raised when a redirect chain cannot be completed."""

from sapoci_connect.http.models import HttpResponse
from sapoci_connect.redirects.models import RedirectError, RedirectErrorClass


class RedirectFailure(Exception):
    """Base exception for redirect failures.

    Carries the response of the hop that ended the chain.
    """

    error_class: RedirectErrorClass

    def __init__(self, message: str, response: HttpResponse) -> None:
        """Initialize the redirect failure.

        Args:
            message: Human-readable error message.
            response: Response that ended the chain.
        """
        super().__init__(message)
        self.message = message
        self.response = response

    @classmethod
    def from_error(cls, error: RedirectError) -> "RedirectFailure":
        """Build the exception matching a typed redirect error.

        Args:
            error: Error from a RedirectResult.

        Returns:
            RedirectLimitReachedError or RedirectWithoutLocationError.
        """
        exc_class = _EXCEPTIONS_BY_CLASS[error.error_class]
        return exc_class(error.message, error.response)

    def to_dict(self) -> dict[str, str | int]:
        """Convert error to dictionary for logging/serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error_class": self.error_class.value,
            "message": self.message,
            "status_code": self.response.status_code,
            "url": self.response.url,
        }


class RedirectLimitReachedError(RedirectFailure):
    """Raised when a redirect arrives after the follow limit is used up."""

    error_class = RedirectErrorClass.LIMIT_REACHED


class RedirectWithoutLocationError(RedirectFailure):
    """Raised when a redirect response has an empty Location header."""

    error_class = RedirectErrorClass.MISSING_LOCATION


_EXCEPTIONS_BY_CLASS: dict[RedirectErrorClass, type[RedirectFailure]] = {
    RedirectErrorClass.LIMIT_REACHED: RedirectLimitReachedError,
    RedirectErrorClass.MISSING_LOCATION: RedirectWithoutLocationError,
}
