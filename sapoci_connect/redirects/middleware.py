"""Pipeline stage that follows redirects."""

from sapoci_connect.http.models import HttpRequest, HttpResponse
from sapoci_connect.pipeline.stages import Handler
from sapoci_connect.redirects.errors import RedirectFailure
from sapoci_connect.redirects.follower import RedirectFollower
from sapoci_connect.redirects.models import RedirectConfig


class FollowRedirectsStage:
    """Follows redirects returned by the inner stages.

    A new follower, and with it a new cookie jar, is created for every
    request, so one stage instance can be shared by concurrent callers.
    """

    def __init__(self, config: RedirectConfig | None = None) -> None:
        """Initialize the stage.

        Args:
            config: Redirect configuration (limit, 302 handling, cookies).
        """
        self._config = config or RedirectConfig()

    @property
    def config(self) -> RedirectConfig:
        """Get the redirect configuration."""
        return self._config

    def handle(self, request: HttpRequest, next_handler: Handler) -> HttpResponse:
        """Send a request through the inner stages, following redirects.

        Args:
            request: Incoming request.
            next_handler: Handler for the remaining stages and transport.

        Returns:
            The terminal response.

        Raises:
            RedirectLimitReachedError: If the follow limit was exceeded.
            RedirectWithoutLocationError: If a redirect had no Location.
        """
        result = RedirectFollower(next_handler, self._config).follow(request)
        if result.error is not None:
            raise RedirectFailure.from_error(result.error)
        return result.response
