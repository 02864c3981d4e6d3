"""Redirect following as an explicit, bounded loop."""

import uuid
from dataclasses import dataclass, field

import httpx
import structlog

from sapoci_connect.http.constants import HEADER_COOKIE, METHOD_GET
from sapoci_connect.http.models import HttpRequest, HttpResponse
from sapoci_connect.http.redact import redact_url_credentials
from sapoci_connect.pipeline.stages import Handler
from sapoci_connect.redirects.constants import (
    MESSAGE_LIMIT_REACHED,
    MESSAGE_MISSING_LOCATION,
)
from sapoci_connect.redirects.cookies import CookieJar
from sapoci_connect.redirects.metrics import RedirectMetrics
from sapoci_connect.redirects.models import (
    CookiePolicy,
    RedirectAction,
    RedirectConfig,
    RedirectError,
    RedirectErrorClass,
    RedirectResult,
)
from sapoci_connect.redirects.policy import decide
from sapoci_connect.redirects.state_machine import RedirectStateMachine


logger = structlog.get_logger()


@dataclass
class RedirectState:
    """Per-chain bookkeeping.

    Created at the start of one ``follow`` call and discarded when it
    returns. ``original_body`` is captured once and only read afterwards.

    Attributes:
        hops_left: Redirects that may still be followed.
        original_body: Body of the request that started the chain.
        cookie_jar: Cookies received during this chain.
        history: Responses of the redirects followed so far.
    """

    hops_left: int
    original_body: bytes | None
    cookie_jar: CookieJar = field(default_factory=CookieJar)
    history: list[HttpResponse] = field(default_factory=list)

    def consume_hop(self, response: HttpResponse) -> None:
        """Spend one hop on a followed redirect.

        Args:
            response: The redirect response being followed.

        Raises:
            ValueError: If no hops are left.
        """
        if self.hops_left <= 0:
            msg = "No redirect hops left"
            raise ValueError(msg)
        self.hops_left -= 1
        self.history.append(response)


class RedirectFollower:
    """Follows HTTP 301, 302, 303 and 307 redirects.

    Only GET, POST, PUT, PATCH and DELETE requests are redirected. A 301,
    303 or (by default) 302 turns the next request into a GET without a
    body. A 307, or a 302 in standards-compliant mode, replays the original
    method and the body captured when the chain started.

    The follower keeps no per-chain state on the instance, so one follower
    can serve any number of chains.
    """

    def __init__(
        self,
        send: Handler,
        config: RedirectConfig | None = None,
    ) -> None:
        """Initialize the follower.

        Args:
            send: Callable performing one exchange, e.g. ``Transport.send``
                or the next pipeline stage.
            config: Redirect configuration.
        """
        self._send = send
        self._config = config or RedirectConfig()
        self._metrics = RedirectMetrics.get_instance()
        self._log = logger.bind(component="redirects")

    @property
    def config(self) -> RedirectConfig:
        """Get the redirect configuration."""
        return self._config

    def follow(self, request: HttpRequest) -> RedirectResult:
        """Send a request, following redirects up to the configured limit.

        Exceptions raised by the send callable propagate unchanged.

        Args:
            request: Request that starts the chain.

        Returns:
            RedirectResult with the terminal response, or with an error if
            the limit was reached or a redirect had no Location.
        """
        state = RedirectState(
            hops_left=self._config.limit,
            original_body=request.body,
        )
        machine = RedirectStateMachine(chain_id=uuid.uuid4().hex[:12])
        log = self._log.bind(
            chain_id=machine.chain_id,
            method=request.method,
            url=redact_url_credentials(request.url),
        )
        self._metrics.record_chain()

        current = request
        while True:
            response = self._send(current)
            machine.to_evaluating()

            action = decide(
                current.method,
                response.status_code,
                self._config.standards_compliant,
            )
            self._metrics.record_action(action)

            if action is RedirectAction.NO_REDIRECT:
                machine.to_done()
                log.debug(
                    "redirect_chain_complete",
                    status_code=response.status_code,
                    hops=len(state.history),
                )
                return RedirectResult(
                    response=response,
                    hops=len(state.history),
                    history=tuple(state.history),
                )

            if state.hops_left == 0:
                return self._fail(
                    machine,
                    state,
                    log,
                    RedirectErrorClass.LIMIT_REACHED,
                    MESSAGE_LIMIT_REACHED.format(location=response.location or ""),
                    response,
                )

            location = (response.location or "").strip()
            if not location:
                return self._fail(
                    machine,
                    state,
                    log,
                    RedirectErrorClass.MISSING_LOCATION,
                    MESSAGE_MISSING_LOCATION,
                    response,
                )

            machine.to_redirecting()
            next_request = self._build_next_request(
                current, response, location, action, state
            )
            state.consume_hop(response)
            self._metrics.record_redirect()

            log.info(
                "redirect_followed",
                status_code=response.status_code,
                action=action.value,
                from_url=redact_url_credentials(current.url),
                to_url=redact_url_credentials(next_request.url),
                next_method=next_request.method,
                hops_left=state.hops_left,
            )

            current = next_request
            machine.to_sending()

    def _build_next_request(
        self,
        current: HttpRequest,
        response: HttpResponse,
        location: str,
        action: RedirectAction,
        state: RedirectState,
    ) -> HttpRequest:
        """Build the request for the next hop.

        Args:
            current: Request that produced the redirect.
            response: The redirect response.
            location: Non-empty Location header value.
            action: FOLLOW_AS_GET or FOLLOW_AS_REPLAY.
            state: Chain state (original body and cookie jar).

        Returns:
            New request; ``current`` is left untouched.
        """
        # Relative locations resolve against the current hop, not the first
        next_url = str(httpx.URL(current.url).join(location))
        next_request = current.model_copy(update={"url": next_url})

        if self._config.cookie_policy is CookiePolicy.ALL:
            cookie_header = state.cookie_jar.collect(response.headers)
            if cookie_header:
                next_request = next_request.with_header(HEADER_COOKIE, cookie_header)

        if action is RedirectAction.FOLLOW_AS_GET:
            return next_request.model_copy(update={"method": METHOD_GET, "body": None})

        return next_request.model_copy(update={"body": state.original_body})

    def _fail(
        self,
        machine: RedirectStateMachine,
        state: RedirectState,
        log: structlog.stdlib.BoundLogger,
        error_class: RedirectErrorClass,
        message: str,
        response: HttpResponse,
    ) -> RedirectResult:
        """End the chain with an error result.

        Args:
            machine: Chain state machine.
            state: Chain state.
            log: Bound logger.
            error_class: Classification of the failure.
            message: Human-readable message.
            response: Response that ended the chain.

        Returns:
            RedirectResult carrying the error.
        """
        machine.to_failed()
        self._metrics.record_failure(error_class)
        log.warning(
            "redirect_failed",
            error_class=error_class.value,
            error_message=message,
            status_code=response.status_code,
            hops=len(state.history),
        )
        return RedirectResult(
            response=response,
            error=RedirectError(
                error_class=error_class,
                message=message,
                response=response,
            ),
            hops=len(state.history),
            history=tuple(state.history),
        )
