"""Unit tests for the redirect follower loop."""

from collections.abc import Generator

import httpx
import pytest

from sapoci_connect.http.models import HttpRequest, HttpResponse
from sapoci_connect.redirects.follower import RedirectFollower, RedirectState
from sapoci_connect.redirects.metrics import RedirectMetrics
from sapoci_connect.redirects.models import (
    CookiePolicy,
    RedirectConfig,
    RedirectErrorClass,
)
from tests.helpers.transport import ScriptedTransport, ok, redirect


BASE = "https://shop.example.com"


@pytest.fixture(autouse=True)
def reset_metrics() -> Generator[None, None, None]:
    """Give every test fresh metrics."""
    RedirectMetrics.reset()
    yield
    RedirectMetrics.reset()


def post(path: str = "/checkout", body: bytes = b"order=1") -> HttpRequest:
    return HttpRequest(
        method="POST",
        url=f"{BASE}{path}",
        headers={"Content-Type": "application/x-www-form-urlencoded"},
        body=body,
    )


class TestRedirectState:
    """Tests for RedirectState bookkeeping."""

    @pytest.mark.unit
    def test_consume_hop_decrements_and_records(self) -> None:
        """Test that a followed hop is counted and recorded."""
        state = RedirectState(hops_left=2, original_body=b"x")
        response = HttpResponse(status_code=301, url=BASE)

        state.consume_hop(response)

        assert state.hops_left == 1
        assert state.history == [response]

    @pytest.mark.unit
    def test_consume_hop_never_goes_negative(self) -> None:
        """Test that no hop can be consumed once none are left."""
        state = RedirectState(hops_left=0, original_body=None)

        with pytest.raises(ValueError, match="No redirect hops left"):
            state.consume_hop(HttpResponse(status_code=301, url=BASE))

        assert state.hops_left == 0


class TestFollowAsGet:
    """Tests for redirects that switch to a bodyless GET."""

    @pytest.mark.unit
    def test_scenario_301_then_200(self) -> None:
        """Test GET /a -> 301 /b -> GET /b -> 200."""
        transport = ScriptedTransport(redirect(301, "/b"), ok(b"X"))
        follower = RedirectFollower(transport.send, RedirectConfig(limit=3))

        result = follower.follow(HttpRequest(method="GET", url=f"{BASE}/a"))

        assert transport.calls == 2
        assert result.is_success
        assert result.response.status_code == 200
        assert result.response.body == b"X"
        assert result.hops == 1
        assert transport.requests[1].url == f"{BASE}/b"

    @pytest.mark.unit
    @pytest.mark.parametrize("status", [301, 302, 303])
    def test_post_becomes_get_without_body(self, status: int) -> None:
        """Test that 301, 303 and non-compliant 302 drop method and body."""
        transport = ScriptedTransport(redirect(status, "/done"), ok())

        RedirectFollower(transport.send).follow(post())

        second = transport.requests[1]
        assert second.method == "GET"
        assert second.body is None
        assert second.url == f"{BASE}/done"

    @pytest.mark.unit
    def test_headers_carry_over(self) -> None:
        """Test that request headers survive a redirect."""
        transport = ScriptedTransport(redirect(303, "/done"), ok())

        RedirectFollower(transport.send).follow(post())

        assert (
            transport.requests[1].header("content-type")
            == "application/x-www-form-urlencoded"
        )


class TestFollowAsReplay:
    """Tests for redirects that replay the original request."""

    @pytest.mark.unit
    def test_307_replays_method_and_body(self) -> None:
        """Test that 307 keeps the method and body."""
        transport = ScriptedTransport(redirect(307, "/v2/checkout"), ok())

        RedirectFollower(transport.send).follow(post(body=b"order=42"))

        second = transport.requests[1]
        assert second.method == "POST"
        assert second.body == b"order=42"
        assert second.url == f"{BASE}/v2/checkout"

    @pytest.mark.unit
    def test_302_replays_when_standards_compliant(self) -> None:
        """Test RFC-faithful 302 handling."""
        transport = ScriptedTransport(redirect(302, "/moved"), ok())
        follower = RedirectFollower(
            transport.send, RedirectConfig(standards_compliant=True)
        )

        follower.follow(HttpRequest(method="PUT", url=f"{BASE}/item", body=b"v"))

        assert transport.requests[1].method == "PUT"
        assert transport.requests[1].body == b"v"

    @pytest.mark.unit
    def test_replay_uses_original_body_after_get_hop(self) -> None:
        """Test that replay restores the body captured at chain start.

        A 303 drops the body; a following 307 must resend the body of the
        request that started the chain, not the cleared one.
        """
        transport = ScriptedTransport(
            redirect(303, "/step"),
            redirect(307, "/final"),
            ok(),
        )

        RedirectFollower(transport.send).follow(post(body=b"payload"))

        assert transport.requests[1].method == "GET"
        assert transport.requests[1].body is None
        third = transport.requests[2]
        assert third.method == "GET"
        assert third.body == b"payload"

    @pytest.mark.unit
    def test_original_request_is_not_mutated(self) -> None:
        """Test that the caller's request object is left untouched."""
        request = post(body=b"keep")
        transport = ScriptedTransport(redirect(301, "/x"), ok())

        RedirectFollower(transport.send).follow(request)

        assert request.method == "POST"
        assert request.body == b"keep"
        assert request.url == f"{BASE}/checkout"


class TestHopLimit:
    """Tests for the follow limit."""

    @pytest.mark.unit
    @pytest.mark.parametrize("limit", [0, 1, 3, 5])
    def test_exactly_limit_redirects_succeed(self, limit: int) -> None:
        """Test that N redirects with limit N take N+1 calls."""
        script = [redirect(302, f"/hop{i}") for i in range(limit)] + [ok(b"end")]
        transport = ScriptedTransport(*script)

        result = RedirectFollower(transport.send, RedirectConfig(limit=limit)).follow(
            HttpRequest(method="GET", url=f"{BASE}/start")
        )

        assert result.is_success
        assert transport.calls == limit + 1
        assert result.hops == limit
        assert len(result.history) == limit
        assert result.response.body == b"end"

    @pytest.mark.unit
    @pytest.mark.parametrize("limit", [0, 1, 3])
    def test_one_more_redirect_fails(self, limit: int) -> None:
        """Test that N+1 redirects with limit N fail without hop N+2."""
        script = [redirect(301, f"/hop{i}") for i in range(limit + 1)]
        transport = ScriptedTransport(*script)

        result = RedirectFollower(transport.send, RedirectConfig(limit=limit)).follow(
            HttpRequest(method="GET", url=f"{BASE}/start")
        )

        assert transport.calls == limit + 1
        assert not result.is_success
        assert result.error is not None
        assert result.error.error_class is RedirectErrorClass.LIMIT_REACHED
        assert result.error.response.header("Location") == f"/hop{limit}"
        assert result.error.response is result.response
        assert result.error.message == f"too many redirects; last one to: /hop{limit}"

    @pytest.mark.unit
    def test_default_limit_is_three(self) -> None:
        """Test the default follow limit."""
        transport = ScriptedTransport(*[redirect(301, "/loop")] * 4)

        result = RedirectFollower(transport.send).follow(
            HttpRequest(method="GET", url=f"{BASE}/loop")
        )

        assert transport.calls == 4
        assert result.error is not None
        assert result.error.error_class is RedirectErrorClass.LIMIT_REACHED


class TestMissingLocation:
    """Tests for redirects without a usable Location."""

    @pytest.mark.unit
    @pytest.mark.parametrize("location", [None, ""])
    def test_missing_or_empty_location_fails(self, location: str | None) -> None:
        """Test that a redirect without Location ends the chain."""
        transport = ScriptedTransport(redirect(302, location))

        result = RedirectFollower(transport.send).follow(
            HttpRequest(method="GET", url=f"{BASE}/a")
        )

        assert transport.calls == 1
        assert result.error is not None
        assert result.error.error_class is RedirectErrorClass.MISSING_LOCATION
        assert result.error.message == "redirect with empty location header"
        assert result.error.response.status_code == 302

    @pytest.mark.unit
    def test_limit_is_checked_before_location(self) -> None:
        """Test that an exhausted hop limit wins over a missing Location."""
        transport = ScriptedTransport(redirect(302, None))

        result = RedirectFollower(transport.send, RedirectConfig(limit=0)).follow(
            HttpRequest(method="GET", url=f"{BASE}/a")
        )

        assert result.error is not None
        assert result.error.error_class is RedirectErrorClass.LIMIT_REACHED


class TestNonRedirects:
    """Tests for responses that are handed back untouched."""

    @pytest.mark.unit
    @pytest.mark.parametrize("method", ["HEAD", "OPTIONS"])
    def test_other_methods_return_redirect_response(self, method: str) -> None:
        """Test that ineligible methods get the 3xx response back."""
        transport = ScriptedTransport(redirect(301, "/elsewhere"))

        result = RedirectFollower(transport.send).follow(
            HttpRequest(method=method, url=f"{BASE}/a")
        )

        assert transport.calls == 1
        assert result.is_success
        assert result.response.status_code == 301
        assert result.hops == 0

    @pytest.mark.unit
    def test_error_status_is_returned(self) -> None:
        """Test that a 404 is a terminal response, not an error."""
        transport = ScriptedTransport(ok(b"missing", status_code=404))

        result = RedirectFollower(transport.send).follow(
            HttpRequest(method="GET", url=f"{BASE}/a")
        )

        assert result.is_success
        assert result.response.status_code == 404


class TestUrlResolution:
    """Tests for Location resolution."""

    @pytest.mark.unit
    def test_relative_location_resolves_against_current_hop(self) -> None:
        """Test that a relative Location uses the previous hop's URL."""
        transport = ScriptedTransport(
            redirect(301, "https://other.example.org/dir/page"),
            redirect(301, "next"),
            ok(),
        )

        RedirectFollower(transport.send).follow(
            HttpRequest(method="GET", url=f"{BASE}/start")
        )

        assert transport.requests[1].url == "https://other.example.org/dir/page"
        assert transport.requests[2].url == "https://other.example.org/dir/next"

    @pytest.mark.unit
    def test_query_string_location(self) -> None:
        """Test a Location carrying only a query."""
        transport = ScriptedTransport(redirect(302, "?page=2"), ok())

        RedirectFollower(transport.send).follow(
            HttpRequest(method="GET", url=f"{BASE}/search?page=1")
        )

        assert transport.requests[1].url == f"{BASE}/search?page=2"


class TestCookies:
    """Tests for cookie forwarding between hops."""

    @pytest.mark.unit
    def test_cookies_from_hop_one_sent_on_hop_two(self) -> None:
        """Test that Set-Cookie values appear in the next Cookie header."""
        transport = ScriptedTransport(
            redirect(302, "/home", set_cookies=["sid=abc; Path=/", "lang=de"]),
            ok(),
        )

        RedirectFollower(transport.send).follow(
            HttpRequest(method="POST", url=f"{BASE}/login", body=b"user=x")
        )

        assert transport.requests[1].header("Cookie") == "sid=abc;lang=de"

    @pytest.mark.unit
    def test_cookie_header_replaces_existing(self) -> None:
        """Test that collected cookies replace a caller-supplied Cookie."""
        transport = ScriptedTransport(
            redirect(302, "/home", set_cookies=["sid=new"]),
            ok(),
        )

        RedirectFollower(transport.send).follow(
            HttpRequest(method="GET", url=f"{BASE}/a", headers={"Cookie": "sid=old"})
        )

        cookies = [v for k, v in transport.requests[1].headers if k.lower() == "cookie"]
        assert cookies == ["sid=new"]

    @pytest.mark.unit
    def test_cookie_header_reflects_latest_hop_only(self) -> None:
        """Test that cookies are not merged across hops."""
        transport = ScriptedTransport(
            redirect(302, "/b", set_cookies=["a=1"]),
            redirect(302, "/c", set_cookies=["b=2"]),
            ok(),
        )

        RedirectFollower(transport.send).follow(
            HttpRequest(method="GET", url=f"{BASE}/a")
        )

        assert transport.requests[1].header("Cookie") == "a=1"
        assert transport.requests[2].header("Cookie") == "b=2"

    @pytest.mark.unit
    def test_hop_without_cookies_keeps_previous_header(self) -> None:
        """Test that the Cookie header carries over when no new cookies arrive."""
        transport = ScriptedTransport(
            redirect(302, "/b", set_cookies=["a=1"]),
            redirect(302, "/c"),
            ok(),
        )

        RedirectFollower(transport.send).follow(
            HttpRequest(method="GET", url=f"{BASE}/a")
        )

        assert transport.requests[2].header("Cookie") == "a=1"

    @pytest.mark.unit
    def test_cookie_policy_none_forwards_nothing(self) -> None:
        """Test that cookie forwarding can be switched off."""
        transport = ScriptedTransport(
            redirect(302, "/b", set_cookies=["a=1"]),
            ok(),
        )
        follower = RedirectFollower(
            transport.send, RedirectConfig(cookie_policy=CookiePolicy.NONE)
        )

        follower.follow(HttpRequest(method="GET", url=f"{BASE}/a"))

        assert transport.requests[1].header("Cookie") is None

    @pytest.mark.unit
    def test_chains_do_not_share_cookies(self) -> None:
        """Test that one follower keeps cookie state per chain."""
        transport = ScriptedTransport(
            redirect(302, "/b", set_cookies=["first=1"]),
            ok(),
            redirect(302, "/b"),
            ok(),
        )
        follower = RedirectFollower(transport.send)

        follower.follow(HttpRequest(method="GET", url=f"{BASE}/a"))
        follower.follow(HttpRequest(method="GET", url=f"{BASE}/a"))

        assert transport.requests[1].header("Cookie") == "first=1"
        assert transport.requests[3].header("Cookie") is None


class TestTransportErrors:
    """Tests for errors raised by the send callable."""

    @pytest.mark.unit
    def test_transport_error_propagates_unchanged(self) -> None:
        """Test that transport exceptions are not wrapped."""
        error = httpx.ConnectError("connection refused")

        def failing_send(request: HttpRequest) -> HttpResponse:
            raise error

        with pytest.raises(httpx.ConnectError) as exc_info:
            RedirectFollower(failing_send).follow(
                HttpRequest(method="GET", url=f"{BASE}/a")
            )

        assert exc_info.value is error

    @pytest.mark.unit
    def test_transport_error_mid_chain_propagates(self) -> None:
        """Test that a failure on a later hop is not retried."""
        calls: list[str] = []

        def send(request: HttpRequest) -> HttpResponse:
            calls.append(request.url)
            if len(calls) == 2:
                raise httpx.ReadTimeout("timed out")
            return HttpResponse(
                status_code=301, url=request.url, headers={"Location": "/b"}
            )

        with pytest.raises(httpx.ReadTimeout):
            RedirectFollower(send).follow(HttpRequest(method="GET", url=f"{BASE}/a"))

        assert len(calls) == 2


class TestMetrics:
    """Tests for metrics recorded by the follower."""

    @pytest.mark.unit
    def test_records_chain_redirects_and_failures(self) -> None:
        """Test that chains, redirects and failures are counted."""
        transport = ScriptedTransport(redirect(301, "/b"), redirect(301, "/c"))
        follower = RedirectFollower(transport.send, RedirectConfig(limit=1))

        follower.follow(HttpRequest(method="GET", url=f"{BASE}/a"))

        metrics = RedirectMetrics.get_instance()
        assert metrics.redirect_chains_total == 1
        assert metrics.redirects_followed_total == 1
        assert metrics.redirect_failures_total == {"LIMIT_REACHED": 1}
        assert metrics.redirect_actions_total == {"FOLLOW_AS_GET": 2}
