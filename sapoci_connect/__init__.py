"""HTTP request pipeline with transparent redirect following."""

from sapoci_connect.client import ConnectClient, build_stages
from sapoci_connect.config import ConnectConfig
from sapoci_connect.http import HttpRequest, HttpResponse, HttpxTransport, Transport
from sapoci_connect.pipeline import Pipeline, Stage
from sapoci_connect.redirects import (
    CookiePolicy,
    FollowRedirectsStage,
    RedirectConfig,
    RedirectFailure,
    RedirectFollower,
    RedirectLimitReachedError,
    RedirectResult,
    RedirectWithoutLocationError,
)


__version__ = "0.1.0"

__all__ = [
    "ConnectClient",
    "ConnectConfig",
    "CookiePolicy",
    "FollowRedirectsStage",
    "HttpRequest",
    "HttpResponse",
    "HttpxTransport",
    "Pipeline",
    "RedirectConfig",
    "RedirectFailure",
    "RedirectFollower",
    "RedirectLimitReachedError",
    "RedirectResult",
    "RedirectWithoutLocationError",
    "Stage",
    "Transport",
    "build_stages",
]
