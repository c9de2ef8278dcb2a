"""
Route guard: session presence checked against a public-path allowlist.

Unauthenticated requests for non-public paths are redirected to the login
page with the original path in `redirect`; authenticated requests for the
login/register pages are sent to the dashboard.
"""

import uuid
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable
from urllib.parse import quote

import structlog
from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from ..errors import MeetingTasksError
from ..logging import logging_context
from ..models.user import AuthUser

logger = structlog.get_logger(__name__)

PUBLIC_PATHS = ("/login", "/register", "/", "/auth/callback")
AUTH_PATHS = ("/login", "/register")
EXEMPT_PATHS = ("/health",)

LOGIN_PATH = "/login"
HOME_PATH = "/dashboard"

SessionResolver = Callable[[Request], Awaitable[AuthUser | None]]


def path_matches(path: str, prefixes: Iterable[str]) -> bool:
    """Exact match, or `prefix/...`. The root path only matches itself."""
    for prefix in prefixes:
        if path == prefix:
            return True
        if prefix != "/" and path.startswith(prefix.rstrip("/") + "/"):
            return True
    return False


@dataclass(frozen=True)
class GuardDecision:
    redirect_to: str | None = None

    @property
    def allowed(self) -> bool:
        return self.redirect_to is None


def decide(
    path: str,
    has_session: bool,
    public_paths: Iterable[str] = PUBLIC_PATHS,
    auth_paths: Iterable[str] = AUTH_PATHS,
) -> GuardDecision:
    """
    Decide whether a request passes the guard.

    Args:
        path: Request path
        has_session: Whether the request carries a valid session
        public_paths: Paths reachable without a session
        auth_paths: Login/register paths that signed-in users skip

    Returns:
        GuardDecision with `redirect_to` set when the request is redirected
    """
    if not has_session and not path_matches(path, public_paths):
        return GuardDecision(f"{LOGIN_PATH}?redirect={quote(path, safe='')}")
    if has_session and path_matches(path, auth_paths):
        return GuardDecision(HOME_PATH)
    return GuardDecision()


def cookie_session_resolver(cookie_name: str) -> SessionResolver:
    """Resolve the session from an access token cookie via the app's auth provider."""

    async def resolve(request: Request) -> AuthUser | None:
        token = request.cookies.get(cookie_name)
        if not token:
            return None
        return await request.app.state.context.auth_provider.get_user(token)

    return resolve


class RouteGuardMiddleware(BaseHTTPMiddleware):
    """Redirect requests according to `decide()`; exempt paths are never checked."""

    def __init__(
        self,
        app,
        resolve_session: SessionResolver,
        public_paths: Iterable[str] = PUBLIC_PATHS,
        auth_paths: Iterable[str] = AUTH_PATHS,
        exempt_paths: Iterable[str] = EXEMPT_PATHS,
    ):
        super().__init__(app)
        self.resolve_session = resolve_session
        self.public_paths = tuple(public_paths)
        self.auth_paths = tuple(auth_paths)
        self.exempt_paths = tuple(exempt_paths)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if path_matches(path, self.exempt_paths):
            return await call_next(request)

        trace_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        try:
            user = await self.resolve_session(request)
        except MeetingTasksError as e:
            logger.info("guard.session_invalid", path=path, error=str(e))
            user = None

        with logging_context(trace_id=trace_id, user_id=user.id if user else None):
            decision = decide(path, user is not None, self.public_paths, self.auth_paths)
            if not decision.allowed:
                logger.info("guard.redirect", path=path, redirect_to=decision.redirect_to)
                return RedirectResponse(decision.redirect_to, status_code=307)

            request.state.user = user
            return await call_next(request)
