"""Auth callback, logout and password reset endpoints."""

from dataclasses import dataclass
from typing import Mapping

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response
from pydantic import BaseModel

from ...clients.auth_provider import AuthProvider
from ...errors import AuthProviderError
from ...models.user import AuthSession
from ..config import Settings, get_settings

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/auth")
login_router = APIRouter(prefix="/login")

DEFAULT_REDIRECT = "/dashboard"
CALLBACK_REDIRECTS = {
    "signup": "/dashboard",
    "magiclink": "/dashboard",
    "recovery": "/reset-password",
}

# The provider puts the tokens in the URL fragment, which browsers never
# send to the server. This page reads it (plus any query string) and posts
# it back to the same path.
CALLBACK_BRIDGE_PAGE = """<!doctype html>
<html>
<head><meta charset="utf-8"><title>Completing sign in...</title></head>
<body>
<p>Completing sign in...</p>
<script>
  const params = new URLSearchParams(window.location.search);
  new URLSearchParams(window.location.hash.slice(1)).forEach((v, k) => params.set(k, v));
  fetch(window.location.pathname, {
    method: "POST",
    credentials: "same-origin",
    headers: {"Content-Type": "application/json"},
    body: JSON.stringify(Object.fromEntries(params)),
  })
    .then((r) => r.json())
    .then((data) => window.location.replace(data.redirect_to))
    .catch(() => window.location.replace("/login?error=callback_failed"));
</script>
</body>
</html>
"""


@dataclass(frozen=True)
class CallbackResult:
    redirect_to: str
    session: AuthSession | None = None


class CallbackParams(BaseModel):
    access_token: str | None = None
    refresh_token: str | None = None
    type: str | None = None


class PasswordResetRequest(BaseModel):
    email: str


async def resolve_callback(
    params: Mapping[str, str | None], provider: AuthProvider
) -> CallbackResult:
    """
    Complete an auth provider redirect.

    The provider sends `access_token`, `refresh_token` and `type`
    (`signup`, `magiclink` or `recovery`). The access token is checked with
    the provider; nothing is stored on the provider itself, the tokens go
    back to the caller as cookies.
    """
    access_token = params.get("access_token")
    refresh_token = params.get("refresh_token")
    if not access_token or not refresh_token:
        return CallbackResult("/login")

    try:
        user = await provider.get_user(access_token)
    except AuthProviderError as e:
        logger.warning("auth.callback_failed", error=str(e))
        return CallbackResult("/login?error=callback_failed")
    if user is None:
        logger.warning("auth.callback_failed", error="token rejected")
        return CallbackResult("/login?error=callback_failed")

    redirect_to = CALLBACK_REDIRECTS.get(params.get("type") or "", DEFAULT_REDIRECT)
    logger.info(
        "auth.callback_complete",
        type=params.get("type"),
        user_id=user.id,
        redirect_to=redirect_to,
    )
    session = AuthSession(access_token=access_token, refresh_token=refresh_token, user=user)
    return CallbackResult(redirect_to, session)


def _set_session_cookies(response: Response, session: AuthSession, settings: Settings) -> None:
    cookie_options = {
        "httponly": True,
        "samesite": "lax",
        "secure": settings.COOKIE_SECURE,
    }
    response.set_cookie(settings.ACCESS_TOKEN_COOKIE, session.access_token, **cookie_options)
    if session.refresh_token:
        response.set_cookie(
            settings.REFRESH_TOKEN_COOKIE, session.refresh_token, **cookie_options
        )


@router.get("/callback")
async def auth_callback(request: Request, settings: Settings = Depends(get_settings)):
    """
    Serve the bridge page, or complete the callback directly when the tokens
    arrived in the query string.
    """
    if "access_token" not in request.query_params:
        return HTMLResponse(CALLBACK_BRIDGE_PAGE)

    result = await resolve_callback(
        request.query_params, request.app.state.context.auth_provider
    )
    response = RedirectResponse(result.redirect_to, status_code=303)
    if result.session is not None:
        _set_session_cookies(response, result.session, settings)
    return response


@router.post("/callback")
async def auth_callback_tokens(
    params: CallbackParams,
    request: Request,
    settings: Settings = Depends(get_settings),
):
    """Receive the fragment tokens from the bridge page and set the cookies."""
    result = await resolve_callback(
        params.model_dump(), request.app.state.context.auth_provider
    )
    response = JSONResponse({"redirect_to": result.redirect_to})
    if result.session is not None:
        _set_session_cookies(response, result.session, settings)
    return response


@router.post("/logout")
async def logout(request: Request, settings: Settings = Depends(get_settings)):
    """Revoke the caller's own access token and drop the session cookies."""
    access_token = request.cookies.get(settings.ACCESS_TOKEN_COOKIE)
    if access_token:
        try:
            await request.app.state.context.auth_provider.sign_out(access_token)
        except AuthProviderError as e:
            logger.warning("auth.logout_failed", error=str(e))

    response = RedirectResponse("/login", status_code=303)
    response.delete_cookie(settings.ACCESS_TOKEN_COOKIE)
    response.delete_cookie(settings.REFRESH_TOKEN_COOKIE)
    return response


@login_router.post("/forgot-password")
async def forgot_password(body: PasswordResetRequest, request: Request):
    """Email a reset link that lands on the callback as a recovery."""
    redirect_to = str(request.url_for("auth_callback").include_query_params(type="recovery"))
    try:
        await request.app.state.context.auth_provider.reset_password(body.email, redirect_to)
    except AuthProviderError as e:
        logger.warning("auth.reset_failed", error=str(e))
        return JSONResponse({"error": "Failed to send reset email"}, status_code=400)
    return {"sent": True}
