"""Tests for the route guard decision and middleware."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from meeting_tasks.errors import AuthProviderError
from meeting_tasks.models import AuthUser
from meeting_tasks.web.guard import (
    RouteGuardMiddleware,
    cookie_session_resolver,
    decide,
    path_matches,
)


class TestPathMatching:
    def test_exact_match(self):
        assert path_matches("/login", ["/login"])

    def test_nested_path_matches_prefix(self):
        assert path_matches("/auth/callback/extra", ["/auth/callback"])

    def test_prefix_without_separator_does_not_match(self):
        assert not path_matches("/loginx", ["/login"])

    def test_root_matches_only_itself(self):
        assert path_matches("/", ["/"])
        assert not path_matches("/tasks", ["/"])


class TestDecide:
    def test_public_path_without_session_passes(self):
        for path in ("/login", "/register", "/", "/auth/callback"):
            assert decide(path, has_session=False).allowed

    def test_protected_path_without_session_redirects(self):
        decision = decide("/tasks", has_session=False)

        assert decision.redirect_to == "/login?redirect=%2Ftasks"

    def test_nested_path_is_fully_encoded(self):
        decision = decide("/meetings/abc", has_session=False)

        assert decision.redirect_to == "/login?redirect=%2Fmeetings%2Fabc"

    def test_auth_path_with_session_redirects_home(self):
        assert decide("/login", has_session=True).redirect_to == "/dashboard"
        assert decide("/register", has_session=True).redirect_to == "/dashboard"

    def test_protected_path_with_session_passes(self):
        assert decide("/tasks", has_session=True).allowed

    def test_root_with_session_passes(self):
        assert decide("/", has_session=True).allowed


def _make_app(resolver) -> FastAPI:
    app = FastAPI()
    app.add_middleware(RouteGuardMiddleware, resolve_session=resolver)

    @app.get("/tasks")
    async def tasks(request: Request):
        user = request.state.user
        return {"user": user.id if user else None}

    @app.get("/login")
    async def login():
        return {"page": "login"}

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


class TestRouteGuardMiddleware:
    def test_redirects_without_session(self):
        client = TestClient(_make_app(AsyncMock(return_value=None)))

        response = client.get("/tasks", follow_redirects=False)

        assert response.status_code == 307
        assert response.headers["location"] == "/login?redirect=%2Ftasks"

    def test_passes_with_session(self):
        resolver = AsyncMock(return_value=AuthUser(id="user_1", email="a@example.com"))
        client = TestClient(_make_app(resolver))

        response = client.get("/tasks", follow_redirects=False)

        assert response.status_code == 200
        assert response.json() == {"user": "user_1"}

    def test_login_with_session_redirects_home(self):
        resolver = AsyncMock(return_value=AuthUser(id="user_1"))
        client = TestClient(_make_app(resolver))

        response = client.get("/login", follow_redirects=False)

        assert response.status_code == 307
        assert response.headers["location"] == "/dashboard"

    def test_resolver_error_counts_as_no_session(self):
        resolver = AsyncMock(side_effect=AuthProviderError("expired"))
        client = TestClient(_make_app(resolver))

        response = client.get("/tasks", follow_redirects=False)

        assert response.status_code == 307

    def test_exempt_path_skips_resolution(self):
        resolver = AsyncMock(return_value=None)
        client = TestClient(_make_app(resolver))

        response = client.get("/health", follow_redirects=False)

        assert response.status_code == 200
        resolver.assert_not_called()


class TestCookieSessionResolver:
    @pytest.mark.asyncio
    async def test_no_cookie_no_lookup(self):
        request = MagicMock()
        request.cookies = {}

        user = await cookie_session_resolver("sb-access-token")(request)

        assert user is None
        request.app.state.context.auth_provider.get_user.assert_not_called()

    @pytest.mark.asyncio
    async def test_cookie_resolved_by_provider(self):
        request = MagicMock()
        request.cookies = {"sb-access-token": "tok"}
        provider = AsyncMock()
        provider.get_user.return_value = AuthUser(id="user_1")
        request.app.state.context.auth_provider = provider

        user = await cookie_session_resolver("sb-access-token")(request)

        assert user.id == "user_1"
        provider.get_user.assert_awaited_once_with("tok")
