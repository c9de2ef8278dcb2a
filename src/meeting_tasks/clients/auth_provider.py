"""
Auth provider clients.

The app never issues or verifies tokens itself; it asks the provider.

- SupabaseAuthProvider wraps the supabase client (blocking calls run in a
  worker thread)
- DevAuthProvider stands in when Supabase is not configured, so the app
  can run locally with a fixed development user
"""

import asyncio
from typing import Any, Callable, Protocol, TypeVar

import structlog

from ..config import config as default_config, supabase_configured
from ..errors import AuthProviderError
from ..models.user import AuthSession, AuthUser

logger = structlog.get_logger(__name__)

R = TypeVar('R')


class AuthProvider(Protocol):
    """Operations the app needs from an auth provider."""

    async def get_user(self, access_token: str | None = None) -> AuthUser | None: ...

    async def get_session(self) -> AuthSession | None: ...

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession | None: ...

    async def sign_up(
        self, email: str, password: str, name: str | None = None
    ) -> AuthUser | None: ...

    async def sign_out(self, access_token: str | None = None) -> None: ...

    async def reset_password(self, email: str, redirect_to: str | None = None) -> None: ...


def _to_auth_user(user: Any) -> AuthUser | None:
    if user is None:
        return None
    return AuthUser(
        id=str(user.id),
        email=getattr(user, 'email', None),
        user_metadata=dict(getattr(user, 'user_metadata', None) or {}),
    )


def _to_auth_session(session: Any) -> AuthSession | None:
    if session is None:
        return None
    return AuthSession(
        access_token=session.access_token,
        refresh_token=getattr(session, 'refresh_token', None),
        token_type=getattr(session, 'token_type', None) or 'bearer',
        user=_to_auth_user(getattr(session, 'user', None)),
    )


class SupabaseAuthProvider:
    """
    Supabase-backed auth provider.

    Configuration via environment variables:
    - SUPABASE_URL: Project URL
    - SUPABASE_ANON_KEY: Public anon key
    """

    def __init__(
        self,
        url: str | None = None,
        key: str | None = None,
        client: Any | None = None,
    ):
        """
        Initialize the provider.

        Args:
            url: Supabase project URL (defaults to SUPABASE_URL)
            key: Supabase anon key (defaults to SUPABASE_ANON_KEY)
            client: Pre-built supabase client, mainly for tests
        """
        if client is None:
            from supabase import create_client

            url = url or default_config.SUPABASE_URL
            key = key or default_config.SUPABASE_ANON_KEY
            if not url or not key:
                raise ValueError('SUPABASE_URL and SUPABASE_ANON_KEY are required')
            client = create_client(url, key)
        self._client = client

    async def _call(self, operation: str, fn: Callable[..., R], *args: Any) -> R:
        try:
            return await asyncio.to_thread(fn, *args)
        except Exception as e:
            logger.warning('auth_provider.call_failed', operation=operation, error=str(e))
            raise AuthProviderError(
                f"Auth provider {operation} failed: {e}",
                context={'operation': operation, 'error_type': type(e).__name__},
            ) from e

    async def get_user(self, access_token: str | None = None) -> AuthUser | None:
        """Current user for the stored session, or for `access_token` when given."""
        if access_token is not None:
            response = await self._call('get_user', self._client.auth.get_user, access_token)
        else:
            response = await self._call('get_user', self._client.auth.get_user)
        return _to_auth_user(getattr(response, 'user', None))

    async def get_session(self) -> AuthSession | None:
        session = await self._call('get_session', self._client.auth.get_session)
        return _to_auth_session(session)

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession | None:
        response = await self._call(
            'sign_in_with_password',
            self._client.auth.sign_in_with_password,
            {'email': email, 'password': password},
        )
        return _to_auth_session(getattr(response, 'session', None))

    async def sign_up(
        self, email: str, password: str, name: str | None = None
    ) -> AuthUser | None:
        response = await self._call(
            'sign_up',
            self._client.auth.sign_up,
            {
                'email': email,
                'password': password,
                'options': {'data': {'name': name or email.split('@')[0]}},
            },
        )
        return _to_auth_user(getattr(response, 'user', None))

    async def sign_out(self, access_token: str | None = None) -> None:
        """
        End the stored session, or revoke `access_token` when given.

        The token form leaves the client's own session alone, so one shared
        provider can serve requests from many users.
        """
        if access_token is not None:
            await self._call('sign_out', self._client.auth.admin.sign_out, access_token)
        else:
            await self._call('sign_out', self._client.auth.sign_out)

    async def reset_password(self, email: str, redirect_to: str | None = None) -> None:
        options = {'redirect_to': redirect_to} if redirect_to else {}
        await self._call(
            'reset_password', self._client.auth.reset_password_for_email, email, options
        )


DEV_USER_ID = 'dev-user-id'
DEV_USER_EMAIL = 'dev@example.com'
DEV_ACCESS_TOKEN = 'dev_mock_user'


class DevAuthProvider:
    """
    In-process auth provider with one fixed development user.

    Starts signed in. Any email/password signs in as the development user;
    `get_user(token)` accepts only the development access token.
    """

    def __init__(self, signed_in: bool = True):
        self.signed_in = signed_in
        self.user = AuthUser(id=DEV_USER_ID, email=DEV_USER_EMAIL)

    def _session(self) -> AuthSession:
        return AuthSession(
            access_token=DEV_ACCESS_TOKEN,
            refresh_token=DEV_ACCESS_TOKEN,
            user=self.user,
        )

    async def get_user(self, access_token: str | None = None) -> AuthUser | None:
        if access_token is not None:
            return self.user if access_token == DEV_ACCESS_TOKEN else None
        return self.user if self.signed_in else None

    async def get_session(self) -> AuthSession | None:
        return self._session() if self.signed_in else None

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession | None:
        self.signed_in = True
        return self._session()

    async def sign_up(
        self, email: str, password: str, name: str | None = None
    ) -> AuthUser | None:
        return AuthUser(
            id=DEV_USER_ID,
            email=email,
            user_metadata={'name': name or email.split('@')[0]},
        )

    async def sign_out(self, access_token: str | None = None) -> None:
        if access_token is None:
            self.signed_in = False

    async def reset_password(self, email: str, redirect_to: str | None = None) -> None:
        return None


def create_auth_provider(url: str | None = None, key: str | None = None) -> AuthProvider:
    """
    Pick the auth provider for the given Supabase settings.

    Falls back to DevAuthProvider when the settings are missing or still
    hold template placeholders.

    Args:
        url: Supabase project URL (defaults to SUPABASE_URL)
        key: Supabase anon key (defaults to SUPABASE_ANON_KEY)
    """
    url = url if url is not None else default_config.SUPABASE_URL
    key = key if key is not None else default_config.SUPABASE_ANON_KEY
    if not supabase_configured(url, key):
        logger.warning('auth_provider.dev_mode', reason='supabase not configured')
        return DevAuthProvider()
    return SupabaseAuthProvider(url=url, key=key)
