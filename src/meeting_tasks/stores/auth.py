"""
Auth/session store: who is logged in and which team context applies.

The auth provider decides whether a session exists; the backend profile
endpoint supplies the app-level user and team. When the backend is down
the store keeps the session alive with a profile built from provider
claims and flags it as degraded.
"""

import structlog
from pydantic import BaseModel

from ..clients.api_client import ApiClient
from ..clients.auth_provider import AuthProvider
from ..errors import AuthProviderError, MeetingTasksError
from ..models.team import TeamWithMembers
from ..models.user import User
from .base import PersistedStore
from .storage import StateStorage

logger = structlog.get_logger(__name__)


class AuthState(BaseModel):
    user: User | None = None
    team: TeamWithMembers | None = None
    is_loading: bool = True
    is_authenticated: bool = False
    has_team: bool = False
    profile_degraded: bool = False


class AuthStore(PersistedStore[AuthState]):
    """
    Single source of truth for the signed-in user.

    Persists `user`, `team`, `is_authenticated` and `has_team` under the
    `auth-storage` key. `is_loading` always starts fresh.
    """

    storage_key = 'auth-storage'
    persisted_fields = frozenset({'user', 'team', 'is_authenticated', 'has_team'})

    def __init__(
        self,
        api: ApiClient,
        provider: AuthProvider,
        storage: StateStorage | None = None,
    ):
        self._api = api
        self._provider = provider
        super().__init__(AuthState(), storage)

    @property
    def user(self) -> User | None:
        return self._state.user

    @property
    def team(self) -> TeamWithMembers | None:
        return self._state.team

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def is_authenticated(self) -> bool:
        return self._state.is_authenticated

    @property
    def has_team(self) -> bool:
        return self._state.has_team

    def set_user(self, user: User | None) -> None:
        self._set(user=user, is_authenticated=user is not None, is_loading=False)

    def set_loading(self, is_loading: bool) -> None:
        self._set(is_loading=is_loading)

    async def check_auth(self) -> None:
        """
        Sync with the auth provider, then load the app profile.

        A missing session, or a provider failure, clears the store. A
        backend failure keeps the session with a degraded profile.
        """
        try:
            auth_user = await self._provider.get_user()
        except AuthProviderError as e:
            logger.error('auth.check_failed', error=str(e))
            self.clear_auth()
            return

        if auth_user is None:
            self.clear_auth()
            return

        try:
            me = await self._api.auth.get_me()
        except MeetingTasksError as e:
            logger.warning(
                'auth.profile_degraded',
                user_id=auth_user.id,
                error=str(e),
                error_type=type(e).__name__,
            )
            self._set(
                user=auth_user.to_profile(),
                is_authenticated=True,
                is_loading=False,
                profile_degraded=True,
            )
            return

        self._set(
            user=me.user,
            team=me.team,
            is_authenticated=True,
            has_team=me.team is not None,
            is_loading=False,
            profile_degraded=False,
        )
        logger.info('auth.checked', user_id=me.user.id, has_team=me.team is not None)

    async def sign_in(self, email: str, password: str) -> None:
        self.set_loading(True)
        try:
            await self._provider.sign_in_with_password(email, password)
            await self.check_auth()
        finally:
            self.set_loading(False)

    async def sign_up(self, email: str, password: str, name: str | None = None) -> None:
        """Register; the user stays signed out until the email is confirmed."""
        self.set_loading(True)
        try:
            await self._provider.sign_up(email, password, name or email.split('@')[0])
            self._set(user=None, is_authenticated=False)
        finally:
            self.set_loading(False)

    async def sign_out(self) -> None:
        self.set_loading(True)
        try:
            await self._provider.sign_out()
            self.clear_auth()
        finally:
            self.set_loading(False)

    def clear_auth(self) -> None:
        self._set(
            user=None,
            team=None,
            is_authenticated=False,
            has_team=False,
            is_loading=False,
            profile_degraded=False,
        )
