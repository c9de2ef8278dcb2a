"""
Team store: membership, roles, invitations and the view-mode filter.

Mutations go to the backend first; membership changes are followed by a
full refetch rather than a local patch.
"""

from datetime import datetime, timezone

import structlog
from pydantic import BaseModel, Field

from ..clients.api_client import ApiClient
from ..errors import MeetingTasksError, PreconditionError
from ..models.team import InviteDetails, TeamInvite, TeamRole, TeamWithMembers, ViewMode
from .base import PersistedStore
from .storage import StateStorage

logger = structlog.get_logger(__name__)


class TeamState(BaseModel):
    team: TeamWithMembers | None = None
    view_mode: ViewMode = ViewMode.ALL
    is_loading: bool = False
    pending_invites: list[TeamInvite] = Field(default_factory=list)


class TeamStore(PersistedStore[TeamState]):
    """
    Current team and the personal/team/all view filter.

    Persists `team` and `view_mode` under the `team-storage` key.
    `pending_invites` and `is_loading` are session-only.
    """

    storage_key = 'team-storage'
    persisted_fields = frozenset({'team', 'view_mode'})

    def __init__(self, api: ApiClient, storage: StateStorage | None = None):
        self._api = api
        super().__init__(TeamState(), storage)

    @property
    def team(self) -> TeamWithMembers | None:
        return self._state.team

    @property
    def has_team(self) -> bool:
        return self._state.team is not None

    @property
    def view_mode(self) -> ViewMode:
        return self._state.view_mode

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def pending_invites(self) -> list[TeamInvite]:
        return self._state.pending_invites

    def set_team(self, team: TeamWithMembers | None) -> None:
        self._set(team=team)

    def set_view_mode(self, mode: ViewMode | str) -> None:
        self._set(view_mode=ViewMode(mode))

    def _require_team(self, action: str | None = None) -> TeamWithMembers:
        team = self._state.team
        if team is None:
            raise PreconditionError(f'No team to {action}' if action else 'No team')
        return team

    async def fetch_team(self) -> None:
        """Load the current team. Having no team is normal, so errors become None."""
        self._set(is_loading=True)
        try:
            response = await self._api.teams.get_current()
            self._set(team=response.team)
        except MeetingTasksError as e:
            logger.error('team.fetch_failed', error=str(e))
            self._set(team=None)
        finally:
            self._set(is_loading=False)

    async def create_team(self, name: str) -> TeamWithMembers | None:
        self._set(is_loading=True)
        try:
            response = await self._api.teams.create(name)
            self._set(team=response.team)
            logger.info('team.created', team_id=response.team.id if response.team else None)
            return response.team
        finally:
            self._set(is_loading=False)

    async def update_team(self, name: str) -> None:
        team = self._require_team('update')
        self._set(is_loading=True)
        try:
            response = await self._api.teams.update(team.id, name)
            self._set(team=response.team)
        finally:
            self._set(is_loading=False)

    async def leave_team(self) -> None:
        team = self._require_team('leave')
        self._set(is_loading=True)
        try:
            await self._api.teams.leave(team.id)
            self._set(team=None, view_mode=ViewMode.PERSONAL, pending_invites=[])
            logger.info('team.left', team_id=team.id)
        finally:
            self._set(is_loading=False)

    async def delete_team(self) -> None:
        team = self._require_team('delete')
        self._set(is_loading=True)
        try:
            await self._api.teams.delete(team.id)
            self._set(team=None, view_mode=ViewMode.PERSONAL, pending_invites=[])
            logger.info('team.deleted', team_id=team.id)
        finally:
            self._set(is_loading=False)

    async def update_member_role(self, user_id: str, role: TeamRole | str) -> None:
        team = self._require_team()
        await self._api.teams.update_member_role(team.id, user_id, TeamRole(role))
        await self.fetch_team()

    async def remove_member(self, user_id: str) -> None:
        team = self._require_team()
        await self._api.teams.remove_member(team.id, user_id)
        await self.fetch_team()

    async def send_email_invite(self, email: str) -> None:
        await self._api.invites.send_email(email)
        await self.fetch_pending_invites()

    async def generate_invite_link(self) -> str:
        """Create a shareable invite link and return its URL."""
        response = await self._api.invites.generate_link()
        await self.fetch_pending_invites()
        return response.invite.url

    async def fetch_pending_invites(self) -> None:
        """Refresh pending invites; on failure the previous list stays."""
        try:
            response = await self._api.invites.list()
        except MeetingTasksError as e:
            logger.error('team.invites_fetch_failed', error=str(e))
            return
        now = datetime.now(timezone.utc)
        self._set(pending_invites=[i for i in response.invites if i.is_valid(now)])

    async def revoke_invite(self, invite_id: str) -> None:
        await self._api.invites.revoke(invite_id)
        await self.fetch_pending_invites()

    async def get_invite(self, token: str) -> InviteDetails:
        response = await self._api.invites.get_by_token(token)
        return response.invite

    async def accept_invite(self, token: str) -> None:
        """Join a team through an invite token, then load that team."""
        await self._api.invites.accept(token)
        await self.fetch_team()

    def clear_team(self) -> None:
        self._set(team=None, view_mode=ViewMode.ALL, pending_invites=[])
