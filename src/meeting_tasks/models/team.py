"""
Team, membership and invitation models.

Membership invariants are checked when a team is decoded: a team listing
its members must have at least one owner, and each user holds exactly one
role within a team.
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import Field, model_validator

from .base import ApiModel


class TeamRole(str, Enum):
    """Role of a user within a team."""

    OWNER = 'owner'
    MEMBER = 'member'


class ViewMode(str, Enum):
    """Which slice of data list views show."""

    PERSONAL = 'personal'
    TEAM = 'team'
    ALL = 'all'


class InviteType(str, Enum):
    """How an invitation is delivered."""

    EMAIL = 'email'
    LINK = 'link'


class Team(ApiModel):
    """A team of users sharing contacts and tasks."""

    id: str
    name: str
    slug: str
    created_at: datetime | None = None


class TeamMember(ApiModel):
    """A team member: the user's profile fields plus their role."""

    id: str = Field(..., description='User id of the member')
    name: str | None = None
    email: str | None = None
    role: TeamRole
    joined_at: datetime | None = None


class TeamWithMembers(Team):
    """
    Team with its member list, as returned by the teams endpoints.

    `role` is the caller's own role in the team.
    """

    role: TeamRole | None = None
    members: list[TeamMember] = Field(default_factory=list)

    @model_validator(mode='after')
    def _check_membership(self) -> 'TeamWithMembers':
        if not self.members:
            return self
        user_ids = [m.id for m in self.members]
        if len(set(user_ids)) != len(user_ids):
            raise ValueError('a user can hold only one role per team')
        if not any(m.role == TeamRole.OWNER for m in self.members):
            raise ValueError('team must have at least one owner')
        return self

    @property
    def owners(self) -> list[TeamMember]:
        return [m for m in self.members if m.role == TeamRole.OWNER]

    def role_of(self, user_id: str) -> TeamRole | None:
        """Return the role of `user_id`, or None when not a member."""
        for member in self.members:
            if member.id == user_id:
                return member.role
        return None


class TeamInvite(ApiModel):
    """Pending invitation, as listed for the team owner."""

    id: str
    team_id: str | None = None
    type: InviteType
    email: str | None = None
    token: str
    expires_at: datetime
    created_at: datetime | None = None

    def is_valid(self, now: datetime | None = None) -> bool:
        """An invite can be used only while `now < expires_at`."""
        now = now or datetime.now(timezone.utc)
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now < expires_at


class EmailInvite(ApiModel):
    """Invitation just sent by email. The token only travels in the email."""

    id: str
    email: str
    expires_at: datetime
    created_at: datetime | None = None


class InviteLink(ApiModel):
    """Shareable invitation link returned by the generate-link endpoint."""

    id: str | None = None
    token: str | None = None
    url: str
    expires_at: datetime | None = None
    created_at: datetime | None = None


class InviteDetails(ApiModel):
    """Public view of an invite, looked up by token on the join page."""

    id: str
    type: InviteType
    team: Team
    invited_by: str
    expires_at: datetime

    @property
    def team_name(self) -> str:
        return self.team.name
