"""
Response envelopes returned by the backend REST API.

Most endpoints wrap their payload in a named field (`{"team": ...}`,
`{"tasks": [...]}`). Meeting, goal and category create/update endpoints
return the bare object, so those are decoded straight into the resource
model. The API client validates every body against one of these models
before handing it to callers.
"""

from datetime import datetime

from pydantic import Field

from .base import ApiModel
from .category import Category
from .contact import Contact, ContactWithStats
from .goal import Goal
from .meeting import Meeting, MeetingWithTasks
from .task import Task
from .team import EmailInvite, InviteDetails, InviteLink, TeamInvite, TeamWithMembers
from .user import User


class SuccessResponse(ApiModel):
    success: bool = True
    message: str | None = None
    count: int | None = None


class MeResponse(ApiModel):
    user: User
    team: TeamWithMembers | None = None


class TeamResponse(ApiModel):
    team: TeamWithMembers | None = None


class InvitesResponse(ApiModel):
    invites: list[TeamInvite] = Field(default_factory=list)


class EmailInviteResponse(ApiModel):
    invite: EmailInvite


class InviteLinkResponse(ApiModel):
    invite: InviteLink


class InviteDetailsResponse(ApiModel):
    invite: InviteDetails


class AcceptInviteResponse(ApiModel):
    success: bool = True
    team: TeamWithMembers | None = None


class MeetingsResponse(ApiModel):
    meetings: list[Meeting] = Field(default_factory=list)


class MeetingResponse(ApiModel):
    meeting: MeetingWithTasks


class TasksResponse(ApiModel):
    tasks: list[Task] = Field(default_factory=list)


class TaskResponse(ApiModel):
    task: Task


class ContactsResponse(ApiModel):
    contacts: list[Contact] = Field(default_factory=list)


class ContactStatsResponse(ApiModel):
    contacts: list[ContactWithStats] = Field(default_factory=list)


class ContactResponse(ApiModel):
    contact: Contact


class GoalsResponse(ApiModel):
    goals: list[Goal] = Field(default_factory=list)


class CategoriesResponse(ApiModel):
    categories: list[Category] = Field(default_factory=list)


class HealthResponse(ApiModel):
    status: str
    timestamp: datetime | None = None
