"""Contact models. A contact is either personal or shared with a team."""

from datetime import datetime
from typing import Literal

from .base import ApiModel

Scope = Literal['personal', 'team']


class Contact(ApiModel):
    id: str
    user_id: str
    team_id: str | None = None
    name: str
    email: str | None = None
    role: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def scope(self) -> str:
        """'team' for team-shared contacts, 'personal' otherwise."""
        return 'team' if self.team_id else 'personal'


class ContactStats(ApiModel):
    """Task statistics for one contact, computed by the backend."""

    in_progress_count: int = 0
    backlog_count: int = 0
    completed_count: int = 0
    total_tasks: int = 0
    # Percentage of assigned tasks completed
    delivery_rate: int = 0
    avg_backlog_days: int = 0
    # completed / (total + backlog) * 100; 100 when nothing is assigned
    productivity_score: int = 100


class ContactWithStats(Contact):
    stats: ContactStats


class CreateContactRequest(ApiModel):
    name: str
    email: str | None = None
    role: str | None = None
    scope: Scope | None = None
