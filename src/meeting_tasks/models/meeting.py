"""Meeting models. A meeting owns the tasks extracted from its transcript."""

from datetime import datetime
from typing import Any

from pydantic import Field

from .base import ApiModel
from .contact import Scope
from .task import Task


class MeetingCount(ApiModel):
    tasks: int = 0


class Meeting(ApiModel):
    id: str
    user_id: str | None = None
    team_id: str | None = None
    title: str
    transcript: str = ''
    processed: bool = False
    processed_at: datetime | None = None
    metadata: dict[str, Any] | None = None
    created_at: datetime | None = None
    count: MeetingCount | None = Field(default=None, alias='_count')

    @property
    def task_count(self) -> int | None:
        return self.count.tasks if self.count else None


class MeetingWithTasks(Meeting):
    """Meeting detail view. Deleting the meeting deletes these tasks."""

    tasks: list[Task] = Field(default_factory=list)


class CreateMeetingRequest(ApiModel):
    title: str
    transcript: str
    metadata: dict[str, Any] | None = None
    scope: Scope | None = None
