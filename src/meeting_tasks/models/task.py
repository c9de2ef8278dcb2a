"""
Task models.

Status and priority are closed enumerations: a payload carrying any other
value fails validation instead of being passed through.
"""

from datetime import datetime
from enum import Enum

from pydantic import Field

from .base import ApiModel
from .contact import Scope
from .team import ViewMode


class TaskStatus(str, Enum):
    """Status lifecycle for tasks."""

    PENDING = 'pending'
    IN_PROGRESS = 'in_progress'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'


class TaskPriority(str, Enum):
    """Task urgency."""

    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'
    URGENT = 'urgent'


class TaskAssignee(ApiModel):
    """Contact assigned to a task."""

    id: str
    name: str
    email: str | None = None


class MeetingRef(ApiModel):
    """Summary of the meeting a task was extracted from."""

    id: str
    title: str
    created_at: datetime | None = None


class Task(ApiModel):
    """An action item, extracted by AI from a meeting or entered by hand."""

    id: str
    meeting_id: str | None = None
    user_id: str | None = None
    title: str | None = None
    description: str
    assignees: list[TaskAssignee] = Field(default_factory=list)
    deadline: datetime | None = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    ai_extracted: bool = False
    reviewed: bool = False
    reviewed_at: datetime | None = None
    goal_id: str | None = None
    category_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    meeting: MeetingRef | None = None

    @property
    def display_title(self) -> str:
        return self.title or self.description

    @property
    def assignee_names(self) -> list[str]:
        return [a.name for a in self.assignees]


class CreateTaskRequest(ApiModel):
    description: str
    title: str | None = None
    assignee_ids: list[str] | None = None
    deadline: datetime | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    meeting_id: str | None = None
    goal_id: str | None = None
    category_id: str | None = None
    scope: Scope | None = None


class UpdateTaskRequest(ApiModel):
    description: str | None = None
    assignee_ids: list[str] | None = None
    deadline: datetime | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    reviewed: bool | None = None


class TaskFilters(ApiModel):
    """Server-side list filters, sent as query parameters."""

    status: TaskStatus | None = None
    assignee_id: str | None = None
    from_date: datetime | None = None
    to_date: datetime | None = None
    meeting_id: str | None = None
    reviewed: bool | None = None
    scope: ViewMode | None = None

    def to_params(self) -> dict[str, str]:
        params = {}
        for key, value in self.to_payload().items():
            params[key] = str(value).lower() if isinstance(value, bool) else str(value)
        return params
