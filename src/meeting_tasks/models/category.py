"""Category models. A category groups tasks and may hang under a goal."""

from datetime import datetime

from pydantic import Field

from .base import ApiModel
from .task import Task


class Category(ApiModel):
    id: str
    user_id: str | None = None
    name: str
    goal_id: str | None = None
    tasks: list[Task] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CreateCategoryRequest(ApiModel):
    name: str
    goal_id: str | None = None


class UpdateCategoryRequest(ApiModel):
    name: str | None = None
    goal_id: str | None = None
