"""
Goal models and hierarchy building.

Goals form a two-level tree: quarterly goals nest under yearly goals.
"""

from datetime import datetime
from enum import Enum

from pydantic import Field

from .base import ApiModel
from .category import Category
from .task import Task


class GoalType(str, Enum):
    YEARLY = 'YEARLY'
    QUARTERLY = 'QUARTERLY'


class Goal(ApiModel):
    id: str
    title: str
    description: str | None = None
    type: GoalType
    parent_id: str | None = None
    children: list['Goal'] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
    tasks: list[Task] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CreateGoalRequest(ApiModel):
    title: str
    type: GoalType
    parent_id: str | None = None


class UpdateGoalRequest(ApiModel):
    title: str | None = None
    type: GoalType | None = None
    parent_id: str | None = None


def build_goal_tree(goals: list[Goal]) -> list[Goal]:
    """
    Nest quarterly goals under their yearly parents.

    Accepts either a flat list or one whose yearly goals already carry
    children; existing children are kept and not duplicated. Quarterly goals
    whose parent is not in the list stay at the root level. Input order is
    preserved.

    Args:
        goals: Goals as returned by the goals endpoint

    Returns:
        Root goals (copies) with `children` filled in
    """
    roots: dict[str, Goal] = {}
    order: list[str] = []
    for goal in goals:
        if goal.type == GoalType.YEARLY:
            roots[goal.id] = goal.model_copy(update={'children': list(goal.children)})
            order.append(goal.id)

    orphans: list[Goal] = []
    for goal in goals:
        if goal.type != GoalType.QUARTERLY:
            continue
        parent = roots.get(goal.parent_id) if goal.parent_id else None
        if parent is None:
            orphans.append(goal)
        elif all(child.id != goal.id for child in parent.children):
            parent.children.append(goal)

    return [roots[goal_id] for goal_id in order] + orphans
