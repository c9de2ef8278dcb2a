"""Client-side task list filtering."""

from dataclasses import dataclass, replace

from .models.task import Task

ALL = 'all'
UNASSIGNED = 'unassigned'


@dataclass(frozen=True)
class TaskFilterState:
    """
    Filter selections of a task list view.

    `'all'` disables a filter. `assignee_id='unassigned'` keeps tasks with
    no assignees. `query` is a case-insensitive substring match on title and
    description.
    """

    status: str = ALL
    priority: str = ALL
    assignee_id: str = ALL
    query: str = ''

    @property
    def has_active_filters(self) -> bool:
        return (
            self.status != ALL
            or self.priority != ALL
            or self.assignee_id != ALL
            or bool(self.query.strip())
        )

    def with_filter(self, key: str, value: str) -> 'TaskFilterState':
        return replace(self, **{key: value})

    def cleared(self) -> 'TaskFilterState':
        return TaskFilterState()

    def matches(self, task: Task) -> bool:
        if self.status != ALL and task.status.value != self.status:
            return False
        if self.priority != ALL and task.priority.value != self.priority:
            return False
        if self.assignee_id == UNASSIGNED:
            if task.assignees:
                return False
        elif self.assignee_id != ALL:
            if all(a.id != self.assignee_id for a in task.assignees):
                return False
        needle = self.query.strip().lower()
        if needle:
            haystack = f'{task.title or ""} {task.description}'.lower()
            if needle not in haystack:
                return False
        return True

    def apply(self, tasks: list[Task]) -> list[Task]:
        return [t for t in tasks if self.matches(t)]
