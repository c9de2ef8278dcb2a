"""
Optimistic updates with rollback.

`run_optimistic` applies a change locally, commits it to the backend and
reverts the local change when the commit fails. `InlineTaskField` is the
inline status/priority editor built on it.
"""

from dataclasses import dataclass
from typing import Awaitable, Callable

import structlog

from .clients.api_client import ApiClient
from .models.task import TaskPriority, TaskStatus, UpdateTaskRequest

logger = structlog.get_logger(__name__)

TaskFieldUpdater = Callable[[str, str, str], Awaitable[None]]

_FIELD_ENUMS: dict[str, type[TaskStatus] | type[TaskPriority]] = {
    'status': TaskStatus,
    'priority': TaskPriority,
}


@dataclass
class OptimisticResult:
    """Outcome of an optimistic action."""

    committed: bool
    error: Exception | None = None


async def run_optimistic(
    apply: Callable[[], None],
    commit: Callable[[], Awaitable[object]],
    rollback: Callable[[], None],
    label: str = 'optimistic_update',
) -> OptimisticResult:
    """
    Apply locally, then commit; roll back if the commit raises.

    Commit failures are logged and reported in the result instead of being
    raised, so the caller's view stays usable.

    Args:
        apply: Reflect the new value locally
        commit: Send the change to the backend
        rollback: Restore the previous local value
        label: Name used in log events

    Returns:
        OptimisticResult with `committed` and the commit error, if any
    """
    apply()
    try:
        await commit()
    except Exception as e:
        rollback()
        logger.error(
            'optimistic.rolled_back',
            action=label,
            error=str(e),
            error_type=type(e).__name__,
        )
        return OptimisticResult(committed=False, error=e)
    return OptimisticResult(committed=True)


class InlineTaskField:
    """
    Inline editor for a task's status or priority.

    The displayed value changes immediately on selection and reverts if the
    update fails. While an update is in flight further changes are ignored.
    """

    def __init__(
        self,
        task_id: str,
        field: str,
        value: str,
        on_update: TaskFieldUpdater,
    ):
        if field not in _FIELD_ENUMS:
            raise ValueError(f"Unsupported inline field: {field!r}")
        self.task_id = task_id
        self.field = field
        self.value = _FIELD_ENUMS[field](value).value
        self.is_updating = False
        self._on_update = on_update

    @property
    def options(self) -> list[str]:
        return [member.value for member in _FIELD_ENUMS[self.field]]

    async def change(self, new_value: str) -> OptimisticResult | None:
        """
        Select `new_value`.

        Returns:
            OptimisticResult, or None when the change was ignored (same
            value, unrecognized value, or an update already in flight)
        """
        if self.is_updating:
            return None
        if new_value not in self.options:
            logger.warning(
                'inline_edit.unrecognized_value',
                task_id=self.task_id,
                field=self.field,
                value=new_value,
            )
            return None
        if new_value == self.value:
            return None

        previous = self.value

        def apply() -> None:
            self.value = new_value

        def rollback() -> None:
            self.value = previous

        self.is_updating = True
        try:
            return await run_optimistic(
                apply,
                lambda: self._on_update(self.task_id, self.field, new_value),
                rollback,
                label=f'task.{self.field}',
            )
        finally:
            self.is_updating = False


def task_field_updater(api: ApiClient) -> TaskFieldUpdater:
    """Build an `on_update` callback that PATCHes one task field."""

    async def update(task_id: str, field: str, value: str) -> None:
        await api.tasks.update(task_id, UpdateTaskRequest(**{field: value}))

    return update
