"""
Task analytics for the dashboard.

A completed task counts as on time when its last update (the completion)
is no later than its deadline. Completed tasks without a deadline count as
on time for per-person stats but are left out of the global on-time rate.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from .models.task import Task, TaskStatus

UNASSIGNED_LABEL = 'Unassigned'
WEEKS_SHOWN = 4


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _percent(part: int, whole: int) -> int:
    return round(part / whole * 100) if whole else 0


@dataclass
class PersonStats:
    total: int = 0
    completed: int = 0
    on_time: int = 0
    late: int = 0

    @property
    def completion_rate(self) -> int:
        return _percent(self.completed, self.total)

    @property
    def on_time_rate(self) -> int:
        return _percent(self.on_time, self.completed)

    def to_dict(self) -> dict[str, int]:
        return {
            'total': self.total,
            'completed': self.completed,
            'on_time': self.on_time,
            'late': self.late,
            'completion_rate': self.completion_rate,
            'on_time_rate': self.on_time_rate,
        }


@dataclass
class WeeklyBucket:
    week: str
    completed: int = 0
    created: int = 0


@dataclass
class TaskAnalytics:
    total_tasks: int = 0
    completed_tasks: int = 0
    on_time_tasks: int = 0
    late_tasks: int = 0
    status_counts: dict[str, int] = field(default_factory=dict)
    priority_counts: dict[str, int] = field(default_factory=dict)
    assignee_counts: dict[str, int] = field(default_factory=dict)
    person_stats: dict[str, PersonStats] = field(default_factory=dict)
    weekly: list[WeeklyBucket] = field(default_factory=list)
    avg_completion_days: float | None = None

    @property
    def completion_rate(self) -> int:
        return _percent(self.completed_tasks, self.total_tasks)

    @property
    def on_time_rate(self) -> int:
        """Share of deadline-bearing completed tasks finished on time; 100 when none."""
        with_deadline = self.on_time_tasks + self.late_tasks
        return _percent(self.on_time_tasks, with_deadline) if with_deadline else 100

    def to_dict(self) -> dict[str, Any]:
        return {
            'total_tasks': self.total_tasks,
            'completed_tasks': self.completed_tasks,
            'completion_rate': self.completion_rate,
            'on_time_tasks': self.on_time_tasks,
            'late_tasks': self.late_tasks,
            'on_time_rate': self.on_time_rate,
            'avg_completion_days': self.avg_completion_days,
            'status_counts': self.status_counts,
            'priority_counts': self.priority_counts,
            'assignee_counts': self.assignee_counts,
            'person_stats': {k: v.to_dict() for k, v in self.person_stats.items()},
            'weekly': [
                {'week': w.week, 'completed': w.completed, 'created': w.created}
                for w in self.weekly
            ],
        }


def compute_task_analytics(tasks: list[Task], now: datetime | None = None) -> TaskAnalytics:
    """
    Summarize a task list in one pass plus a weekly series.

    Args:
        tasks: Tasks to summarize
        now: Reference time for the weekly series (defaults to current UTC time)

    Returns:
        TaskAnalytics
    """
    now = _aware(now or datetime.now(timezone.utc))
    result = TaskAnalytics(total_tasks=len(tasks))
    completion_days: list[float] = []

    for task in tasks:
        status = task.status.value
        result.status_counts[status] = result.status_counts.get(status, 0) + 1
        priority = task.priority.value
        result.priority_counts[priority] = result.priority_counts.get(priority, 0) + 1

        names = task.assignee_names or [UNASSIGNED_LABEL]
        for name in names:
            result.assignee_counts[name] = result.assignee_counts.get(name, 0) + 1
            result.person_stats.setdefault(name, PersonStats()).total += 1

        if task.status != TaskStatus.COMPLETED:
            continue

        result.completed_tasks += 1
        on_time = True
        if task.deadline and task.updated_at:
            on_time = _aware(task.updated_at) <= _aware(task.deadline)
            if on_time:
                result.on_time_tasks += 1
            else:
                result.late_tasks += 1

        for name in names:
            stats = result.person_stats[name]
            stats.completed += 1
            if on_time:
                stats.on_time += 1
            else:
                stats.late += 1

        if task.created_at and task.updated_at:
            delta = _aware(task.updated_at) - _aware(task.created_at)
            completion_days.append(delta.total_seconds() / 86400)

    if completion_days:
        result.avg_completion_days = round(sum(completion_days) / len(completion_days), 1)

    result.weekly = _weekly_series(tasks, now)
    return result


def _weekly_series(tasks: list[Task], now: datetime) -> list[WeeklyBucket]:
    """Completed/created counts for each of the last four 7-day windows, oldest first."""
    buckets = []
    for i in range(WEEKS_SHOWN - 1, -1, -1):
        week_start = now - timedelta(days=7 * (i + 1))
        week_end = now - timedelta(days=7 * i)
        bucket = WeeklyBucket(week=f'W{week_end.isocalendar()[1]}')
        for task in tasks:
            if task.status == TaskStatus.COMPLETED and task.updated_at:
                if week_start <= _aware(task.updated_at) < week_end:
                    bucket.completed += 1
            if task.created_at and week_start <= _aware(task.created_at) < week_end:
                bucket.created += 1
        buckets.append(bucket)
    return buckets
