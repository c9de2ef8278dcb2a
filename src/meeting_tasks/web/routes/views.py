"""
JSON views over the backend API: task list, dashboard analytics, goal
hierarchy and calendar export.

Every view calls the backend with the requesting user's access token.
List views fall back to an empty result with an `error` message when the
backend call fails.
"""

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, Response

from ...analytics import compute_task_analytics
from ...calendar import generate_ics_calendar
from ...clients.api_client import ApiClient
from ...errors import ApiError, MeetingTasksError
from ...filters import ALL, TaskFilterState
from ...models.goal import Goal, build_goal_tree
from ...models.task import Task, TaskFilters, TaskPriority, TaskStatus
from ..config import Settings, get_settings

logger = structlog.get_logger(__name__)

router = APIRouter()


def get_api(request: Request, settings: Settings = Depends(get_settings)) -> ApiClient:
    """API client bound to the requesting user's access token cookie."""
    token = request.cookies.get(settings.ACCESS_TOKEN_COOKIE)
    return request.app.state.context.api.with_token(token)


def _error_message(error: MeetingTasksError, fallback: str) -> str:
    if isinstance(error, ApiError):
        return error.context.get("detail") or fallback
    return fallback


def _dump(items: list[Task] | list[Goal]) -> list[dict]:
    return [item.model_dump(mode="json", by_alias=True) for item in items]


@router.get("/tasks")
async def list_tasks(
    status: TaskStatus | None = None,
    priority: TaskPriority | None = None,
    assignee: str = ALL,
    q: str = Query("", max_length=200),
    api: ApiClient = Depends(get_api),
):
    """Reviewed tasks, filtered client-side."""
    filters = TaskFilterState(
        status=status.value if status else ALL,
        priority=priority.value if priority else ALL,
        assignee_id=assignee,
        query=q,
    )
    error = None
    try:
        tasks = (await api.tasks.list(TaskFilters(reviewed=True))).tasks
    except MeetingTasksError as e:
        logger.warning("views.tasks_failed", error=str(e))
        tasks, error = [], _error_message(e, "Failed to load tasks")

    visible = filters.apply(tasks)
    return {
        "tasks": _dump(visible),
        "total": len(tasks),
        "has_active_filters": filters.has_active_filters,
        "error": error,
    }


@router.get("/dashboard")
async def dashboard(api: ApiClient = Depends(get_api)):
    """Task analytics across every task visible to the user."""
    error = None
    try:
        tasks = (await api.tasks.list()).tasks
    except MeetingTasksError as e:
        logger.warning("views.dashboard_failed", error=str(e))
        tasks, error = [], _error_message(e, "Failed to load tasks")

    analytics = compute_task_analytics(tasks, now=datetime.now(timezone.utc))
    return {
        **analytics.to_dict(),
        "pending_review": sum(1 for t in tasks if not t.reviewed),
        "error": error,
    }


@router.get("/goals")
async def goals(api: ApiClient = Depends(get_api)):
    """Yearly goals with their quarterly goals nested."""
    try:
        flat = (await api.goals.list()).goals
    except MeetingTasksError as e:
        logger.warning("views.goals_failed", error=str(e))
        return {"goals": [], "error": _error_message(e, "Failed to load goals")}
    return {"goals": _dump(build_goal_tree(flat)), "error": None}


@router.get("/calendar.ics")
async def calendar_export(api: ApiClient = Depends(get_api)):
    """iCalendar file with one all-day event per task deadline."""
    try:
        tasks = (await api.tasks.list()).tasks
    except MeetingTasksError as e:
        logger.warning("views.calendar_failed", error=str(e))
        return JSONResponse(
            status_code=502,
            content={"error": _error_message(e, "Failed to load tasks")},
        )

    return Response(
        content=generate_ics_calendar(tasks),
        media_type="text/calendar; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="tasks.ics"'},
    )
