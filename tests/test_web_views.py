"""Tests for the JSON views and the health endpoint."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

from fastapi import FastAPI
from fastapi.testclient import TestClient

from meeting_tasks.errors import ApiConnectionError, ApiRequestError
from meeting_tasks.models import Goal, GoalType, TaskFilters
from meeting_tasks.models.responses import GoalsResponse, HealthResponse, TasksResponse
from meeting_tasks.web.config import Settings, get_settings
from meeting_tasks.web.routes.health import router as health_router
from meeting_tasks.web.routes.views import router as views_router


def _make_app(api) -> FastAPI:
    app = FastAPI()
    app.include_router(health_router)
    app.include_router(views_router)
    base_api = MagicMock()
    base_api.with_token.return_value = api
    base_api.health = api.health
    app.state.context = MagicMock(api=base_api)
    app.dependency_overrides[get_settings] = lambda: Settings()
    return app


class TestTasksView:
    def test_lists_reviewed_tasks_with_user_token(self, mock_api, make_task):
        mock_api.tasks.list.return_value = TasksResponse(tasks=[make_task()])
        app = _make_app(mock_api)
        client = TestClient(app, cookies={"sb-access-token": "user-token"})

        response = client.get("/tasks")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert body["tasks"][0]["id"] == "task_1"
        assert body["error"] is None
        app.state.context.api.with_token.assert_called_once_with("user-token")
        mock_api.tasks.list.assert_awaited_once_with(TaskFilters(reviewed=True))

    def test_filters_applied(self, mock_api, make_task):
        mock_api.tasks.list.return_value = TasksResponse(tasks=[
            make_task(id="a", status="completed", priority="high"),
            make_task(id="b", status="pending", priority="high"),
            make_task(id="c", status="completed", priority="low", description="Book venue"),
        ])
        client = TestClient(_make_app(mock_api))

        response = client.get("/tasks", params={"status": "completed", "priority": "high"})
        assert [t["id"] for t in response.json()["tasks"]] == ["a"]
        assert response.json()["has_active_filters"] is True

        response = client.get("/tasks", params={"q": "VENUE"})
        assert [t["id"] for t in response.json()["tasks"]] == ["c"]

    def test_invalid_status_rejected(self, mock_api):
        client = TestClient(_make_app(mock_api))

        response = client.get("/tasks", params={"status": "archived"})

        assert response.status_code == 422
        mock_api.tasks.list.assert_not_called()

    def test_backend_failure_falls_back_to_empty(self, mock_api):
        mock_api.tasks.list.side_effect = ApiRequestError(
            "HTTP 403", status_code=403, context={"detail": "Not a team member"}
        )
        client = TestClient(_make_app(mock_api))

        response = client.get("/tasks")

        assert response.status_code == 200
        assert response.json()["tasks"] == []
        assert response.json()["error"] == "Not a team member"


class TestDashboardView:
    def test_analytics_summary(self, mock_api, make_task):
        mock_api.tasks.list.return_value = TasksResponse(tasks=[
            make_task(id="a", status="completed", reviewed=True),
            make_task(id="b", status="pending", reviewed=False),
        ])
        client = TestClient(_make_app(mock_api))

        body = client.get("/dashboard").json()

        assert body["total_tasks"] == 2
        assert body["completed_tasks"] == 1
        assert body["completion_rate"] == 50
        assert body["pending_review"] == 1
        assert len(body["weekly"]) == 4

    def test_backend_failure_gives_empty_analytics(self, mock_api):
        mock_api.tasks.list.side_effect = ApiConnectionError("unreachable")
        client = TestClient(_make_app(mock_api))

        body = client.get("/dashboard").json()

        assert body["total_tasks"] == 0
        assert body["error"] == "Failed to load tasks"


class TestGoalsView:
    def test_goal_tree(self, mock_api):
        mock_api.goals.list.return_value = GoalsResponse(goals=[
            Goal(id="y1", title="Grow", type=GoalType.YEARLY),
            Goal(id="q1", title="Q1 push", type=GoalType.QUARTERLY, parent_id="y1"),
        ])
        client = TestClient(_make_app(mock_api))

        body = client.get("/goals").json()

        assert [g["id"] for g in body["goals"]] == ["y1"]
        assert body["goals"][0]["children"][0]["id"] == "q1"

    def test_goal_failure(self, mock_api):
        mock_api.goals.list.side_effect = ApiConnectionError("unreachable")
        client = TestClient(_make_app(mock_api))

        body = client.get("/goals").json()

        assert body == {"goals": [], "error": "Failed to load goals"}


class TestCalendarView:
    def test_ics_download(self, mock_api, make_task):
        deadline = datetime(2025, 4, 1, tzinfo=timezone.utc).isoformat()
        mock_api.tasks.list.return_value = TasksResponse(tasks=[
            make_task(id="a", deadline=deadline),
            make_task(id="b"),
        ])
        client = TestClient(_make_app(mock_api))

        response = client.get("/calendar.ics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/calendar")
        assert "attachment" in response.headers["content-disposition"]
        assert response.text.count("BEGIN:VEVENT") == 1
        assert "DTSTART;VALUE=DATE:20250401" in response.text

    def test_backend_failure(self, mock_api):
        mock_api.tasks.list.side_effect = ApiConnectionError("unreachable")
        client = TestClient(_make_app(mock_api))

        response = client.get("/calendar.ics")

        assert response.status_code == 502


class TestHealthRoute:
    def test_health_ok(self, mock_api):
        mock_api.health.check.return_value = HealthResponse(status="ok")
        client = TestClient(_make_app(mock_api))

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "backend": "ok"}

    def test_backend_down(self, mock_api):
        mock_api.health.check.side_effect = ApiConnectionError("Connection refused")
        client = TestClient(_make_app(mock_api))

        response = client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"
