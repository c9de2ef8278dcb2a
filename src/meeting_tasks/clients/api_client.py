"""
HTTP client for the meeting task tool backend REST API.

Handles:
- Bearer token injection from the auth provider's session
- Status code mapping into the typed error hierarchy
- Retry with exponential backoff for idempotent requests
- Response body validation (DecodeError on shape mismatch)
"""

import time
from typing import Any, Awaitable, Callable, TypeVar

import httpx
import structlog
from pydantic import BaseModel, ValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from ..config import config
from ..errors import ApiConnectionError, ApiServerError, DecodeError, wrap_http_error
from ..models.category import Category, CreateCategoryRequest, UpdateCategoryRequest
from ..models.contact import CreateContactRequest
from ..models.goal import CreateGoalRequest, Goal, UpdateGoalRequest
from ..models.meeting import CreateMeetingRequest, Meeting
from ..models.responses import (
    AcceptInviteResponse,
    CategoriesResponse,
    ContactResponse,
    ContactsResponse,
    ContactStatsResponse,
    EmailInviteResponse,
    GoalsResponse,
    HealthResponse,
    InviteDetailsResponse,
    InviteLinkResponse,
    InvitesResponse,
    MeetingResponse,
    MeetingsResponse,
    MeResponse,
    SuccessResponse,
    TaskResponse,
    TasksResponse,
    TeamResponse,
)
from ..models.task import CreateTaskRequest, TaskFilters, UpdateTaskRequest
from ..models.team import TeamRole, ViewMode

logger = structlog.get_logger(__name__)

# Type variable for response body parsing
M = TypeVar('M', bound=BaseModel)

TokenProvider = Callable[[], Awaitable[str | None]]

# Methods safe to replay after a 5xx or dropped connection
_IDEMPOTENT_METHODS = frozenset({'GET', 'PUT', 'DELETE'})


class ApiClient:
    """
    Async client for the backend REST API.

    Endpoints are grouped by resource (`client.tasks.list()`,
    `client.teams.get_current()`); every call returns a validated model.

    Configuration via environment variables:
    - API_URL: Backend base URL (default: http://localhost:3001/api/v1)
    - HTTP_TIMEOUT_SECONDS: Per-request timeout (default: 30)
    - MAX_RETRIES: Extra attempts for idempotent requests (default: 2)
    """

    def __init__(
        self,
        base_url: str | None = None,
        token_provider: TokenProvider | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        retry_wait: wait_base | None = None,
        http: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the API client.

        Args:
            base_url: Backend base URL (defaults to API_URL)
            token_provider: Coroutine returning the current access token, or None
            timeout: Request timeout in seconds (defaults to HTTP_TIMEOUT_SECONDS)
            max_retries: Extra attempts for GET/PUT/DELETE (defaults to MAX_RETRIES)
            retry_wait: tenacity wait strategy between attempts
            http: Existing httpx client to share (not closed by this instance)
            transport: httpx transport override, mainly for tests
        """
        self.base_url = base_url or config.API_URL
        self.max_retries = config.MAX_RETRIES if max_retries is None else max_retries
        self._token_provider = token_provider
        self._retry_wait = retry_wait or wait_exponential(multiplier=0.5, min=0.5, max=8)

        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout or config.HTTP_TIMEOUT_SECONDS,
            transport=transport,
            headers={'Content-Type': 'application/json'},
        )

        self.health = HealthApi(self)
        self.auth = AuthApi(self)
        self.meetings = MeetingsApi(self)
        self.tasks = TasksApi(self)
        self.contacts = ContactsApi(self)
        self.goals = GoalsApi(self)
        self.categories = CategoriesApi(self)
        self.teams = TeamsApi(self)
        self.invites = InvitesApi(self)

    def with_token(self, access_token: str | None) -> 'ApiClient':
        """
        Derive a client that always sends `access_token`.

        The derived client shares this client's connection pool; closing it
        leaves the pool open.
        """

        async def _static_token() -> str | None:
            return access_token

        return ApiClient(
            base_url=self.base_url,
            token_provider=_static_token,
            max_retries=self.max_retries,
            retry_wait=self._retry_wait,
            http=self._http,
        )

    async def aclose(self) -> None:
        """Close the underlying connection pool if this instance created it."""
        if self._owns_http:
            await self._http.aclose()

    async def request(
        self,
        method: str,
        path: str,
        response_model: type[M],
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> M:
        """
        Send a request and validate the response body.

        Args:
            method: HTTP method
            path: Path relative to the base URL
            response_model: Model the body must match
            json: JSON request body
            params: Query parameters

        Returns:
            Parsed response body

        Raises:
            ApiError: Typed subclass for status, transport or decode failures
        """
        method = method.upper()
        attempts = 1 + self.max_retries if method in _IDEMPOTENT_METHODS else 1

        retrying = AsyncRetrying(
            stop=stop_after_attempt(attempts),
            wait=self._retry_wait,
            retry=retry_if_exception_type((ApiServerError, ApiConnectionError)),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                response = await self._send(method, path, json=json, params=params)

        return self._decode(response, response_model, method, path)

    async def _send(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None,
        params: dict[str, str] | None,
    ) -> httpx.Response:
        headers = {}
        if self._token_provider is not None:
            token = await self._token_provider()
            if token:
                headers['Authorization'] = f'Bearer {token}'

        log = logger.bind(method=method, path=path)
        start = time.perf_counter()
        try:
            response = await self._http.request(
                method, path, json=json, params=params, headers=headers
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            error = wrap_http_error(e, context={'method': method, 'path': path})
            log.warning(
                'api.request_failed',
                error=error.message,
                error_type=type(error).__name__,
                status_code=error.status_code,
            )
            raise error from e

        log.debug(
            'api.request',
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return response

    @staticmethod
    def _decode(
        response: httpx.Response,
        response_model: type[M],
        method: str,
        path: str,
    ) -> M:
        ctx = {'method': method, 'path': path, 'model': response_model.__name__}

        if response.status_code == 204 or not response.content:
            payload: Any = {}
        else:
            try:
                payload = response.json()
            except ValueError as e:
                raise DecodeError(
                    f"Response from {path} is not JSON",
                    status_code=response.status_code,
                    context=ctx,
                ) from e

        try:
            return response_model.model_validate(payload)
        except ValidationError as e:
            ctx['errors'] = e.errors(include_url=False, include_context=False)
            raise DecodeError(
                f"Response from {path} does not match {response_model.__name__}",
                status_code=response.status_code,
                context=ctx,
            ) from e


class _Resource:
    """Base for endpoint groups bound to an ApiClient."""

    def __init__(self, client: ApiClient):
        self._client = client


class HealthApi(_Resource):
    async def check(self) -> HealthResponse:
        return await self._client.request('GET', '/health', HealthResponse)


class AuthApi(_Resource):
    async def get_me(self) -> MeResponse:
        """Current user's app profile and team, created on first call."""
        return await self._client.request('GET', '/auth/me', MeResponse)

class MeetingsApi(_Resource):
    async def list(self, scope: ViewMode | None = None) -> MeetingsResponse:
        return await self._client.request(
            'GET', '/meetings', MeetingsResponse, params=_scope_params(scope)
        )

    async def get(self, meeting_id: str) -> MeetingResponse:
        return await self._client.request('GET', f'/meetings/{meeting_id}', MeetingResponse)

    async def create(self, data: CreateMeetingRequest) -> Meeting:
        """
        Upload a transcript. Tasks are extracted in the background, so the
        returned meeting is a summary with `processed=False`.
        """
        return await self._client.request('POST', '/meetings', Meeting, json=data.to_payload())

    async def reprocess(self, meeting_id: str) -> SuccessResponse:
        """Drop the meeting's AI-extracted tasks and run extraction again."""
        return await self._client.request(
            'POST', f'/meetings/{meeting_id}/reprocess', SuccessResponse
        )

    async def delete(self, meeting_id: str) -> SuccessResponse:
        """Delete a meeting together with its tasks."""
        return await self._client.request('DELETE', f'/meetings/{meeting_id}', SuccessResponse)

    async def confirm_tasks(self, meeting_id: str) -> SuccessResponse:
        """Mark every extracted task of a meeting as reviewed."""
        return await self._client.request(
            'POST', f'/meetings/{meeting_id}/confirm-tasks', SuccessResponse
        )


class TasksApi(_Resource):
    async def list(self, filters: TaskFilters | None = None) -> TasksResponse:
        params = filters.to_params() if filters else None
        return await self._client.request('GET', '/tasks', TasksResponse, params=params)

    async def create(self, data: CreateTaskRequest) -> TaskResponse:
        return await self._client.request('POST', '/tasks', TaskResponse, json=data.to_payload())

    async def update(self, task_id: str, data: UpdateTaskRequest) -> TaskResponse:
        return await self._client.request(
            'PATCH', f'/tasks/{task_id}', TaskResponse, json=data.to_payload()
        )

    async def mark_reviewed(self, task_id: str) -> TaskResponse:
        return await self._client.request('PUT', f'/tasks/{task_id}/review', TaskResponse)

    async def delete(self, task_id: str) -> SuccessResponse:
        return await self._client.request('DELETE', f'/tasks/{task_id}', SuccessResponse)


class ContactsApi(_Resource):
    async def list(self, scope: ViewMode | None = None) -> ContactsResponse:
        return await self._client.request(
            'GET', '/contacts', ContactsResponse, params=_scope_params(scope)
        )

    async def stats(self, scope: ViewMode | None = None) -> ContactStatsResponse:
        """Contacts with their task counts, delivery rate and backlog age."""
        return await self._client.request(
            'GET', '/contacts/stats', ContactStatsResponse, params=_scope_params(scope)
        )

    async def create(self, data: CreateContactRequest) -> ContactResponse:
        return await self._client.request(
            'POST', '/contacts', ContactResponse, json=data.to_payload()
        )


class GoalsApi(_Resource):
    async def list(self) -> GoalsResponse:
        return await self._client.request('GET', '/goals', GoalsResponse)

    async def create(self, data: CreateGoalRequest) -> Goal:
        return await self._client.request('POST', '/goals', Goal, json=data.to_payload())

    async def update(self, goal_id: str, data: UpdateGoalRequest) -> Goal:
        return await self._client.request(
            'PATCH', f'/goals/{goal_id}', Goal, json=data.to_payload()
        )

    async def delete(self, goal_id: str) -> SuccessResponse:
        return await self._client.request('DELETE', f'/goals/{goal_id}', SuccessResponse)


class CategoriesApi(_Resource):
    async def list(self) -> CategoriesResponse:
        return await self._client.request('GET', '/categories', CategoriesResponse)

    async def create(self, data: CreateCategoryRequest) -> Category:
        return await self._client.request(
            'POST', '/categories', Category, json=data.to_payload()
        )

    async def update(self, category_id: str, data: UpdateCategoryRequest) -> Category:
        return await self._client.request(
            'PATCH', f'/categories/{category_id}', Category, json=data.to_payload()
        )

    async def delete(self, category_id: str) -> SuccessResponse:
        return await self._client.request(
            'DELETE', f'/categories/{category_id}', SuccessResponse
        )


class TeamsApi(_Resource):
    async def get_current(self) -> TeamResponse:
        """The caller's team, or `{"team": null}` when they have none."""
        return await self._client.request('GET', '/teams/current', TeamResponse)

    async def create(self, name: str) -> TeamResponse:
        return await self._client.request('POST', '/teams', TeamResponse, json={'name': name})

    async def update(self, team_id: str, name: str) -> TeamResponse:
        return await self._client.request(
            'PATCH', f'/teams/{team_id}', TeamResponse, json={'name': name}
        )

    async def leave(self, team_id: str) -> SuccessResponse:
        return await self._client.request('POST', f'/teams/{team_id}/leave', SuccessResponse)

    async def delete(self, team_id: str) -> SuccessResponse:
        return await self._client.request('DELETE', f'/teams/{team_id}', SuccessResponse)

    async def update_member_role(
        self, team_id: str, user_id: str, role: TeamRole
    ) -> SuccessResponse:
        """Promoting another member to owner demotes the caller to member."""
        return await self._client.request(
            'POST',
            f'/teams/{team_id}/members/{user_id}/role',
            SuccessResponse,
            json={'role': TeamRole(role).value},
        )

    async def remove_member(self, team_id: str, user_id: str) -> SuccessResponse:
        return await self._client.request(
            'DELETE', f'/teams/{team_id}/members/{user_id}', SuccessResponse
        )


class InvitesApi(_Resource):
    async def send_email(self, email: str) -> EmailInviteResponse:
        return await self._client.request(
            'POST', '/invites/email', EmailInviteResponse, json={'email': email}
        )

    async def generate_link(self) -> InviteLinkResponse:
        return await self._client.request('POST', '/invites/link', InviteLinkResponse)

    async def list(self) -> InvitesResponse:
        return await self._client.request('GET', '/invites', InvitesResponse)

    async def revoke(self, invite_id: str) -> SuccessResponse:
        return await self._client.request('DELETE', f'/invites/{invite_id}', SuccessResponse)

    async def get_by_token(self, token: str) -> InviteDetailsResponse:
        """Public lookup used by the join page; works without a session."""
        return await self._client.request('GET', f'/invites/{token}', InviteDetailsResponse)

    async def accept(self, token: str) -> AcceptInviteResponse:
        return await self._client.request(
            'POST', f'/invites/{token}/accept', AcceptInviteResponse
        )


def _scope_params(scope: ViewMode | None) -> dict[str, str] | None:
    return {'scope': ViewMode(scope).value} if scope else None
