"""
Meeting Task Tool client

Application core for the meeting task tool: a typed client for the backend
REST API, auth provider adapters, persisted session and team stores,
optimistic inline edits, task analytics and calendar export.
"""

__version__ = '0.1.0'

# Re-export key classes for convenience
from .clients import (
    ApiClient,
    AuthProvider,
    DevAuthProvider,
    SupabaseAuthProvider,
    create_auth_provider,
)
from .stores import (
    AuthStore,
    TeamStore,
    MemoryStorage,
    JsonFileStorage,
)
from .context import AppContext, build_context
from .optimistic import InlineTaskField, run_optimistic, task_field_updater
from .filters import TaskFilterState
from .analytics import compute_task_analytics
from .calendar import generate_ics_calendar, generate_ics_event
from .logging import (
    configure_logging,
    logging_context,
)
from .errors import (
    MeetingTasksError,
    ClientError,
    ApiError,
    ApiRequestError,
    ApiUnauthorizedError,
    ApiNotFoundError,
    ApiServerError,
    ApiConnectionError,
    DecodeError,
    AuthProviderError,
    StoreError,
    PreconditionError,
)

__all__ = [
    # Version
    '__version__',
    # Clients
    'ApiClient',
    'AuthProvider',
    'DevAuthProvider',
    'SupabaseAuthProvider',
    'create_auth_provider',
    # Stores
    'AuthStore',
    'TeamStore',
    'MemoryStorage',
    'JsonFileStorage',
    'AppContext',
    'build_context',
    # Views
    'InlineTaskField',
    'run_optimistic',
    'task_field_updater',
    'TaskFilterState',
    'compute_task_analytics',
    'generate_ics_calendar',
    'generate_ics_event',
    # Logging
    'configure_logging',
    'logging_context',
    # Errors
    'MeetingTasksError',
    'ClientError',
    'ApiError',
    'ApiRequestError',
    'ApiUnauthorizedError',
    'ApiNotFoundError',
    'ApiServerError',
    'ApiConnectionError',
    'DecodeError',
    'AuthProviderError',
    'StoreError',
    'PreconditionError',
]
