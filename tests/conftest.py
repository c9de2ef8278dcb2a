"""
Pytest configuration and shared fixtures.

Key fixtures:
- memory_storage: In-memory store persistence
- mock_api: ApiClient stand-in with AsyncMock resource methods
- make_task / make_team: Model factories with sensible defaults
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

# Load environment variables
from dotenv import load_dotenv

env_file = Path(__file__).parent.parent / '.env'
if env_file.exists():
    load_dotenv(env_file)

from meeting_tasks.models.task import Task
from meeting_tasks.models.team import TeamWithMembers
from meeting_tasks.stores.storage import MemoryStorage

NOW = datetime(2025, 3, 14, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for date-dependent tests."""
    return NOW


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def mock_api() -> MagicMock:
    """ApiClient stand-in; every resource method is an AsyncMock."""
    api = MagicMock()
    for resource in (
        'auth', 'meetings', 'tasks', 'contacts', 'goals', 'categories', 'teams', 'invites', 'health'
    ):
        setattr(api, resource, AsyncMock())
    return api


@pytest.fixture
def make_task():
    """Build a Task from camelCase wire fields with defaults filled in."""

    def _make(**overrides) -> Task:
        data = {
            'id': 'task_1',
            'meetingId': 'meeting_1',
            'description': 'Send the updated deck',
            'assignees': [],
            'status': 'pending',
            'priority': 'medium',
            'aiExtracted': True,
            'reviewed': True,
            'createdAt': (NOW - timedelta(days=3)).isoformat(),
            'updatedAt': (NOW - timedelta(days=1)).isoformat(),
        }
        data.update(overrides)
        return Task.model_validate(data)

    return _make


@pytest.fixture
def make_team():
    """Build a TeamWithMembers, shaped like GET /teams/current, owned by user_1."""

    def _make(team_id: str = 'team_1', members: list[dict] | None = None) -> TeamWithMembers:
        return TeamWithMembers.model_validate({
            'id': team_id,
            'name': 'Platform',
            'slug': 'platform',
            'createdAt': '2025-01-06T09:00:00.000Z',
            'role': 'owner',
            'members': members if members is not None else [
                {
                    'id': 'user_1',
                    'name': 'Ana',
                    'email': 'ana@example.com',
                    'role': 'owner',
                    'joinedAt': '2025-01-06T09:00:00.000Z',
                },
                {
                    'id': 'user_2',
                    'name': 'Ben',
                    'email': 'ben@example.com',
                    'role': 'member',
                    'joinedAt': '2025-02-01T10:30:00.000Z',
                },
            ],
        })

    return _make
