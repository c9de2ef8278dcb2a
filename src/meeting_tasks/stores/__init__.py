"""Client-side state stores mirroring server state."""

from .storage import StateStorage, MemoryStorage, JsonFileStorage
from .auth import AuthStore, AuthState
from .team import TeamStore, TeamState

__all__ = [
    'StateStorage',
    'MemoryStorage',
    'JsonFileStorage',
    'AuthStore',
    'AuthState',
    'TeamStore',
    'TeamState',
]
