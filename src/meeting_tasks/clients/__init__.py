"""Clients for the backend REST API and the auth provider."""

from .api_client import ApiClient
from .auth_provider import (
    AuthProvider,
    DevAuthProvider,
    SupabaseAuthProvider,
    create_auth_provider,
)

__all__ = [
    'ApiClient',
    'AuthProvider',
    'DevAuthProvider',
    'SupabaseAuthProvider',
    'create_auth_provider',
]
