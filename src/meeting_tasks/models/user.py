"""User profile and auth-provider identity models."""

from datetime import datetime, timezone
from typing import Any

from pydantic import Field

from .base import ApiModel


class User(ApiModel):
    """
    App-level user profile.

    Identity is owned by the auth provider; the backend keeps a shadow
    profile row keyed by the same id.
    """

    id: str = Field(..., description='User id shared with the auth provider')
    email: str = Field(..., description='Login email')
    name: str | None = Field(default=None, description='Display name')
    created_at: datetime | None = Field(default=None)
    updated_at: datetime | None = Field(default=None)


class AuthUser(ApiModel):
    """User claims as reported by the auth provider."""

    id: str
    email: str | None = None
    user_metadata: dict[str, Any] = Field(default_factory=dict)

    def to_profile(self) -> User:
        """
        Build a minimal profile from provider claims.

        Used when the backend profile endpoint is unavailable. The name falls
        back to the email local part.
        """
        email = self.email or ''
        name = self.user_metadata.get('name') or (email.split('@')[0] if email else None)
        now = datetime.now(timezone.utc)
        return User(id=self.id, email=email, name=name, created_at=now, updated_at=now)


class AuthSession(ApiModel):
    """Session tokens issued by the auth provider."""

    access_token: str
    refresh_token: str | None = None
    token_type: str = 'bearer'
    user: AuthUser | None = None
