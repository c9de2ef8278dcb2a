"""
Application context: the explicitly wired set of clients and stores.

Build one with `build_context()` and pass it to whatever needs a store or
client. Nothing here is a module-level singleton.
"""

from dataclasses import dataclass, field

import structlog

from .clients.api_client import ApiClient, TokenProvider
from .clients.auth_provider import AuthProvider, create_auth_provider
from .config import Config, config as default_config
from .stores.auth import AuthStore
from .stores.storage import JsonFileStorage, StateStorage
from .stores.team import TeamStore

logger = structlog.get_logger(__name__)


def session_token_provider(provider: AuthProvider) -> TokenProvider:
    """Token provider that reads the access token from the provider's session."""

    async def access_token() -> str | None:
        session = await provider.get_session()
        return session.access_token if session else None

    return access_token


@dataclass
class AppContext:
    config: Config
    api: ApiClient
    auth_provider: AuthProvider
    auth: AuthStore
    team: TeamStore
    storage: StateStorage | None = field(default=None)

    async def aclose(self) -> None:
        await self.api.aclose()


def build_context(
    cfg: Config | None = None,
    auth_provider: AuthProvider | None = None,
    api: ApiClient | None = None,
    storage: StateStorage | None = None,
) -> AppContext:
    """
    Wire clients and stores together.

    Args:
        cfg: Configuration (defaults to the environment-loaded config)
        auth_provider: Provider override (defaults to create_auth_provider)
        api: API client override (defaults to one using the provider's session token)
        storage: Store persistence (defaults to JSON files under STATE_DIR)

    Returns:
        AppContext with both stores rehydrated from storage
    """
    cfg = cfg or default_config
    provider = auth_provider or create_auth_provider(cfg.SUPABASE_URL, cfg.SUPABASE_ANON_KEY)
    api = api or ApiClient(
        base_url=cfg.API_URL,
        token_provider=session_token_provider(provider),
        timeout=cfg.HTTP_TIMEOUT_SECONDS,
        max_retries=cfg.MAX_RETRIES,
    )
    storage = storage if storage is not None else JsonFileStorage(cfg.STATE_DIR)

    context = AppContext(
        config=cfg,
        api=api,
        auth_provider=provider,
        auth=AuthStore(api, provider, storage),
        team=TeamStore(api, storage),
        storage=storage,
    )
    logger.info('context.built', api_url=api.base_url)
    return context
