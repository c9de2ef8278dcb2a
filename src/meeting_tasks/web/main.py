"""FastAPI application for the meeting task tool web edge."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from ..clients.api_client import ApiClient
from ..clients.auth_provider import create_auth_provider
from ..context import build_context
from ..logging import configure_logging
from ..stores.storage import MemoryStorage
from .config import get_settings
from .guard import RouteGuardMiddleware, cookie_session_resolver
from .routes.auth import login_router
from .routes.auth import router as auth_router
from .routes.health import router as health_router
from .routes.views import router as views_router

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the application context at startup, close its clients at shutdown."""
    settings = get_settings()
    if settings.LOG_JSON:
        configure_logging(json_output=True)

    logger.info("lifespan.startup", api_url=settings.API_URL)

    provider = create_auth_provider(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
    # Views derive per-request clients with the caller's token
    api = ApiClient(
        base_url=settings.API_URL,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
        max_retries=settings.MAX_RETRIES,
    )
    context = build_context(auth_provider=provider, api=api, storage=MemoryStorage())

    # Store on app.state for request handlers and the route guard
    app.state.context = context

    logger.info("lifespan.ready", auth_provider=type(provider).__name__)
    yield

    # Shutdown
    logger.info("lifespan.shutdown")
    await context.aclose()


app = FastAPI(
    title="meeting-task-tool",
    description="Route guard, auth callback and task views for the meeting task tool",
    lifespan=lifespan,
)

app.add_middleware(
    RouteGuardMiddleware,
    resolve_session=cookie_session_resolver(get_settings().ACCESS_TOKEN_COOKIE),
)

app.include_router(health_router)
app.include_router(auth_router)
app.include_router(login_router)
app.include_router(views_router)
