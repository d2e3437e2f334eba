"""Latt API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map LattError → structured JSON responses
    - CORS and session cookie configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Signed-cookie sessions (Starlette SessionMiddleware): the cookie carries only
      the user id, so no server-side session store is needed
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from latt.api.error_handlers import register_error_handlers
from latt.api.routes import auth, health, services, subscriptions
from latt.config import DEFAULT_SESSION_SECRET, Settings, get_settings
from latt.infrastructure import database
from latt.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


def warn_on_insecure_settings(settings: Settings) -> bool:
    """Log a warning when session cookies are signed with the placeholder secret."""
    if settings.session_secret != DEFAULT_SESSION_SECRET:
        return False
    logger.warning(
        "SESSION_SECRET is not set; session cookies are signed with the public default",
    )
    return True


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    warn_on_insecure_settings(settings)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        timeout=settings.db_timeout_seconds,
    )
    logger.info("Latt API started")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("Latt API shutting down")


app = FastAPI(
    title="Latt API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret,
    session_cookie=settings.session_cookie,
    max_age=settings.session_max_age_seconds,
    https_only=settings.session_https_only,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(services.router)
app.include_router(subscriptions.router)

register_error_handlers(app)
