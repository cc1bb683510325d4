"""SpinRound API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Every router sits behind the bearer-secret guard
    - Global error handlers map SpinRoundError → structured JSON responses
    - CORS configured from settings (any origin by default)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - SQLite URLs get their tables created on startup; server databases are
      migrated with Alembic
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from spinround.api.dependencies import require_api_secret
from spinround.api.error_handlers import register_error_handlers
from spinround.api.routes import (
    health, state, teams, questions, rounds, countdown, marks, session, events,
)
from spinround.config import get_settings
from spinround.infrastructure.database import init_db
from spinround.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.database_url.startswith("sqlite"):
        await manager.create_all()
    logger.info("SpinRound API started")
    yield
    await manager.dispose()
    logger.info("SpinRound API shutting down")


app = FastAPI(title="SpinRound API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    expose_headers=["Content-Length", "Content-Disposition"],
    max_age=600,
)

_guarded = [Depends(require_api_secret)]

app.include_router(health.router, dependencies=_guarded)
app.include_router(state.router, dependencies=_guarded)
app.include_router(teams.router, dependencies=_guarded)
app.include_router(questions.router, dependencies=_guarded)
app.include_router(rounds.router, dependencies=_guarded)
app.include_router(countdown.router, dependencies=_guarded)
app.include_router(marks.router, dependencies=_guarded)
app.include_router(session.router, dependencies=_guarded)
app.include_router(events.router, dependencies=_guarded)

register_error_handlers(app)
