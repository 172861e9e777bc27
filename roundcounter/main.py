"""RoundCounter API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map RoundCounterError → {"error", "code"} JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event
    - create_app() factory plus module-level `app` for `uvicorn roundcounter.main:app`
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from roundcounter.api.error_handlers import register_error_handlers
from roundcounter.api.routes import activities, health
from roundcounter.config import get_settings
from roundcounter.infrastructure.database import init_db
from roundcounter.infrastructure.observability import setup_logging

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
    if settings.database_create_schema:
        await manager.create_schema()
    logger.info("RoundCounter API started")
    yield
    await manager.dispose()
    logger.info("RoundCounter API shutting down")


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="RoundCounter API", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(activities.router)

    register_error_handlers(app)
    return app


app = create_app()
