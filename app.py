"""
app.py: FastAPI application factory and startup lifecycle.

This is the ASGI application object imported by uvicorn.
It wires the repository, clock and availability service, registers the
router, and runs startup initialization.

Usage (via launcher):
    python main.py

Usage (direct uvicorn):
    uvicorn app:app --reload
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from booking_engine.controllers.availability_controller import router as availability_router
from booking_engine.repository.data_repository import DataRepository
from booking_engine.services.availability_service import AvailabilityService
from booking_engine.services.clock import BusinessClock, Clock
from booking_engine.utils.config import Settings, get_settings
from booking_engine.utils.logger import get_logger


logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    clock: Optional[Clock] = None,
) -> FastAPI:
    """
    Build and wire the FastAPI application.

    Every dependency is created here and published on app.state so the
    controllers never construct their own collaborators.
    """
    settings = settings or get_settings()

    # --- Repository (read side of the booking store) ---
    repository = DataRepository(settings)

    # --- Business-timezone clock and the availability service ---
    clock = clock or BusinessClock.from_settings(settings)
    availability_service = AvailabilityService(
        repository=repository,
        settings=settings,
        clock=clock,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Run startup initialization before accepting requests."""
        _startup(app)
        yield

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.include_router(availability_router)

    app.state.repository = repository
    app.state.clock = clock
    app.state.availability_service = availability_service

    return app


def _startup(app: FastAPI) -> None:
    """Idempotent startup sequence. Safe to re-run on server restarts."""
    repository: DataRepository = app.state.repository

    logger.info("Startup: initializing database schema")
    repository.initialize_database()

    logger.info("Startup: seeding demo place (skipped if Places table not empty)")
    repository.seed_demo_place_if_empty()

    logger.info("Startup complete; system ready")


# Module-level app object for uvicorn
app = create_app()
