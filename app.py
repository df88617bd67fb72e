"""
app.py: FastAPI application factory and startup lifecycle.

This is the ASGI application object imported by uvicorn.
It wires all services, registers routers, and runs startup initialization.

Usage (via launcher):
    python main.py

Usage (direct uvicorn):
    uvicorn app:app --reload
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from backend.controllers.community_controller import router as community_router
from backend.controllers.split_controller import router as split_router
from backend.repository.usage_repository import UsageCounterStore, build_usage_store
from backend.services.allocation_service import RentAllocationService
from backend.services.share_link_service import ShareLinkService
from backend.services.suggestion_service import SuggestionService, WeightSuggestionProvider
from backend.services.usage_service import UsageStatsService
from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    *,
    suggestion_provider: Optional[WeightSuggestionProvider] = None,
    usage_store: Optional[UsageCounterStore] = None,
) -> FastAPI:
    """
    Build and wire the FastAPI application.

    Instantiates all services with explicit dependency injection via app.state.
    The suggestion provider and usage store are external collaborators and
    can be swapped in here.
    """
    settings = settings or get_settings()

    # --- Services (pure engine wrappers, no room state kept server-side) ---
    allocation_service = RentAllocationService(settings=settings)
    share_link_service = ShareLinkService(settings=settings)
    suggestion_service = SuggestionService(provider=suggestion_provider)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Run startup initialization before accepting requests."""
        _startup(app, settings, usage_store)
        yield

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # --- Routers ---
    app.include_router(split_router)
    app.include_router(community_router)

    # --- Inject services into app.state for dependency resolution ---
    app.state.settings = settings
    app.state.allocation_service = allocation_service
    app.state.share_link_service = share_link_service
    app.state.suggestion_service = suggestion_service
    app.state.usage_service = None

    return app


def _startup(
    app: FastAPI,
    settings: Settings,
    usage_store: Optional[UsageCounterStore],
) -> None:
    """Idempotent startup sequence. Safe to re-run on server restarts."""
    logger.info("Startup: preparing usage counter store | backend=%s", settings.usage_store_backend)
    store = usage_store or build_usage_store(settings)
    app.state.usage_service = UsageStatsService(store=store, settings=settings)

    if not app.state.suggestion_service.provider_configured:
        logger.info("Startup: no weight suggestion provider configured; /suggest_weights disabled")

    logger.info("Startup complete, system ready")


# Module-level app object for uvicorn
app = create_app()
