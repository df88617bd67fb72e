"""Shared FastAPI dependency providers for controller layer."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from backend.services.allocation_service import RentAllocationService
from backend.services.share_link_service import ShareLinkService
from backend.services.suggestion_service import SuggestionService
from backend.services.usage_service import UsageStatsService
from backend.utils.config import get_settings


def get_allocation_service(request: Request) -> RentAllocationService:
    service = getattr(request.app.state, "allocation_service", None)
    if service is None:
        service = RentAllocationService(settings=get_settings())
        request.app.state.allocation_service = service
    return service


def get_suggestion_service(request: Request) -> SuggestionService:
    service = getattr(request.app.state, "suggestion_service", None)
    if service is None:
        service = SuggestionService(provider=None)
        request.app.state.suggestion_service = service
    return service


def get_share_link_service(request: Request) -> ShareLinkService:
    service = getattr(request.app.state, "share_link_service", None)
    if service is None:
        service = ShareLinkService(settings=get_settings())
        request.app.state.share_link_service = service
    return service


def get_usage_service(request: Request) -> UsageStatsService:
    service = getattr(request.app.state, "usage_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Usage counter service is not initialized",
        )
    return service
