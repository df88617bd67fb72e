"""Controller layer for share links, usage counters, and health checks."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, ValidationError

from backend.controllers.dependencies import get_share_link_service, get_usage_service
from backend.controllers.split_controller import SplitFormModel
from backend.services.share_link_service import (
    ShareLinkDecodeError,
    ShareLinkError,
    ShareLinkService,
)
from backend.services.usage_service import UnknownStatError, UsageStatsService
from backend.utils.config import get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)
settings = get_settings()

router = APIRouter(tags=["community"])


class ShareLinkResponse(BaseModel):
    token: str = Field(min_length=1)


class CounterResponse(BaseModel):
    stat_name: str
    count: int = Field(ge=0)


class HealthResponse(BaseModel):
    status: str
    app_name: str
    app_version: str


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        app_name=settings.app_name,
        app_version=settings.app_version,
    )


@router.post(
    "/share_link",
    response_model=ShareLinkResponse,
    status_code=status.HTTP_200_OK,
)
async def create_share_link(
    payload: SplitFormModel,
    service: ShareLinkService = Depends(get_share_link_service),
) -> ShareLinkResponse:
    """Encode the whole form into a token; nothing is stored server-side."""
    try:
        token = service.encode(payload.to_domain())
    except ShareLinkError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return ShareLinkResponse(token=token)


@router.get(
    "/share_link/{token}",
    response_model=SplitFormModel,
    status_code=status.HTTP_200_OK,
)
async def open_share_link(
    token: str,
    service: ShareLinkService = Depends(get_share_link_service),
) -> SplitFormModel:
    try:
        return SplitFormModel.from_domain(service.decode(token))
    except ShareLinkDecodeError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except ValidationError as exc:
        logger.warning("Decoded share link failed form validation | errors=%s", exc.error_count())
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Could not load data from the link.",
        ) from exc


@router.get("/stats", response_model=dict[str, int])
async def get_stats(
    service: UsageStatsService = Depends(get_usage_service),
) -> dict[str, int]:
    return service.get_counters()


@router.post(
    "/stats/{stat_name}/increment",
    response_model=CounterResponse,
    status_code=status.HTTP_200_OK,
)
async def increment_stat(
    stat_name: str,
    service: UsageStatsService = Depends(get_usage_service),
) -> CounterResponse:
    try:
        count = service.increment(stat_name)
    except UnknownStatError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected usage counter failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update usage counter",
        ) from exc
    return CounterResponse(stat_name=stat_name, count=count)
