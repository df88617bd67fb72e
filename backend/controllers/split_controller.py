"""HTTP controller layer for rent calculation and weight editing."""

from __future__ import annotations

from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, field_validator

from backend.controllers.dependencies import get_allocation_service, get_suggestion_service
from backend.domain.constraints import (
    InvalidRentError,
    InvalidRoomError,
    InvalidWeightsError,
)
from backend.domain.models import (
    Amenities,
    CustomFeature,
    Room,
    SplitForm,
    WeightField,
    WeightVector,
)
from backend.services.allocation_service import RentAllocationService
from backend.services.rebalance_service import rebalance
from backend.services.suggestion_service import (
    SuggestionError,
    SuggestionProviderError,
    SuggestionProviderNotConfiguredError,
    SuggestionService,
)
from backend.utils.config import get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)
settings = get_settings()

router = APIRouter(tags=["split"])


class CustomFeatureModel(BaseModel):
    name: str = Field(min_length=1)
    importance: int = Field(ge=1, le=5)


class AmenitiesModel(BaseModel):
    private_bathroom: bool = False
    closet: bool = False
    balcony: bool = False
    air_conditioning: bool = False


class RoomModel(BaseModel):
    """Input DTO validated before entering service layer."""

    id: str = Field(default_factory=lambda: uuid4().hex, min_length=1)
    name: str = Field(min_length=1)
    size: float = Field(ge=0.0, allow_inf_nan=False)
    amenities: AmenitiesModel = Field(default_factory=AmenitiesModel)
    noise_level: int = Field(ge=1, le=5)
    natural_light: int = Field(ge=1, le=5)
    custom_features: list[CustomFeatureModel] = Field(default_factory=list)

    def to_domain(self) -> Room:
        return Room(
            room_id=self.id,
            name=self.name,
            size=self.size,
            amenities=Amenities(**self.amenities.model_dump()),
            noise_level=self.noise_level,
            natural_light=self.natural_light,
            custom_features=tuple(
                CustomFeature(name=item.name, importance=item.importance)
                for item in self.custom_features
            ),
        )

    @classmethod
    def from_domain(cls, room: Room) -> "RoomModel":
        return cls(
            id=room.room_id,
            name=room.name,
            size=room.size,
            amenities=AmenitiesModel(
                private_bathroom=room.amenities.private_bathroom,
                closet=room.amenities.closet,
                balcony=room.amenities.balcony,
                air_conditioning=room.amenities.air_conditioning,
            ),
            noise_level=room.noise_level,
            natural_light=room.natural_light,
            custom_features=[
                CustomFeatureModel(name=item.name, importance=item.importance)
                for item in room.custom_features
            ],
        )


class WeightsModel(BaseModel):
    size: int = Field(ge=0, le=100)
    features: int = Field(ge=0, le=100)
    comfort: int = Field(ge=0, le=100)

    def to_domain(self) -> WeightVector:
        return WeightVector(size=self.size, features=self.features, comfort=self.comfort)


class SplitFormModel(BaseModel):
    total_rent: float = Field(ge=0.0, allow_inf_nan=False)
    currency: str = Field(default=settings.default_currency, min_length=1, max_length=8)
    rooms: list[RoomModel] = Field(min_length=1)
    weights: WeightsModel

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, value: str) -> str:
        return value.strip().upper()

    def to_domain(self) -> SplitForm:
        return SplitForm(
            total_rent=self.total_rent,
            currency=self.currency,
            rooms=tuple(room.to_domain() for room in self.rooms),
            weights=self.weights.to_domain(),
        )

    @classmethod
    def from_domain(cls, form: SplitForm) -> "SplitFormModel":
        return cls(
            total_rent=form.total_rent,
            currency=form.currency,
            rooms=[RoomModel.from_domain(room) for room in form.rooms],
            weights=WeightsModel(**form.weights.as_dict()),
        )


class CalculationResultModel(BaseModel):
    room_id: str
    room_name: str
    rent: float = Field(ge=0.0)
    percentage: float = Field(ge=0.0)
    raw_score: float = Field(ge=0.0)


class CalculateResponse(BaseModel):
    results: list[CalculationResultModel]
    total_rent: float = Field(ge=0.0)
    rent_sum: float = Field(ge=0.0)
    percentage_sum: float = Field(ge=0.0)
    currency: str
    currency_symbol: str


class RebalanceRequest(BaseModel):
    weights: WeightsModel
    changed_field: WeightField
    # Out-of-range slider values are clamped by the rebalancer, not rejected.
    new_value: int


class SuggestWeightsRequest(BaseModel):
    rooms: list[RoomModel] = Field(min_length=1)


class SuggestWeightsResponse(BaseModel):
    weights: WeightsModel
    explanation: str


@router.post(
    "/calculate",
    response_model=CalculateResponse,
    status_code=status.HTTP_200_OK,
)
async def calculate(
    payload: SplitFormModel,
    service: RentAllocationService = Depends(get_allocation_service),
) -> CalculateResponse:
    """Compute each room's share of the total rent."""
    try:
        results, summary = service.calculate(payload.to_domain())
    except (InvalidRentError, InvalidRoomError, InvalidWeightsError) as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected calculation failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Something went wrong during calculation.",
        ) from exc

    return CalculateResponse(
        results=[
            CalculationResultModel(
                room_id=item.room_id,
                room_name=item.room_name,
                rent=item.rent,
                percentage=item.percentage,
                raw_score=item.raw_score,
            )
            for item in results
        ],
        total_rent=summary.total_rent,
        rent_sum=summary.rent_sum,
        percentage_sum=summary.percentage_sum,
        currency=summary.currency,
        currency_symbol=summary.currency_symbol,
    )


@router.post(
    "/rebalance",
    response_model=WeightsModel,
    status_code=status.HTTP_200_OK,
)
async def rebalance_weights(payload: RebalanceRequest) -> WeightsModel:
    """Lock one weight to a new value and rebalance the other two."""
    result = rebalance(
        payload.weights.to_domain(),
        payload.changed_field,
        payload.new_value,
    )
    return WeightsModel(**result.as_dict())


@router.post(
    "/suggest_weights",
    response_model=SuggestWeightsResponse,
    status_code=status.HTTP_200_OK,
)
async def suggest_weights(
    payload: SuggestWeightsRequest,
    service: SuggestionService = Depends(get_suggestion_service),
) -> SuggestWeightsResponse:
    """Ask the configured provider for a weight vector and explanation."""
    try:
        suggestion = service.suggest_weights([room.to_domain() for room in payload.rooms])
    except SuggestionProviderNotConfiguredError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc
    except SuggestionProviderError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(exc),
        ) from exc
    except (SuggestionError, InvalidRoomError) as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    return SuggestWeightsResponse(
        weights=WeightsModel(**suggestion.weights.as_dict()),
        explanation=suggestion.explanation,
    )
