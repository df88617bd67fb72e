"""Domain models for room scoring, weight rebalancing, and rent allocation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class WeightField(str, Enum):
    SIZE = "size"
    FEATURES = "features"
    COMFORT = "comfort"


WEIGHT_FIELDS: tuple[WeightField, ...] = (
    WeightField.SIZE,
    WeightField.FEATURES,
    WeightField.COMFORT,
)


@dataclass(frozen=True)
class CustomFeature:
    name: str
    importance: int


@dataclass(frozen=True)
class Amenities:
    private_bathroom: bool = False
    closet: bool = False
    balcony: bool = False
    air_conditioning: bool = False

    def count(self) -> int:
        return sum(
            1
            for flag in (
                self.private_bathroom,
                self.closet,
                self.balcony,
                self.air_conditioning,
            )
            if flag
        )


@dataclass(frozen=True)
class Room:
    room_id: str
    name: str
    size: float
    amenities: Amenities = field(default_factory=Amenities)
    noise_level: int = 3
    natural_light: int = 3
    custom_features: tuple[CustomFeature, ...] = ()


@dataclass(frozen=True)
class WeightVector:
    size: int
    features: int
    comfort: int

    @property
    def total(self) -> int:
        return self.size + self.features + self.comfort

    def get(self, weight_field: WeightField) -> int:
        return getattr(self, WeightField(weight_field).value)

    def as_dict(self) -> dict[str, int]:
        return {
            "size": self.size,
            "features": self.features,
            "comfort": self.comfort,
        }


@dataclass(frozen=True)
class CalculationResult:
    room_id: str
    room_name: str
    rent: float
    percentage: float
    raw_score: float


@dataclass(frozen=True)
class AllocationSummary:
    total_rent: float
    rent_sum: float
    percentage_sum: float
    currency: str
    currency_symbol: str


@dataclass(frozen=True)
class SplitForm:
    """Everything a user enters; the unit the share link round-trips."""

    total_rent: float
    currency: str
    rooms: tuple[Room, ...]
    weights: WeightVector


@dataclass(frozen=True)
class WeightSuggestion:
    weights: WeightVector
    explanation: str
