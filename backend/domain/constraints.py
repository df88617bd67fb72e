"""Domain-level validation rules for rooms and weight vectors."""

from __future__ import annotations

import math
from typing import Sequence

from backend.domain.models import Room, WeightVector


MIN_RATING = 1
MAX_RATING = 5
MIN_WEIGHT = 0
MAX_WEIGHT = 100
WEIGHT_TOTAL = 100


class InvalidRoomError(ValueError):
    """Raised when a room carries attributes the scoring model cannot use."""


class InvalidWeightsError(ValueError):
    """Raised when a weight vector is out of range or does not sum to 100."""


class InvalidRentError(ValueError):
    """Raised when the total rent is not a finite, non-negative number."""


def _is_rating(value: object) -> bool:
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and MIN_RATING <= value <= MAX_RATING
    )


def validate_room(room: Room) -> None:
    label = room.name or room.room_id
    if not isinstance(room.size, (int, float)) or isinstance(room.size, bool):
        raise InvalidRoomError(f"room {label!r}: size must be a number")
    if not math.isfinite(room.size) or room.size < 0:
        raise InvalidRoomError(f"room {label!r}: size must be a finite number >= 0")
    if not _is_rating(room.noise_level):
        raise InvalidRoomError(f"room {label!r}: noise_level must be an integer in 1-5")
    if not _is_rating(room.natural_light):
        raise InvalidRoomError(f"room {label!r}: natural_light must be an integer in 1-5")
    for feature in room.custom_features:
        if not _is_rating(feature.importance):
            raise InvalidRoomError(
                f"room {label!r}: custom feature {feature.name!r} importance must be an integer in 1-5"
            )


def validate_rooms(rooms: Sequence[Room]) -> None:
    for room in rooms:
        validate_room(room)


def validate_total_rent(total_rent: float) -> None:
    if not isinstance(total_rent, (int, float)) or isinstance(total_rent, bool):
        raise InvalidRentError("total_rent must be a number")
    if not math.isfinite(total_rent) or total_rent < 0:
        raise InvalidRentError("total_rent must be a finite number >= 0")


def validate_weight_vector(weights: WeightVector, *, require_total: bool = True) -> None:
    for name, value in weights.as_dict().items():
        if not isinstance(value, int) or isinstance(value, bool):
            raise InvalidWeightsError(f"{name} weight must be an integer")
        if not MIN_WEIGHT <= value <= MAX_WEIGHT:
            raise InvalidWeightsError(f"{name} weight must be between 0 and 100")
    if require_total and weights.total != WEIGHT_TOTAL:
        raise InvalidWeightsError(
            f"weights must sum to {WEIGHT_TOTAL}, got {weights.total}"
        )
