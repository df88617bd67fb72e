"""Room scoring and proportional rent allocation."""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from backend.domain.constraints import (
    WEIGHT_TOTAL,
    validate_rooms,
    validate_total_rent,
    validate_weight_vector,
)
from backend.domain.models import (
    AllocationSummary,
    CalculationResult,
    Room,
    SplitForm,
    WeightVector,
)
from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)

# Comfort is (quietness + light) on two 1-5 scales.
NOISE_INVERSION_BASE = 6
MAX_COMFORT_POINTS = 10.0
CUSTOM_FEATURE_SCALE = 5.0


def feature_points(room: Room) -> float:
    """Amenity count plus custom features normalized to 0-1 each."""
    return room.amenities.count() + sum(
        feature.importance / CUSTOM_FEATURE_SCALE for feature in room.custom_features
    )


def compute_size_scores(rooms: Sequence[Room]) -> np.ndarray:
    sizes = np.array([float(room.size) for room in rooms], dtype=float)
    total_size = float(sizes.sum())
    if total_size > 0:
        return sizes / total_size
    return np.full(len(rooms), 1.0 / len(rooms))


def compute_feature_scores(rooms: Sequence[Room]) -> np.ndarray:
    """Feature score relative to the best-equipped room in the batch."""
    points = np.array([feature_points(room) for room in rooms], dtype=float)
    return points / max(1.0, float(points.max()))


def compute_comfort_scores(rooms: Sequence[Room]) -> np.ndarray:
    noise = np.array([room.noise_level for room in rooms], dtype=float)
    light = np.array([room.natural_light for room in rooms], dtype=float)
    return ((NOISE_INVERSION_BASE - noise) + light) / MAX_COMFORT_POINTS


def score_rooms(rooms: Sequence[Room], weights: WeightVector) -> np.ndarray:
    """Return the weighted combined score of every room, in input order."""
    if not rooms:
        return np.zeros(0, dtype=float)
    return (
        compute_size_scores(rooms) * weights.size
        + compute_feature_scores(rooms) * weights.features
        + compute_comfort_scores(rooms) * weights.comfort
    )


def allocate(
    total_rent: float,
    rooms: Sequence[Room],
    weights: WeightVector,
) -> list[CalculationResult]:
    """Split `total_rent` across `rooms` proportionally to their scores."""
    validate_total_rent(total_rent)
    validate_rooms(rooms)
    validate_weight_vector(weights, require_total=False)
    if not rooms:
        return []
    if weights.total != WEIGHT_TOTAL:
        logger.warning(
            "Allocating with weights that do not sum to %s | weights=%s",
            WEIGHT_TOTAL,
            weights.as_dict(),
        )

    scores = score_rooms(rooms, weights)
    total_score = float(scores.sum())
    room_count = len(rooms)

    if total_score == 0:
        logger.info("All room scores are zero; falling back to equal split | rooms=%s", room_count)
        equal_rent = total_rent / room_count
        equal_percentage = 100.0 / room_count
        return [
            CalculationResult(
                room_id=room.room_id,
                room_name=room.name,
                rent=float(equal_rent),
                percentage=float(equal_percentage),
                raw_score=0.0,
            )
            for room in rooms
        ]

    shares = scores / total_score
    return [
        CalculationResult(
            room_id=room.room_id,
            room_name=room.name,
            rent=float(share * total_rent),
            percentage=float(share * 100.0),
            raw_score=float(score),
        )
        for room, score, share in zip(rooms, scores, shares)
    ]


def summarize_allocation(
    results: Sequence[CalculationResult],
    *,
    total_rent: float,
    currency: str,
    settings: Optional[Settings] = None,
) -> AllocationSummary:
    """Totals row shown under the per-room breakdown; currency is a label only."""
    resolved = settings or get_settings()
    code = currency.upper()
    symbol = resolved.currency_symbols.get(code, resolved.fallback_currency_symbol)
    return AllocationSummary(
        total_rent=float(total_rent),
        rent_sum=float(sum(item.rent for item in results)),
        percentage_sum=float(sum(item.percentage for item in results)),
        currency=code,
        currency_symbol=symbol,
    )


class RentAllocationService:
    """Runs the allocation engine for a submitted split form."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()

    def calculate(self, form: SplitForm) -> tuple[list[CalculationResult], AllocationSummary]:
        results = allocate(form.total_rent, form.rooms, form.weights)
        summary = summarize_allocation(
            results,
            total_rent=form.total_rent,
            currency=form.currency,
            settings=self._settings,
        )
        logger.info(
            "Rent split computed | rooms=%s | total_rent=%.2f | currency=%s | weights=%s",
            len(results),
            summary.total_rent,
            summary.currency,
            form.weights.as_dict(),
        )
        return results, summary
