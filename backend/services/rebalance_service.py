"""Keep the size/features/comfort weights summing to 100 while one is edited.

The edited field is locked to its new value and the two untouched fields share
the remaining budget in proportion to their current values. Shares are rounded
half-up; any rounding residual goes to the *designated* untouched field, which
is the one with the larger current value (ties resolved in size, features,
comfort order).
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from backend.domain.constraints import MAX_WEIGHT, MIN_WEIGHT, WEIGHT_TOTAL
from backend.domain.models import WEIGHT_FIELDS, WeightField, WeightVector
from backend.utils.logger import get_logger


logger = get_logger(__name__)


def _round_half_up(value: float) -> int:
    return int(Decimal(repr(float(value))).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def clamp_weight(value: float) -> int:
    return max(MIN_WEIGHT, min(MAX_WEIGHT, _round_half_up(value)))


def _untouched_fields(
    current: WeightVector,
    changed_field: WeightField,
) -> tuple[WeightField, WeightField]:
    """Return the two other fields, designated residual receiver first."""
    first, second = (item for item in WEIGHT_FIELDS if item != changed_field)
    if current.get(second) > current.get(first):
        return second, first
    return first, second


def _split_budget(budget: int, primary: int, secondary: int) -> tuple[float, float]:
    total = primary + secondary
    if total > 0:
        return budget * primary / total, budget * secondary / total
    # Both untouched fields are empty: share evenly, odd unit to the primary.
    return float(budget - budget // 2), float(budget // 2)


def _restore_total(
    values: dict[WeightField, int],
    untouched: tuple[WeightField, WeightField],
) -> None:
    """Clamp the untouched fields at zero and push any residual back onto them.

    The proportional split never hands the designated field a negative value,
    so from `rebalance` this is a guard on the output rather than a live branch.
    """
    for target in untouched:
        values[target] = max(MIN_WEIGHT, values[target])
    for target in untouched:
        residual = WEIGHT_TOTAL - sum(values.values())
        if residual == 0:
            break
        values[target] = max(MIN_WEIGHT, values[target] + residual)


def rebalance(
    current: WeightVector,
    changed_field: Union[WeightField, str],
    new_value: float,
) -> WeightVector:
    """Set `changed_field` to `new_value` and rebalance the other two fields."""
    changed_field = WeightField(changed_field)
    locked_value = clamp_weight(new_value)

    if current.total == WEIGHT_TOTAL and current.get(changed_field) == locked_value:
        return current

    primary, secondary = _untouched_fields(current, changed_field)
    budget = WEIGHT_TOTAL - locked_value
    primary_share, secondary_share = _split_budget(
        budget,
        max(0, current.get(primary)),
        max(0, current.get(secondary)),
    )

    values: dict[WeightField, int] = {
        changed_field: locked_value,
        primary: _round_half_up(primary_share),
        secondary: _round_half_up(secondary_share),
    }
    values[primary] += WEIGHT_TOTAL - sum(values.values())
    _restore_total(values, (primary, secondary))

    result = WeightVector(
        size=values[WeightField.SIZE],
        features=values[WeightField.FEATURES],
        comfort=values[WeightField.COMFORT],
    )
    logger.debug(
        "Weights rebalanced | field=%s | value=%s | before=%s | after=%s",
        changed_field.value,
        locked_value,
        current.as_dict(),
        result.as_dict(),
    )
    return result
