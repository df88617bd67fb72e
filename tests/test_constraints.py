"""Tests for room and weight vector validation rules."""

from __future__ import annotations

import math

import pytest

from backend.domain.constraints import (
    InvalidRentError,
    InvalidRoomError,
    InvalidWeightsError,
    validate_room,
    validate_total_rent,
    validate_weight_vector,
)
from backend.domain.models import CustomFeature, Room, WeightVector


def valid_room(**overrides) -> Room:
    """Return a valid baseline Room, optionally overriding fields."""
    defaults = {
        "room_id": "r1",
        "name": "Corner Room",
        "size": 140.0,
        "noise_level": 2,
        "natural_light": 4,
    }
    defaults.update(overrides)
    return Room(**defaults)


# --- Baseline pass ---

def test_valid_room_passes() -> None:
    validate_room(valid_room())


def test_valid_weights_pass() -> None:
    validate_weight_vector(WeightVector(size=40, features=30, comfort=30))


# --- Room size ---

def test_negative_size_raises() -> None:
    with pytest.raises(InvalidRoomError):
        validate_room(valid_room(size=-0.5))


def test_infinite_size_raises() -> None:
    with pytest.raises(InvalidRoomError):
        validate_room(valid_room(size=math.inf))


def test_zero_size_passes() -> None:
    """Zero is a valid size; the engine falls back to a uniform size score."""
    validate_room(valid_room(size=0))


# --- Ratings ---

@pytest.mark.parametrize("value", [0, 6, 2.5, True])
def test_noise_level_outside_integer_range_raises(value) -> None:
    with pytest.raises(InvalidRoomError):
        validate_room(valid_room(noise_level=value))


@pytest.mark.parametrize("value", [1, 5])
def test_natural_light_boundaries_pass(value: int) -> None:
    validate_room(valid_room(natural_light=value))


def test_custom_feature_importance_zero_raises() -> None:
    with pytest.raises(InvalidRoomError, match="Bay window"):
        validate_room(
            valid_room(custom_features=(CustomFeature(name="Bay window", importance=0),))
        )


def test_invalid_room_error_is_value_error() -> None:
    assert issubclass(InvalidRoomError, ValueError)


# --- Weights ---

def test_weights_not_summing_to_100_raise() -> None:
    with pytest.raises(InvalidWeightsError):
        validate_weight_vector(WeightVector(size=40, features=30, comfort=20))


def test_weights_sum_check_can_be_skipped() -> None:
    validate_weight_vector(WeightVector(size=0, features=0, comfort=0), require_total=False)


def test_negative_weight_raises_even_without_sum_check() -> None:
    with pytest.raises(InvalidWeightsError):
        validate_weight_vector(WeightVector(size=-1, features=51, comfort=50), require_total=False)


def test_float_weight_raises() -> None:
    with pytest.raises(InvalidWeightsError):
        validate_weight_vector(WeightVector(size=40.5, features=29.5, comfort=30))


# --- Total rent ---

def test_negative_total_rent_raises() -> None:
    with pytest.raises(InvalidRentError):
        validate_total_rent(-10)


def test_nan_total_rent_raises() -> None:
    with pytest.raises(InvalidRentError):
        validate_total_rent(math.nan)


def test_zero_total_rent_passes() -> None:
    validate_total_rent(0)


def test_infinite_total_rent_raises() -> None:
    with pytest.raises(InvalidRentError):
        validate_total_rent(math.inf)


def test_invalid_rent_error_is_value_error() -> None:
    assert issubclass(InvalidRentError, ValueError)
