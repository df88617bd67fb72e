"""Adapter around an external weight-suggestion provider.

The provider (typically a hosted language model) is not implemented here. It is
treated as an alternate producer of a weight vector and its output is held to
the same sum-to-100 rule as any user-entered vector.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from backend.domain.constraints import (
    InvalidWeightsError,
    validate_rooms,
    validate_weight_vector,
)
from backend.domain.models import Room, WeightSuggestion
from backend.utils.logger import get_logger


logger = get_logger(__name__)


class SuggestionError(Exception):
    """Base exception for weight suggestion failures."""


class SuggestionProviderNotConfiguredError(SuggestionError):
    """Raised when no suggestion provider is wired into the service."""


class SuggestionProviderError(SuggestionError):
    """Raised when the provider fails or returns an unusable vector."""


class WeightSuggestionProvider(Protocol):
    def suggest(self, rooms: Sequence[Room]) -> WeightSuggestion:
        ...


class SuggestionService:
    """Fetches and validates weight suggestions for a set of rooms."""

    def __init__(self, provider: Optional[WeightSuggestionProvider] = None) -> None:
        self._provider = provider

    @property
    def provider_configured(self) -> bool:
        return self._provider is not None

    def suggest_weights(self, rooms: Sequence[Room]) -> WeightSuggestion:
        if self._provider is None:
            raise SuggestionProviderNotConfiguredError(
                "No weight suggestion provider is configured."
            )
        if not rooms:
            raise SuggestionError("At least one room is required for a suggestion.")
        validate_rooms(rooms)

        try:
            suggestion = self._provider.suggest(rooms)
        except SuggestionError:
            raise
        except Exception as exc:
            logger.warning("Weight suggestion provider failed | error=%s", exc)
            raise SuggestionProviderError(
                "Could not get suggestions from the provider. Please try again later."
            ) from exc

        try:
            validate_weight_vector(suggestion.weights)
        except InvalidWeightsError as exc:
            logger.warning(
                "Rejected suggested weights | weights=%s | reason=%s",
                suggestion.weights.as_dict(),
                exc,
            )
            raise SuggestionProviderError(f"Provider returned invalid weights: {exc}") from exc

        logger.info(
            "Weight suggestion accepted | rooms=%s | weights=%s",
            len(rooms),
            suggestion.weights.as_dict(),
        )
        return suggestion
