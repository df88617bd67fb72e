"""Opaque share-link tokens for a rent split form.

A token is the form serialized as compact JSON (camelCase keys) and encoded
as URL-safe base64 without padding. Nothing is stored server-side: the token
is the whole state.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from backend.domain.constraints import validate_rooms, validate_total_rent
from backend.domain.models import (
    Amenities,
    CustomFeature,
    Room,
    SplitForm,
    WeightVector,
)
from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)


class ShareLinkError(Exception):
    """Base exception for share-link failures."""


class ShareLinkDecodeError(ShareLinkError):
    """Raised when a token cannot be turned back into a split form."""


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CustomFeaturePayload(_CamelModel):
    name: str = Field(min_length=1)
    importance: int = Field(ge=1, le=5)


class RoomPayload(_CamelModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    size: float = Field(ge=0.0, allow_inf_nan=False)
    has_private_bathroom: bool = False
    has_closet: bool = False
    has_balcony: bool = False
    has_air_conditioning: bool = False
    noise_level: int = Field(ge=1, le=5)
    natural_light: int = Field(ge=1, le=5)
    custom_features: list[CustomFeaturePayload] = Field(default_factory=list)


class WeightsPayload(_CamelModel):
    size: int = Field(ge=0, le=100)
    features: int = Field(ge=0, le=100)
    comfort: int = Field(ge=0, le=100)


class SplitFormPayload(_CamelModel):
    total_rent: float = Field(ge=0.0, allow_inf_nan=False)
    currency: str = Field(min_length=1, max_length=8)
    rooms: list[RoomPayload] = Field(min_length=1)
    weights: WeightsPayload


def form_to_payload(form: SplitForm) -> SplitFormPayload:
    return SplitFormPayload(
        total_rent=form.total_rent,
        currency=form.currency,
        rooms=[
            RoomPayload(
                id=room.room_id,
                name=room.name,
                size=room.size,
                has_private_bathroom=room.amenities.private_bathroom,
                has_closet=room.amenities.closet,
                has_balcony=room.amenities.balcony,
                has_air_conditioning=room.amenities.air_conditioning,
                noise_level=room.noise_level,
                natural_light=room.natural_light,
                custom_features=[
                    CustomFeaturePayload(name=feature.name, importance=feature.importance)
                    for feature in room.custom_features
                ],
            )
            for room in form.rooms
        ],
        weights=WeightsPayload(**form.weights.as_dict()),
    )


def payload_to_form(payload: SplitFormPayload) -> SplitForm:
    return SplitForm(
        total_rent=payload.total_rent,
        currency=payload.currency,
        rooms=tuple(
            Room(
                room_id=room.id,
                name=room.name,
                size=room.size,
                amenities=Amenities(
                    private_bathroom=room.has_private_bathroom,
                    closet=room.has_closet,
                    balcony=room.has_balcony,
                    air_conditioning=room.has_air_conditioning,
                ),
                noise_level=room.noise_level,
                natural_light=room.natural_light,
                custom_features=tuple(
                    CustomFeature(name=feature.name, importance=feature.importance)
                    for feature in room.custom_features
                ),
            )
            for room in payload.rooms
        ),
        weights=WeightVector(
            size=payload.weights.size,
            features=payload.weights.features,
            comfort=payload.weights.comfort,
        ),
    )


class ShareLinkService:
    """Encodes and decodes split forms to transport-safe tokens."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()

    def encode(self, form: SplitForm) -> str:
        payload = form_to_payload(form).model_dump(by_alias=True)
        raw = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
        token = base64.urlsafe_b64encode(raw.encode("utf-8")).rstrip(b"=").decode("ascii")
        if len(token) > self._settings.share_token_max_length:
            raise ShareLinkError(
                f"Form is too large to share ({len(token)} characters)."
            )
        logger.info("Share link encoded | rooms=%s | token_length=%s", len(form.rooms), len(token))
        return token

    def decode(self, token: str) -> SplitForm:
        cleaned = token.strip()
        if not cleaned:
            raise ShareLinkDecodeError("Share token is empty.")
        if len(cleaned) > self._settings.share_token_max_length:
            raise ShareLinkDecodeError("Share token is too long.")

        # Tokens produced with the standard alphabet are accepted as well.
        normalized = cleaned.replace("+", "-").replace("/", "_").rstrip("=")
        padded = normalized + "=" * (-len(normalized) % 4)
        try:
            raw = base64.b64decode(padded, altchars=b"-_", validate=True)
            payload = SplitFormPayload.model_validate(json.loads(raw.decode("utf-8")))
            form = payload_to_form(payload)
            validate_total_rent(form.total_rent)
            validate_rooms(form.rooms)
        except (binascii.Error, ValueError) as exc:
            logger.warning("Share link decode failed | error=%s", exc)
            raise ShareLinkDecodeError("Could not load data from the link.") from exc
        return form
