from __future__ import annotations

import base64
import json
from dataclasses import replace
from typing import Sequence

import pytest
from fastapi.testclient import TestClient

from app import create_app
from backend.domain.models import Room, WeightSuggestion, WeightVector
from backend.utils.config import get_settings


class StaticProvider:
    def suggest(self, rooms: Sequence[Room]) -> WeightSuggestion:
        return WeightSuggestion(
            weights=WeightVector(size=50, features=30, comfort=20),
            explanation=f"{len(rooms)} rooms differ mostly in size.",
        )


def _build_test_settings(tmp_path, filename: str):
    get_settings.cache_clear()
    base = get_settings()
    return replace(
        base,
        database_path=tmp_path / filename,
        usage_store_backend="sqlite",
    )


def _form_payload() -> dict:
    return {
        "total_rent": 1000,
        "currency": "usd",
        "rooms": [
            {
                "id": "a",
                "name": "Master Bedroom",
                "size": 150,
                "amenities": {"private_bathroom": True},
                "noise_level": 2,
                "natural_light": 5,
            },
            {
                "id": "b",
                "name": "Small Bedroom",
                "size": 100,
                "noise_level": 3,
                "natural_light": 3,
            },
        ],
        "weights": {"size": 40, "features": 30, "comfort": 30},
    }


@pytest.fixture
def client(tmp_path):
    settings = _build_test_settings(tmp_path, "api_flow.db")
    app = create_app(settings, suggestion_provider=StaticProvider())
    with TestClient(app) as test_client:
        yield test_client


def test_calculate_returns_reference_split(client):
    response = client.post("/calculate", json=_form_payload())

    assert response.status_code == 200
    body = response.json()
    assert [item["room_name"] for item in body["results"]] == ["Master Bedroom", "Small Bedroom"]
    assert body["results"][0]["rent"] == pytest.approx(704.35, abs=0.01)
    assert body["results"][1]["rent"] == pytest.approx(295.65, abs=0.01)
    assert body["rent_sum"] == pytest.approx(1000.0)
    assert body["percentage_sum"] == pytest.approx(100.0)
    assert body["currency"] == "USD"
    assert body["currency_symbol"] == "$"


def test_calculate_rejects_out_of_range_inputs(client):
    payload = _form_payload()
    payload["rooms"][0]["noise_level"] = 7
    assert client.post("/calculate", json=payload).status_code == 422

    payload = _form_payload()
    payload["weights"]["size"] = 140
    assert client.post("/calculate", json=payload).status_code == 422

    payload = _form_payload()
    payload["rooms"] = []
    assert client.post("/calculate", json=payload).status_code == 422


def test_calculate_rejects_non_finite_rent_without_server_error(client):
    payload = _form_payload()
    payload["total_rent"] = float("inf")

    response = client.post(
        "/calculate",
        content=json.dumps(payload),
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 422

    payload = _form_payload()
    payload["rooms"][1]["size"] = float("nan")
    response = client.post(
        "/calculate",
        content=json.dumps(payload),
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 422


def test_rebalance_endpoint_keeps_sum(client):
    response = client.post(
        "/rebalance",
        json={
            "weights": {"size": 50, "features": 50, "comfort": 0},
            "changed_field": "comfort",
            "new_value": 100,
        },
    )

    assert response.status_code == 200
    assert response.json() == {"size": 0, "features": 0, "comfort": 100}


def test_rebalance_endpoint_clamps_new_value(client):
    response = client.post(
        "/rebalance",
        json={
            "weights": {"size": 40, "features": 30, "comfort": 30},
            "changed_field": "size",
            "new_value": 250,
        },
    )

    assert response.status_code == 200
    assert response.json() == {"size": 100, "features": 0, "comfort": 0}


def test_rebalance_endpoint_rejects_unknown_field(client):
    response = client.post(
        "/rebalance",
        json={
            "weights": {"size": 40, "features": 30, "comfort": 30},
            "changed_field": "location",
            "new_value": 10,
        },
    )
    assert response.status_code == 422


def test_suggest_weights_uses_configured_provider(client):
    response = client.post("/suggest_weights", json={"rooms": _form_payload()["rooms"]})

    assert response.status_code == 200
    body = response.json()
    assert body["weights"] == {"size": 50, "features": 30, "comfort": 20}
    assert body["explanation"] == "2 rooms differ mostly in size."


def test_suggest_weights_without_provider_is_unavailable(tmp_path):
    settings = _build_test_settings(tmp_path, "no_provider.db")
    with TestClient(create_app(settings)) as test_client:
        response = test_client.post("/suggest_weights", json={"rooms": _form_payload()["rooms"]})
    assert response.status_code == 503


def test_share_link_round_trip(client):
    create_response = client.post("/share_link", json=_form_payload())
    assert create_response.status_code == 200
    token = create_response.json()["token"]

    open_response = client.get(f"/share_link/{token}")
    assert open_response.status_code == 200
    body = open_response.json()
    assert body["total_rent"] == 1000.0
    assert body["currency"] == "USD"
    assert [room["id"] for room in body["rooms"]] == ["a", "b"]
    assert body["rooms"][0]["amenities"]["private_bathroom"] is True
    assert body["weights"] == {"size": 40, "features": 30, "comfort": 30}


def test_malformed_share_link_is_bad_request(client):
    response = client.get("/share_link/definitely-not-a-form")
    assert response.status_code == 400


def _raw_share_token(form: dict) -> str:
    raw = json.dumps(form).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _share_form(**overrides) -> dict:
    form = {
        "totalRent": 1000,
        "currency": "USD",
        "rooms": [{"id": "a", "name": "Den", "size": 100, "noiseLevel": 3, "naturalLight": 3}],
        "weights": {"size": 40, "features": 30, "comfort": 30},
    }
    form.update(overrides)
    return form


@pytest.mark.parametrize(
    "overrides",
    [
        {"currency": "DOLLARSXYZ"},
        {"rooms": [{"id": "a", "name": "", "size": 100, "noiseLevel": 3, "naturalLight": 3}]},
        {"rooms": []},
    ],
)
def test_share_link_the_form_would_reject_is_bad_request(client, overrides):
    response = client.get(f"/share_link/{_raw_share_token(_share_form(**overrides))}")
    assert response.status_code == 400


def test_usage_counters_increment(client):
    before = client.get("/stats").json()
    assert before["helped"] == 0

    response = client.post("/stats/helped/increment")
    assert response.status_code == 200
    assert response.json() == {"stat_name": "helped", "count": 1}
    assert client.get("/stats").json()["helped"] == 1

    assert client.post("/stats/unknown/increment").status_code == 404


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
