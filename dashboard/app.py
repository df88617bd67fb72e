"""Streamlit dashboard for FairSplit Rent."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pandas as pd
import requests
import streamlit as st

# ==========================================
# Configuration & Constants
# ==========================================
# Point this to your local FastAPI server
API_BASE_URL = "http://127.0.0.1:8000"
CURRENCIES = ["USD", "EUR", "GBP", "INR", "JPY", "CAD", "AUD"]
DEFAULT_WEIGHTS = {"size": 40, "features": 30, "comfort": 30}

st.set_page_config(
    page_title="FairSplit Rent",
    page_icon="🏠",
    layout="wide",
)


# ==========================================
# API Helper Functions
# ==========================================
def _post(path: str, payload: Dict[str, Any], timeout: int = 10) -> Optional[Dict[str, Any]]:
    try:
        response = requests.post(f"{API_BASE_URL}{path}", json=payload, timeout=timeout)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        st.error(f"Backend request failed: {e}")
        return None


def fetch_calculation(form: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    return _post("/calculate", form)


def fetch_rebalance(weights: Dict[str, int], field: str, value: int) -> Optional[Dict[str, Any]]:
    return _post(
        "/rebalance",
        {"weights": weights, "changed_field": field, "new_value": value},
        timeout=5,
    )


def fetch_share_token(form: Dict[str, Any]) -> Optional[str]:
    result = _post("/share_link", form, timeout=5)
    return result.get("token") if result else None


def load_share_token(token: str) -> Optional[Dict[str, Any]]:
    try:
        response = requests.get(f"{API_BASE_URL}/share_link/{token}", timeout=5)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        st.warning(f"Could not load data from the link: {e}")
        return None


def bump_stat(stat_name: str) -> None:
    try:
        requests.post(f"{API_BASE_URL}/stats/{stat_name}/increment", timeout=5)
    except requests.exceptions.RequestException as e:
        st.toast(f"Usage counter not updated: {e}")


# ==========================================
# Session State
# ==========================================
def _default_room(index: int) -> Dict[str, Any]:
    return {
        "name": f"Room {index + 1}",
        "size": 120.0,
        "amenities": {
            "private_bathroom": False,
            "closet": True,
            "balcony": False,
            "air_conditioning": False,
        },
        "noise_level": 3,
        "natural_light": 3,
        "custom_features": [],
    }


def _init_state() -> None:
    if "weights" not in st.session_state:
        st.session_state.weights = dict(DEFAULT_WEIGHTS)
    for name, value in st.session_state.weights.items():
        st.session_state.setdefault(f"weight_{name}", value)
    if "rooms" not in st.session_state:
        st.session_state.rooms = [_default_room(0), _default_room(1)]
    if "total_rent" not in st.session_state:
        st.session_state.total_rent = 2000.0
    if "currency" not in st.session_state:
        st.session_state.currency = "USD"


def _on_weight_change(field: str) -> None:
    new_value = int(st.session_state[f"weight_{field}"])
    result = fetch_rebalance(st.session_state.weights, field, new_value)
    if result:
        st.session_state.weights = result
        for name, value in result.items():
            st.session_state[f"weight_{name}"] = value


def _current_form() -> Dict[str, Any]:
    return {
        "total_rent": st.session_state.total_rent,
        "currency": st.session_state.currency,
        "rooms": st.session_state.rooms,
        "weights": st.session_state.weights,
    }


# ==========================================
# UI Sections
# ==========================================
def render_rooms() -> None:
    st.header("Step 1: Describe the rooms")
    col1, col2 = st.columns(2)
    with col1:
        st.session_state.total_rent = st.number_input(
            "Total monthly rent", min_value=0.0, value=float(st.session_state.total_rent)
        )
    with col2:
        current = st.session_state.currency
        st.session_state.currency = st.selectbox(
            "Currency",
            CURRENCIES,
            index=CURRENCIES.index(current) if current in CURRENCIES else 0,
        )

    rooms: List[Dict[str, Any]] = st.session_state.rooms
    for index, room in enumerate(rooms):
        with st.expander(room["name"], expanded=True):
            room["name"] = st.text_input("Name", room["name"], key=f"name_{index}")
            room["size"] = st.number_input(
                "Size (sq ft)", min_value=0.0, value=float(room["size"]), key=f"size_{index}"
            )
            amenity_cols = st.columns(4)
            for col, amenity in zip(amenity_cols, room["amenities"]):
                room["amenities"][amenity] = col.checkbox(
                    amenity.replace("_", " ").title(),
                    room["amenities"][amenity],
                    key=f"{amenity}_{index}",
                )
            room["noise_level"] = st.slider(
                "Noise (1 quiet - 5 noisy)", 1, 5, room["noise_level"], key=f"noise_{index}"
            )
            room["natural_light"] = st.slider(
                "Natural light (1 dark - 5 bright)", 1, 5, room["natural_light"], key=f"light_{index}"
            )

    if st.button("Add room"):
        rooms.append(_default_room(len(rooms)))
        st.rerun()


def render_weights() -> None:
    st.header("Step 2: Adjust weights")
    st.caption("The weights always add up to 100%.")
    cols = st.columns(3)
    for col, field in zip(cols, ("size", "features", "comfort")):
        with col:
            st.slider(
                f"{field.title()} weight",
                0,
                100,
                key=f"weight_{field}",
                on_change=_on_weight_change,
                args=(field,),
            )


def render_results() -> None:
    if not st.button("Calculate Fair Split", type="primary"):
        return
    with st.spinner("Calculating..."):
        result = fetch_calculation(_current_form())
    if not result:
        return

    bump_stat("helped")
    symbol = result.get("currency_symbol", "$")
    df = pd.DataFrame(result.get("results", []))
    if df.empty:
        st.info("Add at least one room to see a split.")
        return

    df = df[["room_name", "percentage", "rent"]].rename(
        columns={"room_name": "Room", "percentage": "Share (%)", "rent": f"Rent ({symbol})"}
    )
    st.subheader("Results")
    st.dataframe(df.round(2), use_container_width=True)
    st.bar_chart(df.set_index("Room")[f"Rent ({symbol})"])
    st.metric("Total", f"{symbol}{result.get('rent_sum', 0.0):.2f}")

    token = fetch_share_token(_current_form())
    if token:
        bump_stat("links")
        st.code(f"?data={token}")


# ==========================================
# Main App Router
# ==========================================
def main() -> None:
    _init_state()
    shared = st.query_params.get("data")
    if shared and "loaded_share" not in st.session_state:
        form = load_share_token(shared)
        if form:
            st.session_state.total_rent = form["total_rent"]
            st.session_state.currency = form["currency"]
            st.session_state.rooms = form["rooms"]
            st.session_state.weights = form["weights"]
            for name, value in form["weights"].items():
                st.session_state[f"weight_{name}"] = value
            st.toast("Loaded your shared rent data.")
        st.session_state.loaded_share = True

    st.sidebar.title("FairSplit Rent")
    st.sidebar.caption("Split rent by size, features, and comfort.")

    render_rooms()
    render_weights()
    render_results()


if __name__ == "__main__":
    main()
