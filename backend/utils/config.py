"""Environment-driven application settings."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[2]

DEFAULT_CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "INR": "₹",
    "JPY": "¥",
    "CAD": "$",
    "AUD": "$",
}

DEFAULT_USAGE_STATS: tuple[str, ...] = ("helped", "likes", "dislikes", "pdfs", "links")


def _env_int(name: str, default: int) -> int:
    raw_value = os.getenv(name)
    if raw_value is None or not raw_value.strip():
        return default
    try:
        return int(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw_value!r}") from exc


@dataclass(frozen=True)
class Settings:
    app_name: str = "FairSplit Rent"
    app_version: str = "1.0.0"
    log_level: str = "INFO"
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    usage_store_backend: str = "sqlite"
    database_path: Path = PROJECT_ROOT / "data" / "fairsplit.db"
    usage_stat_names: tuple[str, ...] = DEFAULT_USAGE_STATS

    default_currency: str = "USD"
    fallback_currency_symbol: str = "$"
    currency_symbols: dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_CURRENCY_SYMBOLS)
    )

    share_token_max_length: int = 16384


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build settings once per process from FAIRSPLIT_* environment variables."""
    database_path = os.getenv("FAIRSPLIT_DATABASE_PATH")
    return Settings(
        log_level=os.getenv("FAIRSPLIT_LOG_LEVEL", "INFO"),
        api_host=os.getenv("FAIRSPLIT_API_HOST", "127.0.0.1"),
        api_port=_env_int("FAIRSPLIT_API_PORT", 8000),
        usage_store_backend=os.getenv("FAIRSPLIT_USAGE_STORE", "sqlite").lower(),
        database_path=(
            Path(database_path)
            if database_path
            else PROJECT_ROOT / "data" / "fairsplit.db"
        ),
        default_currency=os.getenv("FAIRSPLIT_DEFAULT_CURRENCY", "USD").upper(),
        share_token_max_length=_env_int("FAIRSPLIT_SHARE_TOKEN_MAX_LENGTH", 16384),
    )
