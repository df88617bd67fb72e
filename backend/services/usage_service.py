"""Community usage counters (splits helped, likes, shared links, ...)."""

from __future__ import annotations

from typing import Optional

from backend.repository.usage_repository import UsageCounterStore, build_usage_store
from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)


class UnknownStatError(Exception):
    """Raised when a counter name is not one of the configured stats."""


class UsageStatsService:
    def __init__(
        self,
        store: Optional[UsageCounterStore] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._store = store or build_usage_store(self._settings)

    def increment(self, stat_name: str) -> int:
        if stat_name not in self._settings.usage_stat_names:
            raise UnknownStatError(f"Unknown stat {stat_name!r}")
        new_count = self._store.increment(stat_name)
        logger.info("Usage counter incremented | stat=%s | count=%s", stat_name, new_count)
        return new_count

    def get_counters(self) -> dict[str, int]:
        stored = self._store.get_counters()
        return {name: int(stored.get(name, 0)) for name in self._settings.usage_stat_names}
