"""In-memory condition cache, for tests and short-lived gateways."""

from typing import Any, Dict, List, Optional

from rating_gateway.cache.base import EntryListCache
from rating_gateway.cache.dto import ConditionCacheEntry, parse_entry
from rating_gateway.logger import logger


class InMemoryRatingConditionCache(EntryListCache):
    """
    Condition cache that keeps its entries in memory.

    Entries are stored in their JSON form, so values go through the same
    tagging as DefaultRatingConditionCache.
    """

    def __init__(self, raw_entries: Optional[List[Dict[str, Any]]] = None):
        super().__init__()
        self.raw_entries: List[Dict[str, Any]] = list(raw_entries or [])
        self.write_count = 0

    def _read_entries(self) -> List[ConditionCacheEntry]:
        entries = []
        for item in self.raw_entries:
            try:
                entries.append(parse_entry(item))
            except ValueError as e:
                logger.warning("Skipping malformed condition cache entry", error=str(e))
        return entries

    def _write_entries(
        self,
        entries: List[ConditionCacheEntry],
        condition_name: Optional[str]
    ) -> None:
        self.raw_entries = [entry.model_dump(mode="json") for entry in entries]
        self.write_count += 1
