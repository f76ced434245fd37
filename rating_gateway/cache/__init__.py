"""
Condition cache.

- IRatingConditionCache: load/save/delete contract used by the collection
- ConditionCacheEntry / TaggedValue: persisted form of a condition state
- DefaultRatingConditionCache: JSON file cache
- InMemoryRatingConditionCache: cache without disk access
"""

from rating_gateway.cache.base import IRatingConditionCache, EntryListCache
from rating_gateway.cache.dto import ConditionCacheEntry, TaggedValue, parse_entry
from rating_gateway.cache.json_cache import (
    DefaultRatingConditionCache,
    resolve_cache_directory,
)
from rating_gateway.cache.memory import InMemoryRatingConditionCache

__all__ = [
    "IRatingConditionCache",
    "EntryListCache",
    "ConditionCacheEntry",
    "TaggedValue",
    "parse_entry",
    "DefaultRatingConditionCache",
    "resolve_cache_directory",
    "InMemoryRatingConditionCache",
]
