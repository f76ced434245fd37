"""Protocol and shared base for condition caches."""

from typing import TYPE_CHECKING, Dict, List, Optional, Protocol, runtime_checkable

from rating_gateway.cache.dto import ConditionCacheEntry

if TYPE_CHECKING:
    from rating_gateway.conditions.base import ICachableCondition


@runtime_checkable
class IRatingConditionCache(Protocol):
    """
    Persists condition states across process lifetimes.

    Implementations must treat a missing or unreadable store as empty on
    load, and must raise on write failures instead of dropping data.
    """

    def load(self, condition_name: str, condition: "ICachableCondition") -> bool:
        """
        Push the stored value for condition_name into the condition.

        Returns:
            True if a value was found and applied, False otherwise
        """
        ...

    def save(self, condition_name: str, condition: "ICachableCondition") -> None:
        """Store the condition's current state, replacing any previous entry."""
        ...

    def delete(self, condition_name: str) -> None:
        """Remove the stored entry for condition_name if there is one."""
        ...


class EntryListCache:
    """
    Shared load/save/delete logic for caches backed by one list of entries.

    The list is read lazily on first access and written back whole after
    every change. Subclasses provide _read_entries() and _write_entries().
    """

    def __init__(self):
        self._entries: Optional[Dict[str, ConditionCacheEntry]] = None

    @property
    def entries(self) -> Dict[str, ConditionCacheEntry]:
        if self._entries is None:
            self._entries = {}
            for entry in self._read_entries():
                self._entries[entry.condition_name] = entry
        return self._entries

    def load(self, condition_name: str, condition: "ICachableCondition") -> bool:
        entry = self.entries.get(condition_name)
        if entry is None or entry.current_value.type == "none":
            return False

        condition.manipulate_state_with(entry.state)
        # A stored value of another type is ignored by the condition
        return condition.to_cache_entry(condition_name) == entry

    def save(self, condition_name: str, condition: "ICachableCondition") -> None:
        entries = dict(self.entries)
        entries[condition_name] = condition.to_cache_entry(condition_name)
        self._commit(entries, condition_name)

    def delete(self, condition_name: str) -> None:
        if condition_name not in self.entries:
            return
        entries = dict(self.entries)
        del entries[condition_name]
        self._commit(entries, condition_name)

    def clear(self) -> None:
        """Drop every stored entry."""
        self._commit({}, None)

    def _commit(self, entries: Dict[str, ConditionCacheEntry], condition_name: Optional[str]) -> None:
        # Memory only changes once the write went through
        self._write_entries(list(entries.values()), condition_name)
        self._entries = entries

    def _read_entries(self) -> List[ConditionCacheEntry]:
        raise NotImplementedError

    def _write_entries(
        self,
        entries: List[ConditionCacheEntry],
        condition_name: Optional[str]
    ) -> None:
        raise NotImplementedError

    def __contains__(self, condition_name: str) -> bool:
        return condition_name in self.entries

    def __len__(self) -> int:
        return len(self.entries)
