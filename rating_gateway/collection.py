"""
Condition Collection for the Rating Gateway.

This module provides the insertion-ordered registry of named rating
conditions. It answers the aggregate questions the gateway asks during
evaluation and keeps cache-eligible conditions in sync with the condition
cache.
"""

from typing import (
    Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union,
)

from rating_gateway.cache.base import IRatingConditionCache
from rating_gateway.cache.json_cache import DefaultRatingConditionCache
from rating_gateway.conditions.base import IRatingCondition, is_cache_eligible
from rating_gateway.enums import ConditionType
from rating_gateway.exceptions import (
    ConditionAlreadyRegisteredError,
    ConditionNotFoundError,
    InvalidConditionError,
)
from rating_gateway.logger import logger

ConditionPairs = Union[
    Mapping[str, IRatingCondition],
    Iterable[Tuple[str, IRatingCondition]],
]


class ConditionCollection:
    """
    Insertion-ordered collection of named rating conditions.

    Names are unique. Cache-eligible conditions are restored from the cache
    when added, and the cache gets a baseline entry when it has none.

    Example:
        collection = ConditionCollection(condition_cache=InMemoryRatingConditionCache())
        collection.add_condition("AppLaunches", CountRatingCondition(0, goal=5))

        if collection.has_only_prerequisite_conditions:
            ...  # the rating page can never be opened
    """

    def __init__(
        self,
        condition_cache: Optional[IRatingConditionCache] = None,
        name: str = "default"
    ):
        """
        Args:
            condition_cache: Cache for condition states (a
                DefaultRatingConditionCache when None)
            name: Name of this collection, used in errors and logs
        """
        self.name = name
        self.condition_cache: IRatingConditionCache = (
            condition_cache if condition_cache is not None
            else DefaultRatingConditionCache()
        )
        self._conditions: Dict[str, IRatingCondition] = {}

    @property
    def has_prerequisite_conditions(self) -> bool:
        """True if any condition is a prerequisite."""
        return any(
            condition.condition_type == ConditionType.PREREQUISITE
            for condition in self._conditions.values()
        )

    @property
    def has_required_conditions(self) -> bool:
        """True if any condition is a requirement."""
        return any(
            condition.condition_type == ConditionType.REQUIREMENT
            for condition in self._conditions.values()
        )

    @property
    def has_only_prerequisite_conditions(self) -> bool:
        """
        True if the collection is not empty and holds nothing but prerequisites.

        Make sure this stays False: prerequisites alone never satisfy an
        evaluation, so the rating page would never open.
        """
        return len(self._conditions) > 0 and all(
            condition.condition_type == ConditionType.PREREQUISITE
            for condition in self._conditions.values()
        )

    def add_condition(self, condition_name: str, condition: IRatingCondition) -> None:
        """
        Add a condition under a unique name.

        The cached state is synced before the condition is registered, so a
        failed sync leaves the collection unchanged.

        Raises:
            InvalidConditionError: If condition is None, not a rating condition,
                or caches a state type that cannot be stored
            ConditionAlreadyRegisteredError: If the name is already taken
        """
        if condition is None:
            raise InvalidConditionError("condition must not be None", condition_name)
        if not isinstance(condition, IRatingCondition):
            raise InvalidConditionError(
                f"{type(condition).__name__} does not implement IRatingCondition",
                condition_name
            )
        if condition_name in self._conditions:
            raise ConditionAlreadyRegisteredError(condition_name, self.name)

        if is_cache_eligible(condition):
            try:
                if not self.condition_cache.load(condition_name, condition):
                    self.condition_cache.save(condition_name, condition)
            except TypeError as e:
                raise InvalidConditionError(
                    f"{e}; pass cache_current_value=False for this condition",
                    condition_name
                ) from e

        self._conditions[condition_name] = condition

        logger.debug(
            "Condition registered",
            condition=condition_name,
            condition_type=condition.condition_type.value,
            collection=self.name,
        )

    def add_conditions(self, conditions: ConditionPairs) -> None:
        """
        Add several conditions in order.

        There is no rollback: conditions added before a failing one stay in
        the collection.
        """
        pairs = conditions.items() if isinstance(conditions, Mapping) else conditions
        for condition_name, condition in pairs:
            self.add_condition(condition_name, condition)

    def remove_condition(self, condition_name: str, remove_from_cache: bool = True) -> bool:
        """
        Remove a condition.

        Args:
            condition_name: Name of the condition
            remove_from_cache: Also delete its cached state

        Returns:
            True if the condition was registered
        """
        removed = self._conditions.pop(condition_name, None) is not None

        if remove_from_cache:
            self.condition_cache.delete(condition_name)

        if removed:
            logger.debug("Condition removed", condition=condition_name, collection=self.name)
        return removed

    def reset_all_conditions(self) -> None:
        """Reset every condition, met or not, and persist cache-eligible ones."""
        for condition_name, condition in self._conditions.items():
            condition.reset()
            self.save_condition_state(condition_name, condition)

    def save_condition_state(self, condition_name: str, condition: Any) -> None:
        """Persist the condition's state if it is cache-eligible."""
        if is_cache_eligible(condition):
            self.condition_cache.save(condition_name, condition)

    def contains_key(self, condition_name: str) -> bool:
        return condition_name in self._conditions

    def get(self, condition_name: str) -> Optional[IRatingCondition]:
        return self._conditions.get(condition_name)

    def items(self) -> List[Tuple[str, IRatingCondition]]:
        """Snapshot of (name, condition) pairs in insertion order."""
        return list(self._conditions.items())

    def names(self) -> List[str]:
        return list(self._conditions.keys())

    def of_type(self, condition_type: ConditionType) -> List[Tuple[str, IRatingCondition]]:
        """(name, condition) pairs with the given condition type."""
        return [
            (condition_name, condition)
            for condition_name, condition in self._conditions.items()
            if condition.condition_type == condition_type
        ]

    def __getitem__(self, condition_name: str) -> IRatingCondition:
        try:
            return self._conditions[condition_name]
        except KeyError:
            raise ConditionNotFoundError(condition_name, self.name) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._conditions)

    def __len__(self) -> int:
        return len(self._conditions)

    def __contains__(self, condition_name: object) -> bool:
        return condition_name in self._conditions

    def __repr__(self) -> str:
        return (
            f"ConditionCollection(name={self.name!r}, "
            f"conditions={len(self._conditions)})"
        )
