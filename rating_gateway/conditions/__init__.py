"""
Rating conditions.

Main components:
- IRatingCondition / ICachableCondition: protocols consumed by the gateway
- RatingConditionBase: generic stateful predicate
- BooleanRatingCondition, CountRatingCondition, DateTimeExpiredCondition,
  StringMatchCondition, RatingCondition: built-in conditions
- build_condition / build_conditions / load_conditions: config factory
"""

from rating_gateway.conditions.base import (
    IRatingCondition,
    ICachableCondition,
    RatingConditionBase,
    is_cache_eligible,
)
from rating_gateway.conditions.builtin import (
    BooleanRatingCondition,
    CountRatingCondition,
    DateTimeExpiredCondition,
    StringMatchCondition,
    RatingCondition,
)
from rating_gateway.conditions.factory import (
    build_condition,
    build_conditions,
    load_conditions,
)

__all__ = [
    "IRatingCondition",
    "ICachableCondition",
    "RatingConditionBase",
    "is_cache_eligible",
    "BooleanRatingCondition",
    "CountRatingCondition",
    "DateTimeExpiredCondition",
    "StringMatchCondition",
    "RatingCondition",
    "build_condition",
    "build_conditions",
    "load_conditions",
]
