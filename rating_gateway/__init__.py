"""
Rating Gateway - decides when an application should ask for a review.

Main components:
- Conditions: named stateful predicates (counters, deadlines, flags, custom)
- ConditionCollection: insertion-ordered registry of conditions
- IRatingConditionCache: persistence of condition states across restarts
- RatingGateway: runs the manipulate -> evaluate -> prompt -> reset cycle
- IRatingView: opens the rating page when the gateway decides to
"""

from rating_gateway.enums import ConditionType
from rating_gateway.exceptions import (
    RatingGatewayError,
    ConditionAlreadyRegisteredError,
    ConditionNotFoundError,
    InvalidConditionError,
    ConditionCacheError,
)
from rating_gateway.conditions import (
    IRatingCondition,
    ICachableCondition,
    RatingConditionBase,
    BooleanRatingCondition,
    CountRatingCondition,
    DateTimeExpiredCondition,
    StringMatchCondition,
    RatingCondition,
    build_condition,
    build_conditions,
    load_conditions,
)
from rating_gateway.cache import (
    IRatingConditionCache,
    ConditionCacheEntry,
    DefaultRatingConditionCache,
    InMemoryRatingConditionCache,
)
from rating_gateway.collection import ConditionCollection
from rating_gateway.trace import EvaluationTrace, Resolution
from rating_gateway.view import IRatingView, DefaultRatingView
from rating_gateway.gateway import (
    RatingGateway,
    initialize,
    current_gateway,
    clear_current_gateway,
)

__version__ = "1.0.0"

__all__ = [
    "ConditionType",
    "RatingGatewayError",
    "ConditionAlreadyRegisteredError",
    "ConditionNotFoundError",
    "InvalidConditionError",
    "ConditionCacheError",
    "IRatingCondition",
    "ICachableCondition",
    "RatingConditionBase",
    "BooleanRatingCondition",
    "CountRatingCondition",
    "DateTimeExpiredCondition",
    "StringMatchCondition",
    "RatingCondition",
    "build_condition",
    "build_conditions",
    "load_conditions",
    "IRatingConditionCache",
    "ConditionCacheEntry",
    "DefaultRatingConditionCache",
    "InMemoryRatingConditionCache",
    "ConditionCollection",
    "EvaluationTrace",
    "Resolution",
    "IRatingView",
    "DefaultRatingView",
    "RatingGateway",
    "initialize",
    "current_gateway",
    "clear_current_gateway",
]
