"""
Build conditions from plain configuration.

Usage:
    conditions = load_conditions("rating_conditions.yaml")
    gateway = RatingGateway(conditions)

YAML format:
    conditions:
      NeverAskAgain:
        kind: boolean
        type: prerequisite
        expected: false
        reset_after_condition_met: false
        explicit_manipulation_only: true
        disallow_parameterless_manipulation: true
      CooldownBetweenRequests:
        kind: datetime_expired
        type: prerequisite
        minutes: 1
        reset_only_on_evaluation_success: false
      ClickCount:
        kind: count
        goal: 2
        explicit_manipulation_only: true
"""

from datetime import timedelta
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Union

import yaml

from rating_gateway.conditions.base import RatingConditionBase
from rating_gateway.conditions.builtin import (
    BooleanRatingCondition,
    CountRatingCondition,
    DateTimeExpiredCondition,
    StringMatchCondition,
)
from rating_gateway.enums import ConditionType
from rating_gateway.exceptions import InvalidConditionError

FLAG_KEYS = (
    "reset_after_condition_met",
    "reset_only_on_evaluation_success",
    "explicit_manipulation_only",
    "disallow_parameterless_manipulation",
    "cache_current_value",
)

DURATION_KEYS = ("days", "hours", "minutes", "seconds")


def _pop_typed(config: Dict[str, Any], key: str, expected: type, default: Any) -> Any:
    value = config.pop(key, default)
    # bool is an int subclass, a count must not accept it
    if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
        raise InvalidConditionError(f"'{key}' must be of type {expected.__name__}")
    return value


def _build_boolean(config: Dict[str, Any], condition_type: ConditionType, flags: Dict[str, bool]):
    initial_state = _pop_typed(config, "initial_state", bool, False)
    expected = config.pop("expected", True)
    if not isinstance(expected, bool):
        raise InvalidConditionError("'expected' must be a boolean")
    return BooleanRatingCondition(
        initial_state,
        lambda state: state is expected,
        condition_type,
        **flags
    )


def _build_count(config: Dict[str, Any], condition_type: ConditionType, flags: Dict[str, bool]):
    initial_state = _pop_typed(config, "initial_state", int, 0)
    goal = config.pop("goal", None)
    if not isinstance(goal, int) or isinstance(goal, bool):
        raise InvalidConditionError("'goal' must be an integer")
    return CountRatingCondition(
        initial_state,
        goal=goal,
        condition_type=condition_type,
        **flags
    )


def _build_datetime_expired(config: Dict[str, Any], condition_type: ConditionType, flags: Dict[str, bool]):
    duration = {key: config.pop(key) for key in DURATION_KEYS if key in config}
    if not duration:
        raise InvalidConditionError(
            f"one of {', '.join(DURATION_KEYS)} is required"
        )
    return DateTimeExpiredCondition(timedelta(**duration), condition_type, **flags)


def _build_string_match(config: Dict[str, Any], condition_type: ConditionType, flags: Dict[str, bool]):
    goal = config.pop("goal", None)
    if not isinstance(goal, str):
        raise InvalidConditionError("'goal' must be a string")
    return StringMatchCondition(
        goal,
        _pop_typed(config, "initial_state", str, ""),
        condition_type,
        **flags
    )


BUILDERS: Dict[str, Callable[..., RatingConditionBase]] = {
    "boolean": _build_boolean,
    "count": _build_count,
    "datetime_expired": _build_datetime_expired,
    "string_match": _build_string_match,
}


def build_condition(config: Mapping[str, Any], name: str = None) -> RatingConditionBase:
    """
    Build one built-in condition from a config mapping.

    Args:
        config: Mapping with 'kind', optional 'type', kind specific keys and flags
        name: Condition name, only used in error messages

    Raises:
        InvalidConditionError: On unknown kinds, types or keys, or bad values
    """
    if not isinstance(config, Mapping):
        raise InvalidConditionError("condition config must be a mapping", name)

    remaining = dict(config)
    kind = remaining.pop("kind", None)
    builder = BUILDERS.get(kind) if isinstance(kind, str) else None
    if builder is None:
        raise InvalidConditionError(
            f"unknown kind {kind!r}, expected one of {', '.join(BUILDERS)}", name
        )

    type_name = remaining.pop("type", ConditionType.STANDARD.value)
    try:
        condition_type = ConditionType(str(type_name).lower())
    except ValueError:
        raise InvalidConditionError(f"unknown condition type {type_name!r}", name) from None

    flags = {key: remaining.pop(key) for key in FLAG_KEYS if key in remaining}
    for key, value in flags.items():
        if not isinstance(value, bool):
            raise InvalidConditionError(f"'{key}' must be a boolean", name)

    try:
        condition = builder(remaining, condition_type, flags)
    except InvalidConditionError as e:
        raise InvalidConditionError(e.reason, name) from e
    except TypeError as e:
        raise InvalidConditionError(str(e), name) from e

    if remaining:
        raise InvalidConditionError(
            f"unknown keys for kind '{kind}': {', '.join(sorted(remaining))}", name
        )
    return condition


def build_conditions(config: Mapping[str, Mapping[str, Any]]) -> Dict[str, RatingConditionBase]:
    """Build a name -> condition mapping, keeping the config order."""
    return {name: build_condition(entry, name) for name, entry in config.items()}


def load_conditions(path: Union[str, Path]) -> Dict[str, RatingConditionBase]:
    """
    Load conditions from a YAML file with a top-level 'conditions' mapping.

    Raises:
        InvalidConditionError: If the file has no 'conditions' mapping
        OSError: If the file cannot be read
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    conditions = data.get("conditions") if isinstance(data, dict) else None
    if not isinstance(conditions, Mapping):
        raise InvalidConditionError(f"'{path}' has no 'conditions' mapping")
    return build_conditions(conditions)
