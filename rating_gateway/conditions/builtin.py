"""
Built-in conditions for the Rating Gateway.

- BooleanRatingCondition: a flag, flipped by every parameterless manipulation
- CountRatingCondition: a counter, incremented by every parameterless manipulation
- DateTimeExpiredCondition: a deadline in UTC, met once it has passed
- StringMatchCondition: met when the current string equals a goal
- RatingCondition: any state with a custom evaluator
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional, Type

from rating_gateway.conditions.base import RatingConditionBase, TState
from rating_gateway.enums import ConditionType
from rating_gateway.exceptions import InvalidConditionError


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RatingCondition(RatingConditionBase[TState]):
    """
    Condition over an arbitrary state with a custom evaluator.

    Example:
        last_screen = RatingCondition("home", lambda screen: screen == "checkout")
        gateway.evaluate("LastScreen", "checkout")
    """

    def __init__(
        self,
        initial_state: TState,
        evaluator: Callable[[TState], bool],
        condition_type: ConditionType = ConditionType.STANDARD,
        state_type: Optional[Type[TState]] = None,
        **flags: Any
    ):
        super().__init__(initial_state, evaluator, condition_type, state_type, **flags)


class BooleanRatingCondition(RatingConditionBase[bool]):
    """
    Boolean flag condition. Met while the flag is True unless a custom
    evaluator says otherwise. Not cached by default.
    """

    cache_current_value_default = False

    def __init__(
        self,
        initial_state: bool = False,
        evaluator: Optional[Callable[[bool], bool]] = None,
        condition_type: ConditionType = ConditionType.STANDARD,
        **flags: Any
    ):
        if evaluator is None:
            evaluator = _is_true
        super().__init__(initial_state, evaluator, condition_type, bool, **flags)

    def manipulate_state(self) -> None:
        self._set_state(not self.current_state)


def _is_true(state: bool) -> bool:
    return state is True


class CountRatingCondition(RatingConditionBase[int]):
    """
    Counter condition. Met once the count reaches the goal, or whenever a
    custom evaluator says so.

    Example:
        launches = CountRatingCondition(0, goal=5)
    """

    def __init__(
        self,
        initial_state: int = 0,
        goal: Optional[int] = None,
        evaluator: Optional[Callable[[int], bool]] = None,
        condition_type: ConditionType = ConditionType.STANDARD,
        **flags: Any
    ):
        if (goal is None) == (evaluator is None):
            raise InvalidConditionError("exactly one of goal or evaluator is required")
        if goal is not None:
            self.goal: Optional[int] = goal
            evaluator = lambda count: count >= goal  # noqa: E731
        else:
            self.goal = None
        super().__init__(initial_state, evaluator, condition_type, int, **flags)

    def manipulate_state(self) -> None:
        self._set_state(self.current_state + 1)


class DateTimeExpiredCondition(RatingConditionBase[datetime]):
    """
    Deadline condition. The deadline is now + time_from_now (UTC) and the
    condition is met once it has passed.

    Parameterless manipulation does nothing. reset() moves the deadline to
    now + time_from_now again, so every reset restarts the window.
    """

    def __init__(
        self,
        time_from_now: timedelta,
        condition_type: ConditionType = ConditionType.STANDARD,
        **flags: Any
    ):
        if not isinstance(time_from_now, timedelta):
            raise InvalidConditionError("time_from_now must be a timedelta")
        self.time_from_now = time_from_now
        super().__init__(
            _utc_now() + time_from_now,
            _deadline_passed,
            condition_type,
            datetime,
            **flags
        )

    def manipulate_state_with(self, parameter: Any) -> None:
        # Naive timestamps cannot be compared with the UTC deadline
        if isinstance(parameter, datetime) and parameter.tzinfo is None:
            return
        super().manipulate_state_with(parameter)

    def reset(self) -> None:
        self._set_state(_utc_now() + self.time_from_now)


def _deadline_passed(deadline: datetime) -> bool:
    return _utc_now() > deadline


class StringMatchCondition(RatingConditionBase[str]):
    """Condition met when the current string equals goal."""

    def __init__(
        self,
        goal: str,
        initial_state: str = "",
        condition_type: ConditionType = ConditionType.STANDARD,
        **flags: Any
    ):
        if goal is None:
            raise InvalidConditionError("goal is required")
        self.goal = goal
        super().__init__(
            initial_state,
            lambda current: current == goal,
            condition_type,
            str,
            **flags
        )
