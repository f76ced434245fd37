"""
Base condition types for the Rating Gateway.

This module defines the protocols the collection, the cache and the gateway
consume, and the generic base class every built-in condition derives from.

- IRatingCondition: capability set used during an evaluation cycle
- ICachableCondition: capability set used by an IRatingConditionCache
- RatingConditionBase: generic stateful predicate implementing both
"""

from typing import (
    Any, Callable, Generic, Optional, Protocol, Type, TypeVar,
    runtime_checkable,
)

from rating_gateway.cache.dto import ConditionCacheEntry
from rating_gateway.enums import ConditionType
from rating_gateway.exceptions import InvalidConditionError

TState = TypeVar("TState")


@runtime_checkable
class IRatingCondition(Protocol):
    """
    Protocol for every condition that can be registered in a collection.

    A condition holds a piece of state and decides whether that state
    satisfies it. The gateway changes the state through the manipulate
    methods and brings it back through reset().
    """

    reset_after_condition_met: bool
    reset_only_on_evaluation_success: bool
    explicit_manipulation_only: bool
    disallow_parameterless_manipulation: bool

    @property
    def condition_type(self) -> ConditionType:
        ...

    @property
    def is_condition_met(self) -> bool:
        ...

    def manipulate_state(self) -> None:
        ...

    def manipulate_state_with(self, parameter: Any) -> None:
        ...

    def reset(self) -> None:
        ...


@runtime_checkable
class ICachableCondition(Protocol):
    """Protocol for conditions whose current state can be persisted."""

    cache_current_value: bool

    def to_cache_entry(self, condition_name: str) -> ConditionCacheEntry:
        ...

    def manipulate_state_with(self, parameter: Any) -> None:
        ...


def is_cache_eligible(condition: Any) -> bool:
    """True if the condition implements ICachableCondition and opted in."""
    return isinstance(condition, ICachableCondition) and condition.cache_current_value


class RatingConditionBase(Generic[TState]):
    """
    Generic stateful condition.

    Holds an initial and a current state of type TState and an evaluator
    that decides whether the current state satisfies the condition.

    Explicit manipulation only applies values of the condition's state type;
    anything else is ignored, because a single rating action fans its
    parameter out to conditions of different types.

    Example:
        condition = RatingCondition(0, lambda count: count >= 3)
        condition.manipulate_state_with(3)
        assert condition.is_condition_met
    """

    cache_current_value_default: bool = True

    def __init__(
        self,
        initial_state: TState,
        evaluator: Callable[[TState], bool],
        condition_type: ConditionType = ConditionType.STANDARD,
        state_type: Optional[Type[TState]] = None,
        *,
        reset_after_condition_met: bool = True,
        reset_only_on_evaluation_success: bool = True,
        explicit_manipulation_only: bool = False,
        disallow_parameterless_manipulation: bool = False,
        cache_current_value: Optional[bool] = None
    ):
        """
        Args:
            initial_state: State the condition starts with and resets to
            evaluator: Predicate over the current state
            condition_type: Role of the condition during evaluation
            state_type: Type accepted by manipulate_state_with (defaults to
                the type of initial_state)
            reset_after_condition_met: Reset once the condition is met
            reset_only_on_evaluation_success: Only reset when the rating
                page was opened in the same cycle
            explicit_manipulation_only: Only manipulate when named in the
                rating action
            disallow_parameterless_manipulation: Ignore manipulate_state()
            cache_current_value: Persist the current state (class default
                when None)

        Raises:
            InvalidConditionError: If evaluator is missing or the state type
                cannot be determined
        """
        if evaluator is None or not callable(evaluator):
            raise InvalidConditionError("evaluator must be a callable")
        if state_type is None:
            if initial_state is None:
                raise InvalidConditionError(
                    "state_type is required when initial_state is None"
                )
            state_type = type(initial_state)

        self._initial_state = initial_state
        self._current_state = initial_state
        self._evaluator = evaluator
        self._condition_type = ConditionType(condition_type)
        self._state_type = state_type

        self.reset_after_condition_met = reset_after_condition_met
        self.reset_only_on_evaluation_success = reset_only_on_evaluation_success
        self.explicit_manipulation_only = explicit_manipulation_only
        self.disallow_parameterless_manipulation = disallow_parameterless_manipulation
        self.cache_current_value = (
            self.cache_current_value_default
            if cache_current_value is None
            else cache_current_value
        )

    @property
    def initial_state(self) -> TState:
        return self._initial_state

    @property
    def current_state(self) -> TState:
        return self._current_state

    @property
    def state_type(self) -> Type[TState]:
        return self._state_type

    @property
    def condition_type(self) -> ConditionType:
        return self._condition_type

    @property
    def is_condition_met(self) -> bool:
        """Evaluate the current state. Has no side effects."""
        return bool(self._evaluator(self._current_state))

    def accepts(self, parameter: Any) -> bool:
        """Check whether a manipulation parameter matches the state type."""
        if parameter is None:
            return False
        # bool subclasses int, but a flag is not a count
        if isinstance(parameter, bool) and not issubclass(self._state_type, bool):
            return False
        return isinstance(parameter, self._state_type)

    def manipulate_state(self) -> None:
        """Parameterless manipulation. Does nothing unless overridden."""

    def manipulate_state_with(self, parameter: Any) -> None:
        """Set the current state to parameter if it has the state type."""
        if self.accepts(parameter):
            self._set_state(parameter)

    def reset(self) -> None:
        """Return to the initial state."""
        self._current_state = self._initial_state

    def to_cache_entry(self, condition_name: str) -> ConditionCacheEntry:
        return ConditionCacheEntry.from_state(condition_name, self._current_state)

    def _set_state(self, state: TState) -> None:
        self._current_state = state

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(current_state={self._current_state!r}, "
            f"condition_type={self._condition_type.value})"
        )
