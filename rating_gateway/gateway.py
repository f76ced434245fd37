"""
RatingGateway - decides when to ask the user for a review.

Every rating action runs one evaluation cycle:

1. Manipulation: condition states are changed (explicitly with the
   caller's parameter, or implicitly) and cache-eligible ones persisted.
2. Evaluation: prerequisites, requirements, prioritized and standard
   conditions decide whether to prompt.
3. Prompt: the rating view is asked to open the rating page.
4. Reset: met conditions that reset after being met go back to their
   initial state and are persisted.

Usage:
    gateway = RatingGateway({
        "AppLaunches": CountRatingCondition(0, goal=5),
        "NeverAskAgain": BooleanRatingCondition(
            False, lambda state: not state, ConditionType.PREREQUISITE,
            explicit_manipulation_only=True,
            disallow_parameterless_manipulation=True,
            reset_after_condition_met=False,
        ),
    }, rating_view=MyRatingView())

    gateway.evaluate()                        # blanket action
    gateway.evaluate("NeverAskAgain", True)   # named action with parameter
    await gateway.evaluate_async({"AppLaunches": None}, manipulate_only=True)

A gateway is not thread safe and not reentrant: callers must not run two
evaluation cycles on the same gateway at the same time.
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from rating_gateway.cache.base import IRatingConditionCache
from rating_gateway.collection import ConditionCollection, ConditionPairs
from rating_gateway.conditions.base import IRatingCondition
from rating_gateway.enums import ConditionType
from rating_gateway.logger import logger
from rating_gateway.settings import settings
from rating_gateway.trace import EvaluationTrace, Resolution
from rating_gateway.view import DefaultRatingView, IRatingView

ConditionArgument = Union[None, str, Mapping[str, Any]]


class RatingGateway:
    """
    Orchestrates the manipulate -> evaluate -> prompt -> reset cycle.

    Owns one ConditionCollection, one rating view and (through the
    collection) one condition cache. Construct one per application and pass
    it around, or use initialize() / current_gateway() for a guarded
    application-wide instance.
    """

    def __init__(
        self,
        conditions: Optional[ConditionPairs] = None,
        rating_view: Optional[IRatingView] = None,
        condition_cache: Optional[IRatingConditionCache] = None,
        name: str = "default"
    ):
        """
        Args:
            conditions: Initial name -> condition mapping or (name, condition) pairs
            rating_view: View that opens the rating page (DefaultRatingView when None)
            condition_cache: Cache for condition states (DefaultRatingConditionCache when None)
            name: Name of the gateway's collection, used in errors and logs
        """
        self.rating_view: IRatingView = rating_view if rating_view is not None else DefaultRatingView()
        self.conditions = ConditionCollection(condition_cache, name=name)

        if conditions is not None:
            self.conditions.add_conditions(conditions)

    # =========================================================================
    # Collection shortcuts
    # =========================================================================

    @property
    def condition_cache(self) -> IRatingConditionCache:
        return self.conditions.condition_cache

    @property
    def rating_conditions(self) -> List[Tuple[str, IRatingCondition]]:
        return self.conditions.items()

    @property
    def has_prerequisite_conditions(self) -> bool:
        return self.conditions.has_prerequisite_conditions

    @property
    def has_required_conditions(self) -> bool:
        return self.conditions.has_required_conditions

    @property
    def has_only_prerequisite_conditions(self) -> bool:
        return self.conditions.has_only_prerequisite_conditions

    def add_condition(self, condition_name: str, condition: IRatingCondition) -> None:
        self.conditions.add_condition(condition_name, condition)

    def add_conditions(self, conditions: ConditionPairs) -> None:
        self.conditions.add_conditions(conditions)

    def remove_condition(self, condition_name: str, remove_from_cache: bool = True) -> bool:
        return self.conditions.remove_condition(condition_name, remove_from_cache)

    def reset_all_conditions(self) -> None:
        self.conditions.reset_all_conditions()

    # =========================================================================
    # Evaluation cycle
    # =========================================================================

    def evaluate(
        self,
        condition: ConditionArgument = None,
        parameter: Any = None,
        *,
        manipulate_only: bool = False,
        trace: Optional[EvaluationTrace] = None
    ) -> bool:
        """
        Run one evaluation cycle and open the rating page if it succeeds.

        Args:
            condition: None for a blanket action, a condition name, or a
                mapping of condition names to (optional) parameters
            parameter: Manipulation parameter for a single condition name
            manipulate_only: Manipulate the named conditions without
                prioritizing them during evaluation
            trace: Optional trace to record the cycle in

        Returns:
            True if the rating page was opened
        """
        parameters = self._to_parameters(condition, parameter)
        trace = self._start_trace(trace, parameters)

        result = self._manipulate_and_evaluate(parameters, manipulate_only, trace)
        if result:
            self.rating_view.try_open_rating_page()
            self._log_prompt(trace)

        self._reset_met_conditions(result, trace)
        self._finish_trace(trace)
        return result

    async def evaluate_async(
        self,
        condition: ConditionArgument = None,
        parameter: Any = None,
        *,
        manipulate_only: bool = False,
        trace: Optional[EvaluationTrace] = None
    ) -> bool:
        """
        Async form of evaluate(). Only the rating view call is awaited;
        manipulation, evaluation and reset run synchronously.
        """
        parameters = self._to_parameters(condition, parameter)
        trace = self._start_trace(trace, parameters)

        result = self._manipulate_and_evaluate(parameters, manipulate_only, trace)
        if result:
            await self.rating_view.try_open_rating_page_async()
            self._log_prompt(trace)

        self._reset_met_conditions(result, trace)
        self._finish_trace(trace)
        return result

    @staticmethod
    def _to_parameters(
        condition: ConditionArgument,
        parameter: Any
    ) -> Optional[Dict[str, Any]]:
        if condition is None:
            if parameter is not None:
                raise ValueError("parameter requires a condition name")
            return None
        if isinstance(condition, str):
            return {condition: parameter}
        if isinstance(condition, Mapping):
            if parameter is not None:
                raise ValueError("pass parameters inside the mapping, not as parameter")
            return dict(condition)
        raise TypeError(
            f"condition must be None, a name or a mapping, got {type(condition).__name__}"
        )

    def _manipulate_and_evaluate(
        self,
        parameters: Optional[Dict[str, Any]],
        manipulate_only: bool,
        trace: Optional[EvaluationTrace]
    ) -> bool:
        self._manipulate_condition_states(parameters, trace)

        priority_conditions = [] if manipulate_only or not parameters else list(parameters)
        if trace is not None:
            trace.priority_conditions = list(priority_conditions)

        result, resolution = self._evaluate_conditions(priority_conditions, trace)
        if trace is not None:
            trace.set_result(result, resolution)
        return result

    def _manipulate_condition_states(
        self,
        parameters: Optional[Dict[str, Any]],
        trace: Optional[EvaluationTrace]
    ) -> None:
        parameters = parameters or {}

        for condition_name, condition in self.conditions.items():
            named = condition_name in parameters
            parameter = parameters.get(condition_name)

            if condition.explicit_manipulation_only and not named:
                continue
            elif parameter is not None:
                condition.manipulate_state_with(parameter)
            elif not condition.disallow_parameterless_manipulation:
                condition.manipulate_state()
            else:
                continue

            self.conditions.save_condition_state(condition_name, condition)
            if trace is not None:
                trace.manipulated.append(condition_name)

    def _evaluate_conditions(
        self,
        priority_conditions: List[str],
        trace: Optional[EvaluationTrace]
    ) -> Tuple[bool, Resolution]:
        if len(self.conditions) == 0:
            return False, Resolution.NO_CONDITIONS

        # Prerequisites alone can never satisfy the evaluation
        if self.conditions.has_only_prerequisite_conditions:
            return False, Resolution.ONLY_PREREQUISITES

        if not self._all_met(ConditionType.PREREQUISITE, "prerequisite", trace):
            return False, Resolution.PREREQUISITE_UNMET

        if not self._all_met(ConditionType.REQUIREMENT, "requirement", trace):
            return False, Resolution.REQUIREMENT_UNMET

        if self.conditions.has_required_conditions and not priority_conditions:
            return True, Resolution.REQUIREMENTS_MET

        if priority_conditions:
            for condition_name in priority_conditions:
                condition = self.conditions.get(condition_name)
                met = condition is not None and condition.is_condition_met
                if trace is not None:
                    trace.record_check(condition_name, met, "priority", known=condition is not None)
                if not met:
                    return False, Resolution.PRIORITY_UNMET
            return True, Resolution.PRIORITY_MET

        for condition_name, condition in self.conditions.of_type(ConditionType.STANDARD):
            met = condition.is_condition_met
            if trace is not None:
                trace.record_check(condition_name, met, "standard")
            if met:
                return True, Resolution.STANDARD_MET
        return False, Resolution.NONE_MET

    def _all_met(
        self,
        condition_type: ConditionType,
        stage: str,
        trace: Optional[EvaluationTrace]
    ) -> bool:
        for condition_name, condition in self.conditions.of_type(condition_type):
            met = condition.is_condition_met
            if trace is not None:
                trace.record_check(condition_name, met, stage)
            if not met:
                return False
        return True

    def _reset_met_conditions(
        self,
        evaluation_succeeded: bool,
        trace: Optional[EvaluationTrace]
    ) -> None:
        reset_count = 0
        for condition_name, condition in self.conditions.items():
            if not condition.reset_after_condition_met or not condition.is_condition_met:
                continue
            if condition.reset_only_on_evaluation_success and not evaluation_succeeded:
                continue

            condition.reset()
            self.conditions.save_condition_state(condition_name, condition)
            reset_count += 1
            if trace is not None:
                trace.reset.append(condition_name)

        if reset_count:
            logger.metric(
                "conditions_reset",
                reset_count,
                collection=self.conditions.name,
                evaluation_succeeded=evaluation_succeeded,
            )

    # =========================================================================
    # Tracing and logging
    # =========================================================================

    @staticmethod
    def _start_trace(
        trace: Optional[EvaluationTrace],
        parameters: Optional[Dict[str, Any]]
    ) -> Optional[EvaluationTrace]:
        if trace is None and settings.get_nested("tracing.log_traces", False):
            trace = EvaluationTrace()
        if trace is not None:
            trace.requested = list(parameters or {})
        return trace

    def _finish_trace(self, trace: Optional[EvaluationTrace]) -> None:
        if trace is None:
            return
        trace.finish()
        if settings.get_nested("tracing.log_traces", False):
            logger.debug("Evaluation trace", collection=self.conditions.name, **trace.to_dict())

    def _log_prompt(self, trace: Optional[EvaluationTrace]) -> None:
        extra = {"collection": self.conditions.name}
        if trace is not None and trace.resolution is not None:
            extra["resolution"] = trace.resolution.value
        logger.event("rating_prompt_opened", **extra)

    def __repr__(self) -> str:
        return (
            f"RatingGateway(conditions={len(self.conditions)}, "
            f"rating_view={type(self.rating_view).__name__})"
        )


# =============================================================================
# Application-wide instance
# =============================================================================

_current_gateway: Optional[RatingGateway] = None


def initialize(
    conditions: Union[str, ConditionPairs],
    condition: Optional[IRatingCondition] = None,
    *,
    rating_view: Optional[IRatingView] = None,
    condition_cache: Optional[IRatingConditionCache] = None
) -> RatingGateway:
    """
    Create the application-wide gateway once.

    Accepts either a single name + condition or a mapping / iterable of
    (name, condition) pairs. Calls after the first successful one change
    nothing and return the existing gateway.

    Example:
        initialize("AppLaunches", CountRatingCondition(0, goal=5))
        current_gateway().evaluate()
    """
    global _current_gateway
    if _current_gateway is not None:
        logger.debug("Rating gateway already initialized")
        return _current_gateway

    if isinstance(conditions, str):
        pairs: ConditionPairs = [(conditions, condition)]
    else:
        if condition is not None:
            raise ValueError("condition is only allowed together with a condition name")
        pairs = conditions

    gateway = RatingGateway(pairs, rating_view=rating_view, condition_cache=condition_cache)
    _current_gateway = gateway
    logger.info("Rating gateway initialized", conditions=len(gateway.conditions))
    return gateway


def current_gateway() -> Optional[RatingGateway]:
    """The gateway created by initialize(), or None."""
    return _current_gateway


def clear_current_gateway() -> None:
    """Forget the application-wide gateway (for tests)."""
    global _current_gateway
    _current_gateway = None
