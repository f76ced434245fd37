"""
Evaluation Trace for the Rating Gateway.

Records what happened during one evaluation cycle: which conditions were
manipulated, which were checked and with what result, why the cycle ended
the way it did, and which conditions were reset afterwards. Used for
debugging "why did (or didn't) the rating page open".
"""

from typing import Dict, List, Any, Optional
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Resolution(str, Enum):
    """
    Why an evaluation cycle produced its result.

    - NO_CONDITIONS: The collection is empty
    - ONLY_PREREQUISITES: The collection holds nothing but prerequisites
    - PREREQUISITE_UNMET: A prerequisite is not met
    - REQUIREMENT_UNMET: A requirement is not met
    - REQUIREMENTS_MET: All requirements met and nothing was prioritized
    - PRIORITY_MET: Every prioritized condition is met
    - PRIORITY_UNMET: A prioritized condition is unknown or not met
    - STANDARD_MET: At least one standard condition is met
    - NONE_MET: No standard condition is met
    """
    NO_CONDITIONS = "no_conditions"
    ONLY_PREREQUISITES = "only_prerequisites"
    PREREQUISITE_UNMET = "prerequisite_unmet"
    REQUIREMENT_UNMET = "requirement_unmet"
    REQUIREMENTS_MET = "requirements_met"
    PRIORITY_MET = "priority_met"
    PRIORITY_UNMET = "priority_unmet"
    STANDARD_MET = "standard_met"
    NONE_MET = "none_met"


@dataclass
class ConditionCheck:
    """
    Record of a single condition check.

    Attributes:
        condition_name: Name of the checked condition
        result: Whether it was met
        stage: Evaluation stage ("prerequisite", "requirement", "priority", "standard")
        known: False for prioritized names missing from the collection
    """
    condition_name: str
    result: bool
    stage: str
    known: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "condition": self.condition_name,
            "result": self.result,
            "stage": self.stage,
            "known": self.known,
        }

    def to_compact_string(self) -> str:
        result_str = "PASS" if self.result else "FAIL"
        suffix = "" if self.known else " (unknown)"
        return f"  [{self.stage}] {self.condition_name}: {result_str}{suffix}"


@dataclass
class EvaluationTrace:
    """
    Trace of one evaluation cycle.

    Attributes:
        requested: Condition names given by the caller
        priority_conditions: Names that had to be met in this cycle
        manipulated: Names of conditions whose state was manipulated
        checks: Condition checks in evaluation order
        resolution: Why the cycle produced its result
        result: Whether the rating page was opened
        reset: Names of conditions reset after evaluation
        start_time: When the cycle started
        end_time: When the cycle completed
    """
    requested: List[str] = field(default_factory=list)
    priority_conditions: List[str] = field(default_factory=list)
    manipulated: List[str] = field(default_factory=list)
    checks: List[ConditionCheck] = field(default_factory=list)
    resolution: Optional[Resolution] = None
    result: Optional[bool] = None
    reset: List[str] = field(default_factory=list)
    start_time: datetime = field(default_factory=datetime.now)
    end_time: Optional[datetime] = None

    def record_check(
        self,
        condition_name: str,
        result: bool,
        stage: str,
        known: bool = True
    ) -> None:
        self.checks.append(ConditionCheck(condition_name, result, stage, known))

    def set_result(self, result: bool, resolution: Resolution) -> None:
        self.result = result
        self.resolution = resolution

    def finish(self) -> None:
        self.end_time = datetime.now()

    @property
    def elapsed_ms(self) -> float:
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time).total_seconds() * 1000

    @property
    def checked_count(self) -> int:
        return len(self.checks)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "requested": self.requested,
            "priority_conditions": self.priority_conditions,
            "manipulated": self.manipulated,
            "checks": [check.to_dict() for check in self.checks],
            "resolution": self.resolution.value if self.resolution else None,
            "result": self.result,
            "reset": self.reset,
            "elapsed_ms": round(self.elapsed_ms, 3),
        }

    def to_compact_string(self) -> str:
        resolution = self.resolution.value if self.resolution else "pending"
        lines = [f"Evaluation -> {self.result} ({resolution})"]
        lines.extend(check.to_compact_string() for check in self.checks)
        if self.reset:
            lines.append(f"  reset: {', '.join(self.reset)}")
        return "\n".join(lines)
