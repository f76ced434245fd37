"""
Errors raised by the Rating Gateway.

Configuration errors (duplicate names, missing evaluators, null conditions)
fail fast at the call site. Cache write failures are escalated to the caller.
Everything else during an evaluation cycle degrades gracefully and never
raises.
"""

from pathlib import Path
from typing import Optional


class RatingGatewayError(Exception):
    """Base class for all Rating Gateway errors."""


class ConditionAlreadyRegisteredError(RatingGatewayError, KeyError):
    """Raised when trying to register a condition name that already exists."""

    def __init__(self, condition_name: str, collection_name: str = ""):
        self.condition_name = condition_name
        self.collection_name = collection_name
        message = f"Condition '{condition_name}' already registered"
        if collection_name:
            message += f" in collection '{collection_name}'"
        super().__init__(message)

    def __str__(self) -> str:
        return self.args[0]


class ConditionNotFoundError(RatingGatewayError, KeyError):
    """Raised when a condition is looked up by a name that is not registered."""

    def __init__(self, condition_name: str, collection_name: str = ""):
        self.condition_name = condition_name
        self.collection_name = collection_name
        message = f"Condition '{condition_name}' not found"
        if collection_name:
            message += f" in collection '{collection_name}'"
        super().__init__(message)

    def __str__(self) -> str:
        return self.args[0]


class InvalidConditionError(RatingGatewayError, ValueError):
    """Raised when a condition is malformed or cannot be built from config."""

    def __init__(self, reason: str, condition_name: Optional[str] = None):
        self.condition_name = condition_name
        self.reason = reason
        if condition_name:
            message = f"Invalid condition '{condition_name}': {reason}"
        else:
            message = f"Invalid condition: {reason}"
        super().__init__(message)


class ConditionCacheError(RatingGatewayError):
    """Raised when the condition cache cannot be written."""

    def __init__(
        self,
        path: Path,
        original_error: Exception,
        condition_name: Optional[str] = None
    ):
        self.path = path
        self.original_error = original_error
        self.condition_name = condition_name
        message = f"Failed to write condition cache '{path}'"
        if condition_name:
            message += f" for condition '{condition_name}'"
        message += f": {original_error}"
        super().__init__(message)
