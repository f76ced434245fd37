"""Pydantic schemas for persisted condition values."""

from datetime import date, datetime, timedelta
from typing import Any, Dict, Literal

from pydantic import BaseModel, Field, model_validator

ValueTag = Literal[
    "none", "bool", "int", "float", "str",
    "datetime", "date", "timedelta", "list", "tuple", "dict",
]


class TaggedValue(BaseModel):
    """A JSON-friendly value that remembers its Python type."""
    type: ValueTag
    value: Any = None

    @model_validator(mode="after")
    def _check_value_matches_tag(self) -> "TaggedValue":
        # Runs on load as well, so a hand-edited cache file fails here
        # instead of pushing a wrong type into a condition.
        expected = {
            "none": type(None),
            "bool": bool,
            "int": int,
            "float": (int, float),
            "str": str,
            "datetime": str,
            "date": str,
            "timedelta": (int, float),
            "list": list,
            "tuple": list,
            "dict": dict,
        }[self.type]
        if not isinstance(self.value, expected):
            raise ValueError(
                f"value {self.value!r} does not match tag '{self.type}'"
            )
        if self.type in ("int", "float", "timedelta") and isinstance(self.value, bool):
            raise ValueError(f"boolean value does not match tag '{self.type}'")
        return self

    @classmethod
    def wrap(cls, value: Any) -> "TaggedValue":
        """Tag a Python value. Raises TypeError for unsupported types."""
        if value is None:
            return cls(type="none", value=None)
        # bool before int, datetime before date: both are subclasses
        if isinstance(value, bool):
            return cls(type="bool", value=value)
        if isinstance(value, int):
            return cls(type="int", value=value)
        if isinstance(value, float):
            return cls(type="float", value=value)
        if isinstance(value, str):
            return cls(type="str", value=value)
        if isinstance(value, datetime):
            return cls(type="datetime", value=value.isoformat())
        if isinstance(value, date):
            return cls(type="date", value=value.isoformat())
        if isinstance(value, timedelta):
            return cls(type="timedelta", value=value.total_seconds())
        if isinstance(value, list):
            return cls(type="list", value=[cls.wrap(item).model_dump() for item in value])
        if isinstance(value, tuple):
            return cls(type="tuple", value=[cls.wrap(item).model_dump() for item in value])
        if isinstance(value, dict):
            items: Dict[str, Any] = {}
            for key, item in value.items():
                if not isinstance(key, str):
                    raise TypeError(
                        f"Only string keys can be cached, got {type(key).__name__}"
                    )
                items[key] = cls.wrap(item).model_dump()
            return cls(type="dict", value=items)
        raise TypeError(f"Cannot cache a value of type {type(value).__name__}")

    def unwrap(self) -> Any:
        """Return the Python value this tag describes."""
        if self.type == "none":
            return None
        if self.type == "float":
            return float(self.value)
        if self.type == "datetime":
            return datetime.fromisoformat(self.value)
        if self.type == "date":
            return date.fromisoformat(self.value)
        if self.type == "timedelta":
            return timedelta(seconds=self.value)
        if self.type == "list":
            return [TaggedValue.model_validate(item).unwrap() for item in self.value]
        if self.type == "tuple":
            return tuple(TaggedValue.model_validate(item).unwrap() for item in self.value)
        if self.type == "dict":
            return {
                key: TaggedValue.model_validate(item).unwrap()
                for key, item in self.value.items()
            }
        return self.value


class ConditionCacheEntry(BaseModel):
    """Persisted snapshot of one condition's current state."""
    condition_name: str = Field(..., min_length=1)
    current_value: TaggedValue

    @classmethod
    def from_state(cls, condition_name: str, state: Any) -> "ConditionCacheEntry":
        return cls(condition_name=condition_name, current_value=TaggedValue.wrap(state))

    @property
    def state(self) -> Any:
        return self.current_value.unwrap()


def parse_entry(raw: Any) -> ConditionCacheEntry:
    """
    Validate one raw entry from storage.

    Raises:
        ValueError: If the entry is malformed (pydantic's ValidationError
            included) or its value cannot be decoded.
    """
    entry = ConditionCacheEntry.model_validate(raw)
    try:
        # Decode once so bad timestamps are caught here too
        entry.state
    except (TypeError, AttributeError) as e:
        raise ValueError(f"Malformed cache entry: {e}") from e
    return entry
