"""
Tests for building conditions from configuration (conditions/factory.py).

Run with: pytest tests/test_condition_factory.py -v
"""

import pytest
from datetime import timedelta

from rating_gateway import (
    BooleanRatingCondition,
    ConditionType,
    CountRatingCondition,
    DateTimeExpiredCondition,
    InvalidConditionError,
    RatingGateway,
    StringMatchCondition,
    build_condition,
    build_conditions,
    load_conditions,
)


SAMPLE_YAML = """
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
  CheckoutReached:
    kind: string_match
    goal: checkout
    initial_state: home
"""


class TestBuildCondition:

    def test_boolean(self):
        condition = build_condition({"kind": "boolean", "type": "requirement"})
        assert isinstance(condition, BooleanRatingCondition)
        assert condition.condition_type == ConditionType.REQUIREMENT
        assert condition.current_state is False
        assert not condition.is_condition_met

    def test_boolean_expected_false(self):
        condition = build_condition({"kind": "boolean", "expected": False})
        assert condition.is_condition_met
        condition.manipulate_state_with(True)
        assert not condition.is_condition_met

    def test_count(self):
        condition = build_condition({"kind": "count", "goal": 3, "initial_state": 1})
        assert isinstance(condition, CountRatingCondition)
        assert condition.goal == 3
        assert condition.current_state == 1
        assert condition.condition_type == ConditionType.STANDARD

    def test_datetime_expired(self):
        condition = build_condition({"kind": "datetime_expired", "days": 2, "hours": 3})
        assert isinstance(condition, DateTimeExpiredCondition)
        assert condition.time_from_now == timedelta(days=2, hours=3)

    def test_string_match(self):
        condition = build_condition({"kind": "string_match", "goal": "checkout"})
        assert isinstance(condition, StringMatchCondition)
        assert condition.goal == "checkout"
        assert condition.current_state == ""

    def test_type_is_case_insensitive(self):
        condition = build_condition({"kind": "count", "goal": 1, "type": "Prerequisite"})
        assert condition.condition_type == ConditionType.PREREQUISITE

    def test_flags(self):
        condition = build_condition({
            "kind": "count",
            "goal": 1,
            "reset_after_condition_met": False,
            "reset_only_on_evaluation_success": False,
            "explicit_manipulation_only": True,
            "disallow_parameterless_manipulation": True,
            "cache_current_value": False,
        })
        assert condition.reset_after_condition_met is False
        assert condition.reset_only_on_evaluation_success is False
        assert condition.explicit_manipulation_only is True
        assert condition.disallow_parameterless_manipulation is True
        assert condition.cache_current_value is False

    @pytest.mark.parametrize("config,fragment", [
        ({"goal": 1}, "unknown kind"),
        ({"kind": "stars"}, "unknown kind"),
        ({"kind": ["count"]}, "unknown kind"),
        ({"kind": "count", "goal": 1, "type": "optional"}, "unknown condition type"),
        ({"kind": "count"}, "'goal'"),
        ({"kind": "count", "goal": True}, "'goal'"),
        ({"kind": "count", "goal": 1, "initial_state": "0"}, "'initial_state'"),
        ({"kind": "boolean", "expected": "yes"}, "'expected'"),
        ({"kind": "datetime_expired"}, "required"),
        ({"kind": "datetime_expired", "minutes": "ten"}, "minutes"),
        ({"kind": "string_match"}, "'goal'"),
        ({"kind": "count", "goal": 1, "explicit_manipulation_only": "yes"}, "must be a boolean"),
        ({"kind": "count", "goal": 1, "colour": "red"}, "unknown keys"),
    ])
    def test_invalid_config(self, config, fragment):
        with pytest.raises(InvalidConditionError, match=fragment) as exc_info:
            build_condition(config, "Broken")
        assert exc_info.value.condition_name == "Broken"

    def test_config_must_be_mapping(self):
        with pytest.raises(InvalidConditionError):
            build_condition(["count"], "Broken")

    def test_input_is_not_modified(self):
        config = {"kind": "count", "goal": 2}
        build_condition(config)
        assert config == {"kind": "count", "goal": 2}


class TestLoadConditions:

    def test_build_conditions_keeps_order(self):
        conditions = build_conditions({
            "b": {"kind": "boolean"},
            "a": {"kind": "count", "goal": 1},
        })
        assert list(conditions) == ["b", "a"]

    def test_load_from_yaml(self, tmp_path):
        path = tmp_path / "rating_conditions.yaml"
        path.write_text(SAMPLE_YAML, encoding="utf-8")

        conditions = load_conditions(path)

        assert list(conditions) == [
            "NeverAskAgain", "CooldownBetweenRequests", "ClickCount", "CheckoutReached",
        ]
        never_ask = conditions["NeverAskAgain"]
        assert never_ask.condition_type == ConditionType.PREREQUISITE
        assert never_ask.is_condition_met
        assert conditions["CooldownBetweenRequests"].time_from_now == timedelta(minutes=1)
        assert conditions["ClickCount"].explicit_manipulation_only is True
        assert conditions["CheckoutReached"].current_state == "home"

    def test_loaded_conditions_drive_gateway(self, tmp_path, rating_view, memory_cache):
        path = tmp_path / "rating_conditions.yaml"
        path.write_text(SAMPLE_YAML, encoding="utf-8")
        gateway = RatingGateway(
            load_conditions(path), rating_view=rating_view, condition_cache=memory_cache
        )

        # Cooldown has not expired yet
        assert gateway.evaluate("ClickCount", 2) is False
        rating_view.try_open_rating_page.assert_not_called()

    @pytest.mark.parametrize("content", ["", "conditions: []\n", "- a\n- b\n"])
    def test_missing_conditions_mapping(self, tmp_path, content):
        path = tmp_path / "rating_conditions.yaml"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(InvalidConditionError, match="conditions"):
            load_conditions(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_conditions(tmp_path / "missing.yaml")
