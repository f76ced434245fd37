"""
Tests for RatingGateway.evaluate_async().

Run with: pytest tests/test_rating_gateway_async.py -v
"""

import asyncio
import pytest
from unittest.mock import AsyncMock

from rating_gateway import (
    BooleanRatingCondition,
    ConditionType,
    CountRatingCondition,
    EvaluationTrace,
    Resolution,
)


class TestEvaluateAsync:

    @pytest.mark.asyncio
    async def test_success_awaits_async_view(self, make_gateway, rating_view):
        gateway = make_gateway({"Flag": BooleanRatingCondition()})

        assert await gateway.evaluate_async() is True

        rating_view.try_open_rating_page_async.assert_awaited_once_with()
        rating_view.try_open_rating_page.assert_not_called()

    @pytest.mark.asyncio
    async def test_failure_does_not_touch_view(self, make_gateway, rating_view):
        gateway = make_gateway({"Launches": CountRatingCondition(0, goal=5)})

        assert await gateway.evaluate_async() is False

        rating_view.try_open_rating_page_async.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_same_decisions_as_sync(self, make_gateway, rating_view):
        launches = CountRatingCondition(0, goal=3, condition_type=ConditionType.REQUIREMENT)
        gateway = make_gateway({"Launches": launches})

        results = [await gateway.evaluate_async() for _ in range(4)]

        assert results == [False, False, True, False]
        assert rating_view.try_open_rating_page_async.await_count == 1
        assert launches.current_state == 1

    @pytest.mark.asyncio
    async def test_named_parameter_and_trace(self, make_gateway):
        gateway = make_gateway({
            "Clicks": CountRatingCondition(0, goal=2, explicit_manipulation_only=True),
            "Other": BooleanRatingCondition(),
        })
        trace = EvaluationTrace()

        assert await gateway.evaluate_async("Clicks", 2, trace=trace) is True

        assert trace.resolution == Resolution.PRIORITY_MET
        assert trace.reset == ["Clicks", "Other"]

    @pytest.mark.asyncio
    async def test_manipulate_only(self, make_gateway):
        gateway = make_gateway({
            "Flag": BooleanRatingCondition(),
            "Launches": CountRatingCondition(0, goal=5),
        })
        assert await gateway.evaluate_async({"Launches": None}, manipulate_only=True) is True

    @pytest.mark.asyncio
    async def test_invalid_arguments(self, gateway):
        with pytest.raises(ValueError):
            await gateway.evaluate_async(None, 3)

    @pytest.mark.asyncio
    async def test_cancelled_view_skips_reset(self, make_gateway, rating_view):
        rating_view.try_open_rating_page_async = AsyncMock(side_effect=asyncio.CancelledError)
        flag = BooleanRatingCondition()
        gateway = make_gateway({"Flag": flag})

        with pytest.raises(asyncio.CancelledError):
            await gateway.evaluate_async()

        assert flag.current_state is True
