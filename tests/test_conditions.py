"""Property-based tests for alert condition evaluation."""

from decimal import Decimal

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from pricewatch.models import AlertCondition
from pricewatch.monitor.conditions import evaluate_condition, parse_condition

prices = st.decimals(
    min_value=Decimal("0.00000001"),
    max_value=Decimal("10000000"),
    allow_nan=False,
    allow_infinity=False,
    places=8,
)


class TestBoundaryBehaviour:
    """
    *For any* target, a price exactly on the target does not fire the
    strict conditions and does fire the crossing conditions.
    """

    @given(target=prices)
    @settings(max_examples=100)
    def test_strict_conditions_do_not_fire_at_equality(self, target: Decimal):
        assert evaluate_condition(AlertCondition.ABOVE, target, target) is False
        assert evaluate_condition(AlertCondition.BELOW, target, target) is False

    @given(target=prices)
    @settings(max_examples=100)
    def test_crossing_conditions_fire_at_equality(self, target: Decimal):
        assert evaluate_condition(AlertCondition.CROSSES_ABOVE, target, target) is True
        assert evaluate_condition(AlertCondition.CROSSES_BELOW, target, target) is True

    def test_crosses_below_exactly_at_target(self):
        assert evaluate_condition(
            AlertCondition.CROSSES_BELOW, Decimal("100"), Decimal("100")
        )


class TestDirection:
    """
    *For any* two distinct prices, upward conditions fire only when the
    current price is above the target and downward ones only when below.
    """

    @given(target=prices, current=prices)
    @settings(max_examples=200)
    def test_direction_matches_comparison(self, target: Decimal, current: Decimal):
        assert evaluate_condition(AlertCondition.ABOVE, target, current) == (current > target)
        assert evaluate_condition(AlertCondition.BELOW, target, current) == (current < target)
        assert evaluate_condition(AlertCondition.CROSSES_ABOVE, target, current) == (
            current >= target
        )
        assert evaluate_condition(AlertCondition.CROSSES_BELOW, target, current) == (
            current <= target
        )

    def test_above_just_over_target(self):
        assert evaluate_condition(AlertCondition.ABOVE, Decimal("50000"), Decimal("50001"))
        assert not evaluate_condition(AlertCondition.BELOW, Decimal("50000"), Decimal("50001"))


class TestParseCondition:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("above", AlertCondition.ABOVE),
            ("BELOW", AlertCondition.BELOW),
            (" crosses_above ", AlertCondition.CROSSES_ABOVE),
            ("Crosses_Below", AlertCondition.CROSSES_BELOW),
        ],
    )
    def test_known_conditions(self, text, expected):
        assert parse_condition(text) == expected

    @pytest.mark.parametrize("text", ["", "equals", "price > 5", "crosses above", None, 42])
    def test_unknown_conditions(self, text):
        assert parse_condition(text) is None

    def test_phrases(self):
        assert AlertCondition.ABOVE.phrase == "went above"
        assert AlertCondition.BELOW.phrase == "went below"
        assert AlertCondition.CROSSES_ABOVE.phrase == "crossed above"
        assert AlertCondition.CROSSES_BELOW.phrase == "crossed below"
