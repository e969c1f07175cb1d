"""Unit tests for money helpers"""

import pytest
from decimal import Decimal

from src.domain import money
from src.domain.errors import InvalidAmount


class TestToAmount:
    def test_quantizes_to_two_places(self):
        assert money.to_amount("10") == Decimal("10.00")
        assert money.to_amount(Decimal("1.005")) == Decimal("1.01")

    def test_float_goes_through_string_form(self):
        assert money.to_amount(0.1) + money.to_amount(0.2) == Decimal("0.30")

    def test_int_accepted(self):
        assert money.to_amount(1000) == Decimal("1000.00")

    @pytest.mark.parametrize("value", [None, True, "abc", float("nan"), float("inf"), Decimal("NaN")])
    def test_rejects_non_numeric_and_non_finite(self, value):
        with pytest.raises(InvalidAmount):
            money.to_amount(value)


class TestRequireNonNegative:
    def test_zero_allowed(self):
        assert money.require_non_negative(0) == money.ZERO

    def test_negative_rejected_with_field_name(self):
        with pytest.raises(InvalidAmount) as exc_info:
            money.require_non_negative(Decimal("-1"), "debit")

        assert exc_info.value.code == "INVALID_AMOUNT"
        assert "debit" in exc_info.value.message


class TestRequirePositive:
    def test_amount_rounding_to_zero_rejected(self):
        with pytest.raises(InvalidAmount):
            money.require_positive(Decimal("0.004"))

    def test_positive_returned_quantized(self):
        assert money.require_positive("400") == Decimal("400.00")


def test_arithmetic_helpers():
    assert money.add(Decimal("0.10"), Decimal("0.20")) == Decimal("0.30")
    assert money.subtract(Decimal("1000"), Decimal("400")) == Decimal("600.00")
    assert money.compare(Decimal("1"), Decimal("2")) == -1
    assert money.compare(Decimal("2"), Decimal("2.00")) == 0
    assert money.is_zero(Decimal("0.001"))
    assert not money.is_positive(Decimal("-5"))


class TestAmountBounds:
    @pytest.mark.parametrize("value", [Decimal("1e30"), "1e30", Decimal("-1e30"), 10**16, "9999999999999999.995"])
    def test_oversized_amount_is_invalid_amount(self, value):
        with pytest.raises(InvalidAmount) as exc_info:
            money.to_amount(value)

        assert exc_info.value.code == "INVALID_AMOUNT"

    def test_largest_storable_amount_accepted(self):
        assert money.to_amount("9999999999999999.99") == Decimal("9999999999999999.99")

    def test_require_positive_rejects_oversized(self):
        with pytest.raises(InvalidAmount):
            money.require_positive(Decimal("1e30"))
