"""
Tests for the Currency model in schemas/common.py.

Tests cover:
- Creation with ISO 4217 codes and mixed amount types
- Invalid code/amount rejection
- Cent-exact arithmetic (add, sub, neg, abs)
- Comparisons and mixed-currency errors
- Serialization and helpers (zero, rounded, is_*)
- BaseBulkResponse computed counters
"""
from decimal import Decimal

import pytest
from pydantic import BaseModel

from couplesfin.schemas.common import BaseBulkResponse, Currency


class TestCurrencyCreation:
    """Test Currency object creation."""

    def test_create_brl(self):
        brl = Currency(code="BRL", amount=Decimal("100.50"))
        assert brl.code == "BRL"
        assert brl.amount == Decimal("100.50")

    def test_code_normalized(self):
        assert Currency(code="  brl ", amount=1).code == "BRL"

    def test_create_from_float(self):
        """Floats are read through their shortest repr."""
        assert Currency(code="USD", amount=0.1).amount == Decimal("0.1")

    def test_create_from_localized_string(self):
        assert Currency(code="BRL", amount="1.234,56").amount == Decimal("1234.56")

    def test_negative_allowed(self):
        assert Currency(code="BRL", amount="-50").amount == Decimal("-50")


class TestInvalidCurrency:
    """Test invalid input rejection."""

    def test_invalid_code(self):
        with pytest.raises(ValueError, match="Invalid currency code"):
            Currency(code="NOTACURRENCY", amount=Decimal("100"))

    def test_empty_code(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            Currency(code="", amount=Decimal("100"))

    def test_non_string_code(self):
        with pytest.raises(ValueError, match="must be a string"):
            Currency(code=123, amount=Decimal("100"))

    def test_invalid_amount_is_not_zeroed(self):
        """Unlike form parsing, a typo in a Currency amount is an error."""
        with pytest.raises(ValueError):
            Currency(code="USD", amount="not-a-number")

    def test_exponent_amount_read_as_written(self):
        assert Currency(code="BRL", amount="2.5e2").amount == Decimal("250")

    def test_inner_minus_rejected(self):
        with pytest.raises(ValueError):
            Currency(code="BRL", amount="10 - 5")

    def test_extra_field_forbidden(self):
        with pytest.raises(ValueError):
            Currency(code="USD", amount=1, note="x")


class TestArithmetic:
    """Test arithmetic operations."""

    def test_addition_is_cent_exact(self):
        total = Currency(code="BRL", amount=0.1) + Currency(code="BRL", amount=0.2)
        assert total.code == "BRL"
        assert total.amount == Decimal("0.30")

    def test_subtraction_negative_result(self):
        result = Currency(code="USD", amount=30) - Currency(code="USD", amount=100)
        assert result.amount == Decimal("-70.00")

    def test_negation(self):
        assert (-Currency(code="USD", amount=Decimal("100"))).amount == Decimal("-100")

    def test_abs(self):
        assert abs(Currency(code="USD", amount=Decimal("-100"))).amount == Decimal("100")

    def test_add_different_currencies(self):
        with pytest.raises(ValueError, match="Cannot add BRL and USD"):
            Currency(code="BRL", amount=1) + Currency(code="USD", amount=1)

    def test_sub_different_currencies(self):
        with pytest.raises(ValueError, match="Cannot subtract BRL and EUR"):
            Currency(code="BRL", amount=1) - Currency(code="EUR", amount=1)

    def test_add_non_currency(self):
        with pytest.raises(TypeError, match="Cannot add Currency and int"):
            Currency(code="BRL", amount=1) + 50


class TestComparison:
    """Test comparison operators."""

    def test_equality(self):
        assert Currency(code="BRL", amount="10.00") == Currency(code="BRL", amount=10)
        assert Currency(code="BRL", amount=10) != Currency(code="USD", amount=10)
        assert Currency(code="BRL", amount=10) != 10

    def test_ordering(self):
        small = Currency(code="BRL", amount=5)
        big = Currency(code="BRL", amount=10)
        assert small < big
        assert big > small
        assert small <= Currency(code="BRL", amount=5)
        assert big >= small

    def test_compare_different_currencies(self):
        with pytest.raises(ValueError, match="Cannot compare BRL and USD"):
            Currency(code="BRL", amount=1) < Currency(code="USD", amount=2)

    def test_hashable(self):
        assert len({Currency(code="BRL", amount=1), Currency(code="BRL", amount=1)}) == 1


class TestHelpers:
    """Test serialization and utility methods."""

    def test_str(self):
        assert str(Currency(code="BRL", amount=Decimal("100.50"))) == "100.50 BRL"

    def test_to_dict(self):
        assert Currency(code="BRL", amount=Decimal("1.50")).to_dict() == {"currency": "BRL", "amount": "1.50"}

    def test_zero(self):
        zero = Currency.zero("usd")
        assert zero.code == "USD"
        assert zero.is_zero()
        assert not zero.is_positive()
        assert not zero.is_negative()

    def test_rounded(self):
        assert Currency(code="BRL", amount="2.675").rounded().amount == Decimal("2.68")

    def test_sign_helpers(self):
        assert Currency(code="BRL", amount=1).is_positive()
        assert Currency(code="BRL", amount=-1).is_negative()


class _Item(BaseModel):
    name: str


def test_bulk_response_counts():
    response = BaseBulkResponse[_Item](
        results=[_Item(name="a"), _Item(name="b"), _Item(name="c")],
        success_count=2,
        errors=["Item 2: failed"],
        )
    assert response.total_count == 3
    assert response.failed_count == 1


class TestSplitAndTotal:
    """Test sharing an expense and totalling amounts."""

    def test_split_keeps_every_cent(self):
        shares = Currency(code="BRL", amount=100).split(3)
        assert [s.amount for s in shares] == [Decimal("33.34"), Decimal("33.33"), Decimal("33.33")]
        assert Currency.total("BRL", shares) == Currency(code="BRL", amount="100.00")

    def test_split_between_two(self):
        half, other_half = Currency(code="BRL", amount="0.05").split(2)
        assert half.amount == Decimal("0.03")
        assert other_half.amount == Decimal("0.02")
        assert half.code == "BRL"

    def test_total_empty(self):
        assert Currency.total("usd", []).is_zero()

    def test_total_mixed_currencies(self):
        with pytest.raises(ValueError, match="Cannot add BRL and USD"):
            Currency.total("BRL", [Currency(code="BRL", amount=1), Currency(code="USD", amount=1)])
