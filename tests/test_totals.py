"""Tests for invoice totals calculation and money formatting."""

from decimal import Decimal

import pytest

from invoicekit.domain.entities import LineItem
from invoicekit.domain.errors import InvalidInput
from invoicekit.domain.totals import calculate_totals, format_money, to_decimal, to_money


def _items():
    return [
        LineItem(description="Logo", unit_price=Decimal("50"), quantity=Decimal("2")),
        LineItem(description="Revisions", unit_price=Decimal("10"), quantity=Decimal("1")),
    ]


class TestCalculateTotals:
    """Test subtotal, tax, total and balance computation."""

    def test_subtotal_tax_and_total(self):
        totals = calculate_totals(_items(), tax_percentage=7)

        assert totals.subtotal == Decimal("110")
        assert totals.tax_amount == Decimal("7.70")
        assert totals.total == Decimal("117.70")
        assert totals.balance == Decimal("117.70")

    def test_deposit_reduces_balance_only(self):
        totals = calculate_totals(_items(), tax_percentage=7, deposit=20)

        assert totals.total == Decimal("117.70")
        assert totals.balance == Decimal("97.70")

    def test_no_items_is_zero(self):
        totals = calculate_totals([], tax_percentage=10)

        assert totals.subtotal == 0
        assert totals.tax_amount == 0
        assert totals.total == 0

    def test_fractional_quantity(self):
        items = [LineItem(description="Hours", unit_price=Decimal("40"), quantity=Decimal("1.5"))]
        totals = calculate_totals(items)

        assert totals.subtotal == Decimal("60.0")

    def test_intermediate_values_are_not_rounded(self):
        items = [LineItem(description="Part", unit_price=Decimal("0.333"), quantity=Decimal("3"))]
        totals = calculate_totals(items)

        assert totals.subtotal == Decimal("0.999")
        assert format_money(totals.total) == "$1.00"

    def test_deposit_larger_than_total_gives_negative_balance(self):
        totals = calculate_totals(_items(), deposit=200)

        assert totals.balance == Decimal("-90")

    def test_float_line_items(self):
        items = [
            LineItem(description="Logo", unit_price=50.0, quantity=2),
            LineItem(description="Revisions", unit_price=10.0, quantity=1),
        ]
        totals = calculate_totals(items, tax_percentage=7.0, deposit=20.0)

        assert format_money(totals.total) == "$117.70"
        assert format_money(totals.balance) == "$97.70"

    def test_float_price_keeps_decimal_digits(self):
        items = [LineItem(description="Part", unit_price=0.1, quantity=3)]

        assert calculate_totals(items).subtotal == Decimal("0.3")

    def test_non_numeric_item_rejected(self):
        items = [LineItem(description="x", unit_price="abc", quantity=Decimal("1"))]

        with pytest.raises(InvalidInput, match="Unit price of item 1"):
            calculate_totals(items)

    @pytest.mark.parametrize(
        "items,tax,deposit",
        [
            ([LineItem(description="x", unit_price=Decimal("-1"), quantity=Decimal("1"))], 0, 0),
            ([LineItem(description="x", unit_price=Decimal("1"), quantity=Decimal("-1"))], 0, 0),
            ([], -1, 0),
            ([], 0, -5),
        ],
    )
    def test_negative_inputs_rejected(self, items, tax, deposit):
        with pytest.raises(InvalidInput, match="cannot be negative"):
            calculate_totals(items, tax_percentage=tax, deposit=deposit)


class TestMoney:
    """Test decimal conversion and currency formatting."""

    def test_to_decimal_avoids_float_artifacts(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_to_decimal_rejects_garbage(self):
        with pytest.raises(InvalidInput, match="not a number"):
            to_decimal("abc", "Deposit")

    def test_to_decimal_rejects_infinity(self):
        with pytest.raises(InvalidInput, match="not a finite number"):
            to_decimal("Infinity")

    def test_to_money_rounds_half_up(self):
        assert to_money("2.345") == Decimal("2.35")
        assert to_money("2.344") == Decimal("2.34")

    def test_format_money(self):
        assert format_money(Decimal("117.7")) == "$117.70"
        assert format_money(0) == "$0.00"
        assert format_money("-3.5") == "-$3.50"

    def test_format_money_has_no_negative_zero(self):
        assert format_money("-0.001") == "$0.00"
