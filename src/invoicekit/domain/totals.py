"""Invoice totals calculation and money formatting.

Amounts accumulate as unrounded Decimals; rounding to cents happens only in
``to_money``/``format_money`` at the display boundary.
"""

from dataclasses import replace
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Iterable

from invoicekit.domain.entities import LineItem, Totals
from invoicekit.domain.errors import InvalidInput, negative_amount

MONEY_QUANT = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value: Decimal | int | float | str, field: str = "value") -> Decimal:
    """Convert a numeric input to Decimal without binary float artifacts.

    Raises:
        InvalidInput: If the value is not a finite number
    """
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise InvalidInput(f"{field} is not a number: {value!r}") from e
    if not result.is_finite():
        raise InvalidInput(f"{field} is not a finite number: {value!r}")
    return result


def to_money(value: Decimal | int | float | str) -> Decimal:
    return to_decimal(value).quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


def format_money(value: Decimal | int | float | str) -> str:
    """Format an amount as currency with exactly two decimals (e.g. "$117.70")."""
    # adding zero normalizes -0.00
    amount = to_money(value) + ZERO
    if amount < 0:
        return f"-${-amount}"
    return f"${amount}"


def normalize_line_items(line_items: Iterable[LineItem]) -> tuple[LineItem, ...]:
    """Return the items with Decimal unit prices and quantities.

    Raises:
        InvalidInput: If a price or quantity is not a finite number
    """
    return tuple(
        replace(
            item,
            unit_price=to_decimal(item.unit_price, f"Unit price of item {position}"),
            quantity=to_decimal(item.quantity, f"Quantity of item {position}"),
        )
        for position, item in enumerate(line_items, start=1)
    )


def validate_line_items(line_items: Iterable[LineItem]) -> None:
    """Reject line items with negative unit price or quantity.

    Raises:
        InvalidInput: If any price or quantity is negative
    """
    for position, item in enumerate(line_items, start=1):
        if item.unit_price < 0:
            raise InvalidInput(negative_amount(f"Unit price of item {position}", item.unit_price))
        if item.quantity < 0:
            raise InvalidInput(negative_amount(f"Quantity of item {position}", item.quantity))


def calculate_totals(
    line_items: Iterable[LineItem],
    tax_percentage: Decimal | int | float | str = ZERO,
    deposit: Decimal | int | float | str = ZERO,
) -> Totals:
    """Compute subtotal, tax, total and remaining balance.

    Args:
        line_items: Ordered line items
        tax_percentage: Tax rate in percent (7 means 7%)
        deposit: Amount already received

    Returns:
        Totals with unrounded values

    Raises:
        InvalidInput: If a price, quantity, tax percentage or deposit is
            negative or not a number
    """
    items = normalize_line_items(line_items)
    tax = to_decimal(tax_percentage, "Tax percentage")
    received = to_decimal(deposit, "Deposit")

    validate_line_items(items)
    if tax < 0:
        raise InvalidInput(negative_amount("Tax percentage", tax))
    if received < 0:
        raise InvalidInput(negative_amount("Deposit", received))

    subtotal = sum((item.line_total for item in items), ZERO)
    tax_amount = subtotal * tax / 100
    total = subtotal + tax_amount
    return Totals(
        subtotal=subtotal,
        tax_amount=tax_amount,
        total=total,
        balance=total - received,
    )
