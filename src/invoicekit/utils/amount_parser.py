"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation


def parse_amount(amount_str: str) -> Decimal:
    """Parse a user-entered amount into a Decimal.

    Accepts "123.45", "$123.45", "1,234.56" and percentages such as "7%".
    Negative amounts are returned as-is; callers reject them where they
    are not allowed.

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    cleaned = re.sub(r"[$%\s]", "", amount_str.strip()).replace(",", "")

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return amount
