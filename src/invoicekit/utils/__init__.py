"""Utility functions for invoicekit."""

from invoicekit.utils.date_parser import get_date_range, parse_date
from invoicekit.utils.amount_parser import parse_amount
from invoicekit.utils.payment_method_resolver import resolve_payment_method

__all__ = ["parse_date", "get_date_range", "parse_amount", "resolve_payment_method"]
