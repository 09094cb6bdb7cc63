"""Derived invoice status classification.

Derived categories are computed on every read from the due date and today's
date; they are never stored.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional

from invoicekit.domain.entities import (
    Invoice,
    InvoiceStatus,
    MessageCategory,
    ReceivablesOverview,
)

DUE_SOON_DAYS = 3


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def days_until_due(due_date: date | datetime, today: date | datetime) -> int:
    """Whole calendar days from today to the due date (negative when past due)."""
    return (_as_date(due_date) - _as_date(today)).days


def classify_invoice(invoice: Invoice, today: date | datetime) -> Optional[MessageCategory]:
    """Return OVERDUE, DUE_SOON or None for an invoice.

    Only pending invoices with a due date receive a derived category.
    """
    if invoice.status != InvoiceStatus.PENDING or invoice.due_date is None:
        return None
    days = days_until_due(invoice.due_date, today)
    if days < 0:
        return MessageCategory.OVERDUE
    if days <= DUE_SOON_DAYS:
        return MessageCategory.DUE_SOON
    return None


def message_category_for(invoice: Invoice, today: date | datetime) -> MessageCategory:
    """Pick the template category that fits an invoice right now."""
    if invoice.status == InvoiceStatus.PAID:
        return MessageCategory.PAID
    return classify_invoice(invoice, today) or MessageCategory.PENDING


def build_overview(invoices: Iterable[Invoice], today: date | datetime) -> ReceivablesOverview:
    """Summarize pending invoices: how many are due soon or overdue and what is owed."""
    pending = due_soon = overdue = 0
    outstanding = Decimal("0")
    for invoice in invoices:
        if invoice.is_deleted or invoice.status != InvoiceStatus.PENDING:
            continue
        pending += 1
        outstanding += invoice.balance if invoice.balance is not None else invoice.total
        category = classify_invoice(invoice, today)
        if category == MessageCategory.OVERDUE:
            overdue += 1
        elif category == MessageCategory.DUE_SOON:
            due_soon += 1
    return ReceivablesOverview(
        pending_count=pending,
        due_soon_count=due_soon,
        overdue_count=overdue,
        outstanding_balance=outstanding,
    )
