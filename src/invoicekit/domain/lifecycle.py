"""Invoice lifecycle state machine.

Pure transition functions: each takes an Invoice entity and returns the new
entity, or raises before anything changes. Persistence and side effects live
in InvoiceService.
"""

from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional

from invoicekit.domain.entities import (
    Invoice,
    InvoiceStatus,
    LineItem,
    PaymentMethod,
)
from invoicekit.domain.errors import (
    InvalidInput,
    InvalidTransition,
    InvoiceLocked,
    MissingPaymentMethod,
    illegal_transition,
    invoice_locked,
)
from invoicekit.domain.totals import calculate_totals, normalize_line_items


class InvoiceAction(str, Enum):
    """Actions that change an invoice's status or deletion state."""

    FINALIZE = "finalize"
    COMPLETE_PAYMENT = "complete payment for"
    REVERT_PAYMENT = "revert payment for"
    EDIT = "edit"
    SOFT_DELETE = "delete"
    RESTORE = "restore"
    HARD_DELETE = "permanently delete"


# Legal status changes; any (action, status) pair missing here is rejected.
STATUS_TRANSITIONS: dict[InvoiceAction, dict[InvoiceStatus, InvoiceStatus]] = {
    InvoiceAction.FINALIZE: {InvoiceStatus.DRAFT: InvoiceStatus.PENDING},
    InvoiceAction.COMPLETE_PAYMENT: {InvoiceStatus.PENDING: InvoiceStatus.PAID},
    InvoiceAction.REVERT_PAYMENT: {InvoiceStatus.PAID: InvoiceStatus.PENDING},
}

CREATABLE_STATUSES = (InvoiceStatus.DRAFT, InvoiceStatus.PENDING)

# Transitions after which the rendered document no longer matches the invoice.
DOCUMENT_STALE_ACTIONS = frozenset(
    {InvoiceAction.COMPLETE_PAYMENT, InvoiceAction.REVERT_PAYMENT}
)


def next_status(invoice: Invoice, action: InvoiceAction) -> InvoiceStatus:
    """Return the status an action moves the invoice to.

    Raises:
        InvalidTransition: If the invoice is deleted or the action is not
            allowed from its current status
    """
    if invoice.is_deleted:
        raise InvalidTransition(illegal_transition(invoice.id, action.value, "deleted"))
    targets = STATUS_TRANSITIONS.get(action, {})
    if invoice.status not in targets:
        raise InvalidTransition(
            illegal_transition(invoice.id, action.value, invoice.status.value)
        )
    return targets[invoice.status]


def check_creatable_status(status: InvoiceStatus) -> None:
    if status not in CREATABLE_STATUSES:
        raise InvalidInput(
            f"Invoices can only be created as draft or pending (got {status.value})"
        )


def check_editable(invoice: Invoice) -> None:
    """Raise unless the invoice's financial fields may be changed.

    Raises:
        InvalidTransition: If the invoice is deleted
        InvoiceLocked: If the invoice is paid
    """
    if invoice.is_deleted:
        raise InvalidTransition(
            illegal_transition(invoice.id, InvoiceAction.EDIT.value, "deleted")
        )
    if invoice.status == InvoiceStatus.PAID:
        raise InvoiceLocked(invoice_locked(invoice.id))


def finalize(invoice: Invoice) -> Invoice:
    """Move a draft invoice to pending. Totals are already current."""
    return replace(invoice, status=next_status(invoice, InvoiceAction.FINALIZE))


def complete_payment(
    invoice: Invoice, payment_method: Optional[PaymentMethod], paid_at: datetime
) -> Invoice:
    """Mark a pending invoice as paid with the given method.

    Raises:
        InvalidTransition: If the invoice is not pending or is deleted
        MissingPaymentMethod: If no active payment method is supplied
    """
    status = next_status(invoice, InvoiceAction.COMPLETE_PAYMENT)
    if payment_method is None:
        raise MissingPaymentMethod(
            f"A payment method is required to complete payment for invoice {invoice.id}"
        )
    if not payment_method.active:
        raise MissingPaymentMethod(
            f"Payment method '{payment_method.name}' is inactive"
        )
    return replace(
        invoice,
        status=status,
        balance=Decimal("0"),
        payment_method_id=payment_method.id,
        paid_at=paid_at,
    )


def revert_payment(invoice: Invoice) -> Invoice:
    """Move a paid invoice back to pending.

    The balance is restored to the full total; the deposit is not subtracted.
    """
    status = next_status(invoice, InvoiceAction.REVERT_PAYMENT)
    return replace(
        invoice,
        status=status,
        balance=invoice.total,
        payment_method_id=None,
        paid_at=None,
    )


def apply_edit(
    invoice: Invoice,
    line_items: Optional[Iterable[LineItem]] = None,
    tax_percentage: Optional[Decimal] = None,
    deposit: Optional[Decimal] = None,
) -> Invoice:
    """Replace financial inputs and recompute totals.

    Arguments left as None keep their current value.

    Raises:
        InvoiceLocked: If the invoice is paid
        InvalidTransition: If the invoice is deleted
        InvalidInput: If any monetary input is negative
    """
    check_editable(invoice)
    items = normalize_line_items(line_items) if line_items is not None else invoice.line_items
    tax = tax_percentage if tax_percentage is not None else invoice.tax_percentage
    received = deposit if deposit is not None else invoice.deposit

    totals = calculate_totals(items, tax, received)
    return replace(
        invoice,
        line_items=items,
        tax_percentage=tax,
        deposit=received,
        subtotal=totals.subtotal,
        tax_amount=totals.tax_amount,
        total=totals.total,
        balance=totals.balance,
    )


def soft_delete(invoice: Invoice, deleted_at: datetime) -> Invoice:
    """Tombstone an invoice. Financial fields are untouched."""
    if invoice.is_deleted:
        raise InvalidTransition(
            illegal_transition(invoice.id, InvoiceAction.SOFT_DELETE.value, "already deleted")
        )
    return replace(invoice, deleted_at=deleted_at)


def restore(invoice: Invoice) -> Invoice:
    """Bring a soft-deleted invoice back."""
    if not invoice.is_deleted:
        raise InvalidTransition(
            illegal_transition(invoice.id, InvoiceAction.RESTORE.value, "not deleted")
        )
    return replace(invoice, deleted_at=None)
