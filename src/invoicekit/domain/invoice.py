"""Invoice domain service."""

import logging
from dataclasses import replace
from datetime import date, datetime, UTC
from decimal import Decimal
from typing import Callable, Iterable, Optional

from invoicekit.database.base import Database
from invoicekit.domain import lifecycle
from invoicekit.domain.documents import DocumentListener, LoggingDocumentListener
from invoicekit.domain.entities import (
    BusinessSnapshot,
    ClientSnapshot,
    Invoice,
    InvoiceStatus,
    LineItem,
    MessageCategory,
    ReceivablesOverview,
)
from invoicekit.domain.errors import (
    ConcurrentModification,
    InvalidInput,
    NotFoundError,
    invoice_not_found,
    payment_method_not_found,
)
from invoicekit.domain.lifecycle import InvoiceAction
from invoicekit.domain.status import build_overview, classify_invoice, message_category_for
from invoicekit.domain.totals import calculate_totals, normalize_line_items, to_decimal

logger = logging.getLogger(__name__)

INVOICE_NUMBER_PREFIX = "100"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


def format_invoice_number(number: int) -> str:
    """Display form of a sequential invoice number (1 -> "1001")."""
    return f"{INVOICE_NUMBER_PREFIX}{number}"


class InvoiceService:
    """Service for creating invoices and moving them through their lifecycle."""

    def __init__(
        self,
        db: Database,
        documents: Optional[DocumentListener] = None,
        clock: Optional[Clock] = None,
    ):
        """Initialize invoice service.

        Args:
            db: Database instance
            documents: Listener notified when rendered documents go stale
            clock: Callable returning the current time (defaults to UTC now)
        """
        self.db = db
        self.documents = documents or LoggingDocumentListener()
        self.clock = clock or utc_now

    def today(self) -> date:
        return self.clock().date()

    def create_invoice(
        self,
        client: ClientSnapshot,
        business: BusinessSnapshot,
        line_items: Iterable[LineItem],
        tax_percentage: Decimal | int | str = 0,
        deposit: Decimal | int | str = 0,
        issue_date: Optional[date] = None,
        due_date: Optional[date] = None,
        status: InvoiceStatus = InvoiceStatus.PENDING,
    ) -> int:
        """Create an invoice as draft or pending.

        Args:
            client: Client details to snapshot onto the invoice
            business: Issuing business details to snapshot onto the invoice
            line_items: Ordered line items
            tax_percentage: Tax rate in percent
            deposit: Amount already received
            issue_date: Issue date (defaults to today)
            due_date: Optional due date
            status: DRAFT or PENDING

        Returns:
            Invoice ID

        Raises:
            InvalidInput: If any amount is negative, the client or business
                name is missing, or the status is not creatable
        """
        lifecycle.check_creatable_status(status)
        if not client.name or not client.name.strip():
            raise InvalidInput("Client name is required")
        if not business.name or not business.name.strip():
            raise InvalidInput("Business name is required")

        items = normalize_line_items(line_items)
        tax = to_decimal(tax_percentage, "Tax percentage")
        received = to_decimal(deposit, "Deposit")
        totals = calculate_totals(items, tax, received)

        issued = issue_date or self.today()
        if due_date is not None and due_date < issued:
            raise InvalidInput(f"Due date {due_date} is before issue date {issued}")

        number = self.db.next_invoice_number()
        invoice_id = self.db.create_invoice(
            number=number,
            formatted_number=format_invoice_number(number),
            client=client,
            business=business,
            line_items=items,
            tax_percentage=tax,
            deposit=received,
            totals=totals,
            status=status,
            issue_date=issued,
            due_date=due_date,
        )
        logger.info("Created %s invoice %s (number %s)", status.value, invoice_id, number)
        return invoice_id

    def get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        """Get invoice by ID.

        Args:
            invoice_id: Invoice ID

        Returns:
            Invoice entity (possibly soft-deleted) or None if not found
        """
        return self.db.get_invoice(invoice_id)

    def require_invoice(self, invoice_id: int) -> Invoice:
        """Get invoice by ID or raise NotFoundError."""
        invoice = self.db.get_invoice(invoice_id)
        if invoice is None:
            raise NotFoundError(invoice_not_found(invoice_id))
        return invoice

    def list_invoices(
        self,
        status: Optional[InvoiceStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Invoice]:
        """List invoices that are not soft-deleted.

        Args:
            status: Optional status filter
            start_date: Optional issue date lower bound
            end_date: Optional issue date upper bound

        Returns:
            List of invoice entities ordered by number
        """
        return self.db.list_invoices(status=status, start_date=start_date, end_date=end_date)

    def list_deleted_invoices(self) -> list[Invoice]:
        """List soft-deleted invoices that can still be restored."""
        return self.db.list_deleted_invoices()

    def update_invoice(
        self,
        invoice_id: int,
        line_items: Optional[Iterable[LineItem]] = None,
        tax_percentage: Optional[Decimal | int | str] = None,
        deposit: Optional[Decimal | int | str] = None,
        due_date: Optional[date] = None,
        clear_due_date: bool = False,
    ) -> Invoice:
        """Change line items, tax, deposit or due date and recompute totals.

        Raises:
            NotFoundError: If the invoice doesn't exist
            InvoiceLocked: If the invoice is paid
            InvalidInput: If any amount is negative
        """
        invoice = self.require_invoice(invoice_id)
        tax = to_decimal(tax_percentage, "Tax percentage") if tax_percentage is not None else None
        received = to_decimal(deposit, "Deposit") if deposit is not None else None
        updated = lifecycle.apply_edit(invoice, line_items, tax, received)

        if clear_due_date:
            if due_date is not None:
                raise InvalidInput("Cannot set both due_date and clear_due_date")
            updated = replace(updated, due_date=None)
        elif due_date is not None:
            if due_date < invoice.issue_date:
                raise InvalidInput(f"Due date {due_date} is before issue date {invoice.issue_date}")
            updated = replace(updated, due_date=due_date)

        return self._persist(invoice, updated, InvoiceAction.EDIT)

    def finalize_invoice(self, invoice_id: int) -> Invoice:
        """Move a draft invoice to pending."""
        invoice = self.require_invoice(invoice_id)
        return self._persist(invoice, lifecycle.finalize(invoice), InvoiceAction.FINALIZE)

    def complete_payment(self, invoice_id: int, payment_method_id: Optional[int]) -> Invoice:
        """Mark a pending invoice as paid.

        Args:
            invoice_id: Invoice ID
            payment_method_id: ID of an active payment method

        Returns:
            The paid invoice

        Raises:
            NotFoundError: If the invoice or payment method doesn't exist
            InvalidTransition: If the invoice is not pending
            MissingPaymentMethod: If no active payment method is given
            ConcurrentModification: If another writer changed the status first
        """
        invoice = self.require_invoice(invoice_id)
        method = None
        if payment_method_id is not None:
            method = self.db.get_payment_method(payment_method_id)
            if method is None:
                raise NotFoundError(payment_method_not_found(payment_method_id))
        paid = lifecycle.complete_payment(invoice, method, self.clock())
        return self._persist(invoice, paid, InvoiceAction.COMPLETE_PAYMENT)

    def revert_payment(self, invoice_id: int) -> Invoice:
        """Move a paid invoice back to pending with the balance set to the total."""
        invoice = self.require_invoice(invoice_id)
        return self._persist(invoice, lifecycle.revert_payment(invoice), InvoiceAction.REVERT_PAYMENT)

    def soft_delete_invoice(self, invoice_id: int) -> Invoice:
        """Move an invoice to the trash. It can be restored later."""
        invoice = self.require_invoice(invoice_id)
        deleted = lifecycle.soft_delete(invoice, self.clock())
        return self._persist(invoice, deleted, InvoiceAction.SOFT_DELETE)

    def restore_invoice(self, invoice_id: int) -> Invoice:
        """Bring a soft-deleted invoice back from the trash."""
        invoice = self.require_invoice(invoice_id)
        return self._persist(invoice, lifecycle.restore(invoice), InvoiceAction.RESTORE)

    def hard_delete_invoice(self, invoice_id: int) -> None:
        """Permanently erase an invoice and its rendered document.

        This is irreversible. Callers are expected to have obtained explicit
        confirmation; soft_delete_invoice is the recoverable alternative.
        """
        invoice = self.require_invoice(invoice_id)
        self.db.delete_invoice(invoice.id)
        logger.info("Permanently deleted invoice %s (number %s)", invoice.id, invoice.number)
        self.documents.discard(invoice.id)

    def derived_status(self, invoice: Invoice) -> Optional[MessageCategory]:
        """OVERDUE or DUE_SOON for pending invoices near or past due, else None."""
        return classify_invoice(invoice, self.today())

    def message_category(self, invoice: Invoice) -> MessageCategory:
        """Template category matching the invoice's current state."""
        return message_category_for(invoice, self.today())

    def overview(self) -> ReceivablesOverview:
        """Counts of pending, due-soon and overdue invoices and the amount owed."""
        return build_overview(self.db.list_invoices(status=InvoiceStatus.PENDING), self.today())

    def _persist(self, before: Invoice, after: Invoice, action: InvoiceAction) -> Invoice:
        if not self.db.update_invoice(after, expected_status=before.status):
            raise ConcurrentModification(
                f"Invoice {before.id} was modified by another request; reload and try again"
            )
        logger.info(
            "Invoice %s: %s (%s -> %s)", before.id, action.name.lower(), before.status.value, after.status.value
        )
        if action in lifecycle.DOCUMENT_STALE_ACTIONS:
            self.documents.mark_stale(before.id)
        return self.require_invoice(before.id)
