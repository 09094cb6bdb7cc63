"""Abstract database interface."""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from invoicekit.domain.entities import (
    BusinessSnapshot,
    Channel,
    ClientSnapshot,
    Invoice,
    InvoiceStatus,
    LineItem,
    MessageCategory,
    PaymentMethod,
    PredefinedMessage,
    Totals,
)


class Database(ABC):
    """Abstract database interface for invoicekit."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Invoice operations
    @abstractmethod
    def next_invoice_number(self) -> int:
        """Return the next sequential invoice number (1 for the first invoice)."""
        pass

    @abstractmethod
    def create_invoice(
        self,
        number: int,
        formatted_number: Optional[str],
        client: ClientSnapshot,
        business: BusinessSnapshot,
        line_items: tuple[LineItem, ...],
        tax_percentage: Decimal,
        deposit: Decimal,
        totals: Totals,
        status: InvoiceStatus,
        issue_date: date,
        due_date: Optional[date] = None,
    ) -> int:
        """Create an invoice with its line items. Returns invoice ID."""
        pass

    @abstractmethod
    def get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        """Get invoice by ID, including soft-deleted invoices."""
        pass

    @abstractmethod
    def list_invoices(
        self,
        status: Optional[InvoiceStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Invoice]:
        """List invoices that are not soft-deleted, ordered by number.

        Args:
            status: Optional status filter
            start_date: Optional lower bound on issue date
            end_date: Optional upper bound on issue date
        """
        pass

    @abstractmethod
    def list_deleted_invoices(self) -> list[Invoice]:
        """List soft-deleted invoices, most recently deleted first."""
        pass

    @abstractmethod
    def update_invoice(self, invoice: Invoice, expected_status: InvoiceStatus) -> bool:
        """Write all mutable invoice fields and line items.

        The write only happens while the stored status still equals
        ``expected_status``, which keeps one transition in flight per invoice.

        Returns:
            True if the invoice was updated, False if its status had changed
        """
        pass

    @abstractmethod
    def delete_invoice(self, invoice_id: int) -> None:
        """Permanently erase an invoice and its line items."""
        pass

    # Payment method operations
    @abstractmethod
    def create_payment_method(
        self,
        name: str,
        link: Optional[str] = None,
        instructions: Optional[str] = None,
        active: bool = True,
        display_order: int = 0,
    ) -> int:
        """Create a payment method. Returns payment method ID."""
        pass

    @abstractmethod
    def get_payment_method(self, method_id: int) -> Optional[PaymentMethod]:
        """Get payment method by ID."""
        pass

    @abstractmethod
    def list_payment_methods(self, active_only: bool = False) -> list[PaymentMethod]:
        """List payment methods ordered by display order."""
        pass

    @abstractmethod
    def update_payment_method(
        self,
        method_id: int,
        name: Optional[str] = None,
        link: Optional[str] = None,
        instructions: Optional[str] = None,
        active: Optional[bool] = None,
        display_order: Optional[int] = None,
        clear_link: bool = False,
        clear_instructions: bool = False,
    ) -> None:
        """Update payment method fields. None leaves a field unchanged."""
        pass

    @abstractmethod
    def delete_payment_method(self, method_id: int) -> None:
        """Delete a payment method."""
        pass

    # Predefined message operations
    @abstractmethod
    def create_message(
        self,
        category: MessageCategory,
        channel: Channel,
        base_template: str,
        content: str,
        personalized: bool = False,
    ) -> int:
        """Create a predefined message. Returns message ID."""
        pass

    @abstractmethod
    def get_message(self, category: MessageCategory, channel: Channel) -> Optional[PredefinedMessage]:
        """Get the stored message for a (category, channel) pair."""
        pass

    @abstractmethod
    def get_message_by_id(self, message_id: int) -> Optional[PredefinedMessage]:
        """Get predefined message by ID."""
        pass

    @abstractmethod
    def list_messages(self) -> list[PredefinedMessage]:
        """List all stored predefined messages."""
        pass

    @abstractmethod
    def update_message(self, message_id: int, content: str, personalized: bool) -> None:
        """Overwrite message content and personalized flag (last write wins)."""
        pass
