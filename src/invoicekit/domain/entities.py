"""Domain model entities for invoicekit.

These are pure data classes representing business concepts, independent of
database schema. Services and pure functions pass these around; the database
layer converts them to and from ORM rows in database/mappers.py.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


class InvoiceStatus(str, Enum):
    """Persisted payment status of an invoice."""

    DRAFT = "draft"
    PENDING = "pending"
    PAID = "paid"


class DeletionState(str, Enum):
    """Deletion axis of an invoice.

    Hard-deleted invoices are erased from storage, so they have no member here.
    """

    ACTIVE = "active"
    SOFT_DELETED = "soft_deleted"


class MessageCategory(str, Enum):
    """Display classification used to pick a notification template."""

    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    DUE_SOON = "due_soon"


class Channel(str, Enum):
    """Delivery medium a template targets."""

    CHAT = "chat"
    EMAIL = "email"


@dataclass(frozen=True)
class LineItem:
    """Invoice line item. The line total is always derived."""

    description: str
    unit_price: Decimal
    quantity: Decimal
    category: str = ""

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class Totals:
    """Financial snapshot computed from line items, tax and deposit."""

    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal
    balance: Decimal


@dataclass(frozen=True)
class ClientSnapshot:
    """Client details copied onto the invoice at creation time."""

    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


@dataclass(frozen=True)
class BusinessSnapshot:
    """Issuing business details copied onto the invoice at creation time."""

    name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    logo_url: Optional[str] = None


@dataclass(frozen=True)
class Invoice:
    """Invoice domain entity."""

    id: int
    number: int
    formatted_number: Optional[str]
    client: ClientSnapshot
    business: BusinessSnapshot
    line_items: tuple[LineItem, ...]
    tax_percentage: Decimal
    deposit: Decimal
    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal
    balance: Optional[Decimal]
    status: InvoiceStatus
    issue_date: date
    due_date: Optional[date] = None
    payment_method_id: Optional[int] = None
    paid_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def display_number(self) -> str:
        """Formatted number when one was assigned, else the raw sequence number."""
        return self.formatted_number or str(self.number)

    @property
    def deletion_state(self) -> DeletionState:
        if self.deleted_at is None:
            return DeletionState.ACTIVE
        return DeletionState.SOFT_DELETED

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


@dataclass(frozen=True)
class PaymentMethod:
    """Payment method offered when completing payment or composing a message."""

    id: int
    name: str
    link: Optional[str]
    instructions: Optional[str]
    active: bool
    display_order: int
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class BaseContent:
    """Message content that always mirrors the catalog base template."""


@dataclass(frozen=True)
class CustomContent:
    """User-edited message content preserved across reloads."""

    text: str


MessageContent = Union[BaseContent, CustomContent]


@dataclass(frozen=True)
class PredefinedMessage:
    """Stored notification template for a (category, channel) pair."""

    id: int
    category: MessageCategory
    channel: Channel
    base_template: str
    content: MessageContent = field(default_factory=BaseContent)
    updated_at: Optional[datetime] = None

    @property
    def personalized(self) -> bool:
        return isinstance(self.content, CustomContent)


@dataclass(frozen=True)
class ReceivablesOverview:
    """Counts and outstanding amount across pending invoices."""

    pending_count: int
    due_soon_count: int
    overdue_count: int
    outstanding_balance: Decimal
