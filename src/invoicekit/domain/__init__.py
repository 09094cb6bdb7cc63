"""Domain layer for invoicekit.

Services are imported from their own modules (e.g.
``invoicekit.domain.invoice.InvoiceService``) so that the database layer can
import entities from here without a cycle.
"""

from invoicekit.domain.entities import (
    Channel,
    Invoice,
    InvoiceStatus,
    LineItem,
    MessageCategory,
    PaymentMethod,
    PredefinedMessage,
)

__all__ = [
    "Channel",
    "Invoice",
    "InvoiceStatus",
    "LineItem",
    "MessageCategory",
    "PaymentMethod",
    "PredefinedMessage",
]
