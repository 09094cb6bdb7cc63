"""Shared pytest fixtures for invoicekit tests."""

import os
import tempfile
from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from invoicekit.database.factories import create_sqlite_database
from invoicekit.domain.documents import DocumentListener
from invoicekit.domain.entities import BusinessSnapshot, ClientSnapshot, InvoiceStatus, LineItem
from invoicekit.domain.invoice import InvoiceService
from invoicekit.domain.messages import MessageTemplateService
from invoicekit.domain.payment_method import PaymentMethodService
from invoicekit.domain.templates import TemplateCatalog

FIXED_NOW = datetime(2024, 6, 10, 12, 0, tzinfo=UTC)
TODAY = date(2024, 6, 10)


class RecordingDocumentListener(DocumentListener):
    """Document listener that remembers the signals it receives."""

    def __init__(self):
        self.stale: list[int] = []
        self.discarded: list[int] = []

    def mark_stale(self, invoice_id: int) -> None:
        self.stale.append(invoice_id)

    def discard(self, invoice_id: int) -> None:
        self.discarded.append(invoice_id)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def documents():
    """Document listener that records stale/discard signals."""
    return RecordingDocumentListener()


@pytest.fixture
def invoice_service(temp_db, documents):
    """Create an InvoiceService with a fixed clock."""
    return InvoiceService(temp_db, documents=documents, clock=lambda: FIXED_NOW)


@pytest.fixture
def payment_method_service(temp_db):
    """Create a PaymentMethodService with a temporary database."""
    return PaymentMethodService(temp_db)


@pytest.fixture
def catalog():
    """Built-in base template catalog."""
    return TemplateCatalog()


@pytest.fixture
def message_service(temp_db, catalog):
    """Create a MessageTemplateService with the built-in catalog."""
    return MessageTemplateService(temp_db, catalog)


@pytest.fixture
def client():
    return ClientSnapshot(name="Ana Lopez", email="ana@example.com", phone="+1 (555) 010-2030")


@pytest.fixture
def business():
    return BusinessSnapshot(name="Lopez Studio", email="hello@studio.example")


@pytest.fixture
def sample_items():
    """Two line items: $50 x 2 and $10 x 1."""
    return [
        LineItem(description="Logo design", unit_price=Decimal("50"), quantity=Decimal("2")),
        LineItem(description="Revisions", unit_price=Decimal("10"), quantity=Decimal("1")),
    ]


@pytest.fixture
def pending_invoice(invoice_service, client, business, sample_items):
    """Pending invoice: subtotal 110, tax 7%, deposit 20, due in 30 days."""
    invoice_id = invoice_service.create_invoice(
        client=client,
        business=business,
        line_items=sample_items,
        tax_percentage=7,
        deposit=20,
        issue_date=TODAY,
        due_date=date(2024, 7, 10),
    )
    return invoice_service.get_invoice(invoice_id)


@pytest.fixture
def draft_invoice(invoice_service, client, business, sample_items):
    """Draft invoice with the sample items and no tax."""
    invoice_id = invoice_service.create_invoice(
        client=client,
        business=business,
        line_items=sample_items,
        issue_date=TODAY,
        status=InvoiceStatus.DRAFT,
    )
    return invoice_service.get_invoice(invoice_id)


@pytest.fixture
def card_method(payment_method_service):
    """Active payment method with a link and instructions."""
    method_id = payment_method_service.create_method(
        name="Card", link="https://pay.example.com/studio", instructions="Reference your invoice number"
    )
    return payment_method_service.get_method(method_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def today():
    """The date the fixed clock reports."""
    return TODAY
