"""SQLAlchemy models for invoicekit database."""

from datetime import datetime, UTC
from decimal import Decimal
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    ForeignKey,
    DateTime,
    Date,
    Boolean,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session
from sqlalchemy.types import TypeDecorator

Base = declarative_base()


class ExactDecimal(TypeDecorator):
    """Decimal stored as its exact text form.

    SQLite has no decimal type, so amounts go through text to come back with
    the same digits they were written with.
    """

    impl = String
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(Decimal(str(value)))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value)


class UTCDateTime(TypeDecorator):
    """Timestamp stored as naive UTC and read back as an aware UTC datetime."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None or value.tzinfo is None:
            return value
        return value.astimezone(UTC).replace(tzinfo=None)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return value.replace(tzinfo=UTC)


class Invoice(Base):
    """Invoice model with client and business details snapshotted at creation."""

    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True)
    number = Column(Integer, unique=True, nullable=False)
    formatted_number = Column(String, nullable=True)

    client_name = Column(String, nullable=False)
    client_email = Column(String, nullable=True)
    client_phone = Column(String, nullable=True)
    client_address = Column(String, nullable=True)

    business_name = Column(String, nullable=False)
    business_address = Column(String, nullable=True)
    business_phone = Column(String, nullable=True)
    business_email = Column(String, nullable=True)
    business_logo_url = Column(String, nullable=True)

    tax_percentage = Column(ExactDecimal, default=0, nullable=False)
    deposit = Column(ExactDecimal, default=0, nullable=False)
    subtotal = Column(ExactDecimal, nullable=False)
    tax_amount = Column(ExactDecimal, nullable=False)
    total = Column(ExactDecimal, nullable=False)
    balance = Column(ExactDecimal, nullable=True)

    status = Column(String, nullable=False)
    issue_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=True)
    payment_method_id = Column(Integer, ForeignKey("payment_methods.id"), nullable=True)
    paid_at = Column(UTCDateTime, nullable=True)
    deleted_at = Column(UTCDateTime, nullable=True)
    created_at = Column(UTCDateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    line_items = relationship(
        "InvoiceLineItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceLineItem.position",
    )
    payment_method = relationship("PaymentMethod")


class InvoiceLineItem(Base):
    """Invoice line item model. Line totals are never stored."""

    __tablename__ = "invoice_line_items"

    id = Column(Integer, primary_key=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=False)
    position = Column(Integer, nullable=False)
    category = Column(String, default="", nullable=False)
    description = Column(String, nullable=False)
    unit_price = Column(ExactDecimal, nullable=False)
    quantity = Column(ExactDecimal, nullable=False)

    # Relationships
    invoice = relationship("Invoice", back_populates="line_items")


class PaymentMethod(Base):
    """Payment method model."""

    __tablename__ = "payment_methods"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    link = Column(String, nullable=True)
    instructions = Column(Text, nullable=True)
    active = Column(Boolean, default=True, nullable=False)
    display_order = Column(Integer, default=0, nullable=False)
    created_at = Column(UTCDateTime, default=lambda: datetime.now(UTC), nullable=False)


class PredefinedMessage(Base):
    """Notification template stored per (category, channel)."""

    __tablename__ = "predefined_messages"

    id = Column(Integer, primary_key=True)
    category = Column(String, nullable=False)
    channel = Column(String, nullable=False)
    base_template = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    personalized = Column(Boolean, default=False, nullable=False)
    updated_at = Column(
        UTCDateTime,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    __table_args__ = (UniqueConstraint("category", "channel", name="uq_message_category_channel"),)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
