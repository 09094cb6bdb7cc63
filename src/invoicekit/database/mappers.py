"""Mapper functions to convert between domain models and SQLAlchemy models.

Snapshots, status enums and the personalized flag are flattened into columns
on the way in and rebuilt into domain value objects here on the way out.
"""

from invoicekit.domain import entities as domain
from invoicekit.database.models import (
    Invoice as ORMInvoice,
    InvoiceLineItem as ORMInvoiceLineItem,
    PaymentMethod as ORMPaymentMethod,
    PredefinedMessage as ORMPredefinedMessage,
)


def line_item_to_domain(orm_item: ORMInvoiceLineItem) -> domain.LineItem:
    """Convert SQLAlchemy InvoiceLineItem model to domain LineItem."""
    return domain.LineItem(
        description=orm_item.description,
        unit_price=orm_item.unit_price,
        quantity=orm_item.quantity,
        category=orm_item.category or "",
    )


def line_items_to_orm(line_items: tuple[domain.LineItem, ...]) -> list[ORMInvoiceLineItem]:
    """Build ORM line item rows, numbering positions in order."""
    return [
        ORMInvoiceLineItem(
            position=position,
            category=item.category,
            description=item.description,
            unit_price=item.unit_price,
            quantity=item.quantity,
        )
        for position, item in enumerate(line_items)
    ]


def invoice_to_domain(orm_invoice: ORMInvoice) -> domain.Invoice:
    """Convert SQLAlchemy Invoice model to domain Invoice entity."""
    return domain.Invoice(
        id=orm_invoice.id,
        number=orm_invoice.number,
        formatted_number=orm_invoice.formatted_number,
        client=domain.ClientSnapshot(
            name=orm_invoice.client_name,
            email=orm_invoice.client_email,
            phone=orm_invoice.client_phone,
            address=orm_invoice.client_address,
        ),
        business=domain.BusinessSnapshot(
            name=orm_invoice.business_name,
            address=orm_invoice.business_address,
            phone=orm_invoice.business_phone,
            email=orm_invoice.business_email,
            logo_url=orm_invoice.business_logo_url,
        ),
        line_items=tuple(line_item_to_domain(item) for item in orm_invoice.line_items),
        tax_percentage=orm_invoice.tax_percentage,
        deposit=orm_invoice.deposit,
        subtotal=orm_invoice.subtotal,
        tax_amount=orm_invoice.tax_amount,
        total=orm_invoice.total,
        balance=orm_invoice.balance,
        status=domain.InvoiceStatus(orm_invoice.status),
        issue_date=orm_invoice.issue_date,
        due_date=orm_invoice.due_date,
        payment_method_id=orm_invoice.payment_method_id,
        paid_at=orm_invoice.paid_at,
        deleted_at=orm_invoice.deleted_at,
        created_at=orm_invoice.created_at,
    )


def invoice_update_values(invoice: domain.Invoice) -> dict:
    """Column values for the mutable part of an invoice."""
    return {
        "tax_percentage": invoice.tax_percentage,
        "deposit": invoice.deposit,
        "subtotal": invoice.subtotal,
        "tax_amount": invoice.tax_amount,
        "total": invoice.total,
        "balance": invoice.balance,
        "status": invoice.status.value,
        "due_date": invoice.due_date,
        "payment_method_id": invoice.payment_method_id,
        "paid_at": invoice.paid_at,
        "deleted_at": invoice.deleted_at,
    }


def payment_method_to_domain(orm_method: ORMPaymentMethod) -> domain.PaymentMethod:
    """Convert SQLAlchemy PaymentMethod model to domain PaymentMethod entity."""
    return domain.PaymentMethod(
        id=orm_method.id,
        name=orm_method.name,
        link=orm_method.link,
        instructions=orm_method.instructions,
        active=orm_method.active,
        display_order=orm_method.display_order,
        created_at=orm_method.created_at,
    )


def message_to_domain(orm_message: ORMPredefinedMessage) -> domain.PredefinedMessage:
    """Convert SQLAlchemy PredefinedMessage model to domain PredefinedMessage entity."""
    if orm_message.personalized:
        content: domain.MessageContent = domain.CustomContent(orm_message.content)
    else:
        content = domain.BaseContent()
    return domain.PredefinedMessage(
        id=orm_message.id,
        category=domain.MessageCategory(orm_message.category),
        channel=domain.Channel(orm_message.channel),
        base_template=orm_message.base_template,
        content=content,
        updated_at=orm_message.updated_at,
    )
