"""Notification message resolution.

Turns a stored template plus live invoice and payment method data into the
final text handed to a delivery launcher.
"""

import re
from typing import Optional

from invoicekit.domain.entities import (
    Channel,
    Invoice,
    InvoiceStatus,
    MessageCategory,
    PaymentMethod,
)
from invoicekit.domain.messages import MessageTemplateService
from invoicekit.domain.totals import format_money

# Shown when a payment method has no usable link of its own.
FALLBACK_PAYMENT_LINK = "https://stripe.com/payments/link"

PLACEHOLDER_PATTERN = re.compile(r"\{([a-z]+(?:-[a-z]+)*)\}")


def is_valid_payment_link(link: Optional[str]) -> bool:
    """A link is usable when it is non-empty and not the fallback link."""
    if link is None or not link.strip():
        return False
    link = link.strip()
    return link != FALLBACK_PAYMENT_LINK and "stripe.com/payments/link" not in link


def build_payment_instructions(link: Optional[str], description: Optional[str]) -> str:
    """Render the payment instructions block from a link and free text."""
    has_link = is_valid_payment_link(link)
    has_description = bool(description and description.strip())

    if has_link and has_description:
        return f"🔗 {link.strip()}\n\n📝 Additional instructions:\n{description.strip()}"
    if has_link:
        return f"🔗 {link.strip()}"
    if has_description:
        return f"📝 Instructions:\n{description.strip()}"
    return f"🔗 {FALLBACK_PAYMENT_LINK}"


def balance_due_text(invoice: Invoice) -> str:
    if invoice.status == InvoiceStatus.PAID:
        return format_money(0)
    if invoice.balance is None:
        return format_money(invoice.total)
    return format_money(invoice.balance)


def build_placeholder_values(
    invoice: Invoice,
    invoice_link: str,
    payment_method: Optional[PaymentMethod] = None,
) -> dict[str, str]:
    """Values for every supported placeholder."""
    link = payment_method.link if payment_method is not None else None
    description = payment_method.instructions if payment_method is not None else None
    balance = balance_due_text(invoice)
    return {
        "number": invoice.display_number,
        "amount": format_money(invoice.total),
        "balance-due": balance,
        "balance": balance,
        "invoice-link": invoice_link,
        "payment-link": link or FALLBACK_PAYMENT_LINK,
        "payment-description": description or "",
        "payment-instructions": build_payment_instructions(link, description),
    }


def render_template(template: str, values: dict[str, str]) -> str:
    """Substitute {name} placeholders in a single pass.

    Unknown names are left as written. Defined placeholders appearing inside
    a substituted value are dropped, so none survive into the output.
    """

    def strip_defined(value: str) -> str:
        return PLACEHOLDER_PATTERN.sub(
            lambda match: "" if match.group(1) in values else match.group(0), value
        )

    return PLACEHOLDER_PATTERN.sub(
        lambda match: strip_defined(values[match.group(1)])
        if match.group(1) in values
        else match.group(0),
        template,
    )


class MessageResolver:
    """Produces final notification text for an invoice."""

    def __init__(self, templates: MessageTemplateService):
        """Initialize message resolver.

        Args:
            templates: Template store used to fetch (and lazily create) messages
        """
        self.templates = templates

    def template_for(self, category: MessageCategory, channel: Channel) -> str:
        """Template text to render for a pair, creating the stored message if needed."""
        message = self.templates.get_or_create_message(category, channel)
        return self.templates.effective_text(message)

    def resolve(
        self,
        category: MessageCategory,
        channel: Channel,
        invoice: Invoice,
        invoice_link: str,
        payment_method: Optional[PaymentMethod] = None,
    ) -> str:
        """Resolve the message for a category and channel.

        Args:
            category: Message category (pending, paid, overdue, due soon)
            channel: Delivery channel
            invoice: Invoice supplying number and amounts
            invoice_link: Public URL for viewing the invoice
            payment_method: Optional selected payment method

        Returns:
            Fully substituted message text
        """
        template = self.template_for(category, channel)
        values = build_placeholder_values(invoice, invoice_link, payment_method)
        return render_template(template, values)
