"""Predefined message commands."""

import click

from invoicekit.cli.error_handling import handle_domain_error
from invoicekit.domain.delivery import (
    build_chat_url,
    build_mailto_url,
    build_public_invoice_url,
    email_subject,
)
from invoicekit.domain.entities import Channel, MessageCategory
from invoicekit.domain.errors import DomainError
from invoicekit.domain.invoice import InvoiceService
from invoicekit.domain.messages import MessageTemplateService
from invoicekit.domain.payment_method import PaymentMethodService
from invoicekit.domain.resolver import MessageResolver
from invoicekit.utils.payment_method_resolver import resolve_payment_method

CATEGORY_CHOICE = click.Choice([c.value for c in MessageCategory])
CHANNEL_CHOICE = click.Choice([c.value for c in Channel])


def _template_service(ctx) -> MessageTemplateService:
    return MessageTemplateService(ctx.obj["db"], ctx.obj["catalog"])


@click.group()
def message_group():
    """Manage predefined chat and email messages."""
    pass


@message_group.command("list")
@click.pass_context
def list_messages(ctx) -> None:
    """List every message with its personalization state."""
    service = _template_service(ctx)
    click.echo(f"{'Category':<10} {'Channel':<8} {'Personalized':<12}")
    click.echo("-" * 32)
    for category in MessageCategory:
        for channel in Channel:
            message = service.get_message(category, channel)
            personalized = "yes" if message is not None and message.personalized else "no"
            click.echo(f"{category.value:<10} {channel.value:<8} {personalized:<12}")


@message_group.command("show")
@click.argument("category", type=CATEGORY_CHOICE)
@click.argument("channel", type=CHANNEL_CHOICE)
@click.pass_context
def show_message(ctx, category: str, channel: str) -> None:
    """Show the template text for a category and channel."""
    service = _template_service(ctx)
    try:
        message = service.get_or_create_message(MessageCategory(category), Channel(channel))
    except DomainError as e:
        handle_domain_error(ctx, e)

    label = "personalized" if message.personalized else "base template"
    click.echo(f"{category}/{channel} ({label}):")
    click.echo(service.effective_text(message))


@message_group.command("edit")
@click.argument("category", type=CATEGORY_CHOICE)
@click.argument("channel", type=CHANNEL_CHOICE)
@click.option("--content", help="New template text")
@click.option("--file", "content_file", type=click.File("r", encoding="utf-8"), help="Read template text from file")
@click.pass_context
def edit_message(ctx, category: str, channel: str, content: str | None, content_file) -> None:
    """Personalize the template for a category and channel.

    Placeholders such as {number}, {balance-due}, {invoice-link} and
    {payment-instructions} are filled in when the message is rendered.

    Examples:
        invoicekit message edit pending chat --content "Invoice #{number}: {balance-due} due"
        invoicekit message edit overdue email --file overdue.txt
    """
    if (content is None) == (content_file is None):
        click.echo("Error: Provide exactly one of --content or --file", err=True)
        ctx.exit(1)
    text = content if content is not None else content_file.read()

    service = _template_service(ctx)
    try:
        message = service.get_or_create_message(MessageCategory(category), Channel(channel))
        service.save_message(message.id, text)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Saved personalized {category}/{channel} message")


@message_group.command("restore")
@click.argument("category", type=CATEGORY_CHOICE)
@click.argument("channel", type=CHANNEL_CHOICE)
@click.pass_context
def restore_message(ctx, category: str, channel: str) -> None:
    """Reset a message to its base template."""
    service = _template_service(ctx)
    try:
        message = service.get_or_create_message(MessageCategory(category), Channel(channel))
        service.restore_to_base(message.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Restored {category}/{channel} message to the base template")


@message_group.command("render")
@click.argument("invoice_id", type=int)
@click.option("--channel", type=CHANNEL_CHOICE, default=Channel.CHAT.value, show_default=True)
@click.option("--category", type=CATEGORY_CHOICE, help="Defaults to the invoice's current state")
@click.option("--method", help="Payment method name or ID to include")
@click.option("--phone", help="Chat recipient (defaults to the client's phone)")
@click.option("--email", help="Email recipient (defaults to the client's email)")
@click.pass_context
def render_message(
    ctx,
    invoice_id: int,
    channel: str,
    category: str | None,
    method: str | None,
    phone: str | None,
    email: str | None,
) -> None:
    """Render the message for an invoice and print a launcher link.

    Examples:
        invoicekit message render 1 --method "Card"
        invoicekit message render 1 --channel email --category overdue
    """
    db = ctx.obj["db"]
    invoice_service = InvoiceService(db)
    method_service = PaymentMethodService(db)

    try:
        inv = invoice_service.require_invoice(invoice_id)
        payment_method = None
        if method is not None:
            payment_method = method_service.require_method(resolve_payment_method(method_service, method))
    except ValueError as e:
        handle_domain_error(ctx, e)

    selected_category = MessageCategory(category) if category else invoice_service.message_category(inv)
    selected_channel = Channel(channel)
    resolver = MessageResolver(_template_service(ctx))
    try:
        text = resolver.resolve(
            selected_category,
            selected_channel,
            inv,
            build_public_invoice_url(ctx.obj["public_url"], inv.id),
            payment_method,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(text)

    try:
        if selected_channel == Channel.CHAT:
            recipient = phone or inv.client.phone
            if recipient:
                click.echo(f"\nOpen: {build_chat_url(recipient, text)}")
        else:
            recipient = email or inv.client.email
            if recipient:
                subject = email_subject(inv.display_number, inv.business.name)
                click.echo(f"\nOpen: {build_mailto_url(recipient, subject, text)}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli: click.Group) -> None:
    """Register message commands with main CLI."""
    cli.add_command(message_group, name="message")
