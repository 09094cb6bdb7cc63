"""Payment method management commands."""

import click

from invoicekit.cli.error_handling import handle_domain_error
from invoicekit.domain.errors import DomainError
from invoicekit.domain.payment_method import PaymentMethodService
from invoicekit.utils.payment_method_resolver import resolve_payment_method


@click.group()
def payment_method_group():
    """Manage payment methods."""
    pass


@payment_method_group.command("add")
@click.argument("name")
@click.option("--link", help="External payment link")
@click.option("--instructions", help="Free-text payment instructions")
@click.option("--inactive", is_flag=True, help="Create the method hidden from selection")
@click.pass_context
def add_method(ctx, name: str, link: str | None, instructions: str | None, inactive: bool) -> None:
    """Add a payment method.

    Examples:
        invoicekit payment-method add "Card" --link "https://pay.example.com/studio"
        invoicekit payment-method add "Bank transfer" --instructions "IBAN ES00 0000"
    """
    service = PaymentMethodService(ctx.obj["db"])
    try:
        method_id = service.create_method(
            name=name, link=link, instructions=instructions, active=not inactive
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created payment method '{name.strip()}' (ID: {method_id})")


@payment_method_group.command("list")
@click.option("--active", "active_only", is_flag=True, help="Only show active methods")
@click.pass_context
def list_methods(ctx, active_only: bool) -> None:
    """List payment methods in display order."""
    service = PaymentMethodService(ctx.obj["db"])
    methods = service.list_methods(active_only=active_only)
    if not methods:
        click.echo("No payment methods found.")
        return

    click.echo("\nPayment methods:")
    click.echo("-" * 60)
    for m in methods:
        state = "active" if m.active else "inactive"
        click.echo(f"ID: {m.id:3d} | {m.name:20s} | {state}")
        if m.link:
            click.echo(f"         Link: {m.link}")
        if m.instructions:
            click.echo(f"         Instructions: {m.instructions}")


@payment_method_group.command("update")
@click.argument("method", metavar="METHOD")
@click.option("--name", help="New name")
@click.option("--link", help="New link, or empty string to clear")
@click.option("--instructions", help="New instructions, or empty string to clear")
@click.option("--active/--inactive", default=None, help="Offer or hide the method")
@click.pass_context
def update_method(
    ctx,
    method: str,
    name: str | None,
    link: str | None,
    instructions: str | None,
    active: bool | None,
) -> None:
    """Update a payment method.

    METHOD can be a payment method name or ID.
    """
    service = PaymentMethodService(ctx.obj["db"])
    try:
        method_id = resolve_payment_method(service, method)
        updated = service.update_method(
            method_id, name=name, link=link, instructions=instructions, active=active
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated payment method '{updated.name}'")


@payment_method_group.command("delete")
@click.argument("method", metavar="METHOD")
@click.pass_context
def delete_method(ctx, method: str) -> None:
    """Delete a payment method.

    METHOD can be a payment method name or ID. Paid invoices keep their
    status but lose the reference to the deleted method.
    """
    service = PaymentMethodService(ctx.obj["db"])
    try:
        method_id = resolve_payment_method(service, method)
    except ValueError as e:
        handle_domain_error(ctx, e)

    existing = service.require_method(method_id)
    if not click.confirm(f"Are you sure you want to delete payment method '{existing.name}'?"):
        click.echo("Deletion cancelled.")
        return
    try:
        service.delete_method(method_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted payment method '{existing.name}'")


@payment_method_group.command("reorder")
@click.argument("method_ids", nargs=-1, type=int, required=True)
@click.pass_context
def reorder_methods(ctx, method_ids: tuple[int, ...]) -> None:
    """Set the display order of payment methods.

    Examples:
        invoicekit payment-method reorder 3 1 2
    """
    service = PaymentMethodService(ctx.obj["db"])
    try:
        methods = service.reorder_methods(list(method_ids))
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo("New order: " + ", ".join(m.name for m in methods))


def register_commands(cli: click.Group) -> None:
    """Register payment method commands with main CLI."""
    cli.add_command(payment_method_group, name="payment-method")
