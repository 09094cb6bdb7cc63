"""Invoice management commands."""

import click

from invoicekit.cli.date_filters import period_options, resolve_cli_date_range
from invoicekit.cli.error_handling import handle_domain_error
from invoicekit.domain.entities import (
    BusinessSnapshot,
    ClientSnapshot,
    Invoice,
    InvoiceStatus,
    LineItem,
)
from invoicekit.domain.errors import DomainError
from invoicekit.domain.invoice import InvoiceService
from invoicekit.domain.payment_method import PaymentMethodService
from invoicekit.domain.totals import format_money
from invoicekit.utils.amount_parser import parse_amount
from invoicekit.utils.date_parser import parse_date
from invoicekit.utils.payment_method_resolver import resolve_payment_method


def _parse_items(ctx, items: tuple[tuple[str, str, str], ...]) -> list[LineItem]:
    line_items = []
    for description, price, quantity in items:
        try:
            line_items.append(
                LineItem(
                    description=description,
                    unit_price=parse_amount(price),
                    quantity=parse_amount(quantity),
                )
            )
        except ValueError as e:
            click.echo(f"Error: Invalid line item '{description}': {e}", err=True)
            ctx.exit(1)
    return line_items


def _parse_amount_option(ctx, value: str | None, label: str):
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def _parse_date_option(ctx, value: str | None, label: str):
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def _status_label(service: InvoiceService, invoice: Invoice) -> str:
    if invoice.is_deleted:
        return "deleted"
    derived = service.derived_status(invoice)
    if derived is not None:
        return f"{invoice.status.value} ({derived.value.replace('_', ' ')})"
    return invoice.status.value


def _print_invoice_table(service: InvoiceService, invoices: list[Invoice]) -> None:
    click.echo(f"\nFound {len(invoices)} invoice(s):")
    click.echo("-" * 90)
    click.echo(
        f"{'ID':<6} {'Number':<10} {'Issued':<12} {'Due':<12} {'Client':<20} {'Total':>12} {'Status':<16}"
    )
    click.echo("-" * 90)
    for inv in invoices:
        due = str(inv.due_date) if inv.due_date else ""
        click.echo(
            f"{inv.id:<6} {inv.display_number:<10} {str(inv.issue_date):<12} {due:<12} "
            f"{inv.client.name[:20]:<20} {format_money(inv.total):>12} {_status_label(service, inv):<16}"
        )


@click.group()
def invoice_group():
    """Manage invoices."""
    pass


@invoice_group.command("create")
@click.option("--client", "client_name", required=True, help="Client name")
@click.option("--client-email", help="Client email address")
@click.option("--client-phone", help="Client phone number")
@click.option("--client-address", help="Client address")
@click.option("--business", "business_name", required=True, envvar="INVOICEKIT_BUSINESS_NAME",
              help="Issuing business name (env: INVOICEKIT_BUSINESS_NAME)")
@click.option("--business-email", envvar="INVOICEKIT_BUSINESS_EMAIL", help="Business email address")
@click.option("--business-phone", envvar="INVOICEKIT_BUSINESS_PHONE", help="Business phone number")
@click.option("--business-address", envvar="INVOICEKIT_BUSINESS_ADDRESS", help="Business address")
@click.option(
    "--item",
    "items",
    type=(str, str, str),
    multiple=True,
    metavar="DESCRIPTION PRICE QTY",
    help="Line item (repeatable)",
)
@click.option("--tax", default="0", show_default=True, help="Tax percentage (e.g., 7 or 7%)")
@click.option("--deposit", default="0", show_default=True, help="Amount already received")
@click.option("--issue-date", help="Issue date (defaults to today)")
@click.option("--due-date", help="Due date (YYYY-MM-DD or relative like 'in 30 days')")
@click.option("--draft", is_flag=True, help="Create as draft instead of pending")
@click.pass_context
def create_invoice(
    ctx,
    client_name: str,
    client_email: str | None,
    client_phone: str | None,
    client_address: str | None,
    business_name: str,
    business_email: str | None,
    business_phone: str | None,
    business_address: str | None,
    items: tuple[tuple[str, str, str], ...],
    tax: str,
    deposit: str,
    issue_date: str | None,
    due_date: str | None,
    draft: bool,
) -> None:
    """Create a new invoice.

    Examples:
        invoicekit invoice create --client "Ana" --business "Studio" \\
            --item "Logo design" 50 2 --item "Revisions" 10 1 --tax 7 --deposit 20
        invoicekit invoice create --client "Ana" --business "Studio" --draft --due-date "in 14 days"
    """
    db = ctx.obj["db"]
    service = InvoiceService(db)

    line_items = _parse_items(ctx, items)
    tax_percentage = _parse_amount_option(ctx, tax, "tax percentage")
    received = _parse_amount_option(ctx, deposit, "deposit")
    issued = _parse_date_option(ctx, issue_date, "issue date")
    due = _parse_date_option(ctx, due_date, "due date")

    try:
        invoice_id = service.create_invoice(
            client=ClientSnapshot(
                name=client_name, email=client_email, phone=client_phone, address=client_address
            ),
            business=BusinessSnapshot(
                name=business_name, email=business_email, phone=business_phone, address=business_address
            ),
            line_items=line_items,
            tax_percentage=tax_percentage,
            deposit=received,
            issue_date=issued,
            due_date=due,
            status=InvoiceStatus.DRAFT if draft else InvoiceStatus.PENDING,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    inv = service.require_invoice(invoice_id)
    click.echo(f"Created {inv.status.value} invoice #{inv.display_number} (ID: {inv.id})")
    click.echo(f"Total: {format_money(inv.total)} | Balance: {format_money(inv.balance)}")


@invoice_group.command("list")
@click.option("--status", type=click.Choice([s.value for s in InvoiceStatus]), help="Filter by status")
@click.option("--start-date", help="Issued on or after (YYYY-MM-DD or relative)")
@click.option("--end-date", help="Issued on or before (YYYY-MM-DD or relative)")
@period_options
@click.pass_context
def list_invoices(
    ctx,
    status: str | None,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    this_year: bool,
    this_week: bool,
    last_month: bool,
    last_year: bool,
    last_week: bool,
) -> None:
    """List invoices that are not in the trash."""
    db = ctx.obj["db"]
    service = InvoiceService(db)

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this-month": this_month,
            "this-year": this_year,
            "this-week": this_week,
            "last-month": last_month,
            "last-year": last_year,
            "last-week": last_week,
        },
    )

    invoices = service.list_invoices(
        status=InvoiceStatus(status) if status else None, start_date=start, end_date=end
    )
    if not invoices:
        click.echo("No invoices found.")
        return
    _print_invoice_table(service, invoices)


@invoice_group.command("show")
@click.argument("invoice_id", type=int)
@click.pass_context
def show_invoice(ctx, invoice_id: int) -> None:
    """Show invoice details."""
    db = ctx.obj["db"]
    service = InvoiceService(db)

    try:
        inv = service.require_invoice(invoice_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nInvoice #{inv.display_number} (ID: {inv.id})")
    click.echo("=" * 60)
    click.echo(f"  Status: {_status_label(service, inv)}")
    click.echo(f"  From: {inv.business.name}")
    click.echo(f"  To: {inv.client.name}")
    if inv.client.email:
        click.echo(f"  Email: {inv.client.email}")
    if inv.client.phone:
        click.echo(f"  Phone: {inv.client.phone}")
    click.echo(f"  Issued: {inv.issue_date}")
    if inv.due_date:
        click.echo(f"  Due: {inv.due_date}")
    click.echo("-" * 60)
    for item in inv.line_items:
        click.echo(
            f"  {item.description[:30]:<30} {format_money(item.unit_price):>10} x {item.quantity:<6} "
            f"{format_money(item.line_total):>10}"
        )
    click.echo("-" * 60)
    click.echo(f"  Subtotal: {format_money(inv.subtotal)}")
    click.echo(f"  Tax ({inv.tax_percentage}%): {format_money(inv.tax_amount)}")
    click.echo(f"  Total: {format_money(inv.total)}")
    click.echo(f"  Deposit: {format_money(inv.deposit)}")
    click.echo(f"  Balance due: {format_money(inv.balance if inv.balance is not None else inv.total)}")
    if inv.paid_at:
        click.echo(f"  Paid: {inv.paid_at}")
    if inv.deleted_at:
        click.echo(f"  Deleted: {inv.deleted_at}")


@invoice_group.command("edit")
@click.argument("invoice_id", type=int)
@click.option(
    "--item",
    "items",
    type=(str, str, str),
    multiple=True,
    metavar="DESCRIPTION PRICE QTY",
    help="Replace all line items (repeatable)",
)
@click.option("--tax", help="New tax percentage")
@click.option("--deposit", help="New deposit amount")
@click.option("--due-date", help="New due date")
@click.option("--clear-due-date", is_flag=True, help="Remove the due date")
@click.pass_context
def edit_invoice(
    ctx,
    invoice_id: int,
    items: tuple[tuple[str, str, str], ...],
    tax: str | None,
    deposit: str | None,
    due_date: str | None,
    clear_due_date: bool,
) -> None:
    """Edit a draft or pending invoice.

    Paid invoices are locked; revert the payment first.

    Examples:
        invoicekit invoice edit 1 --tax 8
        invoicekit invoice edit 1 --item "Logo design" 60 2 --deposit 0
    """
    db = ctx.obj["db"]
    service = InvoiceService(db)

    line_items = _parse_items(ctx, items) if items else None
    try:
        inv = service.update_invoice(
            invoice_id,
            line_items=line_items,
            tax_percentage=_parse_amount_option(ctx, tax, "tax percentage"),
            deposit=_parse_amount_option(ctx, deposit, "deposit"),
            due_date=_parse_date_option(ctx, due_date, "due date"),
            clear_due_date=clear_due_date,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated invoice #{inv.display_number}")
    click.echo(f"Total: {format_money(inv.total)} | Balance: {format_money(inv.balance)}")


@invoice_group.command("finalize")
@click.argument("invoice_id", type=int)
@click.pass_context
def finalize_invoice(ctx, invoice_id: int) -> None:
    """Move a draft invoice to pending."""
    service = InvoiceService(ctx.obj["db"])
    try:
        inv = service.finalize_invoice(invoice_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Invoice #{inv.display_number} is now pending")


@invoice_group.command("pay")
@click.argument("invoice_id", type=int)
@click.option("--method", help="Payment method name or ID")
@click.pass_context
def pay_invoice(ctx, invoice_id: int, method: str | None) -> None:
    """Mark a pending invoice as paid.

    Examples:
        invoicekit invoice pay 1 --method "Bank transfer"
    """
    db = ctx.obj["db"]
    service = InvoiceService(db)

    method_id = None
    if method is not None:
        try:
            method_id = resolve_payment_method(PaymentMethodService(db), method)
        except ValueError as e:
            handle_domain_error(ctx, e)

    try:
        inv = service.complete_payment(invoice_id, method_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Invoice #{inv.display_number} marked as paid")


@invoice_group.command("revert")
@click.argument("invoice_id", type=int)
@click.pass_context
def revert_payment(ctx, invoice_id: int) -> None:
    """Revert a paid invoice back to pending."""
    service = InvoiceService(ctx.obj["db"])
    try:
        inv = service.revert_payment(invoice_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Invoice #{inv.display_number} reverted to pending")
    click.echo(f"Balance due: {format_money(inv.balance)}")


@invoice_group.command("delete")
@click.argument("invoice_id", type=int)
@click.option("--permanent", is_flag=True, help="Erase the invoice instead of moving it to the trash")
@click.pass_context
def delete_invoice(ctx, invoice_id: int, permanent: bool) -> None:
    """Move an invoice to the trash, or erase it with --permanent.

    Examples:
        invoicekit invoice delete 1
        invoicekit invoice delete 1 --permanent
    """
    service = InvoiceService(ctx.obj["db"])

    try:
        inv = service.require_invoice(invoice_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not permanent:
        if not click.confirm(f"Move invoice #{inv.display_number} to the trash?"):
            click.echo("Deletion cancelled.")
            return
        try:
            service.soft_delete_invoice(invoice_id)
        except DomainError as e:
            handle_domain_error(ctx, e)
        click.echo(f"Moved invoice #{inv.display_number} to the trash")
        return

    if not click.confirm(f"Permanently delete invoice #{inv.display_number}?"):
        click.echo("Deletion cancelled.")
        return
    if not click.confirm("This cannot be undone. Are you absolutely sure?"):
        click.echo("Deletion cancelled.")
        return
    try:
        service.hard_delete_invoice(invoice_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Permanently deleted invoice #{inv.display_number}")


@invoice_group.command("restore")
@click.argument("invoice_id", type=int)
@click.pass_context
def restore_invoice(ctx, invoice_id: int) -> None:
    """Restore an invoice from the trash."""
    service = InvoiceService(ctx.obj["db"])
    try:
        inv = service.restore_invoice(invoice_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Restored invoice #{inv.display_number}")


@invoice_group.command("trash")
@click.pass_context
def list_trash(ctx) -> None:
    """List invoices in the trash."""
    service = InvoiceService(ctx.obj["db"])
    invoices = service.list_deleted_invoices()
    if not invoices:
        click.echo("Trash is empty.")
        return
    _print_invoice_table(service, invoices)


@invoice_group.command("overview")
@click.pass_context
def overview(ctx) -> None:
    """Summarize outstanding receivables."""
    service = InvoiceService(ctx.obj["db"])
    summary = service.overview()
    click.echo(f"Pending invoices: {summary.pending_count}")
    click.echo(f"Due soon: {summary.due_soon_count}")
    click.echo(f"Overdue: {summary.overdue_count}")
    click.echo(f"Outstanding balance: {format_money(summary.outstanding_balance)}")


def register_commands(cli: click.Group) -> None:
    """Register invoice commands with main CLI."""
    cli.add_command(invoice_group, name="invoice")
