"""Main CLI entry point."""

import logging

import click

from invoicekit.database.factories import create_sqlite_database
from invoicekit.domain.delivery import DEFAULT_PUBLIC_BASE_URL
from invoicekit.domain.templates import load_catalog

from invoicekit.cli.commands import invoice, message, payment_method


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides INVOICEKIT_DB_PATH environment variable)",
    envvar="INVOICEKIT_DB_PATH",
)
@click.option(
    "--templates",
    "templates_path",
    type=click.Path(exists=True, dir_okay=False),
    help="TOML file overriding the base message templates",
    envvar="INVOICEKIT_TEMPLATES_PATH",
)
@click.option(
    "--public-url",
    default=DEFAULT_PUBLIC_BASE_URL,
    show_default=True,
    help="Base URL used for public invoice links",
    envvar="INVOICEKIT_PUBLIC_URL",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, templates_path: str | None, public_url: str, verbose: bool):
    """Invoicekit - Invoices, payment tracking and client reminders.

    Create invoices, move them through draft, pending and paid, and compose
    chat or email reminders from editable message templates.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        try:
            ctx.obj["catalog"] = load_catalog(templates_path)
        except (ValueError, OSError) as e:
            click.echo(f"Error: Could not load templates: {e}", err=True)
            ctx.exit(1)

        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["public_url"] = public_url


invoice.register_commands(cli)
payment_method.register_commands(cli)
message.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
