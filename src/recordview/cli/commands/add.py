"""Add record command."""

from decimal import Decimal
from typing import Any

import click

from recordview.cli.error_handling import handle_domain_error
from recordview.cli.runtime import build_container, load_or_raise, parse_key_values, run
from recordview.domain.errors import DomainError
from recordview.utils.amount_parser import parse_amount
from recordview.utils.date_parser import parse_date


def collect_fields(
    ctx,
    name: str | None,
    amount: str | None,
    category: str | None,
    date: str | None,
    field_values: tuple[str, ...],
) -> dict[str, Any]:
    """Validate command options and build the record fields.

    Exits with an error message on invalid input.
    """
    fields: dict[str, Any] = parse_key_values(field_values, "--field")
    if name is not None:
        if not name.strip():
            click.echo("Error: Name cannot be empty", err=True)
            ctx.exit(1)
        fields["name"] = name.strip()
    if category is not None:
        fields["category"] = category
    if date is not None:
        try:
            fields["date"] = parse_date(date).isoformat()
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)
    if amount is not None:
        try:
            value = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)
        if value == Decimal(0):
            click.echo("Error: Amount must be non-zero", err=True)
            ctx.exit(1)
        fields[ctx.obj["schema"].amount_field] = value
    return fields


def record_options(func):
    """Options shared by add and update."""
    func = click.option(
        "--field",
        "field_values",
        multiple=True,
        metavar="KEY=VALUE",
        help="Any other field, e.g. --field status=paid (repeatable)",
    )(func)
    func = click.option("--date", help="Date (YYYY-MM-DD or relative like 'today', 'yesterday')")(func)
    func = click.option("--category", help="Category")(func)
    func = click.option(
        "--amount", help="Amount, stored in the collection's money field (e.g., 123.45 or $1,234.56)"
    )(func)
    func = click.option("--name", help="Name")(func)
    return func


@click.command("add")
@record_options
@click.pass_context
def add_record(
    ctx,
    name: str | None,
    amount: str | None,
    category: str | None,
    date: str | None,
    field_values: tuple[str, ...],
):
    """Add a record.

    Examples:
        recordview --user 1 add --name Rent --amount 1200 --category Housing --date today
    """
    schema = ctx.obj["schema"]
    fields = collect_fields(ctx, name, amount, category, date, field_values)
    if not fields:
        click.echo("Error: Provide at least one field to add", err=True)
        ctx.exit(1)

    container = build_container(ctx)

    async def _add():
        await load_or_raise(container)
        return await container.create(fields)

    try:
        record = run(_add())
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    label = record.get("name") or record.get("title") or ""
    message = f"Created {schema.item_name} {record.id}"
    if label:
        message += f": {label}"
    click.echo(message)


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_record)
