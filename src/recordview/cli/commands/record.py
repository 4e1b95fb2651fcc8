"""Single-record commands: show, update and delete."""

import click

from recordview.cli.commands.add import collect_fields, record_options
from recordview.cli.error_handling import handle_domain_error
from recordview.cli.rendering import echo_record
from recordview.cli.runtime import build_container, load_or_raise, run
from recordview.domain.errors import DomainError


@click.command("show")
@click.argument("record_id")
@click.pass_context
def show_record(ctx, record_id: str):
    """Show every field of one record."""
    schema = ctx.obj["schema"]
    container = build_container(ctx)

    async def _show():
        await load_or_raise(container)
        return await container.select(record_id)

    try:
        record = run(_show())
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    echo_record(record, schema)


@click.command("update")
@click.argument("record_id")
@record_options
@click.pass_context
def update_record(
    ctx,
    record_id: str,
    name: str | None,
    amount: str | None,
    category: str | None,
    date: str | None,
    field_values: tuple[str, ...],
):
    """Update a record.

    Only the given fields change; the merged record replaces the stored one.

    Examples:
        recordview --user 1 update 9 --amount 1300
        recordview --user 1 update 9 --category Housing --field status=paid
    """
    schema = ctx.obj["schema"]
    changes = collect_fields(ctx, name, amount, category, date, field_values)
    if not changes:
        click.echo("Error: Provide at least one field to update", err=True)
        ctx.exit(1)

    container = build_container(ctx)

    async def _update():
        await load_or_raise(container)
        current = await container.select(record_id)
        return await container.update(current.id, {**current.to_payload(), **changes})

    try:
        record = run(_update())
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Updated {schema.item_name} {record.id}")


@click.command("delete")
@click.argument("record_id")
@click.option("--yes", "-y", is_flag=True, help="Delete without asking for confirmation")
@click.pass_context
def delete_record(ctx, record_id: str, yes: bool):
    """Delete a record."""
    schema = ctx.obj["schema"]
    container = build_container(ctx)

    if not yes:
        click.confirm(f"Delete {schema.item_name} {record_id}?", abort=True)

    async def _delete():
        await load_or_raise(container)
        current = await container.select(record_id)
        await container.remove(current.id)
        return current

    try:
        current = run(_delete())
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Deleted {schema.item_name} {current.id}")


def register_commands(cli):
    """Register record commands with main CLI."""
    cli.add_command(show_record)
    cli.add_command(update_record)
    cli.add_command(delete_record)
