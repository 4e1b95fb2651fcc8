"""Main CLI entry point."""

import click

from recordview.cli.runtime import parse_scope
from recordview.domain.schemas import SCHEMAS, get_schema
from recordview.store.factories import create_store
from recordview.utils.logging import setup_logging

# Import and register all commands at module level
from recordview.cli.commands import (
    add,
    facets,
    import_cmd,
    record,
    view,
)


@click.group()
@click.option(
    "--store",
    "store_target",
    help=(
        "Record store: http(s):// URL of a json-server, 'memory:', a SQLAlchemy URL "
        "or a SQLite file path (overrides RECORDVIEW_STORE environment variable)"
    ),
    envvar="RECORDVIEW_STORE",
)
@click.option(
    "--schema",
    "schema_name",
    type=click.Choice(sorted(SCHEMAS)),
    default="expenses",
    show_default=True,
    envvar="RECORDVIEW_SCHEMA",
    help="Collection schema to use",
)
@click.option("--user", envvar="RECORDVIEW_USER", help="Current user id (scope of scoped collections)")
@click.option(
    "--log-level",
    default="WARNING",
    show_default=True,
    envvar="RECORDVIEW_LOG_LEVEL",
    help="Logging level",
)
@click.pass_context
def cli(ctx, store_target: str | None, schema_name: str, user: str | None, log_level: str):
    """Recordview - browse and edit record collections.

    Lists, filters, sorts and totals records (expenses, payments, movies,
    products, cart items) kept in a local database or a json-server.
    """
    ctx.ensure_object(dict)
    setup_logging(log_level)

    # Initialize the store only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        schema = get_schema(schema_name)
        store = create_store(store_target, schema.name)
        store.connect()
        ctx.call_on_close(store.disconnect)
        ctx.obj["store"] = store
        ctx.obj["schema"] = schema
        ctx.obj["scope"] = parse_scope(user)


# Register all commands
view.register_commands(cli)
add.register_commands(cli)
record.register_commands(cli)
facets.register_commands(cli)
import_cmd.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
