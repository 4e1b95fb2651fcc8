"""Record listing command."""

import click

from recordview.cli.error_handling import handle_domain_error
from recordview.cli.rendering import echo_record, echo_table, echo_totals
from recordview.cli.runtime import build_container, load_or_raise, parse_key_values, run
from recordview.domain.errors import DomainError


@click.command("list")
@click.option("--search", help="Case-insensitive text to look for in the searchable fields")
@click.option(
    "--filter",
    "filter_values",
    multiple=True,
    metavar="KEY=VALUE",
    help="Exact-match filter, e.g. --filter category=Food (repeatable)",
)
@click.option("--sort", "sort_by", help="Sort key such as date_desc, amount_asc, category_asc")
@click.option("--verbose", "-v", is_flag=True, help="Show every field of each record")
@click.pass_context
def list_records(ctx, search: str | None, filter_values: tuple[str, ...], sort_by: str | None, verbose: bool):
    """List records with optional search, filters and sorting.

    Examples:
        recordview list --filter category=Food --sort amount_desc
        recordview --schema payments --user 1 list --search spring
    """
    schema = ctx.obj["schema"]
    changes = parse_key_values(filter_values, "--filter")
    if search is not None:
        changes["search_term"] = search
    if sort_by is not None:
        changes["sort_by"] = sort_by

    container = build_container(ctx)
    try:
        run(load_or_raise(container))
    except DomainError as e:
        handle_domain_error(ctx, e)
    state = container.set_filter(changes)

    if not state.visible:
        click.echo(f"No {schema.name} found.")
        return

    if verbose:
        click.echo(f"\nFound {len(state.visible)} {schema.name}:")
        for record in state.visible:
            echo_record(record, schema)
    else:
        echo_table(state.visible, schema)

    filtered = bool(state.filters.search_term.strip() or state.filters.active_filters())
    echo_totals(state.total, state.grand_total, filtered)


def register_commands(cli):
    """Register list command with main CLI."""
    cli.add_command(list_records)
