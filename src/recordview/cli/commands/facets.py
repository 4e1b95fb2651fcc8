"""Facet listing command."""

import click

from recordview.cli.error_handling import handle_domain_error
from recordview.cli.runtime import build_container, load_or_raise, run
from recordview.domain.errors import DomainError


@click.command("facets")
@click.pass_context
def list_facets(ctx):
    """List the distinct values of each filterable field."""
    schema = ctx.obj["schema"]
    container = build_container(ctx)
    try:
        state = run(load_or_raise(container))
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not schema.filter_fields:
        click.echo(f"{schema.name.capitalize()} have no filterable fields.")
        return

    for key, values in state.facets.items():
        shown = ", ".join(values) if values else "(none)"
        click.echo(f"{key}: {shown}")


def register_commands(cli):
    """Register facets command with main CLI."""
    cli.add_command(list_facets)
