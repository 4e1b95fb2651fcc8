"""json-server db.json import command."""

import json

import click

from recordview.cli.error_handling import handle_domain_error
from recordview.cli.runtime import run
from recordview.domain.errors import DomainError


async def import_records(store, raw_records: list) -> dict:
    """Create each object of ``raw_records`` in the store.

    Records keep their own fields (including any owner field); ids are
    reassigned by the store. Non-object entries are reported as errors.
    """
    result = {"imported": 0, "errors": []}
    for index, raw in enumerate(raw_records):
        if not isinstance(raw, dict):
            result["errors"].append(f"Entry {index}: expected an object")
            continue
        await store.create_record({key: value for key, value in raw.items() if key != "id"})
        result["imported"] += 1
    return result


@click.command("import-json")
@click.argument("json_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--key", help="Top-level key to import (defaults to the schema's collection name)")
@click.pass_context
def import_json(ctx, json_file: str, key: str | None):
    """Import records from a json-server db.json file."""
    schema = ctx.obj["schema"]
    key = key or schema.name

    try:
        with open(json_file, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        click.echo(f"Error: Could not read {json_file}: {e}", err=True)
        ctx.exit(1)

    raw_records = data.get(key) if isinstance(data, dict) else data
    if not isinstance(raw_records, list):
        click.echo(f"Error: No '{key}' list found in {json_file}", err=True)
        ctx.exit(1)

    try:
        result = run(import_records(ctx.obj["store"], raw_records))
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo("\nImport complete:")
    click.echo(f"  Imported: {result['imported']} {schema.name}")
    if result["errors"]:
        click.echo(f"  Errors: {len(result['errors'])}")
        for error in result["errors"]:
            click.echo(f"    {error}", err=True)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_json)
