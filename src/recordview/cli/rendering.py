"""Terminal rendering of records and totals."""

from typing import Iterable

import click

from recordview.domain.entities import Record, RecordSchema
from recordview.utils.formatters import format_currency, format_date


def label_field(schema: RecordSchema) -> str | None:
    """Field shown as the record's label in compact tables."""
    return schema.search_fields[0] if schema.search_fields else None


def echo_table(records: Iterable[Record], schema: RecordSchema) -> None:
    """Print records as a compact table."""
    records = list(records)
    label = label_field(schema)
    filter_columns = [
        (key, field) for key, field in schema.filter_fields.items() if field != label
    ]

    header = f"{'ID':<6} {'Date':<12} "
    if label:
        header += f"{label.capitalize():<30} "
    for key, _ in filter_columns:
        header += f"{key.capitalize():<16} "
    header += f"{schema.amount_field.capitalize():>14}"

    click.echo(f"\nFound {len(records)} {schema.name}:")
    click.echo("-" * len(header))
    click.echo(header)
    click.echo("-" * len(header))
    for record in records:
        line = f"{str(record.id):<6} {format_date(record.get('date')):<12} "
        if label:
            line += f"{str(record.get(label) or '')[:30]:<30} "
        for _, field in filter_columns:
            line += f"{str(record.get(field) or '')[:16]:<16} "
        line += f"{format_currency(record.amount):>14}"
        click.echo(line)


def echo_record(record: Record, schema: RecordSchema) -> None:
    """Print every field of one record."""
    click.echo(f"\n{schema.item_name.capitalize()} ID: {record.id}")
    click.echo(f"  {schema.amount_field.capitalize()}: {format_currency(record.amount)}")
    if record.quantity is not None:
        click.echo(f"  Line total: {format_currency(record.line_total)}")
    for name, value in record.fields.items():
        if name == "date":
            value = format_date(value)
        click.echo(f"  {name}: {value}")


def echo_totals(total, grand_total, filtered: bool) -> None:
    click.echo(f"\nTotal: {format_currency(total)}")
    if filtered:
        click.echo(f"Total (all records): {format_currency(grand_total)}")
