"""Filter, sort and aggregate pipeline for the derived view.

``apply_filters_and_sort`` is a pure function of its inputs: it copies the
records it receives and never consults container state.
"""

from decimal import Decimal
from typing import Any, Callable, Iterable, Optional, Sequence

from recordview.domain.entities import (
    DerivedView,
    FilterCriteria,
    Record,
    RecordSchema,
    SortField,
    SortKind,
)
from recordview.utils.amount_parser import coerce_amount
from recordview.utils.date_parser import parse_instant


def calculate_total(records: Iterable[Record]) -> Decimal:
    """Sum record line totals (amount times quantity where there is one)."""
    return sum((record.line_total for record in records), Decimal(0))


def parse_sort_key(sort_by: str) -> tuple[str, bool] | None:
    """Split ``<key>_<asc|desc>`` into ``(key, descending)``.

    Returns None for anything else.
    """
    if not sort_by or "_" not in sort_by:
        return None
    key, _, direction = sort_by.rpartition("_")
    if not key or direction not in ("asc", "desc"):
        return None
    return key, direction == "desc"


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _key_function(sort_field: SortField) -> Callable[[Record], Any]:
    name = sort_field.field
    if sort_field.kind is SortKind.NUMBER:
        return lambda record: coerce_amount(record.get(name))
    if sort_field.kind is SortKind.DATE:
        return lambda record: parse_instant(record.get(name))
    return lambda record: (_text(record.get(name)).casefold(), _text(record.get(name)))


def matches_search(record: Record, term: str, search_fields: Sequence[str]) -> bool:
    """True if the lower-cased term occurs in any search field."""
    for name in search_fields:
        value = record.get(name)
        if value is not None and term in str(value).lower():
            return True
    return False


def sort_records(
    records: list[Record], sort_by: str, schema: RecordSchema
) -> list[Record]:
    """Sort by the comparator ``sort_by`` selects; unknown keys keep order."""
    parsed = parse_sort_key(sort_by)
    if parsed is None:
        return records
    key, descending = parsed
    sort_field: Optional[SortField] = schema.sort_fields.get(key)
    if sort_field is None:
        return records
    # sorted() is stable for reverse=True as well
    return sorted(records, key=_key_function(sort_field), reverse=descending)


def apply_filters_and_sort(
    records: Sequence[Record], filters: FilterCriteria, schema: RecordSchema
) -> DerivedView:
    """Derive the visible records and their total.

    Args:
        records: Canonical records (not modified)
        filters: Active filter criteria
        schema: Collection schema naming search, filter and sort fields

    Returns:
        DerivedView with the filtered, sorted records and their amount total
    """
    data = list(records)

    term = filters.search_term.strip().lower()
    if term:
        data = [record for record in data if matches_search(record, term, schema.search_fields)]

    for key, value in filters.active_filters().items():
        name = schema.filter_field(key)
        data = [record for record in data if _text(record.get(name)) == value]

    data = sort_records(data, filters.sort_by, schema)

    return DerivedView(visible=tuple(data), total=calculate_total(data))


def collect_facets(records: Iterable[Record], schema: RecordSchema) -> dict[str, tuple[str, ...]]:
    """Distinct non-empty values per equality filter, in first-seen order."""
    facets: dict[str, dict[str, None]] = {key: {} for key in schema.filter_fields}
    for record in records:
        for key, name in schema.filter_fields.items():
            value = record.get(name)
            if value is not None and value != "":
                facets[key].setdefault(str(value), None)
    return {key: tuple(values) for key, values in facets.items()}
