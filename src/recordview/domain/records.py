"""Normalization of raw store records into domain Records."""

from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional

from recordview.domain.entities import Record, RecordSchema
from recordview.domain.errors import StoreError, invalid_record
from recordview.utils.amount_parser import coerce_amount


def normalize_record(raw: Any, schema: Optional[RecordSchema] = None) -> Record:
    """Build a Record from a raw store mapping.

    Args:
        raw: Mapping returned by a record store
        schema: Collection schema naming the amount and quantity fields;
            without one the amount is read from ``amount``

    Returns:
        Record with the amount coerced to Decimal (missing or invalid → 0)

    Raises:
        StoreError: If ``raw`` is not a mapping or has no ``id``
    """
    if isinstance(raw, Record):
        return raw
    if not isinstance(raw, Mapping):
        raise StoreError(invalid_record(f"expected an object, got {type(raw).__name__}"))
    record_id = raw.get("id")
    if record_id is None or record_id == "":
        raise StoreError(invalid_record("missing id"))
    if isinstance(record_id, bool) or not isinstance(record_id, (int, str)):
        raise StoreError(invalid_record(f"unsupported id {record_id!r}"))

    amount_field = schema.amount_field if schema is not None else "amount"
    quantity = None
    if schema is not None and schema.quantity_field is not None:
        raw_quantity = raw.get(schema.quantity_field)
        # a line without a quantity counts once
        quantity = Decimal(1) if raw_quantity in (None, "") else coerce_amount(raw_quantity)

    fields = {key: value for key, value in raw.items() if key not in ("id", amount_field)}
    return Record(
        id=record_id,
        amount=coerce_amount(raw.get(amount_field)),
        fields=fields,
        amount_field=amount_field,
        quantity=quantity,
    )


def normalize_records(raw_records: Any, schema: Optional[RecordSchema] = None) -> list[Record]:
    """Normalize a list response, collapsing duplicate ids.

    A later duplicate replaces the earlier one in its original position so
    the result never holds two records with the same id.
    """
    if not isinstance(raw_records, Iterable) or isinstance(raw_records, (str, bytes, Mapping)):
        raise StoreError(invalid_record("expected a list of records"))
    records: list[Record] = []
    positions: dict[str, int] = {}
    for raw in raw_records:
        record = normalize_record(raw, schema)
        key = str(record.id)
        if key in positions:
            records[positions[key]] = record
        else:
            positions[key] = len(records)
            records.append(record)
    return records


def outgoing_fields(
    fields: Mapping[str, Any],
    scope_field: str | None = None,
    scope: Any = None,
) -> dict[str, Any]:
    """Prepare caller fields for a create/update call.

    The client never chooses ids, so any ``id`` is dropped. When the
    collection is scoped the scope field is stamped with the session scope.
    """
    if isinstance(fields, Record):
        fields = fields.to_payload()
    payload = {key: value for key, value in fields.items() if key != "id"}
    if scope_field is not None and scope is not None:
        payload[scope_field] = scope
    return payload
