"""Mapper functions to convert between stored rows and wire records.

The JSON column holds every field except ``id``; the row's primary key is
the record id.
"""

import copy
from typing import Any, Mapping

from recordview.store.base import to_json_payload
from recordview.store.models import StoredRecord


def row_to_record(row: StoredRecord) -> dict[str, Any]:
    """Convert a StoredRecord row into a wire record dict."""
    record = copy.deepcopy(row.data or {})
    record["id"] = row.id
    return record


def fields_to_data(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Convert record fields into the JSON column value, dropping ``id``."""
    return to_json_payload({key: value for key, value in fields.items() if key != "id"})
