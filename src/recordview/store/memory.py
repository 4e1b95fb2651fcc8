"""In-memory record store."""

import copy
from typing import Any, Mapping, Optional

from recordview.domain.entities import RecordId
from recordview.domain.errors import RecordNotFoundError, record_not_found
from recordview.store.base import RecordStore, matches_params, to_json_payload


class InMemoryRecordStore(RecordStore):
    """Dict-backed store assigning sequential integer ids."""

    def __init__(self, collection: str = "records", records: Optional[list[Mapping[str, Any]]] = None):
        """Initialize in-memory store.

        Args:
            collection: Collection name used in error messages
            records: Optional seed records; each must carry an ``id``
        """
        self.collection = collection
        self._records: dict[str, dict] = {}
        self._next_id = 1
        for raw in records or []:
            self._insert(dict(raw))

    def _insert(self, record: dict) -> dict:
        record = to_json_payload(record)
        if record.get("id") is None:
            record["id"] = self._allocate_id()
        self._advance_past(record["id"])
        self._records[str(record["id"])] = record
        return record

    def _advance_past(self, record_id: RecordId) -> None:
        # json-server data often carries numeric ids as strings
        if isinstance(record_id, str) and record_id.isdigit():
            record_id = int(record_id)
        if isinstance(record_id, int) and not isinstance(record_id, bool):
            self._next_id = max(self._next_id, record_id + 1)

    def _allocate_id(self) -> int:
        while str(self._next_id) in self._records:
            self._next_id += 1
        return self._next_id

    def _lookup(self, record_id: RecordId) -> dict:
        try:
            return self._records[str(record_id)]
        except KeyError:
            raise RecordNotFoundError(record_not_found("record", record_id)) from None

    async def list_records(self, params: Optional[Mapping[str, Any]] = None) -> list[dict]:
        return [
            copy.deepcopy(record)
            for record in self._records.values()
            if matches_params(record, params)
        ]

    async def create_record(self, fields: Mapping[str, Any]) -> dict:
        record = {key: value for key, value in fields.items() if key != "id"}
        record["id"] = self._allocate_id()
        return copy.deepcopy(self._insert(record))

    async def update_record(self, record_id: RecordId, fields: Mapping[str, Any]) -> dict:
        existing = self._lookup(record_id)
        record = to_json_payload({key: value for key, value in fields.items() if key != "id"})
        record["id"] = existing["id"]
        self._records[str(record_id)] = record
        return copy.deepcopy(record)

    async def delete_record(self, record_id: RecordId) -> None:
        self._lookup(record_id)
        del self._records[str(record_id)]

    async def get_record(self, record_id: RecordId) -> dict:
        return copy.deepcopy(self._lookup(record_id))
