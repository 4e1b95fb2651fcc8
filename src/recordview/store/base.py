"""Abstract record store interface."""

from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping, Optional

from recordview.domain.entities import RecordId


class RecordStore(ABC):
    """Abstract CRUD data service for one record collection.

    Data operations are coroutines; ``connect``/``disconnect`` manage the
    underlying resources synchronously.
    """

    def connect(self) -> None:
        """Acquire store resources."""
        pass

    def disconnect(self) -> None:
        """Release store resources."""
        pass

    @abstractmethod
    async def list_records(self, params: Optional[Mapping[str, Any]] = None) -> list[dict]:
        """List records, keeping those whose fields equal every param."""
        pass

    @abstractmethod
    async def create_record(self, fields: Mapping[str, Any]) -> dict:
        """Create a record. Returns the stored record with its assigned id."""
        pass

    @abstractmethod
    async def update_record(self, record_id: RecordId, fields: Mapping[str, Any]) -> dict:
        """Replace a record. Returns the stored record."""
        pass

    @abstractmethod
    async def delete_record(self, record_id: RecordId) -> None:
        """Delete a record."""
        pass

    @abstractmethod
    async def get_record(self, record_id: RecordId) -> dict:
        """Get one record by id."""
        pass


def to_json_value(value: Any) -> Any:
    """Convert a field value into something ``json`` can serialize."""
    if isinstance(value, Decimal):
        if value == value.to_integral_value():
            return int(value)
        return float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {str(key): to_json_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_value(item) for item in value]
    return value


def to_json_payload(fields: Mapping[str, Any]) -> dict[str, Any]:
    """JSON-ready copy of a record payload."""
    return {str(key): to_json_value(value) for key, value in fields.items()}


def matches_params(record: Mapping[str, Any], params: Optional[Mapping[str, Any]]) -> bool:
    """json-server equality semantics: every param equals the field as text."""
    if not params:
        return True
    for key, expected in params.items():
        if expected is None:
            continue
        actual = record.get(key)
        if actual is None or str(actual) != str(expected):
            return False
    return True
