"""Actions accepted by ``EntityStateContainer.dispatch``.

The union is closed: ``Action`` lists every operation the container
supports and ``dispatch`` matches on each of them.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from recordview.domain.entities import Record, RecordId


@dataclass(frozen=True)
class Load:
    pass


@dataclass(frozen=True)
class Create:
    fields: Mapping[str, Any]


@dataclass(frozen=True)
class Update:
    record_id: RecordId
    fields: Mapping[str, Any]


@dataclass(frozen=True)
class Delete:
    record_id: RecordId


@dataclass(frozen=True)
class SetFilter:
    changes: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Select:
    target: Union[Record, RecordId]


@dataclass(frozen=True)
class ClearSelection:
    pass


Action = Union[Load, Create, Update, Delete, SetFilter, Select, ClearSelection]
