"""Domain model entities for recordview.

These are pure data classes shared by the container, the view pipeline and
the stores. Records are built once at the store boundary so that internal
logic can rely on a normalized shape.
"""

from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional, Union

RecordId = Union[int, str]

SEARCH_TERM_KEYS = ("search_term", "searchTerm")
SORT_BY_KEYS = ("sort_by", "sortBy")
LINE_TOTAL = "line_total"


def same_id(left: Any, right: Any) -> bool:
    """Compare record ids the way REST routes do, by string form."""
    if left is None or right is None:
        return False
    return str(left) == str(right)


@dataclass(frozen=True)
class Record:
    """A store record with its id, amount and quantity normalized.

    ``amount`` is read from the schema's money field (``amount_field``).
    ``quantity`` is set only for collections with a quantity field; the
    record's ``line_total`` is then ``amount * quantity``.
    """

    id: RecordId
    amount: Decimal = Decimal(0)
    fields: dict[str, Any] = field(default_factory=dict)
    amount_field: str = "amount"
    quantity: Optional[Decimal] = None

    def __hash__(self) -> int:
        # fields is a dict; equal records always share id and amount
        return hash((str(self.id), self.amount))

    @property
    def line_total(self) -> Decimal:
        if self.quantity is None:
            return self.amount
        return self.amount * self.quantity

    def get(self, name: str, default: Any = None) -> Any:
        """Read ``id``, the amount field, ``line_total`` or any passthrough field."""
        if name == "id":
            return self.id
        if name == self.amount_field:
            return self.amount
        if name == LINE_TOTAL:
            return self.line_total
        return self.fields.get(name, default)

    def to_payload(self) -> dict[str, Any]:
        """Return the record as a plain wire dict."""
        payload = dict(self.fields)
        payload["id"] = self.id
        payload[self.amount_field] = self.amount
        return payload


class SortKind(Enum):
    """How a sort key compares field values."""

    STRING = "string"
    DATE = "date"
    NUMBER = "number"


@dataclass(frozen=True)
class SortField:
    """Record field addressed by a sort key prefix."""

    field: str
    kind: SortKind


@dataclass(frozen=True)
class RecordSchema:
    """Describes one collection and how its view is filtered and sorted."""

    name: str
    item_name: str
    search_fields: tuple[str, ...] = ()
    filter_fields: Mapping[str, str] = field(default_factory=dict)
    sort_fields: Mapping[str, SortField] = field(default_factory=dict)
    default_sort: str = "date_desc"
    scope_field: Optional[str] = None
    amount_field: str = "amount"
    quantity_field: Optional[str] = None

    def filter_field(self, key: str) -> str:
        """Record field an equality filter key applies to."""
        return self.filter_fields.get(key, key)

    def default_filters(self) -> "FilterCriteria":
        return FilterCriteria(
            search_term="",
            equality={key: "" for key in self.filter_fields},
            sort_by=self.default_sort,
        )


@dataclass(frozen=True)
class FilterCriteria:
    """Active search, equality filters and sort key."""

    search_term: str = ""
    equality: Mapping[str, str] = field(default_factory=dict)
    sort_by: str = "date_desc"

    def merge(self, partial: Optional[Mapping[str, Any]] = None) -> "FilterCriteria":
        """Shallow-merge ``partial`` into a new criteria object.

        ``search_term``/``searchTerm`` and ``sort_by``/``sortBy`` set those
        attributes; any other key sets an equality filter, where an empty
        value clears it.
        """
        if not partial:
            return self
        search_term = self.search_term
        sort_by = self.sort_by
        equality = dict(self.equality)
        for key, value in partial.items():
            text = "" if value is None else str(value)
            if key in SEARCH_TERM_KEYS:
                search_term = text
            elif key in SORT_BY_KEYS:
                sort_by = text
            else:
                equality[key] = text
        return replace(self, search_term=search_term, sort_by=sort_by, equality=equality)

    def active_filters(self) -> dict[str, str]:
        """Equality filters that currently restrict the view."""
        return {key: value for key, value in self.equality.items() if value != ""}

    def as_dict(self) -> dict[str, str]:
        return {"search_term": self.search_term, **self.equality, "sort_by": self.sort_by}


@dataclass(frozen=True)
class DerivedView:
    """Filtered, sorted and aggregated projection of the canonical records."""

    visible: tuple[Record, ...]
    total: Decimal


@dataclass(frozen=True)
class ContainerState:
    """Read-only snapshot of the container exposed to the view layer."""

    visible: tuple[Record, ...]
    total: Decimal
    grand_total: Decimal
    is_loading: bool
    error: Optional[str]
    selected: Optional[Record]
    filters: FilterCriteria
    version: int
    pending_mutations: int
    facets: Mapping[str, tuple[str, ...]]
