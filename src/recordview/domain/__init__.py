"""Domain layer for recordview.

The container lives in ``recordview.domain.container``; it is not imported
here because it depends on the store package, which itself imports the
entities below.
"""

from recordview.domain.entities import (
    ContainerState,
    DerivedView,
    FilterCriteria,
    Record,
    RecordSchema,
    SortField,
    SortKind,
)
from recordview.domain.errors import (
    ContainerError,
    DomainError,
    LoadError,
    MutationError,
    NotFoundError,
    RecordNotFoundError,
    ScopeError,
    ScopeMismatchError,
    StoreError,
    ValidationError,
)

__all__ = [
    "ContainerState",
    "DerivedView",
    "FilterCriteria",
    "Record",
    "RecordSchema",
    "SortField",
    "SortKind",
    "ContainerError",
    "DomainError",
    "LoadError",
    "MutationError",
    "NotFoundError",
    "RecordNotFoundError",
    "ScopeError",
    "ScopeMismatchError",
    "StoreError",
    "ValidationError",
]
